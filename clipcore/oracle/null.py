from __future__ import annotations

NOT_CONFIGURED_RESPONSE = "[oracle not configured]"


class NullOracle:
    """Oracle used when no language model is configured. Never ready."""

    @property
    def is_ready(self) -> bool:
        return False

    def try_initialize(self) -> bool:
        return False

    async def complete(self, prompt: str) -> str:
        return NOT_CONFIGURED_RESPONSE
