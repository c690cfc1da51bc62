"""Capability interface for the generative text oracle."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextOracle(Protocol):
    """A black-box text completion service.

    Implementations report failures as empty or garbled text rather than
    raising; callers must validate everything they get back. Cancelling the
    awaiting task cancels the request.
    """

    @property
    def is_ready(self) -> bool: ...

    def try_initialize(self) -> bool: ...

    async def complete(self, prompt: str) -> str: ...


def ensure_ready(oracle: TextOracle) -> bool:
    """Return True if *oracle* is ready, initializing it on first use."""
    if oracle.is_ready:
        return True
    return oracle.try_initialize()
