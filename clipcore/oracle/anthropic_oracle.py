"""Claude-backed oracle adapter."""

from __future__ import annotations

import logging

from anthropic import APIError, APITimeoutError, AsyncAnthropic
from anthropic.types import TextBlock

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You analyse video transcripts. Only use content that literally appears "
    "in the transcript you are given. Follow the requested output format exactly."
)


class AnthropicOracle:
    """Text oracle backed by the Anthropic Messages API.

    Upstream errors and timeouts are logged and reported as an empty
    response so callers can fall back; cancellation is not intercepted.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 2048,
        temperature: float = 0.3,
        timeout_seconds: float = 120.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout_seconds = timeout_seconds
        self._client: AsyncAnthropic | None = None

    @property
    def is_ready(self) -> bool:
        return self._client is not None

    def try_initialize(self) -> bool:
        if self._client is not None:
            return True
        if not self._api_key:
            logger.warning("ANTHROPIC_API_KEY not set; oracle unavailable")
            return False
        self._client = AsyncAnthropic(api_key=self._api_key, timeout=self._timeout_seconds)
        return True

    async def complete(self, prompt: str) -> str:
        if not prompt.strip():
            return ""
        if not self.try_initialize() or self._client is None:
            return ""

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except APITimeoutError:
            logger.warning("Oracle request timed out after %.0fs", self._timeout_seconds)
            return ""
        except APIError as exc:
            logger.warning("Oracle request failed: %s", exc)
            return ""

        text_parts = [block.text for block in response.content if isinstance(block, TextBlock)]
        if not text_parts:
            logger.warning("Oracle returned no text content")
            return ""
        return "".join(text_parts).strip()
