from __future__ import annotations

from clipcore.config import Settings
from clipcore.oracle.anthropic_oracle import AnthropicOracle
from clipcore.oracle.base import TextOracle
from clipcore.oracle.null import NullOracle
from clipcore.pipeline_config import LlmMode


def build_oracle(settings: Settings) -> TextOracle:
    """Create the oracle selected by ``settings.llm_mode``."""
    if settings.llm_mode == LlmMode.ANTHROPIC:
        return AnthropicOracle(
            api_key=settings.anthropic_api_key,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    return NullOracle()
