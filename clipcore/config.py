from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from clipcore.pipeline_config import ChapterConfig, ContentConfig, LlmMode


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # Oracle
    anthropic_api_key: str = ""
    llm_mode: LlmMode = LlmMode.OFF
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 2048
    llm_temperature: float = 0.3
    llm_timeout_seconds: float = 120.0

    # Chapter extraction
    chapter_chunk_size: int = Field(default=6000, gt=0)
    chapter_chunk_overlap: int = Field(default=400, ge=0)
    chapter_custom_prompt: str = ""

    # Title, description and tag suggestions
    title_custom_prompt: str = ""
    description_custom_prompt: str = ""
    tags_custom_prompt: str = ""

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @model_validator(mode="after")
    def _check_chunk_overlap(self) -> Settings:
        # Overlap must leave each chunk at least half new text
        if self.chapter_chunk_overlap >= self.chapter_chunk_size // 2:
            raise ValueError(
                "chapter_chunk_overlap must be less than half of chapter_chunk_size"
            )
        return self

    def chapter_config(self) -> ChapterConfig:
        """Build the chapter tuning config from the user-facing settings."""
        return ChapterConfig(
            chunk_size=self.chapter_chunk_size,
            chunk_overlap=self.chapter_chunk_overlap,
            custom_prompt=self.chapter_custom_prompt or None,
        )

    def content_config(self) -> ContentConfig:
        """Build the title/description/tag config from the user-facing settings."""
        return ContentConfig(
            title_custom_prompt=self.title_custom_prompt or None,
            description_custom_prompt=self.description_custom_prompt or None,
            tags_custom_prompt=self.tags_custom_prompt or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
