"""Data models for chapter extraction results."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from clipcore.text import normalize_for_comparison


class ChapterSource(StrEnum):
    """Where a chapter suggestion came from."""

    ORACLE = "oracle"
    FALLBACK = "fallback"
    NONE = "none"


@dataclass(frozen=True)
class ChapterTopic:
    """A chapter boundary grounded on a verbatim transcript quote."""

    anchor_text: str
    keywords: tuple[str, ...] = ()
    title: str | None = None

    @property
    def anchor_key(self) -> str:
        return normalize_for_comparison(self.anchor_text)

    def with_title(self, title: str | None) -> ChapterTopic:
        return replace(self, title=title)

    def to_dict(self) -> dict[str, Any]:
        return {
            "anchor_text": self.anchor_text,
            "keywords": list(self.keywords),
            "title": self.title,
        }


@dataclass(frozen=True)
class ChunkAnchors:
    """Verified topics from one chunk, tagged with the chunk's offset."""

    start_offset: int
    topics: tuple[ChapterTopic, ...] = ()


@dataclass(frozen=True)
class ChapterMarker:
    """A titled chapter placed on the media timeline (seconds)."""

    start: float
    title: str
    anchor_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "title": self.title, "anchor_text": self.anchor_text}


@dataclass
class ChapterSuggestion:
    """Result of a chapter suggestion request."""

    source: ChapterSource
    topics: list[ChapterTopic] = field(default_factory=list)
    markers: list[ChapterMarker] = field(default_factory=list)
