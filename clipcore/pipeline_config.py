"""Pipeline configuration: strategy enums and tuning dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class LlmMode(StrEnum):
    """Which oracle backend drives chapter extraction."""

    OFF = "off"
    ANTHROPIC = "anthropic"


class MergeMode(StrEnum):
    """Duplicate rules used when stitching anchors from several chunks."""

    AGGRESSIVE = "aggressive"
    RELAXED = "relaxed"


@dataclass(frozen=True)
class AcceptanceTier:
    """Word-count and frequency bounds a grounded anchor must satisfy."""

    name: str
    min_words: int
    max_words: int
    max_occurrences: int

    def accepts(self, word_count: int, occurrences: int) -> bool:
        return (
            self.min_words <= word_count <= self.max_words
            and 0 < occurrences <= self.max_occurrences
        )


STRICT_TIER = AcceptanceTier("strict", min_words=3, max_words=14, max_occurrences=6)
RELAXED_TIER = AcceptanceTier("relaxed", min_words=2, max_words=16, max_occurrences=10)
LOOSE_TIER = AcceptanceTier("loose", min_words=2, max_words=20, max_occurrences=14)


@dataclass(frozen=True)
class WindowConfig:
    """Bounds for highlight candidate windows (seconds)."""

    min_duration: float = 15.0
    max_duration: float = 90.0
    step: float = 10.0
    pause_threshold: float = 2.0
    duplicate_overlap_ratio: float = 0.8


@dataclass(frozen=True)
class ChapterConfig:
    """Immutable tuning knobs for oracle-driven chapter extraction.

    The similarity cutoffs and the merge proximity are empirically chosen
    values; they are kept configurable rather than derived.
    """

    # Chunking
    chunk_size: int = 6000
    chunk_overlap: int = 400
    min_chunk_size: int = 1500
    min_transcript_chars: int = 50

    # Anchor extraction
    chars_per_topic: int = 1500
    min_topics_per_chunk: int = 2
    max_topics_per_chunk: int = 8
    max_keywords: int = 12
    min_keyword_length: int = 3
    tiers: tuple[AcceptanceTier, ...] = field(
        default=(STRICT_TIER, RELAXED_TIER, LOOSE_TIER)
    )

    # Merge
    merge_proximity_factor: int = 3
    merge_min_proximity: int = 800
    title_similarity_threshold: float = 0.78
    keyword_overlap_threshold: float = 0.6
    desired_topics_floor: int = 8

    # Title resolution
    title_batch_size: int = 6
    title_context_chars: int = 360
    title_min_length: int = 3
    title_max_length: int = 160
    title_anchor_containment_ratio: float = 0.7
    title_anchor_similarity: float = 0.9

    custom_prompt: str | None = None

    @property
    def merge_proximity(self) -> int:
        return max(self.chunk_overlap * self.merge_proximity_factor, self.merge_min_proximity)


@dataclass(frozen=True)
class ContentConfig:
    """Limits for video title, description and tag suggestions."""

    min_transcript_chars: int = 50
    title_transcript_chars: int = 1500
    description_transcript_chars: int = 4000
    tags_transcript_chars: int = 2000

    max_titles: int = 5
    title_min_length: int = 6
    title_max_length: int = 149
    min_description_length: int = 20
    max_tags: int = 25
    tag_max_length: int = 30

    title_custom_prompt: str | None = None
    description_custom_prompt: str | None = None
    tags_custom_prompt: str | None = None
