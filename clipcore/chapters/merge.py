"""Stitching of per-chunk anchors into one position-ordered topic list."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from clipcore.chapters.models import ChapterTopic, ChunkAnchors
from clipcore.chapters.prompts import find_anchor
from clipcore.pipeline_config import ChapterConfig, MergeMode
from clipcore.text import calculate_similarity, normalize_for_comparison, overlap_ratio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionedTopic:
    """A topic with its character position in the full transcript."""

    topic: ChapterTopic
    position: int
    order: int


def resolve_position(topic: ChapterTopic, transcript: str, chunk_offset: int) -> int:
    """Locate *topic* in the full transcript.

    Tries the anchor text, then any keyword (from the chunk onwards first),
    then the title, and finally falls back to the chunk offset.
    """
    position = find_anchor(transcript, topic.anchor_text)
    if position >= 0:
        return position

    lowered = transcript.lower()
    for keyword in topic.keywords:
        key = keyword.lower()
        position = lowered.find(key, chunk_offset)
        if position < 0:
            position = lowered.find(key)
        if position >= 0:
            return position

    if topic.title:
        position = lowered.find(topic.title.lower())
        if position >= 0:
            return position

    return chunk_offset


def _is_duplicate(
    candidate: PositionedTopic,
    kept: PositionedTopic,
    mode: MergeMode,
    config: ChapterConfig,
) -> bool:
    if abs(candidate.position - kept.position) > config.merge_proximity:
        return False

    if candidate.topic.anchor_key and candidate.topic.anchor_key == kept.topic.anchor_key:
        return True

    title_a = normalize_for_comparison(candidate.topic.title)
    title_b = normalize_for_comparison(kept.topic.title)

    if mode is MergeMode.RELAXED:
        return bool(title_a) and title_a == title_b

    if title_a and title_b and calculate_similarity(title_a, title_b) >= config.title_similarity_threshold:
        return True

    keywords_a = {k.casefold() for k in candidate.topic.keywords}
    keywords_b = {k.casefold() for k in kept.topic.keywords}
    return overlap_ratio(keywords_a, keywords_b) >= config.keyword_overlap_threshold


def merge_pass(
    positioned: Sequence[PositionedTopic],
    mode: MergeMode,
    config: ChapterConfig,
) -> list[PositionedTopic]:
    """Walk position-ordered topics and drop duplicates of kept ones."""
    kept: list[PositionedTopic] = []
    for candidate in positioned:
        if any(_is_duplicate(candidate, existing, mode, config) for existing in kept):
            continue
        kept.append(candidate)
    return kept


def desired_minimum(transcript_length: int, capacity: int, config: ChapterConfig) -> int:
    """Length-scaled number of topics worth keeping, clamped to capacity."""
    if capacity <= 0:
        return 0
    low = min(config.desired_topics_floor, capacity)
    return max(low, min(transcript_length // config.chars_per_topic, capacity))


def merge_topics(
    chunk_results: Sequence[ChunkAnchors],
    transcript: str,
    config: ChapterConfig | None = None,
    capacity: int | None = None,
) -> list[ChapterTopic]:
    """Merge verified anchors from all chunks into one ordered list.

    Args:
        chunk_results: Per-chunk topics tagged with the chunk offset.
        transcript: The full (normalized) transcript the chunks came from.
        config: Proximity and similarity thresholds.
        capacity: Upper bound on how many topics the extraction could have
            produced; defaults to the number of candidates.

    Returns:
        Deduplicated topics in ascending transcript position.
    """
    config = config or ChapterConfig()

    positioned: list[PositionedTopic] = []
    for chunk in chunk_results:
        for topic in chunk.topics:
            positioned.append(
                PositionedTopic(
                    topic=topic,
                    position=resolve_position(topic, transcript, chunk.start_offset),
                    order=len(positioned),
                )
            )
    if not positioned:
        return []

    positioned.sort(key=lambda p: (p.position, p.order))

    if capacity is None:
        capacity = len(positioned)
    desired = desired_minimum(len(transcript), capacity, config)

    merged = merge_pass(positioned, MergeMode.AGGRESSIVE, config)
    mode = MergeMode.AGGRESSIVE
    if len(merged) < desired:
        merged = merge_pass(positioned, MergeMode.RELAXED, config)
        mode = MergeMode.RELAXED

    logger.info(
        "Merged %d anchors into %d topics (%s pass, desired %d)",
        len(positioned),
        len(merged),
        mode,
        desired,
    )
    return [p.topic for p in merged]
