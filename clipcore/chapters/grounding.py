"""Verification of oracle anchors against the literal source transcript.

Every proposed anchor must occur in the transcript after normalization
(lowercase, letters/digits only, collapsed whitespace). Anchors that never
occur are dropped outright. The rest are sorted into three acceptance tiers
of decreasing strictness, and the largest tier that meets the expected
yield wins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from clipcore.chapters.models import ChapterTopic
from clipcore.chapters.parsing import AnchorCandidate, parse_anchor_candidates
from clipcore.pipeline_config import AcceptanceTier, ChapterConfig
from clipcore.text import normalize_for_comparison

logger = logging.getLogger(__name__)


def count_occurrences(normalized_transcript: str, normalized_anchor: str) -> int:
    """Count (possibly overlapping) substring occurrences of an anchor."""
    if not normalized_anchor or not normalized_transcript:
        return 0
    count = 0
    position = normalized_transcript.find(normalized_anchor)
    while position >= 0:
        count += 1
        position = normalized_transcript.find(normalized_anchor, position + 1)
    return count


def clean_keywords(keywords: Sequence[str], config: ChapterConfig) -> tuple[str, ...]:
    """Trim, length-filter and deduplicate keywords (case-insensitive, ordered)."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for keyword in keywords:
        keyword = keyword.strip().strip("#").strip()
        if len(keyword) < config.min_keyword_length:
            continue
        key = keyword.casefold()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(keyword)
        if len(cleaned) >= config.max_keywords:
            break
    return tuple(cleaned)


def _select_tier(
    buckets: dict[str, list[ChapterTopic]],
    tiers: Sequence[AcceptanceTier],
    min_expected: int,
) -> tuple[str, list[ChapterTopic]]:
    ordered = [(tier.name, buckets[tier.name]) for tier in tiers]
    qualifying = [entry for entry in ordered if len(entry[1]) >= min_expected]
    pool = qualifying or ordered
    # max() keeps the first of equal sizes, i.e. the stricter tier
    return max(pool, key=lambda entry: len(entry[1]))


def verify_candidates(
    candidates: Sequence[AnchorCandidate],
    transcript: str,
    min_expected: int,
    config: ChapterConfig | None = None,
) -> list[ChapterTopic]:
    """Ground *candidates* in *transcript* and return the selected tier."""
    config = config or ChapterConfig()
    if not candidates:
        return []

    normalized_transcript = normalize_for_comparison(transcript)
    if not normalized_transcript:
        return []

    buckets: dict[str, list[ChapterTopic]] = {tier.name: [] for tier in config.tiers}
    seen: dict[str, set[str]] = {tier.name: set() for tier in config.tiers}
    rejected = 0

    for candidate in candidates:
        normalized_anchor = normalize_for_comparison(candidate.anchor)
        occurrences = count_occurrences(normalized_transcript, normalized_anchor)
        if occurrences == 0:
            rejected += 1
            logger.debug("Dropping ungrounded anchor %r", candidate.anchor)
            continue

        word_count = len(normalized_anchor.split())
        topic = ChapterTopic(
            anchor_text=candidate.anchor,
            keywords=clean_keywords(candidate.keywords, config),
            title=candidate.title,
        )
        for tier in config.tiers:
            if tier.accepts(word_count, occurrences) and normalized_anchor not in seen[tier.name]:
                seen[tier.name].add(normalized_anchor)
                buckets[tier.name].append(topic)

    tier_name, selected = _select_tier(buckets, config.tiers, min_expected)
    logger.debug(
        "Grounded %d/%d anchors (tier=%s, ungrounded=%d)",
        len(selected),
        len(candidates),
        tier_name,
        rejected,
    )
    return selected


def parse_and_verify(
    oracle_response: str | None,
    transcript: str,
    min_expected: int,
    config: ChapterConfig | None = None,
) -> list[ChapterTopic]:
    """Parse an anchor response and keep only anchors grounded in *transcript*.

    Args:
        oracle_response: Raw oracle output (JSON-ish, possibly garbage).
        transcript: The text the oracle was shown.
        min_expected: Yield below which a looser tier is preferred.
        config: Tier definitions and keyword limits.

    Returns:
        Grounded topics in emission order; empty on unusable responses.
    """
    return verify_candidates(
        parse_anchor_candidates(oracle_response), transcript, min_expected, config
    )
