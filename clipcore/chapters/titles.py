"""Second oracle round: human-readable titles for grounded anchors."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from clipcore.chapters.models import ChapterTopic
from clipcore.chapters.parsing import parse_title_pairs
from clipcore.chapters.prompts import build_title_prompt
from clipcore.oracle.base import TextOracle
from clipcore.pipeline_config import ChapterConfig
from clipcore.text import (
    calculate_similarity,
    clean_title_line,
    contains_session_id,
    normalize_for_comparison,
)

logger = logging.getLogger(__name__)

GENERIC_TITLES = frozenset(
    {
        # German
        "kapitel",
        "thema",
        "themen",
        "gliederung",
        "inhalt",
        "inhaltsverzeichnis",
        "abschnitt",
        "teil",
        "titel",
        "überschrift",
        # English
        "chapter",
        "chapters",
        "topic",
        "topics",
        "outline",
        "contents",
        "table of contents",
        "section",
        "part",
        "title",
        "heading",
    }
)

LEAKAGE_PHRASES = (
    "here is",
    "here are",
    "as requested",
    "hier ist",
    "hier sind",
    "wie gewünscht",
    "json",
    "anchor",
    "transcript",
    "transkript",
)

_TRAILING_NUMBER_RE = re.compile(r"\s+\d+$")


def is_generic_title(title: str) -> bool:
    """True for bare header words such as "Chapter 3" or "Themen"."""
    normalized = normalize_for_comparison(title)
    normalized = _TRAILING_NUMBER_RE.sub("", normalized)
    return normalized in GENERIC_TITLES


def contains_prompt_leakage(title: str) -> bool:
    """True when the title echoes prompt scaffolding instead of content."""
    if contains_session_id(title):
        return True
    padded = f" {normalize_for_comparison(title)} "
    return any(f" {phrase} " in padded for phrase in LEAKAGE_PHRASES)


def is_too_close_to_anchor(title: str, anchor: str, config: ChapterConfig) -> bool:
    """True when the title merely restates its anchor quote."""
    norm_title = normalize_for_comparison(title)
    norm_anchor = normalize_for_comparison(anchor)
    if not norm_title or not norm_anchor:
        return False
    if norm_title in norm_anchor:
        if len(norm_title) / len(norm_anchor) >= config.title_anchor_containment_ratio:
            return True
    return calculate_similarity(norm_title, norm_anchor) >= config.title_anchor_similarity


def is_valid_title(title: str | None, anchor: str, config: ChapterConfig | None = None) -> bool:
    """Check a cleaned title against length, genericity, leakage and anchor echo."""
    config = config or ChapterConfig()
    if not title:
        return False
    if not config.title_min_length <= len(title) <= config.title_max_length:
        return False
    if is_generic_title(title) or contains_prompt_leakage(title):
        return False
    return not is_too_close_to_anchor(title, anchor, config)


def _batches(items: Sequence[int], size: int) -> list[list[int]]:
    size = max(1, size)
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def _request_titles(
    batch: Sequence[ChapterTopic],
    transcript: str,
    oracle: TextOracle,
    config: ChapterConfig,
    strict: bool,
) -> dict[str, str]:
    prompt = build_title_prompt(
        batch,
        transcript,
        strict=strict,
        context_chars=config.title_context_chars,
        custom_prompt=config.custom_prompt,
    )
    response = await oracle.complete(prompt)

    titles: dict[str, str] = {}
    for anchor, title in parse_title_pairs(response):
        key = normalize_for_comparison(anchor)
        if key and key not in titles:
            titles[key] = clean_title_line(title)
    return titles


async def resolve_titles(
    topics: Sequence[ChapterTopic],
    transcript: str,
    oracle: TextOracle,
    config: ChapterConfig | None = None,
) -> list[ChapterTopic]:
    """Give every topic a valid title, dropping those that never get one.

    Titles already present from the anchor round are kept when valid. The
    rest are requested in batches; whatever is still unresolved gets one
    retry round with the stricter prompt.

    Args:
        topics: Merged topics in transcript order.
        transcript: Full transcript used for title context.
        oracle: Text oracle for the title requests.
        config: Batch size and validity thresholds.

    Returns:
        Titled topics, in the input order.
    """
    config = config or ChapterConfig()
    resolved: dict[int, str] = {}

    for index, topic in enumerate(topics):
        title = clean_title_line(topic.title)
        if title and is_valid_title(title, topic.anchor_text, config):
            resolved[index] = title

    for strict in (False, True):
        pending = [i for i in range(len(topics)) if i not in resolved]
        if not pending:
            break
        if strict:
            logger.info("Retrying titles for %d topics with strict prompt", len(pending))

        for batch in _batches(pending, config.title_batch_size):
            titles = await _request_titles(
                [topics[i] for i in batch], transcript, oracle, config, strict
            )
            for index in batch:
                topic = topics[index]
                title = titles.get(topic.anchor_key)
                if title and is_valid_title(title, topic.anchor_text, config):
                    resolved[index] = title
                elif title:
                    logger.debug("Rejected title %r for anchor %r", title, topic.anchor_text)

    dropped = len(topics) - len(resolved)
    if dropped:
        logger.info("Dropped %d topics without a valid title", dropped)

    return [topic.with_title(resolved[i]) for i, topic in enumerate(topics) if i in resolved]
