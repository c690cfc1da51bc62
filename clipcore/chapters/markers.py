"""Placement of chapter topics on the media timeline."""

from __future__ import annotations

import logging
from bisect import bisect_right
from collections.abc import Sequence

from clipcore.chapters.models import ChapterMarker, ChapterTopic
from clipcore.chapters.prompts import find_anchor
from clipcore.segments.models import TimedSegment
from clipcore.text import collapse_whitespace

logger = logging.getLogger(__name__)


def _build_offset_index(segments: Sequence[TimedSegment]) -> tuple[str, list[int], list[TimedSegment]]:
    text_parts: list[str] = []
    offsets: list[int] = []
    indexed: list[TimedSegment] = []
    position = 0
    for segment in sorted(segments, key=lambda s: s.start):
        part = collapse_whitespace(segment.text)
        if not part:
            continue
        offsets.append(position)
        indexed.append(segment)
        text_parts.append(part)
        position += len(part) + 1
    return " ".join(text_parts), offsets, indexed


def locate_chapter_markers(
    topics: Sequence[ChapterTopic],
    segments: Sequence[TimedSegment],
    min_spacing: float = 10.0,
) -> list[ChapterMarker]:
    """Map titled topics to segment start times.

    The first marker always starts at 0 so the chapter list covers the whole
    video. Markers closer than *min_spacing* seconds to the previous kept one
    are dropped; topics whose anchor cannot be found are skipped.
    """
    text, offsets, indexed = _build_offset_index(segments)
    if not text:
        return []

    located: list[tuple[float, ChapterTopic]] = []
    for topic in topics:
        if not topic.title:
            continue
        position = find_anchor(text, topic.anchor_text)
        if position < 0:
            logger.debug("Anchor %r not found in segments", topic.anchor_text)
            continue
        segment = indexed[bisect_right(offsets, position) - 1]
        located.append((segment.start, topic))

    located.sort(key=lambda item: item[0])

    markers: list[ChapterMarker] = []
    for start, topic in located:
        if not markers:
            start = 0.0
        elif start - markers[-1].start < min_spacing:
            continue
        markers.append(ChapterMarker(start=start, title=topic.title, anchor_text=topic.anchor_text))
    return markers


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``MM:SS`` or ``H:MM:SS``."""
    total = int(max(0.0, seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_chapter_list(markers: Sequence[ChapterMarker]) -> str:
    """Render markers as a chapter list for a video description."""
    if not markers:
        return ""
    long_form = markers[-1].start >= 3600
    lines = []
    for marker in markers:
        stamp = format_timestamp(marker.start)
        if long_form and stamp.count(":") == 1:
            stamp = f"0:{stamp}"
        lines.append(f"{stamp} {marker.title}")
    return "\n".join(lines)
