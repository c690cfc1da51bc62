"""Sliding-window generation of highlight candidates.

The timeline is scanned with a cursor that advances by a fixed step. At each
cursor position the following segments are accumulated into a window until
the maximum duration is reached or, once the minimum duration is met, a
speech pause closes the window. The resulting sequence is highly redundant
and is deduplicated by time overlap.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from clipcore.pipeline_config import WindowConfig
from clipcore.segments.models import CandidateWindow, TimedSegment

logger = logging.getLogger(__name__)

_DEFAULTS = WindowConfig()


def _find_start_index(segments: Sequence[TimedSegment], window_start: float) -> int:
    for i, segment in enumerate(segments):
        if segment.end > window_start:
            return i
    return -1


def _join_text(segments: Sequence[TimedSegment]) -> str:
    return " ".join(s.text.strip() for s in segments if s.text and s.text.strip())


def slide_windows(
    segments: Sequence[TimedSegment],
    min_duration: float = _DEFAULTS.min_duration,
    max_duration: float = _DEFAULTS.max_duration,
    step: float = _DEFAULTS.step,
    pause_threshold: float = _DEFAULTS.pause_threshold,
) -> list[CandidateWindow]:
    """Produce the raw, overlapping window sequence (no deduplication).

    Returns an empty list for empty input or non-positive / inverted bounds.
    """
    if not segments:
        return []
    if min_duration <= 0 or max_duration <= 0 or max_duration < min_duration or step <= 0:
        return []

    ordered = sorted((s for s in segments if s.end >= s.start), key=lambda s: s.start)
    if not ordered:
        return []

    windows: list[CandidateWindow] = []
    total_duration = ordered[-1].end
    window_start = 0.0

    while window_start < total_duration:
        start_index = _find_start_index(ordered, window_start)
        if start_index < 0:
            break

        window_segments: list[TimedSegment] = []
        first_index = -1
        last_index = -1
        actual_start: float | None = None
        actual_end = 0.0

        for index in range(start_index, len(ordered)):
            segment = ordered[index]
            if segment.end <= window_start:
                continue

            if actual_start is None:
                actual_start = segment.start
                first_index = index

            if window_segments:
                gap = segment.start - actual_end
                if gap > pause_threshold and actual_end - actual_start >= min_duration:
                    break

            window_segments.append(segment)
            last_index = index
            actual_end = max(actual_end, segment.end)

            if actual_end - actual_start >= max_duration:
                break

        if window_segments and actual_start is not None:
            duration = actual_end - actual_start
            if min_duration <= duration <= max_duration:
                windows.append(
                    CandidateWindow(
                        index=len(windows),
                        start=actual_start,
                        end=actual_end,
                        text=_join_text(window_segments),
                        segments=tuple(window_segments),
                        start_segment_index=first_index,
                        end_segment_index=last_index,
                    )
                )

        window_start += step

    return windows


def _overlap(a: CandidateWindow, b: CandidateWindow) -> float:
    return min(a.end, b.end) - max(a.start, b.start)


def deduplicate_windows(
    windows: Sequence[CandidateWindow],
    max_overlap_ratio: float = _DEFAULTS.duplicate_overlap_ratio,
) -> list[CandidateWindow]:
    """Drop windows that mostly repeat an earlier kept window.

    A window is a duplicate when its overlap with a kept window, divided by
    the shorter of the two durations, exceeds *max_overlap_ratio*. Indices
    are reassigned ``0..N-1`` in the final order.
    """
    kept: list[CandidateWindow] = []
    for window in sorted(windows, key=lambda w: (w.start, w.duration)):
        is_duplicate = False
        for existing in kept:
            overlap = _overlap(existing, window)
            if overlap <= 0:
                continue
            shorter = min(existing.duration, window.duration)
            if shorter <= 0 or overlap / shorter > max_overlap_ratio:
                is_duplicate = True
                break
        if not is_duplicate:
            kept.append(window)

    return [replace(w, index=i) for i, w in enumerate(kept)]


def generate_windows(
    segments: Sequence[TimedSegment],
    min_duration: float = _DEFAULTS.min_duration,
    max_duration: float = _DEFAULTS.max_duration,
    step: float = _DEFAULTS.step,
    pause_threshold: float = _DEFAULTS.pause_threshold,
) -> list[CandidateWindow]:
    """Generate deduplicated highlight candidate windows from timed segments.

    Args:
        segments: Transcript segments; need not be sorted.
        min_duration: Minimum window length in seconds.
        max_duration: Maximum window length in seconds.
        step: Cursor advance between window starts in seconds.
        pause_threshold: Longest silence tolerated inside a window once the
            minimum duration has been reached.

    Returns:
        Windows ordered by start, each within ``[min_duration, max_duration]``.
    """
    raw = slide_windows(segments, min_duration, max_duration, step, pause_threshold)
    windows = deduplicate_windows(raw)
    logger.debug("Generated %d windows (%d before dedup)", len(windows), len(raw))
    return windows
