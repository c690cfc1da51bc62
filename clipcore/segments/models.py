"""Data models shared by the windowing and chunking stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TimedSegment:
    """A transcribed span of speech with timing (seconds)."""

    start: float
    end: float
    text: str
    speaker: str | None = None

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class CandidateWindow:
    """A run of contiguous segments that may contain a highlight."""

    index: int
    start: float
    end: float
    text: str
    segments: tuple[TimedSegment, ...] = field(default=(), repr=False)
    start_segment_index: int = 0
    end_segment_index: int = 0

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "start": self.start,
            "end": self.end,
            "duration": self.duration,
            "text": self.text,
            "start_segment_index": self.start_segment_index,
            "end_segment_index": self.end_segment_index,
        }


@dataclass(frozen=True)
class TranscriptChunk:
    """A slice of the transcript sent to the oracle in one request."""

    text: str
    start_offset: int = 0

    @property
    def end_offset(self) -> int:
        return self.start_offset + len(self.text)
