"""Transcript parsers for WebVTT/SRT and JSON formats."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Sequence

from clipcore.segments.models import TimedSegment

_TIMESTAMP_RE = re.compile(
    r"((?:\d{1,2}:)?\d{1,2}:\d{2}[.,]\d{1,3})\s*-->\s*((?:\d{1,2}:)?\d{1,2}:\d{2}[.,]\d{1,3})"
)
_SPEAKER_RE = re.compile(r"^([^:]{1,40}):\s+(.+)$")
# WebVTT voice tag; the closing </v> is optional per the WebVTT spec.
_VOICE_TAG_RE = re.compile(r"^<v ([^>]+)>(.*?)(?:</v>)?$", re.DOTALL)
_INLINE_TAG_RE = re.compile(r"</?[a-z][^>]*>", re.IGNORECASE)


def _parse_timestamp(ts: str) -> float:
    """Convert ``HH:MM:SS.mmm`` / ``MM:SS,mmm`` to seconds."""
    parts = ts.strip().replace(",", ".").split(":")
    if len(parts) == 3:
        hours, minutes, seconds = parts
    elif len(parts) == 2:
        hours = "0"
        minutes, seconds = parts
    else:
        return 0.0
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def parse_vtt(content: str) -> list[TimedSegment]:
    """Parse WebVTT or SRT subtitles into timed segments.

    Cue numbers (SRT) and headers are ignored. Speaker labels are recognised
    in two forms and moved to ``speaker``:

    - Colon-style: ``Speaker 1: Hello``
    - Voice tags: ``<v SpeakerName>Hello</v>``
    """
    segments: list[TimedSegment] = []

    lines = content.strip().splitlines()
    i = 0
    while i < len(lines):
        match = _TIMESTAMP_RE.search(lines[i])
        if not match:
            i += 1
            continue

        start = _parse_timestamp(match.group(1))
        end = _parse_timestamp(match.group(2))

        # Collect text lines until blank line or next timestamp / end
        text_lines: list[str] = []
        i += 1
        while i < len(lines) and lines[i].strip() and not _TIMESTAMP_RE.search(lines[i]):
            text_lines.append(lines[i].strip())
            i += 1

        full_text = " ".join(text_lines)
        speaker: str | None = None

        voice_match = _VOICE_TAG_RE.match(full_text)
        if voice_match:
            speaker = voice_match.group(1).strip()
            full_text = voice_match.group(2).strip()
        else:
            speaker_match = _SPEAKER_RE.match(full_text)
            if speaker_match:
                speaker = speaker_match.group(1)
                full_text = speaker_match.group(2)

        full_text = _INLINE_TAG_RE.sub("", full_text).strip()
        if full_text and end >= start:
            segments.append(TimedSegment(start=start, end=end, text=full_text, speaker=speaker))

    return segments


def parse_json(content: str) -> list[TimedSegment]:
    """Parse a JSON transcript.

    Supported formats:

    Whisper-style (times in seconds)::

        {"segments": [{"start": 0.0, "end": 4.2, "text": "..."}]}

    Internal segments format (times in seconds)::

        {"segments": [{"speaker": "...", "text": "...", "start_time": s, "end_time": s}]}

    AssemblyAI (times in milliseconds)::

        {"utterances": [{"speaker": "A", "text": "...", "start": ms, "end": ms}]}

    A bare top-level list is treated like ``segments``.
    """
    data = json.loads(content)
    segments: list[TimedSegment] = []

    if isinstance(data, list):
        data = {"segments": data}
    if not isinstance(data, dict):
        msg = f"Unrecognized JSON transcript format: {type(data).__name__}"
        raise ValueError(msg)

    if "utterances" in data:
        # AssemblyAI: times in milliseconds
        for utt in data["utterances"]:
            if not isinstance(utt, dict):
                continue
            segments.append(
                TimedSegment(
                    start=utt.get("start", 0) / 1000.0,
                    end=utt.get("end", 0) / 1000.0,
                    text=str(utt.get("text", "")).strip(),
                    speaker=utt.get("speaker"),
                )
            )
    elif "segments" in data:
        for seg in data["segments"]:
            if not isinstance(seg, dict):
                continue
            start = seg.get("start", seg.get("start_time"))
            end = seg.get("end", seg.get("end_time"))
            if start is None or end is None:
                continue
            segments.append(
                TimedSegment(
                    start=float(start),
                    end=float(end),
                    text=str(seg.get("text", "")).strip(),
                    speaker=seg.get("speaker"),
                )
            )
    else:
        msg = f"Unrecognized JSON transcript format. Keys: {list(data.keys())}"
        raise ValueError(msg)

    return segments


def parse_segments(content: str, format: str) -> list[TimedSegment]:
    """Dispatch to the correct parser based on *format*.

    Args:
        content: Raw transcript text.
        format: One of ``"vtt"``, ``"srt"`` or ``"json"``.

    Returns:
        Parsed segments, sorted by start time.

    Raises:
        ValueError: If *format* is not recognized or the JSON is malformed.
    """
    dispatch: dict[str, Callable[[str], list[TimedSegment]]] = {
        "vtt": parse_vtt,
        "srt": parse_vtt,
        "json": parse_json,
    }

    parser = dispatch.get(format)
    if parser is None:
        msg = f"Unknown transcript format: {format!r}. Supported: {list(dispatch.keys())}"
        raise ValueError(msg)

    try:
        segments = parser(content)
    except json.JSONDecodeError as exc:
        msg = f"Malformed JSON transcript: {exc.msg}"
        raise ValueError(msg) from exc
    return sorted(segments, key=lambda s: s.start)


def segments_to_text(segments: Sequence[TimedSegment]) -> str:
    """Flatten segments into a single space-joined transcript string."""
    return " ".join(s.text.strip() for s in segments if s.text and s.text.strip())
