"""Command-line access to window generation and chapter suggestions.

Entry point
-----------
Run as a module::

    python -m clipcore.cli windows talk.vtt --min-duration 20
    python -m clipcore.cli chapters talk.json

Both commands print JSON to stdout. ``chapters`` uses the oracle selected by
``LLM_MODE`` and falls back to rule-based chapters when it is unavailable.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from clipcore.chapters.markers import format_chapter_list
from clipcore.chapters.service import ChapterSuggestionService
from clipcore.config import settings
from clipcore.oracle.factory import build_oracle
from clipcore.pipeline_config import WindowConfig
from clipcore.segments.models import TimedSegment
from clipcore.segments.parsers import parse_segments
from clipcore.segments.windows import generate_windows

logger = logging.getLogger(__name__)

TEXT_FORMAT = "txt"
FORMATS = ("vtt", "srt", "json", TEXT_FORMAT)


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    defaults = WindowConfig()
    parser = argparse.ArgumentParser(
        prog="python -m clipcore.cli",
        description="Highlight windows and transcript-grounded chapters.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    windows = subparsers.add_parser("windows", help="Generate candidate highlight windows.")
    windows.add_argument("file", type=Path, help="Transcript file (vtt, srt or json).")
    windows.add_argument("--format", choices=FORMATS[:-1], default=None)
    windows.add_argument("--min-duration", type=float, default=defaults.min_duration)
    windows.add_argument("--max-duration", type=float, default=defaults.max_duration)
    windows.add_argument("--step", type=float, default=defaults.step)

    chapters = subparsers.add_parser("chapters", help="Suggest chapters for a transcript.")
    chapters.add_argument("file", type=Path, help="Transcript file (vtt, srt, json or txt).")
    chapters.add_argument("--format", choices=FORMATS, default=None)

    return parser


def _detect_format(path: Path, explicit: str | None) -> str:
    if explicit:
        return explicit
    suffix = path.suffix.lower().lstrip(".")
    return suffix if suffix in FORMATS else TEXT_FORMAT


def _load_segments(path: Path, fmt: str) -> list[TimedSegment]:
    return parse_segments(path.read_text(encoding="utf-8"), fmt)


def run_windows(args: argparse.Namespace) -> dict[str, Any]:
    fmt = _detect_format(args.file, args.format)
    if fmt == TEXT_FORMAT:
        msg = "Window generation needs timed segments (vtt, srt or json)"
        raise ValueError(msg)
    windows = generate_windows(
        _load_segments(args.file, fmt),
        min_duration=args.min_duration,
        max_duration=args.max_duration,
        step=args.step,
    )
    return {"windows": [w.to_dict() for w in windows], "count": len(windows)}


async def run_chapters(args: argparse.Namespace) -> dict[str, Any]:
    fmt = _detect_format(args.file, args.format)
    transcript: str | None = None
    segments: list[TimedSegment] | None = None
    if fmt == TEXT_FORMAT:
        transcript = args.file.read_text(encoding="utf-8")
    else:
        segments = _load_segments(args.file, fmt)

    service = ChapterSuggestionService(build_oracle(settings), settings.chapter_config())
    suggestion = await service.suggest(transcript, segments)
    return {
        "source": str(suggestion.source),
        "chapters": [t.to_dict() for t in suggestion.topics],
        "markers": [m.to_dict() for m in suggestion.markers],
        "chapters_text": format_chapter_list(suggestion.markers),
    }


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "windows":
            result = run_windows(args)
        else:
            result = asyncio.run(run_chapters(args))
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
