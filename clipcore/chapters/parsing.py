"""Defensive parsing of loosely structured (JSON-ish) oracle responses.

Nothing in here raises on bad input: malformed payloads, missing keys and
wrong types all degrade to an empty result.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from clipcore.text import remove_quotes

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s*```[\w-]*\s*$", re.MULTILINE)

_ANCHOR_KEYS = ("anchor", "anchor_text", "anchorText", "quote")
_LIST_KEYS = ("topics", "chapters", "anchors", "items", "titles", "results")


@dataclass(frozen=True)
class AnchorCandidate:
    """An unverified anchor proposal exactly as the oracle phrased it."""

    anchor: str
    keywords: tuple[str, ...] = ()
    title: str | None = None


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fence lines (```json ... ```)."""
    return _FENCE_RE.sub("", text).strip()


def _spans(text: str) -> list[tuple[int, int]]:
    spans = []
    for open_char, close_char in (("[", "]"), ("{", "}")):
        start = text.find(open_char)
        end = text.rfind(close_char)
        if start >= 0 and end > start:
            spans.append((start, end))
    # Outermost (earliest-starting) span first
    return sorted(spans)


def extract_json_payload(response: str | None) -> Any | None:
    """Locate and decode the outermost JSON array/object in *response*.

    Returns None when nothing decodes.
    """
    if not response or not response.strip():
        return None

    text = strip_code_fences(response)
    for start, end in _spans(text):
        try:
            return json.loads(text[start : end + 1])
        except (ValueError, RecursionError):
            # ValueError also covers over-long integer literals
            continue

    logger.debug("Oracle response did not contain decodable JSON")
    return None


def _as_items(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _LIST_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
        # A single object is treated as a one-element list
        return [payload]
    return []


def _first_string(item: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _keywords(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return ()
    return tuple(k.strip() for k in value if isinstance(k, str) and k.strip())


def parse_anchor_candidates(response: str | None) -> list[AnchorCandidate]:
    """Parse ``[{"anchor": ..., "keywords": [...], "title"?: ...}]`` responses."""
    candidates: list[AnchorCandidate] = []
    for item in _as_items(extract_json_payload(response)):
        if not isinstance(item, dict):
            continue
        anchor = _first_string(item, _ANCHOR_KEYS)
        if anchor is None:
            continue
        anchor = remove_quotes(anchor.strip())
        if not anchor:
            continue
        title = _first_string(item, ("title",))
        candidates.append(
            AnchorCandidate(
                anchor=anchor,
                keywords=_keywords(item.get("keywords")),
                title=title.strip() if title else None,
            )
        )
    return candidates


def parse_title_pairs(response: str | None) -> list[tuple[str, str]]:
    """Parse ``[{"anchor": ..., "title": ...}]`` responses into pairs."""
    pairs: list[tuple[str, str]] = []
    for item in _as_items(extract_json_payload(response)):
        if not isinstance(item, dict):
            continue
        anchor = _first_string(item, _ANCHOR_KEYS)
        title = _first_string(item, ("title",))
        if anchor is None or title is None:
            continue
        pairs.append((anchor.strip(), title.strip()))
    return pairs
