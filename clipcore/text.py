"""Text normalization and cleanup helpers for oracle input and output."""

from __future__ import annotations

import re
from functools import lru_cache

_NON_ALNUM_RE = re.compile(r"[^\w\s]|_")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_PREFIX_RE = re.compile(r"^\d+\s*[.):]\s*")
_SESSION_ID_RE = re.compile(r"session[:\s]*[a-f0-9]{8}")
_TAG_SPLIT_RE = re.compile(r"[\s_\-/\\:;.!?]+")

QUOTE_CHARS = frozenset("\"'„“‚‘”’»«›‹`")
BULLET_CHARS = "*-•→►"
_TRAILING_PUNCTUATION = frozenset(",.;:!?")

META_LINE_PREFIXES = (
    "titel",
    "title",
    "beschreibung",
    "description",
    "tags",
    "hinweis",
    "anmerkung",
    "note",
    "session",
    "stil",
    "style",
    "fokus",
    "focus",
    "beachte",
    "transkript",
    "transcript",
)

ERROR_PATTERNS = (
    "kein transkript",
    "keine informationen",
    "nicht möglich",
    "nicht verfügbar",
    "nicht vorhanden",
    "no transcript",
    "not available",
    "not possible",
    "llm",
    "error",
    "fehler",
)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including newlines) to single spaces."""
    return _WHITESPACE_RE.sub(" ", text).strip()


@lru_cache(maxsize=2048)
def _normalize_cached(text: str) -> str:
    normalized = _NON_ALNUM_RE.sub(" ", text.lower())
    return collapse_whitespace(normalized)


def normalize_for_comparison(text: str | None) -> str:
    """Lowercase, replace everything but letters/digits with spaces, collapse spaces."""
    if not text or not text.strip():
        return ""
    if len(text) <= 200:
        return _normalize_cached(text)
    return _normalize_cached.__wrapped__(text)


def calculate_similarity(a: str, b: str) -> float:
    """Jaccard index of the (case-insensitive) word sets of *a* and *b*."""
    words_a = set(a.lower().split())
    words_b = set(b.lower().split())
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / len(words_a | words_b)


def overlap_ratio(a: set[str], b: set[str]) -> float:
    """Shared items divided by the size of the smaller set."""
    if not a or not b:
        return 0.0
    return len(a & b) / min(len(a), len(b))


def remove_quotes(text: str) -> str:
    """Strip matching quote characters from both ends of *text*.

    A closing quote followed by trailing punctuation (``"Hello".``) is also
    unwrapped.
    """
    if not text:
        return text

    result = text.strip()
    while len(result) >= 2:
        first = result[0]
        last = result[-1]
        if first not in QUOTE_CHARS:
            break
        if last in QUOTE_CHARS:
            result = result[1:-1].strip()
            continue
        if last in _TRAILING_PUNCTUATION and len(result) >= 3 and result[-2] in QUOTE_CHARS:
            result = result[1:-2].strip()
            continue
        break

    return result


def remove_number_prefix(text: str) -> str:
    """Remove a leading enumeration such as ``1.``, ``2)`` or ``3:``."""
    if not text:
        return text
    cleaned = text.strip()
    if len(cleaned) > 2 and cleaned[0].isdigit():
        cleaned = _NUMBER_PREFIX_RE.sub("", cleaned, count=1)
    return cleaned


def clean_title_line(line: str | None) -> str:
    """Clean a title suggestion: numbering, quotes, bullets and a trailing colon."""
    if not line or not line.strip():
        return ""

    cleaned = remove_number_prefix(line.strip())
    cleaned = cleaned.lstrip(BULLET_CHARS).strip()
    cleaned = remove_quotes(cleaned)
    cleaned = cleaned.rstrip(":").strip()
    return collapse_whitespace(cleaned)


def contains_session_id(text: str) -> bool:
    """True when *text* echoes a ``Session: abcdef12`` style prompt marker."""
    return bool(_SESSION_ID_RE.search(text.lower()))


def sanitize_custom_prompt(custom_prompt: str | None, max_length: int = 200) -> str:
    """Strip chat-template markers and role names from user instructions."""
    if not custom_prompt or not custom_prompt.strip():
        return ""

    sanitized = custom_prompt
    for token in ("<|", "|>", "system", "user", "assistant", "---", "```"):
        sanitized = sanitized.replace(token, "")
    sanitized = collapse_whitespace(sanitized)

    return sanitized[:max_length]


def is_meta_line(line: str | None) -> bool:
    """True for blank lines, markup and labels such as ``Title:`` or ``[Session ...]``."""
    if not line or not line.strip():
        return True
    trimmed = line.strip()
    if trimmed.startswith(("[", "<", "#", "---")):
        return True
    return trimmed.lower().startswith(META_LINE_PREFIXES)


def is_error_response(response: str | None) -> bool:
    """True when an oracle answer is empty, a bracketed marker, or an error message."""
    if not response or not response.strip():
        return True
    if response.startswith(("[", "<")):
        return True
    lower = response.lower()
    return any(pattern in lower for pattern in ERROR_PATTERNS)


def truncate_transcript(transcript: str | None, max_length: int) -> str:
    """Trim *transcript* to *max_length* characters, marking the cut with ``[...]``."""
    if not transcript or not transcript.strip():
        return ""
    trimmed = transcript.strip()
    if len(trimmed) <= max_length:
        return trimmed
    return trimmed[:max_length] + " [...]"


def clean_tag_prefix(tag: str | None) -> str:
    """Remove hashtags, bullets and numbering from the front of a tag."""
    if not tag or not tag.strip():
        return ""
    cleaned = tag.strip().lstrip("#").strip()
    cleaned = cleaned.lstrip(BULLET_CHARS).strip()
    return remove_number_prefix(cleaned)


def is_valid_single_word_tag(tag: str | None) -> bool:
    """A tag is one word of at least two characters, mostly letters."""
    if not tag or len(tag) < 2:
        return False
    if any(c in tag for c in " _-"):
        return False
    letters = sum(1 for c in tag if c.isalpha())
    return letters >= len(tag) * 0.5


def extract_single_words(text: str | None) -> list[str]:
    """Split a raw tag suggestion into valid single-word tags."""
    if not text or not text.strip():
        return []
    cleaned = remove_quotes(clean_tag_prefix(text))
    if not cleaned:
        return []
    return [word for word in _TAG_SPLIT_RE.split(cleaned) if is_valid_single_word_tag(word)]
