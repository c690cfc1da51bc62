"""Rule-based title, description and tag suggestions.

Used when no transcript exists or the oracle cannot answer. Everything is
derived from the file name, the working title and the channel persona, so
nothing is claimed about content that was never seen.
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePath

from clipcore.content.models import ChannelPersona, MediaProject

logger = logging.getLogger(__name__)

MAX_CONTENT_TYPE_TAGS = 3
MAX_FILE_NAME_TAGS = 5

_FILE_NAME_SEPARATORS_RE = re.compile(r"[_\-.]+")
_PERSONA_SPLIT_RE = re.compile(r"[\s,;]+")


def _file_name_words(video_path: str | None) -> list[str]:
    if not video_path or not video_path.strip():
        return []
    stem = PurePath(video_path.strip()).stem
    return _FILE_NAME_SEPARATORS_RE.sub(" ", stem).split()


def suggest_fallback_titles(project: MediaProject, persona: ChannelPersona) -> list[str]:
    """Titles built from the video's file name, with persona variants."""
    words = _file_name_words(project.video_path)
    if not words:
        logger.warning("No title could be derived from the file name")
        return []

    base = " ".join(words)
    titles = [base]
    if persona.content_type and "gaming" in persona.content_type.lower():
        titles.append(f"🎮 {base}")
    if persona.channel_name and persona.channel_name.strip():
        titles.append(f"{base} | {persona.channel_name.strip()}")

    logger.debug("Rule-based titles: %d suggestions", len(titles))
    return titles


def suggest_fallback_description(project: MediaProject, persona: ChannelPersona) -> str | None:
    """The working title as the description's first line, or None without one."""
    if not project.title or not project.title.strip():
        return None
    return f"{project.title.strip()}\n"


def suggest_fallback_tags(project: MediaProject, persona: ChannelPersona) -> list[str]:
    """Tags from the persona's content type, channel, language and the file name.

    Duplicates are removed case-insensitively, keeping the first spelling.
    """
    tags: list[str] = []

    if persona.content_type:
        tags.extend(_PERSONA_SPLIT_RE.split(persona.content_type.strip())[:MAX_CONTENT_TYPE_TAGS])
    if persona.channel_name and persona.channel_name.strip():
        tags.append(persona.channel_name.strip())

    language = (persona.language or "").lower()
    if "de" in language:
        tags.extend(["deutsch", "german"])
    elif "en" in language:
        tags.append("english")

    words = [w for w in _file_name_words(project.video_path) if len(w) > 2]
    tags.extend(words[:MAX_FILE_NAME_TAGS])

    seen: set[str] = set()
    unique: list[str] = []
    for tag in tags:
        key = tag.casefold()
        if tag and key not in seen:
            seen.add(key)
            unique.append(tag)

    if not unique:
        logger.warning("No rule-based tags could be derived")
    return unique
