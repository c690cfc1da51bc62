"""Video title, description and tag suggestions with a rule-based fallback.

The oracle is only consulted when a usable transcript exists; without one
the rule-based suggestions answer so nothing is invented about unseen media.
"""

from __future__ import annotations

import logging
import random
import re
from collections.abc import Awaitable, Callable
from typing import TypeVar

from clipcore.chapters.titles import contains_prompt_leakage
from clipcore.content.fallback import (
    suggest_fallback_description,
    suggest_fallback_tags,
    suggest_fallback_titles,
)
from clipcore.content.models import ChannelPersona, MediaProject
from clipcore.content.prompts import (
    build_description_prompt,
    build_tags_prompt,
    build_title_prompt,
)
from clipcore.oracle.base import TextOracle, ensure_ready
from clipcore.pipeline_config import ContentConfig
from clipcore.text import (
    calculate_similarity,
    clean_title_line,
    contains_session_id,
    extract_single_words,
    is_error_response,
    is_meta_line,
    normalize_for_comparison,
    remove_quotes,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

INSTRUCTION_WORDS = frozenset(
    {
        # English
        "use", "write", "generate", "create", "note", "important", "always",
        "never", "avoid", "please", "format", "style", "instruction", "prompt",
        "session", "focus",
        # German
        "verwende", "benutze", "nutze", "schreibe", "generiere", "erstelle",
        "achte", "beachte", "wichtig", "immer", "niemals", "vermeiden", "sollen",
        "müssen", "können", "bitte", "stil", "anweisung", "instruktion", "fokus",
    }
)

DESCRIPTION_LEAKAGE_PHRASES = (
    "as requested",
    "according to the instructions",
    "based on the instructions",
    "wie gewünscht",
    "wie angefordert",
    "laut anweisung",
    "gemäß",
)

_DESCRIPTION_LABELS = (
    "description:",
    "youtube description:",
    "beschreibung:",
    "youtube-beschreibung:",
    "here is",
    "here's",
    "hier ist",
    "hier die",
    "the description",
    "die beschreibung",
)

_VIDEO_PHRASE_RE = re.compile(
    r"^(in this video|this video|video about|in diesem video|dieses video|video über)[:\s]*"
)
_TAG_SEPARATORS_RE = re.compile(r"[,\n\r;|]")
_TAG_NOISE = ("ableitbar", "vorhanden", "transkript", "transcript")
_TAG_STOP = frozenset({"keine", "none", "session", "fokus", "focus"})


def has_transcript(project: MediaProject, min_chars: int) -> bool:
    return bool(project.transcript and len(project.transcript.strip()) >= min_chars)


def filter_words(custom_prompt: str | None) -> set[str]:
    """Instruction vocabulary plus the long words of a custom prompt."""
    words = set(INSTRUCTION_WORDS)
    if custom_prompt:
        for word in re.split(r"[\s,.:;!?]+", custom_prompt):
            if len(word) > 5 and word[0].isalpha():
                words.add(word.lower())
    return words


def contains_description_leakage(text: str) -> bool:
    lower = text.lower()
    if contains_session_id(lower):
        return True
    if ("here is" in lower or "hier ist" in lower) and (
        "description" in lower or "beschreibung" in lower
    ):
        return True
    return any(phrase in lower for phrase in DESCRIPTION_LEAKAGE_PHRASES)


def parse_title_lines(response: str, config: ContentConfig) -> list[str]:
    """Clean one-title-per-line oracle output, dropping labels and leaked prompt text."""
    titles: list[str] = []
    for line in response.splitlines():
        line = line.strip()
        if is_meta_line(line) or contains_prompt_leakage(line):
            continue
        if not config.title_min_length <= len(line) <= config.title_max_length:
            continue
        title = clean_title_line(line)
        if len(title) < config.title_min_length or title in titles:
            continue
        titles.append(title)
        if len(titles) >= config.max_titles:
            break
    return titles


def remove_title_from_start(description: str, title: str) -> str:
    """Drop a leading line that just repeats *title*, if enough text remains."""
    title_norm = normalize_for_comparison(title)
    if not title_norm or not normalize_for_comparison(description).startswith(title_norm):
        return description

    lines = [line for line in description.split("\n") if line.strip()]
    if lines and calculate_similarity(normalize_for_comparison(lines[0]), title_norm) > 0.8:
        remainder = "\n".join(lines[1:]).strip()
        if len(remainder) >= 30:
            return remainder
    return description


def clean_description(response: str, title: str | None) -> str:
    lines = [
        line.strip()
        for line in response.split("\n")
        if not is_meta_line(line) and not line.strip().lower().startswith(_DESCRIPTION_LABELS)
    ]
    result = remove_quotes("\n".join(lines).strip())
    if title and title.strip():
        result = remove_title_from_start(result, title)
    return result


def is_description_just_title(description: str, title: str | None) -> bool:
    """True when the description only restates the video title."""
    if not description.strip() or not title or not title.strip():
        return False

    desc_norm = normalize_for_comparison(description)
    title_norm = normalize_for_comparison(title)
    if not title_norm:
        return False
    if desc_norm == title_norm:
        return True
    if len(desc_norm) <= len(title_norm) * 1.3 and calculate_similarity(desc_norm, title_norm) > 0.7:
        return True
    if desc_norm.startswith(title_norm) and len(desc_norm[len(title_norm) :].strip()) < 50:
        return True
    if title_norm in desc_norm and len(title_norm) / len(desc_norm) > 0.5:
        return True

    lower = description.strip().lower()
    if _VIDEO_PHRASE_RE.match(lower):
        remainder = _VIDEO_PHRASE_RE.sub("", lower).strip()
        return calculate_similarity(remainder, title.lower()) > 0.7
    return False


def parse_tags(response: str, config: ContentConfig) -> list[str]:
    """Split comma/line separated oracle tags into lowercase single words."""
    blocked = filter_words(config.tags_custom_prompt)
    tags: list[str] = []
    for raw in _TAG_SEPARATORS_RE.split(response):
        for word in extract_single_words(raw):
            lower = word.lower()
            if is_meta_line(word) or lower in blocked or lower in _TAG_STOP:
                continue
            if any(noise in lower for noise in _TAG_NOISE):
                continue
            if not 2 <= len(word) <= config.tag_max_length or lower in tags:
                continue
            tags.append(lower)
            if len(tags) >= config.max_tags:
                return tags
    return tags


class ContentSuggestionService:
    """Suggests video titles, a description and tags from a transcript."""

    def __init__(
        self,
        oracle: TextOracle,
        config: ContentConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.oracle = oracle
        self.config = config or ContentConfig()
        self.rng = rng or random.Random()

    async def suggest_titles(self, project: MediaProject, persona: ChannelPersona) -> list[str]:
        async def ask() -> list[str]:
            prompt = build_title_prompt(
                project.transcript or "",
                self.config.title_transcript_chars,
                self.rng,
                self.config.title_custom_prompt,
            )
            response = await self.oracle.complete(prompt)
            if is_error_response(response):
                return []
            return parse_title_lines(response, self.config)

        titles = await self._with_fallback("titles", project, ask)
        return titles or suggest_fallback_titles(project, persona)

    async def suggest_description(
        self, project: MediaProject, persona: ChannelPersona
    ) -> str | None:
        async def ask() -> str | None:
            prompt = build_description_prompt(
                project.transcript or "",
                self.config.description_transcript_chars,
                self.rng,
                project.title,
                self.config.description_custom_prompt,
            )
            response = await self.oracle.complete(prompt)
            if is_error_response(response):
                return None
            description = clean_description(response, project.title)
            if len(description) < self.config.min_description_length:
                logger.debug("Oracle description too short")
                return None
            if contains_description_leakage(description):
                logger.debug("Oracle description leaks prompt text")
                return None
            if is_description_just_title(description, project.title):
                logger.debug("Oracle description only repeats the title")
                return None
            return description

        description = await self._with_fallback("description", project, ask)
        return description or suggest_fallback_description(project, persona)

    async def suggest_tags(self, project: MediaProject, persona: ChannelPersona) -> list[str]:
        async def ask() -> list[str]:
            prompt = build_tags_prompt(
                project.transcript or "",
                self.config.tags_transcript_chars,
                self.rng,
                self.config.tags_custom_prompt,
            )
            response = await self.oracle.complete(prompt)
            if is_error_response(response):
                return []
            return parse_tags(response, self.config)

        tags = await self._with_fallback("tags", project, ask)
        return tags or suggest_fallback_tags(project, persona)

    async def _with_fallback(
        self,
        kind: str,
        project: MediaProject,
        ask: Callable[[], Awaitable[T]],
    ) -> T | None:
        """Run *ask* against the oracle; None means use the rule-based answer."""
        if not has_transcript(project, self.config.min_transcript_chars):
            logger.info("No transcript for %s, using rule-based suggestions", kind)
            return None
        try:
            if not ensure_ready(self.oracle):
                logger.info("Oracle not ready, using rule-based %s", kind)
                return None
            result = await ask()
        except Exception:
            logger.exception("Oracle %s suggestion failed, using rule-based %s", kind, kind)
            return None
        if not result:
            logger.info("Oracle gave no usable %s, using rule-based suggestions", kind)
        return result
