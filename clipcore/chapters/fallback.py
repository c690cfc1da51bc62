"""Rule-based chapter suggestions used when the oracle is unavailable."""

from __future__ import annotations

import logging
import re
from collections import Counter

from clipcore.chapters.models import ChapterTopic
from clipcore.chapters.titles import is_valid_title
from clipcore.pipeline_config import ChapterConfig
from clipcore.text import collapse_whitespace

logger = logging.getLogger(__name__)

MAX_FALLBACK_SECTIONS = 8
ANCHOR_WORDS = 8
TITLE_KEYWORDS = 3
SECTION_KEYWORDS = 6

_SENTENCE_RE = re.compile(r"\S.*?(?:[.!?](?=\s|$)|$)")
_WORD_RE = re.compile(r"[^\W\d_]+")

STOPWORDS = frozenset(
    """
    a about above after again against all also am an and any are as at be because
    been before being below between both but by can could did do does doing down
    during each even few for from further get got had has have having he her here
    hers him his how i if in into is it its itself just know like me more most my
    no nor not now of off on once only or other our ours out over own really right
    same she should so some such than that the their theirs them then there these
    they thing things think this those through to too under until up very was way
    we well were what when where which while who whom why will with would yeah yes
    you your yours okay going gonna want
    aber alle allem allen aller alles als also am an ander andere anderen auch auf
    aus bei bin bis bist da dabei damit dann das dass dein deine dem den denn der
    des dich die dies diese diesem diesen dieser dieses dir doch dort du durch ein
    eine einem einen einer eines einfach er es etwas euch euer für gibt hab habe
    haben hat hatte hier hin ich ihr ihre im in ist ja jetzt kann kein keine mal
    man mehr mein meine mich mir mit muss nach nicht nichts noch nun nur ob oder
    ohne schon sehr sein seine sich sie sind so sollen über um und uns unser unter
    viel vom von vor war waren was weil wenn wer werden wie wieder wir wird wo zu
    zum zur genau halt eben
    """.split()
)


def _sentences(text: str) -> list[tuple[int, str]]:
    return [(m.start(), m.group()) for m in _SENTENCE_RE.finditer(text)]


def _group_sentences(sentences: list[tuple[int, str]], text_length: int, count: int) -> list[list[str]]:
    """Group sentences into *count* sections of roughly equal character length."""
    sections: list[list[str]] = []
    target = text_length / count
    for start, sentence in sentences:
        boundary = len(sections) * target
        if not sections or (start >= boundary and len(sections) < count):
            sections.append([])
        sections[-1].append(sentence)
    return sections


def _anchor_for(section: list[str]) -> str:
    words = section[0].split(" ")
    if len(words) < 2:
        words = " ".join(section).split(" ")
    return " ".join(words[:ANCHOR_WORDS]).rstrip(",;:")


def section_keywords(text: str, config: ChapterConfig, limit: int = SECTION_KEYWORDS) -> list[str]:
    """Most frequent non-stopword terms of *text*, in order of first appearance on ties."""
    words = [
        w
        for w in _WORD_RE.findall(text.lower())
        if len(w) >= config.min_keyword_length and w not in STOPWORDS
    ]
    return [word for word, _ in Counter(words).most_common(limit)]


def suggest_fallback_chapters(transcript: str, config: ChapterConfig | None = None) -> list[ChapterTopic]:
    """Split *transcript* into sentence-aligned sections titled by their keywords.

    Args:
        transcript: Plain transcript text.
        config: Thresholds shared with oracle extraction.

    Returns:
        Titled topics whose anchors are literal transcript substrings.
    """
    config = config or ChapterConfig()
    text = collapse_whitespace(transcript or "")
    if len(text) < config.min_transcript_chars:
        return []

    sentences = _sentences(text)
    count = max(1, min(len(text) // config.chars_per_topic, MAX_FALLBACK_SECTIONS, len(sentences)))

    topics: list[ChapterTopic] = []
    for section in _group_sentences(sentences, len(text), count):
        keywords = section_keywords(" ".join(section), config)
        if not keywords:
            continue
        anchor = _anchor_for(section)
        title = ", ".join(k.capitalize() for k in keywords[:TITLE_KEYWORDS])
        if not is_valid_title(title, anchor, config):
            logger.debug("Skipping fallback section with title %r", title)
            continue
        topics.append(ChapterTopic(anchor_text=anchor, keywords=tuple(keywords), title=title))

    logger.info("Rule-based fallback produced %d chapters", len(topics))
    return topics
