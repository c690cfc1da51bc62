"""Prompt builders for the two oracle roles: anchor extraction and titling."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence

from clipcore.chapters.models import ChapterTopic
from clipcore.text import collapse_whitespace, sanitize_custom_prompt

_SENTENCE_END_RE = re.compile(r"[.!?](?=\s|$)")

ANCHOR_PROMPT = """\
You are splitting a video transcript into chapters.

TRANSCRIPT:
---TRANSCRIPT START---
{transcript}
---TRANSCRIPT END---

Find up to {max_topics} points where a new topic starts. For each one return:
- "anchor": an EXACT quote copied character for character from the transcript,
  2 to 12 words long, taken from the sentence where the topic starts. Pick a
  phrase that occurs only once or rarely in the transcript.
- "keywords": up to 6 single words that describe the topic.
{extra}
Do not invent, paraphrase or translate anchors. Anchors that do not appear
literally in the transcript are discarded.

Return a JSON array of objects with the keys "anchor" and "keywords".
"""

ANCHOR_STRICT_SUFFIX = """
IMPORTANT: Your previous answer could not be used. Respond with a valid JSON
array ONLY, for example:
[{"anchor": "exact words from the transcript", "keywords": ["topic", "words"]}]
No explanations, no Markdown, no text before or after the array.
"""

TITLE_PROMPT = """\
You write short chapter titles for a video.

Each entry below has an "anchor" (a quote where the chapter starts) and a
"context" (the surrounding transcript).

ENTRIES:
{entries}

For every entry write a concise, descriptive chapter title (2 to 8 words) in
the language of the transcript.
- The title must summarise the topic, NOT repeat the anchor.
- Titles that copy the anchor word for word are rejected.
- No numbering, no quotes, no generic labels such as "Chapter" or "Topic".
{extra}
Return a JSON array of objects with the keys "anchor" (copied unchanged) and "title".
"""

TITLE_STRICT_SUFFIX = """
IMPORTANT: Your previous titles were rejected because they were missing,
generic or copied the anchor. Write NEW wording that describes the topic.
Respond with a valid JSON array ONLY.
"""


def _extra_instructions(custom_prompt: str | None) -> str:
    sanitized = sanitize_custom_prompt(custom_prompt)
    return f"Also consider: {sanitized}\n" if sanitized else ""


def build_anchor_prompt(
    transcript: str,
    max_topics: int,
    strict: bool = False,
    custom_prompt: str | None = None,
) -> str:
    """Build the anchor extraction prompt for one transcript chunk."""
    prompt = ANCHOR_PROMPT.format(
        transcript=transcript.strip(),
        max_topics=max_topics,
        extra=_extra_instructions(custom_prompt),
    )
    if strict:
        prompt += ANCHOR_STRICT_SUFFIX
    return prompt


def find_anchor(transcript: str, anchor: str, start: int = 0) -> int:
    """Case-insensitive position of *anchor* in *transcript*, or -1.

    Falls back to matching the anchor's words separated by any punctuation
    or whitespace, since anchors are verified in normalized form.
    """
    if not anchor.strip():
        return -1
    position = transcript.lower().find(anchor.lower().strip(), start)
    if position >= 0:
        return position

    words = re.findall(r"\w+", anchor.lower())
    if not words:
        return -1
    pattern = re.compile(r"\W+".join(re.escape(w) for w in words), re.IGNORECASE)
    match = pattern.search(transcript, start)
    return match.start() if match else -1


def extract_context(transcript: str, anchor: str, max_chars: int = 360) -> str:
    """Return the sentence(s) surrounding *anchor*, bounded by *max_chars*.

    The window expands from the anchor to the nearest sentence boundary on
    each side; each side is capped so the result stays within *max_chars*.
    """
    position = find_anchor(transcript, anchor)
    if position < 0:
        return ""

    anchor_end = min(len(transcript), position + len(anchor))
    side_budget = max(0, (max_chars - (anchor_end - position)) // 2)

    left_limit = max(0, position - side_budget)
    start = left_limit
    for match in _SENTENCE_END_RE.finditer(transcript, left_limit, position):
        start = match.end()

    right_limit = min(len(transcript), anchor_end + side_budget)
    end = right_limit
    match = _SENTENCE_END_RE.search(transcript, anchor_end, right_limit)
    if match:
        end = match.end()

    return collapse_whitespace(transcript[start:end])[: max(max_chars, len(anchor))]


def build_title_prompt(
    topics: Sequence[ChapterTopic],
    transcript: str,
    strict: bool = False,
    context_chars: int = 360,
    custom_prompt: str | None = None,
) -> str:
    """Build the title resolution prompt for one batch of anchors."""
    entries = [
        {
            "anchor": topic.anchor_text,
            "context": extract_context(transcript, topic.anchor_text, context_chars),
        }
        for topic in topics
    ]
    prompt = TITLE_PROMPT.format(
        entries=json.dumps(entries, ensure_ascii=False, indent=2),
        extra=_extra_instructions(custom_prompt),
    )
    if strict:
        prompt += TITLE_STRICT_SUFFIX
    return prompt
