"""Prompt builders for video title, description and tag suggestions.

Each prompt carries a random style hint and a short session id so repeated
requests for the same transcript produce different wording.
"""

from __future__ import annotations

import random
import uuid

from clipcore.text import sanitize_custom_prompt, truncate_transcript

TITLE_STYLES = (
    "creative and attention-grabbing",
    "informative and clear",
    "curiosity-sparking",
    "direct and concise",
    "entertaining and casual",
    "professional and serious",
    "exciting and gripping",
    "inviting and friendly",
)

DESCRIPTION_STYLES = (
    "inviting and curiosity-sparking",
    "informative and factual",
    "casual and entertaining",
    "professional and persuasive",
    "personal and approachable",
    "short and punchy",
    "detailed and thorough",
    "exciting and gripping",
)

TAG_FOCUSES = (
    "Focus on the main topics",
    "Focus on the target audience",
    "Focus on emotions and mood",
    "Focus on actions",
    "Focus on technical terms",
    "Focus on common search terms",
    "Focus on specific details",
    "Focus on related topics",
)

TITLE_PROMPT = """\
You write YouTube video titles in the language of the transcript.
Output: exactly 3 titles, one per line. Only the titles, nothing else.
Forbidden: numbering, quotes, bullet points, explanations.

[Session: {session_id}]
Style: {style}
{extra}
Write 3 new, distinct titles based on this transcript:

---TRANSCRIPT START---
{transcript}
---TRANSCRIPT END---
"""

DESCRIPTION_PROMPT = """\
You write YouTube video descriptions in the language of the transcript.
The description must summarise the VIDEO CONTENT, it must NOT repeat the title.
Output: only the finished description, 2 to 4 sentences of running text.
Forbidden: lists, emojis, hashtags, headings, explanations, repeating the title.

[Session: {session_id}]
Style: {style}
{extra}{title_hint}
Write a new description summarising the video content based on this transcript:

---TRANSCRIPT START---
{transcript}
---TRANSCRIPT END---
"""

TAGS_PROMPT = """\
You write YouTube tags in the language of the transcript.
IMPORTANT: every tag is ONE SINGLE WORD.
Output: 15 to 20 words, comma separated, on one line.
Forbidden: multi-word tags, underscores, hyphens, hashtags, numbering.

[Session: {session_id}]
{focus}
{extra}
Write new single-word tags based on this transcript:

---TRANSCRIPT START---
{transcript}
---TRANSCRIPT END---
"""


def session_id() -> str:
    return uuid.uuid4().hex[:8]


def _extra_instructions(custom_prompt: str | None) -> str:
    sanitized = sanitize_custom_prompt(custom_prompt)
    return f"Also consider: {sanitized}\n" if sanitized else ""


def build_title_prompt(
    transcript: str,
    max_chars: int,
    rng: random.Random,
    custom_prompt: str | None = None,
) -> str:
    return TITLE_PROMPT.format(
        session_id=session_id(),
        style=rng.choice(TITLE_STYLES),
        extra=_extra_instructions(custom_prompt),
        transcript=truncate_transcript(transcript, max_chars),
    )


def build_description_prompt(
    transcript: str,
    max_chars: int,
    rng: random.Random,
    title: str | None = None,
    custom_prompt: str | None = None,
) -> str:
    title_hint = ""
    if title and title.strip():
        title_hint = (
            f'The video title is: "{title.strip()}"\n'
            "DO NOT repeat this title in the description!\n"
        )
    return DESCRIPTION_PROMPT.format(
        session_id=session_id(),
        style=rng.choice(DESCRIPTION_STYLES),
        extra=_extra_instructions(custom_prompt),
        title_hint=title_hint,
        transcript=truncate_transcript(transcript, max_chars),
    )


def build_tags_prompt(
    transcript: str,
    max_chars: int,
    rng: random.Random,
    custom_prompt: str | None = None,
) -> str:
    return TAGS_PROMPT.format(
        session_id=session_id(),
        focus=rng.choice(TAG_FOCUSES),
        extra=_extra_instructions(custom_prompt),
        transcript=truncate_transcript(transcript, max_chars),
    )
