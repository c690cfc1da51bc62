"""Shared fixtures: a scripted oracle double and a small sample transcript."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from clipcore.segments.models import TimedSegment

SAMPLE_SEGMENTS = [
    TimedSegment(0.0, 10.0, "Welcome back to the channel everyone."),
    TimedSegment(10.0, 30.0, "Today we are talking about sourdough bread baking at home."),
    TimedSegment(
        30.0,
        60.0,
        "First we need to build a healthy starter culture. Mix equal parts flour "
        "and water in a clean jar and wait for bubbles. Feed the starter every day "
        "for about a week.",
    ),
    TimedSegment(
        60.0,
        120.0,
        "Next comes the dough itself. Combine the active starter with bread flour, "
        "water and salt. Stretch and fold the dough every thirty minutes during "
        "bulk fermentation.",
    ),
    TimedSegment(
        120.0,
        200.0,
        "Finally we bake the loaf in a preheated dutch oven. Bake covered for twenty "
        "minutes and then uncovered until deep brown. Let the bread cool completely "
        "before slicing it.",
    ),
]

SAMPLE_TRANSCRIPT = " ".join(s.text for s in SAMPLE_SEGMENTS)

STARTER_ANCHOR = "build a healthy starter culture"
DOUGH_ANCHOR = "Combine the active starter with bread flour"
BAKE_ANCHOR = "bake the loaf in a preheated dutch oven"

ANCHOR_RESPONSE = f"""[
  {{"anchor": "{STARTER_ANCHOR}", "keywords": ["starter", "culture"]}},
  {{"anchor": "{DOUGH_ANCHOR}", "keywords": ["dough", "flour"]}},
  {{"anchor": "{BAKE_ANCHOR}", "keywords": ["baking", "oven"]}}
]"""

TITLE_RESPONSE = f"""[
  {{"anchor": "{STARTER_ANCHOR}", "title": "Preparing the Starter"}},
  {{"anchor": "{DOUGH_ANCHOR}", "title": "Mixing the Dough"}},
  {{"anchor": "{BAKE_ANCHOR}", "title": "Baking the Loaf"}}
]"""


class ScriptedOracle:
    """Oracle double that replays queued responses and records every prompt.

    Queued exceptions are raised instead of returned; once the queue is
    empty *default* is returned.
    """

    def __init__(
        self,
        responses: list[str | BaseException] | None = None,
        ready: bool = True,
        default: str = "",
    ) -> None:
        self.responses = list(responses or [])
        self.ready = ready
        self.default = default
        self.prompts: list[str] = []
        self.init_calls = 0

    @property
    def is_ready(self) -> bool:
        return self.ready

    def try_initialize(self) -> bool:
        self.init_calls += 1
        return self.ready

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            return self.default
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def make_oracle() -> Callable[..., ScriptedOracle]:
    return ScriptedOracle


@pytest.fixture
def transcript() -> str:
    return SAMPLE_TRANSCRIPT


@pytest.fixture
def segments() -> list[TimedSegment]:
    return list(SAMPLE_SEGMENTS)


@pytest.fixture
def anchor_response() -> str:
    return ANCHOR_RESPONSE


@pytest.fixture
def title_response() -> str:
    return TITLE_RESPONSE
