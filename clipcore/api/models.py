"""Pydantic request/response schemas for the clipcore API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from clipcore.chapters.models import ChapterSource


class SegmentIn(BaseModel):
    """A single timed transcript segment."""

    start: float
    end: float
    text: str = ""
    speaker: str | None = None


class WindowsRequest(BaseModel):
    """Request body for the /api/windows endpoint."""

    segments: list[SegmentIn]
    min_duration: float | None = Field(default=None, gt=0)
    max_duration: float | None = Field(default=None, gt=0)
    step: float | None = Field(default=None, gt=0)


class WindowOut(BaseModel):
    """A candidate highlight window."""

    index: int
    start: float
    end: float
    duration: float
    text: str
    start_segment_index: int
    end_segment_index: int


class WindowsResponse(BaseModel):
    """Response body for the /api/windows endpoint."""

    windows: list[WindowOut]
    count: int


class ChaptersRequest(BaseModel):
    """Request body for the /api/chapters endpoint.

    Provide either a plain ``transcript``, structured ``segments``, or raw
    transcript file ``content`` with its ``format`` (vtt, srt or json).
    """

    transcript: str | None = None
    segments: list[SegmentIn] | None = None
    format: str | None = None
    content: str | None = None


class ChapterOut(BaseModel):
    """A titled chapter with its grounding anchor."""

    title: str | None
    anchor_text: str
    keywords: list[str] = []


class MarkerOut(BaseModel):
    """A chapter placed on the timeline."""

    start: float
    title: str
    anchor_text: str = ""


class ChaptersResponse(BaseModel):
    """Response body for the /api/chapters endpoint."""

    source: ChapterSource
    chapters: list[ChapterOut]
    markers: list[MarkerOut] = []
    chapters_text: str = ""


class ContentRequest(BaseModel):
    """Request body for the /api/content endpoint.

    Without a usable ``transcript`` the suggestions are derived from the
    file name, working title and channel persona only.
    """

    transcript: str | None = None
    video_path: str | None = None
    title: str | None = None
    channel_name: str | None = None
    content_type: str | None = None
    language: str | None = None


class ContentResponse(BaseModel):
    """Response body for the /api/content endpoint."""

    titles: list[str]
    description: str | None = None
    tags: list[str]
