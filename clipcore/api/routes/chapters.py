"""Chapters endpoint: oracle-driven chapter suggestions for a transcript."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from clipcore.api.models import ChapterOut, ChaptersRequest, ChaptersResponse, MarkerOut
from clipcore.chapters.markers import format_chapter_list
from clipcore.chapters.service import ChapterSuggestionService
from clipcore.config import settings
from clipcore.oracle.factory import build_oracle
from clipcore.segments.models import TimedSegment
from clipcore.segments.parsers import parse_segments

logger = logging.getLogger(__name__)

router = APIRouter()


def _request_segments(request: ChaptersRequest) -> list[TimedSegment] | None:
    if request.segments:
        return [
            TimedSegment(start=s.start, end=s.end, text=s.text, speaker=s.speaker)
            for s in request.segments
        ]
    if request.content:
        try:
            return parse_segments(request.content, request.format or "vtt")
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return None


@router.post("/api/chapters", response_model=ChaptersResponse)
async def suggest_chapters(request: ChaptersRequest) -> ChaptersResponse:
    """Suggest chapters from a transcript, segments, or a transcript file.

    With timed input the response also carries markers and a ready-to-paste
    chapter list.
    """
    segments = _request_segments(request)
    if not (request.transcript and request.transcript.strip()) and not segments:
        raise HTTPException(
            status_code=400,
            detail="Provide a transcript, segments, or transcript file content",
        )

    service = ChapterSuggestionService(build_oracle(settings), settings.chapter_config())
    suggestion = await service.suggest(request.transcript, segments)

    return ChaptersResponse(
        source=suggestion.source,
        chapters=[
            ChapterOut(title=t.title, anchor_text=t.anchor_text, keywords=list(t.keywords))
            for t in suggestion.topics
        ],
        markers=[MarkerOut(**m.to_dict()) for m in suggestion.markers],
        chapters_text=format_chapter_list(suggestion.markers),
    )
