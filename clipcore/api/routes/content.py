"""Content endpoint: video title, description and tag suggestions."""

from __future__ import annotations

from fastapi import APIRouter

from clipcore.api.models import ContentRequest, ContentResponse
from clipcore.config import settings
from clipcore.content.models import ChannelPersona, MediaProject
from clipcore.content.service import ContentSuggestionService
from clipcore.oracle.factory import build_oracle

router = APIRouter()


@router.post("/api/content", response_model=ContentResponse)
async def suggest_content(request: ContentRequest) -> ContentResponse:
    """Suggest titles, a description and tags for a video."""
    project = MediaProject(
        transcript=request.transcript,
        video_path=request.video_path,
        title=request.title,
    )
    persona = ChannelPersona(
        channel_name=request.channel_name,
        content_type=request.content_type,
        language=request.language,
    )

    service = ContentSuggestionService(build_oracle(settings), settings.content_config())
    return ContentResponse(
        titles=await service.suggest_titles(project, persona),
        description=await service.suggest_description(project, persona),
        tags=await service.suggest_tags(project, persona),
    )
