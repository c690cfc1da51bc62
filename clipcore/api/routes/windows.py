"""Windows endpoint: candidate highlight windows from timed segments."""

from __future__ import annotations

from fastapi import APIRouter

from clipcore.api.models import WindowOut, WindowsRequest, WindowsResponse
from clipcore.pipeline_config import WindowConfig
from clipcore.segments.models import TimedSegment
from clipcore.segments.windows import generate_windows

router = APIRouter()


@router.post("/api/windows", response_model=WindowsResponse)
async def candidate_windows(request: WindowsRequest) -> WindowsResponse:
    """Generate deduplicated candidate windows for highlight detection.

    Invalid duration bounds yield an empty list rather than an error.
    """
    defaults = WindowConfig()
    segments = [
        TimedSegment(start=s.start, end=s.end, text=s.text, speaker=s.speaker)
        for s in request.segments
    ]
    windows = generate_windows(
        segments,
        min_duration=request.min_duration or defaults.min_duration,
        max_duration=request.max_duration or defaults.max_duration,
        step=request.step or defaults.step,
        pause_threshold=defaults.pause_threshold,
    )
    return WindowsResponse(
        windows=[WindowOut(**w.to_dict()) for w in windows],
        count=len(windows),
    )
