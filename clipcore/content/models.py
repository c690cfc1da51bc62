"""Inputs for video title, description and tag suggestions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MediaProject:
    """The video being published."""

    transcript: str | None = None
    video_path: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class ChannelPersona:
    """Channel facts the rule-based suggestions draw on."""

    channel_name: str | None = None
    content_type: str | None = None
    language: str | None = None
