"""Chapter suggestions with oracle extraction and a rule-based fallback."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from clipcore.chapters.extractor import ChapterExtractor
from clipcore.chapters.fallback import suggest_fallback_chapters
from clipcore.chapters.markers import locate_chapter_markers
from clipcore.chapters.models import ChapterSource, ChapterSuggestion, ChapterTopic
from clipcore.oracle.base import TextOracle, ensure_ready
from clipcore.pipeline_config import ChapterConfig
from clipcore.segments.models import TimedSegment
from clipcore.segments.parsers import segments_to_text
from clipcore.text import collapse_whitespace

logger = logging.getLogger(__name__)


class ChapterSuggestionService:
    """Suggests chapters, preferring the oracle and falling back to rules."""

    def __init__(self, oracle: TextOracle, config: ChapterConfig | None = None) -> None:
        self.oracle = oracle
        self.config = config or ChapterConfig()
        self.extractor = ChapterExtractor(oracle, self.config)

    async def suggest(
        self,
        transcript: str | None,
        segments: Sequence[TimedSegment] | None = None,
    ) -> ChapterSuggestion:
        """Suggest chapters for a transcript and, with segments, place them in time.

        Args:
            transcript: Plain transcript text; built from *segments* when empty.
            segments: Timed segments used to compute chapter markers.

        Returns:
            A :class:`ChapterSuggestion` naming the strategy that produced it.
        """
        if not (transcript and transcript.strip()) and segments:
            transcript = segments_to_text(segments)

        text = collapse_whitespace(transcript or "")
        if len(text) < self.config.min_transcript_chars:
            logger.info("No usable transcript for chapter suggestions")
            return ChapterSuggestion(source=ChapterSource.NONE)

        topics = await self._suggest_with_oracle(text)
        source = ChapterSource.ORACLE
        if not topics:
            topics = suggest_fallback_chapters(text, self.config)
            source = ChapterSource.FALLBACK if topics else ChapterSource.NONE

        markers = locate_chapter_markers(topics, segments) if segments else []
        return ChapterSuggestion(source=source, topics=topics, markers=markers)

    async def _suggest_with_oracle(self, text: str) -> list[ChapterTopic]:
        try:
            if not ensure_ready(self.oracle):
                logger.info("Oracle not ready, using rule-based chapters")
                return []
            return await self.extractor.extract(text)
        except Exception:
            logger.exception("Oracle chapter extraction failed, using rule-based chapters")
            return []
