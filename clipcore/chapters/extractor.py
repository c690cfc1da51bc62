"""Oracle-driven chapter extraction over a chunked transcript.

Flow per call: chunk the transcript, ask the oracle for anchors chunk by
chunk (one strict retry when a chunk yields too little), ground every anchor
in its chunk, merge across chunks, then resolve titles. If no chunk yields a
single grounded anchor, the whole pass is repeated once with half the chunk
size.
"""

from __future__ import annotations

import logging

from clipcore.chapters.grounding import parse_and_verify
from clipcore.chapters.merge import merge_topics
from clipcore.chapters.models import ChapterTopic, ChunkAnchors
from clipcore.chapters.prompts import build_anchor_prompt
from clipcore.chapters.titles import resolve_titles
from clipcore.oracle.base import TextOracle
from clipcore.pipeline_config import ChapterConfig
from clipcore.segments.chunking import split_into_chunks
from clipcore.segments.models import TranscriptChunk
from clipcore.text import collapse_whitespace

logger = logging.getLogger(__name__)


class ChapterExtractor:
    """Turns a transcript into titled, grounded chapter topics."""

    def __init__(self, oracle: TextOracle, config: ChapterConfig | None = None) -> None:
        self.oracle = oracle
        self.config = config or ChapterConfig()

    def min_expected(self, chunk: TranscriptChunk) -> int:
        """Number of anchors a chunk of this length should produce."""
        config = self.config
        expected = len(chunk.text) // config.chars_per_topic
        return max(config.min_topics_per_chunk, min(expected, config.max_topics_per_chunk))

    async def extract(self, transcript: str) -> list[ChapterTopic]:
        """Extract chapter topics from *transcript*.

        Returns an empty list for transcripts too short to chapter. Oracle
        failures surface as fewer (or no) topics; cancellation propagates.
        """
        text = collapse_whitespace(transcript or "")
        if len(text) < self.config.min_transcript_chars:
            logger.info("Transcript too short for chapters (%d chars)", len(text))
            return []

        chunk_size = self.config.chunk_size
        results = await self._extract_anchors(text, chunk_size)

        if not any(result.topics for result in results):
            smaller = max(chunk_size // 2, self.config.min_chunk_size)
            if chunk_size > self.config.min_chunk_size and len(text) > smaller:
                logger.info(
                    "No grounded anchors with chunk size %d, retrying with %d",
                    chunk_size,
                    smaller,
                )
                results = await self._extract_anchors(text, smaller)

        merged = merge_topics(results, text, self.config)
        if not merged:
            logger.info("Oracle produced no grounded chapter anchors")
            return []

        topics = await resolve_titles(merged, text, self.oracle, self.config)
        logger.info("Extracted %d chapters from %d chars", len(topics), len(text))
        return topics

    async def _extract_anchors(self, text: str, chunk_size: int) -> list[ChunkAnchors]:
        chunks = split_into_chunks(text, chunk_size, self.config.chunk_overlap)
        logger.debug("Split transcript into %d chunks (size %d)", len(chunks), chunk_size)

        results: list[ChunkAnchors] = []
        for i, chunk in enumerate(chunks):
            topics = await self._extract_chunk(chunk)
            logger.debug("Chunk %d/%d: %d grounded anchors", i + 1, len(chunks), len(topics))
            results.append(ChunkAnchors(start_offset=chunk.start_offset, topics=tuple(topics)))
        return results

    async def _extract_chunk(self, chunk: TranscriptChunk) -> list[ChapterTopic]:
        expected = self.min_expected(chunk)
        topics = await self._request_anchors(chunk, expected, strict=False)
        if len(topics) >= expected:
            return topics

        logger.debug(
            "Chunk at %d yielded %d/%d anchors, retrying with strict prompt",
            chunk.start_offset,
            len(topics),
            expected,
        )
        retried = await self._request_anchors(chunk, expected, strict=True)
        return retried if len(retried) > len(topics) else topics

    async def _request_anchors(
        self, chunk: TranscriptChunk, expected: int, strict: bool
    ) -> list[ChapterTopic]:
        prompt = build_anchor_prompt(
            chunk.text,
            max_topics=self.config.max_topics_per_chunk,
            strict=strict,
            custom_prompt=self.config.custom_prompt,
        )
        response = await self.oracle.complete(prompt)
        return parse_and_verify(response, chunk.text, expected, self.config)
