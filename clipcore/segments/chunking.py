"""Chunking of long transcripts into overlapping, word-aligned slices."""

from __future__ import annotations

from clipcore.segments.models import TranscriptChunk


def split_into_chunks(text: str, chunk_size: int, overlap: int) -> list[TranscriptChunk]:
    """Split *text* into chunks of at most *chunk_size* characters.

    Chunk ends are moved back to the last space at or before the boundary so
    words are not cut, unless that would shrink the chunk below half of
    *chunk_size*. Consecutive chunks share *overlap* characters. Each chunk's
    ``start_offset`` is its position in *text*.

    Args:
        text: The (normalized) transcript.
        chunk_size: Maximum characters per chunk.
        overlap: Characters repeated at the start of the next chunk.

    Returns:
        Ordered list of :class:`TranscriptChunk` instances.
    """
    if not text:
        return []
    if chunk_size <= 0 or len(text) <= chunk_size:
        return [TranscriptChunk(text=text, start_offset=0)]

    overlap = max(0, overlap)
    chunks: list[TranscriptChunk] = []
    start = 0

    while start < len(text):
        end = min(start + chunk_size, len(text))
        if end < len(text):
            space = text.rfind(" ", start, end + 1)
            if space - start >= chunk_size // 2:
                end = space

        chunks.append(TranscriptChunk(text=text[start:end], start_offset=start))

        if end >= len(text):
            break
        # Always move forward, even when overlap >= the chunk just emitted
        start = max(end - overlap, start + 1)

    return chunks
