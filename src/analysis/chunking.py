"""Line-preserving chunking for long interview transcripts."""

from __future__ import annotations

import logging

from src.pipeline_config import OversizedLinePolicy

logger = logging.getLogger(__name__)


def _split_oversized(line: str, max_chunk_size: int) -> list[str]:
    """Hard-split a single line into ``max_chunk_size`` slices."""
    return [line[i : i + max_chunk_size] for i in range(0, len(line), max_chunk_size)]


def chunk_transcript(
    transcript: str,
    max_chunk_size: int,
    oversized_line_policy: OversizedLinePolicy = OversizedLinePolicy.KEEP,
) -> list[str]:
    """Split a transcript into ordered chunks on line boundaries.

    Lines are accumulated into a buffer. When appending the next line (plus
    its ``\\n`` separator) would push the buffer past *max_chunk_size*, the
    buffer is flushed as a chunk and a new one starts with that line. Every
    chunk is trimmed; chunks that trim to nothing are dropped.

    A line is never split mid-line under the default ``KEEP`` policy: a line
    longer than *max_chunk_size* becomes its own oversized chunk. With
    ``SPLIT`` it is cut into ``max_chunk_size`` slices instead.

    Args:
        transcript: Raw transcript text.
        max_chunk_size: Target maximum characters per chunk.
        oversized_line_policy: Treatment of lines longer than the limit.

    Returns:
        Chunk strings in transcript order.

    Raises:
        ValueError: If *max_chunk_size* is not positive.
    """
    if max_chunk_size <= 0:
        raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")

    chunks: list[str] = []
    buffer = ""

    def flush() -> None:
        text = buffer.strip()
        if text:
            chunks.append(text)

    for line_no, line in enumerate(transcript.split("\n"), start=1):
        if len(line) > max_chunk_size:
            logger.warning(
                "Line %d is %d chars, over the %d char chunk limit (policy=%s)",
                line_no,
                len(line),
                max_chunk_size,
                oversized_line_policy.value,
            )
            if oversized_line_policy is OversizedLinePolicy.SPLIT:
                flush()
                buffer = ""
                pieces = _split_oversized(line, max_chunk_size)
                chunks.extend(p.strip() for p in pieces[:-1] if p.strip())
                buffer = pieces[-1]
                continue

        if buffer and len(buffer) + 1 + len(line) > max_chunk_size:
            flush()
            buffer = line
        elif buffer:
            buffer = f"{buffer}\n{line}"
        else:
            buffer = line

    flush()
    return chunks
