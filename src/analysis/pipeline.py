"""End-to-end analysis pipeline: attribute speakers -> chunk -> analyze -> merge -> rubric."""

from __future__ import annotations

import logging
import time

from src.analysis.aggregation import merge_results
from src.analysis.analyzer import analyze_chunk
from src.analysis.chunking import chunk_transcript
from src.analysis.models import AggregateResult, ChunkAnalysisResult
from src.analysis.rubric import apply_rubric
from src.analysis.speakers import attribute_speakers
from src.llm.client import LLMClient
from src.pipeline_config import AnalysisConfig

logger = logging.getLogger(__name__)


def analyze_chunks(
    chunks: list[str],
    client: LLMClient,
    config: AnalysisConfig,
) -> list[ChunkAnalysisResult]:
    """Analyze *chunks* one after another, pausing between calls.

    Calls are strictly sequential to stay under the provider's rate limits;
    the pause is skipped after the last chunk. A chunk whose analysis raises
    contributes an empty result and the remaining chunks still run.

    Returns:
        One result per chunk, in chunk order.
    """
    total = len(chunks)
    results: list[ChunkAnalysisResult] = []
    for index, chunk in enumerate(chunks, start=1):
        try:
            results.append(analyze_chunk(chunk, index, total, client, config))
        except Exception:
            logger.exception("Analysis of chunk %d/%d raised; skipping it", index, total)
            results.append(ChunkAnalysisResult.empty())

        if index < total and config.inter_call_delay_seconds > 0:
            time.sleep(config.inter_call_delay_seconds)
    return results


def analyze_transcript(
    transcript: str,
    client: LLMClient,
    config: AnalysisConfig | None = None,
) -> AggregateResult:
    """Full analysis of an interview transcript of any length.

    Transcripts up to ``config.chunk_threshold`` characters are analyzed in
    one call. Longer ones are split with :func:`chunk_transcript`, analyzed
    chunk by chunk and merged.

    Args:
        transcript: Raw interview transcript.
        client: LLM client used for every call.
        config: Pipeline configuration; defaults to ``AnalysisConfig()``.

    Returns:
        The aggregate result. LLM and parse failures only show up as empty
        sections; programming errors (e.g. an invalid chunk size) propagate.
    """
    config = config or AnalysisConfig()

    text = transcript
    if config.attribute_speakers:
        text = attribute_speakers(text, client, config)

    if len(text) <= config.chunk_threshold:
        logger.info("Analyzing %d-char transcript in a single call", len(text))
        result = AggregateResult.from_chunk(analyze_chunk(text, 1, 1, client, config))
    else:
        chunks = chunk_transcript(text, config.chunk_size, config.oversized_line_policy)
        logger.info(
            "Analyzing %d-char transcript in %d chunks of <= %d chars",
            len(text),
            len(chunks),
            config.chunk_size,
        )
        result = merge_results(analyze_chunks(chunks, client, config))

    if config.apply_rubric:
        result = apply_rubric(result)
    return result
