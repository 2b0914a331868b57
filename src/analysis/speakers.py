"""Speaker attribution: label each transcript line as interviewer or candidate."""

from __future__ import annotations

import logging

from src.llm.client import CompletionRequest, LLMClient
from src.pipeline_config import AnalysisConfig

logger = logging.getLogger(__name__)

INTERVIEWER_LABEL = "面试官："
CANDIDATE_LABEL = "候选人："

SPEAKER_SYSTEM_PROMPT = (
    "You label interview transcripts produced by speech-to-text. The input has "
    "no reliable speaker labels.\n\n"
    "Rules:\n"
    f"- Re-emit every utterance on its own line, prefixed with exactly "
    f"'{INTERVIEWER_LABEL}' (interviewer) or '{CANDIDATE_LABEL}' (candidate).\n"
    "- Keep the wording verbatim. Do not summarize, translate, fix typos, "
    "or drop content.\n"
    "- When the speaker is ambiguous, infer it from linguistic cues: the "
    "interviewer asks questions, gives instructions and moves the interview "
    "along; the candidate introduces themselves, answers and explains.\n"
    "- If a line is already labelled, keep the label unless it is clearly wrong.\n"
    "- Output only the labelled transcript, nothing else."
)


def attribute_speakers(transcript: str, client: LLMClient, config: AnalysisConfig) -> str:
    """Rewrite *transcript* as ``面试官：`` / ``候选人：`` labelled dialogue.

    Best-effort: on any failure, an empty completion or a completion cut
    off at ``speaker_max_tokens``, the original transcript is returned
    unchanged so no part of it is lost.
    """
    request = CompletionRequest(
        model=config.single_chunk_model,
        system_prompt=SPEAKER_SYSTEM_PROMPT,
        user_prompt=f"Transcript:\n\n{transcript}",
        temperature=config.temperature,
        max_tokens=config.speaker_max_tokens,
        timeout=config.call_timeout_seconds,
    )
    try:
        response = client.complete(request)
    except Exception:
        logger.warning("Speaker attribution failed; using unlabelled transcript", exc_info=True)
        return transcript

    if response.truncated:
        logger.warning(
            "Speaker attribution of %d chars was cut off at max_tokens=%d; "
            "using unlabelled transcript",
            len(transcript),
            config.speaker_max_tokens,
        )
        return transcript

    labelled = response.text.strip()
    if not labelled:
        logger.warning("Speaker attribution returned no text; using unlabelled transcript")
        return transcript
    return labelled
