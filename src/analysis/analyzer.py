"""Claude-powered analysis of a single transcript chunk.

Each chunk is sent with a position-aware system prompt. The JSON the model
returns is validated into a :class:`ChunkAnalysisResult`; anything that goes
wrong (call failure, timeout, malformed JSON) degrades that chunk to an
empty result instead of failing the request.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from src.analysis.models import ChunkAnalysisResult, ParseError
from src.llm.client import JSON_OBJECT, CompletionRequest, LLMClient
from src.pipeline_config import AnalysisConfig

logger = logging.getLogger(__name__)

MAX_HIGH_PRIORITY = 5

RESPONSE_SCHEMA = """\
{
  "overallScore": <number 0-100>,
  "strengths": [
    {"category": "...", "description": "...", "evidence": "quote or paraphrase from the transcript"}
  ],
  "weaknesses": [
    {"category": "...", "description": "...", "impact": "...", "improvement": "..."}
  ],
  "suggestions": [
    {"priority": "high|medium|low", "category": "...", "suggestion": "...", "actionable": "concrete next step"}
  ],
  "questionAnalysis": [
    {
      "question": "the interviewer's question",
      "answer": "the candidate's answer",
      "questionType": "algorithm|system_design|behavioral|technical",
      "difficulty": "easy|medium|hard",
      "priority": "high|medium|low",
      "recommendedAnswer": "a strong model answer",
      "evaluation": {
        "technicalAccuracy": "excellent|good|fair|poor: comment",
        "completeness": "excellent|good|fair|poor: comment",
        "clarity": "excellent|good|fair|poor: comment",
        "depth": "excellent|good|fair|poor: comment",
        "specificFeedback": "...",
        "missingPoints": "...",
        "strengths": "...",
        "improvements": "..."
      }
    }
  ],
  "comprehensiveFeedback": {
    "technicalAssessment": "...",
    "communicationSkills": "...",
    "learningPotential": "...",
    "experienceEvaluation": "...",
    "overallImpression": "...",
    "keyHighlights": "...",
    "mainConcerns": "...",
    "recommendation": "..."
  }
}"""

RUBRIC = f"""\
Classification rules:
- questionType: "algorithm" (coding, data structures, complexity), \
"system_design" (architecture, scalability, trade-offs), "behavioral" \
(past experience, teamwork, motivation), "technical" (any other technical \
knowledge question).
- difficulty: "easy", "medium" or "hard", judged for the role being interviewed for.
- priority: "high", "medium" or "low" by how much addressing it would change \
the interview outcome. Mark at most {MAX_HIGH_PRIORITY} items "high" in the \
whole response.

Write all free text in the language of the transcript. Base every statement \
on the transcript; do not invent questions or answers."""

SINGLE_CHUNK_SYSTEM_PROMPT = (
    "You are a senior interviewer reviewing a job interview transcript. "
    "Analyze the interview below and evaluate the candidate.\n\n"
    f"{RUBRIC}\n\nRespond with a JSON object with exactly this structure:\n{RESPONSE_SCHEMA}"
)

MULTI_CHUNK_SYSTEM_PROMPT = (
    "You are a senior interviewer reviewing a long job interview transcript "
    "that has been split into parts. This is part {index} of {total}. Analyze "
    "only the content of this part. Do not assume it is the complete "
    "interview: questions may have started in an earlier part or continue in "
    "a later one, so judge what is present here without penalizing what "
    "happens elsewhere.\n\n"
)


def build_system_prompt(index: int, total: int) -> str:
    """Return the system prompt for chunk *index* of *total* (1-based)."""
    if total <= 1:
        return SINGLE_CHUNK_SYSTEM_PROMPT
    return (
        MULTI_CHUNK_SYSTEM_PROMPT.format(index=index, total=total)
        + f"{RUBRIC}\n\nRespond with a JSON object with exactly this structure:\n{RESPONSE_SCHEMA}"
    )


def build_user_prompt(chunk_text: str, index: int, total: int) -> str:
    if total <= 1:
        return f"Interview transcript:\n\n{chunk_text}"
    return f"Interview transcript, part {index} of {total}:\n\n{chunk_text}"


def _strip_fences(text: str) -> str:
    """Remove markdown code fences around a JSON payload."""
    text = text.strip()
    if text.startswith("```"):
        lines = [ln for ln in text.split("\n") if not ln.strip().startswith("```")]
        text = "\n".join(lines)
    return text


def parse_chunk_response(raw: str) -> ChunkAnalysisResult | ParseError:
    """Parse the model's raw text into a validated ChunkAnalysisResult.

    Returns a :class:`ParseError` instead of raising when the text is not a
    JSON object or does not fit the result schema.
    """
    text = _strip_fences(raw)
    if not text:
        return ParseError("empty response", raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return ParseError(f"invalid JSON: {exc}", raw)
    if not isinstance(data, dict):
        return ParseError(f"expected a JSON object, got {type(data).__name__}", raw)
    try:
        return ChunkAnalysisResult.model_validate(data)
    except ValidationError as exc:
        return ParseError(f"schema mismatch: {exc.error_count()} error(s)", raw)


def analyze_chunk(
    chunk_text: str,
    index: int,
    total: int,
    client: LLMClient,
    config: AnalysisConfig,
) -> ChunkAnalysisResult:
    """Analyze one chunk of a transcript.

    Args:
        chunk_text: The chunk's text.
        index: 1-based position of the chunk.
        total: Number of chunks in the transcript.
        client: LLM client used for the call.
        config: Pipeline configuration (models, budgets, timeout).

    Returns:
        The parsed result, or ``ChunkAnalysisResult.empty()`` if the call
        failed or its output could not be parsed. Never raises for LLM or
        parse failures.
    """
    profile = config.profile_for(total)
    request = CompletionRequest(
        model=profile.model,
        system_prompt=build_system_prompt(index, total),
        user_prompt=build_user_prompt(chunk_text, index, total),
        temperature=config.temperature,
        max_tokens=profile.max_tokens,
        response_format=JSON_OBJECT,
        timeout=config.call_timeout_seconds,
    )

    try:
        response = client.complete(request)
    except Exception as exc:
        logger.warning("Analysis call failed for chunk %d/%d: %s", index, total, exc)
        return ChunkAnalysisResult.empty()

    parsed = parse_chunk_response(response.text)
    if isinstance(parsed, ParseError):
        logger.warning(
            "Unparseable analysis for chunk %d/%d (%s): %.200r",
            index,
            total,
            parsed.reason,
            parsed.raw,
        )
        return ChunkAnalysisResult.empty()
    return parsed
