"""Data models for interview analysis results.

The models mirror the JSON the analyzer asks Claude to produce. Field names
are snake_case in Python and camelCase on the wire (``overallScore``,
``questionAnalysis`` ...). Keys the model invents are kept, not rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="allow",
    )


def _flatten_text(value: Any) -> Any:
    """Collapse list / object values the model sometimes emits for a text field."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, list):
        return "; ".join(str(_flatten_text(v)) for v in value if v is not None)
    if isinstance(value, dict):
        return "; ".join(f"{k}: {_flatten_text(v)}" for k, v in value.items() if v is not None)
    return value


class _TextModel(_WireModel):
    """Wire model whose declared fields are all free text."""

    @field_validator("*", mode="before")
    @classmethod
    def _lenient_text(cls, value: Any) -> Any:
        return "" if value is None else _flatten_text(value)


class Strength(_TextModel):
    category: str = ""
    description: str = ""
    evidence: str = ""


class Weakness(_TextModel):
    category: str = ""
    description: str = ""
    impact: str = ""
    improvement: str = ""


class Suggestion(_TextModel):
    priority: str = ""
    category: str = ""
    suggestion: str = ""
    actionable: str = ""


class QuestionAnalysis(_WireModel):
    """Breakdown of a single interview question."""

    question: str = ""
    answer: str = ""
    question_type: str = ""  # algorithm | system_design | behavioral | technical
    difficulty: str = ""  # easy | medium | hard
    priority: str = ""  # high | medium | low
    recommended_answer: str | dict[str, Any] = ""
    # Per-criterion comments; a model that answers with plain prose keeps it as text.
    evaluation: dict[str, Any] | str | None = None
    professional_feedback: str | None = None

    @field_validator("question", "answer", "question_type", "difficulty", "priority", mode="before")
    @classmethod
    def _lenient_text(cls, value: Any) -> Any:
        return "" if value is None else _flatten_text(value)

    @field_validator("recommended_answer", mode="before")
    @classmethod
    def _lenient_answer(cls, value: Any) -> Any:
        if value is None:
            return ""
        return _flatten_text(value) if isinstance(value, list) else value

    @field_validator("evaluation", mode="before")
    @classmethod
    def _lenient_evaluation(cls, value: Any) -> Any:
        if value is None or isinstance(value, dict):
            return value
        return _flatten_text(value) if isinstance(value, list) else str(value)


class ComprehensiveFeedback(_TextModel):
    technical_assessment: str = ""
    communication_skills: str = ""
    learning_potential: str = ""
    experience_evaluation: str = ""
    overall_impression: str = ""
    key_highlights: str = ""
    main_concerns: str = ""
    recommendation: str = ""


# Primary text field for each list section; a bare string in the model
# output is read as that field.
_PRIMARY_FIELDS: dict[str, str] = {
    "strengths": "description",
    "weaknesses": "description",
    "suggestions": "suggestion",
    "question_analysis": "question",
}


class AnalysisSections(_WireModel):
    """The list sections and narrative block shared by chunk and aggregate results."""

    strengths: list[Strength] = Field(default_factory=list)
    weaknesses: list[Weakness] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    question_analysis: list[QuestionAnalysis] = Field(default_factory=list)
    comprehensive_feedback: ComprehensiveFeedback = Field(default_factory=ComprehensiveFeedback)

    @field_validator("strengths", "weaknesses", "suggestions", "question_analysis", mode="before")
    @classmethod
    def _wrap_bare_strings(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        key = _PRIMARY_FIELDS[info.field_name]
        items = []
        for item in value:
            if isinstance(item, dict):
                items.append(item)
            elif isinstance(item, (str, int, float)):
                items.append({key: item})
            # nulls and nested lists carry nothing usable; drop just that item
        return items

    @field_validator("comprehensive_feedback", mode="before")
    @classmethod
    def _none_feedback(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, str):
            return {"overall_impression": value}
        return value


class ChunkAnalysisResult(AnalysisSections):
    """Parsed output of one analysis call for one chunk.

    Always well-formed: every list defaults to empty, every string to ``""``
    and ``overall_score`` to 0.
    """

    overall_score: float = 0.0

    @field_validator("overall_score", mode="before")
    @classmethod
    def _none_score(cls, value: Any) -> Any:
        if value is None:
            return 0.0
        if isinstance(value, str):
            try:
                return float(value.strip().rstrip("%") or 0)
            except ValueError:
                return 0.0
        return value

    @classmethod
    def empty(cls) -> ChunkAnalysisResult:
        """The canonical zero value used whenever a chunk cannot be analyzed."""
        return cls()


class AggregateResult(AnalysisSections):
    """Final analysis returned to the caller.

    ``overall_score`` is only set on the single-chunk path; chunk-local
    scores are not comparable, so merged results carry ``None``.
    """

    overall_score: float | None = None

    @classmethod
    def from_chunk(cls, result: ChunkAnalysisResult) -> AggregateResult:
        return cls(
            overall_score=result.overall_score,
            strengths=list(result.strengths),
            weaknesses=list(result.weaknesses),
            suggestions=list(result.suggestions),
            question_analysis=list(result.question_analysis),
            comprehensive_feedback=result.comprehensive_feedback,
        )


@dataclass(frozen=True)
class ParseError:
    """Why a model response could not be turned into a ChunkAnalysisResult."""

    reason: str
    raw: str = ""
