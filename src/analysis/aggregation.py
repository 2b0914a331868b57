"""Merge per-chunk analysis results into one aggregate result."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from src.analysis.models import AggregateResult, AnalysisSections, ComprehensiveFeedback

T = TypeVar("T")

# Primary content fields, in priority order, used as the dedup identity.
_KEY_FIELDS = ("description", "suggestion", "question")


def content_key(item: Any) -> str | None:
    """Return the dedup key of a strength, weakness or suggestion.

    Exact string value of the first present primary field. No normalisation:
    differently phrased duplicates from separate chunks are kept apart.
    """
    for name in _KEY_FIELDS:
        value = getattr(item, name, None)
        if value is not None:
            return value
    return None


def question_key(item: Any) -> str:
    """Dedup key of a question entry: the question, trimmed and lowercased."""
    return (getattr(item, "question", None) or "").strip().lower()


def dedupe(items: Iterable[T], key: Callable[[T], Any]) -> list[T]:
    """Keep the first item for each key, preserving order."""
    seen: set[Any] = set()
    unique: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        unique.append(item)
    return unique


def _merge_feedback(blocks: Iterable[ComprehensiveFeedback]) -> ComprehensiveFeedback:
    """Per field, the last non-empty value wins."""
    merged: dict[str, str] = {}
    for block in blocks:
        for name in ComprehensiveFeedback.model_fields:
            value = getattr(block, name)
            if value:
                merged[name] = value
    return ComprehensiveFeedback(**merged)


def merge_results(results: Sequence[AnalysisSections]) -> AggregateResult:
    """Merge chunk results, in chunk order, into one AggregateResult.

    Strengths, weaknesses and suggestions are deduplicated on their primary
    text; questions on the normalised question text. The first occurrence
    wins in every section, so the merge is associative as long as the
    inputs keep their chunk order. ``overall_score`` is not carried over.

    Args:
        results: Chunk (or previously merged) results in chunk order.

    Returns:
        The merged result; all sections empty when *results* is empty.
    """
    return AggregateResult(
        strengths=dedupe((s for r in results for s in r.strengths), content_key),
        weaknesses=dedupe((w for r in results for w in r.weaknesses), content_key),
        suggestions=dedupe((s for r in results for s in r.suggestions), content_key),
        question_analysis=dedupe((q for r in results for q in r.question_analysis), question_key),
        comprehensive_feedback=_merge_feedback(r.comprehensive_feedback for r in results),
    )
