"""Tests for rubric lookup and professional feedback post-processing."""

from __future__ import annotations

import pytest

from src.analysis.models import AggregateResult, QuestionAnalysis
from src.analysis.rubric import (
    EVALUATION_STANDARDS,
    apply_rubric,
    generate_feedback,
    lookup_rubric,
    split_grade,
)


class TestLookupRubric:
    @pytest.mark.parametrize("question_type", ["algorithm", "system_design", "behavioral", "technical"])
    def test_known_types(self, question_type: str) -> None:
        assert lookup_rubric(question_type) is EVALUATION_STANDARDS[question_type]

    @pytest.mark.parametrize("question_type", ["systemDesign", "System Design", "system-design"])
    def test_spelling_variants(self, question_type: str) -> None:
        assert lookup_rubric(question_type) is EVALUATION_STANDARDS["system_design"]

    @pytest.mark.parametrize("question_type", ["trivia", "", None])
    def test_unknown_falls_back_to_technical(self, question_type: str | None) -> None:
        assert lookup_rubric(question_type) is EVALUATION_STANDARDS["technical"]

    def test_every_rubric_has_four_criteria(self) -> None:
        for criteria in EVALUATION_STANDARDS.values():
            assert set(criteria) == {"technicalAccuracy", "completeness", "clarity", "depth"}


class TestGenerateFeedback:
    def test_one_line_per_criterion(self) -> None:
        criteria = lookup_rubric("algorithm")
        feedback = generate_feedback(
            "algorithm",
            {"technicalAccuracy": "Correct O(n log n) analysis", "clarity": "Well explained"},
            criteria,
        )
        lines = feedback.split("\n")
        assert lines[0] == "[algorithm]"
        assert len(lines) == 1 + len(criteria)
        assert f"{criteria['technicalAccuracy'].description}: Correct O(n log n) analysis" in lines
        assert criteria["depth"].description + ":" in lines

    def test_graded_comment_quotes_standard(self) -> None:
        criteria = lookup_rubric("technical")
        feedback = generate_feedback(
            "technical",
            {"technicalAccuracy": "Good: knows the event loop", "depth": "poor"},
            criteria,
        )
        lines = feedback.split("\n")
        accuracy = criteria["technicalAccuracy"]
        depth = criteria["depth"]
        assert f"{accuracy.description}: good ({accuracy.good}). knows the event loop" in lines
        assert f"{depth.description}: poor ({depth.poor})" in lines

    @pytest.mark.parametrize(
        "comment, expected",
        [
            ("excellent: thorough", ("excellent", "thorough")),
            ("Fair - misses caching", ("fair", "misses caching")),
            ("良好", (None, "良好")),
            ("Good grasp of closures", (None, "Good grasp of closures")),
        ],
    )
    def test_split_grade(self, comment: str, expected: tuple[str | None, str]) -> None:
        assert split_grade(comment) == expected

    def test_unknown_type_labelled_technical(self) -> None:
        feedback = generate_feedback("", {}, lookup_rubric(""))
        assert feedback.startswith("[technical]")


class TestApplyRubric:
    def test_only_entries_with_evaluation_get_feedback(self) -> None:
        result = AggregateResult(
            question_analysis=[
                QuestionAnalysis(
                    question="Reverse a linked list",
                    question_type="algorithm",
                    evaluation={"technicalAccuracy": "Correct"},
                ),
                QuestionAnalysis(question="Tell me about yourself", question_type="behavioral"),
            ]
        )
        enriched = apply_rubric(result)

        first, second = enriched.question_analysis
        assert first.professional_feedback is not None
        assert "Correct" in first.professional_feedback
        assert second.professional_feedback is None

    def test_prose_evaluation_left_without_feedback(self) -> None:
        result = AggregateResult(question_analysis=[QuestionAnalysis(question="Q", evaluation="good")])
        assert apply_rubric(result).question_analysis[0].professional_feedback is None

    def test_original_result_untouched(self) -> None:
        entry = QuestionAnalysis(question="Design a URL shortener", evaluation={"depth": "ok"})
        result = AggregateResult(question_analysis=[entry])
        apply_rubric(result)
        assert result.question_analysis[0].professional_feedback is None

    def test_serialized_as_camel_case(self) -> None:
        result = apply_rubric(
            AggregateResult(question_analysis=[QuestionAnalysis(question="Q", evaluation={})])
        )
        dumped = result.model_dump(by_alias=True)
        assert "professionalFeedback" in dumped["questionAnalysis"][0]
