"""Evaluation rubrics per question type and the feedback post-processor."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from src.analysis.models import AggregateResult, QuestionAnalysis

DEFAULT_QUESTION_TYPE = "technical"


@dataclass(frozen=True)
class Criterion:
    """One rubric dimension and its grading standards."""

    description: str
    excellent: str
    good: str
    fair: str
    poor: str

    def standard(self, grade: str) -> str:
        """Grading standard for one of ``GRADES``."""
        return getattr(self, grade)


GRADES = ("excellent", "good", "fair", "poor")

# "good: clear answer", "Fair - misses caching"; the grade must be followed
# by a separator so prose like "Good grasp of ..." is not read as a grade.
_GRADE_PREFIX = re.compile(r"^\s*(excellent|good|fair|poor)\s*(?:[:：\-–]\s*|$)", re.IGNORECASE)


def split_grade(comment: str) -> tuple[str | None, str]:
    """Split a leading grade off an evaluation comment.

    Returns ``(grade, rest)``; ``grade`` is ``None`` when the comment does
    not start with one.
    """
    match = _GRADE_PREFIX.match(comment)
    if not match:
        return None, comment.strip()
    return match.group(1).lower(), comment[match.end() :].strip()


# Keys match the fields of a question's ``evaluation`` object.
Criteria = dict[str, Criterion]

EVALUATION_STANDARDS: dict[str, Criteria] = {
    "algorithm": {
        "technicalAccuracy": Criterion(
            description="Correctness of the algorithm and its complexity analysis",
            excellent="Fully correct, accurate complexity analysis, handles edge cases",
            good="Mostly correct, complexity analysis roughly right, handles most cases",
            fair="Right idea but flawed implementation or imprecise complexity analysis",
            poor="Wrong approach or a broken implementation",
        ),
        "completeness": Criterion(
            description="Coverage of every requirement of the problem",
            excellent="Covers all requirements including edge cases and optimisations",
            good="Covers the main requirements and some edge cases",
            fair="Covers the basics but misses important details",
            poor="Covers only part of the problem and misses key points",
        ),
        "clarity": Criterion(
            description="Clarity of the reasoning and of the code",
            excellent="Clear reasoning, well structured and commented code",
            good="Reasoning mostly clear, readable code",
            fair="Reasoning hard to follow, average readability",
            poor="Confused reasoning, code hard to understand",
        ),
        "depth": Criterion(
            description="Understanding of the underlying algorithm and its optimisations",
            excellent="Deep understanding, proposes several optimisations",
            good="Understands the principle, proposes basic optimisations",
            fair="Basic understanding, few optimisation ideas",
            poor="Shallow understanding, no thought given to optimisation",
        ),
    },
    "system_design": {
        "technicalAccuracy": Criterion(
            description="Soundness of technology choices and architecture",
            excellent="Sound choices following best practice, designed to scale",
            good="Mostly sound choices and a reasonable architecture",
            fair="Some questionable choices, incomplete architecture",
            poor="Poor choices, architecture with major flaws",
        ),
        "completeness": Criterion(
            description="Breadth of the design",
            excellent="Covers function, performance, scalability and security",
            good="Covers the main concerns",
            fair="Misses important concerns",
            poor="Oversimplified, misses several key concerns",
        ),
        "clarity": Criterion(
            description="Clarity of the design and how it is communicated",
            excellent="Clear design, can sketch a clean architecture, precise wording",
            good="Mostly clear, gets the main points across",
            fair="Unclear in places, ambiguous wording",
            poor="Confused design, hard to follow",
        ),
        "depth": Criterion(
            description="Understanding of design principles and best practice",
            excellent="Deep understanding, proposes original solutions",
            good="Understands the principles and applies best practice",
            fair="Basic understanding, limited practical application",
            poor="Shallow understanding, lacks practical experience",
        ),
    },
    "technical": {
        "technicalAccuracy": Criterion(
            description="Accuracy of technical concepts and proposed implementation",
            excellent="Concepts fully correct, implementation feasible and efficient",
            good="Concepts mostly correct, implementation feasible",
            fair="Some conceptual errors, implementation roughly feasible",
            poor="Concepts wrong, implementation not feasible",
        ),
        "completeness": Criterion(
            description="Completeness of the answer",
            excellent="Covers every key point with concrete examples",
            good="Covers the main points",
            fair="Misses some key points",
            poor="Too brief, misses several key points",
        ),
        "clarity": Criterion(
            description="Logical structure and clarity of expression",
            excellent="Logical, precise and easy to follow",
            good="Mostly logical and precise",
            fair="Loosely structured, some ambiguity",
            poor="Disorganised and unclear",
        ),
        "depth": Criterion(
            description="Depth and breadth of technical understanding",
            excellent="Deep understanding, connects related technologies, own insights",
            good="Fairly deep, connects some related technologies",
            fair="Average understanding, few connections",
            poor="Superficial understanding",
        ),
    },
    "behavioral": {
        "technicalAccuracy": Criterion(
            description="Credibility of the experience and accuracy of its technical details",
            excellent="Credible account with specific, accurate technical details",
            good="Mostly credible, technical details mostly accurate",
            fair="Vague account, fuzzy technical details",
            poor="Implausible account or wrong technical details",
        ),
        "completeness": Criterion(
            description="Use of the STAR method and completeness of the answer",
            excellent="Full STAR structure, specific and complete",
            good="Mostly follows STAR, fairly complete",
            fair="Partial STAR structure, incomplete",
            poor="No STAR structure, too brief",
        ),
        "clarity": Criterion(
            description="Logic and storytelling",
            excellent="Clear logic, vivid and easy to follow story",
            good="Mostly clear, some narrative",
            fair="Unclear, weak narrative",
            poor="Disorganised, no narrative",
        ),
        "depth": Criterion(
            description="Depth of reflection and lessons learned",
            excellent="Deep reflection with meaningful takeaways",
            good="Reasonable reflection and summary",
            fair="Shallow reflection",
            poor="No reflection or takeaways",
        ),
    },
}


def _normalise_type(question_type: str) -> str:
    # "systemDesign", "System Design" and "system-design" all mean system_design
    snake = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", question_type.strip())
    return re.sub(r"[\s\-]+", "_", snake).lower()


def lookup_rubric(question_type: str | None) -> Criteria:
    """Return the rubric for *question_type*, falling back to ``technical``."""
    key = _normalise_type(question_type or "")
    return EVALUATION_STANDARDS.get(key, EVALUATION_STANDARDS[DEFAULT_QUESTION_TYPE])


def generate_feedback(question_type: str, evaluation: dict[str, Any], criteria: Criteria) -> str:
    """Render an evaluation against its rubric as standardized feedback text.

    One line per criterion: the criterion description followed by the
    evaluation's comment for it (blank when the model gave none). A comment
    that opens with a grade ("good: ...") is rendered with the rubric's
    standard for that grade.
    """
    lines = [f"[{_normalise_type(question_type) or DEFAULT_QUESTION_TYPE}]"]
    for key, criterion in criteria.items():
        grade, comment = split_grade(str(evaluation.get(key) or ""))
        if grade:
            graded = f"{grade} ({criterion.standard(grade)})"
            comment = f"{graded}. {comment}" if comment else graded
        lines.append(f"{criterion.description}: {comment}".rstrip())
    return "\n".join(lines)


def _with_feedback(entry: QuestionAnalysis) -> QuestionAnalysis:
    if not isinstance(entry.evaluation, dict):
        return entry
    criteria = lookup_rubric(entry.question_type)
    feedback = generate_feedback(entry.question_type, entry.evaluation, criteria)
    return entry.model_copy(update={"professional_feedback": feedback})


def apply_rubric(result: AggregateResult) -> AggregateResult:
    """Attach ``professional_feedback`` to every question carrying an evaluation.

    Returns a new result; *result* itself is left untouched.
    """
    return result.model_copy(
        update={"question_analysis": [_with_feedback(q) for q in result.question_analysis]}
    )
