from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from classroom.models import Activity, Answer, EssayQuestion, MultipleChoiceQuestion, StudentAnswer


@dataclass
class ScoredSubmission:
    answers: list[StudentAnswer]
    total_points: int
    max_points: int
    grade: int


def calculate_grade(total_points: int, max_points: int) -> int:
    """Integer percentage, rounded half away from zero; 0 when nothing is gradable."""
    if max_points == 0:
        return 0
    ratio = Decimal(100) * Decimal(total_points) / Decimal(max_points)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def score_answer(question: MultipleChoiceQuestion | EssayQuestion, answer: Answer) -> StudentAnswer:
    if isinstance(question, MultipleChoiceQuestion):
        is_correct = answer == question.correct_answer and not isinstance(answer, bool)
        return StudentAnswer(
            question_id=question.id,
            answer=answer,
            is_correct=is_correct,
            points=question.points if is_correct else 0,
        )
    # Essays get full credit; there is no manual regrading step.
    return StudentAnswer(question_id=question.id, answer=answer, points=question.points)


def score_submission(activity: Activity, answers_by_question_id: Mapping[str, Answer]) -> ScoredSubmission:
    """Score every question of ``activity``; answers are matched by question id.

    Every question must have an answer, a missing one raises ``KeyError``.
    """
    answers = [
        score_answer(question, answers_by_question_id[question.id])
        for question in activity.questions
    ]
    total_points = sum(answer.points for answer in answers)
    max_points = activity.max_points
    return ScoredSubmission(
        answers=answers,
        total_points=total_points,
        max_points=max_points,
        grade=calculate_grade(total_points, max_points),
    )
