# examhall/services/scoring_service.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from examhall.core.errors import NotFoundError, PersistenceError, ValidationError
from examhall.models.question import Question
from examhall.models.submission import STATUS_GRADED, Submission
from examhall.models.user import User
from examhall.services import grading_events

logger = logging.getLogger(__name__)

MIN_SCORE = Decimal(0)
MAX_SCORE = Decimal(100)


@dataclass
class ObjectiveScore:
    objective_score: Optional[int]
    objective_count: int
    correct_count: int
    # question_id -> True/False, objective answers only
    correctness: dict[int, bool] = field(default_factory=dict)


def percentage(part: int, whole: int) -> int:
    """Rounded percentage, halves rounded up."""
    return math.floor(part / whole * 100 + 0.5)


def score_objective_answers(
    answers: Iterable[tuple[int, Optional[str]]],
    questions: Sequence[Question],
) -> ObjectiveScore:
    """
    Score the objective questions of a test.

    ``answers`` are ``(question_id, text)`` pairs. An answer is correct only
    when its text equals the question's correct answer exactly. Only the
    answers given count towards the total; a question the student never
    touched is left out, so no objective answers at all gives ``None``.
    Marks are not used as weights.
    """
    objective = {q.id: q for q in questions if q.is_objective}
    given = {question_id: text for question_id, text in answers}

    correctness: dict[int, bool] = {}
    for question_id, text in given.items():
        question = objective.get(question_id)
        if question is not None:
            correctness[question_id] = text == question.correct_answer

    total = len(correctness)
    correct = sum(1 for ok in correctness.values() if ok)
    score = percentage(correct, total) if total > 0 else None
    return ObjectiveScore(
        objective_score=score,
        objective_count=total,
        correct_count=correct,
        correctness=correctness,
    )


def grade_submission(
    db: Session,
    *,
    submission_id: int,
    final_score: Decimal | float | int,
    grader: User | None = None,
) -> Submission:
    """
    Teacher assigns the final score: status -> 'Graded'.

    Already graded submissions are overwritten (last write wins); the
    re-grade is logged and reported to grading_events listeners.
    """
    score = Decimal(str(final_score))
    if not score.is_finite() or score < MIN_SCORE or score > MAX_SCORE:
        raise ValidationError(f"final score must be between 0 and 100, got {final_score}")

    submission: Optional[Submission] = db.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError(f"submission {submission_id} not found")

    previous_status = submission.status
    previous_score = submission.final_score
    regrade = previous_status == STATUS_GRADED

    submission.final_score = score
    submission.status = STATUS_GRADED
    submission.graded_by = grader.id if grader is not None else None
    submission.graded_at = datetime.now(timezone.utc)

    try:
        db.add(submission)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to grade submission {submission_id}: {e}")
        raise PersistenceError(f"could not grade submission {submission_id}") from e
    db.refresh(submission)

    # the stored value, quantized by the Numeric(5, 2) column
    stored = submission.final_score
    if regrade:
        logger.warning(
            f"Submission {submission_id} re-graded: {previous_score} -> {stored}"
        )
    else:
        logger.info(f"Submission {submission_id} graded: {stored}")

    grading_events.emit(
        grading_events.GradingEvent(
            submission_id=submission.id,
            previous_status=previous_status,
            previous_score=previous_score,
            final_score=stored,
            grader_id=submission.graded_by,
            regrade=regrade,
        )
    )
    return submission
