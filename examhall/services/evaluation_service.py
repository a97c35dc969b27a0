# examhall/services/evaluation_service.py
import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy.orm import Session

from examhall.core.config import settings
from examhall.core.errors import NotFoundError
from examhall.models.question import Question
from examhall.models.submission import Answer, Submission
from examhall.models.test import Test
from examhall.models.user import User
from examhall.schemas.evaluation import EvaluationData, QuestionStat
from examhall.schemas.question import question_to_public
from examhall.schemas.submission import StudentSummary, SubmissionWithAnswers
from examhall.schemas.test import TestPublic
from examhall.services import question_service

logger = logging.getLogger(__name__)


def _answered_pairs(db: Session, test_id: int) -> Set[Tuple[int, int]]:
    """
    (submission_id, question_id) of every non-skipped answer to the test,
    in one query.
    """
    rows = (
        db.query(Answer.submission_id, Answer.question_id, Answer.answer_text, Answer.answer_image_url)
        .join(Submission, Submission.id == Answer.submission_id)
        .filter(Submission.test_id == test_id)
        .all()
    )
    return {
        (row.submission_id, row.question_id)
        for row in rows
        if row.answer_text is not None or row.answer_image_url
    }


def skip_statistics(
    db: Session,
    *,
    test_id: int,
    questions: Sequence[Question],
) -> List[QuestionStat]:
    """
    Share of all submissions to the test that skipped each question.

    A question is skipped by a submission when there is no answer for it,
    or the answer has neither text nor an image.
    """
    submission_ids = [
        row.id for row in db.query(Submission.id).filter(Submission.test_id == test_id)
    ]
    total = len(submission_ids)
    answered = _answered_pairs(db, test_id) if total else set()

    answered_count: Dict[int, int] = {}
    for _, question_id in answered:
        answered_count[question_id] = answered_count.get(question_id, 0) + 1

    stats = []
    for q in questions:
        if total == 0:
            pct = 0.0
        else:
            skipped = total - answered_count.get(q.id, 0)
            pct = round(skipped / total * 100, settings.SKIP_PERCENT_DECIMALS)
        stats.append(QuestionStat(question_id=q.id, skip_percentage=pct))
    return stats


def get_evaluation(db: Session, submission_id: int) -> EvaluationData:
    """
    Grading view of one submission: the submission with its answers, the
    student, the test, its questions and per-question skip rates.
    """
    submission: Optional[Submission] = db.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError(f"submission {submission_id} not found")

    student: Optional[User] = db.get(User, submission.student_id)
    test: Optional[Test] = db.get(Test, submission.test_id)
    if student is None or test is None:
        raise NotFoundError(
            f"student or test for submission {submission_id} not found"
        )

    questions = question_service.questions_for_test(db, test.id)
    stats = skip_statistics(db, test_id=test.id, questions=questions)

    logger.debug(
        f"Built evaluation for submission {submission_id}: "
        f"{len(questions)} questions, {len(submission.answers)} answers"
    )
    return EvaluationData(
        submission=SubmissionWithAnswers.model_validate(submission),
        student=StudentSummary.model_validate(student),
        test=TestPublic.model_validate(test),
        questions=[question_to_public(q) for q in questions],
        question_stats=stats,
    )
