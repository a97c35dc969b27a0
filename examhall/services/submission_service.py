# examhall/services/submission_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from examhall.core.errors import PersistenceError, ValidationError
from examhall.models.question import SUBJECTIVE
from examhall.models.submission import (
    STATUS_GRADED,
    STATUS_PENDING,
    Answer,
    Submission,
)
from examhall.models.test import Test
from examhall.models.user import User
from examhall.schemas.submission import (
    AnswerIn,
    StudentSummary,
    SubmissionDetails,
)
from examhall.schemas.test import TestSummary
from examhall.services import question_service
from examhall.services.scoring_service import score_objective_answers

logger = logging.getLogger(__name__)


def _normalize_text(text: Optional[str]) -> Optional[str]:
    # an empty answer is stored as a skip
    return text or None


def submit_test(
    db: Session,
    *,
    test_id: int,
    student_id: int,
    answers: Sequence[AnswerIn],
) -> Submission:
    """
    Student hands in a test.

    - objective answers are scored immediately
    - a test without subjective questions is graded on the spot
      (final_score = objective_score, status 'Graded')
    - otherwise status 'Pending' until a teacher grades it

    The submission and its answers are written in one transaction.
    """
    test: Optional[Test] = question_service.get_test(db, test_id)
    if test is None:
        raise ValidationError(f"test {test_id} does not exist")

    student: Optional[User] = db.get(User, student_id)
    if student is None:
        raise ValidationError(f"student {student_id} does not exist")
    if student.role != "student":
        raise ValidationError(f"user {student_id} is not a student")

    questions = question_service.questions_for_test(db, test_id)
    question_ids = {q.id for q in questions}

    seen: set[int] = set()
    for ans in answers:
        if ans.question_id not in question_ids:
            raise ValidationError(
                f"question {ans.question_id} does not belong to test {test_id}"
            )
        if ans.question_id in seen:
            raise ValidationError(f"question {ans.question_id} answered twice")
        seen.add(ans.question_id)

    result = score_objective_answers(
        ((ans.question_id, _normalize_text(ans.text)) for ans in answers),
        questions,
    )

    has_subjective = any(q.kind == SUBJECTIVE for q in questions)
    now = datetime.now(timezone.utc)

    submission = Submission(
        test_id=test_id,
        student_id=student_id,
        submitted_at=now,
        objective_score=result.objective_score,
        final_score=None if has_subjective else result.objective_score,
        status=STATUS_PENDING if has_subjective else STATUS_GRADED,
        graded_at=None if has_subjective else now,
    )

    try:
        db.add(submission)
        db.flush()  # assigns submission.id
        for ans in answers:
            db.add(
                Answer(
                    submission_id=submission.id,
                    question_id=ans.question_id,
                    answer_text=_normalize_text(ans.text),
                    answer_image_url=ans.image_url or None,
                    is_correct=result.correctness.get(ans.question_id),
                )
            )
        db.commit()
    except SQLAlchemyError as e:
        # nothing from this submission survives the rollback
        db.rollback()
        logger.error(
            f"Failed to store submission of test {test_id} "
            f"by student {student_id}: {e}"
        )
        raise PersistenceError("could not store submission") from e

    db.refresh(submission)
    logger.info(
        f"Student {student_id} submitted test {test_id}: submission {submission.id}, "
        f"objective {result.correct_count}/{result.objective_count}, "
        f"status {submission.status}"
    )
    return submission


def get_submission(db: Session, submission_id: int) -> Optional[Submission]:
    return db.get(Submission, submission_id)


def _to_details(
    submission: Submission,
    student: Optional[User],
    test: Optional[Test],
    *,
    require_test: bool,
) -> Optional[SubmissionDetails]:
    if student is None or (require_test and test is None):
        logger.warning(
            f"Dropping submission {submission.id} from listing: "
            f"student or test missing"
        )
        return None
    return SubmissionDetails(
        id=submission.id,
        test_id=submission.test_id,
        submitted_at=submission.submitted_at,
        final_score=submission.final_score,
        status=submission.status,
        student=StudentSummary.model_validate(student),
        test=TestSummary.model_validate(test) if test is not None else None,
    )


def _details_for(
    db: Session,
    submissions: List[Submission],
    *,
    require_test: bool,
) -> List[SubmissionDetails]:
    student_ids = {s.student_id for s in submissions}
    test_ids = {s.test_id for s in submissions}
    students = {
        u.id: u for u in db.query(User).filter(User.id.in_(student_ids))
    } if student_ids else {}
    tests = {
        t.id: t for t in db.query(Test).filter(Test.id.in_(test_ids))
    } if test_ids else {}

    rows = []
    for sub in submissions:
        row = _to_details(
            sub,
            students.get(sub.student_id),
            tests.get(sub.test_id),
            require_test=require_test,
        )
        if row is not None:
            rows.append(row)
    return rows


def list_submissions_for_test(db: Session, *, test_id: int) -> List[SubmissionDetails]:
    """
    Teacher: every submission to one test, newest first.
    """
    subs = (
        db.query(Submission)
        .filter(Submission.test_id == test_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )
    return _details_for(db, subs, require_test=False)


def list_submissions_for_student(
    db: Session, *, student_id: int
) -> List[SubmissionDetails]:
    """
    Student: own results, newest first.
    """
    subs = (
        db.query(Submission)
        .filter(Submission.student_id == student_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )
    return _details_for(db, subs, require_test=True)


def list_submissions_for_teacher(
    db: Session, *, teacher_id: int
) -> List[SubmissionDetails]:
    """
    Teacher: submissions to all of the teacher's tests, newest first.
    """
    test_ids = select(Test.id).where(Test.created_by == teacher_id)
    subs = (
        db.query(Submission)
        .filter(Submission.test_id.in_(test_ids))
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )
    return _details_for(db, subs, require_test=True)
