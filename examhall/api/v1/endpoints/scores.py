# examhall/api/v1/endpoints/scores.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from examhall.db.session import get_db
from examhall.models.submission import Submission
from examhall.models.user import User
from examhall.schemas.evaluation import EvaluationData
from examhall.schemas.score import ScoreUpdate, ScorePublic
from examhall.services import (
    evaluation_service,
    question_service,
    scoring_service,
    submission_service,
)
from examhall.core.security import get_current_teacher

router = APIRouter(prefix="/scores", tags=["scores"])


def _submission_to_score_public(sub: Submission) -> ScorePublic:
    return ScorePublic(
        submission_id=sub.id,
        test_id=sub.test_id,
        student_id=sub.student_id,
        objective_score=sub.objective_score,
        final_score=sub.final_score,
        status=sub.status,
    )


def _check_owner(db: Session, submission_id: int, teacher: User) -> None:
    sub = submission_service.get_submission(db, submission_id)
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")

    # the submission's test must belong to the current teacher
    test = question_service.get_test(db, sub.test_id)
    if test is None:
        raise HTTPException(status_code=404, detail="Test not found")
    if test.created_by != teacher.id:
        raise HTTPException(status_code=403, detail="Not allowed to grade this submission")


@router.get("/{submission_id}/evaluation", response_model=EvaluationData)
def get_evaluation(
    submission_id: int,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    """
    Everything needed to grade one submission, with skip rates per question.
    """
    _check_owner(db, submission_id, current_teacher)
    return evaluation_service.get_evaluation(db, submission_id)


@router.put("/{submission_id}", response_model=ScorePublic)
def grade_submission(
    submission_id: int,
    score_in: ScoreUpdate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    """
    Teacher sets the final score:
      - final_score in [0, 100]
      - status -> 'Graded' (re-grading overwrites)
    """
    _check_owner(db, submission_id, current_teacher)
    updated = scoring_service.grade_submission(
        db,
        submission_id=submission_id,
        final_score=score_in.final_score,
        grader=current_teacher,
    )
    return _submission_to_score_public(updated)
