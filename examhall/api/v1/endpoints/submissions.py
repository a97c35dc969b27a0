# examhall/api/v1/endpoints/submissions.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from examhall.db.session import get_db
from examhall.models.user import User
from examhall.schemas.submission import (
    SubmissionDetails,
    SubmissionWithAnswers,
    SubmitTestRequest,
    SubmitTestResponse,
)
from examhall.services import question_service, submission_service
from examhall.core.security import get_current_student, get_current_teacher

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.post("/", response_model=SubmitTestResponse, status_code=status.HTTP_201_CREATED)
def submit_test(
    obj_in: SubmitTestRequest,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    """
    Student hands in a test; objective questions are scored right away.
    """
    sub = submission_service.submit_test(
        db,
        test_id=obj_in.test_id,
        student_id=current_student.id,
        answers=obj_in.answers,
    )
    return SubmitTestResponse(
        submission_id=sub.id,
        status=sub.status,
        objective_score=sub.objective_score,
        final_score=sub.final_score,
    )


@router.get("/me", response_model=List[SubmissionDetails])
def list_my_submissions(
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    """
    Student results, newest first.
    """
    return submission_service.list_submissions_for_student(
        db, student_id=current_student.id
    )


@router.get("/teacher", response_model=List[SubmissionDetails])
def list_teacher_submissions(
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    """
    Submissions to all tests of the current teacher.
    """
    return submission_service.list_submissions_for_teacher(
        db, teacher_id=current_teacher.id
    )


@router.get("/test/{test_id}", response_model=List[SubmissionDetails])
def list_test_submissions(
    test_id: int,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    test = question_service.get_test(db, test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test not found")

    if test.created_by != current_teacher.id:
        raise HTTPException(status_code=403, detail="Not allowed to view these submissions")

    return submission_service.list_submissions_for_test(db, test_id=test_id)


@router.get("/{submission_id}", response_model=SubmissionWithAnswers)
def get_my_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    """
    Student views one of their own submissions.
    """
    sub = submission_service.get_submission(db, submission_id)
    if not sub or sub.student_id != current_student.id:
        raise HTTPException(status_code=404, detail="Submission not found")
    return sub
