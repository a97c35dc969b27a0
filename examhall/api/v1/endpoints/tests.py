# examhall/api/v1/endpoints/tests.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from examhall.db.session import get_db
from examhall.models.user import User
from examhall.schemas.question import (
    QuestionPublic,
    StudentQuestion,
    question_for_student,
    question_to_public,
)
from examhall.schemas.test import TestCreate, TestPublic
from examhall.services import question_service
from examhall.core.security import get_current_teacher, get_current_user

router = APIRouter(prefix="/tests", tags=["tests"])


@router.post("/", response_model=TestPublic, status_code=status.HTTP_201_CREATED)
def create_test(
    obj_in: TestCreate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    """
    Teacher creates a test with its questions.
    """
    return question_service.create_test(db, teacher=current_teacher, obj_in=obj_in)


@router.get("/", response_model=List[TestPublic])
def list_tests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),  # students and teachers
    skip: int = 0,
    limit: int = 100,
):
    return question_service.list_tests(db, skip=skip, limit=limit)


@router.get("/mine", response_model=List[TestPublic])
def list_my_tests(
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    return question_service.list_tests_for_teacher(db, teacher_id=current_teacher.id)


@router.get("/{test_id}", response_model=TestPublic)
def get_test(
    test_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    test = question_service.get_test(db, test_id)
    if not test:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Test not found",
        )
    return test


@router.get("/{test_id}/questions", response_model=List[StudentQuestion])
def list_test_questions(
    test_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Questions as shown while taking the test (no correct answers).
    """
    test = question_service.get_test(db, test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test not found")

    questions = question_service.questions_for_test(db, test_id)
    return [question_for_student(q) for q in questions]


@router.get("/{test_id}/questions/full", response_model=List[QuestionPublic])
def list_test_questions_with_keys(
    test_id: int,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    """
    Owning teacher sees the questions including correct answers.
    """
    test = question_service.get_test(db, test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test not found")

    if test.created_by != current_teacher.id:
        raise HTTPException(status_code=403, detail="Not allowed to view this test")

    questions = question_service.questions_for_test(db, test_id)
    return [question_to_public(q) for q in questions]


@router.delete("/{test_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_test(
    test_id: int,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    """
    Teacher deletes a test together with its questions and submissions.
    """
    test = question_service.get_test(db, test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test not found")

    if test.created_by != current_teacher.id:
        raise HTTPException(status_code=403, detail="Not allowed to delete this test")

    question_service.delete_test(db, test=test)
    return None
