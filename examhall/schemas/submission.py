# examhall/schemas/submission.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from examhall.schemas.test import TestSummary

SubmissionStatus = Literal["Pending", "Graded"]


class AnswerIn(BaseModel):
    question_id: int
    text: str | None = None
    image_url: str | None = None


class SubmitTestRequest(BaseModel):
    test_id: int
    answers: list[AnswerIn] = Field(default_factory=list)


class SubmitTestResponse(BaseModel):
    submission_id: int
    status: SubmissionStatus
    objective_score: int | None = None
    final_score: Decimal | None = None


class AnswerPublic(BaseModel):
    id: int
    question_id: int
    answer_text: str | None = None
    answer_image_url: str | None = None
    is_correct: bool | None = None

    model_config = {"from_attributes": True}


class SubmissionPublic(BaseModel):
    id: int
    test_id: int
    student_id: int
    submitted_at: datetime | None = None
    status: SubmissionStatus
    objective_score: int | None = None
    final_score: Decimal | None = None
    graded_at: datetime | None = None

    model_config = {"from_attributes": True}


class SubmissionWithAnswers(SubmissionPublic):
    answers: list[AnswerPublic] = []


class StudentSummary(BaseModel):
    id: int
    username: str
    email: EmailStr

    model_config = {"from_attributes": True}


class SubmissionDetails(BaseModel):
    """List-view row: a submission joined with its student and test."""
    id: int
    test_id: int
    submitted_at: datetime | None = None
    final_score: Decimal | None = None
    status: SubmissionStatus
    student: StudentSummary
    test: TestSummary | None = None
