# examhall/schemas/evaluation.py
from pydantic import BaseModel

from examhall.schemas.question import QuestionPublic
from examhall.schemas.submission import StudentSummary, SubmissionWithAnswers
from examhall.schemas.test import TestPublic


class QuestionStat(BaseModel):
    question_id: int
    skip_percentage: float


class EvaluationData(BaseModel):
    """Everything a teacher needs to grade one submission."""
    submission: SubmissionWithAnswers
    student: StudentSummary
    test: TestPublic
    questions: list[QuestionPublic]
    question_stats: list[QuestionStat]
