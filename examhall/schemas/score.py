# examhall/schemas/score.py
from decimal import Decimal

from pydantic import BaseModel


class ScoreUpdate(BaseModel):
    """Teacher assigns the final score (0-100)."""
    final_score: Decimal


class ScorePublic(BaseModel):
    submission_id: int
    test_id: int
    student_id: int

    objective_score: int | None = None
    final_score: Decimal | None = None

    status: str

    model_config = {"from_attributes": True}
