# examhall/schemas/test.py
from datetime import datetime

from pydantic import BaseModel, Field

from examhall.schemas.question import QuestionCreate


class TestCreate(BaseModel):
    title: str = Field(..., min_length=5)
    description: str = Field(..., min_length=10)
    subject: str = Field(..., min_length=3)
    time_limit: int = Field(..., gt=0)
    questions: list[QuestionCreate] = Field(..., min_length=1)


class TestPublic(BaseModel):
    id: int
    title: str
    description: str
    subject: str
    time_limit: int
    created_by: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class TestSummary(BaseModel):
    id: int
    title: str

    model_config = {"from_attributes": True}
