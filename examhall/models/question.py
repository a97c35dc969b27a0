# examhall/models/question.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from examhall.db.base import Base

OBJECTIVE = "objective"
SUBJECTIVE = "subjective"


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    test_id = Column(Integer, ForeignKey("tests.id"), nullable=False, index=True)

    question_text = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=True)
    marks = Column(Integer, nullable=False, default=1)

    # 'objective' / 'subjective'
    kind = Column(String(20), nullable=False)

    # objective only
    options = Column(JSON, nullable=True)
    correct_answer = Column(Text, nullable=True)

    # subjective only: 'text' / 'image'
    answer_format = Column(String(10), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_objective(self) -> bool:
        return self.kind == OBJECTIVE
