# examhall/models/submission.py
from sqlalchemy import (
    Boolean,
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    ForeignKey,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from examhall.db.base import Base

STATUS_PENDING = "Pending"
STATUS_GRADED = "Graded"


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    test_id = Column(Integer, ForeignKey("tests.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    submitted_at = Column(DateTime(timezone=True), server_default=func.now())

    # Pending -> Graded, never backward
    status = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)

    # percentage of objective questions answered correctly, NULL if the test has none
    objective_score = Column(Integer, nullable=True)

    # grading
    final_score = Column(Numeric(5, 2), nullable=True)
    graded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)

    answers = relationship(
        "Answer",
        back_populates="submission",
        order_by="Answer.id",
    )


class Answer(Base):
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, index=True)

    submission_id = Column(
        Integer, ForeignKey("submissions.id"), nullable=False, index=True
    )
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False, index=True)

    # NULL text and NULL image means the question was skipped
    answer_text = Column(Text, nullable=True)
    answer_image_url = Column(String(500), nullable=True)

    # objective questions only
    is_correct = Column(Boolean, nullable=True)

    submission = relationship("Submission", back_populates="answers")

    @property
    def is_skipped(self) -> bool:
        return self.answer_text is None and not self.answer_image_url
