# examhall/schemas/question.py
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator


class QuestionBase(BaseModel):
    question_text: str = ""
    marks: int = Field(1, gt=0)
    image_url: str | None = None


class ObjectiveQuestionCreate(QuestionBase):
    kind: Literal["objective"] = "objective"
    options: list[str] = Field(..., min_length=2)
    correct_answer: str

    @model_validator(mode="after")
    def check_options(self):
        if len(set(self.options)) != len(self.options):
            raise ValueError("Options must be distinct.")
        if self.correct_answer not in self.options:
            raise ValueError("The correct answer must be one of the options.")
        return self


class SubjectiveQuestionCreate(QuestionBase):
    kind: Literal["subjective"] = "subjective"
    answer_format: Literal["text", "image"]

    @model_validator(mode="after")
    def check_prompt(self):
        if not self.question_text and not self.image_url:
            raise ValueError("Subjective questions require either text or an image.")
        return self


QuestionCreate = Annotated[
    Union[ObjectiveQuestionCreate, SubjectiveQuestionCreate],
    Field(discriminator="kind"),
]


class ObjectiveQuestionPublic(ObjectiveQuestionCreate):
    id: int
    test_id: int

    model_config = {"from_attributes": True}


class SubjectiveQuestionPublic(SubjectiveQuestionCreate):
    id: int
    test_id: int

    model_config = {"from_attributes": True}


QuestionPublic = Annotated[
    Union[ObjectiveQuestionPublic, SubjectiveQuestionPublic],
    Field(discriminator="kind"),
]


class StudentObjectiveQuestion(QuestionBase):
    """Objective question as a student sees it while taking the test."""
    id: int
    test_id: int
    kind: Literal["objective"] = "objective"
    options: list[str]

    model_config = {"from_attributes": True}


class StudentSubjectiveQuestion(QuestionBase):
    id: int
    test_id: int
    kind: Literal["subjective"] = "subjective"
    answer_format: Literal["text", "image"]

    model_config = {"from_attributes": True}


StudentQuestion = Annotated[
    Union[StudentObjectiveQuestion, StudentSubjectiveQuestion],
    Field(discriminator="kind"),
]


def question_to_public(question) -> ObjectiveQuestionPublic | SubjectiveQuestionPublic:
    if question.kind == "objective":
        return ObjectiveQuestionPublic.model_validate(question)
    return SubjectiveQuestionPublic.model_validate(question)


def question_for_student(question) -> StudentObjectiveQuestion | StudentSubjectiveQuestion:
    # correct answers stay hidden from students
    if question.kind == "objective":
        return StudentObjectiveQuestion.model_validate(question)
    return StudentSubjectiveQuestion.model_validate(question)
