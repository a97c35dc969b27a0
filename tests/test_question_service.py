"""
Question catalog: test creation with validated questions, cascade delete.
"""

import pytest
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError

from examhall.core.errors import PersistenceError
from examhall.models.question import Question
from examhall.models.submission import Answer, Submission
from examhall.models.test import Test
from examhall.schemas.submission import AnswerIn
from examhall.schemas import test as test_schemas
from examhall.services import question_service, submission_service


def _payload(**overrides):
    data = {
        "title": "Fractions quiz",
        "description": "Adding and comparing fractions",
        "subject": "Mathematics",
        "time_limit": 20,
        "questions": [
            {"kind": "objective", "question_text": "1/2 + 1/4?", "options": ["3/4", "2/6"], "correct_answer": "3/4"},
            {"kind": "subjective", "question_text": "Explain why.", "answer_format": "text", "marks": 5},
        ],
    }
    data.update(overrides)
    return data


class TestCreateTest:

    def test_creates_test_with_questions(self, db_session, teacher):
        obj_in = test_schemas.TestCreate(**_payload())

        test = question_service.create_test(db_session, teacher=teacher, obj_in=obj_in)

        questions = question_service.questions_for_test(db_session, test.id)
        assert test.created_by == teacher.id
        assert [q.kind for q in questions] == ["objective", "subjective"]
        assert questions[0].options == ["3/4", "2/6"]
        assert questions[0].correct_answer == "3/4"
        assert questions[1].answer_format == "text"
        assert questions[1].marks == 5

    @pytest.mark.parametrize(
        "question",
        [
            {"kind": "objective", "question_text": "?", "options": ["only"], "correct_answer": "only"},
            {"kind": "objective", "question_text": "?", "options": ["a", "a"], "correct_answer": "a"},
            {"kind": "objective", "question_text": "?", "options": ["a", "b"], "correct_answer": "c"},
            {"kind": "subjective", "question_text": "?"},
            {"kind": "subjective", "question_text": "", "answer_format": "text"},
            {"kind": "objective", "question_text": "?", "options": ["a", "b"], "correct_answer": "a", "marks": 0},
        ],
    )
    def test_invalid_questions_are_rejected(self, question):
        with pytest.raises(SchemaValidationError):
            test_schemas.TestCreate(**_payload(questions=[question]))

    def test_at_least_one_question(self):
        with pytest.raises(SchemaValidationError):
            test_schemas.TestCreate(**_payload(questions=[]))

    def test_subjective_image_prompt_without_text(self):
        obj_in = test_schemas.TestCreate(**_payload(questions=[
            {"kind": "subjective", "image_url": "https://cdn.school.com/diagram.png", "answer_format": "image"},
        ]))
        assert obj_in.questions[0].answer_format == "image"


class TestDeleteTest:

    @pytest.fixture
    def populated(self, db_session, mixed_test, student, other_student):
        test, (mcq, essay) = mixed_test
        for who in (student, other_student):
            submission_service.submit_test(
                db_session,
                test_id=test.id,
                student_id=who.id,
                answers=[AnswerIn(question_id=mcq.id, text="A"), AnswerIn(question_id=essay.id, text="...")],
            )
        return test

    def test_cascade(self, db_session, populated, make_test, student):
        keep, (keep_q,) = make_test(("objective", "A", ["A", "B"]))
        submission_service.submit_test(
            db_session, test_id=keep.id, student_id=student.id,
            answers=[AnswerIn(question_id=keep_q.id, text="A")],
        )
        test_id = populated.id

        question_service.delete_test(db_session, test=populated)

        assert db_session.get(Test, test_id) is None
        assert db_session.query(Question).filter(Question.test_id == test_id).count() == 0
        assert db_session.query(Submission).filter(Submission.test_id == test_id).count() == 0
        # only the other test's data is left
        assert db_session.query(Submission).count() == 1
        assert db_session.query(Answer).count() == 1
        assert db_session.query(Question).count() == 1

    def test_partial_cascade_is_logged(self, db_session, populated, monkeypatch, caplog):
        test_id = populated.id
        real_commit = db_session.commit
        calls = {"n": 0}

        def flaky_commit():
            calls["n"] += 1
            if calls["n"] == 3:  # answers, submissions, then questions fails
                raise SQLAlchemyError("connection lost")
            real_commit()

        monkeypatch.setattr(db_session, "commit", flaky_commit)

        with pytest.raises(PersistenceError):
            question_service.delete_test(db_session, test=populated)

        assert db_session.query(Answer).count() == 0
        assert db_session.query(Submission).count() == 0
        assert db_session.query(Question).filter(Question.test_id == test_id).count() == 2
        assert db_session.get(Test, test_id) is not None
        assert "stopped at 'questions'" in caplog.text
        assert "answers, submissions" in caplog.text
