"""
Manual grading: final score, status transition, re-grading events.
"""

from decimal import Decimal

import pytest

from examhall.core.errors import NotFoundError, ValidationError
from examhall.schemas.submission import AnswerIn
from examhall.services import grading_events, scoring_service, submission_service


@pytest.fixture
def pending_submission(db_session, mixed_test, student):
    test, (mcq, essay) = mixed_test
    return submission_service.submit_test(
        db_session,
        test_id=test.id,
        student_id=student.id,
        answers=[
            AnswerIn(question_id=mcq.id, text="A"),
            AnswerIn(question_id=essay.id, text="Common denominators first."),
        ],
    )


class TestGradeSubmission:

    def test_grading_sets_score_and_status(self, db_session, pending_submission, teacher, grading_listener):
        sub = scoring_service.grade_submission(
            db_session, submission_id=pending_submission.id, final_score=88, grader=teacher
        )

        assert sub.status == "Graded"
        assert sub.final_score == Decimal(88)
        assert sub.graded_by == teacher.id
        assert sub.graded_at is not None
        # objective part is kept as recorded at submission time
        assert sub.objective_score == 100

        (event,) = grading_listener
        assert event.submission_id == sub.id
        assert event.previous_status == "Pending"
        assert event.regrade is False

    def test_regrade_last_write_wins(self, db_session, pending_submission, teacher, grading_listener, caplog):
        scoring_service.grade_submission(db_session, submission_id=pending_submission.id, final_score=70)
        sub = scoring_service.grade_submission(
            db_session, submission_id=pending_submission.id, final_score=92.5, grader=teacher
        )

        assert sub.final_score == Decimal("92.5")
        assert sub.status == "Graded"

        first, second = grading_listener
        assert first.regrade is False
        assert second.regrade is True
        assert second.previous_score == Decimal(70)
        assert "re-graded" in caplog.text

    def test_auto_graded_submission_can_be_overridden(self, db_session, objective_test, student, grading_listener):
        test, (q1, q2) = objective_test
        sub = submission_service.submit_test(
            db_session, test_id=test.id, student_id=student.id,
            answers=[AnswerIn(question_id=q1.id, text="A")],
        )
        assert sub.status == "Graded"

        sub = scoring_service.grade_submission(db_session, submission_id=sub.id, final_score=60)

        assert sub.final_score == Decimal(60)
        assert grading_listener[0].regrade is True

    @pytest.mark.parametrize("score", [-1, 100.01, 250])
    def test_score_out_of_range(self, db_session, pending_submission, score):
        with pytest.raises(ValidationError):
            scoring_service.grade_submission(
                db_session, submission_id=pending_submission.id, final_score=score
            )

        db_session.refresh(pending_submission)
        assert pending_submission.status == "Pending"

    @pytest.mark.parametrize("score", [0, 100])
    def test_bounds_are_inclusive(self, db_session, pending_submission, score):
        sub = scoring_service.grade_submission(
            db_session, submission_id=pending_submission.id, final_score=score
        )
        assert sub.final_score == Decimal(score)

    def test_unknown_submission(self, db_session):
        with pytest.raises(NotFoundError):
            scoring_service.grade_submission(db_session, submission_id=12345, final_score=50)

    def test_event_carries_stored_score(self, db_session, pending_submission, grading_listener):
        sub = scoring_service.grade_submission(
            db_session, submission_id=pending_submission.id, final_score=50.123
        )

        assert sub.final_score == Decimal("50.12")
        (event,) = grading_listener
        assert event.final_score == sub.final_score


class TestFailingListener:

    @pytest.fixture
    def broken_listener(self):
        def audit_sink_down(event):
            raise RuntimeError("audit sink unavailable")

        grading_events.subscribe(audit_sink_down)
        yield audit_sink_down
        grading_events.unsubscribe(audit_sink_down)

    def test_grade_still_returned(self, db_session, pending_submission, broken_listener, grading_listener, caplog):
        sub = scoring_service.grade_submission(
            db_session, submission_id=pending_submission.id, final_score=88
        )

        assert sub.status == "Graded"
        assert sub.final_score == Decimal(88)
        # listeners after the failing one are still notified
        assert len(grading_listener) == 1
        assert "audit_sink_down" in caplog.text
