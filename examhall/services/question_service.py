# examhall/services/question_service.py
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from examhall.core.errors import PersistenceError
from examhall.models.question import Question
from examhall.models.submission import Answer, Submission
from examhall.models.test import Test
from examhall.models.user import User
from examhall.schemas.test import TestCreate

logger = logging.getLogger(__name__)


def create_test(
    db: Session,
    *,
    teacher: User,
    obj_in: TestCreate,
) -> Test:
    """
    Teacher creates a test together with its questions.
    """
    test = Test(
        created_by=teacher.id,
        title=obj_in.title,
        description=obj_in.description,
        subject=obj_in.subject,
        time_limit=obj_in.time_limit,
    )
    try:
        db.add(test)
        db.flush()
        for q_in in obj_in.questions:
            db.add(Question(test_id=test.id, **q_in.model_dump()))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create test '{obj_in.title}': {e}")
        raise PersistenceError("could not create test") from e

    db.refresh(test)
    logger.info(
        f"Teacher {teacher.id} created test {test.id} "
        f"with {len(obj_in.questions)} questions"
    )
    return test


def get_test(db: Session, test_id: int) -> Optional[Test]:
    return db.get(Test, test_id)


def list_tests(
    db: Session,
    *,
    skip: int = 0,
    limit: int = 100,
) -> List[Test]:
    return (
        db.query(Test)
        .order_by(Test.created_at.desc(), Test.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_tests_for_teacher(db: Session, *, teacher_id: int) -> List[Test]:
    return (
        db.query(Test)
        .filter(Test.created_by == teacher_id)
        .order_by(Test.created_at.desc(), Test.id.desc())
        .all()
    )


def questions_for_test(db: Session, test_id: int) -> List[Question]:
    return (
        db.query(Question)
        .filter(Question.test_id == test_id)
        .order_by(Question.id.asc())
        .all()
    )


def delete_test(db: Session, *, test: Test) -> None:
    """
    Delete a test and everything hanging off it:
      answers -> submissions -> questions -> test

    Each step is committed on its own. A failure part-way leaves the
    earlier steps in place; it is logged and surfaced as PersistenceError.
    """
    test_id = test.id
    submission_ids = _submission_ids(db, test_id)

    steps = [
        (
            "answers",
            lambda: db.query(Answer)
            .filter(Answer.submission_id.in_(submission_ids))
            .delete(synchronize_session=False),
        ),
        (
            "submissions",
            lambda: db.query(Submission)
            .filter(Submission.test_id == test_id)
            .delete(synchronize_session=False),
        ),
        (
            "questions",
            lambda: db.query(Question)
            .filter(Question.test_id == test_id)
            .delete(synchronize_session=False),
        ),
        (
            "test",
            lambda: db.query(Test)
            .filter(Test.id == test_id)
            .delete(synchronize_session=False),
        ),
    ]

    done: list[str] = []
    for name, step in steps:
        try:
            count = step()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Cascade delete of test {test_id} stopped at '{name}' "
                f"(already deleted: {', '.join(done) or 'nothing'}): {e}"
            )
            raise PersistenceError(
                f"deleting test {test_id} failed at step '{name}'"
            ) from e
        logger.debug(f"Deleted {count} {name} rows for test {test_id}")
        done.append(name)

    db.expunge_all()
    logger.info(f"Deleted test {test_id} and {len(submission_ids)} submissions")


def _submission_ids(db: Session, test_id: int) -> List[int]:
    return [
        row.id
        for row in db.query(Submission.id).filter(Submission.test_id == test_id)
    ]
