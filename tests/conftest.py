"""
Shared fixtures: an in-memory SQLite database, users, and tests with questions.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from examhall.core.security import create_access_token
from examhall.db.base import Base
from examhall import models  # noqa
from examhall.db.session import get_db
from examhall.main import app
from examhall.models.question import Question
from examhall.models.test import Test
from examhall.models.user import User
from examhall.services import grading_events

# Test database (in-memory SQLite shared by every session)
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a test database session."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def _make_user(db, *, email, username, role):
    user = User(
        email=email,
        # Pre-hashed password to avoid running bcrypt in tests
        password_hash="$2b$12$hashed_password",
        username=username,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def teacher(db_session):
    return _make_user(db_session, email="teacher@school.com", username="Ms. Rivera", role="teacher")


@pytest.fixture
def other_teacher(db_session):
    return _make_user(db_session, email="other.teacher@school.com", username="Mr. Okafor", role="teacher")


@pytest.fixture
def student(db_session):
    return _make_user(db_session, email="student@school.com", username="Sam", role="student")


@pytest.fixture
def other_student(db_session):
    return _make_user(db_session, email="student2@school.com", username="Alex", role="student")


@pytest.fixture
def make_test(db_session, teacher):
    """
    Build a test from question specs:
      ("objective", correct_answer, options) or ("subjective", answer_format)
    Returns (test, [questions]).
    """

    def _make(*specs, created_by=None):
        test = Test(
            created_by=created_by or teacher.id,
            title="Unit test: fractions",
            description="Short quiz on adding fractions",
            subject="Mathematics",
            time_limit=30,
        )
        db_session.add(test)
        db_session.flush()

        questions = []
        for i, spec in enumerate(specs, start=1):
            if spec[0] == "objective":
                _, correct, options = spec
                q = Question(
                    test_id=test.id,
                    question_text=f"Question {i}",
                    marks=1,
                    kind="objective",
                    options=options,
                    correct_answer=correct,
                )
            else:
                _, answer_format = spec
                q = Question(
                    test_id=test.id,
                    question_text=f"Question {i}",
                    marks=5,
                    kind="subjective",
                    answer_format=answer_format,
                )
            db_session.add(q)
            questions.append(q)

        db_session.commit()
        db_session.refresh(test)
        for q in questions:
            db_session.refresh(q)
        return test, questions

    return _make


@pytest.fixture
def objective_test(make_test):
    """Two objective questions, correct answers 'A' and 'B'."""
    return make_test(
        ("objective", "A", ["A", "B", "C"]),
        ("objective", "B", ["A", "B", "C"]),
    )


@pytest.fixture
def mixed_test(make_test):
    """One objective question (answer 'A') and one subjective text question."""
    return make_test(
        ("objective", "A", ["A", "B"]),
        ("subjective", "text"),
    )


@pytest.fixture
def grading_listener():
    events = []
    listener = grading_events.subscribe(events.append)
    yield events
    grading_events.unsubscribe(listener)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        token = create_access_token(data={"sub": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _headers
