# examhall/core/errors.py


class ExamHallError(Exception):
    """Base class for errors raised by the grading services."""


class ValidationError(ExamHallError):
    """Malformed input: score out of range, unknown test/student, bad answers."""


class NotFoundError(ExamHallError):
    """A referenced test, submission, student or question does not exist."""


class PersistenceError(ExamHallError):
    """The database rejected a write; the unit of work has been rolled back."""
