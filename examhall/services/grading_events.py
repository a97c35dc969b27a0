# examhall/services/grading_events.py
"""
Listeners notified every time a submission receives a final score.

Re-grading an already graded submission is allowed; listeners get
``regrade=True`` for those so an audit or approval policy can hook in.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradingEvent:
    submission_id: int
    previous_status: str
    previous_score: Decimal | None
    final_score: Decimal
    grader_id: int | None
    regrade: bool


GradingListener = Callable[[GradingEvent], None]

_listeners: List[GradingListener] = []


def subscribe(listener: GradingListener) -> GradingListener:
    _listeners.append(listener)
    return listener


def unsubscribe(listener: GradingListener) -> None:
    if listener in _listeners:
        _listeners.remove(listener)


def emit(event: GradingEvent) -> None:
    """
    Notify every listener. The grade is already stored when this runs, so a
    failing listener is logged and does not stop the others.
    """
    for listener in list(_listeners):
        try:
            listener(event)
        except Exception as e:
            logger.error(
                f"Grading listener {getattr(listener, '__name__', listener)!r} "
                f"failed for submission {event.submission_id}: {e}",
                exc_info=True,
            )
