"""
Event status transitions and the guards that depend on status
"""

from typing import Dict, FrozenSet

from app.core.exceptions import ClosedError, ConflictError
from app.models.event import EventStatus

# Forward-only; there is no way back out of completed or cancelled
ALLOWED_TRANSITIONS: Dict[EventStatus, FrozenSet[EventStatus]] = {
    EventStatus.PENDING: frozenset({EventStatus.ACTIVE, EventStatus.COMPLETED, EventStatus.CANCELLED}),
    EventStatus.ACTIVE: frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED}),
    EventStatus.COMPLETED: frozenset({EventStatus.CANCELLED}),
    EventStatus.CANCELLED: frozenset(),
}


def can_transition(current: EventStatus, target: EventStatus) -> bool:
    return target == current or target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: EventStatus, target: EventStatus) -> None:
    if not can_transition(current, target):
        raise ConflictError(f"Cannot change event status from {current.value} to {target.value}")


def is_closed(status: EventStatus) -> bool:
    return status in (EventStatus.COMPLETED, EventStatus.CANCELLED)


def ensure_accepting_responses(status: EventStatus) -> None:
    """Guard run before any availability write"""
    if status == EventStatus.COMPLETED:
        raise ClosedError()
    if status == EventStatus.CANCELLED:
        raise ClosedError("This event has been cancelled and is no longer accepting responses")
