"""
Event creation, reads and lifecycle operations
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import ConflictError, DatabaseError, EventIdTaken, NotFoundError, ValidationError
from app.models.event import EventStatus, EventType
from app.schemas.event import EventCreate, EventSummary, EventTree, UserRecord
from app.schemas.tally import EventTally, MostVotedSlot
from app.services.aggregation import iter_slots, most_voted_slot, tally_event
from app.services.identifiers import generate_event_id
from app.services.lifecycle import ensure_transition
from app.services.validation import validate_event_create
from app.utils.formatting import format_slot, format_slots

logger = logging.getLogger(__name__)


def build_share_url(event_id: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/event/share/{event_id}"


@dataclass
class CompletionNotice:
    """Content of one "event completed" email"""
    recipient_email: str
    participant_name: str
    event_name: str
    final_date_time: Optional[str] = None
    location: Optional[str] = None
    details: Optional[str] = None


@dataclass
class EventResults:
    event: EventTree
    tally: EventTally
    final_slot: Optional[MostVotedSlot]


@dataclass
class CompletionResult:
    event: EventSummary
    final_slot: Optional[MostVotedSlot]
    notices: List[CompletionNotice] = field(default_factory=list)


class EventService:
    """Service for event operations"""

    def __init__(self, store):
        self.store = store

    def create_event(self, event_data: EventCreate, now: Optional[datetime] = None) -> EventTree:
        errors = validate_event_create(event_data, now)
        if errors:
            raise ValidationError(errors)

        is_group = event_data.type == EventType.GROUP
        for attempt in range(1, settings.EVENT_ID_MAX_ATTEMPTS + 1):
            event_id = generate_event_id(self.store, event_data.creator_id)
            fields = {
                "id": event_id,
                "creator_id": event_data.creator_id,
                "type": event_data.type.value,
                "name": event_data.name.strip(),
                "detail": event_data.detail,
                "location": event_data.location,
                "status": EventStatus.PENDING.value,
                "is_anonymous_allowed": event_data.is_anonymous_allowed if is_group else False,
                "can_multiple_vote": event_data.can_multiple_vote if is_group else False,
                "share_url": build_share_url(event_id),
            }
            try:
                event = self.store.create_event(fields, event_data.date_time_slots)
            except EventIdTaken:
                logger.warning(f"Event id {event_id} already taken (attempt {attempt})")
                continue
            logger.info(f"Created {event.type.value} event {event.id} for creator {event.creator_id}")
            return event

        raise DatabaseError("Could not allocate a unique event id")

    def get_event(self, event_id: str, include_deleted: bool = False) -> EventTree:
        event = self.store.get_event(event_id, include_deleted=include_deleted)
        if event is None:
            raise NotFoundError("Event")
        return event

    def list_events_by_creator(self, creator_id: str, include_deleted: bool = False) -> List[EventSummary]:
        return self.store.list_events_by_creator(creator_id, include_deleted=include_deleted)

    def get_user(self, uuid: str) -> UserRecord:
        user = self.store.get_user(uuid)
        if user is None:
            raise NotFoundError("User")
        return user

    def get_results(self, event_id: str, include_deleted: bool = False) -> EventResults:
        event = self.get_event(event_id, include_deleted=include_deleted)
        tally = tally_event(event)
        return EventResults(event=event, tally=tally, final_slot=most_voted_slot(event, tally))

    def update_status(self, event_id: str, status: EventStatus) -> EventSummary:
        event = self.get_event(event_id)
        ensure_transition(event.status, status)
        if event.status == status:
            return EventSummary.model_validate(event.model_dump())

        updated = self.store.update_event_status(event_id, status)
        if updated is None:
            raise NotFoundError("Event")
        logger.info(f"Event {event_id} status {event.status.value} -> {status.value}")
        return updated

    def delete_event(self, event_id: str) -> None:
        """Soft delete; rows stay in the store"""
        self.get_event(event_id)
        if not self.store.soft_delete_event(event_id):
            raise NotFoundError("Event")
        logger.info(f"Event {event_id} marked as deleted")

    def complete_event(self, event_id: str) -> CompletionResult:
        """End the poll: pick the final slot, mark completed, prepare notices"""
        event = self.get_event(event_id)
        if event.status == EventStatus.COMPLETED:
            raise ConflictError("This poll has already ended")
        ensure_transition(event.status, EventStatus.COMPLETED)

        tally = tally_event(event)
        final_slot = most_voted_slot(event, tally)
        if event.type == EventType.ONE_TO_ONE and final_slot is None:
            raise ValidationError(["No time slots have been booked yet"])

        updated = self.store.update_event_status(event_id, EventStatus.COMPLETED)
        if updated is None:
            raise NotFoundError("Event")
        logger.info(f"Event {event_id} completed; final slot {final_slot.time_slot_id if final_slot else None}")

        return CompletionResult(event=updated, final_slot=final_slot, notices=self._notices(event, final_slot))

    @staticmethod
    def _notices(event: EventTree, final_slot: Optional[MostVotedSlot]) -> List[CompletionNotice]:
        slots = {slot.id: (event_date.date, slot.start_time, slot.end_time) for event_date, slot in iter_slots(event)}
        notices = []
        for participant in event.participants:
            if participant.is_anonymous or not participant.participant_email:
                continue
            if event.type == EventType.ONE_TO_ONE:
                # Each participant hears about their own booking
                final_text = format_slots(
                    slots[row.time_slot_id]
                    for row in participant.availability
                    if row.vote and row.time_slot_id in slots
                ) or None
            elif final_slot:
                final_text = format_slot(final_slot.date, final_slot.start_time, final_slot.end_time)
            else:
                final_text = None
            notices.append(CompletionNotice(
                recipient_email=participant.participant_email,
                participant_name=participant.participant_name,
                event_name=event.name,
                final_date_time=final_text,
                location=event.location,
                details=event.detail,
            ))
        return notices
