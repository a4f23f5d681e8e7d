"""
Recording, replacing and withdrawing participant availability
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from app.core.exceptions import ConflictError, DuplicateParticipant, NotFoundError, SlotTaken, ValidationError
from app.models.event import EventType
from app.schemas.event import EventTree, ParticipantRecord
from app.schemas.participant import AvailabilitySubmission
from app.services.aggregation import ANONYMOUS_NAME, iter_slots, taken_slot_ids
from app.services.lifecycle import ensure_accepting_responses
from app.services.validation import selected_slot_ids, validate_submission
from app.utils.formatting import format_slots

logger = logging.getLogger(__name__)

SUBMITTED = "submitted"
DUPLICATE = "duplicate"

SLOT_TAKEN_MESSAGE = "One or more selected time slots are already taken"


@dataclass
class VoteConfirmation:
    """Content of the confirmation email for one submission"""
    recipient_email: str
    participant_name: str
    event_name: str
    date_time: str


@dataclass
class SubmissionResult:
    status: str
    participant: ParticipantRecord
    confirmation: Optional[VoteConfirmation] = None

    @property
    def is_duplicate(self) -> bool:
        return self.status == DUPLICATE


def normalize_email(email: Optional[str]) -> Optional[str]:
    email = (email or "").strip().lower()
    return email or None


class AvailabilityService:
    """Applies the submission rules for an event.

    Order of checks: event exists, event still open, payload valid, 1:1 slots
    free, email not already used. A reused email yields a "duplicate" result
    unless the submission sets overwrite, in which case the earlier
    participant's availability is replaced.
    """

    def __init__(self, store):
        self.store = store

    def submit_availability(self, event_id: str, submission: AvailabilitySubmission) -> SubmissionResult:
        event = self.store.get_event(event_id, lock=True)
        if event is None:
            raise NotFoundError("Event")

        ensure_accepting_responses(event.status)

        errors = validate_submission(submission, event)
        if errors:
            raise ValidationError(errors)

        selected = selected_slot_ids(submission)
        email = normalize_email(submission.email)
        existing = self.store.find_participant(event_id, email) if email else None

        if event.type == EventType.ONE_TO_ONE:
            # A participant's own earlier booking does not block them
            taken = taken_slot_ids(event, exclude_participant_id=existing.id if existing else None)
            clashes = sorted(set(selected) & taken)
            if clashes:
                logger.info(f"Rejected submission to event {event_id}: slots {clashes} already taken")
                raise ConflictError(SLOT_TAKEN_MESSAGE, details=clashes)

        if existing and not submission.overwrite:
            logger.info(f"Duplicate submission for event {event_id} from participant {existing.id}")
            return SubmissionResult(status=DUPLICATE, participant=existing)
        if existing and submission.is_anonymous:
            # Replacing a named response with an anonymous one would orphan it
            raise ConflictError(
                "An anonymous response cannot replace a named response; withdraw it first",
                details=[existing.id],
            )

        user = self.store.get_user_by_email(email) if email else None
        if submission.is_anonymous:
            participant_name = ANONYMOUS_NAME
            stored_email = None
            user_id = None
        else:
            participant_name = (submission.name or "").strip() or (user.name if user else "")
            stored_email = email
            user_id = user.uuid if user else None

        try:
            participant = self.store.record_submission(
                event_id=event_id,
                participant_id=existing.id if existing else None,
                participant_name=participant_name,
                participant_email=stored_email,
                user_id=user_id,
                is_anonymous=submission.is_anonymous,
                votes=self._votes(submission),
                voter_email=email,
                exclusive=event.type == EventType.ONE_TO_ONE,
            )
        except SlotTaken as e:
            logger.info(f"Rejected submission to event {event_id}: slots {e.slot_ids} taken concurrently")
            raise ConflictError(SLOT_TAKEN_MESSAGE, details=e.slot_ids)
        except DuplicateParticipant:
            # Lost a race with another submission using the same email
            existing = self.store.find_participant(event_id, email)
            if existing is None:
                raise ConflictError("Another submission for this email is in progress, please retry")
            logger.info(f"Concurrent duplicate submission for event {event_id} from participant {existing.id}")
            return SubmissionResult(status=DUPLICATE, participant=existing)

        logger.info(
            f"Recorded availability for event {event_id}: participant {participant.id}, "
            f"{len(selected)} slot(s){' (overwrite)' if existing else ''}"
        )

        confirmation = None
        if email:
            confirmation = VoteConfirmation(
                recipient_email=email,
                participant_name=participant_name,
                event_name=event.name,
                date_time=self._selected_text(event, selected),
            )
        return SubmissionResult(status=SUBMITTED, participant=participant, confirmation=confirmation)

    def withdraw_availability(self, event_id: str, email: str) -> None:
        """Remove a participant and all of their availability"""
        event = self.store.get_event(event_id, lock=True)
        if event is None:
            raise NotFoundError("Event")
        ensure_accepting_responses(event.status)

        normalized = normalize_email(email)
        if not normalized or not self.store.withdraw_participant(event_id, normalized):
            raise NotFoundError("Participant")
        logger.info(f"Withdrew participant {normalized} from event {event_id}")

    @staticmethod
    def _votes(submission: AvailabilitySubmission) -> Dict[int, bool]:
        votes = dict(submission.votes or {})
        for slot_id in submission.time_slot_ids:
            votes[slot_id] = True
        return votes

    @staticmethod
    def _selected_text(event: EventTree, selected) -> str:
        chosen = set(selected)
        return format_slots(
            (event_date.date, slot.start_time, slot.end_time)
            for event_date, slot in iter_slots(event)
            if slot.id in chosen
        )
