"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Both stores expose the same operations and return the snapshot schemas from
app.schemas.event, so services never see ORM rows or Firestore documents.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import DatabaseError, DuplicateParticipant, EventIdTaken, SlotTaken
from app.models import (
    Event,
    EventDate,
    EventParticipant,
    EventStatus,
    EventTimeSlot,
    EventVote,
    ParticipantAvailability,
    User,
)
from app.schemas.event import DateTimeSlotInput, EventSummary, EventTree, ParticipantRecord, UserRecord

logger = logging.getLogger(__name__)


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


# -------- SQLAlchemy store --------

class SqlStore:
    """Store backed by a SQLAlchemy session (Supabase Postgres in production)"""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, uuid: str) -> Optional[UserRecord]:
        user = self.db.query(User).filter(User.uuid == uuid).first()
        return UserRecord.model_validate(user) if user else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        user = self.db.query(User).filter(User.email == email).first()
        return UserRecord.model_validate(user) if user else None

    def create_event(self, fields: Dict[str, Any], date_time_slots: List[DateTimeSlotInput]) -> EventTree:
        if self.db.query(Event.id).filter(Event.id == fields["id"]).first():
            raise EventIdTaken(fields["id"])

        event = Event(**fields)
        for date_slot in date_time_slots:
            event_date = EventDate(date=date_slot.date)
            event_date.event_time_slots = [
                EventTimeSlot(start_time=slot.start_time, end_time=slot.end_time)
                for slot in date_slot.time_slots
            ]
            event.event_dates.append(event_date)

        self.db.add(event)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if self.db.query(Event.id).filter(Event.id == fields["id"]).first():
                raise EventIdTaken(fields["id"]) from e
            logger.error(f"Failed to create event {fields['id']}: {e}", exc_info=True)
            raise DatabaseError("Failed to create event") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create event {fields['id']}: {e}", exc_info=True)
            raise DatabaseError("Failed to create event") from e

        self.db.refresh(event)
        return EventTree.model_validate(event)

    def get_event(self, event_id: str, include_deleted: bool = False, lock: bool = False) -> Optional[EventTree]:
        query = self.db.query(Event).filter(Event.id == event_id)
        if not include_deleted:
            query = query.filter(Event.is_deleted == False)  # noqa: E712
        if lock:
            # Serializes submissions to the same event until record_submission commits;
            # SQLite takes its database lock at BEGIN IMMEDIATE instead (app.core.db)
            query = query.with_for_update()
        event = query.first()
        return EventTree.model_validate(event) if event else None

    def list_events_by_creator(self, creator_id: str, include_deleted: bool = False) -> List[EventSummary]:
        query = self.db.query(Event).filter(Event.creator_id == creator_id)
        if not include_deleted:
            query = query.filter(Event.is_deleted == False)  # noqa: E712
        return [EventSummary.model_validate(e) for e in query.order_by(Event.created_at.desc()).all()]

    def update_event_status(self, event_id: str, status: EventStatus) -> Optional[EventSummary]:
        event = self.db.query(Event).filter(Event.id == event_id).first()
        if not event:
            return None
        event.status = status.value
        event.updated_at = datetime.utcnow()
        self._commit(f"update status of event {event_id}")
        self.db.refresh(event)
        return EventSummary.model_validate(event)

    def soft_delete_event(self, event_id: str) -> bool:
        event = self.db.query(Event).filter(Event.id == event_id).first()
        if not event:
            return False
        event.is_deleted = True
        event.updated_at = datetime.utcnow()
        self._commit(f"delete event {event_id}")
        return True

    def find_participant(self, event_id: str, email: str) -> Optional[ParticipantRecord]:
        participant = self.db.query(EventParticipant).filter(
            EventParticipant.event_id == event_id,
            EventParticipant.participant_email == email,
            EventParticipant.is_anonymous == False,  # noqa: E712
        ).first()
        return ParticipantRecord.model_validate(participant) if participant else None

    def record_submission(
        self,
        event_id: str,
        participant_id: Optional[Union[int, str]],
        participant_name: str,
        participant_email: Optional[str],
        user_id: Optional[str],
        is_anonymous: bool,
        votes: Dict[int, bool],
        voter_email: Optional[str],
        exclusive: bool = False,
    ) -> ParticipantRecord:
        """Create or reuse the participant, replace its availability and log the vote in one commit.

        With exclusive set, raises SlotTaken when another participant of the
        event already holds a yes vote on any of the chosen slots.
        """
        try:
            if exclusive:
                clashes = self._taken_slots(event_id, participant_id, [s for s, vote in votes.items() if vote])
                if clashes:
                    self.db.rollback()
                    raise SlotTaken(clashes)
            if participant_id is None:
                participant = EventParticipant(
                    event_id=event_id,
                    user_id=user_id,
                    participant_name=participant_name,
                    participant_email=participant_email,
                    is_anonymous=is_anonymous,
                    status="pending",
                )
                self.db.add(participant)
                self.db.flush()
            else:
                participant = self.db.query(EventParticipant).filter(
                    EventParticipant.id == participant_id,
                    EventParticipant.event_id == event_id,
                ).first()
                if participant is None:
                    raise DatabaseError(f"Participant {participant_id} disappeared during resubmission")
                participant.participant_name = participant_name
                participant.participant_email = participant_email
                participant.user_id = user_id
                participant.is_anonymous = is_anonymous
                self.db.query(ParticipantAvailability).filter(
                    ParticipantAvailability.participant_id == participant.id
                ).delete(synchronize_session=False)

            self.db.add_all([
                ParticipantAvailability(participant_id=participant.id, time_slot_id=slot_id, vote=vote)
                for slot_id, vote in votes.items()
            ])
            self.db.add(EventVote(event_id=event_id, voter_email=voter_email, is_anonymous=is_anonymous))
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateParticipant(participant_email) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to record submission for event {event_id}: {e}", exc_info=True)
            raise DatabaseError("Failed to save availability") from e
        except DatabaseError:
            self.db.rollback()
            raise

        self.db.expire(participant)
        return ParticipantRecord.model_validate(participant)

    def _taken_slots(self, event_id: str, participant_id: Optional[Union[int, str]], slot_ids: List[int]) -> List[int]:
        if not slot_ids:
            return []
        query = self.db.query(ParticipantAvailability.time_slot_id).join(EventParticipant).filter(
            EventParticipant.event_id == event_id,
            ParticipantAvailability.vote == True,  # noqa: E712
            ParticipantAvailability.time_slot_id.in_(slot_ids),
        )
        if participant_id is not None:
            query = query.filter(EventParticipant.id != participant_id)
        return sorted({row.time_slot_id for row in query.all()})

    def withdraw_participant(self, event_id: str, email: str) -> bool:
        participant = self.db.query(EventParticipant).filter(
            EventParticipant.event_id == event_id,
            EventParticipant.participant_email == email,
            EventParticipant.is_anonymous == False,  # noqa: E712
        ).first()
        if not participant:
            return False
        # delete-orphan cascade removes the availability rows in the same flush
        self.db.delete(participant)
        self._commit(f"withdraw participant {participant.id} from event {event_id}")
        return True

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {e}", exc_info=True)
            raise DatabaseError(f"Failed to {action}") from e


# -------- Firestore store --------

class FirestoreStore:
    """Store backed by Firestore.

    Layout: users/{uuid}; events/{id} with dates and slots embedded (integer ids
    allocated per event); events/{id}/participants/{pid} with availability
    embedded, so replacing a participant's votes is a single document write;
    events/{id}/votes/{auto}.
    """

    def __init__(self, client):
        self.fs = client

    def _event_ref(self, event_id: str):
        return self.fs.collection("events").document(event_id)

    @staticmethod
    def _participant_doc_id(email: str) -> str:
        # Deterministic id turns a concurrent duplicate create into AlreadyExists
        return hashlib.sha1(email.lower().encode("utf-8")).hexdigest()

    def get_user(self, uuid: str) -> Optional[UserRecord]:
        doc = self.fs.collection("users").document(uuid).get()
        if not doc.exists:
            return None
        return UserRecord.model_validate({**doc.to_dict(), "uuid": doc.id})

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        docs = self.fs.collection("users").where("email", "==", email).limit(1).get()
        if not docs:
            return None
        return UserRecord.model_validate({**docs[0].to_dict(), "uuid": docs[0].id})

    def create_event(self, fields: Dict[str, Any], date_time_slots: List[DateTimeSlotInput]) -> EventTree:
        event_dates = []
        slot_id = 0
        for date_id, date_slot in enumerate(date_time_slots, start=1):
            slots = []
            for slot in date_slot.time_slots:
                slot_id += 1
                slots.append({
                    "id": slot_id,
                    "start_time": slot.start_time.isoformat(),
                    "end_time": slot.end_time.isoformat(),
                })
            event_dates.append({"id": date_id, "date": date_slot.date.isoformat(), "event_time_slots": slots})

        data = {
            **fields,
            "is_deleted": False,
            "event_dates": event_dates,
            "created_at": datetime.utcnow(),
            "updated_at": datetime.utcnow(),
        }
        try:
            self._event_ref(fields["id"]).create(data)
        except google_exceptions.AlreadyExists as e:
            raise EventIdTaken(fields["id"]) from e
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Failed to create event {fields['id']}: {e}", exc_info=True)
            raise DatabaseError("Failed to create event") from e
        return EventTree.model_validate({**data, "participants": []})

    def get_event(self, event_id: str, include_deleted: bool = False, lock: bool = False) -> Optional[EventTree]:
        ref = self._event_ref(event_id)
        doc = ref.get()
        if not doc.exists:
            return None
        data = doc.to_dict()
        if data.get("is_deleted") and not include_deleted:
            return None
        participants = []
        for p in ref.collection("participants").get():
            item = p.to_dict()
            item["id"] = p.id
            participants.append(item)
        return EventTree.model_validate({**data, "id": doc.id, "participants": participants})

    def list_events_by_creator(self, creator_id: str, include_deleted: bool = False) -> List[EventSummary]:
        docs = self.fs.collection("events").where("creator_id", "==", creator_id).get()
        results: List[EventSummary] = []
        for d in docs:
            item = d.to_dict()
            if item.get("is_deleted") and not include_deleted:
                continue
            results.append(EventSummary.model_validate({**item, "id": d.id}))
        return sorted(results, key=lambda e: e.created_at or datetime.min, reverse=True)

    def update_event_status(self, event_id: str, status: EventStatus) -> Optional[EventSummary]:
        ref = self._event_ref(event_id)
        try:
            ref.update({"status": status.value, "updated_at": datetime.utcnow()})
        except google_exceptions.NotFound:
            return None
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Failed to update status of event {event_id}: {e}", exc_info=True)
            raise DatabaseError(f"Failed to update status of event {event_id}") from e
        doc = ref.get()
        return EventSummary.model_validate({**doc.to_dict(), "id": doc.id})

    def soft_delete_event(self, event_id: str) -> bool:
        try:
            self._event_ref(event_id).update({"is_deleted": True, "updated_at": datetime.utcnow()})
        except google_exceptions.NotFound:
            return False
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Failed to delete event {event_id}: {e}", exc_info=True)
            raise DatabaseError(f"Failed to delete event {event_id}") from e
        return True

    def find_participant(self, event_id: str, email: str) -> Optional[ParticipantRecord]:
        docs = (
            self._event_ref(event_id).collection("participants")
            .where("participant_email", "==", email)
            .where("is_anonymous", "==", False)
            .limit(1)
            .get()
        )
        if not docs:
            return None
        return ParticipantRecord.model_validate({**docs[0].to_dict(), "id": docs[0].id})

    def record_submission(
        self,
        event_id: str,
        participant_id: Optional[Union[int, str]],
        participant_name: str,
        participant_email: Optional[str],
        user_id: Optional[str],
        is_anonymous: bool,
        votes: Dict[int, bool],
        voter_email: Optional[str],
        exclusive: bool = False,
    ) -> ParticipantRecord:
        """Write the participant document and the vote in one transaction.

        With exclusive set, the participants subcollection is re-read inside
        the transaction and SlotTaken is raised if another participant holds
        a yes vote on a chosen slot. Firestore retries the transaction when a
        concurrent write touches what it read.
        """
        event_ref = self._event_ref(event_id)
        participants = event_ref.collection("participants")
        data = {
            "user_id": user_id,
            "participant_name": participant_name,
            "participant_email": participant_email,
            "is_anonymous": is_anonymous,
            "status": "pending",
            "availability": [{"time_slot_id": slot_id, "vote": vote} for slot_id, vote in votes.items()],
        }

        create = participant_id is None
        if not create:
            ref = participants.document(str(participant_id))
        elif participant_email and not is_anonymous:
            ref = participants.document(self._participant_doc_id(participant_email))
        else:
            ref = participants.document()
        vote_ref = event_ref.collection("votes").document()
        chosen = {slot_id for slot_id, vote in votes.items() if vote}

        def _write(transaction):
            if exclusive:
                taken = set()
                for doc in participants.get(transaction=transaction):
                    if doc.id == ref.id:
                        continue
                    taken.update(
                        row["time_slot_id"] for row in doc.to_dict().get("availability", []) if row.get("vote")
                    )
                clashes = sorted(chosen & taken)
                if clashes:
                    raise SlotTaken(clashes)
            if create:
                transaction.create(ref, data)
            else:
                transaction.set(ref, data)
            transaction.set(vote_ref, {
                "voter_email": voter_email,
                "is_anonymous": is_anonymous,
                "voted_at": datetime.utcnow(),
            })

        try:
            firestore.transactional(_write)(self.fs.transaction())
        except google_exceptions.AlreadyExists as e:
            raise DuplicateParticipant(participant_email) from e
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Failed to record submission for event {event_id}: {e}", exc_info=True)
            raise DatabaseError("Failed to save availability") from e
        return ParticipantRecord.model_validate({**data, "id": ref.id})

    def withdraw_participant(self, event_id: str, email: str) -> bool:
        existing = self.find_participant(event_id, email)
        if not existing:
            return False
        try:
            # Availability lives inside the participant document
            self._event_ref(event_id).collection("participants").document(str(existing.id)).delete()
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Failed to withdraw participant {existing.id} from event {event_id}: {e}", exc_info=True)
            raise DatabaseError("Failed to delete participant availability") from e
        return True
