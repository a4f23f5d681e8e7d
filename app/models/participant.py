"""
Participant and per-slot availability models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.db import Base

class EventParticipant(Base):
    __tablename__ = "event_participants"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(String(64), ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.uuid"), nullable=True)
    participant_name = Column(String(255), nullable=False)
    participant_email = Column(String(255), nullable=True)  # null for anonymous participants
    is_anonymous = Column(Boolean, default=False)
    status = Column(String(20), default="pending")
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    event = relationship("Event", back_populates="participants")
    availability = relationship(
        "ParticipantAvailability", back_populates="participant", cascade="all, delete-orphan"
    )

    # Nulls are distinct, so any number of anonymous rows may share an event
    __table_args__ = (
        UniqueConstraint("event_id", "participant_email", name="uq_participant_event_email"),
    )


class ParticipantAvailability(Base):
    __tablename__ = "participant_availability"

    id = Column(Integer, primary_key=True, index=True)
    participant_id = Column(Integer, ForeignKey("event_participants.id"), nullable=False, index=True)
    time_slot_id = Column(Integer, ForeignKey("event_time_slots.id"), nullable=False, index=True)
    vote = Column(Boolean, nullable=False, default=True)

    # Relationships
    participant = relationship("EventParticipant", back_populates="availability")

    __table_args__ = (
        UniqueConstraint("participant_id", "time_slot_id", name="uq_availability_participant_slot"),
    )
