"""
Event model with its proposed dates and time slots
"""

import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, Time, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.db import Base


class EventType(str, enum.Enum):
    ONE_TO_ONE = "1:1"
    GROUP = "group"


class EventStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(Base):
    __tablename__ = "events"

    id = Column(String(64), primary_key=True, index=True)
    creator_id = Column(String(36), ForeignKey("users.uuid"), nullable=False, index=True)
    type = Column(String(10), nullable=False, default=EventType.GROUP.value)
    name = Column(String(255), nullable=False)
    detail = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default=EventStatus.PENDING.value)
    is_anonymous_allowed = Column(Boolean, default=False)
    can_multiple_vote = Column(Boolean, default=False)
    is_deleted = Column(Boolean, default=False)
    share_url = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    event_dates = relationship(
        "EventDate", back_populates="event", cascade="all, delete-orphan", order_by="EventDate.date"
    )
    participants = relationship(
        "EventParticipant", back_populates="event", cascade="all, delete-orphan", order_by="EventParticipant.id"
    )


class EventDate(Base):
    __tablename__ = "event_dates"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(String(64), ForeignKey("events.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)

    # Relationships
    event = relationship("Event", back_populates="event_dates")
    event_time_slots = relationship(
        "EventTimeSlot", back_populates="event_date", cascade="all, delete-orphan", order_by="EventTimeSlot.start_time"
    )


class EventTimeSlot(Base):
    __tablename__ = "event_time_slots"

    id = Column(Integer, primary_key=True, index=True)
    event_date_id = Column(Integer, ForeignKey("event_dates.id"), nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    # Relationships
    event_date = relationship("EventDate", back_populates="event_time_slots")
