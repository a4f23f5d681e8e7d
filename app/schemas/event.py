"""
Event-related Pydantic schemas
"""

from datetime import date, time, datetime
from typing import Optional, List, Union
from pydantic import BaseModel, Field

from app.models.event import EventType, EventStatus

class TimeSlotInput(BaseModel):
    """A proposed start/end time on one date"""
    start_time: time
    end_time: time

class DateTimeSlotInput(BaseModel):
    """A proposed date with its time slots"""
    date: date
    time_slots: List[TimeSlotInput] = Field(default_factory=list)

class EventCreate(BaseModel):
    """Schema for creating an event"""
    type: EventType
    name: str
    detail: Optional[str] = None
    location: Optional[str] = None
    creator_id: str
    date_time_slots: List[DateTimeSlotInput] = Field(default_factory=list)
    is_anonymous_allowed: bool = False
    can_multiple_vote: bool = False

class EventStatusUpdate(BaseModel):
    """Schema for moving an event to another status"""
    status: EventStatus

# Snapshots returned by the stores. They mirror the ORM attribute names so
# SQLAlchemy rows and Firestore documents validate into the same shapes.

class UserRecord(BaseModel):
    uuid: str
    name: str
    email: str

    class Config:
        from_attributes = True

class TimeSlotRecord(BaseModel):
    id: int
    start_time: time
    end_time: time

    class Config:
        from_attributes = True

class EventDateRecord(BaseModel):
    id: int
    date: date
    event_time_slots: List[TimeSlotRecord] = Field(default_factory=list)

    class Config:
        from_attributes = True

class AvailabilityRecord(BaseModel):
    time_slot_id: int
    vote: bool

    class Config:
        from_attributes = True

class ParticipantRecord(BaseModel):
    id: Union[int, str]
    user_id: Optional[str] = None
    participant_name: str
    participant_email: Optional[str] = None
    is_anonymous: bool = False
    status: str = "pending"
    availability: List[AvailabilityRecord] = Field(default_factory=list)

    class Config:
        from_attributes = True

class EventSummary(BaseModel):
    """Event row without nested dates or participants"""
    id: str
    creator_id: str
    type: EventType
    name: str
    detail: Optional[str] = None
    location: Optional[str] = None
    status: EventStatus
    is_anonymous_allowed: bool = False
    can_multiple_vote: bool = False
    is_deleted: bool = False
    share_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class EventTree(EventSummary):
    """Event with its dates, slots, participants and their availability"""
    event_dates: List[EventDateRecord] = Field(default_factory=list)
    participants: List[ParticipantRecord] = Field(default_factory=list)
