"""
Vote tally schemas
"""

from datetime import date, time
from typing import List, Optional
from pydantic import BaseModel, Field

class SlotVoter(BaseModel):
    """A participant as shown next to a slot"""
    name: str
    is_anonymous: bool

class SlotTally(BaseModel):
    time_slot_id: int
    start_time: time
    end_time: time
    vote_count: int = 0
    participants: List[SlotVoter] = Field(default_factory=list)

class DateTally(BaseModel):
    event_date_id: int
    date: date
    time_slots: List[SlotTally] = Field(default_factory=list)

class EventTally(BaseModel):
    event_id: str
    dates: List[DateTally] = Field(default_factory=list)
    total_participants: int = 0

class MostVotedSlot(BaseModel):
    time_slot_id: int
    date: date
    start_time: time
    end_time: time
    vote_count: int
    participants: List[SlotVoter] = Field(default_factory=list)
