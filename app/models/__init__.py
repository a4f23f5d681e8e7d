"""
Database models package
"""

from .user import User
from .event import Event, EventDate, EventTimeSlot, EventType, EventStatus
from .participant import EventParticipant, ParticipantAvailability
from .vote import EventVote

__all__ = [
    "User",
    "Event",
    "EventDate",
    "EventTimeSlot",
    "EventType",
    "EventStatus",
    "EventParticipant",
    "ParticipantAvailability",
    "EventVote",
]
