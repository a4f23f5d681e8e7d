"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .participant import *
from .tally import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "TimeSlotInput",
    "DateTimeSlotInput",
    "EventCreate",
    "EventStatusUpdate",
    "UserRecord",
    "TimeSlotRecord",
    "EventDateRecord",
    "AvailabilityRecord",
    "ParticipantRecord",
    "EventSummary",
    "EventTree",
    "AvailabilitySubmission",
    "AvailabilityWithdrawal",
    "SlotVoter",
    "SlotTally",
    "DateTally",
    "EventTally",
    "MostVotedSlot",
]
