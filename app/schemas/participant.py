"""
Participant-facing request schemas
"""

from typing import Optional, List, Dict
from pydantic import BaseModel, Field

class AvailabilitySubmission(BaseModel):
    """Availability submitted from the share page.

    ``time_slot_ids`` lists the chosen slots. ``votes`` may carry an explicit
    yes/no per slot instead; both can be combined. ``overwrite`` confirms that
    an earlier submission under the same email should be replaced.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    is_anonymous: bool = False
    time_slot_ids: List[int] = Field(default_factory=list)
    votes: Optional[Dict[int, bool]] = None
    overwrite: bool = False

class AvailabilityWithdrawal(BaseModel):
    """Withdraw a participant's availability"""
    email: str
