"""
Append-only audit log of submissions
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from app.core.db import Base

class EventVote(Base):
    __tablename__ = "event_votes"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(String(64), ForeignKey("events.id"), nullable=False, index=True)
    voter_email = Column(String(255), nullable=True)
    is_anonymous = Column(Boolean, default=False)
    voted_at = Column(DateTime, default=datetime.utcnow)
