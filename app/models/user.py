"""
Registered user model
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime

from app.core.db import Base

class User(Base):
    __tablename__ = "users"

    uuid = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
