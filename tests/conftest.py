"""
Shared fixtures: a SQLite-backed store, a registered creator and an event factory
"""

from datetime import date, datetime, time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base, enable_sqlite_write_lock
from app.models import User, EventType
from app.schemas.event import EventCreate
from app.services.event_service import EventService
from app.services.repositories import SqlStore

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_eventra.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
enable_sqlite_write_lock(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CREATOR_UUID = "3f2a9c1e-7b4d-4e8a-9c2f-1a2b3c4d5e6f"
NOW = datetime(2030, 1, 1, 8, 0)
EVENT_DATE = date(2030, 6, 15)


@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Extra sessions on the test database, for concurrent access"""
    return TestingSessionLocal


@pytest.fixture
def store(db_session):
    return SqlStore(db_session)


@pytest.fixture
def creator(db_session):
    user = User(uuid=CREATOR_UUID, name="Olivia Organizer", email="olivia@example.com")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def make_event(store, creator):
    """Create an event through EventService; two slots on one date by default"""
    def _make(
        type=EventType.GROUP,
        dates=None,
        can_multiple_vote=True,
        is_anonymous_allowed=True,
        name="Team Sync",
    ):
        if dates is None:
            dates = [(EVENT_DATE, [(time(9, 0), time(10, 0)), (time(14, 0), time(15, 0))])]
        event_data = EventCreate(
            type=type,
            name=name,
            detail="Quarterly planning",
            location="Room 4B",
            creator_id=creator.uuid,
            date_time_slots=[
                {"date": d, "time_slots": [{"start_time": s, "end_time": e} for s, e in slots]}
                for d, slots in dates
            ],
            is_anonymous_allowed=is_anonymous_allowed,
            can_multiple_vote=can_multiple_vote,
        )
        return EventService(store).create_event(event_data, now=NOW)
    return _make