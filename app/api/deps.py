"""
FastAPI dependencies wiring the store, services and notifier
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.services.availability_service import AvailabilityService
from app.services.event_service import EventService
from app.services.firebase_client import get_firestore_client
from app.services.notification_service import NotificationService
from app.services.repositories import FirestoreStore, SqlStore, use_firestore


def get_store(db: Session = Depends(get_db)):
    """Per-request store handle"""
    if use_firestore():
        return FirestoreStore(get_firestore_client())
    return SqlStore(db)


def get_notifier() -> NotificationService:
    return NotificationService()


def get_event_service(store=Depends(get_store)) -> EventService:
    return EventService(store)


def get_availability_service(store=Depends(get_store)) -> AvailabilityService:
    return AvailabilityService(store)
