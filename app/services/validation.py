"""
Validation for event creation and availability submissions.

Each check returns a list of human-readable messages; an empty list means the
input is valid. Services collect them and raise ValidationError.
"""

from datetime import date, datetime, time
from typing import List, Optional, Set

from email_validator import EmailNotValidError, validate_email

from app.core.config import settings
from app.models.event import EventType
from app.schemas.event import DateTimeSlotInput, EventCreate, EventTree
from app.schemas.participant import AvailabilitySubmission

MAX_EVENT_NAME_LENGTH = 100


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def _fmt_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def _fmt_range(start: time, end: time) -> str:
    return f"{start:%H:%M}-{end:%H:%M}"


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def check_slot_ranges(date_slots: List[DateTimeSlotInput]) -> List[str]:
    errors = []
    for date_slot in date_slots:
        if not date_slot.time_slots:
            errors.append(f"No time slots selected for {_fmt_date(date_slot.date)}")
        for slot in date_slot.time_slots:
            if slot.start_time >= slot.end_time:
                errors.append(
                    f"Start time must be before end time on {_fmt_date(date_slot.date)}: "
                    f"{_fmt_range(slot.start_time, slot.end_time)}"
                )
    return errors


def check_time_conflicts(date_slots: List[DateTimeSlotInput]) -> List[str]:
    """Report overlapping slots on the same date; touching slots are fine"""
    errors = []
    for date_slot in date_slots:
        ordered = sorted(date_slot.time_slots, key=lambda s: s.start_time)
        for current, following in zip(ordered, ordered[1:]):
            if current.end_time > following.start_time:
                errors.append(
                    f"Time conflict detected on {_fmt_date(date_slot.date)}: "
                    f"{_fmt_range(current.start_time, current.end_time)} overlaps with "
                    f"{_fmt_range(following.start_time, following.end_time)}"
                )
    return errors


def check_past_dates(date_slots: List[DateTimeSlotInput], now: datetime) -> List[str]:
    errors = []
    today = now.date()
    for date_slot in date_slots:
        if date_slot.date < today:
            errors.append(f"Cannot create event for past date: {_fmt_date(date_slot.date)}")
        elif date_slot.date == today:
            for slot in date_slot.time_slots:
                if datetime.combine(today, slot.start_time) < now:
                    errors.append(
                        f"Cannot create a time slot in the past: {_fmt_date(today)} {slot.start_time:%H:%M}"
                    )
    return errors


def check_duplicate_dates(date_slots: List[DateTimeSlotInput]) -> List[str]:
    seen: Set[date] = set()
    errors = []
    for date_slot in date_slots:
        if date_slot.date in seen:
            errors.append(f"Date listed more than once: {_fmt_date(date_slot.date)}")
        seen.add(date_slot.date)
    return errors


def check_one_on_one(date_slots: List[DateTimeSlotInput]) -> List[str]:
    errors = []
    total = sum(len(d.time_slots) for d in date_slots)
    if total > settings.ONE_ON_ONE_MAX_SLOTS:
        errors.append(f"1:1 events can have a maximum of {settings.ONE_ON_ONE_MAX_SLOTS} time slots")

    min_gap = settings.ONE_ON_ONE_MIN_GAP_MINUTES
    for date_slot in date_slots:
        ordered = sorted(date_slot.time_slots, key=lambda s: s.start_time)
        for current, following in zip(ordered, ordered[1:]):
            if _minutes(following.start_time) - _minutes(current.end_time) < min_gap:
                errors.append(
                    f"Time slots must be at least {min_gap} minutes apart for 1:1 events "
                    f"({_fmt_date(date_slot.date)})"
                )
                break
    return errors


def validate_event_create(event_data: EventCreate, now: Optional[datetime] = None) -> List[str]:
    """Validate an event before it is stored"""
    now = now or datetime.now()
    errors = []

    name = (event_data.name or "").strip()
    if not name:
        errors.append("Event name is required")
    elif len(name) > MAX_EVENT_NAME_LENGTH:
        errors.append(f"Event name must be at most {MAX_EVENT_NAME_LENGTH} characters")

    if not event_data.date_time_slots:
        errors.append("Please select at least one date")
        return errors

    errors.extend(check_duplicate_dates(event_data.date_time_slots))
    errors.extend(check_slot_ranges(event_data.date_time_slots))
    errors.extend(check_past_dates(event_data.date_time_slots, now))
    errors.extend(check_time_conflicts(event_data.date_time_slots))
    if event_data.type == EventType.ONE_TO_ONE:
        errors.extend(check_one_on_one(event_data.date_time_slots))
    return errors


def selected_slot_ids(submission: AvailabilitySubmission) -> List[int]:
    """Slots the participant said yes to, in submission order without repeats"""
    selected = list(dict.fromkeys(submission.time_slot_ids))
    for slot_id, vote in (submission.votes or {}).items():
        if vote and slot_id not in selected:
            selected.append(slot_id)
    return selected


def validate_submission(submission: AvailabilitySubmission, event: EventTree) -> List[str]:
    """Validate a submission against the event it targets"""
    errors = []
    selected = selected_slot_ids(submission)
    if not selected:
        errors.append("Please select at least one time slot")

    email = (submission.email or "").strip()
    if submission.is_anonymous:
        if not event.is_anonymous_allowed:
            errors.append("Anonymous responses are not allowed for this event")
        if email and not is_valid_email(email):
            errors.append("Please enter a valid email address")
    else:
        if not (submission.name or "").strip():
            errors.append("Please enter your name")
        if not email:
            errors.append("Please enter your email address")
        elif not is_valid_email(email):
            errors.append("Please enter a valid email address")

    known = {slot.id for event_date in event.event_dates for slot in event_date.event_time_slots}
    referenced = set(submission.time_slot_ids) | set((submission.votes or {}).keys())
    unknown = sorted(referenced - known)
    if unknown:
        errors.append(f"Unknown time slot(s) for this event: {', '.join(str(s) for s in unknown)}")

    if len(selected) > 1:
        if event.type == EventType.ONE_TO_ONE:
            errors.append("Please select only one time slot for 1:1 events")
        elif not event.can_multiple_vote:
            errors.append("Multiple time slot selection is not allowed for this event")
    return errors
