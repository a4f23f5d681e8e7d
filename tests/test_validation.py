"""
Tests for event creation and submission validation
"""

from datetime import date, datetime, time

from app.models.event import EventType
from app.schemas.event import EventCreate, EventTree
from app.schemas.participant import AvailabilitySubmission
from app.services.validation import selected_slot_ids, validate_event_create, validate_submission

NOW = datetime(2030, 1, 1, 8, 0)


def make_event_create(slots, type=EventType.GROUP, event_date=date(2030, 6, 15), name="Team Sync"):
    return EventCreate(
        type=type,
        name=name,
        creator_id="3f2a9c1e-7b4d-4e8a-9c2f-1a2b3c4d5e6f",
        date_time_slots=[{
            "date": event_date,
            "time_slots": [{"start_time": s, "end_time": e} for s, e in slots],
        }],
    )


def make_event(type=EventType.GROUP, is_anonymous_allowed=True, can_multiple_vote=True):
    return EventTree.model_validate({
        "id": "eventra-3f2a9c1e-AbC12",
        "creator_id": "3f2a9c1e-7b4d-4e8a-9c2f-1a2b3c4d5e6f",
        "type": type,
        "name": "Team Sync",
        "status": "pending",
        "is_anonymous_allowed": is_anonymous_allowed,
        "can_multiple_vote": can_multiple_vote,
        "event_dates": [{
            "id": 1,
            "date": "2030-06-15",
            "event_time_slots": [
                {"id": 1, "start_time": "09:00:00", "end_time": "10:00:00"},
                {"id": 2, "start_time": "14:00:00", "end_time": "15:00:00"},
            ],
        }],
    })


def test_valid_group_event():
    event_data = make_event_create([(time(9), time(10)), (time(10), time(11))])

    assert validate_event_create(event_data, now=NOW) == []


def test_overlapping_slots_rejected():
    event_data = make_event_create([(time(9), time(10)), (time(9, 30), time(11))])

    errors = validate_event_create(event_data, now=NOW)
    assert errors == [
        "Time conflict detected on June 15, 2030: 09:00-10:00 overlaps with 09:30-11:00"
    ]


def test_start_must_precede_end():
    errors = validate_event_create(make_event_create([(time(10), time(9))]), now=NOW)

    assert any("Start time must be before end time" in e for e in errors)


def test_missing_name_and_dates():
    event_data = EventCreate(type=EventType.GROUP, name="  ", creator_id="u1")

    assert validate_event_create(event_data, now=NOW) == [
        "Event name is required",
        "Please select at least one date",
    ]


def test_past_date_rejected():
    event_data = make_event_create([(time(9), time(10))], event_date=date(2029, 12, 31))

    assert validate_event_create(event_data, now=NOW) == [
        "Cannot create event for past date: December 31, 2029"
    ]


def test_past_slot_today_rejected():
    event_data = make_event_create([(time(7), time(8)), (time(9), time(10))], event_date=NOW.date())

    errors = validate_event_create(event_data, now=NOW)
    assert errors == ["Cannot create a time slot in the past: January 1, 2030 07:00"]


def test_one_on_one_gap():
    too_close = make_event_create([(time(9), time(10)), (time(10, 15), time(11))], type=EventType.ONE_TO_ONE)
    enough = make_event_create([(time(9), time(10)), (time(10, 30), time(11))], type=EventType.ONE_TO_ONE)

    assert validate_event_create(too_close, now=NOW) == [
        "Time slots must be at least 30 minutes apart for 1:1 events (June 15, 2030)"
    ]
    assert validate_event_create(enough, now=NOW) == []


def test_one_on_one_slot_limit():
    slots = [(time(h), time(h, 30)) for h in range(8, 19)]
    event_data = make_event_create(slots, type=EventType.ONE_TO_ONE)

    assert len(slots) == 11
    assert "1:1 events can have a maximum of 10 time slots" in validate_event_create(event_data, now=NOW)


def test_selected_slot_ids_merges_votes():
    submission = AvailabilitySubmission(time_slot_ids=[2, 2], votes={1: True, 3: False})

    assert selected_slot_ids(submission) == [2, 1]


def test_submission_requires_identity_and_slot():
    errors = validate_submission(AvailabilitySubmission(), make_event())

    assert errors == [
        "Please select at least one time slot",
        "Please enter your name",
        "Please enter your email address",
    ]


def test_submission_rejects_bad_email():
    submission = AvailabilitySubmission(name="P1", email="not-an-email", time_slot_ids=[1])

    assert validate_submission(submission, make_event()) == ["Please enter a valid email address"]


def test_anonymous_submission_rules():
    submission = AvailabilitySubmission(is_anonymous=True, time_slot_ids=[1])

    assert validate_submission(submission, make_event()) == []
    assert validate_submission(submission, make_event(is_anonymous_allowed=False)) == [
        "Anonymous responses are not allowed for this event"
    ]


def test_unknown_slot_rejected():
    submission = AvailabilitySubmission(name="P1", email="p1@acme.io", time_slot_ids=[1, 99])

    assert validate_submission(submission, make_event()) == ["Unknown time slot(s) for this event: 99"]


def test_single_choice_rules():
    submission = AvailabilitySubmission(name="P1", email="p1@acme.io", time_slot_ids=[1, 2])

    assert validate_submission(submission, make_event(can_multiple_vote=False)) == [
        "Multiple time slot selection is not allowed for this event"
    ]
    assert validate_submission(submission, make_event(type=EventType.ONE_TO_ONE)) == [
        "Please select only one time slot for 1:1 events"
    ]
