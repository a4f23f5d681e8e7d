"""
Tests for calendar links, .ics files and the results export
"""

import io
from datetime import date, time

import pandas as pd

from app.schemas.event import EventSummary, EventTree
from app.schemas.tally import DateTally, EventTally, MostVotedSlot, SlotTally, SlotVoter
from app.services.calendar_service import calendar_links, generate_event_ics
from app.services.export_service import ExportService

EVENT = EventSummary(
    id="eventra-3f2a9c1e-AbC12",
    creator_id="3f2a9c1e-7b4d-4e8a-9c2f-1a2b3c4d5e6f",
    type="group",
    name="Team Sync",
    detail="Quarterly planning",
    location="Room 4B",
    status="completed",
    share_url="http://localhost:5173/event/share/eventra-3f2a9c1e-AbC12",
)

FINAL_SLOT = MostVotedSlot(
    time_slot_id=1,
    date=date(2030, 6, 15),
    start_time=time(9, 0),
    end_time=time(10, 0),
    vote_count=2,
)


def test_calendar_links():
    links = calendar_links(EVENT, FINAL_SLOT)

    assert "dates=20300615T090000%2F20300615T100000" in links["google"]
    assert "text=Team+Sync" in links["google"]
    assert "startdt=2030-06-15T09%3A00%3A00" in links["outlook"]
    assert links["ics"] == "/events/eventra-3f2a9c1e-AbC12/calendar.ics"


def test_ics_file():
    ics = generate_event_ics(EVENT, FINAL_SLOT).decode()

    assert "BEGIN:VEVENT" in ics
    assert "DTSTART:20300615T090000" in ics
    assert "DTEND:20300615T100000" in ics
    assert "SUMMARY:Team Sync" in ics
    assert "LOCATION:Room 4B" in ics


def test_results_export():
    tally = EventTally(
        event_id=EVENT.id,
        total_participants=2,
        dates=[DateTally(event_date_id=1, date=date(2030, 6, 15), time_slots=[
            SlotTally(time_slot_id=1, start_time=time(9), end_time=time(10), vote_count=2, participants=[
                SlotVoter(name="P1", is_anonymous=False), SlotVoter(name="Anonymous", is_anonymous=True),
            ]),
            SlotTally(time_slot_id=2, start_time=time(14), end_time=time(15), vote_count=0),
        ])],
    )
    event = {**EVENT.model_dump(), "participants": [
        {"id": 1, "participant_name": "P1", "participant_email": "p1@acme.io",
         "availability": [{"time_slot_id": 1, "vote": True}]},
        {"id": 2, "participant_name": "Anonymous", "is_anonymous": True,
         "availability": [{"time_slot_id": 1, "vote": True}]},
    ]}
    content = ExportService.export_results(EventTree.model_validate(event), tally)

    results = pd.read_excel(io.BytesIO(content), sheet_name="Results")
    assert list(results.columns) == ExportService.COLUMNS
    assert results["Votes"].tolist() == [2, 0]
    assert results["Participants"].iloc[0] == "P1, Anonymous"

    participants = pd.read_excel(io.BytesIO(content), sheet_name="Participants", keep_default_na=False)
    assert participants["Email"].tolist() == ["p1@acme.io", ""]
