"""
Add-to-calendar links and .ics files for a finalized slot
"""

from datetime import datetime
from urllib.parse import urlencode

from icalendar import Calendar, Event

from app.schemas.event import EventSummary
from app.schemas.tally import MostVotedSlot

NO_DETAILS = "No additional details"
NO_LOCATION = "No location specified"


def _start_end(slot: MostVotedSlot) -> tuple[datetime, datetime]:
    return datetime.combine(slot.date, slot.start_time), datetime.combine(slot.date, slot.end_time)


def google_calendar_url(event: EventSummary, slot: MostVotedSlot) -> str:
    start, end = _start_end(slot)
    params = {
        "action": "TEMPLATE",
        "text": event.name,
        "dates": f"{start:%Y%m%dT%H%M%S}/{end:%Y%m%dT%H%M%S}",
        "details": event.detail or NO_DETAILS,
        "location": event.location or NO_LOCATION,
    }
    return f"https://calendar.google.com/calendar/render?{urlencode(params)}"


def outlook_calendar_url(event: EventSummary, slot: MostVotedSlot) -> str:
    start, end = _start_end(slot)
    params = {
        "subject": event.name,
        "startdt": f"{start:%Y-%m-%dT%H:%M:%S}",
        "enddt": f"{end:%Y-%m-%dT%H:%M:%S}",
        "body": event.detail or NO_DETAILS,
        "location": event.location or NO_LOCATION,
    }
    return f"https://outlook.office.com/calendar/0/deeplink/compose?{urlencode(params)}"


def generate_event_ics(event: EventSummary, slot: MostVotedSlot) -> bytes:
    """RFC 5545 calendar with one VEVENT; times are floating (no timezone)"""
    start, end = _start_end(slot)

    cal = Calendar()
    cal.add("prodid", "-//Eventra//Event Scheduling//EN")
    cal.add("version", "2.0")

    vevent = Event()
    vevent.add("uid", f"{event.id}-{slot.time_slot_id}@eventra")
    vevent.add("dtstamp", datetime.utcnow())
    vevent.add("dtstart", start)
    vevent.add("dtend", end)
    vevent.add("summary", event.name)
    vevent.add("description", event.detail or NO_DETAILS)
    vevent.add("location", event.location or "")
    if event.share_url:
        vevent.add("url", event.share_url)
    cal.add_component(vevent)

    return cal.to_ical()


def calendar_links(event: EventSummary, slot: MostVotedSlot) -> dict:
    return {
        "google": google_calendar_url(event, slot),
        "outlook": outlook_calendar_url(event, slot),
        "ics": f"/events/{event.id}/calendar.ics",
    }
