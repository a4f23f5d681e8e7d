"""
Human-readable date and time text for emails and calendar entries
"""

from datetime import date, time
from typing import Iterable, Tuple


def format_date(value: date) -> str:
    """Thursday, June 15, 2023"""
    return f"{value:%A, %B} {value.day}, {value.year}"


def format_slot(value: date, start: time, end: time) -> str:
    """Thursday, June 15, 2023 10:00 - 11:00"""
    return f"{format_date(value)} {start:%H:%M} - {end:%H:%M}"


def format_slots(slots: Iterable[Tuple[date, time, time]]) -> str:
    return "; ".join(format_slot(d, start, end) for d, start, end in slots)
