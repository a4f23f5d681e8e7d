"""
Vote tallies per time slot and selection of the winning slot.

Everything here is a pure function of an EventTree snapshot: no store access,
no side effects.
"""

from collections import defaultdict
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union

from app.models.event import EventType
from app.schemas.event import EventDateRecord, EventTree, ParticipantRecord, TimeSlotRecord
from app.schemas.tally import DateTally, EventTally, MostVotedSlot, SlotTally, SlotVoter

ANONYMOUS_NAME = "Anonymous"


def display_name(participant: ParticipantRecord) -> str:
    if participant.is_anonymous:
        return ANONYMOUS_NAME
    return participant.participant_name or "Unknown"


def iter_slots(event: EventTree) -> Iterator[Tuple[EventDateRecord, TimeSlotRecord]]:
    """Yield every (date, slot) pair ordered by date, start time, end time, then id"""
    for event_date in sorted(event.event_dates, key=lambda d: (d.date, d.id)):
        for slot in sorted(event_date.event_time_slots, key=lambda s: (s.start_time, s.end_time, s.id)):
            yield event_date, slot


def slot_voters(event: EventTree) -> Dict[int, List[SlotVoter]]:
    """Map slot id to the participants who voted yes on it"""
    voters: Dict[int, List[SlotVoter]] = defaultdict(list)
    for participant in sorted(event.participants, key=lambda p: p.id):
        voter = SlotVoter(name=display_name(participant), is_anonymous=participant.is_anonymous)
        for row in participant.availability:
            if row.vote:
                voters[row.time_slot_id].append(voter)
    return voters


def taken_slot_ids(event: EventTree, exclude_participant_id: Optional[Union[int, str]] = None) -> Set[int]:
    """Slots already claimed by someone; used for 1:1 exclusivity"""
    taken = set()
    for participant in event.participants:
        if exclude_participant_id is not None and participant.id == exclude_participant_id:
            continue
        taken.update(row.time_slot_id for row in participant.availability if row.vote)
    return taken


def tally_event(event: EventTree) -> EventTally:
    voters = slot_voters(event)
    dates: Dict[int, DateTally] = {}
    for event_date, slot in iter_slots(event):
        date_tally = dates.setdefault(
            event_date.id, DateTally(event_date_id=event_date.id, date=event_date.date)
        )
        slot_participants = voters.get(slot.id, [])
        date_tally.time_slots.append(SlotTally(
            time_slot_id=slot.id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            vote_count=len(slot_participants),
            participants=slot_participants,
        ))
    return EventTally(
        event_id=event.id,
        dates=list(dates.values()),
        total_participants=len(event.participants),
    )


def slot_counts(event: EventTree) -> Dict[int, int]:
    """Yes-vote count per slot id"""
    return {
        slot.time_slot_id: slot.vote_count
        for date_tally in tally_event(event).dates
        for slot in date_tally.time_slots
    }


def most_voted_slot(event: EventTree, tally: Optional[EventTally] = None) -> Optional[MostVotedSlot]:
    """Pick the slot to finalize.

    Group events: the strictly highest vote count; ties go to the earliest slot
    in iter_slots order. No slot is chosen while every count is zero.
    One-on-one events: the earliest booked slot.
    """
    tally = tally or tally_event(event)
    best: Optional[Tuple[DateTally, SlotTally]] = None
    for date_tally in tally.dates:
        for slot in date_tally.time_slots:
            if event.type == EventType.ONE_TO_ONE:
                if slot.vote_count > 0:
                    return _winner(date_tally, slot)
            elif slot.vote_count > (best[1].vote_count if best else 0):
                best = (date_tally, slot)
    return _winner(*best) if best else None


def booked_slots(event: EventTree, tally: Optional[EventTally] = None) -> List[MostVotedSlot]:
    """Every slot with at least one yes vote, in slot order"""
    tally = tally or tally_event(event)
    return [
        _winner(date_tally, slot)
        for date_tally in tally.dates
        for slot in date_tally.time_slots
        if slot.vote_count > 0
    ]


def _winner(date_tally: DateTally, slot: SlotTally) -> MostVotedSlot:
    return MostVotedSlot(
        time_slot_id=slot.time_slot_id,
        date=date_tally.date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        vote_count=slot.vote_count,
        participants=slot.participants,
    )
