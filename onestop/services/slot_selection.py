# onestop/services/slot_selection.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date as date_type
from typing import Iterable, Optional

from onestop.services.interval_overlap import (
    BookedInterval,
    IntervalOutcome,
    time_to_minutes,
    validate_proposed_interval,
)

SLOT_TAKEN_MESSAGE = "This time slot is already booked. Please select another time."


@dataclass(frozen=True)
class PendingSelection:
    """First click of a two-click range selection on the availability grid."""

    room: str
    date: date_type
    start_time: str


@dataclass(frozen=True)
class ConfirmedSlot:
    room: str
    date: date_type
    start_time: str
    end_time: str


@dataclass(frozen=True)
class SelectionStep:
    """
    Outcome of one click.

    `pending` is the new selection state (None means idle). At most one of
    `emitted` / `rejection` is set.
    """

    pending: Optional[PendingSelection]
    emitted: Optional[ConfirmedSlot] = None
    rejection: Optional[str] = None


def click_slot(
    pending: Optional[PendingSelection],
    room: str,
    day: date_type,
    slot_time: str,
    existing: Iterable[BookedInterval],
) -> SelectionStep:
    """
    Advance the per-room selection state machine by one click.

    Transitions
    -----------
    - idle, click A                      => pending(A)
    - pending(A), click on another room  => pending(new click), A discarded
    - pending(A), click B with B <= A    => idle, nothing emitted
    - pending(A), click B with B > A     => validate [A, B):
        - free     => idle + emit (room, day, A, B)
        - conflict => idle + rejection message
    """
    if pending is None or pending.room != room or pending.date != day:
        return SelectionStep(
            pending=PendingSelection(room=room, date=day, start_time=slot_time)
        )

    start = time_to_minutes(pending.start_time)
    end = time_to_minutes(slot_time)
    if start is None or end is None or end <= start:
        return SelectionStep(pending=None)

    check = validate_proposed_interval(room, day, pending.start_time, slot_time, existing)
    if check.outcome is IntervalOutcome.OK:
        return SelectionStep(
            pending=None,
            emitted=ConfirmedSlot(
                room=room,
                date=day,
                start_time=pending.start_time,
                end_time=slot_time,
            ),
        )

    return SelectionStep(pending=None, rejection=SLOT_TAKEN_MESSAGE)
