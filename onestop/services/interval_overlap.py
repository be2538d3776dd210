# onestop/services/interval_overlap.py
"""
Half-hour occupancy grid and [start, end) overlap checks for room bookings.

All functions here are pure: they work on already-fetched `BookedInterval`
values and never touch the database. Times are "HH:MM" strings on a single
calendar day; intervals never cross midnight.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date as date_type
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

SLOT_MINUTES = 30
SLOTS_PER_DAY = 24 * 60 // SLOT_MINUTES
PENDING_HIGHLIGHT_MINUTES = 60

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class BookedInterval:
    """
    An existing schedule of a booking, projected onto one room.

    `booking_id`, `schedule_id` and `event_name` are carried along only for
    attribution (tooltips, conflict messages).
    """

    room: str
    date: date_type
    start_time: str
    end_time: str
    booking_id: Optional[int] = None
    schedule_id: Optional[int] = None
    event_name: Optional[str] = None


@dataclass(frozen=True)
class Occupied:
    interval: BookedInterval

    @property
    def booking_id(self) -> Optional[int]:
        return self.interval.booking_id


@dataclass(frozen=True)
class Available:
    pass


SlotOccupancy = Union[Occupied, Available]


class IntervalOutcome(str, Enum):
    OK = "ok"
    CONFLICT = "conflict"
    INVALID_RANGE = "invalid_range"
    INVALID_TIME = "invalid_time"


@dataclass(frozen=True)
class IntervalCheck:
    """
    Result of validating a proposed interval for one room and day.
    """

    outcome: IntervalOutcome
    with_interval: Optional[BookedInterval] = None

    @property
    def ok(self) -> bool:
        return self.outcome is IntervalOutcome.OK


class SlotState(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    SELECTED = "selected"


@dataclass(frozen=True)
class SlotCell:
    time: str
    state: SlotState
    is_start: bool = False
    interval: Optional[BookedInterval] = None


@dataclass(frozen=True)
class RoomGrid:
    room: str
    date: date_type
    cells: tuple[SlotCell, ...]


def time_to_minutes(value: str) -> Optional[int]:
    """
    Convert "HH:MM" into minutes since midnight.

    Returns None for anything that is not a well-formed 24h clock time.
    """
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value.strip())
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_slots() -> tuple[str, ...]:
    """The 48 half-hour slot labels of a day, 00:00 through 23:30."""
    return tuple(minutes_to_time(i * SLOT_MINUTES) for i in range(SLOTS_PER_DAY))


def _bounds(interval: BookedInterval) -> Optional[tuple[int, int]]:
    start = time_to_minutes(interval.start_time)
    end = time_to_minutes(interval.end_time)
    if start is None or end is None:
        return None
    return start, end


def is_slot_occupied(
    slot_time: str,
    intervals: Iterable[BookedInterval],
) -> Optional[BookedInterval]:
    """
    Return the first interval [s, e) with s <= slot_time < e, or None.

    When stored intervals overlap each other the first match in iteration
    order wins.
    """
    slot_minute = time_to_minutes(slot_time)
    if slot_minute is None:
        return None

    for interval in intervals:
        bounds = _bounds(interval)
        if bounds is None:
            continue
        start, end = bounds
        if start <= slot_minute < end:
            return interval
    return None


def classify_slot(slot_time: str, intervals: Iterable[BookedInterval]) -> SlotOccupancy:
    match = is_slot_occupied(slot_time, intervals)
    if match is None:
        return Available()
    return Occupied(interval=match)


def intervals_overlap(a: tuple[int, int], b: tuple[int, int]) -> bool:
    """
    Half-open overlap test on (start, end) minute pairs.

    Touching intervals (a.end == b.start) do not overlap.
    """
    s1, e1 = a
    s2, e2 = b
    return s1 < e2 and s2 < e1


def validate_proposed_interval(
    room: str,
    day: date_type,
    proposed_start: str,
    proposed_end: str,
    existing: Iterable[BookedInterval],
) -> IntervalCheck:
    """
    Check a proposed [start, end) for `room` on `day` against existing
    intervals. Intervals for other rooms or days are ignored.

    Rules
    -----
    - malformed start/end             => INVALID_TIME
    - end <= start                    => INVALID_RANGE
    - overlaps any existing interval  => CONFLICT (first one found)
    - otherwise                       => OK
    """
    start = time_to_minutes(proposed_start)
    end = time_to_minutes(proposed_end)
    if start is None or end is None:
        return IntervalCheck(outcome=IntervalOutcome.INVALID_TIME)

    if end <= start:
        return IntervalCheck(outcome=IntervalOutcome.INVALID_RANGE)

    for interval in existing:
        if interval.room != room or interval.date != day:
            continue
        bounds = _bounds(interval)
        if bounds is None:
            continue
        if intervals_overlap((start, end), bounds):
            return IntervalCheck(outcome=IntervalOutcome.CONFLICT, with_interval=interval)

    return IntervalCheck(outcome=IntervalOutcome.OK)


def build_room_grid(
    room: str,
    day: date_type,
    intervals: Sequence[BookedInterval],
    pending_start: Optional[str] = None,
) -> RoomGrid:
    """
    Classify every half-hour slot of `day` for `room`.

    Occupied slots carry the matching interval; `is_start` marks the first
    occupied slot of each interval (so 10:15-11:00 is labelled at 10:30) and
    a block is labelled once. An interval that contains no slot boundary,
    such as 10:05-10:25, occupies no cell. Available slots from
    `pending_start` up to PENDING_HIGHLIGHT_MINUTES later are marked SELECTED
    while a two-click selection is in progress.
    """
    own = [i for i in intervals if i.room == room and i.date == day]
    pending_minutes = time_to_minutes(pending_start) if pending_start else None

    cells: list[SlotCell] = []
    previous: Optional[BookedInterval] = None
    for label in time_slots():
        minutes = time_to_minutes(label)
        occupancy = classify_slot(label, own)

        if isinstance(occupancy, Occupied):
            cells.append(
                SlotCell(
                    time=label,
                    state=SlotState.OCCUPIED,
                    is_start=occupancy.interval != previous,
                    interval=occupancy.interval,
                )
            )
            previous = occupancy.interval
            continue

        previous = None

        if (
            pending_minutes is not None
            and pending_minutes <= minutes <= pending_minutes + PENDING_HIGHLIGHT_MINUTES
        ):
            cells.append(SlotCell(time=label, state=SlotState.SELECTED))
            continue

        cells.append(SlotCell(time=label, state=SlotState.AVAILABLE))

    return RoomGrid(room=room, date=day, cells=tuple(cells))
