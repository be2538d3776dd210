# tests/test_slot_selection.py
from datetime import date

from onestop.services.interval_overlap import BookedInterval
from onestop.services.slot_selection import (
    SLOT_TAKEN_MESSAGE,
    PendingSelection,
    click_slot,
)

DAY = date(2025, 11, 20)

EXISTING = [
    BookedInterval(room="elaiese", date=DAY, start_time="10:00", end_time="11:30", booking_id=1),
]


def test_first_click_starts_pending_selection():
    step = click_slot(None, "elaiese", DAY, "13:00", EXISTING)

    assert step.pending == PendingSelection(room="elaiese", date=DAY, start_time="13:00")
    assert step.emitted is None
    assert step.rejection is None


def test_second_click_later_on_same_room_emits_slot():
    pending = PendingSelection(room="elaiese", date=DAY, start_time="13:00")

    step = click_slot(pending, "elaiese", DAY, "14:30", EXISTING)

    assert step.pending is None
    assert step.emitted is not None
    assert (step.emitted.room, step.emitted.start_time, step.emitted.end_time) == (
        "elaiese",
        "13:00",
        "14:30",
    )


def test_second_click_touching_existing_booking_is_accepted():
    pending = PendingSelection(room="elaiese", date=DAY, start_time="11:30")

    step = click_slot(pending, "elaiese", DAY, "12:00", EXISTING)

    assert step.emitted is not None
    assert step.rejection is None


def test_second_click_over_existing_booking_is_rejected():
    pending = PendingSelection(room="elaiese", date=DAY, start_time="09:00")

    step = click_slot(pending, "elaiese", DAY, "10:30", EXISTING)

    assert step.pending is None
    assert step.emitted is None
    assert step.rejection == SLOT_TAKEN_MESSAGE


def test_second_click_at_or_before_start_cancels():
    pending = PendingSelection(room="elaiese", date=DAY, start_time="13:00")

    for slot in ("13:00", "12:30"):
        step = click_slot(pending, "elaiese", DAY, slot, EXISTING)
        assert step.pending is None
        assert step.emitted is None
        assert step.rejection is None


def test_click_on_another_room_restarts_selection():
    pending = PendingSelection(room="elaiese", date=DAY, start_time="13:00")

    step = click_slot(pending, "olivie", DAY, "15:00", EXISTING)

    assert step.pending == PendingSelection(room="olivie", date=DAY, start_time="15:00")
    assert step.emitted is None
