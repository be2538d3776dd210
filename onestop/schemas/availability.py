# onestop/schemas/availability.py
from __future__ import annotations

from datetime import date as date_type

from pydantic import BaseModel, Field

from onestop.schemas.room import RoomType
from onestop.schemas.room_booking import TIME_PATTERN, ConflictDetail
from onestop.services.interval_overlap import SlotState


class SlotCellRead(BaseModel):
    """
    One half-hour cell of the availability grid.
    """

    time: str = Field(..., examples=["10:00"])
    state: SlotState = Field(..., examples=["occupied"])
    is_start: bool = Field(
        False,
        description="True on the first slot of an occupied block (label the block here).",
    )
    booking_id: int | None = None
    event_name: str | None = None
    start_time: str | None = Field(None, description="Start of the occupying interval.")
    end_time: str | None = Field(None, description="End of the occupying interval.")


class RoomGridRead(BaseModel):
    room: RoomType
    room_name: str
    cells: list[SlotCellRead]


class DayGridRead(BaseModel):
    """
    48-slot occupancy grid of every room for one date.
    """

    date: date_type
    slots: list[str]
    rooms: list[RoomGridRead]


class AvailabilityCheckRead(BaseModel):
    room: RoomType
    date: date_type
    start_time: str
    end_time: str
    available: bool
    reason: str = Field(..., examples=["ok", "conflict", "invalid_range"])
    conflict: ConflictDetail | None = None


class PendingSelectionModel(BaseModel):
    room: RoomType
    date: date_type
    start_time: str = Field(..., pattern=TIME_PATTERN)


class SelectionClick(BaseModel):
    """
    One click on the availability grid, together with the current pending
    selection (if any) held by the client.
    """

    pending: PendingSelectionModel | None = None
    room: RoomType
    date: date_type
    slot_time: str = Field(..., pattern=TIME_PATTERN, examples=["11:30"])


class ConfirmedSlotModel(BaseModel):
    room: RoomType
    date: date_type
    start_time: str
    end_time: str


class SelectionStepRead(BaseModel):
    pending: PendingSelectionModel | None = None
    emitted: ConfirmedSlotModel | None = None
    rejection: str | None = None
