# onestop/schemas/room_booking.py
from __future__ import annotations

from datetime import date as date_type, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from onestop.schemas.room import RoomType

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class RoomBookingStatus(str, Enum):
    """
    Lifecycle states of a room booking. REJECTED and CANCELLED bookings no
    longer occupy their rooms.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


NON_OCCUPYING_STATUSES = frozenset({RoomBookingStatus.REJECTED, RoomBookingStatus.CANCELLED})


class RoomArrangement(str, Enum):
    CLASSROOM = "classroom"
    USHAPE = "ushape"
    ISLAND = "island"


class BookingLogAction(str, Enum):
    CREATED = "CREATED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    UPDATED = "UPDATED"
    CANCELLED = "CANCELLED"


class MealRefreshment(BaseModel):
    lunch: bool = False
    dinner: bool = False


class RefreshmentOption(BaseModel):
    """
    Refreshment orders for a schedule: `bf` (buffet) and `atb` (at the
    boardroom table), each for lunch and/or dinner.
    """

    bf: MealRefreshment = Field(default_factory=MealRefreshment)
    atb: MealRefreshment = Field(default_factory=MealRefreshment)


class EventScheduleCreate(BaseModel):
    date: date_type = Field(..., examples=["2025-11-20"])
    start_time: str = Field(..., pattern=TIME_PATTERN, examples=["10:00"])
    end_time: str = Field(..., pattern=TIME_PATTERN, examples=["11:30"])
    participants: int = Field(1, ge=1, examples=[12])
    refreshment: RefreshmentOption = Field(default_factory=RefreshmentOption)


class EventScheduleRead(EventScheduleCreate):
    id: int

    class Config:
        from_attributes = True


class RoomBookingCreate(BaseModel):
    """
    Payload for submitting a room booking. Every schedule is booked for every
    selected room.
    """

    requestor_id: str = Field(..., min_length=1, examples=["staff-001"])
    requestor_name: str = Field(..., min_length=1, examples=["Aisyah Rahman"])
    division: str | None = Field(None, examples=["Finance"])
    request_date: date_type | None = Field(
        None,
        description="Date of the request; defaults to today.",
    )
    event_name: str = Field(..., min_length=1, examples=["Quarterly planning"])
    selected_rooms: list[RoomType] = Field(..., min_length=1, examples=[["elaiese"]])
    schedules: list[EventScheduleCreate] = Field(..., min_length=1)
    extra_items: str | None = None
    room_arrangement: list[RoomArrangement] | None = None
    requestor_signature_name: str | None = None
    requestor_signature_date: date_type | None = None

    @field_validator("selected_rooms")
    @classmethod
    def unique_rooms(cls, value: list[RoomType]) -> list[RoomType]:
        if len(set(value)) != len(value):
            raise ValueError("selected_rooms must not contain duplicates")
        return value


class RoomBookingRead(BaseModel):
    """
    Public representation of a room booking.
    """

    id: int
    requestor_id: str
    requestor_name: str
    division: str | None = None
    request_date: date_type
    event_name: str
    selected_rooms: list[RoomType]
    schedules: list[EventScheduleRead]
    extra_items: str | None = None
    room_arrangement: list[RoomArrangement] | None = None
    requestor_signature_name: str | None = None
    requestor_signature_date: date_type | None = None
    final_approval: str | None = None
    final_approver_name: str | None = None
    final_approval_date: date_type | None = None
    status: RoomBookingStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingLogRead(BaseModel):
    id: int
    booking_id: int
    action: BookingLogAction
    performed_by: str
    performed_by_name: str
    timestamp: datetime
    notes: str | None = None
    changes: dict | None = None

    class Config:
        from_attributes = True


class BookingStatusUpdate(BaseModel):
    """
    Admin decision on a booking.
    """

    status: RoomBookingStatus = Field(..., examples=["APPROVED"])
    approver_id: str = Field(..., min_length=1, examples=["admin-01"])
    approver_name: str = Field(..., min_length=1, examples=["Facility Team"])
    notes: str | None = Field(None, examples=["Approved with U-shape setup."])


class BookingCancel(BaseModel):
    requestor_id: str = Field(..., min_length=1)
    requestor_name: str = Field(..., min_length=1)
    notes: str | None = None


class ConflictDetail(BaseModel):
    """
    Attribution of the existing booking that blocks a proposed interval.
    """

    room: RoomType
    date: date_type
    start_time: str
    end_time: str
    booking_id: int | None = None
    event_name: str | None = None