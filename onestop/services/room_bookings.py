# onestop/services/room_bookings.py
from __future__ import annotations

from datetime import date as date_type
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.core.logging import get_logger
from onestop.models.room import Room
from onestop.models.room_booking import BookingLog, BookingSchedule, RoomBooking
from onestop.schemas.room_booking import (
    NON_OCCUPYING_STATUSES,
    BookingLogAction,
    RoomBookingCreate,
    RoomBookingStatus,
)
from onestop.services.interval_overlap import (
    BookedInterval,
    IntervalCheck,
    IntervalOutcome,
    validate_proposed_interval,
)

logger = get_logger(__name__)

_NON_OCCUPYING_VALUES = tuple(s.value for s in NON_OCCUPYING_STATUSES)


class BookingNotFoundError(LookupError):
    """Raised when a booking id does not exist."""


class UnknownRoomError(ValueError):
    """Raised when a booking references a room that is not in the catalog."""


class InvalidScheduleError(ValueError):
    """Raised when a schedule has a malformed or empty time range."""


class InvalidStatusTransitionError(ValueError):
    """Raised when a booking cannot move to the requested status."""


class BookingOwnershipError(PermissionError):
    """Raised when someone other than the requestor tries to cancel a booking."""


class BookingConflictError(Exception):
    """
    Raised when a proposed schedule overlaps an occupying booking.

    `interval` is the existing interval that blocks the proposal.
    """

    def __init__(self, interval: BookedInterval) -> None:
        self.interval = interval
        super().__init__(
            f"Room '{interval.room}' is already booked on {interval.date.isoformat()} "
            f"from {interval.start_time} to {interval.end_time}."
        )


def flatten_intervals(bookings: Iterable[RoomBooking], day: date_type) -> list[BookedInterval]:
    """
    Project the schedules of `bookings` on `day` onto each selected room.
    """
    intervals: list[BookedInterval] = []
    for booking in bookings:
        for schedule in booking.schedules:
            if schedule.date != day:
                continue
            for room in booking.selected_rooms:
                intervals.append(
                    BookedInterval(
                        room=room,
                        date=schedule.date,
                        start_time=schedule.start_time,
                        end_time=schedule.end_time,
                        booking_id=booking.id,
                        schedule_id=schedule.id,
                        event_name=booking.event_name,
                    )
                )
    return intervals


async def fetch_room_bookings_by_date(db: AsyncSession, day: date_type) -> list[RoomBooking]:
    """
    Bookings that occupy rooms on `day` (not REJECTED/CANCELLED and with at
    least one schedule on that date), oldest first.
    """
    scheduled_that_day = select(BookingSchedule.booking_id).where(BookingSchedule.date == day)
    stmt = (
        select(RoomBooking)
        .where(
            RoomBooking.id.in_(scheduled_that_day),
            RoomBooking.status.not_in(_NON_OCCUPYING_VALUES),
        )
        .order_by(RoomBooking.id.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def fetch_occupying_intervals(
    db: AsyncSession,
    day: date_type,
    room: Optional[str] = None,
    exclude_booking_id: Optional[int] = None,
) -> list[BookedInterval]:
    bookings = await fetch_room_bookings_by_date(db, day)
    intervals = flatten_intervals(
        (b for b in bookings if b.id != exclude_booking_id),
        day,
    )
    if room is not None:
        intervals = [i for i in intervals if i.room == room]
    return intervals


async def check_room_availability(
    db: AsyncSession,
    room: str,
    day: date_type,
    start_time: str,
    end_time: str,
) -> IntervalCheck:
    existing = await fetch_occupying_intervals(db, day, room=room)
    return validate_proposed_interval(room, day, start_time, end_time, existing)


async def room_availability_by_date(db: AsyncSession, day: date_type) -> dict[str, bool]:
    """
    For every room in the catalog: True if it has no occupying booking on
    `day` at all.
    """
    rooms = (await db.execute(select(Room.type))).scalars().all()
    busy = {i.room for i in await fetch_occupying_intervals(db, day)}
    return {room_type: room_type not in busy for room_type in rooms}


async def _validate_schedules(
    db: AsyncSession,
    rooms: list[str],
    schedules: Iterable,
    event_name: str,
    exclude_booking_id: Optional[int] = None,
) -> None:
    """
    Check every (room, schedule) pair against stored occupying bookings and
    against the other schedules of the same request.
    """
    stored_by_day: dict[date_type, list[BookedInterval]] = {}
    accepted: list[BookedInterval] = []

    for schedule in schedules:
        if schedule.date not in stored_by_day:
            stored_by_day[schedule.date] = await fetch_occupying_intervals(
                db, schedule.date, exclude_booking_id=exclude_booking_id
            )
        existing = stored_by_day[schedule.date] + accepted

        for room in rooms:
            check = validate_proposed_interval(
                room,
                schedule.date,
                schedule.start_time,
                schedule.end_time,
                existing,
            )
            if check.outcome is IntervalOutcome.CONFLICT:
                raise BookingConflictError(check.with_interval)
            if not check.ok:
                raise InvalidScheduleError(
                    f"Schedule on {schedule.date.isoformat()} has an invalid time range "
                    f"({schedule.start_time}-{schedule.end_time}): end must be after start."
                )

        accepted.extend(
            BookedInterval(
                room=room,
                date=schedule.date,
                start_time=schedule.start_time,
                end_time=schedule.end_time,
                event_name=event_name,
            )
            for room in rooms
        )


async def get_room_booking(db: AsyncSession, booking_id: int) -> RoomBooking:
    stmt = (
        select(RoomBooking)
        .where(RoomBooking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    booking = result.scalar_one_or_none()
    if booking is None:
        raise BookingNotFoundError(f"Room booking with id={booking_id} not found")
    return booking


async def create_room_booking(db: AsyncSession, payload: RoomBookingCreate) -> RoomBooking:
    """
    Validate and persist a new booking with status PENDING.

    Raises
    ------
    UnknownRoomError
        A selected room is not in the catalog.
    InvalidScheduleError
        A schedule has end <= start.
    BookingConflictError
        A schedule overlaps an occupying booking (or another schedule of the
        same request) for one of the selected rooms. Nothing is written.
    """
    rooms = [room.value for room in payload.selected_rooms]

    known = set((await db.execute(select(Room.type))).scalars().all())
    missing = [room for room in rooms if room not in known]
    if missing:
        raise UnknownRoomError(f"Unknown room(s): {', '.join(missing)}")

    try:
        await _validate_schedules(db, rooms, payload.schedules, payload.event_name)
    except (BookingConflictError, InvalidScheduleError) as exc:
        logger.warning(
            "Rejected booking %r by %s: %s",
            payload.event_name,
            payload.requestor_id,
            exc,
        )
        raise

    booking = RoomBooking(
        requestor_id=payload.requestor_id,
        requestor_name=payload.requestor_name,
        division=payload.division,
        request_date=payload.request_date or date_type.today(),
        event_name=payload.event_name,
        selected_rooms=rooms,
        extra_items=payload.extra_items,
        room_arrangement=(
            [a.value for a in payload.room_arrangement]
            if payload.room_arrangement is not None
            else None
        ),
        requestor_signature_name=payload.requestor_signature_name,
        requestor_signature_date=payload.requestor_signature_date,
        status=RoomBookingStatus.PENDING.value,
    )
    booking.schedules = [
        BookingSchedule(
            date=s.date,
            start_time=s.start_time,
            end_time=s.end_time,
            participants=s.participants,
            refreshment=s.refreshment.model_dump(),
        )
        for s in payload.schedules
    ]
    db.add(booking)
    await db.flush()

    db.add(
        BookingLog(
            booking_id=booking.id,
            action=BookingLogAction.CREATED.value,
            performed_by=payload.requestor_id,
            performed_by_name=payload.requestor_name,
        )
    )
    await db.commit()

    logger.info(
        "Created room booking id=%s event=%r rooms=%s schedules=%d",
        booking.id,
        booking.event_name,
        rooms,
        len(payload.schedules),
    )
    return await get_room_booking(db, booking.id)


async def list_room_bookings(
    db: AsyncSession,
    requestor_id: Optional[str] = None,
    status: Optional[RoomBookingStatus] = None,
) -> list[RoomBooking]:
    stmt = select(RoomBooking)
    if requestor_id is not None:
        stmt = stmt.where(RoomBooking.requestor_id == requestor_id)
    if status is not None:
        stmt = stmt.where(RoomBooking.status == status.value)

    result = await db.execute(stmt.order_by(RoomBooking.created_at.desc(), RoomBooking.id.desc()))
    return list(result.scalars().all())


async def list_booking_logs(db: AsyncSession, booking_id: int) -> list[BookingLog]:
    await get_room_booking(db, booking_id)
    result = await db.execute(
        select(BookingLog)
        .where(BookingLog.booking_id == booking_id)
        .order_by(BookingLog.id.asc())
    )
    return list(result.scalars().all())


def _log_action_for(status: RoomBookingStatus) -> BookingLogAction:
    if status is RoomBookingStatus.APPROVED:
        return BookingLogAction.APPROVED
    if status is RoomBookingStatus.REJECTED:
        return BookingLogAction.REJECTED
    if status is RoomBookingStatus.CANCELLED:
        return BookingLogAction.CANCELLED
    return BookingLogAction.UPDATED


async def update_room_booking_status(
    db: AsyncSession,
    booking_id: int,
    status: RoomBookingStatus,
    performed_by: str,
    performed_by_name: str,
    notes: Optional[str] = None,
) -> RoomBooking:
    """
    Move a booking to `status` and append an audit log entry.

    Re-activating a REJECTED/CANCELLED booking re-checks its schedules for
    conflicts, since its slots may have been taken in the meantime.
    """
    booking = await get_room_booking(db, booking_id)
    old_status = RoomBookingStatus(booking.status)

    if old_status in NON_OCCUPYING_STATUSES and status not in NON_OCCUPYING_STATUSES:
        await _validate_schedules(
            db,
            list(booking.selected_rooms),
            booking.schedules,
            booking.event_name,
            exclude_booking_id=booking.id,
        )

    booking.status = status.value
    if status in (RoomBookingStatus.APPROVED, RoomBookingStatus.REJECTED):
        booking.final_approval = status.value
        booking.final_approver_name = performed_by_name
        booking.final_approval_date = date_type.today()
    db.add(
        BookingLog(
            booking_id=booking.id,
            action=_log_action_for(status).value,
            performed_by=performed_by,
            performed_by_name=performed_by_name,
            notes=notes,
            changes={"status": {"old": old_status.value, "new": status.value}},
        )
    )
    await db.commit()

    logger.info(
        "Room booking id=%s status %s -> %s by %s",
        booking.id,
        old_status.value,
        status.value,
        performed_by,
    )
    return await get_room_booking(db, booking.id)


async def cancel_room_booking(
    db: AsyncSession,
    booking_id: int,
    requestor_id: str,
    requestor_name: str,
    notes: Optional[str] = None,
) -> RoomBooking:
    """
    Cancel a PENDING or APPROVED booking on behalf of its requestor.
    """
    booking = await get_room_booking(db, booking_id)
    if booking.requestor_id != requestor_id:
        raise BookingOwnershipError("Only the requestor can cancel this booking.")

    current = RoomBookingStatus(booking.status)
    if current not in (RoomBookingStatus.PENDING, RoomBookingStatus.APPROVED):
        raise InvalidStatusTransitionError(
            f"Booking with status {current.value} cannot be cancelled."
        )

    return await update_room_booking_status(
        db,
        booking_id,
        RoomBookingStatus.CANCELLED,
        performed_by=requestor_id,
        performed_by_name=requestor_name,
        notes=notes,
    )
