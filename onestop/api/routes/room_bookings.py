# onestop/api/routes/room_bookings.py
from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.api.routes.rooms import conflict_detail
from onestop.db.session import get_db
from onestop.schemas.room_booking import (
    BookingCancel,
    BookingLogRead,
    RoomBookingCreate,
    RoomBookingRead,
    RoomBookingStatus,
)
from onestop.services.room_bookings import (
    BookingConflictError,
    BookingNotFoundError,
    BookingOwnershipError,
    cancel_room_booking,
    create_room_booking,
    get_room_booking,
    list_booking_logs,
    list_room_bookings,
)

router = APIRouter(prefix="/room-bookings", tags=["Room Bookings"])


def conflict_http_exception(exc: BookingConflictError) -> HTTPException:
    return HTTPException(
        status_code=HTTPStatus.CONFLICT,
        detail={
            "message": str(exc),
            "conflict": conflict_detail(exc.interval).model_dump(mode="json"),
        },
    )


@router.post(
    "",
    response_model=RoomBookingRead,
    status_code=HTTPStatus.CREATED,
    summary="Submit a room booking",
    description=(
        "Book one or more rooms for one or more schedules. Every schedule is "
        "checked against PENDING/APPROVED/COMPLETED bookings of every selected "
        "room (and against the other schedules in the same request) before "
        "anything is written.\n\n"
        "Intervals are half-open, so a booking ending at 11:30 does not block "
        "one starting at 11:30."
    ),
    responses={
        400: {"description": "Unknown room or a schedule whose end is not after its start."},
        409: {
            "description": "A schedule overlaps an existing booking.",
            "content": {
                "application/json": {
                    "example": {
                        "detail": {
                            "message": "Room 'elaiese' is already booked on 2025-11-20 from 10:00 to 11:30.",
                            "conflict": {
                                "room": "elaiese",
                                "date": "2025-11-20",
                                "start_time": "10:00",
                                "end_time": "11:30",
                                "booking_id": 1,
                                "event_name": "Quarterly planning",
                            },
                        }
                    }
                }
            },
        },
    },
)
async def post_room_booking(
    payload: RoomBookingCreate,
    db: AsyncSession = Depends(get_db),
) -> RoomBookingRead:
    try:
        booking = await create_room_booking(db, payload)
    except BookingConflictError as exc:
        raise conflict_http_exception(exc)
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))

    return RoomBookingRead.model_validate(booking)


@router.get(
    "",
    response_model=list[RoomBookingRead],
    summary="List room bookings",
    description="Newest first. Filter by requestor and/or status.",
)
async def get_room_bookings(
    requestor_id: Optional[str] = Query(default=None),
    status: Optional[RoomBookingStatus] = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> list[RoomBookingRead]:
    bookings = await list_room_bookings(db, requestor_id=requestor_id, status=status)
    return [RoomBookingRead.model_validate(b) for b in bookings]


@router.get(
    "/{booking_id}",
    response_model=RoomBookingRead,
    summary="Get a room booking",
    responses={404: {"description": "Booking not found."}},
)
async def get_room_booking_by_id(
    booking_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> RoomBookingRead:
    try:
        booking = await get_room_booking(db, booking_id)
    except BookingNotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    return RoomBookingRead.model_validate(booking)


@router.get(
    "/{booking_id}/logs",
    response_model=list[BookingLogRead],
    summary="Audit trail of a room booking",
    description="Every create/approve/reject/cancel action on the booking, oldest first.",
    responses={404: {"description": "Booking not found."}},
)
async def get_room_booking_logs(
    booking_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> list[BookingLogRead]:
    try:
        logs = await list_booking_logs(db, booking_id)
    except BookingNotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    return [BookingLogRead.model_validate(log) for log in logs]


@router.post(
    "/{booking_id}/cancel",
    response_model=RoomBookingRead,
    summary="Cancel a room booking",
    description=(
        "The requestor cancels their own PENDING or APPROVED booking. The rooms "
        "become available again immediately."
    ),
    responses={
        400: {"description": "Booking is not in a cancellable status."},
        403: {"description": "Caller is not the requestor of the booking."},
        404: {"description": "Booking not found."},
    },
)
async def post_cancel_room_booking(
    payload: BookingCancel,
    booking_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> RoomBookingRead:
    try:
        booking = await cancel_room_booking(
            db,
            booking_id,
            requestor_id=payload.requestor_id,
            requestor_name=payload.requestor_name,
            notes=payload.notes,
        )
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    except BookingOwnershipError as exc:
        raise HTTPException(status_code=HTTPStatus.FORBIDDEN, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))

    return RoomBookingRead.model_validate(booking)
