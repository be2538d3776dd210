# onestop/api/routes/admin.py
from fastapi import APIRouter, Depends, HTTPException, Path
from http import HTTPStatus
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.api.dependencies.admin_auth import verify_admin_api_key
from onestop.api.routes.library import book_read
from onestop.api.routes.room_bookings import conflict_http_exception
from onestop.db.session import get_db
from onestop.schemas.library import BookCategoryCreate, BookCategoryRead, BookCreate, BookRead
from onestop.schemas.room_booking import BookingStatusUpdate, RoomBookingRead
from onestop.schemas.travel import RequestStatusUpdate, TravelRequestRead
from onestop.schemas.vehicle_request import VehicleRequestRead
from onestop.services.library import create_book, create_category
from onestop.services.room_bookings import BookingConflictError, update_room_booking_status
from onestop.services.travel_requests import update_travel_request_status
from onestop.services.vehicle_requests import update_vehicle_request_status

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(verify_admin_api_key)],
)


@router.patch(
    "/room-bookings/{booking_id}/status",
    response_model=RoomBookingRead,
    summary="Approve, reject or otherwise update a room booking",
    description=(
        "Sets the booking status and appends an audit log entry with the old and "
        "new status. Moving a REJECTED/CANCELLED booking back to an occupying "
        "status re-checks its schedules for conflicts."
    ),
    responses={
        401: {"description": "Missing or wrong X-Admin-Api-Key."},
        404: {"description": "Booking not found."},
        409: {"description": "Re-activating the booking would overlap another booking."},
    },
)
async def patch_room_booking_status(
    payload: BookingStatusUpdate,
    booking_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> RoomBookingRead:
    try:
        booking = await update_room_booking_status(
            db,
            booking_id,
            payload.status,
            performed_by=payload.approver_id,
            performed_by_name=payload.approver_name,
            notes=payload.notes,
        )
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    except BookingConflictError as exc:
        raise conflict_http_exception(exc)
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))

    return RoomBookingRead.model_validate(booking)


@router.patch(
    "/travel-requests/{request_id}/status",
    response_model=TravelRequestRead,
    summary="Approve or reject a travel request",
    responses={
        401: {"description": "Missing or wrong X-Admin-Api-Key."},
        404: {"description": "Travel request not found."},
    },
)
async def patch_travel_request_status(
    payload: RequestStatusUpdate,
    request_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> TravelRequestRead:
    try:
        request = await update_travel_request_status(db, request_id, payload.status)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    return TravelRequestRead.model_validate(request)


@router.patch(
    "/vehicle-requests/{request_id}/status",
    response_model=VehicleRequestRead,
    summary="Approve or reject a vehicle request",
    responses={
        401: {"description": "Missing or wrong X-Admin-Api-Key."},
        404: {"description": "Vehicle request not found."},
    },
)
async def patch_vehicle_request_status(
    payload: RequestStatusUpdate,
    request_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> VehicleRequestRead:
    try:
        request = await update_vehicle_request_status(db, request_id, payload.status)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    return VehicleRequestRead.model_validate(request)


@router.post(
    "/library/categories",
    response_model=BookCategoryRead,
    status_code=HTTPStatus.CREATED,
    summary="Add a book category",
    responses={
        400: {"description": "A category with this name already exists."},
        401: {"description": "Missing or wrong X-Admin-Api-Key."},
    },
)
async def post_book_category(
    payload: BookCategoryCreate,
    db: AsyncSession = Depends(get_db),
) -> BookCategoryRead:
    try:
        category = await create_category(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
    return BookCategoryRead.model_validate(category)


@router.post(
    "/library/books",
    response_model=BookRead,
    status_code=HTTPStatus.CREATED,
    summary="Add a book and its copies",
    description="Each copy gets an INV-XXXXXX inventory code and starts AVAILABLE.",
    responses={
        401: {"description": "Missing or wrong X-Admin-Api-Key."},
        404: {"description": "Category not found."},
    },
)
async def post_book(
    payload: BookCreate,
    db: AsyncSession = Depends(get_db),
) -> BookRead:
    try:
        book = await create_book(db, payload)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    return book_read(book)
