# onestop/api/routes/rooms.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.db.session import get_db
from onestop.schemas.availability import (
    AvailabilityCheckRead,
    ConfirmedSlotModel,
    DayGridRead,
    PendingSelectionModel,
    RoomGridRead,
    SelectionClick,
    SelectionStepRead,
    SlotCellRead,
)
from onestop.schemas.room import RoomRead, RoomType
from onestop.schemas.room_booking import TIME_PATTERN, ConflictDetail
from onestop.services.interval_overlap import (
    BookedInterval,
    SlotCell,
    build_room_grid,
    time_slots,
)
from onestop.services.room_bookings import (
    check_room_availability,
    fetch_occupying_intervals,
    room_availability_by_date,
)
from onestop.services.room_catalog import list_rooms
from onestop.services.slot_selection import PendingSelection, click_slot

router = APIRouter(prefix="/rooms", tags=["Rooms"])


def conflict_detail(interval: BookedInterval) -> ConflictDetail:
    return ConflictDetail(
        room=interval.room,
        date=interval.date,
        start_time=interval.start_time,
        end_time=interval.end_time,
        booking_id=interval.booking_id,
        event_name=interval.event_name,
    )


def _cell_read(cell: SlotCell) -> SlotCellRead:
    interval = cell.interval
    return SlotCellRead(
        time=cell.time,
        state=cell.state,
        is_start=cell.is_start,
        booking_id=interval.booking_id if interval else None,
        event_name=interval.event_name if interval else None,
        start_time=interval.start_time if interval else None,
        end_time=interval.end_time if interval else None,
    )


@router.get(
    "",
    response_model=list[RoomRead],
    summary="List bookable rooms",
    description="Return the room catalog, LEVEL_6 rooms first and then by name.",
)
async def get_rooms(db: AsyncSession = Depends(get_db)) -> list[RoomRead]:
    rooms = await list_rooms(db)
    return [RoomRead.model_validate(r) for r in rooms]


@router.get(
    "/availability",
    response_model=dict[str, bool],
    summary="Whole-day availability per room",
    description=(
        "Map of room type to `true` when the room has no pending/approved/completed "
        "booking at all on the given date."
    ),
)
async def get_availability_by_date(
    date: date_type = Query(..., description="Date in ISO format (YYYY-MM-DD).", examples=["2025-11-20"]),
    db: AsyncSession = Depends(get_db),
) -> dict[str, bool]:
    return await room_availability_by_date(db, date)


@router.get(
    "/check-availability",
    response_model=AvailabilityCheckRead,
    summary="Check a proposed time range for one room",
    description=(
        "Validate `[start_time, end_time)` for a room and date against occupying "
        "bookings. Touching intervals (one ends when the other starts) do not conflict."
    ),
)
async def get_check_availability(
    room: RoomType = Query(..., examples=["elaiese"]),
    date: date_type = Query(..., examples=["2025-11-20"]),
    start_time: str = Query(..., pattern=TIME_PATTERN, examples=["10:00"]),
    end_time: str = Query(..., pattern=TIME_PATTERN, examples=["11:30"]),
    db: AsyncSession = Depends(get_db),
) -> AvailabilityCheckRead:
    check = await check_room_availability(db, room.value, date, start_time, end_time)
    return AvailabilityCheckRead(
        room=room,
        date=date,
        start_time=start_time,
        end_time=end_time,
        available=check.ok,
        reason=check.outcome.value,
        conflict=conflict_detail(check.with_interval) if check.with_interval else None,
    )


@router.get(
    "/grid",
    response_model=DayGridRead,
    summary="Half-hour availability grid for a date",
    description=(
        "48 half-hour slots (00:00 to 23:30) per room. Occupied cells carry the "
        "booking attribution and `is_start` on the first slot of each block. When "
        "`pending_room` and `pending_start` are given, the in-progress selection is "
        "highlighted as `selected`."
    ),
)
async def get_grid(
    date: date_type = Query(..., examples=["2025-11-20"]),
    pending_room: RoomType | None = Query(default=None),
    pending_start: str | None = Query(default=None, pattern=TIME_PATTERN),
    db: AsyncSession = Depends(get_db),
) -> DayGridRead:
    rooms = await list_rooms(db)
    intervals = await fetch_occupying_intervals(db, date)

    grids: list[RoomGridRead] = []
    for room in rooms:
        pending = pending_start if pending_room is not None and pending_room.value == room.type else None
        grid = build_room_grid(room.type, date, intervals, pending_start=pending)
        grids.append(
            RoomGridRead(
                room=room.type,
                room_name=room.name,
                cells=[_cell_read(c) for c in grid.cells],
            )
        )

    return DayGridRead(date=date, slots=list(time_slots()), rooms=grids)


@router.post(
    "/selection",
    response_model=SelectionStepRead,
    status_code=HTTPStatus.OK,
    summary="Advance the two-click slot selection",
    description=(
        "First click on a room starts a pending selection. A second click on the "
        "same room at a later slot validates the range and either emits the "
        "confirmed `(room, date, start, end)` or returns a rejection message. "
        "Clicking an earlier/equal slot cancels; clicking another room restarts."
    ),
)
async def post_selection(
    click: SelectionClick,
    db: AsyncSession = Depends(get_db),
) -> SelectionStepRead:
    pending = None
    if click.pending is not None:
        pending = PendingSelection(
            room=click.pending.room.value,
            date=click.pending.date,
            start_time=click.pending.start_time,
        )

    existing = await fetch_occupying_intervals(db, click.date, room=click.room.value)
    step = click_slot(pending, click.room.value, click.date, click.slot_time, existing)

    return SelectionStepRead(
        pending=(
            PendingSelectionModel(
                room=step.pending.room,
                date=step.pending.date,
                start_time=step.pending.start_time,
            )
            if step.pending
            else None
        ),
        emitted=(
            ConfirmedSlotModel(
                room=step.emitted.room,
                date=step.emitted.date,
                start_time=step.emitted.start_time,
                end_time=step.emitted.end_time,
            )
            if step.emitted
            else None
        ),
        rejection=step.rejection,
    )
