# onestop/services/travel_requests.py
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.core.logging import get_logger
from onestop.models.travel_request import TravelRequest
from onestop.schemas.travel import MealDayModel, RequestStatus, TravelRequestCreate
from onestop.services.meal_eligibility import MAX_TRAVEL_DAYS, MealPlan, PlanStatus
from onestop.services.travel_draft import TravelRequestDraft

logger = get_logger(__name__)


class RequestNotFoundError(LookupError):
    """Raised when a travel or vehicle request id does not exist."""


class InvalidTravelRangeError(ValueError):
    """Raised when travel dates are missing, unparseable, inverted or span too many days."""


def build_draft(payload: TravelRequestCreate) -> TravelRequestDraft:
    """
    Rebuild the request draft on the server.

    The client's meal days are only used as the "previous" state, so their
    provided ticks are kept while eligibility and the total are recomputed.
    """
    previous = tuple(day.to_meal_day() for day in payload.meal_days)
    draft = TravelRequestDraft(
        staff_id=payload.staff_id,
        destination=payload.destination,
        reason=payload.reason,
        meal_plan=MealPlan(status=PlanStatus.EMPTY, days=previous),
    )
    return draft.with_dates(payload.start_datetime, payload.end_datetime)


async def create_travel_request(db: AsyncSession, payload: TravelRequestCreate) -> TravelRequest:
    draft = build_draft(payload)
    plan = draft.meal_plan

    if plan.status is not PlanStatus.OK:
        logger.warning(
            "Rejected travel request by %s: dates %s",
            payload.staff_id,
            plan.status.value,
        )
        if plan.status is PlanStatus.INVERTED:
            raise InvalidTravelRangeError("end_datetime must not be before start_datetime")
        if plan.status is PlanStatus.TOO_LONG:
            raise InvalidTravelRangeError(
                f"A travel request may cover at most {MAX_TRAVEL_DAYS} calendar days"
            )
        raise InvalidTravelRangeError(
            "start_datetime and end_datetime must be valid date/time values"
        )

    request = TravelRequest(
        staff_id=payload.staff_id,
        staff_name=payload.staff_name,
        department=payload.department,
        destination=payload.destination,
        reason=payload.reason,
        start_datetime=plan.start,
        end_datetime=plan.end,
        total_meal_allowance=draft.total_meal_allowance,
        meal_days=[
            MealDayModel.from_meal_day(day).model_dump(mode="json")
            for day in draft.meal_days
        ],
        status=RequestStatus.PENDING.value,
    )
    db.add(request)
    await db.commit()
    await db.refresh(request)

    logger.info(
        "Created travel request id=%s staff=%s days=%d allowance=RM%d",
        request.id,
        request.staff_id,
        len(draft.meal_days),
        request.total_meal_allowance,
    )
    return request


async def list_travel_requests(db: AsyncSession) -> list[TravelRequest]:
    result = await db.execute(
        select(TravelRequest).order_by(TravelRequest.created_at.desc(), TravelRequest.id.desc())
    )
    return list(result.scalars().all())


async def update_travel_request_status(
    db: AsyncSession,
    request_id: int,
    status: RequestStatus,
) -> TravelRequest:
    result = await db.execute(select(TravelRequest).where(TravelRequest.id == request_id))
    request = result.scalar_one_or_none()
    if request is None:
        raise RequestNotFoundError(f"Travel request with id={request_id} not found")

    old_status = request.status
    request.status = status.value
    await db.commit()
    await db.refresh(request)

    logger.info("Travel request id=%s status %s -> %s", request.id, old_status, status.value)
    return request
