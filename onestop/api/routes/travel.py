# onestop/api/routes/travel.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from onestop.db.session import get_db
from onestop.schemas.travel import (
    MealPlanRead,
    MealPlanRequest,
    MealToggleRequest,
    TravelRequestCreate,
    TravelRequestRead,
)
from onestop.services.meal_eligibility import MealPlan, PlanStatus, plan_meals, toggle_meal_provided
from onestop.services.travel_requests import (
    InvalidTravelRangeError,
    create_travel_request,
    list_travel_requests,
)

router = APIRouter(tags=["Travel"])


@router.post(
    "/travel/meal-plan",
    response_model=MealPlanRead,
    summary="Compute meal allowance for travel dates",
    description=(
        "Parse the travel start/end and return one entry per calendar day with the "
        "eligible meals and the RM allowance.\n\n"
        "- Breakfast (RM20): the day's window contains 09:00\n"
        "- Lunch (RM30): the day's window touches 12:00-14:00\n"
        "- Dinner (RM30): the day's window contains 19:30\n\n"
        "Meals ticked as provided in `previous_days` stay ticked for dates still in "
        "range. Missing, unparseable or inverted dates, or a trip longer than "
        "90 calendar days, return an empty plan with a "
        "status explaining why."
    ),
)
async def post_meal_plan(payload: MealPlanRequest) -> MealPlanRead:
    previous = tuple(day.to_meal_day() for day in payload.previous_days)
    plan = plan_meals(payload.start_datetime, payload.end_datetime, previous=previous)
    return MealPlanRead.from_plan(plan)


@router.post(
    "/travel/meal-plan/toggle",
    response_model=MealPlanRead,
    summary="Tick or untick a provided meal",
    description=(
        "Flip the provided flag for one meal on one day and return the updated "
        "days with the recomputed total. A provided meal is not claimable."
    ),
)
async def post_meal_toggle(payload: MealToggleRequest) -> MealPlanRead:
    days = toggle_meal_provided(
        (day.to_meal_day() for day in payload.days),
        payload.date,
        payload.meal,
    )
    return MealPlanRead.from_plan(MealPlan(status=PlanStatus.OK, days=days))


@router.post(
    "/travel-requests",
    response_model=TravelRequestRead,
    status_code=HTTPStatus.CREATED,
    summary="Submit a travel request",
    description=(
        "Meal days and the total allowance are recomputed from the submitted dates; "
        "only the provided ticks from the client are kept."
    ),
    responses={400: {"description": "Dates are missing, unparseable, inverted or span too many days."}},
)
async def post_travel_request(
    payload: TravelRequestCreate,
    db: AsyncSession = Depends(get_db),
) -> TravelRequestRead:
    try:
        request = await create_travel_request(db, payload)
    except InvalidTravelRangeError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
    return TravelRequestRead.model_validate(request)


@router.get(
    "/travel-requests",
    response_model=list[TravelRequestRead],
    summary="List travel requests",
    description="Newest first.",
)
async def get_travel_requests(db: AsyncSession = Depends(get_db)) -> list[TravelRequestRead]:
    requests = await list_travel_requests(db)
    return [TravelRequestRead.model_validate(r) for r in requests]
