# onestop/schemas/travel.py
from __future__ import annotations

from datetime import date as date_type, datetime
from enum import Enum

from pydantic import BaseModel, Field

from onestop.services.meal_eligibility import Meal, MealDay, MealFlags, MealPlan, PlanStatus


class RequestStatus(str, Enum):
    """
    Approval states shared by travel and vehicle requests.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class MealFlagsModel(BaseModel):
    breakfast: bool = False
    lunch: bool = False
    dinner: bool = False

    def to_flags(self) -> MealFlags:
        return MealFlags(breakfast=self.breakfast, lunch=self.lunch, dinner=self.dinner)


class MealDayModel(BaseModel):
    """
    Eligibility and "already provided" ticks for one travelled day.
    """

    date: date_type = Field(..., examples=["2025-11-20"])
    eligible: MealFlagsModel = Field(default_factory=MealFlagsModel)
    provided: MealFlagsModel = Field(default_factory=MealFlagsModel)
    allowance: int = Field(0, description="Allowance for this day in RM.")

    def to_meal_day(self) -> MealDay:
        return MealDay(
            date=self.date,
            eligible=self.eligible.to_flags(),
            provided=self.provided.to_flags(),
        )

    @classmethod
    def from_meal_day(cls, day: MealDay) -> "MealDayModel":
        return cls(
            date=day.date,
            eligible=MealFlagsModel(**vars(day.eligible)),
            provided=MealFlagsModel(**vars(day.provided)),
            allowance=day.allowance,
        )


class MealPlanRequest(BaseModel):
    """
    Travel dates as typed by the requestor, plus the days returned by the
    previous computation so their "provided" ticks survive a date change.
    """

    start_datetime: str | None = Field(None, examples=["2025-11-20T08:00"])
    end_datetime: str | None = Field(None, examples=["2025-11-20T20:00"])
    previous_days: list[MealDayModel] = Field(default_factory=list)


class MealToggleRequest(BaseModel):
    days: list[MealDayModel]
    date: date_type
    meal: Meal


class MealPlanRead(BaseModel):
    status: PlanStatus = Field(..., examples=["ok"])
    days: list[MealDayModel]
    total_meal_allowance: int = Field(..., examples=[80], description="Total in RM.")

    @classmethod
    def from_plan(cls, plan: MealPlan) -> "MealPlanRead":
        return cls(
            status=plan.status,
            days=[MealDayModel.from_meal_day(d) for d in plan.days],
            total_meal_allowance=plan.total,
        )


class TravelRequestCreate(BaseModel):
    staff_id: str = Field(..., min_length=1, examples=["staff-001"])
    staff_name: str | None = Field(None, examples=["Aisyah Rahman"])
    department: str | None = Field(None, examples=["Finance"])
    destination: str = Field(..., min_length=1, examples=["Kuching"])
    reason: str | None = Field(None, examples=["Client workshop"])
    start_datetime: str = Field(..., examples=["20/11/2025 08:00"])
    end_datetime: str = Field(..., examples=["21/11/2025 18:30"])
    meal_days: list[MealDayModel] = Field(
        default_factory=list,
        description="Client-side meal days; only the provided ticks are used.",
    )


class TravelRequestRead(BaseModel):
    id: int
    staff_id: str
    staff_name: str | None = None
    department: str | None = None
    destination: str
    reason: str | None = None
    start_datetime: datetime
    end_datetime: datetime
    total_meal_allowance: int
    meal_days: list[MealDayModel] | None = None
    status: RequestStatus
    created_at: datetime

    class Config:
        from_attributes = True


class RequestStatusUpdate(BaseModel):
    status: RequestStatus = Field(..., examples=["APPROVED"])
