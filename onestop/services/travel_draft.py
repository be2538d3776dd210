# onestop/services/travel_draft.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date as date_type
from typing import Optional, Union

from onestop.services.meal_eligibility import (
    Meal,
    MealDay,
    MealPlan,
    PlanStatus,
    plan_meals,
    toggle_meal_provided,
)


@dataclass(frozen=True)
class TravelRequestDraft:
    """
    Immutable snapshot of a travel request being filled in.

    Every update returns a new draft; the meal plan is recomputed whenever
    the dates change, keeping "provided" ticks for days still in range.
    """

    staff_id: str
    destination: str = ""
    reason: Optional[str] = None
    start_raw: Optional[str] = None
    end_raw: Optional[str] = None
    meal_plan: MealPlan = MealPlan(status=PlanStatus.EMPTY)

    @property
    def meal_days(self) -> tuple[MealDay, ...]:
        return self.meal_plan.days

    @property
    def total_meal_allowance(self) -> int:
        return self.meal_plan.total

    def with_dates(self, start_raw: Optional[str], end_raw: Optional[str]) -> "TravelRequestDraft":
        plan = plan_meals(start_raw, end_raw, previous=self.meal_plan.days)
        return replace(self, start_raw=start_raw, end_raw=end_raw, meal_plan=plan)

    def with_meal_toggled(self, day: Union[date_type, str], meal: Meal) -> "TravelRequestDraft":
        days = toggle_meal_provided(self.meal_plan.days, day, meal)
        return replace(self, meal_plan=replace(self.meal_plan, days=days))

    def with_details(
        self,
        destination: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> "TravelRequestDraft":
        return replace(
            self,
            destination=self.destination if destination is None else destination,
            reason=self.reason if reason is None else reason,
        )
