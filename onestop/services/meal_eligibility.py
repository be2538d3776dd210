# onestop/services/meal_eligibility.py
"""
Per-day meal allowance eligibility for travel requests.

Eligibility windows (local wall-clock time):
- Breakfast: the travelled window contains 09:00
- Lunch:     the travelled window touches 12:00-14:00
- Dinner:    the travelled window contains 19:30

Breakfast and dinner are point-in-time tests while lunch is a range test.
All window bounds are inclusive.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date as date_type
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Callable, Iterable, Optional, Union


class Meal(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


# Fixed amounts in RM
MEAL_AMOUNTS: dict[Meal, int] = {
    Meal.BREAKFAST: 20,
    Meal.LUNCH: 30,
    Meal.DINNER: 30,
}

BREAKFAST_AT = time(9, 0)
LUNCH_FROM = time(12, 0)
LUNCH_UNTIL = time(14, 0)
DINNER_AT = time(19, 30)

# Longest trip (in calendar days) a single request may cover
MAX_TRAVEL_DAYS = 90


# --------------------------------------------------------------------------
# Parsing
# --------------------------------------------------------------------------

@dataclass(frozen=True)
class ParsedOk:
    value: datetime


@dataclass(frozen=True)
class ParseFailed:
    reason: str


ParseResult = Union[ParsedOk, ParseFailed]

_STRPTIME_FORMATS = (
    "%Y-%m-%dT%H:%M",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %I:%M %p",
    "%d-%m-%Y %H:%M",
    "%d-%m-%Y %I:%M %p",
)

_FALLBACK_RE = re.compile(
    r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})\s+(\d{1,2}):(\d{2})(?:\s*(AM|PM))?$",
    re.IGNORECASE,
)


def _parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # Keep the wall-clock time the requestor entered.
    return parsed.replace(tzinfo=None)


def _strptime_parser(fmt: str) -> Callable[[str], datetime]:
    def _parse(value: str) -> datetime:
        return datetime.strptime(value, fmt)

    return _parse


def _parse_fallback(value: str) -> datetime:
    match = _FALLBACK_RE.match(value)
    if match is None:
        raise ValueError(f"unrecognized date/time: {value!r}")

    day, month, year, hour, minute, meridiem = match.groups()
    hours = int(hour)
    if meridiem:
        meridiem = meridiem.upper()
        if meridiem == "PM" and hours < 12:
            hours += 12
        if meridiem == "AM" and hours == 12:
            hours = 0
    return datetime(int(year), int(month), int(day), hours, int(minute))


_PARSERS: tuple[Callable[[str], datetime], ...] = (
    _parse_iso,
    *(_strptime_parser(fmt) for fmt in _STRPTIME_FORMATS),
    _parse_fallback,
)


def parse_date_time(value: Optional[str]) -> ParseResult:
    """
    Parse a travel date/time string using the first parser that succeeds.

    Returns ParseFailed("empty") when nothing was entered and
    ParseFailed("unrecognized") when no parser accepts the value.
    """
    if value is None or not value.strip():
        return ParseFailed(reason="empty")

    trimmed = value.strip()
    for parser in _PARSERS:
        try:
            return ParsedOk(value=parser(trimmed))
        except ValueError:
            continue

    return ParseFailed(reason="unrecognized")


# --------------------------------------------------------------------------
# Meal days
# --------------------------------------------------------------------------

@dataclass(frozen=True)
class MealFlags:
    breakfast: bool = False
    lunch: bool = False
    dinner: bool = False

    def get(self, meal: Meal) -> bool:
        return getattr(self, Meal(meal).value)

    def toggled(self, meal: Meal) -> "MealFlags":
        name = Meal(meal).value
        return replace(self, **{name: not getattr(self, name)})

    def any(self) -> bool:
        return self.breakfast or self.lunch or self.dinner


@dataclass(frozen=True)
class MealDay:
    date: date_type
    eligible: MealFlags
    provided: MealFlags = MealFlags()

    @property
    def day_key(self) -> str:
        return self.date.isoformat()

    @property
    def allowance(self) -> int:
        return sum(
            amount
            for meal, amount in MEAL_AMOUNTS.items()
            if self.eligible.get(meal) and not self.provided.get(meal)
        )


def _contains(window_start: datetime, window_end: datetime, instant: datetime) -> bool:
    return window_start <= instant <= window_end


def _touches(
    window_start: datetime,
    window_end: datetime,
    range_start: datetime,
    range_end: datetime,
) -> bool:
    return window_end >= range_start and window_start <= range_end


def eligible_meals(window_start: datetime, window_end: datetime) -> MealFlags:
    """Eligibility for one day given that day's active window."""
    day = window_start.date()
    return MealFlags(
        breakfast=_contains(window_start, window_end, datetime.combine(day, BREAKFAST_AT)),
        lunch=_touches(
            window_start,
            window_end,
            datetime.combine(day, LUNCH_FROM),
            datetime.combine(day, LUNCH_UNTIL),
        ),
        dinner=_contains(window_start, window_end, datetime.combine(day, DINNER_AT)),
    )


def travel_day_count(start: datetime, end: datetime) -> int:
    """Number of calendar days touched by [start, end], both ends included."""
    return (end.date() - start.date()).days + 1


def compute_meal_days(
    start: datetime,
    end: datetime,
    previous: Iterable[MealDay] = (),
) -> tuple[MealDay, ...]:
    """
    One MealDay per calendar day from start.date() to end.date() inclusive.

    The first day is active from `start`, the last day until `end`, days in
    between for their full 24 hours. `provided` flags of `previous` are kept
    for dates that are still in range; new dates start with nothing provided.
    An inverted range, or one longer than MAX_TRAVEL_DAYS, yields no days.
    """
    if end < start or travel_day_count(start, end) > MAX_TRAVEL_DAYS:
        return ()

    provided_by_date = {day.date: day.provided for day in previous}

    first = start.date()
    last = end.date()
    days: list[MealDay] = []
    for offset in range((last - first).days + 1):
        current = first + timedelta(days=offset)
        window_start = start if current == first else datetime.combine(current, time.min)
        window_end = end if current == last else datetime.combine(current, time.max)

        days.append(
            MealDay(
                date=current,
                eligible=eligible_meals(window_start, window_end),
                provided=provided_by_date.get(current, MealFlags()),
            )
        )

    return tuple(days)


def toggle_meal_provided(
    days: Iterable[MealDay],
    day: Union[date_type, str],
    meal: Meal,
) -> tuple[MealDay, ...]:
    """Flip the `provided` flag of one meal on one day; other days are untouched."""
    target = date_type.fromisoformat(day) if isinstance(day, str) else day
    return tuple(
        replace(d, provided=d.provided.toggled(meal)) if d.date == target else d
        for d in days
    )


def total_allowance(days: Iterable[MealDay]) -> int:
    return sum(day.allowance for day in days)


# --------------------------------------------------------------------------
# Plan (parse + compute in one call)
# --------------------------------------------------------------------------

class PlanStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    UNPARSEABLE = "unparseable"
    INVERTED = "inverted"
    TOO_LONG = "too_long"


@dataclass(frozen=True)
class MealPlan:
    status: PlanStatus
    days: tuple[MealDay, ...] = ()
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def total(self) -> int:
        return total_allowance(self.days)


def plan_meals(
    start_raw: Optional[str],
    end_raw: Optional[str],
    previous: Iterable[MealDay] = (),
) -> MealPlan:
    """
    Parse both timestamps and compute the meal days.

    Missing, unparseable, inverted or overlong input produces an empty plan
    (zero total); the status tells the caller which of those happened.
    """
    parsed_start = parse_date_time(start_raw)
    parsed_end = parse_date_time(end_raw)

    failures = [p for p in (parsed_start, parsed_end) if isinstance(p, ParseFailed)]
    if failures:
        if all(f.reason == "empty" for f in failures):
            return MealPlan(status=PlanStatus.EMPTY)
        return MealPlan(status=PlanStatus.UNPARSEABLE)

    start = parsed_start.value
    end = parsed_end.value
    if end < start:
        return MealPlan(status=PlanStatus.INVERTED, start=start, end=end)
    if travel_day_count(start, end) > MAX_TRAVEL_DAYS:
        return MealPlan(status=PlanStatus.TOO_LONG, start=start, end=end)

    return MealPlan(
        status=PlanStatus.OK,
        days=compute_meal_days(start, end, previous),
        start=start,
        end=end,
    )
