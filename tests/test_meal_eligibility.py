# tests/test_meal_eligibility.py
from datetime import date, datetime, timedelta

import pytest

from onestop.services.meal_eligibility import (
    MAX_TRAVEL_DAYS,
    Meal,
    MealFlags,
    ParsedOk,
    ParseFailed,
    PlanStatus,
    compute_meal_days,
    eligible_meals,
    parse_date_time,
    plan_meals,
    toggle_meal_provided,
    total_allowance,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2025-11-20T08:00", datetime(2025, 11, 20, 8, 0)),
        ("2025-11-20T08:00:00", datetime(2025, 11, 20, 8, 0)),
        ("2025-11-20T08:00:00Z", datetime(2025, 11, 20, 8, 0)),
        ("2025-11-20T08:00:00+08:00", datetime(2025, 11, 20, 8, 0)),
        ("20/11/2025 08:00", datetime(2025, 11, 20, 8, 0)),
        ("20/11/2025 07:30 PM", datetime(2025, 11, 20, 19, 30)),
        ("20-11-2025 19:30", datetime(2025, 11, 20, 19, 30)),
        ("20-11-2025 12:15 am", datetime(2025, 11, 20, 0, 15)),
        ("  20/11/2025 08:00  ", datetime(2025, 11, 20, 8, 0)),
        ("5/1/2025 8:05", datetime(2025, 1, 5, 8, 5)),
    ],
)
def test_parse_date_time_accepts_supported_formats(raw, expected):
    result = parse_date_time(raw)

    assert isinstance(result, ParsedOk)
    assert result.value == expected


@pytest.mark.parametrize(
    "raw, reason",
    [
        (None, "empty"),
        ("", "empty"),
        ("   ", "empty"),
        ("next tuesday", "unrecognized"),
        ("2025/20/11 08:00", "unrecognized"),
    ],
)
def test_parse_date_time_failures(raw, reason):
    result = parse_date_time(raw)

    assert isinstance(result, ParseFailed)
    assert result.reason == reason


def test_single_day_covering_all_meals_is_rm80():
    days = compute_meal_days(datetime(2025, 11, 20, 8, 0), datetime(2025, 11, 20, 20, 0))

    assert len(days) == 1
    assert days[0].eligible == MealFlags(breakfast=True, lunch=True, dinner=True)
    assert days[0].allowance == 80
    assert total_allowance(days) == 80


def test_overnight_trip_outside_meal_times_has_no_allowance():
    days = compute_meal_days(datetime(2025, 11, 20, 22, 0), datetime(2025, 11, 21, 6, 0))

    assert [d.date for d in days] == [date(2025, 11, 20), date(2025, 11, 21)]
    assert all(not d.eligible.any() for d in days)
    assert total_allowance(days) == 0


def test_window_bounds_are_inclusive():
    # starts exactly at breakfast, ends exactly at lunch start
    flags = eligible_meals(datetime(2025, 11, 20, 9, 0), datetime(2025, 11, 20, 12, 0))
    assert flags == MealFlags(breakfast=True, lunch=True, dinner=False)

    # starts exactly at lunch end, ends exactly at dinner
    flags = eligible_meals(datetime(2025, 11, 20, 14, 0), datetime(2025, 11, 20, 19, 30))
    assert flags == MealFlags(breakfast=False, lunch=True, dinner=True)

    # just misses breakfast and dinner
    flags = eligible_meals(datetime(2025, 11, 20, 9, 1), datetime(2025, 11, 20, 19, 29))
    assert flags == MealFlags(breakfast=False, lunch=True, dinner=False)


def test_middle_days_are_full_days():
    days = compute_meal_days(datetime(2025, 11, 20, 18, 0), datetime(2025, 11, 22, 8, 0))

    assert len(days) == 3
    assert days[0].eligible == MealFlags(breakfast=False, lunch=False, dinner=True)
    assert days[1].eligible == MealFlags(breakfast=True, lunch=True, dinner=True)
    assert days[2].eligible == MealFlags()
    assert total_allowance(days) == 30 + 80


def test_inverted_range_yields_no_days():
    assert compute_meal_days(datetime(2025, 11, 21, 8, 0), datetime(2025, 11, 20, 8, 0)) == ()


def test_provided_meal_is_not_claimable():
    days = compute_meal_days(datetime(2025, 11, 20, 8, 0), datetime(2025, 11, 20, 20, 0))

    days = toggle_meal_provided(days, date(2025, 11, 20), Meal.LUNCH)

    assert days[0].provided == MealFlags(lunch=True)
    assert total_allowance(days) == 50

    # toggling again restores the claim; string dates are accepted too
    days = toggle_meal_provided(days, "2025-11-20", Meal.LUNCH)
    assert total_allowance(days) == 80


def test_toggle_leaves_other_days_untouched():
    days = compute_meal_days(datetime(2025, 11, 20, 8, 0), datetime(2025, 11, 21, 20, 0))

    toggled = toggle_meal_provided(days, date(2025, 11, 21), Meal.DINNER)

    assert toggled[0] == days[0]
    assert toggled[1].provided.dinner is True


def test_recompute_keeps_provided_for_days_still_in_range():
    start = datetime(2025, 11, 20, 8, 0)
    days = compute_meal_days(start, datetime(2025, 11, 21, 20, 0))
    days = toggle_meal_provided(days, date(2025, 11, 20), Meal.BREAKFAST)
    days = toggle_meal_provided(days, date(2025, 11, 21), Meal.DINNER)

    # end date moves one day later: 20th and 21st keep their ticks, 22nd starts clean
    extended = compute_meal_days(start, datetime(2025, 11, 22, 20, 0), previous=days)
    assert extended[0].provided == MealFlags(breakfast=True)
    assert extended[1].provided == MealFlags(dinner=True)
    assert extended[2].provided == MealFlags()

    # shrinking drops the 21st; extending again does not bring its tick back
    shrunk = compute_meal_days(start, datetime(2025, 11, 20, 20, 0), previous=extended)
    regrown = compute_meal_days(start, datetime(2025, 11, 21, 20, 0), previous=shrunk)
    assert regrown[1].provided == MealFlags()


def test_recompute_with_same_inputs_is_idempotent():
    start = datetime(2025, 11, 20, 8, 0)
    end = datetime(2025, 11, 22, 13, 0)
    days = toggle_meal_provided(compute_meal_days(start, end), date(2025, 11, 21), Meal.LUNCH)

    assert compute_meal_days(start, end, previous=days) == days


@pytest.mark.parametrize(
    "start_raw, end_raw, status",
    [
        (None, None, PlanStatus.EMPTY),
        ("2025-11-20T08:00", "", PlanStatus.EMPTY),
        ("garbage", "2025-11-20T08:00", PlanStatus.UNPARSEABLE),
        ("2025-11-21T08:00", "2025-11-20T08:00", PlanStatus.INVERTED),
    ],
)
def test_plan_meals_invalid_input_gives_empty_plan(start_raw, end_raw, status):
    plan = plan_meals(start_raw, end_raw)

    assert plan.status is status
    assert plan.days == ()
    assert plan.total == 0


def test_plan_meals_mixed_formats():
    plan = plan_meals("20/11/2025 08:00 AM", "2025-11-20T20:00")

    assert plan.status is PlanStatus.OK
    assert plan.total == 80


def test_trip_ending_on_last_representable_day():
    plan = plan_meals("9999-12-31T08:00", "9999-12-31T20:00")

    assert plan.status is PlanStatus.OK
    assert [d.date for d in plan.days] == [date(9999, 12, 31)]
    assert plan.total == 80


def test_trip_longer_than_limit_gives_empty_plan():
    start = datetime(2025, 1, 1, 8, 0)

    at_limit = compute_meal_days(start, start + timedelta(days=MAX_TRAVEL_DAYS - 1))
    assert len(at_limit) == MAX_TRAVEL_DAYS

    assert compute_meal_days(start, start + timedelta(days=MAX_TRAVEL_DAYS)) == ()

    plan = plan_meals("0001-01-01T00:00", "9999-12-30T00:00")
    assert plan.status is PlanStatus.TOO_LONG
    assert plan.days == ()
    assert plan.total == 0
