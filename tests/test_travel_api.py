# tests/test_travel_api.py
from http import HTTPStatus


def test_meal_plan_single_day(client):
    resp = client.post(
        "/travel/meal-plan",
        json={"start_datetime": "2025-11-20T08:00", "end_datetime": "2025-11-20T20:00"},
    )
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()

    assert data["status"] == "ok"
    assert data["total_meal_allowance"] == 80
    assert data["days"][0]["date"] == "2025-11-20"
    assert data["days"][0]["eligible"] == {"breakfast": True, "lunch": True, "dinner": True}
    assert data["days"][0]["allowance"] == 80


def test_meal_plan_keeps_provided_ticks_from_previous_days(client):
    first = client.post(
        "/travel/meal-plan",
        json={"start_datetime": "20/11/2025 08:00", "end_datetime": "21/11/2025 20:00"},
    ).json()

    toggled = client.post(
        "/travel/meal-plan/toggle",
        json={"days": first["days"], "date": "2025-11-20", "meal": "lunch"},
    ).json()
    assert toggled["total_meal_allowance"] == 160 - 30

    extended = client.post(
        "/travel/meal-plan",
        json={
            "start_datetime": "20/11/2025 08:00",
            "end_datetime": "22/11/2025 20:00",
            "previous_days": toggled["days"],
        },
    ).json()
    assert len(extended["days"]) == 3
    assert extended["days"][0]["provided"]["lunch"] is True
    assert extended["total_meal_allowance"] == 240 - 30


def test_meal_plan_invalid_dates_return_empty_plan(client):
    for start, end, status in (
        (None, None, "empty"),
        ("not a date", "2025-11-20T08:00", "unparseable"),
        ("2025-11-21T08:00", "2025-11-20T08:00", "inverted"),
    ):
        resp = client.post("/travel/meal-plan", json={"start_datetime": start, "end_datetime": end})
        assert resp.status_code == HTTPStatus.OK
        data = resp.json()
        assert data["status"] == status
        assert data["days"] == []
        assert data["total_meal_allowance"] == 0


def test_create_travel_request_recomputes_allowance(client):
    payload = {
        "staff_id": "staff-travel",
        "staff_name": "Aisyah Rahman",
        "destination": "Kuching",
        "reason": "Client workshop",
        "start_datetime": "20/11/2025 08:00",
        "end_datetime": "20/11/2025 20:00",
        "meal_days": [
            {
                "date": "2025-11-20",
                # client-side eligibility and allowance are ignored
                "eligible": {"breakfast": False, "lunch": False, "dinner": False},
                "provided": {"breakfast": True, "lunch": False, "dinner": False},
                "allowance": 999,
            }
        ],
    }

    resp = client.post("/travel-requests", json=payload)
    assert resp.status_code == HTTPStatus.CREATED
    data = resp.json()

    assert data["status"] == "PENDING"
    assert data["total_meal_allowance"] == 60
    assert data["start_datetime"] == "2025-11-20T08:00:00"
    assert data["meal_days"][0]["eligible"] == {"breakfast": True, "lunch": True, "dinner": True}
    assert data["meal_days"][0]["provided"]["breakfast"] is True

    listed = client.get("/travel-requests").json()
    assert data["id"] in [r["id"] for r in listed]


def test_create_travel_request_with_bad_dates_returns_400(client):
    base = {"staff_id": "staff-travel", "destination": "Ipoh"}

    inverted = client.post(
        "/travel-requests",
        json={**base, "start_datetime": "2025-11-21T08:00", "end_datetime": "2025-11-20T08:00"},
    )
    assert inverted.status_code == HTTPStatus.BAD_REQUEST

    garbage = client.post(
        "/travel-requests",
        json={**base, "start_datetime": "soon", "end_datetime": "2025-11-20T08:00"},
    )
    assert garbage.status_code == HTTPStatus.BAD_REQUEST

    too_long = client.post(
        "/travel-requests",
        json={**base, "start_datetime": "2025-01-01T08:00", "end_datetime": "2025-12-31T20:00"},
    )
    assert too_long.status_code == HTTPStatus.BAD_REQUEST
    assert "at most" in too_long.json()["detail"]


def test_meal_plan_for_overlong_and_far_future_trips(client):
    too_long = client.post(
        "/travel/meal-plan",
        json={"start_datetime": "0001-01-01T00:00", "end_datetime": "9999-12-30T00:00"},
    ).json()
    assert too_long["status"] == "too_long"
    assert too_long["days"] == []

    last_day = client.post(
        "/travel/meal-plan",
        json={"start_datetime": "9999-12-31T08:00", "end_datetime": "9999-12-31T20:00"},
    )
    assert last_day.status_code == HTTPStatus.OK
    assert last_day.json()["total_meal_allowance"] == 80
