# tests/test_vehicle_api.py
from http import HTTPStatus


def test_create_and_list_vehicle_request(client):
    payload = {
        "staff_id": "staff-vehicle",
        "purpose": "Site visit",
        "destination": "Port Klang",
        "start_datetime": "2025-11-20T08:00:00",
        "end_datetime": "2025-11-20T17:00:00",
        "vehicle_type": "MPV",
        "driver_required": True,
        "passenger_count": 4,
    }

    resp = client.post("/vehicle-requests", json=payload)
    assert resp.status_code == HTTPStatus.CREATED
    data = resp.json()
    assert data["status"] == "PENDING"
    assert data["driver_required"] is True

    listed = client.get("/vehicle-requests").json()
    assert data["id"] in [r["id"] for r in listed]


def test_vehicle_request_end_before_start_is_rejected(client):
    resp = client.post(
        "/vehicle-requests",
        json={
            "staff_id": "staff-vehicle",
            "purpose": "Site visit",
            "start_datetime": "2025-11-20T17:00:00",
            "end_datetime": "2025-11-20T08:00:00",
        },
    )
    assert resp.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
