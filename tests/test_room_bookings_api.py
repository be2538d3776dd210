# tests/test_room_bookings_api.py
from http import HTTPStatus


def _build_booking_payload(
    schedules,
    rooms=("elaiese",),
    requestor_id="staff-001",
    event_name="Quarterly planning",
):
    return {
        "requestor_id": requestor_id,
        "requestor_name": "Aisyah Rahman",
        "division": "Finance",
        "event_name": event_name,
        "selected_rooms": list(rooms),
        "schedules": [
            {"date": day, "start_time": start, "end_time": end, "participants": 10}
            for day, start, end in schedules
        ],
        "room_arrangement": ["ushape"],
    }


def test_create_booking_returns_pending_with_schedules_and_log(client):
    payload = _build_booking_payload([("2025-12-01", "09:00", "10:30")], rooms=("elaiese", "olivie"))

    resp = client.post("/room-bookings", json=payload)
    assert resp.status_code == HTTPStatus.CREATED
    data = resp.json()

    assert data["status"] == "PENDING"
    assert data["final_approval"] is None
    assert data["selected_rooms"] == ["elaiese", "olivie"]
    assert len(data["schedules"]) == 1
    assert data["schedules"][0]["start_time"] == "09:00"
    assert data["schedules"][0]["refreshment"] == {
        "bf": {"lunch": False, "dinner": False},
        "atb": {"lunch": False, "dinner": False},
    }

    logs = client.get(f"/room-bookings/{data['id']}/logs")
    assert logs.status_code == HTTPStatus.OK
    entries = logs.json()
    assert [e["action"] for e in entries] == ["CREATED"]
    assert entries[0]["performed_by"] == "staff-001"


def test_overlapping_booking_is_rejected_with_conflict_detail(client):
    first = client.post("/room-bookings", json=_build_booking_payload([("2025-12-02", "10:00", "11:30")]))
    assert first.status_code == HTTPStatus.CREATED

    second = client.post(
        "/room-bookings",
        json=_build_booking_payload([("2025-12-02", "11:00", "12:00")], event_name="Clash"),
    )
    assert second.status_code == HTTPStatus.CONFLICT
    detail = second.json()["detail"]
    assert "already booked" in detail["message"]
    assert detail["conflict"]["booking_id"] == first.json()["id"]
    assert detail["conflict"]["start_time"] == "10:00"
    assert detail["conflict"]["end_time"] == "11:30"


def test_touching_booking_is_accepted(client):
    first = client.post("/room-bookings", json=_build_booking_payload([("2025-12-03", "10:00", "11:30")]))
    second = client.post("/room-bookings", json=_build_booking_payload([("2025-12-03", "11:30", "12:00")]))

    assert first.status_code == HTTPStatus.CREATED
    assert second.status_code == HTTPStatus.CREATED


def test_same_slot_in_another_room_is_accepted(client):
    first = client.post("/room-bookings", json=_build_booking_payload([("2025-12-04", "10:00", "11:00")]))
    second = client.post(
        "/room-bookings",
        json=_build_booking_payload([("2025-12-04", "10:00", "11:00")], rooms=("choco",)),
    )

    assert first.status_code == HTTPStatus.CREATED
    assert second.status_code == HTTPStatus.CREATED


def test_overlapping_schedules_within_one_request_are_rejected(client):
    payload = _build_booking_payload(
        [("2025-12-05", "10:00", "12:00"), ("2025-12-05", "11:00", "13:00")],
        rooms=("delima",),
    )

    resp = client.post("/room-bookings", json=payload)
    assert resp.status_code == HTTPStatus.CONFLICT

    # nothing was written
    grid = client.get("/rooms/availability", params={"date": "2025-12-05"}).json()
    assert grid["delima"] is True


def test_invalid_time_range_is_rejected(client):
    resp = client.post(
        "/room-bookings",
        json=_build_booking_payload([("2025-12-06", "11:00", "10:00")]),
    )
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert "end must be after start" in resp.json()["detail"]


def test_validation_errors_return_422(client):
    no_rooms = _build_booking_payload([("2025-12-06", "10:00", "11:00")], rooms=())
    unknown_room = _build_booking_payload([("2025-12-06", "10:00", "11:00")], rooms=("ballroom",))
    bad_time = _build_booking_payload([("2025-12-06", "10:00", "24:00")])
    duplicate_rooms = _build_booking_payload([("2025-12-06", "10:00", "11:00")], rooms=("choco", "choco"))

    for payload in (no_rooms, unknown_room, bad_time, duplicate_rooms):
        resp = client.post("/room-bookings", json=payload)
        assert resp.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_get_unknown_booking_returns_404(client):
    assert client.get("/room-bookings/999999").status_code == HTTPStatus.NOT_FOUND
    assert client.get("/room-bookings/999999/logs").status_code == HTTPStatus.NOT_FOUND


def test_list_bookings_filters_by_requestor_and_status(client):
    created = client.post(
        "/room-bookings",
        json=_build_booking_payload([("2025-12-08", "08:00", "09:00")], requestor_id="staff-filter"),
    )
    assert created.status_code == HTTPStatus.CREATED

    resp = client.get("/room-bookings", params={"requestor_id": "staff-filter"})
    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert [b["id"] for b in data] == [created.json()["id"]]

    approved = client.get("/room-bookings", params={"requestor_id": "staff-filter", "status": "APPROVED"})
    assert approved.json() == []


def test_cancel_frees_the_slot(client):
    day = "2025-12-09"
    created = client.post(
        "/room-bookings",
        json=_build_booking_payload([(day, "15:00", "16:00")], rooms=("sauda-ajwa",), requestor_id="staff-cancel"),
    )
    booking_id = created.json()["id"]

    forbidden = client.post(
        f"/room-bookings/{booking_id}/cancel",
        json={"requestor_id": "someone-else", "requestor_name": "Other"},
    )
    assert forbidden.status_code == HTTPStatus.FORBIDDEN

    cancelled = client.post(
        f"/room-bookings/{booking_id}/cancel",
        json={"requestor_id": "staff-cancel", "requestor_name": "Aisyah Rahman", "notes": "Moved online"},
    )
    assert cancelled.status_code == HTTPStatus.OK
    assert cancelled.json()["status"] == "CANCELLED"

    again = client.post(
        f"/room-bookings/{booking_id}/cancel",
        json={"requestor_id": "staff-cancel", "requestor_name": "Aisyah Rahman"},
    )
    assert again.status_code == HTTPStatus.BAD_REQUEST

    rebooked = client.post(
        "/room-bookings",
        json=_build_booking_payload([(day, "15:00", "16:00")], rooms=("sauda-ajwa",)),
    )
    assert rebooked.status_code == HTTPStatus.CREATED

    actions = [e["action"] for e in client.get(f"/room-bookings/{booking_id}/logs").json()]
    assert actions == ["CREATED", "CANCELLED"]
