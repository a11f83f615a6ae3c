from datetime import date, timedelta

import pytest
from fastapi import status

from app.models.booking import Booking, BookingStatusHistory
from app.models.room import Room

from tests.conf_tests import (  # pylint: disable=unused-import
    client,
    clear_db,
    test_db,
    test_user_data,
    test_user,
    auth_headers,
    other_auth_headers,
)

NEXT_WEEK = (date.today() + timedelta(days=7)).isoformat()

TEST_BOOKING_DATA = {
    "room_name": "Lab B-202",
    "date": NEXT_WEEK,
    "start_time": "09:00",
    "end_time": "10:30",
    "purpose": "Programming Workshop",
    "attendees": 20,
}


# Fixtures
@pytest.fixture
def test_booking(auth_headers):  # pylint: disable=redefined-outer-name
    response = client.post("/bookings/", json=TEST_BOOKING_DATA, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


# Tests
# pylint: disable-next=redefined-outer-name
def test_create_booking_success(auth_headers, test_user):
    response = client.post("/bookings/", json=TEST_BOOKING_DATA, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["room_name"] == TEST_BOOKING_DATA["room_name"]
    assert data["date"] == NEXT_WEEK
    assert data["start_time"] == "09:00"
    assert data["end_time"] == "10:30"
    assert data["status"] == "upcoming"
    assert data["department"] == "Computer Science"
    assert data["user_id"] == test_user["id"]


def test_create_booking_unauthorized():
    response = client.post("/bookings/", json=TEST_BOOKING_DATA)
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


# pylint: disable-next=redefined-outer-name
def test_create_booking_missing_field(auth_headers, test_db):
    response = client.post(
        "/bookings/", json={**TEST_BOOKING_DATA, "purpose": ""}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "missing_field"
    assert test_db.query(Booking).count() == 0


# pylint: disable-next=redefined-outer-name
def test_create_booking_invalid_range(auth_headers):
    response = client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "start_time": "11:00", "end_time": "10:00"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "invalid_range"
    assert "End time must be after start time" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_create_booking_outside_working_hours(auth_headers):
    response = client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "start_time": "08:00", "end_time": "09:30"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "outside_working_hours"


# pylint: disable-next=redefined-outer-name
def test_create_booking_too_many_attendees(auth_headers):
    response = client.post(
        "/bookings/", json={**TEST_BOOKING_DATA, "attendees": 150}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "attendees_out_of_bounds"


# pylint: disable-next=redefined-outer-name
def test_create_booking_attendees_above_room_capacity(auth_headers):
    # Meeting Room 1 seats 8
    response = client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "room_name": "Meeting Room 1", "attendees": 9},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "attendees_out_of_bounds"


# pylint: disable-next=redefined-outer-name
def test_create_booking_room_not_found(auth_headers):
    response = client.post(
        "/bookings/", json={**TEST_BOOKING_DATA, "room_name": "Room 999"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "room_not_found"


# pylint: disable-next=redefined-outer-name
def test_create_booking_inactive_room(auth_headers, test_db):
    room = test_db.query(Room).filter(Room.name == "Lab D-303").first()
    room.is_active = False
    test_db.commit()
    response = client.post(
        "/bookings/", json={**TEST_BOOKING_DATA, "room_name": "Lab D-303"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "room_unavailable"


# pylint: disable-next=redefined-outer-name
def test_create_booking_overlapping(auth_headers, test_booking):
    response = client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "start_time": "10:00", "end_time": "11:00"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "room_unavailable"
    assert "already booked" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_create_booking_back_to_back(auth_headers, test_booking):
    response = client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "start_time": "10:30", "end_time": "12:00"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED


# pylint: disable-next=redefined-outer-name
def test_duplicate_submission_scenario(auth_headers):
    submission = {
        "room_name": "Lab B-202",
        "date": "2025-03-10",
        "start_time": "09:00",
        "end_time": "10:30",
        "purpose": "Workshop",
    }
    first = client.post("/bookings/", json=submission, headers=auth_headers)
    second = client.post("/bookings/", json=submission, headers=auth_headers)
    assert first.status_code == status.HTTP_201_CREATED
    assert first.json()["status"] == "past"
    assert second.status_code == status.HTTP_409_CONFLICT
    assert second.json()["code"] == "room_unavailable"


# pylint: disable-next=redefined-outer-name
def test_get_bookings(auth_headers, test_booking):
    response = client.get("/bookings/", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == test_booking["id"]


# pylint: disable-next=redefined-outer-name
def test_get_bookings_only_lists_own(other_auth_headers, test_booking):
    response = client.get("/bookings/", headers=other_auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


# pylint: disable-next=redefined-outer-name
def test_get_bookings_filtered_by_status(auth_headers, test_booking):
    past = client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "date": "2024-06-23", "start_time": "14:00", "end_time": "16:00"},
        headers=auth_headers,
    ).json()

    upcoming = client.get("/bookings/?status=upcoming", headers=auth_headers).json()
    assert [b["id"] for b in upcoming] == [test_booking["id"]]

    past_list = client.get("/bookings/?status=past", headers=auth_headers).json()
    assert [b["id"] for b in past_list] == [past["id"]]
    assert past_list[0]["status"] == "past"

    response = client.get("/bookings/?status=unknown", headers=auth_headers)
    assert response.status_code == 422


# pylint: disable-next=redefined-outer-name
def test_get_booking(auth_headers, test_booking):
    response = client.get(f"/bookings/{test_booking['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == test_booking["id"]


# pylint: disable-next=redefined-outer-name
def test_get_booking_not_found(auth_headers):
    response = client.get("/bookings/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "booking_not_found"


# pylint: disable-next=redefined-outer-name
def test_update_booking_unauthorized(test_booking):
    response = client.put(f"/bookings/{test_booking['id']}", json={"purpose": "Should Fail"})
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


# pylint: disable-next=redefined-outer-name
def test_update_booking_not_owner(other_auth_headers, test_booking):
    response = client.put(
        f"/bookings/{test_booking['id']}", json={"purpose": "Hijack"}, headers=other_auth_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "not_booking_owner"


# pylint: disable-next=redefined-outer-name
def test_update_booking_reschedule(auth_headers, test_booking):
    response = client.put(
        f"/bookings/{test_booking['id']}",
        json={"start_time": "10:00", "end_time": "11:00", "purpose": "Moved workshop"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["start_time"] == "10:00"
    assert data["end_time"] == "11:00"
    assert data["purpose"] == "Moved workshop"
    assert data["room_name"] == TEST_BOOKING_DATA["room_name"]


# pylint: disable-next=redefined-outer-name
def test_update_booking_conflict(auth_headers, test_booking):
    client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "start_time": "11:00", "end_time": "12:00"},
        headers=auth_headers,
    )
    response = client.put(
        f"/bookings/{test_booking['id']}",
        json={"end_time": "11:30"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "room_unavailable"


# pylint: disable-next=redefined-outer-name
def test_update_booking_invalid_range(auth_headers, test_booking):
    response = client.put(
        f"/bookings/{test_booking['id']}", json={"end_time": "08:00"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "invalid_range"


# pylint: disable-next=redefined-outer-name
def test_cancel_booking(auth_headers, test_booking, test_db):
    response = client.post(
        f"/bookings/{test_booking['id']}/cancel", json={"reason": "Exam moved"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "cancelled"

    # still stored, only the status changed
    stored = test_db.get(Booking, test_booking["id"])
    assert stored.status == "cancelled"
    history = (
        test_db.query(BookingStatusHistory)
        .filter(BookingStatusHistory.booking_id == test_booking["id"])
        .order_by(BookingStatusHistory.id)
        .all()
    )
    assert [(h.old_status, h.new_status) for h in history] == [
        (None, "upcoming"),
        ("upcoming", "cancelled"),
    ]
    assert history[-1].reason == "Exam moved"


# pylint: disable-next=redefined-outer-name
def test_cancel_booking_is_idempotent(auth_headers, test_booking):
    url = f"/bookings/{test_booking['id']}/cancel"
    assert client.post(url, headers=auth_headers).status_code == status.HTTP_200_OK
    response = client.post(url, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "cancelled"


# pylint: disable-next=redefined-outer-name
def test_cancel_booking_not_owner(other_auth_headers, test_booking):
    response = client.post(f"/bookings/{test_booking['id']}/cancel", headers=other_auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_past_booking_cannot_be_cancelled(auth_headers, test_db):
    past = client.post(
        "/bookings/", json={**TEST_BOOKING_DATA, "date": "2020-01-06"}, headers=auth_headers
    ).json()
    assert past["status"] == "past"

    response = client.post(f"/bookings/{past['id']}/cancel", headers=auth_headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "booking_not_editable"
    assert test_db.get(Booking, past["id"]).status == "upcoming"


# pylint: disable-next=redefined-outer-name
def test_cancelled_slot_can_be_rebooked(auth_headers, test_booking):
    client.post(f"/bookings/{test_booking['id']}/cancel", headers=auth_headers)
    response = client.post("/bookings/", json=TEST_BOOKING_DATA, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED


# pylint: disable-next=redefined-outer-name
def test_cancelled_booking_cannot_be_edited(auth_headers, test_booking):
    client.post(f"/bookings/{test_booking['id']}/cancel", headers=auth_headers)
    response = client.put(
        f"/bookings/{test_booking['id']}", json={"purpose": "Too late"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "booking_not_editable"


# pylint: disable-next=redefined-outer-name
def test_booking_history(auth_headers, other_auth_headers, test_booking):
    response = client.get(f"/bookings/{test_booking['id']}/history", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["new_status"] == "upcoming"

    response = client.get(f"/bookings/{test_booking['id']}/history", headers=other_auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_check_conflict_endpoint(auth_headers, test_booking):
    request = {
        "room_name": "Lab B-202",
        "date": NEXT_WEEK,
        "start_time": "10:00",
        "end_time": "11:00",
    }
    response = client.post("/bookings/check-conflict", json=request, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"conflict": True, "conflicting_booking_ids": [test_booking["id"]]}

    request["exclude_booking_id"] = test_booking["id"]
    response = client.post("/bookings/check-conflict", json=request, headers=auth_headers)
    assert response.json()["conflict"] is False


# pylint: disable-next=redefined-outer-name
def test_check_conflict_rejects_malformed_times(auth_headers):
    request = {"room_name": "Lab B-202", "date": NEXT_WEEK, "start_time": "25:99", "end_time": "11:00"}
    response = client.post("/bookings/check-conflict", json=request, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "invalid_format"

    request.update(start_time="11:00", end_time="10:00")
    response = client.post("/bookings/check-conflict", json=request, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "invalid_range"


# pylint: disable-next=redefined-outer-name
def test_booking_stats(auth_headers, test_booking):
    client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "date": "2024-06-23"},
        headers=auth_headers,
    )
    cancelled = client.post(
        "/bookings/",
        json={**TEST_BOOKING_DATA, "start_time": "13:00", "end_time": "14:00"},
        headers=auth_headers,
    ).json()
    client.post(f"/bookings/{cancelled['id']}/cancel", headers=auth_headers)

    response = client.get("/bookings/stats", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "total": 3,
        "upcoming": 1,
        "past": 1,
        "cancelled": 1,
        "this_week": 1,
    }


# pylint: disable-next=redefined-outer-name
def test_get_available_slots(auth_headers, test_booking):
    response = client.get(
        "/bookings/available_slots/",
        params={"room_name": "Lab B-202", "date": NEXT_WEEK, "duration": 90},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    slots = response.json()
    assert slots[0] == {"start_time": "10:30", "end_time": "12:00"}
    assert all(slot["start_time"] != "09:00" for slot in slots)


# pylint: disable-next=redefined-outer-name
def test_get_available_slots_unknown_room(auth_headers):
    response = client.get(
        "/bookings/available_slots/",
        params={"room_name": "Nowhere", "date": NEXT_WEEK},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
