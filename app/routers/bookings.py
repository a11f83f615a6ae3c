from datetime import date
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.models.booking import BookingStatusHistory
from app.models.room import Room
from app.schemas.booking import (
    AvailableSlot,
    BookingCancel,
    BookingCreate,
    BookingResponse,
    BookingStats,
    BookingUpdate,
    ConflictCheckRequest,
    ConflictCheckResponse,
    StatusHistoryResponse,
)
from app.services import booking_service
from app.utils.auth import get_current_user
from app.utils.scheduler import available_slots
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Book a room for a time range within working hours. Requires authentication."
)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Create a new booking.
    Requires authentication.

    - **room_name**: Name of the room to book.
    - **date**: Booking date (YYYY-MM-DD).
    - **start_time** / **end_time**: HH:MM, 24-hour clock, within 09:00-18:00.
    - **purpose**: Purpose of the booking.
    - **attendees**: (Optional) Expected number of attendees.

    Conflicting bookings are rejected with 409.
    """
    logger.debug(f"Creating booking for user: {current_user['email']}, room: {booking.room_name}")
    result = booking_service.submit_booking(db, booking.model_dump(), current_user)
    if not result.confirmed:
        raise result.error
    return BookingResponse.from_booking(result.booking)


@router.get(
    "/",
    response_model=List[BookingResponse],
    summary="List my bookings",
    description="Retrieve the current user's bookings, optionally filtered by status."
)
def get_bookings(
    status_filter: Optional[Literal["upcoming", "past", "cancelled"]] = Query(None, alias="status"),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Retrieve the current user's bookings ordered by date and start time.

    - **status**: (Optional) upcoming, past or cancelled.
    """
    bookings = booking_service.list_bookings(db, current_user["id"], status_filter, skip, limit)
    logger.debug(f"Retrieved {len(bookings)} bookings for user {current_user['id']}")
    return [BookingResponse.from_booking(b) for b in bookings]


@router.get("/stats", response_model=BookingStats, summary="Booking statistics")
def get_booking_stats(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    return booking_service.booking_stats(db, current_user["id"])


@router.post(
    "/check-conflict",
    response_model=ConflictCheckResponse,
    summary="Check for a booking conflict",
    description="Report whether a time range overlaps an existing booking of the room."
)
def check_conflict(
    request: ConflictCheckRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    conflicts = booking_service.check_conflict(
        db,
        request.room_name,
        request.date,
        request.start_time,
        request.end_time,
        request.exclude_booking_id,
    )
    return {"conflict": bool(conflicts), "conflicting_booking_ids": [b.id for b in conflicts]}


@router.get(
    "/available_slots/",
    response_model=List[AvailableSlot],
    summary="List available time slots",
    description="Retrieve free time slots for a room on a specific date. Requires authentication."
)
def get_available_slots(
    room_name: str,
    date: date,
    duration: int = 60,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    List available time slots for a room.

    - **room_name**: Room to check availability for.
    - **date**: Date to check availability (e.g., 2025-03-10).
    - **duration**: Duration of each slot in minutes (default: 60).
    """
    if duration <= 0:
        logger.error(f"Invalid duration: {duration}, must be positive")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duration must be positive")

    if not db.query(Room).filter(Room.name == room_name).first():
        logger.error(f"Room not found: {room_name}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    slots = available_slots(db, room_name, date, duration)
    logger.debug(f"Found {len(slots)} available slots for room: {room_name}")
    return slots


@router.get("/{booking_id}", response_model=BookingResponse, summary="Get a booking by ID")
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    booking = booking_service.get_booking(db, booking_id)
    return BookingResponse.from_booking(booking)


@router.get(
    "/{booking_id}/history",
    response_model=List[StatusHistoryResponse],
    summary="Booking status history",
)
def get_booking_history(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    booking = booking_service.get_booking(db, booking_id)
    if booking.user_id != current_user["id"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view this booking")
    return (
        db.query(BookingStatusHistory)
        .filter(BookingStatusHistory.booking_id == booking_id)
        .order_by(BookingStatusHistory.id)
        .all()
    )


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
    description="Edit or reschedule an upcoming booking. Requires authentication and ownership."
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Update an upcoming booking. The new time range is validated and
    checked for conflicts like a new booking.
    """
    booking = booking_service.update_booking(
        db, booking_id, booking_update.model_dump(exclude_unset=True), current_user
    )
    return BookingResponse.from_booking(booking)


@router.post(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    summary="Cancel a booking",
    description="Cancel a booking. Requires authentication and ownership."
)
def cancel_booking(
    booking_id: int,
    cancel: Optional[BookingCancel] = None,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    reason = cancel.reason if cancel else None
    booking = booking_service.cancel_booking(db, booking_id, current_user, reason)
    return BookingResponse.from_booking(booking)
