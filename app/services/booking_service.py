"""
Booking submission workflow and the other booking mutations.

Every mutation that can create an overlap (create, reschedule) runs the
conflict check inside the same transaction as the write, after taking a
lock on the room row, so two concurrent submissions for overlapping slots
cannot both commit.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional
from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app import config
from app.models.booking import (
    Booking,
    BookingStatusHistory,
    STATUS_CANCELLED,
    STATUS_PAST,
    STATUS_UPCOMING,
)
from app.models.room import Room
from app.services.activity_log import create_notification, record_activity
from app.utils.errors import (
    AttendeesOutOfBounds,
    BookingError,
    BookingNotEditable,
    BookingNotFound,
    BookingValidationError,
    NotBookingOwner,
    PersistenceFailed,
    RoomNotFound,
    RoomUnavailable,
    Unavailable,
)
from app.utils.scheduler import find_conflicts, week_window
from app.utils.validation_helpers import validate_booking, validate_time_range

logger = logging.getLogger(__name__)


class SubmissionState(str, enum.Enum):
    DRAFT = "draft"
    VALIDATING = "validating"
    CHECKING_CONFLICT = "checking_conflict"
    COMMITTING = "committing"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


@dataclass
class SubmissionResult:
    state: SubmissionState
    booking: Optional[Booking] = None
    error: Optional[BookingError] = None

    @property
    def confirmed(self):
        return self.state == SubmissionState.CONFIRMED


def _validate(fields):
    return validate_booking(
        fields,
        max_attendees=config.MAX_ATTENDEES,
        strict_hours=config.WORKING_HOURS_STRICT,
    )


def _lock_room(db: Session, room_name: str) -> Room:
    """Load a bookable room and hold a write lock on its row until commit."""
    room = db.query(Room).filter(Room.name == room_name).first()
    if room is None:
        raise RoomNotFound(room_name)
    if not room.is_active:
        raise RoomUnavailable(f"Room {room_name} is not available for booking")
    db.execute(
        update(Room)
        .where(Room.id == room.id)
        .values(lock_version=Room.lock_version + 1)
        .execution_options(synchronize_session=False)
    )
    return room


def _ensure_free(db: Session, room: Room, candidate, exclude_booking_id=None):
    if candidate.attendees is not None and candidate.attendees > room.capacity:
        raise AttendeesOutOfBounds(room.capacity)
    conflicts = find_conflicts(
        db,
        room.name,
        candidate.date,
        candidate.start_time,
        candidate.end_time,
        exclude_booking_id=exclude_booking_id,
    )
    if conflicts:
        logger.info(
            f"Conflict for room {room.name} on {candidate.date} "
            f"{candidate.start_time}-{candidate.end_time}: bookings {[b.id for b in conflicts]}"
        )
        raise RoomUnavailable()


def _add_history(db: Session, booking: Booking, old_status, new_status, user_id, reason=None):
    db.add(
        BookingStatusHistory(
            booking=booking,
            old_status=old_status,
            new_status=new_status,
            changed_by=user_id,
            reason=reason,
        )
    )


def submit_booking(db: Session, fields, user: dict) -> SubmissionResult:
    """
    Run one submission attempt through validation, the conflict check and
    the insert. Failures are returned as a Rejected result, never raised.
    """
    state = SubmissionState.VALIDATING
    try:
        candidate = _validate(fields)
    except BookingValidationError as e:
        logger.info(f"Booking rejected for user {user['id']} during validation: {e.message}")
        return SubmissionResult(SubmissionState.REJECTED, error=e)

    state = SubmissionState.CHECKING_CONFLICT
    try:
        room = _lock_room(db, candidate.room_name)
        _ensure_free(db, room, candidate)

        state = SubmissionState.COMMITTING
        booking = Booking(
            room_name=candidate.room_name,
            user_id=user["id"],
            date=candidate.date,
            start_time=candidate.start_time,
            end_time=candidate.end_time,
            purpose=candidate.purpose,
            attendees=candidate.attendees,
            status=STATUS_UPCOMING,
        )
        db.add(booking)
        _add_history(db, booking, None, STATUS_UPCOMING, user["id"], "created")
        db.commit()
    except BookingError as e:
        db.rollback()
        logger.info(f"Booking rejected for user {user['id']} while {state.value}: {e.message}")
        return SubmissionResult(SubmissionState.REJECTED, error=e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to persist booking for user {user['id']}: {e}")
        return SubmissionResult(SubmissionState.REJECTED, error=PersistenceFailed())

    db.refresh(booking)
    logger.info(
        f"Created booking {booking.id}: {booking.room_name} on {booking.date} "
        f"{booking.start_time}-{booking.end_time}"
    )
    record_activity(
        db,
        user["id"],
        "booking_created",
        f"Booked {booking.room_name} on {booking.date.isoformat()}",
        {"booking_id": booking.id, "room_name": booking.room_name},
    )
    create_notification(
        db,
        user["id"],
        "Booking confirmed",
        f"Room {booking.room_name} booked successfully for {booking.date.isoformat()} "
        f"{booking.start_time}-{booking.end_time}",
        "booking_confirmed",
        booking.id,
    )
    return SubmissionResult(SubmissionState.CONFIRMED, booking=booking)


def check_conflict(db: Session, room_name, booking_date, start_time, end_time, exclude_booking_id=None):
    """
    Read-only conflict lookup used for availability hints.

    Raises `InvalidFormat`/`InvalidRange` for malformed times and `Unavailable`
    when the store cannot answer, so a failed lookup never reads as "free".
    """
    start_time, end_time = validate_time_range(start_time, end_time)
    try:
        return find_conflicts(db, room_name, booking_date, start_time, end_time, exclude_booking_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Conflict lookup failed for room {room_name} on {booking_date}: {e}")
        raise Unavailable() from e


def get_booking(db: Session, booking_id) -> Booking:
    booking = db.get(Booking, booking_id)
    if booking is None:
        raise BookingNotFound()
    return booking


def _get_owned_booking(db: Session, booking_id, user: dict, action) -> Booking:
    booking = get_booking(db, booking_id)
    if booking.user_id != user["id"]:
        logger.warning(f"User {user['id']} not authorized to {action} booking {booking_id}")
        raise NotBookingOwner(action)
    return booking


def update_booking(db: Session, booking_id, changes: dict, user: dict, today=None) -> Booking:
    """Reschedule or edit an upcoming booking owned by `user`."""
    booking = _get_owned_booking(db, booking_id, user, "update")
    current = booking.current_status(today)
    if current != STATUS_UPCOMING:
        raise BookingNotEditable(f"Cannot edit a {current} booking")

    merged = {
        "room_name": booking.room_name,
        "date": booking.date.isoformat(),
        "start_time": booking.start_time,
        "end_time": booking.end_time,
        "purpose": booking.purpose,
        "attendees": booking.attendees,
    }
    merged.update(changes)
    candidate = _validate(merged)

    try:
        room = _lock_room(db, candidate.room_name)
        _ensure_free(db, room, candidate, exclude_booking_id=booking.id)
        booking.room_name = candidate.room_name
        booking.date = candidate.date
        booking.start_time = candidate.start_time
        booking.end_time = candidate.end_time
        booking.purpose = candidate.purpose
        booking.attendees = candidate.attendees
        db.commit()
    except BookingError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update booking {booking_id}: {e}")
        raise PersistenceFailed() from e

    db.refresh(booking)
    logger.info(f"Updated booking {booking.id}")
    record_activity(
        db,
        user["id"],
        "booking_updated",
        f"Updated booking for {booking.room_name} on {booking.date.isoformat()}",
        {"booking_id": booking.id, "changes": sorted(changes)},
    )
    return booking


def cancel_booking(db: Session, booking_id, user: dict, reason=None, today=None) -> Booking:
    booking = _get_owned_booking(db, booking_id, user, "cancel")
    if booking.status == STATUS_CANCELLED:
        return booking
    if booking.current_status(today) == STATUS_PAST:
        raise BookingNotEditable("Bookings that have already taken place cannot be cancelled")

    old_status = booking.status
    booking.status = STATUS_CANCELLED
    _add_history(db, booking, old_status, STATUS_CANCELLED, user["id"], reason)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to cancel booking {booking_id}: {e}")
        raise PersistenceFailed("Could not cancel the booking, please retry") from e

    db.refresh(booking)
    logger.info(f"Cancelled booking {booking.id}")
    record_activity(
        db,
        user["id"],
        "booking_cancelled",
        f"Cancelled booking for {booking.room_name} on {booking.date.isoformat()}",
        {"booking_id": booking.id, "reason": reason},
    )
    create_notification(
        db,
        user["id"],
        "Booking cancelled",
        f"Your booking of {booking.room_name} on {booking.date.isoformat()} has been cancelled",
        "booking_cancelled",
        booking.id,
    )
    return booking


def _filter_by_status(query, status, today):
    if status == STATUS_CANCELLED:
        return query.filter(Booking.status == STATUS_CANCELLED)
    query = query.filter(Booking.status != STATUS_CANCELLED)
    if status == STATUS_PAST:
        return query.filter(Booking.date < today)
    return query.filter(Booking.date >= today)


def list_bookings(db: Session, owner_id, status=None, skip=0, limit=100, today=None):
    today = today or date.today()
    query = db.query(Booking).filter(Booking.user_id == owner_id)
    if status is not None:
        query = _filter_by_status(query, status, today)
    return (
        query.order_by(Booking.date, Booking.start_time)
        .offset(skip)
        .limit(limit)
        .all()
    )


def booking_stats(db: Session, owner_id, today=None):
    today = today or date.today()
    base = db.query(func.count(Booking.id)).filter(Booking.user_id == owner_id)
    week_start, week_end = week_window(today)
    return {
        "total": base.scalar(),
        "upcoming": _filter_by_status(base, STATUS_UPCOMING, today).scalar(),
        "past": _filter_by_status(base, STATUS_PAST, today).scalar(),
        "cancelled": _filter_by_status(base, STATUS_CANCELLED, today).scalar(),
        "this_week": base.filter(
            Booking.status != STATUS_CANCELLED,
            Booking.date >= week_start,
            Booking.date <= week_end,
        ).scalar(),
    }
