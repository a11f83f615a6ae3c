from datetime import date, datetime, timedelta
from sqlalchemy.orm import Session
from app.models.booking import Booking, STATUS_CANCELLED
from app.utils.validation_helpers import WORKDAY_START, WORKDAY_END


def intervals_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open [start, end) overlap; touching ends do not overlap."""
    return start_a < end_b and start_b < end_a


def active_bookings_query(db: Session, room_name: str, booking_date: date):
    return db.query(Booking).filter(
        Booking.room_name == room_name,
        Booking.date == booking_date,
        Booking.status != STATUS_CANCELLED,
    )


def find_conflicts(
    db: Session,
    room_name: str,
    booking_date: date,
    start_time: str,
    end_time: str,
    exclude_booking_id=None,
):
    """
    Return the non-cancelled bookings of a room on a date that overlap
    [start_time, end_time).
    """
    query = active_bookings_query(db, room_name, booking_date).filter(
        Booking.start_time < end_time,
        Booking.end_time > start_time,
    )
    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)
    return query.order_by(Booking.start_time).all()


def has_conflict(
    db: Session,
    room_name: str,
    booking_date: date,
    start_time: str,
    end_time: str,
    exclude_booking_id=None,
) -> bool:
    return bool(
        find_conflicts(db, room_name, booking_date, start_time, end_time, exclude_booking_id)
    )


def _to_minutes(value):
    parsed = datetime.strptime(value, "%H:%M")
    return parsed.hour * 60 + parsed.minute


def _from_minutes(value):
    return f"{value // 60:02d}:{value % 60:02d}"


def available_slots(db: Session, room_name: str, booking_date: date, duration: int = 60):
    """
    Free slots of `duration` minutes for a room on a date, inside working hours.
    """
    day_start = _to_minutes(WORKDAY_START)
    day_end = _to_minutes(WORKDAY_END)
    bookings = active_bookings_query(db, room_name, booking_date).order_by(Booking.start_time).all()

    slots = []
    current = day_start
    for booking in bookings:
        booked_start = _to_minutes(booking.start_time)
        booked_end = _to_minutes(booking.end_time)
        while current + duration <= min(booked_start, day_end):
            slots.append({"start_time": _from_minutes(current), "end_time": _from_minutes(current + duration)})
            current += duration
        current = max(current, booked_end)

    while current + duration <= day_end:
        slots.append({"start_time": _from_minutes(current), "end_time": _from_minutes(current + duration)})
        current += duration
    return slots


def week_window(today: date):
    return today, today + timedelta(days=7)
