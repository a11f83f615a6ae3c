import re
from dataclasses import dataclass
from datetime import date
from typing import Optional
from app.utils.errors import (
    AttendeesOutOfBounds,
    InvalidFormat,
    InvalidRange,
    MissingField,
    OutsideWorkingHours,
)


REQUIRED_FIELDS = ("room_name", "date", "start_time", "end_time", "purpose")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

WORKDAY_START = "09:00"
WORKDAY_END = "18:00"
WORKDAY_START_HOUR = 9
WORKDAY_END_HOUR = 18
DEFAULT_MAX_ATTENDEES = 100


@dataclass(frozen=True)
class ValidatedBooking:
    room_name: str
    date: date
    start_time: str
    end_time: str
    purpose: str
    attendees: Optional[int] = None


def _field(candidate, name):
    if isinstance(candidate, dict):
        return candidate.get(name)
    return getattr(candidate, name, None)


def _is_blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _parse_date(value):
    if isinstance(value, date):
        return value
    if not DATE_PATTERN.match(value.strip()):
        raise InvalidFormat("date", "YYYY-MM-DD")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidFormat("date", "YYYY-MM-DD") from None


def _check_time(name, value):
    if not isinstance(value, str) or not TIME_PATTERN.match(value.strip()):
        raise InvalidFormat(name, "HH:MM")
    return value.strip()


def validate_time_range(start_time, end_time):
    """Check both times are HH:MM and start strictly precedes end; returns the stripped pair."""
    start_time = _check_time("start_time", start_time)
    end_time = _check_time("end_time", end_time)
    # zero-padded HH:MM compares correctly as a string
    if start_time >= end_time:
        raise InvalidRange()
    return start_time, end_time


def hour_of(value):
    return int(value.split(":", 1)[0])


def within_working_hours(start_time, end_time, strict=False):
    """
    Hour-only comparison by default, so an end time such as 18:45 passes.
    In strict mode the full times must sit inside 09:00-18:00.
    """
    if strict:
        return start_time >= WORKDAY_START and end_time <= WORKDAY_END
    return hour_of(start_time) >= WORKDAY_START_HOUR and hour_of(end_time) <= WORKDAY_END_HOUR


def validate_attendees(value, limit=DEFAULT_MAX_ATTENDEES):
    if value is None or value == "":
        return None
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise AttendeesOutOfBounds(limit)
    if isinstance(value, str):
        if not value.strip().isdigit():
            raise AttendeesOutOfBounds(limit)
        value = int(value.strip())
    attendees = value
    if attendees < 1 or attendees > limit:
        raise AttendeesOutOfBounds(limit)
    return attendees


def validate_booking(candidate, max_attendees=DEFAULT_MAX_ATTENDEES, strict_hours=False):
    """
    Validate a booking candidate (dict or object with booking attributes).

    Checks run in order and the first failure is raised: required fields,
    field formats, start before end, working hours, attendee bound.
    Pure function, no database or clock access.
    """
    for name in REQUIRED_FIELDS:
        if _is_blank(_field(candidate, name)):
            raise MissingField(name)

    booking_date = _parse_date(_field(candidate, "date"))
    start_time, end_time = validate_time_range(
        _field(candidate, "start_time"), _field(candidate, "end_time")
    )

    if not within_working_hours(start_time, end_time, strict=strict_hours):
        raise OutsideWorkingHours()

    attendees = validate_attendees(_field(candidate, "attendees"), max_attendees)

    return ValidatedBooking(
        room_name=_field(candidate, "room_name").strip(),
        date=booking_date,
        start_time=start_time,
        end_time=end_time,
        purpose=_field(candidate, "purpose").strip(),
        attendees=attendees,
    )
