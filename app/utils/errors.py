from fastapi import status


class BookingError(Exception):
    """Base class for booking failures reported back to the submitting user."""

    code = "booking_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class BookingValidationError(BookingError):
    code = "validation_error"


class MissingField(BookingValidationError):
    code = "missing_field"

    def __init__(self, field):
        super().__init__(f"Missing required field: {field}")
        self.field = field


class InvalidFormat(BookingValidationError):
    code = "invalid_format"

    def __init__(self, field, expected):
        super().__init__(f"Field '{field}' must be in {expected} format")
        self.field = field


class InvalidRange(BookingValidationError):
    code = "invalid_range"

    def __init__(self):
        super().__init__("End time must be after start time")


class OutsideWorkingHours(BookingValidationError):
    code = "outside_working_hours"

    def __init__(self):
        super().__init__("Bookings are only allowed during working hours (9 AM - 6 PM)")


class AttendeesOutOfBounds(BookingValidationError):
    code = "attendees_out_of_bounds"

    def __init__(self, limit):
        super().__init__(f"Attendees must be between 1 and {limit}")
        self.limit = limit


class RoomNotFound(BookingError):
    code = "room_not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, room_name):
        super().__init__(f"Room not found: {room_name}")


class RoomUnavailable(BookingError):
    code = "room_unavailable"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message="Room is already booked for this time slot"):
        super().__init__(message)


class BookingNotFound(BookingError):
    code = "booking_not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self):
        super().__init__("Booking not found")


class NotBookingOwner(BookingError):
    code = "not_booking_owner"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, action="modify"):
        super().__init__(f"Not authorized to {action} this booking")


class BookingNotEditable(BookingError):
    code = "booking_not_editable"
    status_code = status.HTTP_409_CONFLICT


class PersistenceFailed(BookingError):
    code = "persistence_failed"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message="Could not save the booking, please check availability and retry"):
        super().__init__(message)


class Unavailable(BookingError):
    """The answer is unknown because the store could not be reached; safe to retry."""

    code = "unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message="Booking data is temporarily unavailable, please retry"):
        super().__init__(message)
