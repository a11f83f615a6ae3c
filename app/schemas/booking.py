from datetime import date as date_type, datetime
from typing import List, Optional, Union
from pydantic import BaseModel


class BookingBase(BaseModel):
    room_name: Optional[str] = None
    date: Optional[Union[date_type, str]] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    purpose: Optional[str] = None
    attendees: Optional[int] = None


class BookingCreate(BookingBase):
    pass


class BookingUpdate(BookingBase):
    pass


class BookingCancel(BaseModel):
    reason: Optional[str] = None


class BookingResponse(BaseModel):
    id: int
    room_name: str
    user_id: int
    date: date_type
    start_time: str
    end_time: str
    purpose: str
    attendees: Optional[int] = None
    status: str
    department: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking, today=None):
        """Build the response with the status and department derived at read time."""
        profile = booking.user.profile if booking.user else None
        return cls(
            id=booking.id,
            room_name=booking.room_name,
            user_id=booking.user_id,
            date=booking.date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            purpose=booking.purpose,
            attendees=booking.attendees,
            status=booking.current_status(today),
            department=profile.department if profile else None,
            created_at=booking.created_at,
        )


class ConflictCheckRequest(BaseModel):
    room_name: str
    date: date_type
    start_time: str
    end_time: str
    exclude_booking_id: Optional[int] = None


class ConflictCheckResponse(BaseModel):
    conflict: bool
    conflicting_booking_ids: List[int] = []


class BookingStats(BaseModel):
    total: int
    upcoming: int
    past: int
    cancelled: int
    this_week: int


class AvailableSlot(BaseModel):
    start_time: str
    end_time: str


class StatusHistoryResponse(BaseModel):
    id: int
    booking_id: int
    old_status: Optional[str] = None
    new_status: str
    changed_by: Optional[int] = None
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
