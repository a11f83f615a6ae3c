from datetime import date as date_type
from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Index,
    func,
)
from sqlalchemy.orm import relationship
from app.db import Base


STATUS_UPCOMING = "upcoming"
STATUS_PAST = "past"
STATUS_CANCELLED = "cancelled"
# Only these are ever written; "past" is derived when reading.
PERSISTED_STATUSES = (STATUS_UPCOMING, STATUS_CANCELLED)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_booking_time_range"),
        CheckConstraint(
            "status IN ('upcoming', 'cancelled')", name="check_booking_status"
        ),
        Index("ix_bookings_room_date", "room_name", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    room_name = Column(String, ForeignKey("rooms.name"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    purpose = Column(String, nullable=False)
    attendees = Column(Integer, nullable=True)
    status = Column(String, nullable=False, default=STATUS_UPCOMING)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="bookings")
    history = relationship(
        "BookingStatusHistory",
        back_populates="booking",
        order_by="BookingStatusHistory.id",
    )

    def current_status(self, today=None):
        """Status as seen at read time."""
        if self.status == STATUS_CANCELLED:
            return STATUS_CANCELLED
        today = today or date_type.today()
        if self.date < today:
            return STATUS_PAST
        return STATUS_UPCOMING


class BookingStatusHistory(Base):
    __tablename__ = "booking_status_history"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    old_status = Column(String, nullable=True)
    new_status = Column(String, nullable=False)
    changed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reason = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    booking = relationship("Booking", back_populates="history")
