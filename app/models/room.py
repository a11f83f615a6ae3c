from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String, Boolean, JSON, ForeignKey
from app.db import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    capacity = Column(Integer, nullable=False)
    room_type = Column(String, nullable=False, default="meeting_room")
    building = Column(String, nullable=True)
    floor = Column(Integer, nullable=True)
    room_number = Column(String, nullable=True)
    description = Column(String, nullable=True)
    equipment = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    booking_rules = Column(JSON, nullable=True)
    # bumped inside every booking transaction; the UPDATE is the per-room lock
    lock_version = Column(Integer, nullable=False, default=0)

    room_equipment = relationship(
        "RoomEquipment", back_populates="room", cascade="all, delete-orphan"
    )


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    category = Column(String, nullable=True)
    description = Column(String, nullable=True)
    is_portable = Column(Boolean, nullable=False, default=False)

    rooms = relationship("RoomEquipment", back_populates="equipment")


class RoomEquipment(Base):
    __tablename__ = "room_equipment"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    equipment_id = Column(Integer, ForeignKey("equipment.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    condition = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    room = relationship("Room", back_populates="room_equipment")
    equipment = relationship("Equipment", back_populates="rooms")
