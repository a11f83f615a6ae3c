from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.db import get_db
from app.models.booking import Booking
from app.models.room import Equipment, Room, RoomEquipment
from app.schemas.room import (
    EquipmentResponse,
    RoomCreate,
    RoomEquipmentResponse,
    RoomResponse,
    RoomUpdate,
)
from app.utils.auth import require_admin


router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
)

equipment_router = APIRouter(
    prefix="/equipment",
    tags=["equipment"],
)

# NOT NULL columns; an explicit null in an update is a client error
REQUIRED_ROOM_FIELDS = ("name", "capacity", "room_type", "equipment", "is_active")


def _get_room_or_404(db, room_id):
    room = db.get(Room, room_id)
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return room


def _clean_name(name):
    name = (name or "").strip()
    if not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Room name must not be empty")
    return name


def _link_equipment(db, room, names):
    """Point the room's equipment rows at catalogue items, keeping rows for names it already has."""
    catalogue = {item.name: item for item in db.query(Equipment).filter(Equipment.name.in_(names)).all()}
    unknown = [name for name in names if name not in catalogue]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown equipment: {', '.join(unknown)}",
        )
    current = {row.equipment.name: row for row in room.room_equipment}
    room.room_equipment = [
        current.get(name) or RoomEquipment(equipment=catalogue[name], quantity=1, condition="good")
        for name in dict.fromkeys(names)
    ]


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(room: RoomCreate, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Create a new room or lab.
    Requires the admin role.
    """
    data = room.model_dump()
    data["name"] = _clean_name(data["name"])
    if db.query(Room).filter(Room.name == data["name"]).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Room name already exists")
    db_room = Room(**data)
    _link_equipment(db, db_room, data["equipment"])
    db.add(db_room)
    db.commit()
    db.refresh(db_room)
    return db_room


@router.get("/", response_model=List[RoomResponse])
def get_rooms(
    skip: int = 0,
    limit: int = 100,
    include_inactive: bool = False,
    room_type: str = None,
    min_capacity: int = None,
    db: Session = Depends(get_db),
):
    """
    Retrieve bookable rooms, optionally filtered by type and capacity.
    """
    query = db.query(Room)
    if not include_inactive:
        query = query.filter(Room.is_active.is_(True))
    if room_type:
        query = query.filter(Room.room_type == room_type)
    if min_capacity is not None:
        query = query.filter(Room.capacity >= min_capacity)
    return query.order_by(Room.name).offset(skip).limit(limit).all()


@router.get("/by-name/{name}", response_model=RoomResponse)
def get_room_by_name(name: str, db: Session = Depends(get_db)):
    room = db.query(Room).filter(Room.name == name).first()
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return room


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a specific room by ID.
    """
    return _get_room_or_404(db, room_id)


@router.get("/{room_id}/equipment", response_model=List[RoomEquipmentResponse])
def get_room_equipment(room_id: int, db: Session = Depends(get_db)):
    _get_room_or_404(db, room_id)
    return db.query(RoomEquipment).filter(RoomEquipment.room_id == room_id).all()


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    room_update: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """
    Update a room's details. Rooms with bookings keep their name, since
    bookings reference rooms by name; deactivate them instead.
    Requires the admin role.
    """
    db_room = _get_room_or_404(db, room_id)

    update_data = room_update.model_dump(exclude_unset=True)
    for field in REQUIRED_ROOM_FIELDS:
        if field in update_data and update_data[field] is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=f"Field '{field}' cannot be null"
            )
    if "name" in update_data:
        update_data["name"] = _clean_name(update_data["name"])
    new_name = update_data.get("name")
    if new_name is not None and new_name != db_room.name:
        if db.query(Room).filter(Room.name == new_name).first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Room name already exists")
        if db.query(Booking).filter(Booking.room_name == db_room.name).first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot rename a room that has bookings",
            )

    if "equipment" in update_data:
        _link_equipment(db, db_room, update_data["equipment"])
    for key, value in update_data.items():
        setattr(db_room, key, value)

    db.commit()
    db.refresh(db_room)
    return db_room


@equipment_router.get("/", response_model=List[EquipmentResponse])
def get_equipment(category: str = None, db: Session = Depends(get_db)):
    query = db.query(Equipment)
    if category:
        query = query.filter(Equipment.category == category)
    return query.order_by(Equipment.name).all()
