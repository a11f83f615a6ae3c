import logging
from sqlalchemy.orm import Session
from app.models.profile import Department
from app.models.room import Equipment, Room, RoomEquipment

logger = logging.getLogger(__name__)


DEPARTMENTS = [
    "Computer Science",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Biology",
    "English",
    "History",
    "Business Administration",
]

EQUIPMENT = [
    {"name": "Projector", "category": "AV", "is_portable": False},
    {"name": "Whiteboard", "category": "Furniture", "is_portable": False},
    {"name": "Video Conferencing", "category": "AV", "is_portable": False},
    {"name": "Computers", "category": "IT", "is_portable": False},
    {"name": "Sound System", "category": "AV", "is_portable": False},
    {"name": "Portable Speaker", "category": "AV", "is_portable": True},
]

ROOMS = [
    {"name": "Conference Room A", "capacity": 20, "room_type": "conference_room", "building": "Main", "floor": 1,
     "equipment": ["Projector", "Whiteboard", "Video Conferencing"]},
    {"name": "Conference Room B", "capacity": 15, "room_type": "conference_room", "building": "Main", "floor": 1,
     "equipment": ["Projector", "Whiteboard"]},
    {"name": "Conference Room C", "capacity": 12, "room_type": "conference_room", "building": "Main", "floor": 2,
     "equipment": ["Whiteboard"]},
    {"name": "Lab B-202", "capacity": 30, "room_type": "lab", "building": "B", "floor": 2, "room_number": "202",
     "equipment": ["Computers", "Projector"]},
    {"name": "Lab C-101", "capacity": 25, "room_type": "lab", "building": "C", "floor": 1, "room_number": "101",
     "equipment": ["Computers"]},
    {"name": "Lab D-303", "capacity": 25, "room_type": "lab", "building": "D", "floor": 3, "room_number": "303",
     "equipment": ["Computers", "Whiteboard"]},
    {"name": "Seminar Hall", "capacity": 100, "room_type": "seminar_hall", "building": "Main", "floor": 0,
     "equipment": ["Projector", "Sound System"]},
    {"name": "Meeting Room 1", "capacity": 8, "room_type": "meeting_room", "building": "Main", "floor": 2,
     "equipment": ["Whiteboard"]},
    {"name": "Meeting Room 2", "capacity": 8, "room_type": "meeting_room", "building": "Main", "floor": 2,
     "equipment": ["Whiteboard"]},
    {"name": "Meeting Room 3", "capacity": 10, "room_type": "meeting_room", "building": "Main", "floor": 3,
     "equipment": ["Whiteboard", "Video Conferencing"]},
]


def seed_reference_data(db: Session):
    """Insert the default departments, equipment and rooms that are missing."""
    existing = {name for (name,) in db.query(Department.name).all()}
    for name in DEPARTMENTS:
        if name not in existing:
            db.add(Department(name=name))

    equipment = {item.name: item for item in db.query(Equipment).all()}
    for data in EQUIPMENT:
        if data["name"] not in equipment:
            item = Equipment(**data)
            db.add(item)
            equipment[item.name] = item

    existing_rooms = {name for (name,) in db.query(Room.name).all()}
    added = 0
    for data in ROOMS:
        if data["name"] in existing_rooms:
            continue
        room = Room(**data)
        room.room_equipment = [
            RoomEquipment(equipment=equipment[name], quantity=1, condition="good")
            for name in data["equipment"]
        ]
        db.add(room)
        added += 1

    db.commit()
    if added:
        logger.info(f"Seeded {added} rooms")
