from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class RoomBase(BaseModel):
    name: str
    capacity: int
    room_type: str = "meeting_room"
    building: Optional[str] = None
    floor: Optional[int] = None
    room_number: Optional[str] = None
    description: Optional[str] = None
    equipment: List[str] = []
    is_active: bool = True
    booking_rules: Optional[Dict[str, Any]] = None


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    name: Optional[str] = None
    capacity: Optional[int] = None
    room_type: Optional[str] = None
    building: Optional[str] = None
    floor: Optional[int] = None
    room_number: Optional[str] = None
    description: Optional[str] = None
    equipment: Optional[List[str]] = None
    is_active: Optional[bool] = None
    booking_rules: Optional[Dict[str, Any]] = None


class RoomResponse(RoomBase):
    id: int

    class Config:
        from_attributes = True


class EquipmentResponse(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    is_portable: bool = False

    class Config:
        from_attributes = True


class RoomEquipmentResponse(BaseModel):
    equipment: EquipmentResponse
    quantity: int
    condition: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True
