from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class ActivityResponse(BaseModel):
    id: int
    user_id: int
    action_type: str
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="details")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    type: str
    related_booking_id: Optional[int] = None
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
