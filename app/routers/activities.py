from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.schemas.activity import ActivityResponse, NotificationResponse
from app.services import activity_log
from app.utils.auth import get_current_user


router = APIRouter(
    prefix="/activities",
    tags=["activities"],
)

notifications_router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get("/", response_model=List[ActivityResponse])
def get_activities(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Recent activity of the current user, newest first.
    """
    return activity_log.list_activities(db, current_user["id"], skip, limit)


@notifications_router.get("/", response_model=List[NotificationResponse])
def get_notifications(
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return activity_log.list_notifications(db, current_user["id"], unread_only, skip, limit)


@notifications_router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    notification = activity_log.mark_notification_read(db, notification_id, current_user["id"])
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification
