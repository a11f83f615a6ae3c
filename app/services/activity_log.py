"""
Append-only side records: user activity and in-app notifications.

Both writers are best-effort. They run in their own transaction after the
booking has been committed, and a failure is logged and swallowed so it can
never undo the booking it describes.
"""
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.activity import Activity, Notification

logger = logging.getLogger(__name__)


def record_activity(db: Session, user_id, action_type, description=None, metadata=None):
    activity = Activity(
        user_id=user_id,
        action_type=action_type,
        description=description,
        details=metadata,
    )
    try:
        db.add(activity)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Failed to record activity '{action_type}' for user {user_id}: {e}")
        return None
    logger.debug(f"Recorded activity '{action_type}' for user {user_id}")
    return activity


def create_notification(db: Session, user_id, title, message, type_="info", booking_id=None):
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=type_,
        related_booking_id=booking_id,
    )
    try:
        db.add(notification)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Failed to create notification for user {user_id}: {e}")
        return None
    logger.debug(f"Created notification for user {user_id}, booking: {booking_id}")
    return notification


def list_activities(db: Session, user_id, skip=0, limit=100):
    return (
        db.query(Activity)
        .filter(Activity.user_id == user_id)
        .order_by(Activity.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_notifications(db: Session, user_id, unread_only=False, skip=0, limit=100):
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.id.desc()).offset(skip).limit(limit).all()


def mark_notification_read(db: Session, notification_id, user_id):
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if notification is None:
        return None
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification
