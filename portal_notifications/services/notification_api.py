# portal_notifications/services/notification_api.py
import logging
from typing import List
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from portal_notifications.crud import notification as crud_notification
from portal_notifications.schemas.notification import Notification, UnreadCount

logger = logging.getLogger(__name__)

def get_user_notifications(db: Session, user_id: str, limit: int, unread_only: bool) -> List[Notification]:
    """Собирает список уведомлений пользователя для колокольчика."""
    notifications = crud_notification.get_notifications(
        db, user_id=user_id, limit=limit, unread_only=unread_only
    )
    return [Notification.model_validate(n) for n in notifications]

def get_unread_count(db: Session, user_id: str) -> UnreadCount:
    count = crud_notification.count_notifications(db, user_id=user_id, unread_only=True)
    return UnreadCount(unread_count=count)

def mark_as_read(db: Session, notification_id: str):
    if not crud_notification.mark_notification_as_read(db, notification_id=notification_id):
        logger.warning(f"Attempt to mark unknown notification {notification_id} as read.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found.")

def mark_all_as_read(db: Session, user_id: str):
    updated = crud_notification.mark_all_notifications_as_read(db, user_id=user_id)
    logger.info(f"Marked {updated} notifications as read for user {user_id}.")
