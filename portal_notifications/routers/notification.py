# portal_notifications/routers/notification.py

from typing import List
from fastapi import APIRouter, Depends, Response, Query
from sqlalchemy.orm import Session

from portal_notifications.dependencies import get_db
from portal_notifications.schemas.notification import Notification, NotificationReadUpdate, UnreadCount
from portal_notifications.services import notification_api as notification_service_api

router = APIRouter()

@router.get("/users/{user_id}/notifications", response_model=List[Notification])
def get_user_notifications(
    user_id: str,
    unread_only: bool = Query(False, description="Вернуть только непрочитанные уведомления"),
    limit: int = Query(50, ge=1, le=100, description="Максимум уведомлений в ответе"),
    db: Session = Depends(get_db)
):
    """
    Возвращает последние уведомления пользователя, новые первыми.
    Используйте ?unread_only=true для получения только новых.
    """
    return notification_service_api.get_user_notifications(db, user_id, limit, unread_only)

@router.get("/users/{user_id}/notifications/unread-count", response_model=UnreadCount)
def get_unread_count(user_id: str, db: Session = Depends(get_db)):
    """Считает непрочитанные уведомления пользователя."""
    return notification_service_api.get_unread_count(db, user_id)

@router.patch("/notifications/{notification_id}", status_code=204)
def read_notification(
    notification_id: str,
    payload: NotificationReadUpdate,
    db: Session = Depends(get_db)
):
    """Помечает одно уведомление как прочитанное."""
    notification_service_api.mark_as_read(db, notification_id)
    return Response(status_code=204)

@router.patch("/users/{user_id}/notifications", status_code=204)
def read_all_notifications(
    user_id: str,
    payload: NotificationReadUpdate,
    db: Session = Depends(get_db)
):
    """Помечает ВСЕ уведомления пользователя как прочитанные."""
    notification_service_api.mark_all_as_read(db, user_id)
    return Response(status_code=204)
