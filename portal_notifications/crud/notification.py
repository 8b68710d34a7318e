# portal_notifications/crud/notification.py
from typing import Iterable, List
from sqlalchemy.orm import Session
from sqlalchemy import update

from portal_notifications.models.notification import Notification

def create_notification(
    db: Session,
    user_id: str,
    type: str,
    title: str,
    message: str,
    related_id: str | None = None,
) -> Notification:
    """Создает новое уведомление для пользователя."""
    db_notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        related_id=related_id,
    )
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification

def create_notifications_for_users(
    db: Session,
    user_ids: Iterable[str],
    type: str,
    title: str,
    message: str,
    related_id: str | None = None,
) -> int:
    """Создает одинаковое уведомление для списка пользователей одной транзакцией."""
    notifications = [
        Notification(user_id=user_id, type=type, title=title, message=message, related_id=related_id)
        for user_id in user_ids
    ]
    if not notifications:
        return 0
    db.add_all(notifications)
    db.commit()
    return len(notifications)

def get_notifications(
    db: Session,
    user_id: str,
    limit: int = 50,
    unread_only: bool = False
) -> List[Notification]:
    """Получает последние уведомления пользователя, новые первыми."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)
    return query.order_by(Notification.created_at.desc()).limit(limit).all()

def count_notifications(db: Session, user_id: str, unread_only: bool = False) -> int:
    """Считает уведомления с фильтром."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)
    return query.count()

def mark_notification_as_read(db: Session, notification_id: str) -> bool:
    """
    Помечает конкретное уведомление как прочитанное.
    Возвращает False, если уведомления с таким ID нет.
    """
    stmt = update(Notification).where(
        Notification.id == notification_id
    ).values(is_read=True)
    result = db.execute(stmt)
    db.commit()
    return result.rowcount > 0

def mark_all_notifications_as_read(db: Session, user_id: str) -> int:
    """Помечает все уведомления пользователя как прочитанные. Возвращает число обновленных."""
    stmt = update(Notification).where(
        Notification.user_id == user_id,
        Notification.is_read == False
    ).values(is_read=True)
    result = db.execute(stmt)
    db.commit()
    return result.rowcount
