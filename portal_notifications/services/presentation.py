# portal_notifications/services/presentation.py
from typing import NamedTuple

from portal_notifications.schemas.notification import NotificationType


class NotificationStyle(NamedTuple):
    icon: str
    color: str


NOTIFICATION_STYLES = {
    NotificationType.ASSIGNMENT: NotificationStyle(icon="file-text", color="blue"),
    NotificationType.TEST: NotificationStyle(icon="book-open", color="green"),
    NotificationType.SUBMISSION: NotificationStyle(icon="message-square", color="orange"),
    NotificationType.GRADE: NotificationStyle(icon="award", color="yellow"),
    NotificationType.COURSE_MATERIAL: NotificationStyle(icon="file-text", color="purple"),
    NotificationType.TEST_COMPLETION: NotificationStyle(icon="check-circle", color="indigo"),
    NotificationType.OTHER: NotificationStyle(icon="bell", color="gray"),
}

MAX_BADGE_COUNT = 99


def get_notification_style(type: NotificationType | str) -> NotificationStyle:
    """Иконка и цвет для типа уведомления. Неизвестные типы рисуются как 'other'."""
    try:
        notification_type = NotificationType(type)
    except ValueError:
        notification_type = NotificationType.OTHER
    return NOTIFICATION_STYLES[notification_type]


def format_badge(unread_count: int) -> str:
    """Текст бейджа на колокольчике: пусто при нуле, '99+' при переполнении."""
    if unread_count <= 0:
        return ""
    if unread_count > MAX_BADGE_COUNT:
        return f"{MAX_BADGE_COUNT}+"
    return str(unread_count)
