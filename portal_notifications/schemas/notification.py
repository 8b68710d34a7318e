# portal_notifications/schemas/notification.py
from datetime import datetime
from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator


class NotificationType(str, Enum):
    """
    Закрытый список типов уведомлений.
    Тип влияет только на отображение (иконка, цвет), но не на поведение.
    """
    ASSIGNMENT = "assignment"
    TEST = "test"
    SUBMISSION = "submission"
    GRADE = "grade"
    COURSE_MATERIAL = "course_material"
    TEST_COMPLETION = "test_completion"
    OTHER = "other"


class Notification(BaseModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    related_id: str | None = None
    is_read: bool = False
    created_at: datetime

    @field_validator("type", mode="before")
    @classmethod
    def coerce_unknown_type(cls, v):
        # Старые записи приходят с типом 'general', а новые типы могут появиться раньше клиента
        if isinstance(v, NotificationType):
            return v
        try:
            return NotificationType(v)
        except ValueError:
            return NotificationType.OTHER

    class Config:
        from_attributes = True


class NotificationReadUpdate(BaseModel):
    """Тело PATCH-запроса. Флаг прочтения можно только установить, но не снять."""
    is_read: Literal[True]


class UnreadCount(BaseModel):
    unread_count: int


class NotificationState(BaseModel):
    """Снимок состояния колокольчика для UI."""
    notifications: List[Notification] = Field(default_factory=list)
    unread_count: int = 0
    is_loading: bool = False
    last_synced_at: datetime | None = None


# --- Доменные события, порождающие уведомления ---

class AssignmentPostedEvent(BaseModel):
    assignment_id: str
    assignment_title: str
    subject_name: str


class TestPublishedEvent(BaseModel):
    test_id: str
    test_title: str
    subject_name: str


class AssignmentSubmittedEvent(BaseModel):
    assignment_id: str
    assignment_title: str
    student_name: str


class AssignmentGradedEvent(BaseModel):
    student_id: str
    assignment_title: str
    grade: int = Field(ge=0, le=100)


class CourseMaterialUploadedEvent(BaseModel):
    material_id: str
    material_title: str
    subject_name: str


class TestCompletedEvent(BaseModel):
    test_id: str
    test_title: str
    student_name: str
    score: int = Field(ge=0)
    total_questions: int = Field(ge=0)


class EventFanOutResult(BaseModel):
    created: int
