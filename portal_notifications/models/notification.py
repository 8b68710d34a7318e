# portal_notifications/models/notification.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import relationship

from portal_notifications.db.session import Base

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)

    # Тип уведомления: 'assignment', 'test', 'submission', 'grade', 'course_material', 'test_completion', 'other'
    type = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)

    # ID связанной сущности (задания, теста, материала)
    related_id = Column(String, nullable=True)

    is_read = Column(Boolean, default=False, nullable=False, server_default='false')
    # Время ставим на стороне Python: server_default=func.now() в SQLite дает точность до секунды
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    user = relationship("Profile")
