# portal_notifications/models/profile.py
import uuid
from sqlalchemy import Column, String, DateTime, func

from portal_notifications.db.session import Base

class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String, nullable=True)
    # Роль: 'student', 'teacher', 'admin'. По ней рассылаются уведомления о событиях.
    role = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
