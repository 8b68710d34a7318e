# portal_notifications/crud/profile.py
from typing import List
from sqlalchemy.orm import Session

from portal_notifications.models.profile import Profile

def create_profile(db: Session, role: str, full_name: str | None = None, profile_id: str | None = None) -> Profile:
    profile = Profile(role=role, full_name=full_name)
    if profile_id:
        profile.id = profile_id
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile

def get_profile_ids_by_role(db: Session, role: str) -> List[str]:
    """Возвращает ID всех профилей с указанной ролью."""
    rows = db.query(Profile.id).filter(Profile.role == role).all()
    return [profile_id for profile_id, in rows]
