# portal_notifications/dependencies.py

from typing import Iterator

from sqlalchemy.orm import Session

from portal_notifications.db.session import SessionLocal

# --- Управление сессией БД ---
def get_db_session_instance() -> Session:
    """Создает и возвращает экземпляр сессии БД."""
    return SessionLocal()

def get_db() -> Iterator[Session]:
    """
    Основная зависимость FastAPI для получения сессии БД.
    Это генератор, который корректно работает с `Depends`.
    """
    db = get_db_session_instance()
    try:
        yield db
    finally:
        db.close()
