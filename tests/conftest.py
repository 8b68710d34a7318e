# tests/conftest.py
import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from portal_notifications.db.session import Base
from portal_notifications.models import notification, profile # Импортируем все модели для создания таблиц
from portal_notifications.models.notification import Notification
from portal_notifications.crud import profile as crud_profile
from portal_notifications.dependencies import get_db
from portal_notifications.clients.notification_store import NotificationStoreClient
from portal_notifications.main import app

# Используем in-memory SQLite для тестов. StaticPool держит одно соединение,
# иначе каждый поток FastAPI увидел бы свою пустую базу.
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2025, 10, 20, 10, 0, tzinfo=timezone.utc)

@pytest.fixture(scope="function")
def db_session() -> Session:
    """
    Фикстура для создания чистой базы данных для каждого теста.
    """
    Base.metadata.create_all(bind=engine) # Создаем все таблицы
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine) # Очищаем все после теста

@pytest.fixture
def override_get_db(db_session):
    def _get_test_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    yield
    app.dependency_overrides.clear()

@pytest_asyncio.fixture
async def client(override_get_db) -> AsyncClient:
    """HTTP-клиент, который ходит прямо в приложение без сети."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

@pytest_asyncio.fixture
async def store_client(override_get_db) -> NotificationStoreClient:
    """Боевой клиент хранилища, подключенный к приложению через ASGI."""
    store = NotificationStoreClient(base_url="http://test", transport=ASGITransport(app=app))
    yield store
    await store.aclose()

@pytest.fixture
def test_student(db_session):
    return crud_profile.create_profile(db_session, role="student", full_name="Asha Student")

@pytest.fixture
def test_teacher(db_session):
    return crud_profile.create_profile(db_session, role="teacher", full_name="Ravi Teacher")

@pytest.fixture
def add_notification(db_session):
    """Фабрика уведомлений с управляемым временем создания и статусом."""
    def _add(user_id: str, minutes: int = 0, is_read: bool = False, type: str = "assignment", title: str = "Title"):
        db_notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=f"{title} message",
            is_read=is_read,
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        db_session.add(db_notification)
        db_session.commit()
        db_session.refresh(db_notification)
        return db_notification
    return _add
