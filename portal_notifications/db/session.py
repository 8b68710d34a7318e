# portal_notifications/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from portal_notifications.core.config import settings

# SQLite нужен check_same_thread=False: FastAPI выполняет sync-эндпоинты в пуле потоков
connect_args = {"check_same_thread": False} if settings.IS_SQLITE else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
