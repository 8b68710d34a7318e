# portal_notifications/main.py

import logging
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

# Конфигурация и ядро
from portal_notifications.core.config import settings as config
from portal_notifications.core.logging_config import setup_logging
from portal_notifications.db.session import Base, engine

# Модели должны быть импортированы до create_all
from portal_notifications.models import notification, profile  # noqa: F401

# Роутеры FastAPI
from portal_notifications.routers import notification as notification_router
from portal_notifications.routers.events import events_router

# --- Инициализация ---
logger = logging.getLogger(__name__)

# --- Обработчик критических ошибок ---
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Глобальный обработчик для всех необработанных исключений.
    Логирует ошибку и отдает клиенту обезличенный ответ.
    """
    logger.critical(f"Unhandled exception for request: {request.method} {request.url}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error."},
    )

# --- Lifespan Manager (запуск и остановка приложения) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Application lifespan startup...")

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables are ready.")

    yield

    logger.info("Application shutting down.")
    engine.dispose()

# --- Создание FastAPI приложения ---
app = FastAPI(
    title="Portal Notification Store",
    description="Notification store for the student/teacher portal header bell",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Регистрация обработчика исключений ---
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Подключение роутеров FastAPI ---
api_router = APIRouter(prefix="/api/v1")
api_router.include_router(notification_router.router, tags=["Notifications"])
app.include_router(api_router)

# Внутренние события портала (остаются вне публичного API)
app.include_router(events_router, prefix="/internal/events", tags=["Internal Events"])
