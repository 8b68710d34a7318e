# portal_notifications/core/config.py
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Хранилище уведомлений (бэкенд API)
    DATABASE_URL: str = "sqlite:///./portal_notifications.db"

    # Клиент колокольчика
    NOTIFICATION_API_URL: str = "http://localhost:8000"
    NOTIFICATION_POLL_INTERVAL_SECONDS: int = 30
    NOTIFICATION_FETCH_LIMIT: int = 50

    # Таймауты httpx
    HTTP_TIMEOUT_SECONDS: float = 20.0
    HTTP_READ_TIMEOUT_SECONDS: float = 60.0

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS_STR: str = Field(default="http://localhost:5173", alias="CORS_ORIGINS")

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(',') if origin.strip()]

    @property
    def IS_SQLITE(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
