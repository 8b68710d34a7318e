# portal_notifications/clients/notification_store.py

import logging
from typing import List, Protocol

import httpx

from portal_notifications.core.config import settings
from portal_notifications.schemas.notification import Notification

logger = logging.getLogger(__name__)


class NotificationStore(Protocol):
    """Удаленное хранилище уведомлений, с которым синхронизируется колокольчик."""

    async def list_notifications(self, user_id: str) -> List[Notification]: ...

    async def get_unread_count(self, user_id: str) -> int: ...

    async def mark_as_read(self, notification_id: str) -> None: ...

    async def mark_all_as_read(self, user_id: str) -> None: ...


class NotificationStoreClient:
    """
    Асинхронный клиент HTTP API хранилища уведомлений.
    Ошибки сети и HTTP-ошибки (4xx/5xx) логируются и пробрасываются дальше:
    решение, что с ними делать, принимает вызывающая сторона.
    """
    def __init__(
        self,
        base_url: str,
        fetch_limit: int = 50,
        timeout: float = 20.0,
        read_timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = f"{base_url.rstrip('/')}/api/v1"
        self.fetch_limit = fetch_limit
        timeouts = httpx.Timeout(timeout, read=read_timeout)
        self.async_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeouts,
            transport=transport,
        )

    async def get(self, endpoint: str, params: dict = None) -> httpx.Response:
        """
        Выполняет GET-запрос. В случае успеха возвращает объект Response.
        В случае HTTP-ошибки (4xx/5xx) выбрасывает исключение.
        """
        try:
            response = await self.async_client.get(endpoint, params=params)
            response.raise_for_status()
            return response
        except httpx.RequestError as e:
            logger.error(f"Network error during GET request to {e.request.url!r}.", exc_info=True)
            raise
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error during GET request to {e.request.url!r}: {e.response.text}", exc_info=True)
            raise

    async def patch(self, endpoint: str, json: dict) -> httpx.Response:
        """
        Выполняет PATCH-запрос. Хранилище отвечает 204 без тела.
        В случае HTTP-ошибки (4xx/5xx) выбрасывает исключение.
        """
        try:
            response = await self.async_client.patch(endpoint, json=json)
            response.raise_for_status()
            return response
        except httpx.RequestError as e:
            logger.error(f"Network error during PATCH request to {e.request.url!r}.", exc_info=True)
            raise
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error during PATCH request to {e.request.url!r}: {e.response.text}", exc_info=True)
            raise

    # --- Операции хранилища ---

    async def list_notifications(self, user_id: str) -> List[Notification]:
        response = await self.get(f"users/{user_id}/notifications", params={"limit": self.fetch_limit})
        return [Notification.model_validate(item) for item in response.json()]

    async def get_unread_count(self, user_id: str) -> int:
        response = await self.get(f"users/{user_id}/notifications/unread-count")
        return int(response.json().get("unread_count", 0))

    async def mark_as_read(self, notification_id: str) -> None:
        await self.patch(f"notifications/{notification_id}", json={"is_read": True})

    async def mark_all_as_read(self, user_id: str) -> None:
        await self.patch(f"users/{user_id}/notifications", json={"is_read": True})

    async def aclose(self):
        await self.async_client.aclose()


def build_store_client(transport: httpx.AsyncBaseTransport | None = None) -> NotificationStoreClient:
    """Собирает клиент из настроек приложения."""
    return NotificationStoreClient(
        base_url=settings.NOTIFICATION_API_URL,
        fetch_limit=settings.NOTIFICATION_FETCH_LIMIT,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        read_timeout=settings.HTTP_READ_TIMEOUT_SECONDS,
        transport=transport,
    )
