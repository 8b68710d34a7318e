# portal_notifications/services/notification_sync.py
"""
Локальный кэш уведомлений пользователя для колокольчика в шапке.

Кэш держит список уведомлений (новые первыми) и счетчик непрочитанных.
Свежесть обеспечивается опросом хранилища каждые N секунд (по умолчанию 30).
Отметки о прочтении применяются к кэшу сразу, до ответа хранилища, и не
откатываются при ошибке: следующий полный fetch_all перезапишет кэш
состоянием сервера. Хранилище - единственный источник истины.

Все ошибки хранилища логируются и поглощаются здесь, наружу (в UI) они
не пробрасываются.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from portal_notifications.clients.notification_store import NotificationStore
from portal_notifications.core.config import settings
from portal_notifications.schemas.notification import Notification, NotificationState

logger = logging.getLogger(__name__)

StateListener = Callable[[NotificationState], None]


def _created_at_key(notification: Notification) -> datetime:
    # Наивные метки времени (SQLite) считаем UTC, чтобы их можно было сравнивать с aware
    created_at = notification.created_at
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at


class NotificationSync:
    """
    Кэш уведомлений одного пользователя, синхронизируемый с хранилищем.

    Экземпляр создается владельцем UI и освобождается через stop()
    (или выход из `async with`). Планировщик можно передать снаружи;
    если его нет, экземпляр создает собственный AsyncIOScheduler и
    останавливает его в stop().
    """

    def __init__(
        self,
        store: NotificationStore,
        scheduler: AsyncIOScheduler | None = None,
        poll_interval_seconds: int | None = None,
    ):
        self.store = store
        if poll_interval_seconds is None:
            poll_interval_seconds = settings.NOTIFICATION_POLL_INTERVAL_SECONDS
        self.poll_interval_seconds = poll_interval_seconds
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._poll_job = None

        self.user_id: str | None = None
        self.notifications: List[Notification] = []
        self.unread_count: int = 0
        self.last_synced_at: datetime | None = None

        # Каждый stop()/start() увеличивает поколение; ответы старых поколений отбрасываются
        self._generation = 0
        self._fetches_in_flight = 0
        self._listeners: List[StateListener] = []

    # --- Состояние для UI ---

    @property
    def is_loading(self) -> bool:
        return self._fetches_in_flight > 0

    @property
    def is_running(self) -> bool:
        return self._poll_job is not None

    @property
    def state(self) -> NotificationState:
        return NotificationState(
            notifications=list(self.notifications),
            unread_count=self.unread_count,
            is_loading=self.is_loading,
            last_synced_at=self.last_synced_at,
        )

    def add_listener(self, listener: StateListener):
        """Подписывает UI на изменения состояния."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self):
        if not self._listeners:
            return
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.error("Notification state listener failed.", exc_info=True)

    # --- Жизненный цикл ---

    async def start(self, user_id: str | None):
        """
        Запускает синхронизацию для пользователя: сразу выполняет полный
        опрос и ставит повторный каждые poll_interval_seconds.
        Без user_id ничего не делает.
        """
        if not user_id:
            logger.warning("NotificationSync.start() called without a user id. Nothing to sync.")
            return

        # Повторный start() перезапускает опрос; чужой кэш не должен пережить смену пользователя
        self.stop()
        if self.user_id != user_id:
            self._reset_cache()
        self.user_id = user_id

        self._schedule(user_id)
        logger.info(f"Notification sync started for user {user_id} (every {self.poll_interval_seconds}s).")
        await self._poll(user_id)

    def stop(self):
        """
        Отменяет периодический опрос. Уже отправленные запросы не отменяются,
        но их ответы больше не попадут в кэш.
        """
        self._generation += 1

        if self._poll_job is not None:
            try:
                self._poll_job.remove()
            except JobLookupError:
                logger.debug("Polling job was already removed from the scheduler.")
            self._poll_job = None
            logger.info(f"Notification sync stopped for user {self.user_id}.")

        if self._owns_scheduler and self._scheduler is not None:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._scheduler = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.stop()

    def _schedule(self, user_id: str):
        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler()
        if self._owns_scheduler and not self._scheduler.running:
            self._scheduler.start()

        self._poll_job = self._scheduler.add_job(
            self._poll,
            'interval',
            seconds=self.poll_interval_seconds,
            args=[user_id],
            id=f"notification_sync:{user_id}:{id(self)}",
            replace_existing=True,
            coalesce=True,
        )

    async def _poll(self, user_id: str):
        # Сначала счетчик сервера, затем список: после цикла счетчик снова выводится из списка
        logger.debug(f"Polling notifications for user {user_id}...")
        generation = self._generation
        await self.fetch_unread_count(user_id)
        if generation != self._generation:
            logger.debug(f"Sync for user {user_id} was stopped mid-poll. Skipping list fetch.")
            return
        await self.fetch_all(user_id)

    async def refresh(self, user_id: str | None):
        """Ручное обновление по кнопке. Фазу таймера опроса не сдвигает."""
        if not user_id:
            return
        await self._poll(user_id)

    # --- Чтение из хранилища ---

    async def fetch_all(self, user_id: str | None) -> List[Notification]:
        """
        Заменяет весь кэш списком с сервера (новые первыми).
        При ошибке кэш остается прежним.
        """
        if not user_id:
            return list(self.notifications)
        if self.is_running and user_id != self.user_id:
            logger.warning(
                f"Ignoring fetch for user {user_id}: sync is running for user {self.user_id}."
            )
            return list(self.notifications)

        generation = self._generation
        self._fetches_in_flight += 1
        self._emit()
        try:
            fetched = await self.store.list_notifications(user_id)
        except Exception:
            logger.error(f"Failed to fetch notifications for user {user_id}. Keeping cached list.", exc_info=True)
            return list(self.notifications)
        finally:
            self._fetches_in_flight -= 1
            self._emit()

        if generation != self._generation:
            logger.debug(f"Discarding notifications response for user {user_id} from a stopped sync.")
            return list(self.notifications)

        self._replace_cache(user_id, fetched)
        return list(self.notifications)

    async def fetch_unread_count(self, user_id: str | None) -> int:
        """
        Запрашивает счетчик непрочитанных у сервера. До следующего fetch_all
        он может расходиться со счетчиком, выведенным из списка.
        """
        if not user_id:
            return self.unread_count

        generation = self._generation
        try:
            count = await self.store.get_unread_count(user_id)
        except Exception:
            logger.error(f"Failed to fetch unread count for user {user_id}.", exc_info=True)
            return self.unread_count

        if generation != self._generation:
            return count
        # Счетчик чужого пользователя не должен попасть в кэш; до первого fetch кэш еще ничей
        if self.user_id is not None and user_id != self.user_id:
            return count

        self.user_id = user_id
        self.unread_count = max(0, count)
        self._emit()
        return count

    # --- Отметки о прочтении ---

    async def mark_as_read(self, notification_id: str):
        """
        Сразу помечает уведомление прочитанным в кэше (счетчик уменьшается
        не больше чем на 1 и не уходит ниже нуля), затем отправляет PATCH.
        """
        flipped = False
        updated = []
        for notification in self.notifications:
            if notification.id == notification_id and not notification.is_read:
                notification = notification.model_copy(update={"is_read": True})
                flipped = True
            updated.append(notification)

        if flipped:
            self.notifications = updated
            self.unread_count = max(0, self.unread_count - 1)
            self._emit()

        try:
            await self.store.mark_as_read(notification_id)
        except Exception:
            if flipped:
                logger.warning(
                    f"Read state diverged: notification {notification_id} is read locally "
                    f"but the store update failed. Next sync will reconcile.",
                    exc_info=True,
                )
            else:
                logger.error(f"Failed to mark notification {notification_id} as read.", exc_info=True)

    async def mark_all_as_read(self, user_id: str | None):
        """
        Сразу помечает весь кэш прочитанным и обнуляет счетчик,
        затем отправляет один массовый PATCH для пользователя.
        """
        if not user_id:
            return

        if user_id == self.user_id:
            self.notifications = [
                n if n.is_read else n.model_copy(update={"is_read": True})
                for n in self.notifications
            ]
            self.unread_count = 0
            self._emit()

        try:
            await self.store.mark_all_as_read(user_id)
        except Exception:
            logger.warning(
                f"Read state diverged: all notifications of user {user_id} are read locally "
                f"but the bulk store update failed. Next sync will reconcile.",
                exc_info=True,
            )

    # --- Внутреннее ---

    def _reset_cache(self):
        self.notifications = []
        self.unread_count = 0
        self.last_synced_at = None

    def _replace_cache(self, user_id: str, fetched: List[Notification]):
        seen_ids = set()
        unique = []
        for notification in fetched:
            if notification.user_id != user_id:
                logger.warning(
                    f"Store returned notification {notification.id} of user {notification.user_id} "
                    f"for user {user_id}. Dropping it."
                )
                continue
            if notification.id in seen_ids:
                continue
            seen_ids.add(notification.id)
            unique.append(notification)

        # sorted() стабилен и при reverse=True: одинаковые метки сохраняют порядок сервера
        self.notifications = sorted(unique, key=_created_at_key, reverse=True)
        self.unread_count = sum(1 for n in self.notifications if not n.is_read)
        self.user_id = user_id
        self.last_synced_at = datetime.now(timezone.utc)
        self._emit()
