# run_bell.py
import argparse
import asyncio
import logging

from portal_notifications.clients.notification_store import build_store_client
from portal_notifications.core.logging_config import setup_logging
from portal_notifications.schemas.notification import NotificationState
from portal_notifications.services.notification_sync import NotificationSync
from portal_notifications.services.presentation import format_badge, get_notification_style

logger = logging.getLogger("run_bell")


def log_state(state: NotificationState):
    """Печатает в лог то, что показал бы колокольчик."""
    if state.is_loading:
        return
    logger.info(f"Bell badge: '{format_badge(state.unread_count)}' ({len(state.notifications)} cached)")
    for item in state.notifications[:5]:
        style = get_notification_style(item.type)
        marker = " " if item.is_read else "*"
        logger.info(f"  {marker} [{style.icon}/{style.color}] {item.title}: {item.message}")


async def main(user_id: str) -> None:
    """
    Запускает синхронизацию колокольчика для пользователя и держит ее,
    пока процесс не прервут.
    """
    store = build_store_client()
    try:
        async with NotificationSync(store) as sync:
            sync.add_listener(log_state)
            await sync.start(user_id)
            # Опрос идет в планировщике; основная корутина просто ждет
            await asyncio.Event().wait()
    finally:
        await store.aclose()
        logger.info("Store client closed.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Poll the notification store for one user and log the bell state.")
    parser.add_argument("user_id", help="ID профиля, чьи уведомления показываем")
    args = parser.parse_args()

    setup_logging()

    try:
        asyncio.run(main(args.user_id))
    except KeyboardInterrupt:
        logger.info("Bell stopped!")
