# push_worker/services/notification_center.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from push_worker.infra.table_client import TableNotificationStore
from push_worker.models.client_message import NOTIFICATION
from push_worker.models.notification import StoredNotification
from push_worker.services.client_views import ClientViewManager, client_views

logger = logging.getLogger(__name__)


class RenderedNotification:
    """Notificación ya mostrada; close() la saca de la bandeja."""

    def __init__(self, stored: StoredNotification, center: "NotificationCenter"):
        self.id = stored.id
        self.title = stored.title
        self.data = stored.data
        self._center = center

    async def close(self) -> None:
        self._center.store.mark_closed(self.id)


class NotificationCenter:
    """
    "Mostrar una notificación" del lado servidor:
      1. se persiste (queda en la bandeja hasta click o cierre)
      2. se envía a todas las vistas abiertas
    """
    def __init__(self, store, views: ClientViewManager):
        self.store = store
        self.views = views

    async def show_notification(self, title: str, options: Dict[str, Any]) -> StoredNotification:
        notification = StoredNotification(
            id=str(uuid.uuid4()),
            title=title,
            options=options,
            createdAt=datetime.now(timezone.utc).isoformat(),
        )
        self.store.insert(notification)
        logger.info("Notificación mostrada", extra={"notification_id": notification.id})

        await self.views.broadcast({
            "type": NOTIFICATION,
            "id": notification.id,
            "title": notification.title,
            "options": notification.options,
        })
        return notification

    def get(self, notification_id: str) -> Optional[RenderedNotification]:
        stored = self.store.get(notification_id)
        if stored is None or stored.closed:
            return None
        return RenderedNotification(stored, self)

    def list_open(self, top: int = 50) -> List[StoredNotification]:
        return self.store.list_open(top=top)


# instancia global
notification_center = NotificationCenter(TableNotificationStore(), client_views)
