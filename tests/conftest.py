"""Fixtures compartidas: store en memoria, vistas limpias y JWT de prueba."""

from __future__ import annotations

from collections import deque

import jwt
import pytest

from push_worker.models.notification import StoredNotification
from push_worker.security import jwt_utils
from push_worker.services.client_views import MAX_PENDING_URLS, client_views
from push_worker.services.notification_center import notification_center


class InMemoryNotificationStore:
    """Reemplazo de TableNotificationStore para tests."""

    def __init__(self) -> None:
        self.items: dict[str, StoredNotification] = {}

    def insert(self, notification: StoredNotification) -> None:
        self.items[notification.id] = notification

    def get(self, notification_id: str) -> StoredNotification | None:
        return self.items.get(notification_id)

    def list_open(self, top: int = 50) -> list[StoredNotification]:
        return [n for n in self.items.values() if not n.closed][:top]

    def mark_closed(self, notification_id: str) -> None:
        if notification_id in self.items:
            self.items[notification_id].closed = True


@pytest.fixture
def store(monkeypatch) -> InMemoryNotificationStore:
    memory = InMemoryNotificationStore()
    monkeypatch.setattr(notification_center, "store", memory)
    monkeypatch.setattr(client_views, "active_views", {})
    monkeypatch.setattr(client_views, "pending_urls", deque(maxlen=MAX_PENDING_URLS))
    return memory


@pytest.fixture
def token() -> str:
    return jwt.encode({"sub": "admin-1"}, jwt_utils.JWT_SECRET, algorithm=jwt_utils.JWT_ALG)


@pytest.fixture
def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
