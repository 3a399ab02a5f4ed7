"""Tests del registro de vistas conectadas por WebSocket."""

from __future__ import annotations

import pytest

from push_worker.services.client_views import MAX_PENDING_URLS, ClientViewManager


class FakeWebSocket:
    def __init__(self, fail: bool = False) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self.fail = fail

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


@pytest.mark.asyncio
async def test_connect_registers_view() -> None:
    manager = ClientViewManager()
    ws = FakeWebSocket()

    view = await manager.connect(ws, url="/admin")

    assert ws.accepted is True
    assert view.url == "/admin"
    assert await manager.match_all(include_uncontrolled=True) == [view]


@pytest.mark.asyncio
async def test_focus_and_post_message_go_through_socket() -> None:
    manager = ClientViewManager()
    ws = FakeWebSocket()
    view = await manager.connect(ws)

    await view.focus()
    await view.post_message({"type": "NAVIGATE", "url": "/x"})

    assert ws.sent == [{"type": "FOCUS"}, {"type": "NAVIGATE", "url": "/x"}]


@pytest.mark.asyncio
async def test_open_window_is_delivered_to_next_view_only() -> None:
    manager = ClientViewManager()
    await manager.open_window("/orders/1")

    first, second = FakeWebSocket(), FakeWebSocket()
    await manager.connect(first)
    await manager.connect(second)

    assert first.sent == [{"type": "NAVIGATE", "url": "/orders/1"}]
    assert second.sent == []
    assert list(manager.pending_urls) == []


@pytest.mark.asyncio
async def test_broadcast_drops_dead_views() -> None:
    manager = ClientViewManager()
    alive, dead = FakeWebSocket(), FakeWebSocket(fail=True)
    await manager.connect(alive)
    await manager.connect(dead)

    await manager.broadcast({"type": "RESUBSCRIBE"})

    assert alive.sent == [{"type": "RESUBSCRIBE"}]
    assert len(manager.active_views) == 1


@pytest.mark.asyncio
async def test_disconnect_is_idempotent() -> None:
    manager = ClientViewManager()
    view = await manager.connect(FakeWebSocket())

    manager.disconnect(view)
    manager.disconnect(view)

    assert manager.active_views == {}


@pytest.mark.asyncio
async def test_pending_navigations_keep_only_latest_clicks() -> None:
    manager = ClientViewManager()
    for n in range(MAX_PENDING_URLS + 3):
        await manager.open_window(f"/orders/{n}")

    assert len(manager.pending_urls) == MAX_PENDING_URLS

    ws = FakeWebSocket()
    await manager.connect(ws)

    assert ws.sent == [{"type": "NAVIGATE", "url": "/orders/3"}]
