"""Tests del consumer de Service Bus sin conexión real."""

from __future__ import annotations

import pytest

from push_worker.infra import servicebus_consumer


class FakeMessage:
    def __init__(self, *parts: bytes) -> None:
        self.body = iter(parts)


def test_message_body_joins_parts() -> None:
    assert servicebus_consumer.message_body(FakeMessage(b'{"title":', b'"T"}')) == b'{"title":"T"}'


@pytest.mark.asyncio
async def test_consumer_without_connection_string_returns(monkeypatch) -> None:
    monkeypatch.setattr(servicebus_consumer, "SB_CONN_STR", None)

    await servicebus_consumer.consume_push_events()

    assert servicebus_consumer.consumer_status()["hasConnectionString"] is False
