"""Tests de configuración por entorno y del mapeo a entidades de Table Storage."""

from __future__ import annotations

from push_worker.config import PushSettings, settings_from_env
from push_worker.infra.table_client import PARTITION_KEY, from_entity, to_entity
from push_worker.models.notification import StoredNotification


def test_settings_defaults() -> None:
    settings = PushSettings()

    assert settings.default_icon_path == "/icons/notify-icon.png"
    assert settings.default_badge_path == "/badge-96x96.png"
    assert settings.fallback_url == "/admin/dashboard"
    assert settings.no_payload_title == "New Wi-Fi order"


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("PUSH_FALLBACK_URL", "/home")
    monkeypatch.setenv("PUSH_DEFAULT_ICON_PATH", "/icon.png")
    monkeypatch.setenv("PUSH_NO_PAYLOAD_BODY", "Algo pasó")

    settings = settings_from_env()

    assert settings.fallback_url == "/home"
    assert settings.default_icon_path == "/icon.png"
    assert settings.no_payload_body == "Algo pasó"
    assert settings.default_badge_path == "/badge-96x96.png"


def test_entity_mapping_keeps_options() -> None:
    notification = StoredNotification(
        id="abc",
        title="T",
        options={"body": "B", "data": {"url": "/x", "raw": {"title": "T"}}},
        createdAt="2026-01-01T00:00:00+00:00",
    )

    entity = to_entity(notification)

    assert entity["PartitionKey"] == PARTITION_KEY
    assert entity["RowKey"] == "abc"
    assert isinstance(entity["options"], str)
    assert from_entity(entity) == notification
    assert from_entity(entity).data == {"url": "/x", "raw": {"title": "T"}}
