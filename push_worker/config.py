# push_worker/config.py
import os
from functools import lru_cache

from pydantic import BaseModel


class PushSettings(BaseModel):
    """
    Valores fijos del worker de push. Se leen del entorno (.env),
    con los mismos defaults que usaba el service worker del navegador.
    """
    default_icon_path: str = "/icons/notify-icon.png"
    default_badge_path: str = "/badge-96x96.png"
    fallback_url: str = "/admin/dashboard"
    # texto cuando el push llega sin payload
    no_payload_title: str = "New Wi-Fi order"
    no_payload_body: str = "You have a new verified order"
    log_level: str = "INFO"


def settings_from_env() -> PushSettings:
    defaults = PushSettings()
    return PushSettings(
        default_icon_path=os.getenv("PUSH_DEFAULT_ICON_PATH", defaults.default_icon_path),
        default_badge_path=os.getenv("PUSH_DEFAULT_BADGE_PATH", defaults.default_badge_path),
        fallback_url=os.getenv("PUSH_FALLBACK_URL", defaults.fallback_url),
        no_payload_title=os.getenv("PUSH_NO_PAYLOAD_TITLE", defaults.no_payload_title),
        no_payload_body=os.getenv("PUSH_NO_PAYLOAD_BODY", defaults.no_payload_body),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
    )


@lru_cache
def get_settings() -> PushSettings:
    return settings_from_env()
