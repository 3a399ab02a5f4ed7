# push_worker/services/payload_normalizer.py
"""
Normaliza cualquier payload de push a la forma canónica {title, options}.

Los gateways reenvían payloads con formas distintas:
  - envuelto:   {"notification": {"title", "body", "url", ...}}
  - plano:      {"title", "body", "url", "data": {"url"}}
  - estilo APNs: {"aps": {"alert": {"title", "body"} | "texto"}}

Cada forma es un par (predicado, extractor) en SHAPES; gana la primera
que coincide. Para soportar una forma nueva basta con agregar un par.

normalize() es total: nunca lanza, para cualquier entrada.
"""
import json
import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

from push_worker.config import PushSettings
from push_worker.models.notification import NotificationDescriptor, NotificationOptions

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New notification"
MAX_FALLBACK_BODY = 200

_NO_RAW = object()

Predicate = Callable[[Any], bool]
Extractor = Callable[[Any, PushSettings], NotificationDescriptor]


def text_value(value: Any) -> Optional[str]:
    """Texto no vacío de un campo del payload (números como str), o None."""
    # solo texto no vacío cuenta como valor (bool no es número aquí)
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)) and value:
        return str(value)
    return None


def _first(*values: Any) -> Optional[str]:
    for value in values:
        text = text_value(value)
        if text:
            return text
    return None


def _mapping(value: Any) -> Optional[Mapping]:
    return value if isinstance(value, Mapping) else None


def _is_absent(raw: Any) -> bool:
    # {} y [] son un payload (vacío), no ausencia de payload
    return not raw and not isinstance(raw, (Mapping, list, tuple))


def _descriptor(
    title: Optional[str],
    body: Optional[str],
    url: str,
    raw: Any = _NO_RAW,
    icon: Optional[str] = None,
    badge: Optional[str] = None,
) -> NotificationDescriptor:
    data = {"url": url}
    if raw is not _NO_RAW:
        data["raw"] = raw
    options = NotificationOptions(body=body or "", icon=icon, badge=badge, data=data)
    return NotificationDescriptor(title=title or DEFAULT_TITLE, options=options)


def _serialize(raw: Any) -> str:
    try:
        return json.dumps(raw, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError, RecursionError):
        pass
    try:
        return str(raw)
    except Exception:
        logger.debug("Payload no convertible a texto (%s)", type(raw).__name__)
        return type(raw).__name__


# ---------- formas ----------

def _is_wrapped(raw: Any) -> bool:
    return _mapping(raw) is not None and _mapping(raw.get("notification")) is not None


def _extract_wrapped(raw: Mapping, settings: PushSettings) -> NotificationDescriptor:
    n = raw["notification"]
    return _descriptor(
        title=_first(n.get("title"), n.get("heading")),
        body=_first(n.get("body"), n.get("message")),
        url=_first(n.get("url"), raw.get("url")) or settings.fallback_url,
        raw=raw,
        icon=text_value(n.get("icon")),
        badge=text_value(n.get("badge")),
    )


def _is_flat(raw: Any) -> bool:
    return _mapping(raw) is not None and _first(raw.get("title"), raw.get("body")) is not None


def _extract_flat(raw: Mapping, settings: PushSettings) -> NotificationDescriptor:
    nested = _mapping(raw.get("data")) or {}
    return _descriptor(
        title=text_value(raw.get("title")),
        body=text_value(raw.get("body")),
        url=_first(raw.get("url"), nested.get("url")) or settings.fallback_url,
        raw=raw,
        icon=text_value(raw.get("icon")),
        badge=text_value(raw.get("badge")),
    )


def _alert(raw: Any) -> Any:
    aps = _mapping(raw.get("aps")) if _mapping(raw) is not None else None
    if aps is None:
        return None
    alert = aps.get("alert")
    if _mapping(alert) is not None or text_value(alert):
        return alert
    return None


def _is_alert(raw: Any) -> bool:
    return _alert(raw) is not None


def _extract_alert(raw: Mapping, settings: PushSettings) -> NotificationDescriptor:
    alert = _alert(raw)
    if isinstance(alert, Mapping):
        title, body = text_value(alert.get("title")), text_value(alert.get("body"))
    else:
        # alerta como string => es el body
        title, body = None, text_value(alert)
    return _descriptor(
        title=title,
        body=body,
        url=text_value(raw.get("url")) or settings.fallback_url,
        raw=raw,
    )


def _extract_unknown(raw: Any, settings: PushSettings) -> NotificationDescriptor:
    top = _mapping(raw) or {}
    return _descriptor(
        title=None,
        body=_serialize(raw)[:MAX_FALLBACK_BODY],
        url=text_value(top.get("url")) or settings.fallback_url,
        raw=raw,
    )


# orden fijo de prioridad; el primero que coincide gana
SHAPES: List[Tuple[str, Predicate, Extractor]] = [
    ("notification", _is_wrapped, _extract_wrapped),
    ("flat", _is_flat, _extract_flat),
    ("aps", _is_alert, _extract_alert),
]


def normalize(raw: Any, settings: Optional[PushSettings] = None) -> NotificationDescriptor:
    settings = settings or PushSettings()

    if _is_absent(raw):
        # push sin payload: igual avisamos que pasó algo
        return _descriptor(
            title=settings.no_payload_title,
            body=settings.no_payload_body,
            url=settings.fallback_url,
        )

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError):
            return _descriptor(title=None, body=raw, url=settings.fallback_url)

    try:
        for _, predicate, extractor in SHAPES:
            if predicate(raw):
                return extractor(raw, settings)
        return _extract_unknown(raw, settings)
    except Exception:
        logger.exception("No se pudo normalizar el payload; se usa el fallback")
        return _descriptor(
            title=None,
            body=_serialize(raw)[:MAX_FALLBACK_BODY],
            url=settings.fallback_url,
        )
