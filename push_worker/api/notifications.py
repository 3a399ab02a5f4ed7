# push_worker/api/notifications.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from push_worker.infra.servicebus_consumer import consumer_status
from push_worker.models.client_message import SHOW_TEST_NOTIFICATION
from push_worker.security.jwt_utils import get_current_user
from push_worker.services.notification_center import notification_center
from push_worker.services.push_dispatcher import dispatcher

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(get_current_user)],
)


def _get_or_404(notification_id: str):
    notification = notification_center.get(notification_id)
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification


@router.get("")
async def list_open_notifications(top: int = 50):
    """
    Notificaciones mostradas que todavía no se cerraron ni clickearon.
    """
    return [n.model_dump() for n in notification_center.list_open(top=top)]


@router.post("/{notification_id}/click")
async def click_notification(notification_id: str):
    """
    Click en una notificación: se cierra y se navega a su url
    (en una vista abierta, o en la próxima que se conecte).
    Devuelve la url para que el llamador pueda abrirla.
    """
    notification = _get_or_404(notification_id)
    url = await dispatcher.handle_notification_click(notification)
    return {"ok": True, "url": url}


@router.post("/{notification_id}/close")
async def close_notification(notification_id: str):
    notification = _get_or_404(notification_id)
    await notification.close()
    await dispatcher.handle_notification_close(notification)
    return {"ok": True}


# =========================
# DEV-ONLY: /notifications/test
# Muestra una notificación sin pasar por el normalizador.
# =========================

class TestNotificationIn(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    options: Optional[Dict[str, Any]] = None


@router.post("/test")
async def show_test_notification(body: TestNotificationIn):
    msg = {"type": SHOW_TEST_NOTIFICATION, **body.model_dump(exclude_none=True)}
    await dispatcher.handle_client_message(msg)
    return {"ok": True}


# =========================
# Diagnóstico del consumer de Service Bus
# =========================
@router.get("/debug/consumer-status")
async def debug_consumer_status():
    """
    - startedAt: cuándo arrancó
    - lastMessageAt: último push procesado
    - lastError: último error de conexión (si hubo)
    - queue: nombre de la cola
    - hasConnectionString: si hay conn string configurado
    """
    return consumer_status()
