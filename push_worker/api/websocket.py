# push_worker/api/websocket.py
import json
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from push_worker.models.client_message import NOTIFICATION_CLICK, NOTIFICATION_CLOSE, NotificationAction
from push_worker.security.jwt_utils import decode_token
from push_worker.services.client_views import client_views
from push_worker.services.notification_center import notification_center
from push_worker.services.push_dispatcher import dispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


async def _handle_view_message(message):
    kind = message.get("type") if isinstance(message, dict) else None
    if kind not in (NOTIFICATION_CLICK, NOTIFICATION_CLOSE):
        await dispatcher.handle_client_message(message)
        return

    action = NotificationAction.model_validate(message)
    notification = notification_center.get(action.id)
    if notification is None:
        logger.debug("Notificación desconocida o ya cerrada", extra={"notification_id": action.id})
        return

    if action.type == NOTIFICATION_CLICK:
        await dispatcher.handle_notification_click(notification)
    else:
        await notification.close()
        await dispatcher.handle_notification_close(notification)


@router.websocket("/ws/notifications")
async def websocket_notifications(
    websocket: WebSocket,
    token: str = Query(...),
    url: Optional[str] = Query(default=None),
):
    """
    Canal de una vista de la app (tab/ventana).
    El frontend se conecta con:
      ws://localhost:8001/ws/notifications?token=JWT_AQUI&url=/ruta/actual
    """
    try:
        decode_token(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    view = await client_views.connect(websocket, url=url)

    try:
        while True:
            text = await websocket.receive_text()
            try:
                message = json.loads(text)
            except ValueError:
                logger.debug("Mensaje de vista no es JSON", extra={"view_id": view.id})
                continue
            try:
                await _handle_view_message(message)
            except Exception:
                logger.exception("Error procesando mensaje de la vista", extra={"view_id": view.id})
    except WebSocketDisconnect:
        client_views.disconnect(view)
