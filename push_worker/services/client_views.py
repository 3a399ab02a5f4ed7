# push_worker/services/client_views.py
import logging
import uuid
from collections import deque
from typing import Any, Dict, List, Optional

from fastapi import WebSocket

from push_worker.models.client_message import FOCUS, NavigateMessage

logger = logging.getLogger(__name__)

# sólo se guardan los últimos clicks sin vista abierta
MAX_PENDING_URLS = 5


class WebSocketClientView:
    """Una pestaña/ventana de la app conectada por WebSocket."""

    def __init__(self, websocket: WebSocket, url: Optional[str] = None):
        self.id = str(uuid.uuid4())
        self.websocket = websocket
        self.url = url

    async def focus(self) -> None:
        # el navegador decide; la vista recibe el pedido de pasar al frente
        await self.websocket.send_json({"type": FOCUS})

    async def post_message(self, message: Dict[str, Any]) -> None:
        await self.websocket.send_json(message)


class ClientViewManager:
    """
    Mantiene las vistas abiertas de la aplicación.
    view_id -> WebSocketClientView

    Todas las vistas conectadas por WebSocket las controla este servicio,
    así que match_all() devuelve siempre todas.
    """
    def __init__(self):
        self.active_views: Dict[str, WebSocketClientView] = {}
        # URLs que un click quiso abrir mientras no había vistas
        self.pending_urls: deque = deque(maxlen=MAX_PENDING_URLS)

    async def connect(self, websocket: WebSocket, url: Optional[str] = None) -> WebSocketClientView:
        await websocket.accept()
        view = WebSocketClientView(websocket, url=url)
        self.active_views[view.id] = view
        if self.pending_urls:
            # esta vista es la "ventana nueva" que pidió el click
            target = self.pending_urls.popleft()
            await view.post_message(NavigateMessage(url=target).model_dump())
        return view

    def disconnect(self, view: WebSocketClientView):
        self.active_views.pop(view.id, None)

    async def match_all(self, include_uncontrolled: bool = False) -> List[WebSocketClientView]:
        return list(self.active_views.values())

    async def open_window(self, url: str) -> None:
        logger.info("Sin vistas abiertas; navegación pendiente", extra={"url": url})
        self.pending_urls.append(url)

    async def broadcast(self, message: dict):
        """
        Envía un mensaje a TODAS las vistas (tabs distintas, dispositivos, etc.)
        y descarta las que ya no responden.
        """
        dead_views = []
        for view in list(self.active_views.values()):
            try:
                await view.post_message(message)
            except Exception:
                logger.warning("Vista sin respuesta; se descarta", extra={"view_id": view.id})
                dead_views.append(view)
        for view in dead_views:
            self.disconnect(view)


# instancia global
client_views = ClientViewManager()
