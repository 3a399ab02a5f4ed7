# push_worker/services/push_dispatcher.py
import json
import logging
import time
from typing import Any, Mapping, Optional, Union

from push_worker.config import PushSettings, get_settings
from push_worker.models.client_message import (
    SHOW_TEST_NOTIFICATION,
    NavigateMessage,
    ResubscribeMessage,
    ShowTestNotification,
)
from push_worker.services.client_views import client_views
from push_worker.services.host import ClientRegistry, DisplayedNotification, NotificationRenderer
from push_worker.services.notification_center import notification_center
from push_worker.services.payload_normalizer import normalize, text_value

logger = logging.getLogger(__name__)

TEST_TITLE = "Test notification"
TEST_BODY = "This is a test."


def decode_push_data(data: Union[bytes, bytearray, str, None]) -> Any:
    """
    Decodifica el payload tal como llega del transporte:
      1. JSON
      2. si no, texto UTF-8 (y si ese texto es JSON, parseado)
      3. si tampoco, None
    """
    if not data:
        return None
    try:
        return json.loads(data)
    except (ValueError, TypeError, RecursionError):
        pass

    try:
        text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else str(data)
    except UnicodeDecodeError:
        return None

    try:
        return json.loads(text) if text else text
    except (ValueError, RecursionError):
        return text


class PushDispatcher:
    """
    Maneja los eventos del ciclo de vida de un push:
    llegada, click, cierre, suscripción inválida y mensajes de las vistas.

    Ningún handler lanza excepciones: se loguean y se absorben,
    para que el transporte siempre dé el evento por atendido.
    """
    def __init__(
        self,
        renderer: NotificationRenderer,
        clients: ClientRegistry,
        settings: Optional[PushSettings] = None,
    ):
        self.renderer = renderer
        self.clients = clients
        self.settings = settings or PushSettings()

    async def handle_push(self, data: Union[bytes, bytearray, str, None]) -> None:
        try:
            raw = decode_push_data(data)
            descriptor = normalize(raw, self.settings)

            options = descriptor.options
            options.icon = options.icon or self.settings.default_icon_path
            options.badge = options.badge or self.settings.default_badge_path
            # hora de render, no de envío
            options.timestamp = int(time.time() * 1000)

            await self.renderer.show_notification(descriptor.title, options.as_dict())
        except Exception:
            logger.exception("showNotification falló para el push entrante")

    async def handle_notification_click(self, notification: DisplayedNotification) -> str:
        """
        Cierra la notificación y lleva al usuario a data.url:
        si hay una vista abierta la trae al frente y la hace navegar,
        si no, abre una nueva. Devuelve la URL resuelta.
        """
        try:
            await notification.close()
        except Exception:
            logger.exception("No se pudo cerrar la notificación")

        data = getattr(notification, "data", None)
        data = data if isinstance(data, Mapping) else {}
        url = text_value(data.get("url")) or self.settings.fallback_url

        try:
            views = await self.clients.match_all(include_uncontrolled=True)
            if views:
                view = views[0]
                await view.focus()
                await view.post_message(NavigateMessage(url=url).model_dump())
            else:
                await self.clients.open_window(url)
        except Exception:
            logger.exception("notificationclick falló", extra={"url": url})
        return url

    async def handle_notification_close(self, notification: DisplayedNotification) -> None:
        # punto de extensión (analytics, limpieza)
        logger.debug(
            "Notificación cerrada por el usuario",
            extra={"notification_id": getattr(notification, "id", None)},
        )

    async def handle_subscription_change(self) -> None:
        """
        La suscripción expiró o fue invalidada. No se re-suscribe acá:
        se pide a cada vista abierta que lo haga (necesita permisos del usuario).
        """
        try:
            views = await self.clients.match_all(include_uncontrolled=True)
        except Exception:
            logger.exception("pushsubscriptionchange: no se pudieron listar las vistas")
            return

        message = ResubscribeMessage().model_dump()
        for view in views:
            try:
                await view.post_message(message)
            except Exception:
                logger.exception("pushsubscriptionchange: falló el aviso a una vista")

    async def handle_client_message(self, message: Any) -> None:
        data = message if isinstance(message, Mapping) else {}
        if data.get("type") != SHOW_TEST_NOTIFICATION:
            logger.debug("Mensaje de vista ignorado", extra={"message_type": data.get("type")})
            return

        try:
            request = ShowTestNotification.model_validate(data)
            title = request.title or TEST_TITLE
            options = request.options if request.options is not None else {"body": request.body or TEST_BODY}
            await self.renderer.show_notification(title, options)
        except Exception:
            logger.exception("No se pudo mostrar la notificación de prueba")


# instancia global
dispatcher = PushDispatcher(notification_center, client_views, get_settings())
