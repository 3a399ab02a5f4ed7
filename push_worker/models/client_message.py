# push_worker/models/client_message.py
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel

# mensajes servicio -> vistas
NAVIGATE = "NAVIGATE"
RESUBSCRIBE = "RESUBSCRIBE"
FOCUS = "FOCUS"
NOTIFICATION = "NOTIFICATION"

# mensajes vistas -> servicio
SHOW_TEST_NOTIFICATION = "SHOW_TEST_NOTIFICATION"
NOTIFICATION_CLICK = "NOTIFICATION_CLICK"
NOTIFICATION_CLOSE = "NOTIFICATION_CLOSE"


class NavigateMessage(BaseModel):
    type: Literal["NAVIGATE"] = NAVIGATE
    url: str


class ResubscribeMessage(BaseModel):
    type: Literal["RESUBSCRIBE"] = RESUBSCRIBE


class ShowTestNotification(BaseModel):
    type: Literal["SHOW_TEST_NOTIFICATION"] = SHOW_TEST_NOTIFICATION
    title: Optional[str] = None
    body: Optional[str] = None
    options: Optional[Dict[str, Any]] = None


class NotificationAction(BaseModel):
    """Click o cierre de una notificación desde una vista."""
    type: Literal["NOTIFICATION_CLICK", "NOTIFICATION_CLOSE"]
    id: str
