# push_worker/models/notification.py
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class NotificationOptions(BaseModel):
    body: str = ""
    icon: Optional[str] = None
    badge: Optional[str] = None
    timestamp: Optional[int] = None   # ms desde epoch, lo pone el dispatcher
    data: Dict[str, Any] = Field(default_factory=dict)   # url + raw

    def as_dict(self) -> Dict[str, Any]:
        # sin model_dump(exclude_none): raw debe llegar intacto
        out: Dict[str, Any] = {"body": self.body, "data": self.data}
        for key in ("icon", "badge", "timestamp"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


class NotificationDescriptor(BaseModel):
    """
    Forma canónica de una notificación: {title, options}.
    """
    title: str
    options: NotificationOptions

    @property
    def url(self) -> Optional[str]:
        return self.options.data.get("url")


class StoredNotification(BaseModel):
    id: str                # uuid4
    title: str
    options: Dict[str, Any]
    createdAt: str
    closed: bool = False

    @property
    def data(self) -> Dict[str, Any]:
        data = self.options.get("data")
        return data if isinstance(data, dict) else {}
