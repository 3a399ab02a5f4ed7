# push_worker/services/host.py
"""
Contratos con la "plataforma" que hospeda al dispatcher:
quién muestra notificaciones y quiénes son las vistas abiertas.
El dispatcher sólo conoce estos protocolos; se consultan en cada evento.
"""
from typing import Any, Dict, List, Optional, Protocol


class ClientView(Protocol):
    id: str
    url: Optional[str]

    async def focus(self) -> None: ...

    async def post_message(self, message: Dict[str, Any]) -> None: ...


class ClientRegistry(Protocol):
    async def match_all(self, include_uncontrolled: bool = False) -> List[ClientView]: ...

    async def open_window(self, url: str) -> None: ...


class NotificationRenderer(Protocol):
    async def show_notification(self, title: str, options: Dict[str, Any]) -> Any: ...


class DisplayedNotification(Protocol):
    id: str
    title: str
    data: Dict[str, Any]

    async def close(self) -> None: ...
