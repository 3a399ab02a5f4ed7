# push_worker/infra/table_client.py
import json
import os
from typing import List, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.data.tables import TableServiceClient, UpdateMode

from push_worker.models.notification import StoredNotification

TABLE_NAME = os.getenv("TABLE_NAME", "notifications")
CONN_STR = os.getenv("AZURE_STORAGE_CONNECTION_STRING")
PARTITION_KEY = "notifications"


def get_table_client(conn_str: Optional[str] = None, table_name: str = TABLE_NAME):
    conn_str = conn_str or CONN_STR
    if not conn_str:
        raise RuntimeError("AZURE_STORAGE_CONNECTION_STRING no está configurada en .env")

    service = TableServiceClient.from_connection_string(conn_str=conn_str)
    return service.get_table_client(table_name=table_name)


def to_entity(notification: StoredNotification) -> dict:
    # Table Storage sólo guarda tipos simples: options va como JSON
    return {
        "PartitionKey": PARTITION_KEY,
        "RowKey": notification.id,
        "title": notification.title,
        "options": json.dumps(notification.options, ensure_ascii=False, default=str),
        "createdAt": notification.createdAt,
        "closed": notification.closed,
    }


def from_entity(entity: dict) -> StoredNotification:
    options = entity.get("options") or "{}"
    return StoredNotification(
        id=entity["RowKey"],
        title=entity.get("title", ""),
        options=json.loads(options) if isinstance(options, str) else options,
        createdAt=entity.get("createdAt", ""),
        closed=bool(entity.get("closed", False)),
    )


class TableNotificationStore:
    """
    Notificaciones mostradas, en Azure Table Storage.
    El cliente se crea en cada operación (como get_table_client).
    """
    def __init__(self, conn_str: Optional[str] = None, table_name: str = TABLE_NAME):
        self.conn_str = conn_str
        self.table_name = table_name

    def _client(self):
        return get_table_client(self.conn_str, self.table_name)

    def insert(self, notification: StoredNotification):
        self._client().create_entity(entity=to_entity(notification))

    def get(self, notification_id: str) -> Optional[StoredNotification]:
        try:
            entity = self._client().get_entity(partition_key=PARTITION_KEY, row_key=notification_id)
        except ResourceNotFoundError:
            return None
        return from_entity(entity)

    def list_open(self, top: int = 50) -> List[StoredNotification]:
        entities = self._client().query_entities(
            query_filter=f"PartitionKey eq '{PARTITION_KEY}' and closed eq false"
        )
        return [from_entity(e) for e in list(entities)[:top]]

    def mark_closed(self, notification_id: str):
        """
        Marca la notificación como cerrada.
        OJO: MERGE necesita PartitionKey y RowKey en el dict.
        """
        self._client().update_entity(
            entity={"PartitionKey": PARTITION_KEY, "RowKey": notification_id, "closed": True},
            mode=UpdateMode.MERGE,
        )
