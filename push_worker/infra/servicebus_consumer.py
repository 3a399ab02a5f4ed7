# push_worker/infra/servicebus_consumer.py
import asyncio
import logging
import os
from datetime import datetime, timezone

from azure.servicebus import TransportType
from azure.servicebus.aio import ServiceBusClient

from push_worker.services.push_dispatcher import dispatcher

logger = logging.getLogger(__name__)

# ====== env ======
SB_CONN_STR = os.getenv("AZURE_SERVICE_BUS_CONNECTION_STRING")
SB_QUEUE = os.getenv("AZURE_SERVICE_BUS_QUEUE_NAME", "push-queue")

_status = {
    "startedAt": None,
    "lastMessageAt": None,
    "lastError": None,
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def consumer_status() -> dict:
    """Estado del consumer para /notifications/debug/consumer-status."""
    return {
        **_status,
        "queue": SB_QUEUE,
        "hasConnectionString": bool(SB_CONN_STR),
    }


def message_body(msg) -> bytes:
    # el body de Service Bus llega en partes
    return b"".join(part for part in msg.body)


async def consume_push_events():
    """
    Consumer asíncrono de Azure Service Bus:
      - AMQP sobre WebSocket (443) para funcionar en App Service.
      - Cada mensaje es un push: se pasa el body crudo a dispatcher.handle_push().
      - handle_push nunca falla, así que el mensaje siempre se completa.
      - Reconecta con backoff si se cae la conexión.
    """
    if not SB_CONN_STR:
        logger.warning("Falta AZURE_SERVICE_BUS_CONNECTION_STRING. No se consumirá la cola.")
        return

    if not SB_QUEUE:
        logger.warning("Falta AZURE_SERVICE_BUS_QUEUE_NAME. No se consumirá la cola.")
        return

    backoff = 5  # segundos
    _status["startedAt"] = _now()

    while True:
        try:
            logger.info("[consumer] Conectando a Service Bus (cola: %s) con WebSockets 443", SB_QUEUE)
            async with ServiceBusClient.from_connection_string(
                SB_CONN_STR,
                transport_type=TransportType.AmqpOverWebsocket,  # clave para 443
            ) as sb_client:
                receiver = sb_client.get_queue_receiver(
                    queue_name=SB_QUEUE,
                    max_wait_time=20,
                )
                async with receiver:
                    logger.info("[consumer] Escuchando cola: %s", SB_QUEUE)
                    while True:
                        messages = await receiver.receive_messages(
                            max_message_count=10,
                            max_wait_time=10,
                        )
                        if not messages:
                            await asyncio.sleep(0.5)
                            continue

                        for msg in messages:
                            await dispatcher.handle_push(message_body(msg))
                            await receiver.complete_message(msg)
                            _status["lastMessageAt"] = _now()

            # si sale del with sin error, pequeña pausa antes de reconectar
            await asyncio.sleep(1)

        except Exception as e:
            _status["lastError"] = str(e)
            logger.exception("[consumer] Error de conexión, reintento en %ss", backoff)
            await asyncio.sleep(backoff)
