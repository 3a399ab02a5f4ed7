# push_worker/api/push.py
from fastapi import APIRouter, Request

from push_worker.services.push_dispatcher import dispatcher

router = APIRouter(prefix="/push", tags=["push"])


@router.post("", status_code=202)
async def receive_push(request: Request):
    """
    Entrada HTTP de pushes (webhook del gateway).
    El body se pasa tal cual: puede ser JSON, texto o venir vacío.
    Siempre responde 202; los errores quedan en el log.
    """
    await dispatcher.handle_push(await request.body())
    return {"ok": True}


@router.post("/subscription-change")
async def subscription_change():
    """
    El backend avisa que la suscripción expiró o fue invalidada:
    se pide a las vistas abiertas que se vuelvan a suscribir.
    """
    await dispatcher.handle_subscription_change()
    return {"ok": True}
