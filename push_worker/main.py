# push_worker/main.py
import os
from dotenv import load_dotenv

# 1) cargar variables de entorno del .env (antes de importar módulos que leen env)
load_dotenv()

import asyncio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from push_worker.api.notifications import router as notifications_router
from push_worker.api.push import router as push_router
from push_worker.api.websocket import router as ws_router
from push_worker.config import get_settings
from push_worker.infra.servicebus_consumer import consume_push_events
from push_worker.logging_config import configure_logging

# 2) logging JSON
configure_logging(get_settings().log_level)

app = FastAPI(title="Push Worker Service")

# 3) CORS (limitar orígenes en prod con CORS_ALLOW_ORIGINS=a,b)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 4) Rutas REST
app.include_router(push_router)
app.include_router(notifications_router)
# 5) Ruta WebSocket
app.include_router(ws_router)


@app.on_event("startup")
async def startup_event():
    # 6) lanzar el consumer de Service Bus en background
    asyncio.create_task(consume_push_events())
