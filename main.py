# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
# Importamos los routers de la capa de infraestructura
from app.infrastructure.api.routers import documents_router, installments_router

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.PERSISTENCE_BACKEND == "sql":
        from app.infrastructure.persistence.database import init_db
        init_db()
    yield


app = FastAPI(
    title="API de Cuentas por Pagar",
    description="Ingesta de NFe en XML, generación de parcelas y acciones masivas sobre ellas.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents_router.router)
app.include_router(installments_router.router)


@app.get("/", tags=["Health Check"])
def read_root():
    return {"status": "ok", "message": "API de cuentas por pagar en funcionamiento"}
