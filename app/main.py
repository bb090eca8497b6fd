# -*- coding: utf-8 -*-
"""
app/main.py

Punto de entrada principal del backend PharmaDesk (ledger de crédito y
reconciliación de pagos).

Ajustes clave:
- Configuración por entorno vía app.shared.config.get_settings()
- Montaje de observabilidad Prometheus (/metrics) vía app.observability.prom
- Handlers globales: CoreError -> status por tipo, SQLAlchemyError -> 503
- Health principal /health delegado al paquete app.routes (health_routes.py)
- Ciclo de vida: logging al arranque, dispose del engine al apagar

Fecha: 2026-10-17
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que lea settings
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_PYTHON_ENV = os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()
load_dotenv(dotenv_path=_ENV_PATH, override=_PYTHON_ENV == "development")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.shared.config import get_settings
from app.shared.config.logging_config import setup_logging
from app.shared.database.database import engine
from app.modules.credit.routes import router as credit_router
from app.modules.payments.routes import payments_router, webhooks_stripe_router
from app.observability.metrics_init import initialize_all_metrics
from app.observability.prom import setup_observability
from app.routes import router as main_router
from app.shared.utils.http_exceptions import register_exception_handlers

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "credit", "description": "Cuentas y transacciones de crédito de clientes"},
    {"name": "payments", "description": "Pagos del tenant e integración con Stripe"},
    {"name": "payments:webhooks", "description": "Webhooks firmados de Stripe"},
    {"name": "health", "description": "Estado del servicio"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    settings = get_settings()
    setup_logging(level=settings.log_level, fmt=settings.log_format)
    initialize_all_metrics()
    logger.info(
        "%s %s started (env=%s)", settings.app_name, settings.app_version, settings.python_env
    )
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        await engine.dispose()
        logger.info("Database engine disposed")


def _configure_cors(app_instance: FastAPI) -> None:
    settings = get_settings()
    origins = settings.get_cors_origins()
    wildcard = origins == ["*"]
    if wildcard and settings.is_prod:
        logger.warning("CORS_ORIGINS='*' in production; credentials disabled")
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Ledger de crédito y reconciliación de pagos multi-tenant",
        version=settings.app_version,
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    _configure_cors(app)
    register_exception_handlers(app)
    setup_observability(app, http_metrics=settings.http_metrics_enabled)

    app.include_router(main_router)
    app.include_router(credit_router)
    app.include_router(payments_router)
    app.include_router(webhooks_stripe_router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"service": settings.app_name, "status": "active"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.is_dev,
    )

# Fin del archivo app/main.py
