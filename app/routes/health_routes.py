# -*- coding: utf-8 -*-
"""
app/routes/health_routes.py

Endpoints de health check del backend.

- GET /health:           estado + conectividad a la base de datos
- GET /api/health/live:  liveness (sin dependencias)

Fecha: 2026-10-17
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.shared.config import get_payments_settings, get_settings
from app.shared.database.database import check_database_health

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Health check del backend",
    description=(
        "Devuelve el estado básico del backend, incluyendo verificación "
        "simple de conectividad a la base de datos."
    ),
)
async def health_check() -> dict:
    settings = get_settings()

    db_ok = await check_database_health(timeout_s=2.0)

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.python_env,
        "database": {
            "reachable": db_ok,
        },
        "payments": {
            "gateway_configured": bool(get_payments_settings().stripe_secret_key),
        },
        "service": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
    }


@router.get("/api/health/live")
async def health_live() -> dict:
    return {"live": True}

# Fin del archivo app/routes/health_routes.py
