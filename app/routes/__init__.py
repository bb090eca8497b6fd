# -*- coding: utf-8 -*-
"""
app/routes/__init__.py

Ensamblador de ruteadores transversales (fuera de los módulos de dominio).

Responsabilidades:
- Incluir el router de health (/health, /api/health/live).

Fecha: 2026-10-17
"""

from fastapi import APIRouter

from .health_routes import router as health_router

router = APIRouter()

router.include_router(health_router)

__all__ = ["router"]

# Fin del archivo app/routes/__init__.py
