# -*- coding: utf-8 -*-
"""
app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Fecha: 2026-10-17
"""

from __future__ import annotations

from .database import (
    engine,
    SessionLocal,
    get_async_session,
    check_database_health,
)
from .base import Base, NAMING_CONVENTION, as_pg_enum, utcnow, new_uuid
from .repository import BaseRepository, TenantScopedRepository

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "NAMING_CONVENTION",
    "as_pg_enum",
    "utcnow",
    "new_uuid",
    "BaseRepository",
    "TenantScopedRepository",
    "get_async_session",
    "check_database_health",
]

# Fin del archivo app/shared/database/__init__.py
