# -*- coding: utf-8 -*-
"""
app/shared/database/database.py

SQLAlchemy async + asyncpg para el almacén multi-tenant.
NullPool en la app; el pooling lo maneja PgBouncer delante de PostgreSQL.

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- Dependencia FastAPI: get_async_session
- check_database_health()

Notas:
- Timeouts a nivel de conexión (asyncpg: timeout, command_timeout).
- Para URLs sqlite (entorno de pruebas) no se pasan connect_args de asyncpg.

Fecha: 2026-10-17
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.shared.config import settings
from app.shared.database.base import Base  # reutilizamos la Base única

logger = logging.getLogger(__name__)


def _build_connect_args(url: str) -> dict:
    """Argumentos de conexión específicos de asyncpg (vacío para otros drivers)."""
    if not url.startswith("postgresql+asyncpg"):
        return {}
    connect_args: dict = {
        "statement_cache_size": 0,  # compatible con PgBouncer en transaction mode
        "server_settings": {"search_path": "public"},
        "timeout": float(settings.db_connect_timeout_s),
        "command_timeout": float(settings.db_command_timeout_s),
    }
    if settings.db_sslmode == "require":
        connect_args["ssl"] = "require"
    return connect_args


DATABASE_URL: str = settings.database_url
DB_ECHO_SQL: bool = bool(settings.db_echo_sql)

logger.debug("[DB] engine -> %s (echo=%s)", DATABASE_URL.split("@")[-1], DB_ECHO_SQL)

# ── Engine (sin pool app-side)
engine = create_async_engine(
    DATABASE_URL,
    poolclass=NullPool,
    echo=DB_ECHO_SQL,
    connect_args=_build_connect_args(DATABASE_URL),
)

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Dependencias FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            # Importante: rollback para liberar cualquier transacción/lock
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("[DB] health check failed: %s", e)
        return False


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "check_database_health",
]
# Fin del archivo app/shared/database/database.py
