# -*- coding: utf-8 -*-
"""
app/shared/config/config_loader.py

Selecciona el perfil de settings según PYTHON_ENV, corre las validaciones
de arranque (SSL y secretos de Stripe en producción) y cachea la instancia.

Fecha: 2026-10-17
"""

import logging
import os
from functools import lru_cache

from .settings_base import BaseAppSettings
from .settings_env import SETTINGS_BY_ENV, DevSettings

logger = logging.getLogger(__name__)


def current_env() -> str:
    return os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()


@lru_cache(maxsize=1)
def get_settings() -> BaseAppSettings:
    """
    Settings del entorno actual (singleton).

    Raises:
        ValueError: validación de arranque fallida (p. ej. producción sin
            STRIPE_WEBHOOK_SECRET o sin DB_SSLMODE=require)
    """
    env = current_env()
    settings_cls = SETTINGS_BY_ENV.get(env)
    if settings_cls is None:
        logger.warning("PYTHON_ENV=%r no reconocido; se usa development", env)
        settings_cls = DevSettings

    settings = settings_cls()
    settings._security_and_payments_checks()
    return settings


def reset_settings() -> None:
    """Descarta el singleton (tests que cambian PYTHON_ENV o variables)."""
    get_settings.cache_clear()


__all__ = ["current_env", "get_settings", "reset_settings"]

# Fin del archivo app/shared/config/config_loader.py
