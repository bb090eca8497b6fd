# -*- coding: utf-8 -*-
"""
app/shared/config/logging_config.py

Logging del backend vía logging.config.dictConfig.

Formatos:
- plain:  una línea por registro (tests, contenedores simples)
- pretty: incluye módulo y línea (desarrollo)
- json:   python-json-logger, un objeto por registro (producción)

Los loggers del SDK de Stripe y de SQLAlchemy se limitan a WARNING: el
reconciliador ya registra cada llamada al gateway con su resultado.

Fecha: 2026-10-17
"""

import logging.config
from typing import Any, Literal

_FORMATS = {
    "plain": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
    "pretty": "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
}

# Loggers ruidosos de terceros
_QUIET_LOGGERS = ("stripe", "sqlalchemy.engine", "httpx")


def build_logging_config(
    level: str = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
) -> dict[str, Any]:
    formatter = "json" if fmt == "json" else fmt
    formatters: dict[str, Any] = {name: {"format": pattern} for name, pattern in _FORMATS.items()}
    formatters["json"] = {
        "()": "pythonjsonlogger.json.JsonFormatter",
        "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        "rename_fields": {"levelname": "level", "asctime": "ts"},
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {name: {"level": "WARNING", "propagate": True} for name in _QUIET_LOGGERS},
        "root": {"handlers": ["console"], "level": level.upper()},
    }


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
) -> None:
    """Aplica la configuración de logging al proceso."""
    logging.config.dictConfig(build_logging_config(level, fmt))


__all__ = ["build_logging_config", "setup_logging"]

# Fin del archivo app/shared/config/logging_config.py
