# -*- coding: utf-8 -*-
"""
app/shared/utils/__init__.py

Exportación de utilidades comunes.

Fecha: 2026-10-17
"""

from .http_exceptions import register_exception_handlers, status_for
from .money import TWO_PLACES, fee_from_bps, from_minor_units, to_minor_units, to_money

__all__ = [
    # HTTP
    "register_exception_handlers",
    "status_for",

    # Dinero
    "TWO_PLACES",
    "to_money",
    "to_minor_units",
    "from_minor_units",
    "fee_from_bps",
]

# Fin del archivo app/shared/utils/__init__.py
