# -*- coding: utf-8 -*-
"""
app/modules/payments/metrics/__init__.py

Métricas Prometheus del módulo Payments.
"""

from .payments_metrics import (
    inc_amount_mismatch,
    inc_webhook,
    track_gateway_call,
)

__all__ = ["inc_amount_mismatch", "inc_webhook", "track_gateway_call"]

# Fin del archivo app/modules/payments/metrics/__init__.py
