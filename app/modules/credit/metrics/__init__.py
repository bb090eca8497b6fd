# -*- coding: utf-8 -*-
"""
app/modules/credit/metrics/__init__.py

Métricas Prometheus del ledger de crédito.
"""

from .ledger_metrics import LEDGER_APPLY_TOTAL, LEDGER_APPLY_RETRIES, observe_apply

__all__ = ["LEDGER_APPLY_TOTAL", "LEDGER_APPLY_RETRIES", "observe_apply"]

# Fin del archivo app/modules/credit/metrics/__init__.py
