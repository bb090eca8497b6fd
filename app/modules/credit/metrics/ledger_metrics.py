# -*- coding: utf-8 -*-
"""
app/modules/credit/metrics/ledger_metrics.py

Contadores Prometheus del ledger de crédito.

- ledger_apply_total{result}: aplicaciones por resultado
  (applied, limit_exceeded, not_found, invalid_state, invalid_input, error)
- ledger_apply_retries_total: compare-and-set perdidos que forzaron reintento

Fecha: 2026-10-17
"""

from __future__ import annotations

import logging

from prometheus_client import Counter

logger = logging.getLogger(__name__)

LEDGER_APPLY_TOTAL = Counter(
    "ledger_apply_total",
    "Credit transaction applications by result",
    ["result"],
)

LEDGER_APPLY_RETRIES = Counter(
    "ledger_apply_retries",
    "Balance compare-and-set conflicts that forced a retry",
)


def observe_apply(result: str) -> None:
    LEDGER_APPLY_TOTAL.labels(result).inc()
    logger.debug("ledger_apply_total{result=%s} incremented", result)


__all__ = ["LEDGER_APPLY_TOTAL", "LEDGER_APPLY_RETRIES", "observe_apply"]

# Fin del archivo app/modules/credit/metrics/ledger_metrics.py
