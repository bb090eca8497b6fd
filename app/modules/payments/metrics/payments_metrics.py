# -*- coding: utf-8 -*-
"""
app/modules/payments/metrics/payments_metrics.py

Métricas Prometheus del reconciliador de pagos.

- payments_gateway_calls_total{operation,result}
- payments_gateway_call_latency_seconds{operation}
- payments_webhook_events_total{event_type,outcome}
- payments_amount_mismatch_total

Fecha: 2026-10-17
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

GATEWAY_CALLS_TOTAL = Counter(
    "payments_gateway_calls_total",
    "Payment gateway calls by operation and result",
    ["operation", "result"],
)

GATEWAY_CALL_LATENCY = Histogram(
    "payments_gateway_call_latency_seconds",
    "Payment gateway call latency (s)",
    ["operation"],
)

WEBHOOK_EVENTS_TOTAL = Counter(
    "payments_webhook_events_total",
    "Gateway webhook deliveries by event type and outcome",
    ["event_type", "outcome"],
)

AMOUNT_MISMATCH_TOTAL = Counter(
    "payments_amount_mismatch_total",
    "Succeeded intents whose amount differs from the local payment",
)


@contextmanager
def track_gateway_call(operation: str) -> Iterator[None]:
    """Cuenta y mide una llamada al gateway (result=ok|error)."""
    start = time.perf_counter()
    result = "ok"
    try:
        yield
    except BaseException:
        result = "error"
        raise
    finally:
        GATEWAY_CALL_LATENCY.labels(operation).observe(time.perf_counter() - start)
        GATEWAY_CALLS_TOTAL.labels(operation, result).inc()


def inc_webhook(event_type: str, outcome: str) -> None:
    WEBHOOK_EVENTS_TOTAL.labels(event_type, outcome).inc()
    logger.debug("payments_webhook_events_total{event_type=%s,outcome=%s} incremented", event_type, outcome)


def inc_amount_mismatch() -> None:
    AMOUNT_MISMATCH_TOTAL.inc()


__all__ = [
    "GATEWAY_CALLS_TOTAL",
    "GATEWAY_CALL_LATENCY",
    "WEBHOOK_EVENTS_TOTAL",
    "AMOUNT_MISMATCH_TOTAL",
    "track_gateway_call",
    "inc_webhook",
    "inc_amount_mismatch",
]

# Fin del archivo app/modules/payments/metrics/payments_metrics.py
