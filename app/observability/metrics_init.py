# -*- coding: utf-8 -*-
"""
app/observability/metrics_init.py

Inicialización de los collectors Prometheus de dominio al startup.

Importar los módulos de métricas registra sus familias (# HELP, # TYPE) en
el REGISTRY, de modo que aparecen en /metrics antes de la primera
operación. Las series con labels aparecen con actividad real.

IMPORTANTE: prometheus_client registra los Counters sin el sufijo "_total"
(p. ej. "ledger_apply_total" queda como "ledger_apply"); la verificación
usa los nombres BASE.

Fecha: 2026-10-17
"""
from __future__ import annotations

import importlib
import logging

_logger = logging.getLogger("observability.metrics_init")

# módulo de métricas -> familias que debe registrar
_DOMAIN_COLLECTORS: dict[str, tuple[str, ...]] = {
    "app.modules.credit.metrics.ledger_metrics": (
        "ledger_apply",
        "ledger_apply_retries",
    ),
    "app.modules.payments.metrics.payments_metrics": (
        "payments_gateway_calls",
        "payments_gateway_call_latency_seconds",
        "payments_webhook_events",
        "payments_amount_mismatch",
    ),
}


def get_metrics_registry():
    """Registry canónico usado por /metrics."""
    from app.observability.prom import _get_metrics_registry
    return _get_metrics_registry()


def _get_registered_family_names() -> set[str]:
    return {metric.name for metric in get_metrics_registry().collect()}


def initialize_all_metrics() -> dict[str, bool]:
    """
    Registra los collectors de dominio y verifica sus familias.

    Returns:
        dict módulo -> True si todas sus familias quedaron registradas.
    """
    for module_name in _DOMAIN_COLLECTORS:
        importlib.import_module(module_name)

    family_names = _get_registered_family_names()
    results: dict[str, bool] = {}
    for module_name, families in _DOMAIN_COLLECTORS.items():
        missing = [f for f in families if f not in family_names]
        results[module_name] = not missing
        if missing:
            _logger.error("metrics_init: %s missing families %s", module_name, missing)
        else:
            _logger.info("metrics_init: %s collectors registered", module_name)

    _logger.info("metrics_init_summary: %s", results)
    return results


__all__ = ["initialize_all_metrics", "get_metrics_registry"]

# Fin del archivo app/observability/metrics_init.py
