# -*- coding: utf-8 -*-
"""
app/observability/prom.py

Configuración de observabilidad Prometheus.

Incluye:
- Middleware HTTP para conteo y latencia por ruta/estado
- Endpoint /metrics compatible con Prometheus (pull model)
- Soporte multiproceso (Prometheus MultiProcess Collector)

El label `path` usa el template de la ruta (/api/tenants/{tenant_id}/...)
para no disparar la cardinalidad con ids de tenant o de pago.

Fecha: 2026-10-17
"""
from __future__ import annotations

import os
from time import perf_counter

from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Contadores/Histogramas de capa HTTP (labels saneados: method/path/status)
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Latency per request (s)",
    ["method", "path", "status"],
)


def _route_template(request) -> str:
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    return template or "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware para instrumentar peticiones HTTP en FastAPI."""

    async def dispatch(self, request, call_next):
        method = request.method
        start = perf_counter()
        status = "500"
        try:
            resp = await call_next(request)
            status = str(resp.status_code)
            return resp
        finally:
            elapsed = perf_counter() - start
            path = _route_template(request)
            REQUEST_LATENCY.labels(method, path, status).observe(elapsed)
            REQUEST_COUNT.labels(method, path, status).inc()


def _get_metrics_registry() -> CollectorRegistry:
    """Registry usado por /metrics (multiproceso si PROMETHEUS_MULTIPROC_DIR existe)."""
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return registry
    return REGISTRY


def mount_metrics(app: FastAPI, path: str = "/metrics") -> None:
    """Registra el endpoint /metrics en la app FastAPI."""
    registry = _get_metrics_registry()

    @app.get(path, include_in_schema=False)
    def metrics():
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)


def setup_observability(app: FastAPI, http_metrics: bool = True) -> None:
    """Agrega middleware de Prometheus y monta el endpoint /metrics."""
    if http_metrics:
        app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)


__all__ = ["PrometheusMiddleware", "mount_metrics", "setup_observability"]

# Fin del archivo app/observability/prom.py
