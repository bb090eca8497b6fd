# -*- coding: utf-8 -*-
"""
app/shared/utils/http_exceptions.py

Traducción de errores del core a respuestas HTTP.
Estandariza el cuerpo de error: {"error": kind, "message": str, "details": {...}}.

Fecha: 2026-10-17
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.shared.errors import CoreError, ErrorKind

logger = logging.getLogger(__name__)


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.LIMIT_EXCEEDED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.MISSING_DATA: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.GATEWAY: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.REFERENCE_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
}


def status_for(exc: CoreError) -> int:
    """Status HTTP correspondiente al tipo de error."""
    return STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST)


async def core_error_handler(request: Request, exc: CoreError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.warning("core_error kind=%s path=%s msg=%s", exc.kind, request.url.path, exc.message)
    else:
        logger.info("core_error kind=%s path=%s msg=%s", exc.kind, request.url.path, exc.message)
    return JSONResponse(status_code=code, content=exc.to_dict())


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("store_error path=%s error=%r", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "store_unavailable", "message": "Error del almacén de datos", "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra los handlers de CoreError y SQLAlchemyError en la app."""
    app.add_exception_handler(CoreError, core_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, store_error_handler)  # type: ignore[arg-type]


__all__ = [
    "STATUS_BY_KIND",
    "status_for",
    "core_error_handler",
    "store_error_handler",
    "register_exception_handlers",
]

# Fin del archivo app/shared/utils/http_exceptions.py
