# -*- coding: utf-8 -*-
"""
app/shared/errors.py

Excepciones de dominio compartidas por el ledger de crédito y el
reconciliador de pagos.

Cada excepción lleva un `kind` (ErrorKind) y un dict `details` con datos
estructurados, de modo que la capa HTTP decide el status por tipo y no por
el texto del mensaje.

Fecha: 2026-10-17
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    LIMIT_EXCEEDED = "limit_exceeded"
    INVALID_STATE = "invalid_state"
    MISSING_DATA = "missing_data"
    UNAUTHENTICATED = "unauthenticated"
    GATEWAY = "gateway"
    REFERENCE_ERROR = "reference_error"
    INVALID_INPUT = "invalid_input"


class CoreError(Exception):
    """Base de los errores tipados del core."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": str(self.kind),
            "message": self.message,
            "details": {k: _jsonable(v) for k, v in self.details.items()},
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    return value


class NotFoundError(CoreError):
    """Cuenta, pago o cliente inexistente dentro del tenant."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} no encontrado: {identifier}", entity=entity, identifier=str(identifier))


class ConflictError(CoreError):
    """Alta duplicada (clave única ya existente)."""
    kind = ErrorKind.CONFLICT


class LimitExceededError(CoreError):
    """La transacción llevaría el saldo por encima del límite."""
    kind = ErrorKind.LIMIT_EXCEEDED

    def __init__(self, balance: Decimal, limit: Decimal, requested: Decimal):
        self.balance = balance
        self.limit = limit
        self.requested = requested
        super().__init__(
            f"Límite de crédito excedido: saldo {balance}, límite {limit}, solicitado {requested}",
            balance=balance,
            limit=limit,
            requested=requested,
            available=limit - balance,
        )


class InvalidStateError(CoreError):
    """Operación no permitida con el estado actual."""
    kind = ErrorKind.INVALID_STATE

    def __init__(self, current_status: str, operation: str, message: Optional[str] = None):
        self.current_status = current_status
        self.operation = operation
        super().__init__(
            message or f"No se puede ejecutar '{operation}' con estado '{current_status}'",
            current_status=current_status,
            operation=operation,
        )


class MissingDataError(CoreError):
    """Falta un dato enlazado requerido (p. ej. charge_id para reembolsar)."""
    kind = ErrorKind.MISSING_DATA

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Dato requerido ausente: {field}", field=field)


class UnauthenticatedError(CoreError):
    """Firma de webhook inválida o ausente."""
    kind = ErrorKind.UNAUTHENTICATED


class GatewayError(CoreError):
    """Fallo, timeout o respuesta inesperada del proveedor de pagos."""
    kind = ErrorKind.GATEWAY

    def __init__(self, operation: str, message: str, timed_out: bool = False):
        self.operation = operation
        self.timed_out = timed_out
        super().__init__(message, operation=operation, timed_out=timed_out)


class ForeignReferenceError(CoreError):
    """Una referencia (tenant, cliente) no resuelve a una fila existente."""
    kind = ErrorKind.REFERENCE_ERROR

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"Referencia inválida: {entity} {identifier} no existe",
            entity=entity,
            identifier=str(identifier),
        )


class InvalidInputError(CoreError):
    """Argumento fuera de dominio (montos no positivos, saldos negativos...)."""
    kind = ErrorKind.INVALID_INPUT

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, field=field)


__all__ = [
    "ErrorKind",
    "CoreError",
    "NotFoundError",
    "ConflictError",
    "LimitExceededError",
    "InvalidStateError",
    "MissingDataError",
    "UnauthenticatedError",
    "GatewayError",
    "ForeignReferenceError",
    "InvalidInputError",
]

# Fin del archivo app/shared/errors.py
