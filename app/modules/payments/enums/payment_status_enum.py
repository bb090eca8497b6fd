# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_status_enum.py

Enum de estados del pago.
Sincronizado con el tipo ENUM de PostgreSQL: payment_status_enum.

Ciclo de vida:
    pending -> completed | failed
    completed -> refunded
failed y refunded son finales.

Fecha: 2026-10-17
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class PaymentStatus(StrEnum):
    """Estado del pago en el ciclo de vida con el proveedor."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

    __pg_enum_name__ = "payment_status_enum"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING

    def can_transition_to(self, target: "PaymentStatus") -> bool:
        return target in _ALLOWED_TRANSITIONS.get(self, frozenset())

    @classmethod
    def sources_for(cls, target: "PaymentStatus") -> tuple["PaymentStatus", ...]:
        """Estados desde los que se puede llegar a `target`."""
        return tuple(s for s, targets in _ALLOWED_TRANSITIONS.items() if target in targets)

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "payment_status_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


_ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED}),
    PaymentStatus.COMPLETED: frozenset({PaymentStatus.REFUNDED}),
}


__all__ = ["PaymentStatus"]

# Fin del archivo app/modules/payments/enums/payment_status_enum.py
