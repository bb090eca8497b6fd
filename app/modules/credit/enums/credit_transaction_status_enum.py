# -*- coding: utf-8 -*-
"""
app/modules/credit/enums/credit_transaction_status_enum.py

Estados de una transacción de crédito.
Sincronizado con el tipo ENUM de PostgreSQL: credit_transaction_status_enum.

Transiciones válidas:
    pending -> paid
    pending -> overdue   (barrido por fecha de vencimiento, job externo)
    overdue -> paid
`paid` es final.

Fecha: 2026-10-17
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class CreditTransactionStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"

    __pg_enum_name__ = "credit_transaction_status_enum"

    @classmethod
    def payable(cls) -> tuple["CreditTransactionStatus", ...]:
        """Estados desde los que se admite registrar el pago."""
        return (cls.PENDING, cls.OVERDUE)

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "credit_transaction_status_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["CreditTransactionStatus"]

# Fin del archivo app/modules/credit/enums/credit_transaction_status_enum.py
