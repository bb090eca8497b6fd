# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_method_enum.py

Método de pago.
Sincronizado con el tipo ENUM de PostgreSQL: payment_method_enum.

Solo `card` pasa por el gateway (intent/charge/refund); el resto son
registros manuales.

Fecha: 2026-10-17
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class PaymentMethod(StrEnum):
    CARD = "card"
    CASH = "cash"
    CUSTOM = "custom"
    TRANSFER = "transfer"
    ACH = "ach"

    __pg_enum_name__ = "payment_method_enum"

    @property
    def uses_gateway(self) -> bool:
        return self is PaymentMethod.CARD

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "payment_method_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["PaymentMethod"]

# Fin del archivo app/modules/payments/enums/payment_method_enum.py
