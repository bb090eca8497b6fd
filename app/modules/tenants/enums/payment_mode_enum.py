# -*- coding: utf-8 -*-
"""
app/modules/tenants/enums/payment_mode_enum.py

Modo de cobro del tenant frente a Stripe.
Sincronizado con el tipo ENUM de PostgreSQL: payment_mode_enum.

- platform:          cobra la cuenta de la plataforma
- connect_standard:  cuenta Stripe Connect estándar del tenant
- connect_express:   cuenta Stripe Connect express del tenant

Fecha: 2026-10-17
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class PaymentMode(StrEnum):
    PLATFORM = "platform"
    CONNECT_STANDARD = "connect_standard"
    CONNECT_EXPRESS = "connect_express"

    __pg_enum_name__ = "payment_mode_enum"

    @property
    def is_connect(self) -> bool:
        return self is not PaymentMode.PLATFORM

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "payment_mode_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["PaymentMode"]

# Fin del archivo app/modules/tenants/enums/payment_mode_enum.py
