# -*- coding: utf-8 -*-
"""
app/modules/credit/enums/credit_status_enum.py

Estados de una cuenta de crédito.
Sincronizado con el tipo ENUM de PostgreSQL: credit_status_enum.

Solo las cuentas `active` admiten cargos nuevos; suspended/frozen
conservan saldo e historial (las cuentas nunca se borran).

Fecha: 2026-10-17
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class CreditStatus(StrEnum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    FROZEN = "frozen"

    __pg_enum_name__ = "credit_status_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "credit_status_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["CreditStatus"]

# Fin del archivo app/modules/credit/enums/credit_status_enum.py
