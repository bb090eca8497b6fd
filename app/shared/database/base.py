# -*- coding: utf-8 -*-
"""
app/shared/database/base.py

Base declarativa única de los modelos de tenants, crédito y pagos.

- Base + NAMING_CONVENTION: nombres estables de PK/FK/UQ/IX/CK
- as_pg_enum: StrEnum de Python -> tipo ENUM existente en PostgreSQL
- utcnow / new_uuid: defaults del lado Python (timestamps UTC, ids texto)

Fecha: 2026-10-17
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Type

from sqlalchemy import MetaData
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


def as_pg_enum(
    enum_cls: Type[Enum],
    name: str | None = None,
    schema: str | None = "public",
) -> PG_ENUM:
    """
    Tipo ENUM de PostgreSQL para un enum de Python.

    Los tipos (payment_status_enum, credit_status_enum, ...) los crean las
    migraciones SQL, por eso create_type=False. Se persiste el `value` de
    cada miembro; el nombre del tipo sale de `name`, de `__pg_enum_name__`
    o del nombre de la clase.
    """
    type_name = name or getattr(enum_cls, "__pg_enum_name__", enum_cls.__name__.lower())
    return PG_ENUM(
        enum_cls,
        name=type_name,
        schema=schema,
        create_type=False,
        values_callable=lambda members: [m.value for m in members],
    )


__all__ = ["Base", "NAMING_CONVENTION", "as_pg_enum", "utcnow", "new_uuid"]

# Fin del archivo app/shared/database/base.py
