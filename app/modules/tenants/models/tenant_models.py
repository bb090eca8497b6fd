# -*- coding: utf-8 -*-
"""
app/modules/tenants/models/tenant_models.py

Modelos ORM mínimos de tenants, clientes y configuración de pagos.

Las tablas las administra el resto de la plataforma; aquí solo se mapean
las columnas que el ledger y el reconciliador leen.

Fecha: 2026-10-17
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, new_uuid, utcnow
from app.modules.tenants.enums import PaymentMode


class Tenant(Base):
    """Organización aislada (farmacia/comercio)."""

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Tenant id={self.id} name={self.name!r}>"


class Customer(Base):
    """Cliente de un tenant."""

    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Customer id={self.id} tenant={self.tenant_id}>"


class TenantSettings(Base):
    """Configuración de pagos por tenant (una fila por tenant)."""

    __tablename__ = "settings_tenant"

    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        primary_key=True,
    )
    payment_mode: Mapped[PaymentMode] = mapped_column(
        PaymentMode.as_pg_enum(),
        nullable=False,
        default=PaymentMode.PLATFORM,
    )
    application_fee_bps: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Comisión de plataforma en basis points (100 = 1%).",
    )
    default_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="usd")
    stripe_account_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<TenantSettings tenant={self.tenant_id} mode={self.payment_mode}>"


__all__ = ["Tenant", "Customer", "TenantSettings"]

# Fin del archivo app/modules/tenants/models/tenant_models.py
