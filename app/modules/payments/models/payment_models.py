# -*- coding: utf-8 -*-
"""
app/modules/payments/models/payment_models.py

Modelo ORM para la tabla payments.

Un intento de pago. Los IDs externos (intent/charge/refund) solo existen
para pagos con tarjeta que pasan por el gateway.

Fecha: 2026-10-17
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, new_uuid, utcnow
from app.modules.payments.enums import PaymentMethod, PaymentStatus


class Payment(Base):
    """Pago registrado en el sistema (gateway o manual)."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    customer_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Pedido asociado; la tabla de órdenes vive fuera de este servicio
    order_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        doc="Monto en unidades mayores de la moneda.",
    )

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="usd")

    status: Mapped[PaymentStatus] = mapped_column(
        PaymentStatus.as_pg_enum(),
        nullable=False,
        default=PaymentStatus.PENDING,
    )

    method: Mapped[PaymentMethod] = mapped_column(
        PaymentMethod.as_pg_enum(),
        nullable=False,
        default=PaymentMethod.CARD,
    )

    payment_intent_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    charge_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    refund_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    payment_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSONB,
        nullable=False,
        default=dict,
        doc="Datos opacos (refund_amount, refund_reason, fees...).",
    )

    application_fee_bps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processing_fee_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_payments_tenant_intent", "tenant_id", "payment_intent_id"),
        Index("ix_payments_tenant_status_created", "tenant_id", "status", "created_at"),
    )

    @property
    def is_gateway_backed(self) -> bool:
        return bool(self.payment_intent_id)

    def __repr__(self) -> str:
        return f"<Payment id={self.id} tenant={self.tenant_id} status={self.status}>"

# Fin del archivo app/modules/payments/models/payment_models.py
