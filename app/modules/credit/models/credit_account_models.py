# -*- coding: utf-8 -*-
"""
app/modules/credit/models/credit_account_models.py

Modelo ORM para la tabla credit_accounts.

Una cuenta por (tenant, cliente). `balance` positivo = monto adeudado.
Invariante: balance <= limit_amount tras cualquier aplicación exitosa.

Fecha: 2026-10-17
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, new_uuid, utcnow
from app.modules.credit.enums import CreditStatus


class CreditAccount(Base):
    """Cuenta de crédito revolvente de un cliente."""

    __tablename__ = "credit_accounts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    customer_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
    )

    limit_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        doc="Límite de crédito (>= 0).",
    )

    balance: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Monto adeudado (positivo) contra el límite.",
    )

    status: Mapped[CreditStatus] = mapped_column(
        CreditStatus.as_pg_enum(),
        nullable=False,
        default=CreditStatus.ACTIVE,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "customer_id", name="uq_credit_accounts_tenant_customer"),
        CheckConstraint("limit_amount >= 0", name="limit_non_negative"),
        Index("ix_credit_accounts_tenant_status", "tenant_id", "status"),
    )

    @property
    def available(self) -> Decimal:
        return self.limit_amount - self.balance

    def __repr__(self) -> str:
        return (
            f"<CreditAccount id={self.id} tenant={self.tenant_id} "
            f"balance={self.balance} limit={self.limit_amount}>"
        )

# Fin del archivo app/modules/credit/models/credit_account_models.py
