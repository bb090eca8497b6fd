# -*- coding: utf-8 -*-
"""
app/modules/credit/models/credit_transaction_models.py

Modelo ORM para la tabla credit_transactions.

Cada fila es un cargo contra la cuenta de crédito del cliente. Inmutable
salvo por las transiciones de status/paid_date.

Fecha: 2026-10-17
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, new_uuid, utcnow
from app.modules.credit.enums import CreditTransactionStatus


class CreditTransaction(Base):
    __tablename__ = "credit_transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )

    customer_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
    )

    credit_account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("credit_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Pedido asociado; la tabla de órdenes vive fuera de este servicio
    order_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        doc="Monto sumado al saldo de la cuenta.",
    )

    fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Comisión informativa (no afecta el saldo).",
    )

    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    status: Mapped[CreditTransactionStatus] = mapped_column(
        CreditTransactionStatus.as_pg_enum(),
        nullable=False,
        default=CreditTransactionStatus.PENDING,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_credit_transactions_tenant_status_due", "tenant_id", "status", "due_date"),
    )

    def __repr__(self) -> str:
        return f"<CreditTransaction id={self.id} amount={self.amount} status={self.status}>"

# Fin del archivo app/modules/credit/models/credit_transaction_models.py
