# -*- coding: utf-8 -*-
"""
app/modules/credit/schemas/credit_schemas.py

Esquemas de request/response del ledger de crédito.

Los montos viajan como Decimal (serializados como string en JSON) para
no perder precisión.

Fecha: 2026-10-17
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.credit.enums import CreditStatus, CreditTransactionStatus
from app.modules.credit.services import (
    AppliedTransaction,
    CreditAccountView,
    CreditTransactionView,
)


# ---------------------------------------------------------------------------
# Cuentas
# ---------------------------------------------------------------------------
class CreditAccountCreate(BaseModel):
    customer_id: str = Field(description="Cliente dueño de la cuenta.")
    limit: Decimal = Field(ge=0, max_digits=10, decimal_places=2, description="Límite de crédito.")
    status: CreditStatus = Field(default=CreditStatus.ACTIVE)
    opening_balance: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)


class BalanceUpdate(BaseModel):
    balance: Decimal = Field(max_digits=10, decimal_places=2, description="Nuevo saldo (>= 0). Corrección manual.")


class CreditAccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    customer_id: str
    customer_name: Optional[str] = None
    limit: Decimal
    balance: Decimal
    available: Decimal
    status: CreditStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_account(cls, account, customer_name: Optional[str] = None) -> "CreditAccountOut":
        return cls(
            id=account.id,
            tenant_id=account.tenant_id,
            customer_id=account.customer_id,
            customer_name=customer_name,
            limit=account.limit_amount,
            balance=account.balance,
            available=account.limit_amount - account.balance,
            status=account.status,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

    @classmethod
    def from_view(cls, view: CreditAccountView) -> "CreditAccountOut":
        return cls.from_account(view.account, view.customer_name)


# ---------------------------------------------------------------------------
# Transacciones
# ---------------------------------------------------------------------------
class CreditTransactionCreate(BaseModel):
    customer_id: str
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2, description="Monto a cargar a la cuenta.")
    fee: Decimal = Field(
        default=Decimal("0"), ge=0, max_digits=10, decimal_places=2, description="Comisión informativa."
    )
    due_date: datetime
    order_id: Optional[str] = None


class MarkPaidRequest(BaseModel):
    paid_at: Optional[datetime] = Field(default=None, description="Default: ahora (UTC).")


class CreditTransactionOut(BaseModel):
    id: str
    tenant_id: str
    customer_id: str
    customer_name: Optional[str] = None
    credit_account_id: str
    order_id: Optional[str] = None
    amount: Decimal
    fee: Decimal
    due_date: datetime
    paid_date: Optional[datetime] = None
    status: CreditTransactionStatus
    overdue: bool = False
    created_at: datetime

    @classmethod
    def from_transaction(
        cls,
        tx,
        customer_name: Optional[str] = None,
        overdue: bool = False,
    ) -> "CreditTransactionOut":
        return cls(
            id=tx.id,
            tenant_id=tx.tenant_id,
            customer_id=tx.customer_id,
            customer_name=customer_name,
            credit_account_id=tx.credit_account_id,
            order_id=tx.order_id,
            amount=tx.amount,
            fee=tx.fee,
            due_date=tx.due_date,
            paid_date=tx.paid_date,
            status=tx.status,
            overdue=overdue,
            created_at=tx.created_at,
        )

    @classmethod
    def from_view(cls, view: CreditTransactionView) -> "CreditTransactionOut":
        return cls.from_transaction(view.transaction, view.customer_name, view.overdue)


class AppliedTransactionOut(BaseModel):
    transaction: CreditTransactionOut
    previous_balance: Decimal
    balance: Decimal
    limit: Decimal
    available: Decimal

    @classmethod
    def from_result(cls, result: AppliedTransaction) -> "AppliedTransactionOut":
        account = result.account
        return cls(
            transaction=CreditTransactionOut.from_transaction(result.transaction),
            previous_balance=result.previous_balance,
            balance=account.balance,
            limit=account.limit_amount,
            available=account.limit_amount - account.balance,
        )


__all__ = [
    "CreditAccountCreate",
    "BalanceUpdate",
    "CreditAccountOut",
    "CreditTransactionCreate",
    "MarkPaidRequest",
    "CreditTransactionOut",
    "AppliedTransactionOut",
]

# Fin del archivo app/modules/credit/schemas/credit_schemas.py
