# -*- coding: utf-8 -*-
"""
app/modules/credit/routes/credit_routes.py

Rutas del ledger de crédito (tenant-scoped).

Endpoints:
- GET  /api/tenants/{tenant_id}/credit
- POST /api/tenants/{tenant_id}/credit
- PUT  /api/tenants/{tenant_id}/credit/{credit_id}/balance
- GET  /api/tenants/{tenant_id}/credit-transactions
- POST /api/tenants/{tenant_id}/credit-transactions
- POST /api/tenants/{tenant_id}/credit-transactions/{transaction_id}/pay

Los errores del core (CoreError) los traduce el handler global registrado
en app.main; aquí no hay mapeo manual de status.

Fecha: 2026-10-17
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import require_tenant_member
from app.shared.database.database import get_async_session
from app.modules.credit.schemas import (
    AppliedTransactionOut,
    BalanceUpdate,
    CreditAccountCreate,
    CreditAccountOut,
    CreditTransactionCreate,
    CreditTransactionOut,
    MarkPaidRequest,
)
from app.modules.credit.services import CreditLedgerService

router = APIRouter(
    prefix="/api/tenants/{tenant_id}",
    tags=["credit"],
    dependencies=[Depends(require_tenant_member)],
)


def get_ledger_service() -> CreditLedgerService:
    return CreditLedgerService()


@router.get("/credit", response_model=List[CreditAccountOut])
async def list_credit_accounts(
    tenant_id: str,
    session: AsyncSession = Depends(get_async_session),
    ledger: CreditLedgerService = Depends(get_ledger_service),
):
    views = await ledger.list_accounts(session, tenant_id)
    return [CreditAccountOut.from_view(v) for v in views]


@router.post("/credit", response_model=CreditAccountOut, status_code=status.HTTP_201_CREATED)
async def create_credit_account(
    tenant_id: str,
    payload: CreditAccountCreate,
    session: AsyncSession = Depends(get_async_session),
    ledger: CreditLedgerService = Depends(get_ledger_service),
):
    account = await ledger.create_account(
        session,
        tenant_id=tenant_id,
        customer_id=payload.customer_id,
        limit=payload.limit,
        status=payload.status,
        opening_balance=payload.opening_balance,
    )
    return CreditAccountOut.from_account(account)


@router.put("/credit/{credit_id}/balance", response_model=CreditAccountOut)
async def update_credit_balance(
    tenant_id: str,
    credit_id: str,
    payload: BalanceUpdate,
    session: AsyncSession = Depends(get_async_session),
    ledger: CreditLedgerService = Depends(get_ledger_service),
):
    account = await ledger.update_balance(session, tenant_id, credit_id, payload.balance)
    return CreditAccountOut.from_account(account)


@router.get("/credit-transactions", response_model=List[CreditTransactionOut])
async def list_credit_transactions(
    tenant_id: str,
    customer_id: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_async_session),
    ledger: CreditLedgerService = Depends(get_ledger_service),
):
    views = await ledger.list_transactions(session, tenant_id, customer_id=customer_id)
    return [CreditTransactionOut.from_view(v) for v in views]


@router.post(
    "/credit-transactions",
    response_model=AppliedTransactionOut,
    status_code=status.HTTP_201_CREATED,
)
async def apply_credit_transaction(
    tenant_id: str,
    payload: CreditTransactionCreate,
    session: AsyncSession = Depends(get_async_session),
    ledger: CreditLedgerService = Depends(get_ledger_service),
):
    result = await ledger.apply_transaction(
        session,
        tenant_id=tenant_id,
        customer_id=payload.customer_id,
        amount=payload.amount,
        fee=payload.fee,
        due_date=payload.due_date,
        order_id=payload.order_id,
    )
    return AppliedTransactionOut.from_result(result)


@router.post("/credit-transactions/{transaction_id}/pay", response_model=CreditTransactionOut)
async def pay_credit_transaction(
    tenant_id: str,
    transaction_id: str,
    payload: Optional[MarkPaidRequest] = None,
    session: AsyncSession = Depends(get_async_session),
    ledger: CreditLedgerService = Depends(get_ledger_service),
):
    paid_at = payload.paid_at if payload else None
    tx = await ledger.mark_transaction_paid(session, tenant_id, transaction_id, paid_at=paid_at)
    return CreditTransactionOut.from_transaction(tx)


__all__ = ["router", "get_ledger_service"]

# Fin del archivo app/modules/credit/routes/credit_routes.py
