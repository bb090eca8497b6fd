# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/payments_routes.py

Rutas de pagos del tenant.

Endpoints:
- GET  /api/tenants/{tenant_id}/payments
- GET  /api/tenants/{tenant_id}/payments/statistics
- GET  /api/tenants/{tenant_id}/payments/settings
- POST /api/tenants/{tenant_id}/payments                  (pago manual)
- PUT  /api/tenants/{tenant_id}/payments/{payment_id}/status
- POST /api/tenants/{tenant_id}/create-payment-intent
- POST /api/tenants/{tenant_id}/confirm-payment
- POST /api/tenants/{tenant_id}/refund-payment

Los CoreError los traduce el handler global (app.shared.utils.http_exceptions).

Fecha: 2026-10-17
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import AuthContext, require_tenant_member
from app.shared.database.database import get_async_session
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.gateway import PaymentGateway, get_payment_gateway
from app.modules.payments.schemas import (
    ConfirmPaymentRequest,
    CreatePaymentIntentRequest,
    CreatePaymentIntentResponse,
    ManualPaymentCreate,
    PaymentOut,
    PaymentSettingsOut,
    PaymentStatisticsOut,
    PaymentStatusUpdate,
    RefundPaymentRequest,
    RefundPaymentResponse,
)
from app.modules.payments.services import PaymentReconciler, PaymentService

router = APIRouter(
    prefix="/api/tenants/{tenant_id}",
    tags=["payments"],
    dependencies=[Depends(require_tenant_member)],
)


def get_payment_service() -> PaymentService:
    return PaymentService()


def get_reconciler(gateway: PaymentGateway = Depends(get_payment_gateway)) -> PaymentReconciler:
    return PaymentReconciler(gateway)


# ---------------------------------------------------------------------------
# Pagos (lecturas y registro manual)
# ---------------------------------------------------------------------------
@router.get("/payments", response_model=List[PaymentOut])
async def list_payments(
    tenant_id: str,
    status_filter: Optional[PaymentStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_async_session),
    service: PaymentService = Depends(get_payment_service),
):
    views = await service.list_payments(session, tenant_id, status_filter)
    return [PaymentOut.from_view(v) for v in views]


@router.get("/payments/statistics", response_model=PaymentStatisticsOut)
async def get_payment_statistics(
    tenant_id: str,
    session: AsyncSession = Depends(get_async_session),
    service: PaymentService = Depends(get_payment_service),
):
    totals = await service.get_payment_statistics(session, tenant_id)
    return PaymentStatisticsOut.from_totals(totals)


@router.get("/payments/settings", response_model=PaymentSettingsOut)
async def get_payment_settings(
    tenant_id: str,
    session: AsyncSession = Depends(get_async_session),
    service: PaymentService = Depends(get_payment_service),
):
    view = await service.get_payment_settings(session, tenant_id)
    return PaymentSettingsOut.model_validate(view)


@router.post("/payments", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
async def record_manual_payment(
    tenant_id: str,
    payload: ManualPaymentCreate,
    ctx: AuthContext = Depends(require_tenant_member),
    session: AsyncSession = Depends(get_async_session),
    service: PaymentService = Depends(get_payment_service),
):
    payment = await service.record_manual_payment(
        session,
        tenant_id,
        amount=payload.amount,
        method=payload.method,
        status=payload.status,
        customer_id=payload.customer_id,
        order_id=payload.order_id,
        currency=payload.currency,
        notes=payload.notes,
        created_by=ctx.user_id,
    )
    return PaymentOut.from_payment(payment)


@router.put("/payments/{payment_id}/status", response_model=PaymentOut)
async def update_payment_status(
    tenant_id: str,
    payment_id: str,
    payload: PaymentStatusUpdate,
    session: AsyncSession = Depends(get_async_session),
    service: PaymentService = Depends(get_payment_service),
):
    payment = await service.update_payment_status(
        session, tenant_id, payment_id, payload.status, notes=payload.notes
    )
    return PaymentOut.from_payment(payment)


# ---------------------------------------------------------------------------
# Flujo de tarjeta
# ---------------------------------------------------------------------------
@router.post("/create-payment-intent", response_model=CreatePaymentIntentResponse)
async def create_payment_intent(
    tenant_id: str,
    payload: CreatePaymentIntentRequest,
    ctx: AuthContext = Depends(require_tenant_member),
    session: AsyncSession = Depends(get_async_session),
    reconciler: PaymentReconciler = Depends(get_reconciler),
):
    created = await reconciler.create_payment_intent(
        session,
        tenant_id,
        amount=payload.amount,
        currency=payload.currency,
        customer_id=payload.customer_id,
        order_id=payload.order_id,
        description=payload.description,
        created_by=ctx.user_id,
    )
    return CreatePaymentIntentResponse.from_created(created)


@router.post("/confirm-payment", response_model=PaymentOut)
async def confirm_payment(
    tenant_id: str,
    payload: ConfirmPaymentRequest,
    session: AsyncSession = Depends(get_async_session),
    reconciler: PaymentReconciler = Depends(get_reconciler),
):
    payment = await reconciler.confirm_payment(
        session, tenant_id, payload.payment_intent_id, payload.payment_id
    )
    return PaymentOut.from_payment(payment)


@router.post("/refund-payment", response_model=RefundPaymentResponse)
async def refund_payment(
    tenant_id: str,
    payload: RefundPaymentRequest,
    session: AsyncSession = Depends(get_async_session),
    reconciler: PaymentReconciler = Depends(get_reconciler),
):
    payment = await reconciler.refund(
        session, tenant_id, payload.payment_id, amount=payload.amount, reason=payload.reason
    )
    return RefundPaymentResponse.from_payment(payment)


__all__ = ["router", "get_payment_service", "get_reconciler"]

# Fin del archivo app/modules/payments/routes/payments_routes.py
