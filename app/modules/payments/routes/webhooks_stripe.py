# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/webhooks_stripe.py

Webhook endpoint para Stripe.

Endpoint:
- POST /api/stripe/webhook

Público (sin auth de usuario): la autenticidad la da la firma
Stripe-Signature sobre el body crudo.

Respuestas:
- 200 {"received": true, "status": processed|skipped|ignored}
- 400 firma ausente o inválida (Stripe no reintenta)
- 500 fallo del despacho; el evento queda processed=false y Stripe reintenta

Fecha: 2026-10-17
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import get_async_session
from app.shared.errors import CoreError, UnauthenticatedError
from app.modules.payments.routes.payments_routes import get_reconciler
from app.modules.payments.schemas import WebhookAck
from app.modules.payments.services import PaymentReconciler

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/stripe",
    tags=["payments:webhooks"],
)


@router.post("/webhook", response_model=WebhookAck, status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None, alias="Stripe-Signature"),
    session: AsyncSession = Depends(get_async_session),
    reconciler: PaymentReconciler = Depends(get_reconciler),
):
    if not stripe_signature:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing Stripe-Signature header")

    raw_body = await request.body()
    try:
        outcome = await reconciler.handle_webhook_event(session, raw_body, stripe_signature)
    except UnauthenticatedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except (CoreError, SQLAlchemyError) as e:
        logger.error("Stripe webhook processing failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook processing failed",
        )

    return WebhookAck.from_outcome(outcome)


__all__ = ["router"]

# Fin del archivo app/modules/payments/routes/webhooks_stripe.py
