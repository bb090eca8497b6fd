# -*- coding: utf-8 -*-
"""
tests/modules/payments/conftest.py

Fixtures del módulo Payments:
- Reconciliador con el gateway en memoria
- Constructores de payment intents / eventos Stripe firmados
- Pago pendiente creado por el flujo normal de create_payment_intent

Fecha: 2026-10-17
"""

import hashlib
import hmac
import json
import time
import uuid
from decimal import Decimal
from typing import Optional

import pytest

from app.modules.payments.services import PaymentReconciler


def _make_stripe_sig(payload: bytes, secret: str, ts: int) -> str:
    """Genera una firma Stripe válida para testing."""
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    mac = hmac.new(secret.encode("utf-8"), msg=signed, digestmod=hashlib.sha256)
    return f"t={ts},v1={mac.hexdigest()}"


@pytest.fixture
def reconciler(fake_gateway) -> PaymentReconciler:
    return PaymentReconciler(fake_gateway)


@pytest.fixture
def intent_object():
    """Construye el data.object de un evento payment_intent.*"""

    def _build(
        intent_id: str,
        status: str,
        tenant_id: Optional[str],
        payment_id: Optional[str] = None,
        amount: int = 5000,
        charge_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> dict:
        metadata = {}
        if tenant_id:
            metadata["tenant_id"] = tenant_id
        if payment_id:
            metadata["payment_id"] = payment_id
        obj = {
            "id": intent_id,
            "object": "payment_intent",
            "status": status,
            "amount": amount,
            "currency": "usd",
            "latest_charge": charge_id,
            "metadata": metadata,
        }
        if error_message:
            obj["last_payment_error"] = {"code": "card_declined", "message": error_message}
        return obj

    return _build


@pytest.fixture
def signed_event(webhook_secret):
    """(payload, Stripe-Signature) de un evento con firma válida."""

    def _build(event_type: str, data_object: dict, event_id: Optional[str] = None) -> tuple[bytes, str]:
        ts = int(time.time())
        body = {
            "id": event_id or f"evt_{uuid.uuid4().hex[:24]}",
            "object": "event",
            "type": event_type,
            "created": ts,
            "data": {"object": data_object},
        }
        payload = json.dumps(body).encode("utf-8")
        return payload, _make_stripe_sig(payload, webhook_secret, ts)

    return _build


@pytest.fixture
async def pending_payment(db_session, reconciler, tenant_id, customer_id):
    """Pago con tarjeta pending (50.00 usd) con su intent en el gateway."""
    created = await reconciler.create_payment_intent(
        db_session, tenant_id, Decimal("50.00"), currency="usd", customer_id=customer_id
    )
    return created.payment


@pytest.fixture
def stripe_sig():
    return _make_stripe_sig

# Fin del archivo tests/modules/payments/conftest.py
