# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhook_dispatch.py

Traducción de estados del proveedor a estados locales del pago.

La misma tabla la usan confirm_payment y el despacho de webhooks:

    succeeded                         -> completed (+ charge_id)
    requires_payment_method, canceled -> failed    (+ failure_reason)
    cualquier otro                    -> pending   (sin escritura)

Fecha: 2026-10-17
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from app.modules.payments.enums import PaymentStatus
from app.modules.payments.gateway.base import GatewayEvent, GatewayIntent
from app.modules.payments.gateway.stripe_gateway import to_gateway_intent

DEFAULT_FAILURE_REASON = "Payment failed"

# Tipos de evento con intent en data.object
INTENT_EVENT_TYPES = frozenset(
    {
        "payment_intent.succeeded",
        "payment_intent.payment_failed",
        "payment_intent.canceled",
    }
)
CHARGE_REFUNDED = "charge.refunded"
ACCOUNT_UPDATED = "account.updated"

_FAILED_INTENT_STATUSES = frozenset({"requires_payment_method", "canceled"})


@dataclass(frozen=True)
class IntentMapping:
    """Estado local derivado de un intent y los valores a escribir con él."""

    status: PaymentStatus
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def requires_write(self) -> bool:
        return self.status is not PaymentStatus.PENDING


def map_intent_status(intent: GatewayIntent) -> IntentMapping:
    if intent.status == "succeeded":
        return IntentMapping(
            PaymentStatus.COMPLETED,
            {"charge_id": intent.charge_id, "failure_reason": None},
        )
    if intent.status in _FAILED_INTENT_STATUSES:
        return IntentMapping(
            PaymentStatus.FAILED,
            {"failure_reason": intent.failure_reason or DEFAULT_FAILURE_REASON},
        )
    return IntentMapping(PaymentStatus.PENDING)


def intent_from_event(event: GatewayEvent) -> GatewayIntent:
    """Intent tal como viene en el payload del webhook (sin consultar al gateway)."""
    return to_gateway_intent(event.data_object)


def event_tenant_id(event: GatewayEvent) -> Optional[str]:
    value = event.metadata.get("tenant_id")
    return str(value) if value else None


def event_intent_id(event: GatewayEvent) -> Optional[str]:
    """Intent referido por el evento: el propio objeto o charge.payment_intent."""
    if event.type == CHARGE_REFUNDED:
        value = event.data_object.get("payment_intent")
        return str(value) if value else None
    return event.object_id


__all__ = [
    "ACCOUNT_UPDATED",
    "CHARGE_REFUNDED",
    "DEFAULT_FAILURE_REASON",
    "INTENT_EVENT_TYPES",
    "IntentMapping",
    "event_intent_id",
    "event_tenant_id",
    "intent_from_event",
    "map_intent_status",
]

# Fin del archivo app/modules/payments/services/webhook_dispatch.py
