# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/payment_schemas.py

Esquemas de request/response de pagos.

Los endpoints del flujo de tarjeta aceptan y devuelven las claves en
camelCase que usa el cliente web (paymentId, paymentIntentId,
clientSecret); internamente todo es snake_case.

Fecha: 2026-10-17
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.modules.payments.enums import PaymentMethod, PaymentStatus
from app.modules.payments.repositories import PaymentTotals
from app.modules.payments.services import CreatedIntent, PaymentView, WebhookOutcome
from app.modules.tenants.enums import PaymentMode


def _alias(snake: str, camel: str) -> AliasChoices:
    return AliasChoices(snake, camel)


# ---------------------------------------------------------------------------
# Pagos
# ---------------------------------------------------------------------------
class PaymentOut(BaseModel):
    id: str
    tenant_id: str
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    order_id: Optional[str] = None
    amount: Decimal
    currency: str
    status: PaymentStatus
    method: PaymentMethod
    payment_intent_id: Optional[str] = None
    charge_id: Optional[str] = None
    refund_id: Optional[str] = None
    failure_reason: Optional[str] = None
    notes: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    application_fee_bps: int = 0
    processing_fee_cents: int = 0
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_payment(cls, payment, customer_name: Optional[str] = None) -> "PaymentOut":
        return cls(
            id=payment.id,
            tenant_id=payment.tenant_id,
            customer_id=payment.customer_id,
            customer_name=customer_name,
            order_id=payment.order_id,
            amount=payment.amount,
            currency=payment.currency,
            status=payment.status,
            method=payment.method,
            payment_intent_id=payment.payment_intent_id,
            charge_id=payment.charge_id,
            refund_id=payment.refund_id,
            failure_reason=payment.failure_reason,
            notes=payment.notes,
            metadata=payment.payment_metadata or {},
            application_fee_bps=payment.application_fee_bps or 0,
            processing_fee_cents=payment.processing_fee_cents or 0,
            created_by=payment.created_by,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )

    @classmethod
    def from_view(cls, view: PaymentView) -> "PaymentOut":
        return cls.from_payment(view.payment, view.customer_name)


class ManualPaymentCreate(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    method: PaymentMethod = Field(description="cash, custom, transfer o ach.")
    status: PaymentStatus = Field(default=PaymentStatus.COMPLETED)
    customer_id: Optional[str] = Field(default=None, validation_alias=_alias("customer_id", "customerId"))
    order_id: Optional[str] = Field(default=None, validation_alias=_alias("order_id", "orderId"))
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    notes: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    notes: Optional[str] = None


class PaymentStatisticsOut(BaseModel):
    today_processed: Decimal
    today_pending: Decimal
    today_failed: int
    total_volume: Decimal

    @classmethod
    def from_totals(cls, totals: PaymentTotals) -> "PaymentStatisticsOut":
        return cls(
            today_processed=totals.today_processed,
            today_pending=totals.today_pending,
            today_failed=totals.today_failed,
            total_volume=totals.total_volume,
        )


class PaymentSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tenant_id: str
    payment_mode: PaymentMode
    application_fee_bps: int
    default_currency: str
    stripe_account_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Flujo de tarjeta (gateway)
# ---------------------------------------------------------------------------
class CreatePaymentIntentRequest(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    customer_id: Optional[str] = Field(default=None, validation_alias=_alias("customer_id", "customerId"))
    order_id: Optional[str] = Field(default=None, validation_alias=_alias("order_id", "orderId"))
    description: Optional[str] = None


class CreatePaymentIntentResponse(BaseModel):
    client_secret: Optional[str] = Field(serialization_alias="clientSecret")
    payment_id: str = Field(serialization_alias="paymentId")
    payment_intent_id: str = Field(serialization_alias="paymentIntentId")

    @classmethod
    def from_created(cls, created: CreatedIntent) -> "CreatePaymentIntentResponse":
        return cls(
            client_secret=created.client_secret,
            payment_id=created.payment.id,
            payment_intent_id=created.payment_intent_id,
        )


class ConfirmPaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payment_intent_id: str = Field(validation_alias=_alias("payment_intent_id", "paymentIntentId"))
    payment_id: str = Field(validation_alias=_alias("payment_id", "paymentId"))


class RefundPaymentRequest(BaseModel):
    payment_id: str = Field(validation_alias=_alias("payment_id", "paymentId"))
    amount: Optional[Decimal] = Field(
        default=None, gt=0, max_digits=10, decimal_places=2, description="Default: monto total del pago."
    )
    reason: Optional[str] = Field(default=None, max_length=500)


class RefundPaymentResponse(BaseModel):
    refund_id: Optional[str] = Field(serialization_alias="refundId")
    amount: Optional[Decimal] = None
    status: Optional[str] = None
    payment: PaymentOut

    @classmethod
    def from_payment(cls, payment) -> "RefundPaymentResponse":
        metadata = payment.payment_metadata or {}
        refund_amount = metadata.get("refund_amount")
        return cls(
            refund_id=payment.refund_id,
            amount=Decimal(refund_amount) if refund_amount is not None else None,
            status=metadata.get("refund_status"),
            payment=PaymentOut.from_payment(payment),
        )


class WebhookAck(BaseModel):
    received: bool = True
    status: str
    event_id: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: WebhookOutcome) -> "WebhookAck":
        return cls(status=outcome.status, event_id=outcome.event_id)


__all__ = [
    "ConfirmPaymentRequest",
    "CreatePaymentIntentRequest",
    "CreatePaymentIntentResponse",
    "ManualPaymentCreate",
    "PaymentOut",
    "PaymentSettingsOut",
    "PaymentStatisticsOut",
    "PaymentStatusUpdate",
    "RefundPaymentRequest",
    "RefundPaymentResponse",
    "WebhookAck",
]

# Fin del archivo app/modules/payments/schemas/payment_schemas.py
