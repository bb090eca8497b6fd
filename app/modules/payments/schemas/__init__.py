# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/__init__.py

Exporta los esquemas del módulo Payments.
"""

from .payment_schemas import (
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
    WebhookAck,
)

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

# Fin del archivo app/modules/payments/schemas/__init__.py
