# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/__init__.py

Exporta los repositorios del módulo Payments.
"""

from .payment_repository import PaymentRepository, PaymentTotals, StatusUpdateResult
from .webhook_event_repository import WebhookEventRepository

__all__ = [
    "PaymentRepository",
    "PaymentTotals",
    "StatusUpdateResult",
    "WebhookEventRepository",
]

# Fin del archivo app/modules/payments/repositories/__init__.py
