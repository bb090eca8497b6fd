# -*- coding: utf-8 -*-
"""
app/modules/payments/services/__init__.py

Exporta los servicios del módulo Payments.
"""

from .payment_service import PaymentService, PaymentView
from .reconciler_service import CreatedIntent, PaymentReconciler, WebhookOutcome
from .webhook_dispatch import IntentMapping, map_intent_status

__all__ = [
    "CreatedIntent",
    "IntentMapping",
    "PaymentReconciler",
    "PaymentService",
    "PaymentView",
    "WebhookOutcome",
    "map_intent_status",
]

# Fin del archivo app/modules/payments/services/__init__.py
