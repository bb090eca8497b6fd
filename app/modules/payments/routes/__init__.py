# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/__init__.py

Routers del módulo Payments.

Incluye:
- /api/tenants/{tenant_id}/payments*, create-payment-intent, confirm-payment,
  refund-payment
- /api/stripe/webhook
"""

from .payments_routes import get_payment_service, get_reconciler, router as payments_router
from .webhooks_stripe import router as webhooks_stripe_router

__all__ = [
    "payments_router",
    "webhooks_stripe_router",
    "get_payment_service",
    "get_reconciler",
]

# Fin del archivo app/modules/payments/routes/__init__.py
