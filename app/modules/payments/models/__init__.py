# -*- coding: utf-8 -*-
"""
app/modules/payments/models/__init__.py

Exporta los modelos ORM del módulo Payments.
"""

from .payment_models import Payment
from .webhook_event_models import WebhookEvent

__all__ = ["Payment", "WebhookEvent"]

# Fin del archivo app/modules/payments/models/__init__.py
