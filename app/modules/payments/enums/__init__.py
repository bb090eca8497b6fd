# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/__init__.py

Superficie de exportación de enums del módulo Payments.

Incluye:
- PaymentMethod
- PaymentStatus
"""

from .payment_method_enum import PaymentMethod
from .payment_status_enum import PaymentStatus

__all__ = ["PaymentMethod", "PaymentStatus"]

# Fin del archivo app/modules/payments/enums/__init__.py
