# -*- coding: utf-8 -*-
"""
app/modules/tenants/enums/__init__.py

Superficie de exportación de enums del módulo Tenants.
"""

from .payment_mode_enum import PaymentMode

__all__ = ["PaymentMode"]

# Fin del archivo app/modules/tenants/enums/__init__.py
