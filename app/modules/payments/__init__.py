# -*- coding: utf-8 -*-
"""
app/modules/payments/__init__.py

Módulo Payments: reconciliación de pagos locales con payment intents de
Stripe (confirmación síncrona + webhooks asíncronos idempotentes).

Fecha: 2026-10-17
"""

# Fin del archivo app/modules/payments/__init__.py
