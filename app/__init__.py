# -*- coding: utf-8 -*-
"""
app/__init__.py

Paquete principal del backend PharmaDesk: ledger de crédito de clientes y
reconciliación de pagos con Stripe, multi-tenant.

Fecha: 2026-10-17
"""

# Fin del archivo app/__init__.py
