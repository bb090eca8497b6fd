# -*- coding: utf-8 -*-
"""
app/modules/credit/__init__.py

Módulo Credit: ledger de cuentas de crédito de clientes.

Mantiene el invariante saldo <= límite bajo aplicación concurrente de
transacciones. Convención de signo: saldo positivo = monto adeudado por
el cliente contra su límite.

Fecha: 2026-10-17
"""

# Fin del archivo app/modules/credit/__init__.py
