# -*- coding: utf-8 -*-
"""
app/modules/credit/schemas/__init__.py

Exporta los esquemas del módulo Credit.
"""

from .credit_schemas import (
    AppliedTransactionOut,
    BalanceUpdate,
    CreditAccountCreate,
    CreditAccountOut,
    CreditTransactionCreate,
    CreditTransactionOut,
    MarkPaidRequest,
)

__all__ = [
    "AppliedTransactionOut",
    "BalanceUpdate",
    "CreditAccountCreate",
    "CreditAccountOut",
    "CreditTransactionCreate",
    "CreditTransactionOut",
    "MarkPaidRequest",
]

# Fin del archivo app/modules/credit/schemas/__init__.py
