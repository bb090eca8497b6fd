# -*- coding: utf-8 -*-
"""
app/modules/credit/services/__init__.py

Exporta los servicios del módulo Credit.
"""

from .ledger_service import (
    AppliedTransaction,
    CreditAccountView,
    CreditLedgerService,
    CreditTransactionView,
)

__all__ = [
    "AppliedTransaction",
    "CreditAccountView",
    "CreditLedgerService",
    "CreditTransactionView",
]

# Fin del archivo app/modules/credit/services/__init__.py
