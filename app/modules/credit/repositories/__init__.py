# -*- coding: utf-8 -*-
"""
app/modules/credit/repositories/__init__.py

Exporta los repositorios del módulo Credit.
"""

from .credit_account_repository import CreditAccountRepository
from .credit_transaction_repository import CreditTransactionRepository

__all__ = ["CreditAccountRepository", "CreditTransactionRepository"]

# Fin del archivo app/modules/credit/repositories/__init__.py
