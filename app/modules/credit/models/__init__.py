# -*- coding: utf-8 -*-
"""
app/modules/credit/models/__init__.py

Exporta los modelos ORM del módulo Credit.
"""

from .credit_account_models import CreditAccount
from .credit_transaction_models import CreditTransaction

__all__ = ["CreditAccount", "CreditTransaction"]

# Fin del archivo app/modules/credit/models/__init__.py
