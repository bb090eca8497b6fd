# -*- coding: utf-8 -*-
"""
app/modules/credit/enums/__init__.py

Superficie de exportación de enums del módulo Credit.

Incluye:
- CreditStatus
- CreditTransactionStatus
"""

from .credit_status_enum import CreditStatus
from .credit_transaction_status_enum import CreditTransactionStatus

__all__ = ["CreditStatus", "CreditTransactionStatus"]

# Fin del archivo app/modules/credit/enums/__init__.py
