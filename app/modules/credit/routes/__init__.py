# -*- coding: utf-8 -*-
"""
app/modules/credit/routes/__init__.py

Router agregado del módulo Credit.
"""

from .credit_routes import get_ledger_service, router

__all__ = ["router", "get_ledger_service"]

# Fin del archivo app/modules/credit/routes/__init__.py
