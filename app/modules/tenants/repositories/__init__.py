# -*- coding: utf-8 -*-
"""
app/modules/tenants/repositories/__init__.py

Exporta los repositorios del módulo Tenants.
"""

from .tenant_repository import CustomerRepository, PaymentSettingsView, TenantRepository

__all__ = ["CustomerRepository", "PaymentSettingsView", "TenantRepository"]

# Fin del archivo app/modules/tenants/repositories/__init__.py
