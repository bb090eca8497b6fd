# -*- coding: utf-8 -*-
"""
app/modules/tenants/models/__init__.py

Exporta los modelos ORM del módulo Tenants.
"""

from .tenant_models import Tenant, Customer, TenantSettings

__all__ = ["Tenant", "Customer", "TenantSettings"]

# Fin del archivo app/modules/tenants/models/__init__.py
