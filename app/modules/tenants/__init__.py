# -*- coding: utf-8 -*-
"""
app/modules/tenants/__init__.py

Módulo Tenants (colaborador externo mínimo del core).

Solo expone lo que el ledger y el reconciliador consumen: existencia de
tenant/cliente y configuración de pagos por tenant. El CRUD de tenants y
clientes vive fuera de este servicio.

Fecha: 2026-10-17
"""

# Fin del archivo app/modules/tenants/__init__.py
