# -*- coding: utf-8 -*-
"""
app/shared/__init__.py

Infraestructura compartida por los módulos de dominio: configuración,
base de datos, errores tipados, autenticación por tenant y utilidades.

No inicializa settings en import-time para evitar efectos colaterales
durante la recolección de tests.

Fecha: 2026-10-17
"""

# Fin del archivo app/shared/__init__.py
