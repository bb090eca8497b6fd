# -*- coding: utf-8 -*-
"""
app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import settings, get_settings

`settings` es un proxy perezoso: no instancia la configuración al importar
(evita validaciones prematuras durante la recolección de tests) y delega
cada atributo al objeto devuelto por config_loader.get_settings().
"""

from __future__ import annotations

from typing import Any

from .config_loader import get_settings
from .settings_payments import get_payments_settings


class _SettingsProxy:
    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return f"<SettingsProxy {type(get_settings()).__name__}>"


# Singleton accesible como `settings` (lazy-load via getter)
settings = _SettingsProxy()

__all__ = ["settings", "get_settings", "get_payments_settings"]
# Fin del archivo app/shared/config/__init__.py
