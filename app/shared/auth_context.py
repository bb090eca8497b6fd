# -*- coding: utf-8 -*-
"""
app/shared/auth_context.py

Contexto de autenticación de cada request.

La autenticación la resuelve el proveedor de identidad externo; el proxy
de entrada inyecta los headers:
- X-User-Id:    identificador del usuario autenticado
- X-Tenant-Ids: lista separada por comas de tenants a los que pertenece

Este módulo solo valida la presencia de esos datos y la pertenencia al
tenant de la ruta (autorización por tenant antes de llamar al core).

Fecha: 2026-10-17
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Header, HTTPException, Path, status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    tenant_ids: frozenset[str] = field(default_factory=frozenset)

    def can_access(self, tenant_id: str) -> bool:
        return tenant_id in self.tenant_ids


def _parse_tenant_ids(raw: Optional[str]) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(t.strip() for t in raw.split(",") if t.strip())


async def get_auth_context(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    x_tenant_ids: Optional[str] = Header(default=None, alias="X-Tenant-Ids"),
) -> AuthContext:
    """
    Dependencia FastAPI: construye el AuthContext desde los headers.

    Raises:
        HTTPException 401: Si falta X-User-Id
    """
    if not x_user_id or not x_user_id.strip():
        logger.warning("Auth context missing X-User-Id")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user id in auth context",
        )
    return AuthContext(user_id=x_user_id.strip(), tenant_ids=_parse_tenant_ids(x_tenant_ids))


async def require_tenant_member(
    tenant_id: str = Path(...),
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    x_tenant_ids: Optional[str] = Header(default=None, alias="X-Tenant-Ids"),
) -> AuthContext:
    """
    Dependencia FastAPI para rutas bajo /api/tenants/{tenant_id}.

    Raises:
        HTTPException 401: Si falta X-User-Id
        HTTPException 403: Si el usuario no pertenece al tenant
    """
    ctx = await get_auth_context(x_user_id=x_user_id, x_tenant_ids=x_tenant_ids)
    if not ctx.can_access(tenant_id):
        logger.warning("User %s denied access to tenant %s", ctx.user_id, tenant_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not a member of this tenant",
        )
    return ctx


__all__ = [
    "AuthContext",
    "get_auth_context",
    "require_tenant_member",
]

# Fin del archivo app/shared/auth_context.py
