# -*- coding: utf-8 -*-
"""
app/shared/database/repository.py

Repositorios base para operaciones async con SQLAlchemy.

- BaseRepository: alta/baja genérica sobre un modelo.
- TenantScopedRepository: toda lectura de una fila que pertenece a un tenant
  se filtra por `tenant_id`; no existe lookup público solo por id.

Fecha: 2026-10-17
"""

from __future__ import annotations

from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Repositorio asincrónico base para CRUD común."""

    def __init__(self, model: Type[T]):
        self.model = model

    # -------------------------------------------------------------
    # CRUD básico
    # -------------------------------------------------------------
    async def create(self, session: AsyncSession, **kwargs: Any) -> T:
        obj = self.model(**kwargs)
        session.add(obj)
        await session.flush()
        return obj

    async def delete(self, session: AsyncSession, obj: T) -> None:
        await session.delete(obj)
        await session.flush()


class TenantScopedRepository(BaseRepository[T]):
    """
    Repositorio para modelos con columna `tenant_id`.

    Cada consulta construida con `_scoped()` ya incluye el filtro por tenant.
    """

    def _scoped(self, tenant_id: str) -> Select:
        return select(self.model).where(self.model.tenant_id == tenant_id)  # type: ignore[attr-defined]

    async def get_scoped(
        self,
        session: AsyncSession,
        tenant_id: str,
        obj_id: Any,
        *,
        for_update: bool = False,
    ) -> Optional[T]:
        """
        Obtiene una fila por (id, tenant_id); None si no pertenece al tenant.

        Siempre refresca la identidad en sesión (populate_existing), ya que
        los UPDATE guardados no sincronizan los objetos cargados.
        """
        stmt = (
            self._scoped(tenant_id)
            .where(self.model.id == obj_id)  # type: ignore[attr-defined]
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_by_tenant(self, session: AsyncSession, tenant_id: str) -> Sequence[T]:
        result = await session.execute(self._scoped(tenant_id))
        return result.scalars().all()


__all__ = ["BaseRepository", "TenantScopedRepository"]

# Fin del archivo app/shared/database/repository.py
