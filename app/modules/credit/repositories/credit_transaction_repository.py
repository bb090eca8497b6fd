# -*- coding: utf-8 -*-
"""
app/modules/credit/repositories/credit_transaction_repository.py

Repositorio para la tabla credit_transactions.

Responsabilidades:
- Transiciones de estado con guardia (pending/overdue -> paid)
- Barrido pending -> overdue por fecha de vencimiento
- Listado por tenant con nombre del cliente

Fecha: 2026-10-17
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import TenantScopedRepository
from app.modules.credit.enums import CreditTransactionStatus
from app.modules.credit.models import CreditTransaction
from app.modules.tenants.models import Customer


class CreditTransactionRepository(TenantScopedRepository[CreditTransaction]):
    def __init__(self) -> None:
        super().__init__(CreditTransaction)

    async def transition_status(
        self,
        session: AsyncSession,
        tenant_id: str,
        transaction_id: str,
        allowed_from: Iterable[CreditTransactionStatus],
        **values,
    ) -> int:
        """UPDATE guardado por el estado actual; devuelve filas afectadas."""
        stmt = (
            update(CreditTransaction)
            .where(
                CreditTransaction.id == transaction_id,
                CreditTransaction.tenant_id == tenant_id,
                CreditTransaction.status.in_(list(allowed_from)),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def mark_overdue(self, session: AsyncSession, tenant_id: str, now: datetime) -> int:
        stmt = (
            update(CreditTransaction)
            .where(
                CreditTransaction.tenant_id == tenant_id,
                CreditTransaction.status == CreditTransactionStatus.PENDING,
                CreditTransaction.due_date < now,
            )
            .values(status=CreditTransactionStatus.OVERDUE)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def list_with_customer(
        self,
        session: AsyncSession,
        tenant_id: str,
        customer_id: Optional[str] = None,
    ) -> Sequence[tuple[CreditTransaction, Optional[str]]]:
        """Transacciones del tenant (más recientes primero) con nombre del cliente."""
        stmt = (
            select(CreditTransaction, Customer.name)
            .outerjoin(
                Customer,
                (Customer.id == CreditTransaction.customer_id)
                & (Customer.tenant_id == CreditTransaction.tenant_id),
            )
            .where(CreditTransaction.tenant_id == tenant_id)
        )
        if customer_id is not None:
            stmt = stmt.where(CreditTransaction.customer_id == customer_id)
        stmt = stmt.order_by(CreditTransaction.created_at.desc())
        result = await session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]


__all__ = ["CreditTransactionRepository"]

# Fin del archivo app/modules/credit/repositories/credit_transaction_repository.py
