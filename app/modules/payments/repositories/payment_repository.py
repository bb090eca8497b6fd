# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/payment_repository.py

Repositorio para la tabla payments.

Responsabilidades:
- Búsqueda por (id, tenant, intent) y por intent dentro del tenant
- Transición de estado guardada: UPDATE ... WHERE status IN (origen válido)
- Listado por tenant con nombre del cliente y agregados del día

Fecha: 2026-10-17
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.base import utcnow
from app.shared.database.repository import TenantScopedRepository
from app.shared.utils.money import TWO_PLACES
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.models import Payment
from app.modules.tenants.models import Customer


@dataclass(frozen=True)
class StatusUpdateResult:
    payment: Optional[Payment]
    applied: bool


@dataclass(frozen=True)
class PaymentTotals:
    today_processed: Decimal
    today_pending: Decimal
    today_failed: int
    total_volume: Decimal


def _money(value: Any) -> Decimal:
    # Agregados: pueden superar el tope de una fila NUMERIC(10,2)
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class PaymentRepository(TenantScopedRepository[Payment]):
    def __init__(self) -> None:
        super().__init__(Payment)

    # -----------------------------------------------------------
    # Búsquedas
    # -----------------------------------------------------------
    async def get_for_intent(
        self,
        session: AsyncSession,
        tenant_id: str,
        payment_id: str,
        payment_intent_id: str,
    ) -> Optional[Payment]:
        """Pago que coincide con la tripleta (id, tenant, intent)."""
        stmt = (
            self._scoped(tenant_id)
            .where(Payment.id == payment_id, Payment.payment_intent_id == payment_intent_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def get_by_intent(
        self,
        session: AsyncSession,
        tenant_id: str,
        payment_intent_id: str,
    ) -> Optional[Payment]:
        """Pago del tenant asociado a un intent del proveedor."""
        stmt = (
            self._scoped(tenant_id)
            .where(Payment.payment_intent_id == payment_intent_id)
            .order_by(Payment.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    # -----------------------------------------------------------
    # Escritura guardada por estado
    # -----------------------------------------------------------
    async def update_status(
        self,
        session: AsyncSession,
        tenant_id: str,
        payment_id: str,
        target: PaymentStatus,
        allowed_from: Iterable[PaymentStatus],
        **values: Any,
    ) -> StatusUpdateResult:
        """
        Aplica status + valores + updated_at en un único UPDATE acotado por
        (id, tenant) y por el estado de origen.

        Si otro escritor ya movió el pago, no escribe nada y devuelve la fila
        actual con applied=False. No hace commit.
        """
        stmt = (
            update(Payment)
            .where(
                Payment.id == payment_id,
                Payment.tenant_id == tenant_id,
                Payment.status.in_(list(allowed_from)),
            )
            .values(
                {
                    Payment.status: target,
                    Payment.updated_at: utcnow(),
                    **{getattr(Payment, key): value for key, value in values.items()},
                }
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        applied = result.rowcount == 1
        payment = await self.get_scoped(session, tenant_id, payment_id)
        return StatusUpdateResult(payment=payment, applied=applied)

    # -----------------------------------------------------------
    # Listados y agregados
    # -----------------------------------------------------------
    async def list_with_customer(
        self,
        session: AsyncSession,
        tenant_id: str,
        status: Optional[PaymentStatus] = None,
    ) -> Sequence[tuple[Payment, Optional[str]]]:
        stmt = (
            select(Payment, Customer.name)
            .outerjoin(
                Customer,
                (Customer.id == Payment.customer_id) & (Customer.tenant_id == Payment.tenant_id),
            )
            .where(Payment.tenant_id == tenant_id)
        )
        if status is not None:
            stmt = stmt.where(Payment.status == status)
        stmt = stmt.order_by(Payment.created_at.desc())
        result = await session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def totals(self, session: AsyncSession, tenant_id: str, since: datetime) -> PaymentTotals:
        """Agregados de pagos del tenant: del día (desde `since`) e históricos."""
        today = Payment.created_at >= since
        stmt = select(
            func.coalesce(
                func.sum(case((today & (Payment.status == PaymentStatus.COMPLETED), Payment.amount))), 0
            ),
            func.coalesce(
                func.sum(case((today & (Payment.status == PaymentStatus.PENDING), Payment.amount))), 0
            ),
            func.count(case((today & (Payment.status == PaymentStatus.FAILED), Payment.id))),
            func.coalesce(
                func.sum(case((Payment.status == PaymentStatus.COMPLETED, Payment.amount))), 0
            ),
        ).where(Payment.tenant_id == tenant_id)
        row = (await session.execute(stmt)).one()
        return PaymentTotals(
            today_processed=_money(row[0]),
            today_pending=_money(row[1]),
            today_failed=int(row[2] or 0),
            total_volume=_money(row[3]),
        )


__all__ = ["PaymentRepository", "PaymentTotals", "StatusUpdateResult"]

# Fin del archivo app/modules/payments/repositories/payment_repository.py
