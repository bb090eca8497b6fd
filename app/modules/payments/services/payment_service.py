# -*- coding: utf-8 -*-
"""
app/modules/payments/services/payment_service.py

Servicio de pagos del tenant fuera del flujo del gateway.

Flujos cubiertos:
- Listado de pagos con nombre del cliente
- Estadísticas del día (UTC) y volumen histórico
- Configuración de pagos efectiva del tenant
- Registro de pagos manuales (efectivo, transferencia, ACH, custom)
- Cambio manual de estado para pagos sin intent del gateway

Los pagos con tarjeta solo cambian de estado a través del reconciliador.

Fecha: 2026-10-17
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import get_payments_settings
from app.shared.database.base import utcnow
from app.shared.errors import (
    ForeignReferenceError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from app.shared.utils.money import MoneyLike, to_money
from app.modules.payments.enums import PaymentMethod, PaymentStatus
from app.modules.payments.models import Payment
from app.modules.payments.repositories import PaymentRepository, PaymentTotals
from app.modules.tenants.repositories import (
    CustomerRepository,
    PaymentSettingsView,
    TenantRepository,
)

logger = logging.getLogger(__name__)

# Estados con los que se puede registrar un pago manual
MANUAL_INITIAL_STATUSES = frozenset({PaymentStatus.PENDING, PaymentStatus.COMPLETED})


@dataclass(frozen=True)
class PaymentView:
    payment: Payment
    customer_name: Optional[str]


def start_of_utc_day(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)


class PaymentService:
    def __init__(
        self,
        payment_repo: Optional[PaymentRepository] = None,
        tenant_repo: Optional[TenantRepository] = None,
        customer_repo: Optional[CustomerRepository] = None,
    ) -> None:
        self.payment_repo = payment_repo or PaymentRepository()
        self.tenant_repo = tenant_repo or TenantRepository()
        self.customer_repo = customer_repo or CustomerRepository()

    # ------------------------------------------------------------------ #
    # Lecturas
    # ------------------------------------------------------------------ #
    async def list_payments(
        self,
        session: AsyncSession,
        tenant_id: str,
        status: Optional[PaymentStatus] = None,
    ) -> list[PaymentView]:
        rows = await self.payment_repo.list_with_customer(session, tenant_id, status)
        return [PaymentView(payment=p, customer_name=name) for p, name in rows]

    async def get_payment_statistics(
        self,
        session: AsyncSession,
        tenant_id: str,
        now: Optional[datetime] = None,
    ) -> PaymentTotals:
        """Totales del día desde la medianoche UTC + volumen completado histórico."""
        since = start_of_utc_day(now or utcnow())
        return await self.payment_repo.totals(session, tenant_id, since)

    async def get_payment_settings(self, session: AsyncSession, tenant_id: str) -> PaymentSettingsView:
        if not await self.tenant_repo.exists(session, tenant_id):
            raise NotFoundError("Tenant", tenant_id)
        return await self.tenant_repo.get_payment_settings(
            session, tenant_id, get_payments_settings().default_currency
        )

    # ------------------------------------------------------------------ #
    # Pagos manuales
    # ------------------------------------------------------------------ #
    async def record_manual_payment(
        self,
        session: AsyncSession,
        tenant_id: str,
        amount: MoneyLike,
        method: PaymentMethod,
        status: PaymentStatus = PaymentStatus.COMPLETED,
        customer_id: Optional[str] = None,
        order_id: Optional[str] = None,
        currency: Optional[str] = None,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Payment:
        """
        Registra un pago que no pasa por el gateway.

        Raises:
            InvalidInputError: método card, estado inicial no permitido o monto <= 0
            ForeignReferenceError: tenant o cliente inexistente
        """
        method = PaymentMethod(method)
        status = PaymentStatus(status)
        if method.uses_gateway:
            raise InvalidInputError("method", "Los pagos con tarjeta se crean con un payment intent")
        if status not in MANUAL_INITIAL_STATUSES:
            raise InvalidInputError("status", "Un pago manual inicia como pending o completed")
        amount_dec = to_money(amount, "amount")
        if amount_dec <= 0:
            raise InvalidInputError("amount", "El monto debe ser > 0")

        if not await self.tenant_repo.exists(session, tenant_id):
            raise ForeignReferenceError("tenant", tenant_id)
        if customer_id and not await self.customer_repo.exists_in_tenant(session, tenant_id, customer_id):
            raise ForeignReferenceError("customer", customer_id)

        settings_view = await self.tenant_repo.get_payment_settings(
            session, tenant_id, get_payments_settings().default_currency
        )
        try:
            payment = await self.payment_repo.create(
                session,
                tenant_id=tenant_id,
                customer_id=customer_id,
                order_id=order_id,
                amount=amount_dec,
                currency=(currency or settings_view.default_currency).lower(),
                status=status,
                method=method,
                notes=notes,
                created_by=created_by,
                payment_metadata={},
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        logger.info(
            "Manual payment recorded payment=%s tenant=%s method=%s status=%s amount=%s",
            payment.id, tenant_id, method, status, amount_dec,
        )
        return payment

    async def update_payment_status(
        self,
        session: AsyncSession,
        tenant_id: str,
        payment_id: str,
        status: PaymentStatus,
        notes: Optional[str] = None,
    ) -> Payment:
        """
        Cambio manual de estado de un pago sin intent del gateway.

        Raises:
            NotFoundError: el pago no existe en el tenant
            InvalidStateError: pago del gateway o transición no permitida
        """
        target = PaymentStatus(status)
        payment = await self.payment_repo.get_scoped(session, tenant_id, payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        if payment.is_gateway_backed:
            raise InvalidStateError(
                str(payment.status),
                "update_status",
                "El estado de un pago con tarjeta lo determina el gateway",
            )

        current = PaymentStatus(payment.status)
        if not current.can_transition_to(target):
            raise InvalidStateError(str(current), "update_status")

        values = {"notes": notes} if notes is not None else {}
        try:
            result = await self.payment_repo.update_status(
                session, tenant_id, payment_id, target, (current,), **values
            )
            if not result.applied:
                raise InvalidStateError(str(result.payment.status), "update_status")
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        logger.info("Payment status updated payment=%s tenant=%s %s -> %s", payment_id, tenant_id, current, target)
        return result.payment  # type: ignore[return-value]


__all__ = ["MANUAL_INITIAL_STATUSES", "PaymentService", "PaymentView", "start_of_utc_day"]

# Fin del archivo app/modules/payments/services/payment_service.py
