# -*- coding: utf-8 -*-
"""
app/modules/tenants/repositories/tenant_repository.py

Lecturas de tenants, clientes y configuración de pagos.

Responsabilidades:
- Resolver existencia de tenant y de cliente dentro de un tenant
- Nombres de clientes para los listados del ledger y de pagos
- Configuración de pagos con defaults cuando el tenant no tiene fila

Fecha: 2026-10-17
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository, TenantScopedRepository
from app.modules.tenants.enums import PaymentMode
from app.modules.tenants.models import Customer, Tenant, TenantSettings


@dataclass(frozen=True)
class PaymentSettingsView:
    """Configuración de pagos efectiva de un tenant (con defaults aplicados)."""

    tenant_id: str
    payment_mode: PaymentMode
    application_fee_bps: int
    default_currency: str
    stripe_account_id: Optional[str]

    @property
    def routes_to_connected_account(self) -> bool:
        return self.payment_mode.is_connect and bool(self.stripe_account_id)


class TenantRepository(BaseRepository[Tenant]):
    def __init__(self) -> None:
        super().__init__(Tenant)

    async def exists(self, session: AsyncSession, tenant_id: str) -> bool:
        result = await session.execute(select(Tenant.id).where(Tenant.id == tenant_id))
        return result.scalar_one_or_none() is not None

    async def get_payment_settings(
        self,
        session: AsyncSession,
        tenant_id: str,
        default_currency: str = "usd",
    ) -> PaymentSettingsView:
        """
        Devuelve la configuración de pagos del tenant.

        Sin fila en settings_tenant: platform / 0 bps / default_currency / sin cuenta.
        """
        result = await session.execute(
            select(TenantSettings).where(TenantSettings.tenant_id == tenant_id)
        )
        row = result.scalars().first()
        if row is None:
            return PaymentSettingsView(
                tenant_id=tenant_id,
                payment_mode=PaymentMode.PLATFORM,
                application_fee_bps=0,
                default_currency=default_currency,
                stripe_account_id=None,
            )
        return PaymentSettingsView(
            tenant_id=tenant_id,
            payment_mode=PaymentMode(row.payment_mode),
            application_fee_bps=max(int(row.application_fee_bps or 0), 0),
            default_currency=(row.default_currency or default_currency).lower(),
            stripe_account_id=row.stripe_account_id,
        )


class CustomerRepository(TenantScopedRepository[Customer]):
    def __init__(self) -> None:
        super().__init__(Customer)

    async def exists_in_tenant(self, session: AsyncSession, tenant_id: str, customer_id: str) -> bool:
        result = await session.execute(
            select(Customer.id).where(Customer.tenant_id == tenant_id, Customer.id == customer_id)
        )
        return result.scalar_one_or_none() is not None


__all__ = ["PaymentSettingsView", "TenantRepository", "CustomerRepository"]

# Fin del archivo app/modules/tenants/repositories/tenant_repository.py
