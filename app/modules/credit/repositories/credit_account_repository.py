# -*- coding: utf-8 -*-
"""
app/modules/credit/repositories/credit_account_repository.py

Repositorio para la tabla credit_accounts.

Responsabilidades:
- Lookup de la cuenta por (tenant, cliente), opcionalmente con bloqueo de fila
- Compare-and-set del saldo (UPDATE ... WHERE balance = observado)
- Override manual del saldo acotado por (id, tenant)
- Listado por tenant con nombre del cliente

Fecha: 2026-10-17
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.shared.database.base import utcnow
from app.shared.database.repository import TenantScopedRepository
from app.modules.credit.models import CreditAccount
from app.modules.tenants.models import Customer


class CreditAccountRepository(TenantScopedRepository[CreditAccount]):
    def __init__(self) -> None:
        super().__init__(CreditAccount)

    async def get_by_customer(
        self,
        session: AsyncSession,
        tenant_id: str,
        customer_id: str,
        *,
        for_update: bool = False,
    ) -> Optional[CreditAccount]:
        """
        Cuenta del cliente dentro del tenant.

        Con for_update=True emite SELECT ... FOR UPDATE y refresca la
        identidad ya cargada en la sesión (populate_existing).
        """
        stmt = self._scoped(tenant_id).where(CreditAccount.customer_id == customer_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def compare_and_set_balance(
        self,
        session: AsyncSession,
        account: CreditAccount,
        expected: Decimal,
        new_balance: Decimal,
    ) -> bool:
        """
        Escribe new_balance solo si el saldo sigue siendo `expected`.

        Devuelve False si otra transacción cambió el saldo en medio.
        """
        now = utcnow()
        stmt = (
            update(CreditAccount)
            .where(
                CreditAccount.id == account.id,
                CreditAccount.tenant_id == account.tenant_id,
                CreditAccount.balance == expected,
            )
            .values(balance=new_balance, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount != 1:
            return False
        set_committed_value(account, "balance", new_balance)
        set_committed_value(account, "updated_at", now)
        return True

    async def override_balance(
        self,
        session: AsyncSession,
        tenant_id: str,
        credit_id: str,
        new_balance: Decimal,
    ) -> int:
        """
        Override directo del saldo acotado por (id, tenant) y por el límite.

        Devuelve el número de filas afectadas (0 si no pertenece al tenant
        o si new_balance supera el límite).
        """
        stmt = (
            update(CreditAccount)
            .where(
                CreditAccount.id == credit_id,
                CreditAccount.tenant_id == tenant_id,
                CreditAccount.limit_amount >= new_balance,
            )
            .values(balance=new_balance, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def list_with_customer(
        self,
        session: AsyncSession,
        tenant_id: str,
    ) -> Sequence[tuple[CreditAccount, Optional[str]]]:
        """Cuentas del tenant con el nombre del cliente (LEFT JOIN)."""
        stmt = (
            select(CreditAccount, Customer.name)
            .outerjoin(
                Customer,
                (Customer.id == CreditAccount.customer_id) & (Customer.tenant_id == CreditAccount.tenant_id),
            )
            .where(CreditAccount.tenant_id == tenant_id)
            .order_by(CreditAccount.created_at.desc())
        )
        result = await session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]


__all__ = ["CreditAccountRepository"]

# Fin del archivo app/modules/credit/repositories/credit_account_repository.py
