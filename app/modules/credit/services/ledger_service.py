# -*- coding: utf-8 -*-
"""
app/modules/credit/services/ledger_service.py

Servicio del ledger de crédito: operaciones atómicas sobre cuentas y
transacciones de crédito.

Regla central:
- balance positivo = monto adeudado por el cliente
- aplicar un cargo nunca deja balance > limit_amount
- el insert de la transacción y la actualización del saldo se confirman
  juntos o no se confirma ninguno

Concurrencia:
    Cada intento de apply_transaction es una unidad de trabajo:
    SELECT ... FOR UPDATE de la cuenta, chequeo exacto con Decimal, insert
    de la transacción y UPDATE compare-and-set del saldo. En PostgreSQL el
    bloqueo de fila serializa los cargos de una misma cuenta; el
    compare-and-set cubre almacenes sin bloqueo de fila, donde un intento
    perdido se revierte completo y se reintenta.

Fecha: 2026-10-17
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import get_payments_settings
from app.shared.database.base import utcnow
from app.shared.errors import (
    ConflictError,
    CoreError,
    ForeignReferenceError,
    InvalidInputError,
    InvalidStateError,
    LimitExceededError,
    NotFoundError,
)
from app.shared.utils.money import MoneyLike, to_money
from app.modules.credit.enums import CreditStatus, CreditTransactionStatus
from app.modules.credit.metrics import LEDGER_APPLY_RETRIES, observe_apply
from app.modules.credit.models import CreditAccount, CreditTransaction
from app.modules.credit.repositories import (
    CreditAccountRepository,
    CreditTransactionRepository,
)
from app.modules.tenants.repositories import CustomerRepository, TenantRepository

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resultados
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AppliedTransaction:
    account: CreditAccount
    transaction: CreditTransaction
    previous_balance: Decimal


@dataclass(frozen=True)
class CreditAccountView:
    account: CreditAccount
    customer_name: Optional[str]


@dataclass(frozen=True)
class CreditTransactionView:
    transaction: CreditTransaction
    customer_name: Optional[str]
    overdue: bool


def as_utc(value: datetime | date) -> datetime:
    """Normaliza fechas a datetime con zona UTC (naive se asume UTC)."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_overdue(tx: CreditTransaction, now: datetime) -> bool:
    """Vencida: marcada overdue, o pending con due_date en el pasado."""
    if tx.status == CreditTransactionStatus.OVERDUE:
        return True
    return tx.status == CreditTransactionStatus.PENDING and as_utc(tx.due_date) < now


class CreditLedgerService:
    """Operaciones atómicas del ledger de crédito."""

    def __init__(
        self,
        account_repo: Optional[CreditAccountRepository] = None,
        transaction_repo: Optional[CreditTransactionRepository] = None,
        customer_repo: Optional[CustomerRepository] = None,
        tenant_repo: Optional[TenantRepository] = None,
        max_attempts: Optional[int] = None,
    ) -> None:
        self.account_repo = account_repo or CreditAccountRepository()
        self.transaction_repo = transaction_repo or CreditTransactionRepository()
        self.customer_repo = customer_repo or CustomerRepository()
        self.tenant_repo = tenant_repo or TenantRepository()
        self.max_attempts = max(
            1, max_attempts or get_payments_settings().ledger_max_apply_attempts
        )

    # ---------------------------------------------------------
    # Alta de cuenta
    # ---------------------------------------------------------
    async def create_account(
        self,
        session: AsyncSession,
        tenant_id: str,
        customer_id: str,
        limit: MoneyLike,
        status: CreditStatus = CreditStatus.ACTIVE,
        opening_balance: MoneyLike = Decimal("0"),
    ) -> CreditAccount:
        """
        Crea la cuenta de crédito de un cliente.

        Raises:
            InvalidInputError: límite negativo o saldo inicial fuera de [0, límite]
            ForeignReferenceError: tenant o cliente inexistente
            ConflictError: ya existe cuenta para (tenant, cliente)
        """
        limit_amount = to_money(limit, "limit")
        if limit_amount < 0:
            raise InvalidInputError("limit", "El límite de crédito debe ser >= 0")
        balance = to_money(opening_balance, "opening_balance")
        if balance < 0 or balance > limit_amount:
            raise InvalidInputError("opening_balance", "El saldo inicial debe estar entre 0 y el límite")

        if not await self.tenant_repo.exists(session, tenant_id):
            raise ForeignReferenceError("tenant", tenant_id)
        if not await self.customer_repo.exists_in_tenant(session, tenant_id, customer_id):
            raise ForeignReferenceError("customer", customer_id)

        existing = await self.account_repo.get_by_customer(session, tenant_id, customer_id)
        if existing is not None:
            raise ConflictError(
                "El cliente ya tiene una cuenta de crédito",
                customer_id=customer_id,
                credit_id=existing.id,
            )

        try:
            account = await self.account_repo.create(
                session,
                tenant_id=tenant_id,
                customer_id=customer_id,
                limit_amount=limit_amount,
                balance=balance,
                status=status,
            )
            await session.commit()
        except IntegrityError:
            # Alta concurrente para el mismo cliente (unique tenant+customer)
            await session.rollback()
            logger.info("Credit account already exists tenant=%s customer=%s (race)", tenant_id, customer_id)
            raise ConflictError("El cliente ya tiene una cuenta de crédito", customer_id=customer_id)

        logger.info(
            "Credit account created id=%s tenant=%s customer=%s limit=%s",
            account.id, tenant_id, customer_id, limit_amount,
        )
        return account

    # ---------------------------------------------------------
    # Aplicación de cargos
    # ---------------------------------------------------------
    async def apply_transaction(
        self,
        session: AsyncSession,
        tenant_id: str,
        customer_id: str,
        amount: MoneyLike,
        fee: MoneyLike,
        due_date: datetime | date,
        order_id: Optional[str] = None,
    ) -> AppliedTransaction:
        """
        Registra un cargo y suma `amount` al saldo en una sola unidad de trabajo.

        Raises:
            InvalidInputError: amount <= 0 o fee < 0
            NotFoundError: el cliente no tiene cuenta en el tenant
            InvalidStateError: la cuenta no está activa
            LimitExceededError: saldo + amount > límite (nada se persiste)
            ConflictError: contención persistente tras agotar reintentos
        """
        amount_dec = to_money(amount, "amount")
        if amount_dec <= 0:
            raise InvalidInputError("amount", "El monto debe ser > 0")
        fee_dec = to_money(fee, "fee")
        if fee_dec < 0:
            raise InvalidInputError("fee", "La comisión debe ser >= 0")
        due_at = as_utc(due_date)

        for attempt in range(1, self.max_attempts + 1):
            try:
                account = await self.account_repo.get_by_customer(
                    session, tenant_id, customer_id, for_update=True
                )
                if account is None:
                    raise NotFoundError("CreditAccount", customer_id)
                if account.status != CreditStatus.ACTIVE:
                    raise InvalidStateError(str(account.status), "apply_transaction")

                observed = Decimal(account.balance)
                limit_amount = Decimal(account.limit_amount)
                new_balance = observed + amount_dec
                if new_balance > limit_amount:
                    raise LimitExceededError(observed, limit_amount, amount_dec)

                tx = await self.transaction_repo.create(
                    session,
                    tenant_id=tenant_id,
                    customer_id=customer_id,
                    credit_account_id=account.id,
                    order_id=order_id,
                    amount=amount_dec,
                    fee=fee_dec,
                    due_date=due_at,
                    status=CreditTransactionStatus.PENDING,
                )

                if not await self.account_repo.compare_and_set_balance(
                    session, account, observed, new_balance
                ):
                    await session.rollback()
                    LEDGER_APPLY_RETRIES.inc()
                    logger.info(
                        "Balance changed concurrently tenant=%s customer=%s attempt=%d/%d",
                        tenant_id, customer_id, attempt, self.max_attempts,
                    )
                    continue

                await session.commit()
            except CoreError as e:
                await session.rollback()
                observe_apply(str(e.kind))
                raise
            except Exception:
                await session.rollback()
                observe_apply("error")
                logger.exception(
                    "Credit transaction aborted tenant=%s customer=%s", tenant_id, customer_id
                )
                raise

            observe_apply("applied")
            logger.info(
                "Credit transaction applied tx=%s account=%s balance %s -> %s (limit=%s)",
                tx.id, account.id, observed, new_balance, limit_amount,
            )
            return AppliedTransaction(account=account, transaction=tx, previous_balance=observed)

        observe_apply("conflict")
        raise ConflictError(
            "No se pudo aplicar el cargo por contención en la cuenta; reintente",
            customer_id=customer_id,
            attempts=self.max_attempts,
        )

    # ---------------------------------------------------------
    # Override manual
    # ---------------------------------------------------------
    async def update_balance(
        self,
        session: AsyncSession,
        tenant_id: str,
        credit_id: str,
        new_balance: MoneyLike,
    ) -> CreditAccount:
        """
        Corrección manual del saldo, acotada por (credit_id, tenant_id).

        Raises:
            InvalidInputError: new_balance < 0 o mayor que el límite
            NotFoundError: la cuenta no existe en el tenant
        """
        balance = to_money(new_balance, "new_balance")
        if balance < 0:
            raise InvalidInputError("new_balance", "El saldo debe ser >= 0")

        try:
            affected = await self.account_repo.override_balance(session, tenant_id, credit_id, balance)
            if affected == 0:
                account = await self.account_repo.get_scoped(session, tenant_id, credit_id)
                if account is None:
                    raise NotFoundError("CreditAccount", credit_id)
                raise InvalidInputError(
                    "new_balance",
                    f"El saldo {balance} excede el límite {account.limit_amount}",
                )
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        account = await self.account_repo.get_scoped(session, tenant_id, credit_id)
        logger.info("Credit balance overridden account=%s tenant=%s balance=%s", credit_id, tenant_id, balance)
        return account  # type: ignore[return-value]

    # ---------------------------------------------------------
    # Listados
    # ---------------------------------------------------------
    async def list_accounts(self, session: AsyncSession, tenant_id: str) -> list[CreditAccountView]:
        rows = await self.account_repo.list_with_customer(session, tenant_id)
        return [CreditAccountView(account=acc, customer_name=name) for acc, name in rows]

    async def list_transactions(
        self,
        session: AsyncSession,
        tenant_id: str,
        customer_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> list[CreditTransactionView]:
        now = as_utc(now) if now else utcnow()
        rows = await self.transaction_repo.list_with_customer(session, tenant_id, customer_id)
        return [
            CreditTransactionView(transaction=tx, customer_name=name, overdue=is_overdue(tx, now))
            for tx, name in rows
        ]

    # ---------------------------------------------------------
    # Transiciones de la transacción
    # ---------------------------------------------------------
    async def mark_transaction_paid(
        self,
        session: AsyncSession,
        tenant_id: str,
        transaction_id: str,
        paid_at: Optional[datetime] = None,
    ) -> CreditTransaction:
        """
        pending/overdue -> paid. No modifica el saldo de la cuenta.

        Raises:
            NotFoundError: la transacción no existe en el tenant
            InvalidStateError: la transacción ya estaba pagada
        """
        paid_date = as_utc(paid_at) if paid_at else utcnow()
        try:
            affected = await self.transaction_repo.transition_status(
                session,
                tenant_id,
                transaction_id,
                CreditTransactionStatus.payable(),
                status=CreditTransactionStatus.PAID,
                paid_date=paid_date,
            )
            if affected == 0:
                tx = await self.transaction_repo.get_scoped(session, tenant_id, transaction_id)
                if tx is None:
                    raise NotFoundError("CreditTransaction", transaction_id)
                raise InvalidStateError(str(tx.status), "mark_paid")
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        logger.info("Credit transaction paid tx=%s tenant=%s", transaction_id, tenant_id)
        return await self.transaction_repo.get_scoped(session, tenant_id, transaction_id)  # type: ignore[return-value]

    async def mark_overdue_transactions(
        self,
        session: AsyncSession,
        tenant_id: str,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Barrido pending -> overdue para due_date < now.

        Pensado para un job batch externo; el servicio no programa nada.
        """
        cutoff = as_utc(now) if now else utcnow()
        try:
            count = await self.transaction_repo.mark_overdue(session, tenant_id, cutoff)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        if count:
            logger.info("Marked %d credit transactions overdue tenant=%s", count, tenant_id)
        return count


__all__ = [
    "AppliedTransaction",
    "CreditAccountView",
    "CreditTransactionView",
    "CreditLedgerService",
    "as_utc",
    "is_overdue",
]

# Fin del archivo app/modules/credit/services/ledger_service.py
