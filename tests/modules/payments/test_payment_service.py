# -*- coding: utf-8 -*-
"""
tests/modules/payments/test_payment_service.py

Tests de PaymentService: pagos manuales, estadísticas del día,
configuración de pagos del tenant y cambios manuales de estado.

Fecha: 2026-10-17
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import update

from app.shared.database.base import utcnow
from app.shared.errors import (
    ForeignReferenceError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from app.modules.payments.enums import PaymentMethod, PaymentStatus
from app.modules.payments.models import Payment
from app.modules.payments.services import PaymentService
from app.modules.tenants.enums import PaymentMode
from app.modules.tenants.models import TenantSettings


@pytest.fixture
def service() -> PaymentService:
    return PaymentService()


class TestManualPayments:
    @pytest.mark.asyncio
    async def test_record_cash_payment(self, db_session, service, tenant_id, customer_id):
        payment = await service.record_manual_payment(
            db_session, tenant_id, Decimal("12.50"), PaymentMethod.CASH,
            customer_id=customer_id, notes="Mostrador", created_by="user-1",
        )

        assert payment.status == PaymentStatus.COMPLETED
        assert payment.method == PaymentMethod.CASH
        assert payment.currency == "usd"
        assert payment.payment_intent_id is None
        assert payment.is_gateway_backed is False

    @pytest.mark.asyncio
    async def test_card_method_is_rejected(self, db_session, service, tenant_id):
        with pytest.raises(InvalidInputError) as exc_info:
            await service.record_manual_payment(db_session, tenant_id, Decimal("10"), PaymentMethod.CARD)
        assert exc_info.value.field == "method"

    @pytest.mark.asyncio
    async def test_initial_status_must_be_pending_or_completed(self, db_session, service, tenant_id):
        with pytest.raises(InvalidInputError):
            await service.record_manual_payment(
                db_session, tenant_id, Decimal("10"), PaymentMethod.CASH, status=PaymentStatus.REFUNDED
            )

    @pytest.mark.asyncio
    async def test_customer_of_other_tenant_is_rejected(self, db_session, service, tenant_id, other_customer_id):
        with pytest.raises(ForeignReferenceError):
            await service.record_manual_payment(
                db_session, tenant_id, Decimal("10"), PaymentMethod.TRANSFER, customer_id=other_customer_id
            )


class TestManualStatusUpdates:
    @pytest.mark.asyncio
    async def test_pending_transfer_can_be_completed_then_refunded(self, db_session, service, tenant_id):
        payment = await service.record_manual_payment(
            db_session, tenant_id, Decimal("30"), PaymentMethod.TRANSFER, status=PaymentStatus.PENDING
        )

        completed = await service.update_payment_status(
            db_session, tenant_id, payment.id, PaymentStatus.COMPLETED, notes="Transferencia recibida"
        )
        assert completed.status == PaymentStatus.COMPLETED
        assert completed.notes == "Transferencia recibida"

        refunded = await service.update_payment_status(db_session, tenant_id, payment.id, PaymentStatus.REFUNDED)
        assert refunded.status == PaymentStatus.REFUNDED

    @pytest.mark.asyncio
    async def test_invalid_transition_is_rejected(self, db_session, service, tenant_id):
        payment = await service.record_manual_payment(db_session, tenant_id, Decimal("30"), PaymentMethod.CASH)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.update_payment_status(db_session, tenant_id, payment.id, PaymentStatus.PENDING)
        assert exc_info.value.current_status == "completed"

    @pytest.mark.asyncio
    async def test_card_payment_status_is_owned_by_gateway(self, db_session, service, pending_payment, tenant_id):
        with pytest.raises(InvalidStateError):
            await service.update_payment_status(db_session, tenant_id, pending_payment.id, PaymentStatus.COMPLETED)

    @pytest.mark.asyncio
    async def test_unknown_payment_is_not_found(self, db_session, service, tenant_id):
        with pytest.raises(NotFoundError):
            await service.update_payment_status(db_session, tenant_id, "missing", PaymentStatus.COMPLETED)


class TestStatisticsAndSettings:
    @pytest.mark.asyncio
    async def test_statistics_split_today_from_history(self, db_session, service, tenant_id, other_tenant_id):
        old = await service.record_manual_payment(db_session, tenant_id, Decimal("100"), PaymentMethod.CASH)
        await db_session.execute(
            update(Payment).where(Payment.id == old.id).values(created_at=utcnow() - timedelta(days=2))
        )
        await db_session.commit()

        await service.record_manual_payment(db_session, tenant_id, Decimal("20.25"), PaymentMethod.CASH)
        await service.record_manual_payment(
            db_session, tenant_id, Decimal("5"), PaymentMethod.ACH, status=PaymentStatus.PENDING
        )
        failed = await service.record_manual_payment(
            db_session, tenant_id, Decimal("7"), PaymentMethod.ACH, status=PaymentStatus.PENDING
        )
        await db_session.execute(
            update(Payment).where(Payment.id == failed.id).values(status=PaymentStatus.FAILED)
        )
        await db_session.commit()
        await service.record_manual_payment(db_session, other_tenant_id, Decimal("999"), PaymentMethod.CASH)

        totals = await service.get_payment_statistics(db_session, tenant_id)

        assert totals.today_processed == Decimal("20.25")
        assert totals.today_pending == Decimal("5.00")
        assert totals.today_failed == 1
        assert totals.total_volume == Decimal("120.25")

    @pytest.mark.asyncio
    async def test_list_payments_filters_by_status(self, db_session, service, tenant_id, customer_id):
        await service.record_manual_payment(db_session, tenant_id, Decimal("1"), PaymentMethod.CASH, customer_id=customer_id)
        await service.record_manual_payment(
            db_session, tenant_id, Decimal("2"), PaymentMethod.CASH, status=PaymentStatus.PENDING
        )

        everything = await service.list_payments(db_session, tenant_id)
        pending = await service.list_payments(db_session, tenant_id, PaymentStatus.PENDING)

        assert len(everything) == 2
        assert {v.customer_name for v in everything} == {"Ana López", None}
        assert [v.payment.amount for v in pending] == [Decimal("2.00")]

    @pytest.mark.asyncio
    async def test_settings_defaults_without_row(self, db_session, service, tenant_id):
        view = await service.get_payment_settings(db_session, tenant_id)

        assert view.payment_mode is PaymentMode.PLATFORM
        assert view.application_fee_bps == 0
        assert view.default_currency == "usd"
        assert view.routes_to_connected_account is False

    @pytest.mark.asyncio
    async def test_settings_from_row(self, db_session, service, tenant_id):
        db_session.add(
            TenantSettings(
                tenant_id=tenant_id,
                payment_mode=PaymentMode.CONNECT_STANDARD,
                application_fee_bps=100,
                default_currency="EUR",
                stripe_account_id="acct_std",
            )
        )
        await db_session.commit()

        view = await service.get_payment_settings(db_session, tenant_id)

        assert view.payment_mode is PaymentMode.CONNECT_STANDARD
        assert view.default_currency == "eur"
        assert view.routes_to_connected_account is True

    @pytest.mark.asyncio
    async def test_settings_for_unknown_tenant(self, db_session, service):
        with pytest.raises(NotFoundError):
            await service.get_payment_settings(db_session, "no-such-tenant")

# Fin del archivo tests/modules/payments/test_payment_service.py
