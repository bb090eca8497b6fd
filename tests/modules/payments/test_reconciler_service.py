# -*- coding: utf-8 -*-
"""
tests/modules/payments/test_reconciler_service.py

Tests del PaymentReconciler: creación de intents, confirmación síncrona y
reembolsos, con el gateway en memoria y SQLite.

Fecha: 2026-10-17
"""

from decimal import Decimal

import pytest
from prometheus_client import REGISTRY
from sqlalchemy import func, select

from app.shared.errors import (
    ForeignReferenceError,
    GatewayError,
    InvalidInputError,
    InvalidStateError,
    MissingDataError,
    NotFoundError,
)
from app.modules.payments.enums import PaymentMethod, PaymentStatus
from app.modules.payments.models import Payment
from app.modules.payments.repositories import PaymentRepository
from app.modules.tenants.enums import PaymentMode
from app.modules.tenants.models import TenantSettings


async def _count_payments(session) -> int:
    return int((await session.execute(select(func.count()).select_from(Payment))).scalar_one())


async def _reload(session, payment) -> Payment:
    return await PaymentRepository().get_scoped(session, payment.tenant_id, payment.id)


# ---------------------------------------------------------------------------
# create_payment_intent
# ---------------------------------------------------------------------------
class TestCreatePaymentIntent:
    @pytest.mark.asyncio
    async def test_creates_pending_payment_after_gateway(
        self, db_session, reconciler, fake_gateway, tenant_id, customer_id
    ):
        created = await reconciler.create_payment_intent(
            db_session, tenant_id, Decimal("50.00"), currency="USD",
            customer_id=customer_id, order_id="order-77", description="Receta 123",
            created_by="user-1",
        )

        payment = created.payment
        assert payment.status == PaymentStatus.PENDING
        assert payment.method == PaymentMethod.CARD
        assert payment.payment_intent_id == created.payment_intent_id
        assert payment.currency == "usd"
        assert payment.notes == "Receta 123"
        assert created.client_secret.startswith(created.payment_intent_id)

        _, call = fake_gateway.calls[0]
        assert call["amount_cents"] == 5000
        assert call["currency"] == "usd"
        assert call["idempotency_key"] == f"pi-{payment.id}"
        assert call["metadata"] == {
            "tenant_id": tenant_id,
            "payment_id": payment.id,
            "customer_id": customer_id,
            "order_id": "order-77",
        }
        assert call["connected_account_id"] is None

        stored = await _reload(db_session, payment)
        assert stored is not None
        assert stored.status == PaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_gateway_failure_leaves_no_row(self, db_session, reconciler, fake_gateway, tenant_id):
        fake_gateway.fail_next("create_intent", timed_out=True)

        with pytest.raises(GatewayError) as exc_info:
            await reconciler.create_payment_intent(db_session, tenant_id, Decimal("50.00"))

        assert exc_info.value.timed_out is True
        assert await _count_payments(db_session) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10")])
    async def test_non_positive_amount_is_rejected(self, db_session, reconciler, fake_gateway, tenant_id, amount):
        with pytest.raises(InvalidInputError):
            await reconciler.create_payment_intent(db_session, tenant_id, amount)
        assert fake_gateway.calls == []

    @pytest.mark.asyncio
    async def test_customer_of_other_tenant_is_reference_error(
        self, db_session, reconciler, fake_gateway, tenant_id, other_customer_id
    ):
        with pytest.raises(ForeignReferenceError):
            await reconciler.create_payment_intent(
                db_session, tenant_id, Decimal("10"), customer_id=other_customer_id
            )
        assert fake_gateway.calls == []

    @pytest.mark.asyncio
    async def test_connect_tenant_routes_fee_to_connected_account(
        self, db_session, reconciler, fake_gateway, tenant_id
    ):
        db_session.add(
            TenantSettings(
                tenant_id=tenant_id,
                payment_mode=PaymentMode.CONNECT_EXPRESS,
                application_fee_bps=250,
                default_currency="mxn",
                stripe_account_id="acct_farmacia",
            )
        )
        await db_session.commit()

        created = await reconciler.create_payment_intent(db_session, tenant_id, Decimal("50.00"))

        _, call = fake_gateway.calls[0]
        assert call["currency"] == "mxn"
        assert call["application_fee_cents"] == 125
        assert call["connected_account_id"] == "acct_farmacia"
        assert created.payment.application_fee_bps == 250
        assert created.payment.processing_fee_cents == 125
        assert created.payment.payment_metadata == {"payment_mode": "connect_express"}

    @pytest.mark.asyncio
    async def test_platform_tenant_keeps_the_full_charge(self, db_session, reconciler, fake_gateway, tenant_id):
        db_session.add(
            TenantSettings(
                tenant_id=tenant_id,
                payment_mode=PaymentMode.PLATFORM,
                application_fee_bps=250,
                default_currency="usd",
                stripe_account_id="acct_ignored",
            )
        )
        await db_session.commit()

        created = await reconciler.create_payment_intent(db_session, tenant_id, Decimal("50.00"))

        _, call = fake_gateway.calls[0]
        assert call["connected_account_id"] is None
        assert created.payment.processing_fee_cents == 0


# ---------------------------------------------------------------------------
# confirm_payment
# ---------------------------------------------------------------------------
class TestConfirmPayment:
    @pytest.mark.asyncio
    async def test_declined_card_fails_and_is_idempotent(
        self, db_session, reconciler, fake_gateway, pending_payment, tenant_id
    ):
        intent_id = pending_payment.payment_intent_id
        fake_gateway.set_intent_status(intent_id, "requires_payment_method", failure_reason="Your card was declined.")

        first = await reconciler.confirm_payment(db_session, tenant_id, intent_id, pending_payment.id)
        assert first.status == PaymentStatus.FAILED
        assert first.failure_reason == "Your card was declined."
        retrieves = fake_gateway.count("retrieve_intent")

        second = await reconciler.confirm_payment(db_session, tenant_id, intent_id, pending_payment.id)

        assert second.id == first.id
        assert second.status == first.status
        assert second.failure_reason == first.failure_reason
        assert second.updated_at == first.updated_at
        assert fake_gateway.count("retrieve_intent") == retrieves

    @pytest.mark.asyncio
    async def test_failure_without_reason_gets_default(
        self, db_session, reconciler, fake_gateway, pending_payment, tenant_id
    ):
        fake_gateway.set_intent_status(pending_payment.payment_intent_id, "canceled")

        payment = await reconciler.confirm_payment(
            db_session, tenant_id, pending_payment.payment_intent_id, pending_payment.id
        )
        assert payment.status == PaymentStatus.FAILED
        assert payment.failure_reason

    @pytest.mark.asyncio
    async def test_succeeded_captures_charge(self, db_session, reconciler, fake_gateway, pending_payment, tenant_id):
        fake_gateway.set_intent_status(pending_payment.payment_intent_id, "succeeded", charge_id="ch_001")

        payment = await reconciler.confirm_payment(
            db_session, tenant_id, pending_payment.payment_intent_id, pending_payment.id
        )

        assert payment.status == PaymentStatus.COMPLETED
        assert payment.charge_id == "ch_001"
        assert payment.failure_reason is None
        assert payment.payment_metadata["gateway_status"] == "succeeded"

    @pytest.mark.asyncio
    async def test_processing_intent_stays_pending(
        self, db_session, reconciler, fake_gateway, pending_payment, tenant_id
    ):
        fake_gateway.set_intent_status(pending_payment.payment_intent_id, "processing")

        payment = await reconciler.confirm_payment(
            db_session, tenant_id, pending_payment.payment_intent_id, pending_payment.id
        )
        assert payment.status == PaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_mismatched_triple_is_not_found(
        self, db_session, reconciler, pending_payment, tenant_id, other_tenant_id
    ):
        with pytest.raises(NotFoundError):
            await reconciler.confirm_payment(db_session, tenant_id, "pi_other", pending_payment.id)
        with pytest.raises(NotFoundError):
            await reconciler.confirm_payment(
                db_session, other_tenant_id, pending_payment.payment_intent_id, pending_payment.id
            )

    @pytest.mark.asyncio
    async def test_gateway_timeout_leaves_payment_pending(
        self, db_session, reconciler, fake_gateway, pending_payment, tenant_id
    ):
        fake_gateway.fail_next("retrieve_intent", timed_out=True)

        with pytest.raises(GatewayError):
            await reconciler.confirm_payment(
                db_session, tenant_id, pending_payment.payment_intent_id, pending_payment.id
            )

        stored = await _reload(db_session, pending_payment)
        assert stored.status == PaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_amount_mismatch_is_counted(self, db_session, reconciler, fake_gateway, pending_payment, tenant_id):
        before = REGISTRY.get_sample_value("payments_amount_mismatch_total") or 0.0
        fake_gateway.set_intent_status(
            pending_payment.payment_intent_id, "succeeded", charge_id="ch_002", amount_cents=4000
        )

        payment = await reconciler.confirm_payment(
            db_session, tenant_id, pending_payment.payment_intent_id, pending_payment.id
        )

        assert payment.status == PaymentStatus.COMPLETED
        assert REGISTRY.get_sample_value("payments_amount_mismatch_total") == before + 1


# ---------------------------------------------------------------------------
# refund
# ---------------------------------------------------------------------------
@pytest.fixture
async def completed_payment(db_session, reconciler, fake_gateway, pending_payment, tenant_id):
    fake_gateway.set_intent_status(pending_payment.payment_intent_id, "succeeded", charge_id="ch_refund")
    return await reconciler.confirm_payment(
        db_session, tenant_id, pending_payment.payment_intent_id, pending_payment.id
    )


class TestRefund:
    @pytest.mark.asyncio
    async def test_refund_of_pending_payment_is_invalid_state(
        self, db_session, reconciler, fake_gateway, pending_payment, tenant_id
    ):
        with pytest.raises(InvalidStateError) as exc_info:
            await reconciler.refund(db_session, tenant_id, pending_payment.id)

        assert exc_info.value.current_status == "pending"
        assert fake_gateway.count("create_refund") == 0
        stored = await _reload(db_session, pending_payment)
        assert stored.status == PaymentStatus.PENDING
        assert stored.refund_id is None
        assert stored.payment_metadata == pending_payment.payment_metadata

    @pytest.mark.asyncio
    async def test_full_refund(self, db_session, reconciler, fake_gateway, completed_payment, tenant_id):
        payment = await reconciler.refund(db_session, tenant_id, completed_payment.id, reason="duplicate")

        assert payment.status == PaymentStatus.REFUNDED
        assert payment.refund_id == fake_gateway.refunds[0].id
        assert payment.payment_metadata["refund_amount"] == "50.00"
        assert payment.payment_metadata["refund_reason"] == "duplicate"
        _, call = [c for c in fake_gateway.calls if c[0] == "create_refund"][0]
        assert call == {
            "charge_id": "ch_refund",
            "amount_cents": None,
            "reason": "duplicate",
            "idempotency_key": f"refund-{completed_payment.id}-5000",
        }

    @pytest.mark.asyncio
    async def test_partial_refund(self, db_session, reconciler, fake_gateway, completed_payment, tenant_id):
        payment = await reconciler.refund(db_session, tenant_id, completed_payment.id, amount=Decimal("20"))

        assert payment.status == PaymentStatus.REFUNDED
        assert payment.payment_metadata["refund_amount"] == "20.00"
        _, call = [c for c in fake_gateway.calls if c[0] == "create_refund"][0]
        assert call["amount_cents"] == 2000

    @pytest.mark.asyncio
    async def test_retry_with_other_amount_uses_new_idempotency_key(
        self, db_session, reconciler, fake_gateway, completed_payment, tenant_id
    ):
        payment_id = completed_payment.id
        fake_gateway.fail_next("create_refund")
        with pytest.raises(GatewayError):
            await reconciler.refund(db_session, tenant_id, payment_id, amount=Decimal("20"))

        payment = await reconciler.refund(db_session, tenant_id, payment_id, amount=Decimal("15"))

        assert payment.status == PaymentStatus.REFUNDED
        keys = [c["idempotency_key"] for name, c in fake_gateway.calls if name == "create_refund"]
        assert keys == [f"refund-{payment_id}-2000", f"refund-{payment_id}-1500"]

    @pytest.mark.asyncio
    async def test_refund_above_total_is_rejected(self, db_session, reconciler, fake_gateway, completed_payment, tenant_id):
        with pytest.raises(InvalidInputError):
            await reconciler.refund(db_session, tenant_id, completed_payment.id, amount=Decimal("50.01"))
        assert fake_gateway.count("create_refund") == 0

    @pytest.mark.asyncio
    async def test_refund_twice_is_invalid_state(self, db_session, reconciler, completed_payment, tenant_id):
        await reconciler.refund(db_session, tenant_id, completed_payment.id)
        with pytest.raises(InvalidStateError):
            await reconciler.refund(db_session, tenant_id, completed_payment.id)

    @pytest.mark.asyncio
    async def test_completed_without_charge_is_missing_data(
        self, db_session, reconciler, fake_gateway, pending_payment, tenant_id
    ):
        fake_gateway.set_intent_status(pending_payment.payment_intent_id, "succeeded", charge_id=None)
        await reconciler.confirm_payment(
            db_session, tenant_id, pending_payment.payment_intent_id, pending_payment.id
        )

        with pytest.raises(MissingDataError) as exc_info:
            await reconciler.refund(db_session, tenant_id, pending_payment.id)
        assert exc_info.value.field == "charge_id"

    @pytest.mark.asyncio
    async def test_gateway_failure_keeps_payment_completed(
        self, db_session, reconciler, fake_gateway, completed_payment, tenant_id
    ):
        fake_gateway.fail_next("create_refund")

        with pytest.raises(GatewayError):
            await reconciler.refund(db_session, tenant_id, completed_payment.id)

        stored = await _reload(db_session, completed_payment)
        assert stored.status == PaymentStatus.COMPLETED
        assert stored.refund_id is None

    @pytest.mark.asyncio
    async def test_refund_in_other_tenant_is_not_found(self, db_session, reconciler, completed_payment, other_tenant_id):
        with pytest.raises(NotFoundError):
            await reconciler.refund(db_session, other_tenant_id, completed_payment.id)

# Fin del archivo tests/modules/payments/test_reconciler_service.py
