# -*- coding: utf-8 -*-
"""
app/modules/payments/services/reconciler_service.py

Reconciliador de pagos: mantiene el Payment local consistente con el
payment intent del proveedor a través de confirmaciones síncronas y
webhooks asíncronos (duplicados y fuera de orden).

Reglas:
- create_payment_intent inserta la fila solo si el gateway respondió OK.
- Toda transición de estado es un UPDATE guardado por estado de origen;
  un estado final nunca se sobreescribe.
- Webhooks: firma -> dedupe -> marcador processed=false (commit) ->
  despacho -> processed=true junto con la mutación del pago (un commit).
  Si el despacho falla, processed queda en false y el error se propaga
  para que el proveedor reintente.

Fecha: 2026-10-17
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.database.base import new_uuid
from app.shared.errors import (
    ConflictError,
    ForeignReferenceError,
    InvalidInputError,
    InvalidStateError,
    MissingDataError,
    NotFoundError,
)
from app.shared.utils.money import MoneyLike, fee_from_bps, to_minor_units, to_money
from app.modules.payments.enums import PaymentMethod, PaymentStatus
from app.modules.payments.gateway.base import GatewayEvent, GatewayIntent, PaymentGateway
from app.modules.payments.metrics import inc_amount_mismatch, inc_webhook
from app.modules.payments.models import Payment
from app.modules.payments.repositories import PaymentRepository, WebhookEventRepository
from app.modules.payments.services.webhook_dispatch import (
    ACCOUNT_UPDATED,
    CHARGE_REFUNDED,
    INTENT_EVENT_TYPES,
    event_intent_id,
    event_tenant_id,
    intent_from_event,
    map_intent_status,
)
from app.modules.tenants.repositories import CustomerRepository, TenantRepository

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resultados
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CreatedIntent:
    payment: Payment
    client_secret: Optional[str]

    @property
    def payment_intent_id(self) -> str:
        return self.payment.payment_intent_id  # type: ignore[return-value]


@dataclass(frozen=True)
class WebhookOutcome:
    """
    Resultado del procesamiento de un webhook.

    status:
        processed: despachado y marcado processed=true
        skipped:   event_id ya procesado (redelivery)
        ignored:   aceptado sin efecto (tipo desconocido, sin tenant o sin pago)
    """

    status: str
    event_id: str
    event_type: str
    payment_id: Optional[str] = None
    detail: Optional[str] = None

    @property
    def already_processed(self) -> bool:
        return self.status == "skipped"


@dataclass(frozen=True)
class _Dispatch:
    status: str
    payment_id: Optional[str] = None
    detail: Optional[str] = None


class PaymentReconciler:
    """Operaciones del reconciliador con un gateway inyectado."""

    def __init__(
        self,
        gateway: PaymentGateway,
        payment_repo: Optional[PaymentRepository] = None,
        event_repo: Optional[WebhookEventRepository] = None,
        tenant_repo: Optional[TenantRepository] = None,
        customer_repo: Optional[CustomerRepository] = None,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self.gateway = gateway
        self.payment_repo = payment_repo or PaymentRepository()
        self.event_repo = event_repo or WebhookEventRepository()
        self.tenant_repo = tenant_repo or TenantRepository()
        self.customer_repo = customer_repo or CustomerRepository()
        self.settings = settings or get_payments_settings()

    # ---------------------------------------------------------
    # Creación del intent
    # ---------------------------------------------------------
    async def create_payment_intent(
        self,
        session: AsyncSession,
        tenant_id: str,
        amount: MoneyLike,
        currency: Optional[str] = None,
        customer_id: Optional[str] = None,
        order_id: Optional[str] = None,
        description: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> CreatedIntent:
        """
        Crea el intent en el gateway y después inserta el Payment pending.

        Raises:
            InvalidInputError: amount <= 0
            ForeignReferenceError: tenant o cliente inexistente
            GatewayError: fallo/timeout del gateway (no queda fila local)
        """
        amount_dec = to_money(amount, "amount")
        if amount_dec <= 0:
            raise InvalidInputError("amount", "El monto debe ser > 0")

        if not await self.tenant_repo.exists(session, tenant_id):
            raise ForeignReferenceError("tenant", tenant_id)
        if customer_id and not await self.customer_repo.exists_in_tenant(session, tenant_id, customer_id):
            raise ForeignReferenceError("customer", customer_id)

        tenant_settings = await self.tenant_repo.get_payment_settings(
            session, tenant_id, self.settings.default_currency
        )
        currency_code = (currency or tenant_settings.default_currency).lower()
        amount_cents = to_minor_units(amount_dec)
        fee_cents = fee_from_bps(amount_cents, tenant_settings.application_fee_bps)
        connected_account = (
            tenant_settings.stripe_account_id if tenant_settings.routes_to_connected_account else None
        )

        payment_id = new_uuid()
        metadata = {"tenant_id": tenant_id, "payment_id": payment_id}
        if customer_id:
            metadata["customer_id"] = customer_id
        if order_id:
            metadata["order_id"] = order_id

        intent = await self.gateway.create_intent(
            amount_cents=amount_cents,
            currency=currency_code,
            metadata=metadata,
            idempotency_key=f"pi-{payment_id}",
            application_fee_cents=fee_cents,
            connected_account_id=connected_account,
        )

        try:
            payment = await self.payment_repo.create(
                session,
                id=payment_id,
                tenant_id=tenant_id,
                customer_id=customer_id,
                order_id=order_id,
                amount=amount_dec,
                currency=currency_code,
                status=PaymentStatus.PENDING,
                method=PaymentMethod.CARD,
                payment_intent_id=intent.id,
                notes=description,
                application_fee_bps=tenant_settings.application_fee_bps,
                processing_fee_cents=fee_cents if connected_account else 0,
                created_by=created_by,
                payment_metadata={"payment_mode": str(tenant_settings.payment_mode)},
            )
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception(
                "Payment insert failed after intent creation tenant=%s intent=%s",
                tenant_id, intent.id,
            )
            raise

        logger.info(
            "Payment intent created payment=%s tenant=%s intent=%s amount=%s %s fee_cents=%d",
            payment.id, tenant_id, intent.id, amount_dec, currency_code, fee_cents,
        )
        return CreatedIntent(payment=payment, client_secret=intent.client_secret)

    # ---------------------------------------------------------
    # Confirmación síncrona
    # ---------------------------------------------------------
    async def confirm_payment(
        self,
        session: AsyncSession,
        tenant_id: str,
        payment_intent_id: str,
        payment_id: str,
    ) -> Payment:
        """
        Sincroniza el pago con el estado vivo del intent.

        Idempotente: un pago ya en estado final se devuelve sin consultar
        al gateway.

        Raises:
            NotFoundError: la tripleta (id, tenant, intent) no coincide
            GatewayError: fallo/timeout del gateway (el pago no cambia)
        """
        payment = await self.payment_repo.get_for_intent(session, tenant_id, payment_id, payment_intent_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        if PaymentStatus(payment.status).is_terminal:
            return payment

        intent = await self.gateway.retrieve_intent(payment_intent_id)
        mapping = map_intent_status(intent)
        if not mapping.requires_write:
            logger.debug("Payment %s still pending (intent status=%s)", payment.id, intent.status)
            return payment

        self._check_amount(payment, intent)
        try:
            result = await self.payment_repo.update_status(
                session,
                tenant_id,
                payment.id,
                mapping.status,
                PaymentStatus.sources_for(mapping.status),
                payment_metadata={**(payment.payment_metadata or {}), "gateway_status": intent.status},
                **mapping.values,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        if result.applied:
            logger.info("Payment confirmed payment=%s tenant=%s status=%s", payment.id, tenant_id, mapping.status)
        else:
            logger.info(
                "Payment %s already moved to %s by another writer", payment.id, result.payment.status
            )
        return result.payment  # type: ignore[return-value]

    # ---------------------------------------------------------
    # Webhooks
    # ---------------------------------------------------------
    async def handle_webhook_event(
        self,
        session: AsyncSession,
        payload: bytes,
        signature: str,
    ) -> WebhookOutcome:
        """
        Procesa un webhook del gateway con semántica at-most-once por event_id.

        Raises:
            UnauthenticatedError: firma inválida (nada se persiste)
            ConflictError: otra entrega del mismo evento ganó el alta del marcador
            GatewayError / SQLAlchemyError: fallo en el despacho (reintentable)
        """
        event = self.gateway.verify_webhook_signature(payload, signature)

        existing = await self.event_repo.get_by_event_id(session, event.id)
        if existing is not None and existing.processed:
            return self._skipped(event)

        if existing is None:
            try:
                await self.event_repo.create(
                    session,
                    event_id=event.id,
                    event_type=event.type,
                    processed=False,
                    event_metadata={"object_id": event.object_id},
                )
                await session.commit()
            except IntegrityError:
                await session.rollback()
                existing = await self.event_repo.get_by_event_id(session, event.id)
                if existing is not None and existing.processed:
                    return self._skipped(event)
                inc_webhook(event.type, "conflict")
                raise ConflictError("Evento de webhook en proceso por otra entrega", event_id=event.id)
        else:
            logger.info("Webhook event %s seen but not processed; dispatching again", event.id)

        try:
            dispatch = await self._dispatch(session, event)
            marked = await self.event_repo.mark_processed(
                session,
                event.id,
                {
                    "object_id": event.object_id,
                    "result": dispatch.status,
                    "payment_id": dispatch.payment_id,
                    "detail": dispatch.detail,
                },
            )
            if marked == 0:
                # Otra entrega concurrente terminó primero
                await session.rollback()
                return self._skipped(event)
            await session.commit()
        except Exception:
            await session.rollback()
            inc_webhook(event.type, "error")
            logger.exception("Webhook dispatch failed event=%s type=%s", event.id, event.type)
            raise

        inc_webhook(event.type, dispatch.status)
        logger.info(
            "Webhook event %s (%s) %s payment=%s",
            event.id, event.type, dispatch.status, dispatch.payment_id,
        )
        return WebhookOutcome(
            status=dispatch.status,
            event_id=event.id,
            event_type=event.type,
            payment_id=dispatch.payment_id,
            detail=dispatch.detail,
        )

    def _skipped(self, event: GatewayEvent) -> WebhookOutcome:
        inc_webhook(event.type, "skipped")
        logger.info("Webhook event %s already processed; skipping", event.id)
        return WebhookOutcome(
            status="skipped",
            event_id=event.id,
            event_type=event.type,
            detail="already processed",
        )

    async def _dispatch(self, session: AsyncSession, event: GatewayEvent) -> _Dispatch:
        """Aplica el efecto del evento sin hacer commit."""
        if event.type == ACCOUNT_UPDATED:
            logger.info("Connected account updated: %s", event.object_id)
            return _Dispatch("processed", detail="account updated")
        if event.type not in INTENT_EVENT_TYPES and event.type != CHARGE_REFUNDED:
            logger.debug("Ignoring webhook event type %s", event.type)
            return _Dispatch("ignored", detail="unhandled event type")

        tenant_id = event_tenant_id(event)
        intent_id = event_intent_id(event)
        if not tenant_id or not intent_id:
            logger.warning(
                "Webhook event %s (%s) without tenant_id/intent; ignoring", event.id, event.type
            )
            return _Dispatch("ignored", detail="missing tenant or intent reference")

        payment = await self.payment_repo.get_by_intent(session, tenant_id, intent_id)
        if payment is None:
            logger.warning(
                "No payment for intent=%s tenant=%s (event %s); ignoring", intent_id, tenant_id, event.id
            )
            return _Dispatch("ignored", detail="payment not found")

        if event.type == CHARGE_REFUNDED:
            return await self._apply_charge_refunded(session, payment, event)

        if PaymentStatus(payment.status).is_terminal:
            return _Dispatch("processed", payment_id=payment.id, detail=f"already {payment.status}")

        if self.settings.reconcile_with_live_intent:
            intent = await self.gateway.retrieve_intent(intent_id)
        else:
            intent = intent_from_event(event)

        mapping = map_intent_status(intent)
        if not mapping.requires_write:
            return _Dispatch("processed", payment_id=payment.id, detail=f"intent {intent.status}")

        self._check_amount(payment, intent)
        result = await self.payment_repo.update_status(
            session,
            payment.tenant_id,
            payment.id,
            mapping.status,
            PaymentStatus.sources_for(mapping.status),
            payment_metadata={
                **(payment.payment_metadata or {}),
                "gateway_status": intent.status,
                "last_event_id": event.id,
            },
            **mapping.values,
        )
        detail = str(mapping.status) if result.applied else f"already {result.payment.status}"
        return _Dispatch("processed", payment_id=payment.id, detail=detail)

    async def _apply_charge_refunded(
        self,
        session: AsyncSession,
        payment: Payment,
        event: GatewayEvent,
    ) -> _Dispatch:
        """Reembolso total hecho fuera de la API: completed -> refunded."""
        charge = event.data_object
        if not charge.get("refunded"):
            return _Dispatch("processed", payment_id=payment.id, detail="partial refund")

        refunds = (charge.get("refunds") or {}).get("data") or []
        refund_id = refunds[0].get("id") if refunds else None
        amount_refunded = int(charge.get("amount_refunded") or 0)

        result = await self.payment_repo.update_status(
            session,
            payment.tenant_id,
            payment.id,
            PaymentStatus.REFUNDED,
            PaymentStatus.sources_for(PaymentStatus.REFUNDED),
            refund_id=payment.refund_id or refund_id,
            payment_metadata={
                **(payment.payment_metadata or {}),
                "refund_amount": str(to_money(Decimal(amount_refunded) / 100)) if amount_refunded else None,
                "refunded_externally": True,
                "last_event_id": event.id,
            },
        )
        detail = "refunded" if result.applied else f"already {result.payment.status}"
        return _Dispatch("processed", payment_id=payment.id, detail=detail)

    # ---------------------------------------------------------
    # Reembolsos
    # ---------------------------------------------------------
    async def refund(
        self,
        session: AsyncSession,
        tenant_id: str,
        payment_id: str,
        amount: Optional[MoneyLike] = None,
        reason: Optional[str] = None,
    ) -> Payment:
        """
        Reembolsa un pago completado.

        Raises:
            NotFoundError: el pago no existe en el tenant
            InvalidStateError: el pago no está completed
            MissingDataError: no hay charge_id registrado
            InvalidInputError: monto <= 0 o mayor que el pago
            GatewayError: fallo del gateway (el pago no cambia)
        """
        payment = await self.payment_repo.get_scoped(session, tenant_id, payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        if payment.status != PaymentStatus.COMPLETED:
            raise InvalidStateError(str(payment.status), "refund")
        if not payment.charge_id:
            raise MissingDataError("charge_id")

        total = to_money(str(payment.amount))
        refund_amount = to_money(amount, "amount") if amount is not None else total
        if refund_amount <= 0 or refund_amount > total:
            raise InvalidInputError("amount", f"El reembolso debe estar entre 0 y {total}")

        refund_cents = to_minor_units(refund_amount)
        # Una clave por (pago, monto)
        refund = await self.gateway.create_refund(
            charge_id=payment.charge_id,
            amount_cents=refund_cents if amount is not None else None,
            reason=reason,
            idempotency_key=f"refund-{payment.id}-{refund_cents}",
        )

        metadata: dict[str, Any] = {
            **(payment.payment_metadata or {}),
            "refund_amount": str(refund_amount),
            "refund_reason": reason,
            "refund_status": refund.status,
        }
        try:
            result = await self.payment_repo.update_status(
                session,
                tenant_id,
                payment.id,
                PaymentStatus.REFUNDED,
                PaymentStatus.sources_for(PaymentStatus.REFUNDED),
                refund_id=refund.id,
                payment_metadata=metadata,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Refund %s created but payment %s not updated", refund.id, payment.id)
            raise

        if result.applied:
            logger.info(
                "Payment refunded payment=%s tenant=%s refund=%s amount=%s",
                payment.id, tenant_id, refund.id, refund_amount,
            )
        else:
            logger.warning(
                "Refund %s created but payment %s was already %s", refund.id, payment.id, result.payment.status
            )
        return result.payment  # type: ignore[return-value]

    # ---------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------
    def _check_amount(self, payment: Payment, intent: GatewayIntent) -> None:
        if intent.status != "succeeded" or not intent.amount_cents:
            return
        expected = to_minor_units(to_money(str(payment.amount)))
        if intent.amount_cents != expected:
            inc_amount_mismatch()
            logger.warning(
                "Amount mismatch payment=%s intent=%s local_cents=%d gateway_cents=%d",
                payment.id, intent.id, expected, intent.amount_cents,
            )


__all__ = ["CreatedIntent", "PaymentReconciler", "WebhookOutcome"]

# Fin del archivo app/modules/payments/services/reconciler_service.py
