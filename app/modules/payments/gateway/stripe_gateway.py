# -*- coding: utf-8 -*-
"""
app/modules/payments/gateway/stripe_gateway.py

Implementación del gateway de pagos sobre el SDK oficial de Stripe.

- API key por instancia (se pasa en cada llamada; no se toca stripe.api_key)
- Las llamadas bloqueantes del SDK corren en el threadpool y se acotan con
  PAYMENTS_GATEWAY_TIMEOUT_SECONDS
- Claves de idempotencia de Stripe derivadas del id local del pago
- Errores del SDK y timeouts se traducen a GatewayError; firmas inválidas a
  UnauthenticatedError

Fecha: 2026-10-17
"""

from __future__ import annotations

import asyncio
import json
import logging
from functools import lru_cache
from typing import Any, Callable, Optional

import stripe
from fastapi.concurrency import run_in_threadpool

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.errors import GatewayError, UnauthenticatedError
from app.modules.payments.gateway.base import GatewayEvent, GatewayIntent, GatewayRefund
from app.modules.payments.metrics import track_gateway_call

logger = logging.getLogger(__name__)

# Motivos de reembolso aceptados por la API de Stripe
STRIPE_REFUND_REASONS = frozenset({"duplicate", "fraudulent", "requested_by_customer"})


def _charge_id(intent: Any) -> Optional[str]:
    """latest_charge puede venir expandido (objeto) o como id."""
    charge = intent.get("latest_charge")
    if charge is None:
        return None
    if isinstance(charge, str):
        return charge
    return charge.get("id")


def _failure_reason(intent: Any) -> Optional[str]:
    error = intent.get("last_payment_error")
    if error:
        return error.get("message") or error.get("code") or "Payment failed"
    cancellation = intent.get("cancellation_reason")
    if cancellation:
        return f"canceled: {cancellation}"
    return None


def to_gateway_intent(intent: Any) -> GatewayIntent:
    """Normaliza un PaymentIntent de Stripe (objeto SDK o dict del webhook)."""
    if not intent or not intent.get("id") or not intent.get("status"):
        raise GatewayError("parse_intent", "Respuesta de Stripe sin id/status de intent")
    return GatewayIntent(
        id=str(intent["id"]),
        status=str(intent["status"]),
        amount_cents=int(intent.get("amount") or 0),
        currency=str(intent.get("currency") or "").lower(),
        client_secret=intent.get("client_secret"),
        charge_id=_charge_id(intent),
        failure_reason=_failure_reason(intent),
        metadata={str(k): str(v) for k, v in dict(intent.get("metadata") or {}).items()},
    )


class StripeGateway:
    """Gateway de pagos Stripe (PaymentIntents + Refunds + webhooks)."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        webhook_secret: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        webhook_tolerance_seconds: Optional[int] = None,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        settings = settings or get_payments_settings()
        self._secret_key = secret_key or settings.stripe_secret_key
        self._webhook_secret = webhook_secret or settings.stripe_webhook_secret
        self._timeout = timeout_seconds or settings.gateway_timeout_seconds
        self._tolerance = webhook_tolerance_seconds or settings.stripe_webhook_tolerance_seconds
        if not self._secret_key:
            logger.warning("STRIPE_SECRET_KEY not configured")

    @property
    def is_configured(self) -> bool:
        return bool(self._secret_key)

    # ------------------------------------------------------------------
    # Infra de llamada
    # ------------------------------------------------------------------
    async def _call(self, operation: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        if not self._secret_key:
            raise GatewayError(operation, "Stripe no está configurado (STRIPE_SECRET_KEY)")
        kwargs["api_key"] = self._secret_key
        with track_gateway_call(operation):
            try:
                return await asyncio.wait_for(
                    run_in_threadpool(fn, *args, **kwargs),
                    timeout=self._timeout,
                )
            except asyncio.TimeoutError:
                logger.warning("Stripe %s timed out after %.1fs", operation, self._timeout)
                raise GatewayError(operation, f"Timeout de Stripe en {operation}", timed_out=True)
            except stripe.StripeError as e:
                logger.warning("Stripe %s failed: %s", operation, e.user_message or str(e))
                raise GatewayError(operation, e.user_message or str(e))

    # ------------------------------------------------------------------
    # Capacidades
    # ------------------------------------------------------------------
    async def create_intent(
        self,
        *,
        amount_cents: int,
        currency: str,
        metadata: dict[str, str],
        idempotency_key: str,
        application_fee_cents: int = 0,
        connected_account_id: Optional[str] = None,
    ) -> GatewayIntent:
        params: dict[str, Any] = {
            "amount": amount_cents,
            "currency": currency.lower(),
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        }
        if connected_account_id:
            params["on_behalf_of"] = connected_account_id
            params["transfer_data"] = {"destination": connected_account_id}
            if application_fee_cents > 0:
                params["application_fee_amount"] = application_fee_cents

        intent = await self._call(
            "create_intent",
            stripe.PaymentIntent.create,
            idempotency_key=idempotency_key,
            **params,
        )
        logger.info("Stripe intent created id=%s amount=%s %s", intent.get("id"), amount_cents, currency)
        return to_gateway_intent(intent)

    async def retrieve_intent(self, intent_id: str) -> GatewayIntent:
        intent = await self._call(
            "retrieve_intent",
            stripe.PaymentIntent.retrieve,
            intent_id,
            expand=["latest_charge"],
        )
        return to_gateway_intent(intent)

    async def create_refund(
        self,
        *,
        charge_id: str,
        amount_cents: Optional[int],
        reason: Optional[str],
        idempotency_key: str,
    ) -> GatewayRefund:
        params: dict[str, Any] = {
            "charge": charge_id,
            "reason": reason if reason in STRIPE_REFUND_REASONS else "requested_by_customer",
        }
        if amount_cents is not None:
            params["amount"] = amount_cents

        refund = await self._call(
            "create_refund",
            stripe.Refund.create,
            idempotency_key=idempotency_key,
            **params,
        )
        if not refund or not refund.get("id"):
            raise GatewayError("create_refund", "Respuesta de Stripe sin id de refund")
        return GatewayRefund(
            id=str(refund["id"]),
            status=str(refund.get("status") or ""),
            amount_cents=int(refund.get("amount") or 0),
        )

    def verify_webhook_signature(self, payload: bytes, signature: str) -> GatewayEvent:
        """
        Verifica la cabecera Stripe-Signature (HMAC-SHA256 + tolerancia de
        timestamp) y parsea el evento.

        Raises:
            UnauthenticatedError: firma ausente/inválida, secreto no configurado
                o payload ilegible
        """
        if not self._webhook_secret:
            raise UnauthenticatedError("STRIPE_WEBHOOK_SECRET no configurado")
        if not signature:
            raise UnauthenticatedError("Falta la cabecera Stripe-Signature")

        try:
            text = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                text, signature, self._webhook_secret, self._tolerance
            )
            data = json.loads(text)
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid Stripe webhook signature: %s", e)
            raise UnauthenticatedError("Firma de webhook inválida")
        except (UnicodeDecodeError, ValueError) as e:
            logger.warning("Unreadable Stripe webhook payload: %s", e)
            raise UnauthenticatedError("Payload de webhook ilegible")

        event_id = data.get("id") if isinstance(data, dict) else None
        event_type = data.get("type") if isinstance(data, dict) else None
        if not event_id or not event_type:
            raise UnauthenticatedError("Evento de webhook sin id/type")

        return GatewayEvent(
            id=str(event_id),
            type=str(event_type),
            data_object=(data.get("data") or {}).get("object") or {},
            created=data.get("created"),
        )


@lru_cache(maxsize=1)
def get_payment_gateway() -> StripeGateway:
    """Gateway de producción (dependencia FastAPI; los tests la sobreescriben)."""
    return StripeGateway()


__all__ = ["StripeGateway", "STRIPE_REFUND_REASONS", "get_payment_gateway", "to_gateway_intent"]

# Fin del archivo app/modules/payments/gateway/stripe_gateway.py
