# -*- coding: utf-8 -*-
"""
app/modules/payments/gateway/base.py

Contrato del gateway de pagos consumido por el reconciliador.

El reconciliador recibe una instancia al construirse (sin singletons
globales), de modo que los tests pueden inyectar un gateway en memoria que
implemente las mismas cuatro capacidades:

- create_intent
- retrieve_intent
- create_refund
- verify_webhook_signature

Fecha: 2026-10-17
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class GatewayIntent:
    """Vista normalizada de un payment intent del proveedor."""

    id: str
    status: str
    amount_cents: int
    currency: str
    client_secret: Optional[str] = None
    charge_id: Optional[str] = None
    failure_reason: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GatewayRefund:
    id: str
    status: str
    amount_cents: int


@dataclass(frozen=True)
class GatewayEvent:
    """Evento de webhook ya verificado."""

    id: str
    type: str
    data_object: dict[str, Any]
    created: Optional[int] = None

    @property
    def object_id(self) -> Optional[str]:
        value = self.data_object.get("id")
        return str(value) if value else None

    @property
    def metadata(self) -> dict[str, Any]:
        return self.data_object.get("metadata") or {}


@runtime_checkable
class PaymentGateway(Protocol):
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
        ...

    async def retrieve_intent(self, intent_id: str) -> GatewayIntent:
        ...

    async def create_refund(
        self,
        *,
        charge_id: str,
        amount_cents: Optional[int],
        reason: Optional[str],
        idempotency_key: str,
    ) -> GatewayRefund:
        ...

    def verify_webhook_signature(self, payload: bytes, signature: str) -> GatewayEvent:
        ...


__all__ = ["GatewayIntent", "GatewayRefund", "GatewayEvent", "PaymentGateway"]

# Fin del archivo app/modules/payments/gateway/base.py
