# -*- coding: utf-8 -*-
"""
app/modules/payments/models/webhook_event_models.py

Ledger de deduplicación de webhooks del gateway.

Una fila por event_id (UNIQUE). `processed=false` = visto pero no aplicado
(candidato a redelivery); `processed=true` solo tras confirmar la mutación
del pago. Nunca se borran.

Fecha: 2026-10-17
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, new_uuid, utcnow


class WebhookEvent(Base):
    __tablename__ = "webhook_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    event_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="ID del evento en el proveedor (evt_...).",
    )

    event_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Tipo de evento (payment_intent.succeeded, ...).",
    )

    processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    event_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSONB,
        nullable=False,
        default=dict,
        doc="Resumen del evento (intent, tenant, resultado del dispatch).",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("event_id", name="uq_webhook_events_event_id"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<WebhookEvent event_id={self.event_id} type={self.event_type} processed={self.processed}>"

# Fin del archivo app/modules/payments/models/webhook_event_models.py
