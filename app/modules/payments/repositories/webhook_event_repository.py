# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/webhook_event_repository.py

Repositorio del ledger de deduplicación de webhooks (webhook_events).

Fecha: 2026-10-17
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.base import utcnow
from app.shared.database.repository import BaseRepository
from app.modules.payments.models import WebhookEvent


class WebhookEventRepository(BaseRepository[WebhookEvent]):
    def __init__(self) -> None:
        super().__init__(WebhookEvent)

    async def get_by_event_id(self, session: AsyncSession, event_id: str) -> Optional[WebhookEvent]:
        stmt = (
            select(WebhookEvent)
            .where(WebhookEvent.event_id == event_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def mark_processed(self, session: AsyncSession, event_id: str, metadata: dict) -> int:
        """processed=false -> true; no hace commit."""
        stmt = (
            update(WebhookEvent)
            .where(WebhookEvent.event_id == event_id, WebhookEvent.processed.is_(False))
            .values(
                {
                    WebhookEvent.processed: True,
                    WebhookEvent.processed_at: utcnow(),
                    WebhookEvent.event_metadata: metadata,
                }
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount


__all__ = ["WebhookEventRepository"]

# Fin del archivo app/modules/payments/repositories/webhook_event_repository.py
