# -*- coding: utf-8 -*-
"""
tests/conftest.py

Config global de tests del backend PharmaDesk.

- Variables de entorno de prueba ANTES de importar la app
- Tipos exclusivos de PostgreSQL (ENUM, JSONB) reemplazados por tipos
  portables para crear el esquema en SQLite (aiosqlite)
- Engine SQLite en memoria por test (StaticPool: una sola conexión)
- Datos semilla: dos tenants con un cliente cada uno
- Gateway de pagos en memoria que implementa el protocolo PaymentGateway
- App FastAPI con overrides de sesión y gateway + cliente httpx con ciclo de vida

Fecha: 2026-10-17
"""

import os
from collections.abc import AsyncIterator
from dataclasses import replace
from typing import Optional

# -----------------------------------------------------------------------------
# 0) Entorno de pruebas (antes de cualquier import de app.*)
# -----------------------------------------------------------------------------
WEBHOOK_SECRET = "whsec_test_pharmadesk"

os.environ["PYTHON_ENV"] = "test"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_pharmadesk"
os.environ["STRIPE_WEBHOOK_SECRET"] = WEBHOOK_SECRET
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.shared.database.base import Base
from app.shared.errors import GatewayError
from app.modules.credit import models as _credit_models  # noqa: F401
from app.modules.payments import models as _payment_models  # noqa: F401
from app.modules.payments.gateway import GatewayEvent, GatewayIntent, GatewayRefund, StripeGateway
from app.modules.tenants.models import Customer, Tenant

TENANT_ID = "11111111-1111-4111-8111-111111111111"
OTHER_TENANT_ID = "22222222-2222-4222-8222-222222222222"
CUSTOMER_ID = "33333333-3333-4333-8333-333333333333"
OTHER_CUSTOMER_ID = "44444444-4444-4444-8444-444444444444"
USER_ID = "user-farmacia-01"


# -----------------------------------------------------------------------------
# 1) Esquema portable para SQLite
# -----------------------------------------------------------------------------
def _patch_pg_types_for_sqlite() -> None:
    """
    ENUM de PostgreSQL -> String(50); JSONB -> JSON.

    Los StrEnum se guardan como su valor y se leen como str; comparar
    contra el enum funciona igual (StrEnum hereda de str).
    """
    for table in Base.metadata.tables.values():
        for column in table.columns:
            if isinstance(column.type, PG_ENUM):
                column.type = String(50)
            elif isinstance(column.type, JSONB):
                column.type = JSON()


_patch_pg_types_for_sqlite()


# -----------------------------------------------------------------------------
# 2) Base de datos por test
# -----------------------------------------------------------------------------
@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(
        bind=db_engine,
        expire_on_commit=False,
        class_=AsyncSession,
        autoflush=False,
    )


@pytest.fixture
async def seed_tenants(session_factory):
    """Dos tenants aislados, un cliente en cada uno."""
    async with session_factory() as session:
        session.add_all(
            [
                Tenant(id=TENANT_ID, name="Farmacia Centro"),
                Tenant(id=OTHER_TENANT_ID, name="Farmacia Norte"),
                Customer(id=CUSTOMER_ID, tenant_id=TENANT_ID, name="Ana López", email="ana@example.com"),
                Customer(id=OTHER_CUSTOMER_ID, tenant_id=OTHER_TENANT_ID, name="Luis Pérez"),
            ]
        )
        await session.commit()


@pytest.fixture
async def db_session(session_factory, seed_tenants) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def tenant_id() -> str:
    return TENANT_ID


@pytest.fixture
def other_tenant_id() -> str:
    return OTHER_TENANT_ID


@pytest.fixture
def customer_id() -> str:
    return CUSTOMER_ID


@pytest.fixture
def other_customer_id() -> str:
    """Cliente que pertenece al otro tenant."""
    return OTHER_CUSTOMER_ID


# -----------------------------------------------------------------------------
# 3) Gateway de pagos en memoria
# -----------------------------------------------------------------------------
class FakeGateway:
    """
    Implementa las cuatro capacidades del gateway sin red.

    - Registra cada llamada en `calls` (operación, kwargs)
    - `fail_next(op)` hace que la próxima llamada a `op` lance GatewayError
    - La firma de webhooks usa la verificación real de StripeGateway
    """

    def __init__(self, webhook_secret: str = WEBHOOK_SECRET):
        self.intents: dict[str, GatewayIntent] = {}
        self.refunds: list[GatewayRefund] = []
        self.calls: list[tuple[str, dict]] = []
        self._failures: dict[str, GatewayError] = {}
        self._seq = 0
        self._verifier = StripeGateway(secret_key="sk_test_fake", webhook_secret=webhook_secret)

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}_test_{self._seq:04d}"

    def _maybe_fail(self, operation: str) -> None:
        error = self._failures.pop(operation, None)
        if error is not None:
            raise error

    def fail_next(self, operation: str, timed_out: bool = False) -> None:
        self._failures[operation] = GatewayError(operation, f"{operation} unavailable", timed_out=timed_out)

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    def set_intent_status(
        self,
        intent_id: str,
        status: str,
        charge_id: Optional[str] = None,
        failure_reason: Optional[str] = None,
        amount_cents: Optional[int] = None,
    ) -> GatewayIntent:
        current = self.intents[intent_id]
        updated = replace(
            current,
            status=status,
            charge_id=charge_id,
            failure_reason=failure_reason,
            amount_cents=current.amount_cents if amount_cents is None else amount_cents,
        )
        self.intents[intent_id] = updated
        return updated

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
        self.calls.append(
            (
                "create_intent",
                {
                    "amount_cents": amount_cents,
                    "currency": currency,
                    "metadata": dict(metadata),
                    "idempotency_key": idempotency_key,
                    "application_fee_cents": application_fee_cents,
                    "connected_account_id": connected_account_id,
                },
            )
        )
        self._maybe_fail("create_intent")
        intent_id = self._next_id("pi")
        intent = GatewayIntent(
            id=intent_id,
            status="requires_payment_method",
            amount_cents=amount_cents,
            currency=currency,
            client_secret=f"{intent_id}_secret_abc",
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        return intent

    async def retrieve_intent(self, intent_id: str) -> GatewayIntent:
        self.calls.append(("retrieve_intent", {"intent_id": intent_id}))
        self._maybe_fail("retrieve_intent")
        if intent_id not in self.intents:
            raise GatewayError("retrieve_intent", f"No such payment_intent: {intent_id}")
        return self.intents[intent_id]

    async def create_refund(
        self,
        *,
        charge_id: str,
        amount_cents: Optional[int],
        reason: Optional[str],
        idempotency_key: str,
    ) -> GatewayRefund:
        self.calls.append(
            (
                "create_refund",
                {
                    "charge_id": charge_id,
                    "amount_cents": amount_cents,
                    "reason": reason,
                    "idempotency_key": idempotency_key,
                },
            )
        )
        self._maybe_fail("create_refund")
        refund = GatewayRefund(id=self._next_id("re"), status="succeeded", amount_cents=amount_cents or 0)
        self.refunds.append(refund)
        return refund

    def verify_webhook_signature(self, payload: bytes, signature: str) -> GatewayEvent:
        return self._verifier.verify_webhook_signature(payload, signature)


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET


# -----------------------------------------------------------------------------
# 4) App FastAPI y cliente httpx (con ciclo de vida)
# -----------------------------------------------------------------------------
@pytest.fixture
def app(session_factory, seed_tenants, fake_gateway):
    """App nueva por test con la sesión SQLite y el gateway en memoria."""
    from app.main import create_app
    from app.modules.payments.gateway import get_payment_gateway
    from app.shared.database.database import get_async_session

    fastapi_app = create_app()

    async def _session_override() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
            finally:
                if session.in_transaction():
                    await session.rollback()

    fastapi_app.dependency_overrides[get_async_session] = _session_override
    fastapi_app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers que inyecta el proxy de identidad para un miembro del tenant."""
    return {"X-User-Id": USER_ID, "X-Tenant-Ids": TENANT_ID}

# Fin del archivo tests/conftest.py
