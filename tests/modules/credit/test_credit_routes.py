# -*- coding: utf-8 -*-
"""
tests/modules/credit/test_credit_routes.py

Tests HTTP de las rutas del ledger de crédito.

Verifica:
- Autorización por tenant (401 sin usuario, 403 fuera del tenant)
- Alta de cuenta, cargos y límite excedido con detalle estructurado
- Override de saldo y pago de transacciones

Fecha: 2026-10-17
"""

from decimal import Decimal

import pytest


def _base(tenant_id: str) -> str:
    return f"/api/tenants/{tenant_id}"


async def _create_account(client, headers, tenant_id, customer_id, limit="100.00"):
    resp = await client.post(
        f"{_base(tenant_id)}/credit",
        json={"customer_id": customer_id, "limit": limit},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreditAuth:
    @pytest.mark.asyncio
    async def test_missing_user_is_401(self, async_client, tenant_id):
        resp = await async_client.get(f"{_base(tenant_id)}/credit")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_non_member_is_403(self, async_client, auth_headers, other_tenant_id):
        resp = await async_client.get(f"{_base(other_tenant_id)}/credit", headers=auth_headers)
        assert resp.status_code == 403


class TestCreditAccountsRoutes:
    @pytest.mark.asyncio
    async def test_create_and_list_accounts(self, async_client, auth_headers, tenant_id, customer_id):
        created = await _create_account(async_client, auth_headers, tenant_id, customer_id)
        assert Decimal(created["limit"]) == Decimal("100.00")
        assert Decimal(created["balance"]) == Decimal("0")
        assert created["status"] == "active"

        resp = await async_client.get(f"{_base(tenant_id)}/credit", headers=auth_headers)
        assert resp.status_code == 200
        accounts = resp.json()
        assert len(accounts) == 1
        assert accounts[0]["customer_name"] == "Ana López"

    @pytest.mark.asyncio
    async def test_duplicate_account_is_409(self, async_client, auth_headers, tenant_id, customer_id):
        await _create_account(async_client, auth_headers, tenant_id, customer_id)
        resp = await async_client.post(
            f"{_base(tenant_id)}/credit",
            json={"customer_id": customer_id, "limit": "50"},
            headers=auth_headers,
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_oversized_limit_is_rejected_by_schema(self, async_client, auth_headers, tenant_id, customer_id):
        resp = await async_client.post(
            f"{_base(tenant_id)}/credit",
            json={"customer_id": customer_id, "limit": "1e30"},
            headers=auth_headers,
        )
        assert resp.status_code == 422

        resp = await async_client.get(f"{_base(tenant_id)}/credit", headers=auth_headers)
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_unknown_customer_is_422(self, async_client, auth_headers, tenant_id, other_customer_id):
        resp = await async_client.post(
            f"{_base(tenant_id)}/credit",
            json={"customer_id": other_customer_id, "limit": "50"},
            headers=auth_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["error"] == "reference_error"

    @pytest.mark.asyncio
    async def test_balance_override(self, async_client, auth_headers, tenant_id, customer_id):
        created = await _create_account(async_client, auth_headers, tenant_id, customer_id)

        resp = await async_client.put(
            f"{_base(tenant_id)}/credit/{created['id']}/balance",
            json={"balance": "12.34"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert Decimal(resp.json()["balance"]) == Decimal("12.34")

        resp = await async_client.put(
            f"{_base(tenant_id)}/credit/{created['id']}/balance",
            json={"balance": "-1"},
            headers=auth_headers,
        )
        assert resp.status_code == 400


class TestCreditTransactionsRoutes:
    @pytest.mark.asyncio
    async def test_apply_then_exceed_limit(self, async_client, auth_headers, tenant_id, customer_id):
        await _create_account(async_client, auth_headers, tenant_id, customer_id)
        url = f"{_base(tenant_id)}/credit-transactions"

        resp = await async_client.post(
            url,
            json={"customer_id": customer_id, "amount": "85.50", "fee": "0", "due_date": "2026-11-30T00:00:00Z"},
            headers=auth_headers,
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert Decimal(body["balance"]) == Decimal("85.50")
        assert Decimal(body["available"]) == Decimal("14.50")
        assert body["transaction"]["status"] == "pending"

        resp = await async_client.post(
            url,
            json={"customer_id": customer_id, "amount": "20.00", "fee": "0", "due_date": "2026-11-30T00:00:00Z"},
            headers=auth_headers,
        )
        assert resp.status_code == 422
        error = resp.json()
        assert error["error"] == "limit_exceeded"
        assert error["details"]["balance"] == "85.50"
        assert error["details"]["limit"] == "100.00"
        assert error["details"]["requested"] == "20.00"

        resp = await async_client.get(url, headers=auth_headers)
        assert resp.status_code == 200
        assert len(resp.json()) == 1

    @pytest.mark.asyncio
    async def test_charge_without_account_is_404(self, async_client, auth_headers, tenant_id, customer_id):
        resp = await async_client.post(
            f"{_base(tenant_id)}/credit-transactions",
            json={"customer_id": customer_id, "amount": "10", "due_date": "2026-11-30T00:00:00Z"},
            headers=auth_headers,
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_pay_transaction(self, async_client, auth_headers, tenant_id, customer_id):
        await _create_account(async_client, auth_headers, tenant_id, customer_id)
        resp = await async_client.post(
            f"{_base(tenant_id)}/credit-transactions",
            json={"customer_id": customer_id, "amount": "10", "due_date": "2026-11-30T00:00:00Z"},
            headers=auth_headers,
        )
        tx_id = resp.json()["transaction"]["id"]

        resp = await async_client.post(
            f"{_base(tenant_id)}/credit-transactions/{tx_id}/pay", headers=auth_headers
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "paid"

        resp = await async_client.post(
            f"{_base(tenant_id)}/credit-transactions/{tx_id}/pay", headers=auth_headers
        )
        assert resp.status_code == 409
        assert resp.json()["details"]["current_status"] == "paid"

# Fin del archivo tests/modules/credit/test_credit_routes.py
