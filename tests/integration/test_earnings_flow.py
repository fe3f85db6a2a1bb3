"""Integration tests for creator payouts (requires PG + Redis)."""

import asyncio

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio(loop_scope="session")

_PROCESSOR_HEADERS = {"X-Processor-Key": "test-processor-key"}


async def _creator_with_earnings(
    client: AsyncClient, signup, coins: int
) -> dict[str, str]:
    """A fan buys the largest packages and gifts ``coins`` to a fresh creator."""
    _, fan = await signup(client)
    creator_id, creator = await signup(client)
    for _ in range(coins // 6500 + 1):
        await client.post(
            "/api/v1/coins/purchase",
            json={"package_id": 6, "payment_method_id": "pm_test"},
            headers=fan,
        )
    resp = await client.post(
        "/api/v1/coins/gift",
        json={"recipient_id": creator_id, "amount": coins},
        headers=fan,
    )
    assert resp.status_code == 200
    return creator


class TestPayoutRequest:
    async def test_below_minimum(self, client: AsyncClient, signup) -> None:
        creator = await _creator_with_earnings(client, signup, 4000)
        resp = await client.post("/api/v1/earnings/payout", json={"coins": 4000}, headers=creator)
        assert resp.status_code == 422
        assert resp.json()["code"] == 3001

    async def test_request_then_exhausted(self, client: AsyncClient, signup) -> None:
        creator = await _creator_with_earnings(client, signup, 10000)

        resp = await client.post("/api/v1/earnings/payout", json={"coins": 10000}, headers=creator)
        assert resp.status_code == 200
        payout = resp.json()["data"]
        assert payout["status"] == "PENDING"
        assert payout["gross_cents"] == 12821
        assert payout["platform_fee_cents"] == 7692
        assert payout["net_payout_cents"] == 5128

        again = await client.post("/api/v1/earnings/payout", headers=creator)
        assert again.status_code == 422
        assert again.json()["code"] == 3002

    async def test_concurrent_requests(self, client: AsyncClient, signup) -> None:
        creator = await _creator_with_earnings(client, signup, 10000)
        results = await asyncio.gather(
            client.post("/api/v1/earnings/payout", json={"coins": 10000}, headers=creator),
            client.post("/api/v1/earnings/payout", json={"coins": 10000}, headers=creator),
        )
        assert sorted(r.status_code for r in results) == [200, 422]


class TestPayoutLifecycle:
    async def test_cancel_releases_then_paid_is_terminal(self, client: AsyncClient, signup) -> None:
        creator = await _creator_with_earnings(client, signup, 10000)
        first = (await client.post("/api/v1/earnings/payout", headers=creator)).json()["data"]

        cancelled = await client.post(
            f"/api/v1/earnings/payouts/{first['id']}/cancel", headers=creator
        )
        assert cancelled.json()["data"]["status"] == "CANCELLED"

        dash = (await client.get("/api/v1/earnings", headers=creator)).json()["data"]
        assert dash["available_for_payout"]["coins"] == 10000

        second = (await client.post("/api/v1/earnings/payout", headers=creator)).json()["data"]
        paid = await client.post(
            f"/api/v1/processor/payouts/{second['id']}/mark-paid",
            json={"notes": "wire 1"},
            headers=_PROCESSOR_HEADERS,
        )
        assert paid.json()["data"]["status"] == "PAID"

        late = await client.post(
            f"/api/v1/earnings/payouts/{second['id']}/cancel", headers=creator
        )
        assert late.status_code == 409

        history = (await client.get("/api/v1/earnings/payouts", headers=creator)).json()["data"]
        assert [p["status"] for p in history["items"]] == ["PAID", "CANCELLED"]
        assert history["pagination"]["total"] == 2
