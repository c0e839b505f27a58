"""Integration tests for the arrangement options API client"""

import httpx
import pytest
from arrangement_gateway.domain.exceptions import ArrangementsAPIError
from arrangement_gateway.infrastructure.clients.arrangements import ArrangementsClient
from arrangement_gateway.infrastructure.clients.schemas import CreatePlanRequest
from stubs.arrangements_server.main import seed_plan


def client_with_handler(handler) -> ArrangementsClient:
    return ArrangementsClient(
        base_url="http://arrangements.test",
        token="tenant-1",
        transport=httpx.MockTransport(handler),
    )


async def test_create_and_fetch_plan(arrangements_client: ArrangementsClient, fixed_monthly_plan):
    """Test POST then GET returns the stored record"""
    created = await arrangements_client.create_plan(CreatePlanRequest.from_plan(fixed_monthly_plan))

    assert created.id
    assert created.tenant_id == "tenant-1"
    assert created.fixed_monthly_payment_cents == 15000
    assert created.created_at is not None

    fetched = await arrangements_client.get_plan(created.id)
    assert fetched == created


async def test_list_plans_is_scoped_to_tenant(stub_api, client_for, fixed_monthly_plan, settlement_plan):
    own = client_for("tenant-1")
    other = client_for("tenant-2")
    await own.create_plan(CreatePlanRequest.from_plan(fixed_monthly_plan))
    await other.create_plan(CreatePlanRequest.from_plan(settlement_plan))

    own_plans = await own.list_plans()

    assert [record.name for record in own_plans] == ["Fixed $150"]


async def test_get_and_delete_missing_plan(arrangements_client: ArrangementsClient):
    assert await arrangements_client.get_plan("does-not-exist") is None
    assert await arrangements_client.delete_plan("does-not-exist") is False


async def test_delete_plan(stub_api, arrangements_client: ArrangementsClient):
    stored = seed_plan(stub_api, "tenant-1", {"name": "Old", "balanceTier": "under_3000", "planType": "custom_terms"})

    assert await arrangements_client.delete_plan(stored["id"]) is True
    assert await arrangements_client.get_plan(stored["id"]) is None


async def test_sends_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = request.headers.get("authorization")
        return httpx.Response(200, json=[])

    await client_with_handler(handler).list_plans()

    assert seen["authorization"] == "Bearer tenant-1"


async def test_server_error_raises_api_error():
    client = client_with_handler(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(ArrangementsAPIError, match="500"):
        await client.list_plans()


async def test_timeout_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ArrangementsAPIError, match="timeout"):
        await client_with_handler(handler).get_plan("opt-1")


async def test_connection_error_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ArrangementsAPIError, match="unreachable"):
        await client_with_handler(handler).list_plans()


async def test_malformed_body_raises_api_error():
    client = client_with_handler(lambda request: httpx.Response(200, json={"plans": []}))
    with pytest.raises(ArrangementsAPIError):
        await client.list_plans()

    client = client_with_handler(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(ArrangementsAPIError):
        await client.get_plan("opt-1")

    client = client_with_handler(lambda request: httpx.Response(200, json={"name": "no id"}))
    with pytest.raises(ArrangementsAPIError):
        await client.get_plan("opt-1")
