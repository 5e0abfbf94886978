import pytest

from bowlnow.client.api import BowlNowClient, ApiError
from bowlnow.client.cache import QueryCache
from bowlnow.client.optimistic import OptimisticStatusUpdater, OptimisticUpdateError
from tests.conftest import client_payload


@pytest.fixture
def api(client):
    return BowlNowClient(client=client)


@pytest.mark.asyncio
async def test_client_round_trip(api):
    created = await api.create_client(client_payload(), default_status="active")
    assert created["status"] == "active"

    fetched = await api.get_client(created["id"])
    assert fetched["email"] == "dana@strikezone.test"

    await api.delete_client(created["id"], policy="cascade")
    assert await api.list_clients() == []


@pytest.mark.asyncio
async def test_errors_raise_api_error(api):
    with pytest.raises(ApiError) as exc_info:
        await api.get_client(12345)
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Client not found"

    with pytest.raises(ApiError) as exc_info:
        await api.create_client(client_payload(status="nope"))
    assert exc_info.value.status_code == 400
    assert exc_info.value.errors[0]["field"] == "status"


@pytest.mark.asyncio
async def test_optimistic_board_against_server(api):
    created = await api.create_client(client_payload())
    cache = QueryCache()
    cache.register("clients", api.list_clients)
    await cache.fetch("clients")
    updater = OptimisticStatusUpdater(cache, api.update_client_status)

    await updater.change_status(created["id"], "active")
    assert cache.get("clients")[0]["status"] == "active"

    before = cache.get("clients")
    with pytest.raises(OptimisticUpdateError):
        await updater.change_status(created["id"], "archived")
    assert cache.get("clients") == before


@pytest.mark.asyncio
async def test_export_and_metrics(api):
    await api.create_client(client_payload(status="active", currentPayment="$80"))

    assert (await api.export_csv("clients")).startswith("Business Name,")
    assert (await api.revenue_metrics(source="clients"))["totalMRR"] == 80.0
    assert (await api.dashboard_metrics())["activeClients"] == 1
