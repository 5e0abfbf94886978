import asyncio
import copy

import pytest

from bowlnow.client.cache import QueryCache
from bowlnow.client.optimistic import OptimisticStatusUpdater, OptimisticUpdateError


CLIENTS = [
    {"id": 1, "businessName": "Galaxy Bowl", "status": "prospect", "tags": ["league"]},
    {"id": 2, "businessName": "Pin Palace", "status": "active", "tags": []},
]


def seeded_cache():
    cache = QueryCache()
    cache.set("clients", copy.deepcopy(CLIENTS))
    return cache


@pytest.mark.asyncio
async def test_failed_update_restores_snapshot():
    cache = seeded_cache()
    seen = []
    cache.subscribe("clients", lambda key, value: seen.append([c["status"] for c in value]))

    async def persist(client_id, status):
        # The optimistic value is already visible while the request is in flight
        assert cache.get("clients")[0]["status"] == "active"
        raise RuntimeError("server said no")

    updater = OptimisticStatusUpdater(cache, persist)

    with pytest.raises(OptimisticUpdateError) as exc_info:
        await updater.change_status(1, "active")

    assert isinstance(exc_info.value.cause, RuntimeError)
    assert cache.get("clients") == CLIENTS
    assert seen == [["active", "active"], ["prospect", "active"]]
    assert updater.snapshots == {}


@pytest.mark.asyncio
async def test_successful_update_invalidates_collection():
    cache = seeded_cache()
    server = copy.deepcopy(CLIENTS)

    async def fetch_clients():
        return copy.deepcopy(server)

    async def persist(client_id, status):
        server[0]["status"] = status
        return server[0]

    cache.register("clients", fetch_clients)
    updater = OptimisticStatusUpdater(cache, persist)

    result = await updater.change_status(1, "past_due")

    assert result["status"] == "past_due"
    assert cache.get("clients")[0]["status"] == "past_due"
    assert not cache.is_stale("clients")


@pytest.mark.asyncio
async def test_concurrent_changes_roll_back_independently():
    cache = seeded_cache()
    release = asyncio.Event()

    async def persist(client_id, status):
        await release.wait()
        if client_id == 1:
            raise RuntimeError("conflict")
        return {"id": client_id, "status": status}

    updater = OptimisticStatusUpdater(cache, persist)

    first = asyncio.ensure_future(updater.change_status(1, "active"))
    second = asyncio.ensure_future(updater.change_status(2, "canceled"))
    await asyncio.sleep(0)
    assert set(updater.snapshots) == {1, 2}
    release.set()

    results = await asyncio.gather(first, second, return_exceptions=True)

    assert isinstance(results[0], OptimisticUpdateError)
    assert results[1] == {"id": 2, "status": "canceled"}
    records = {c["id"]: c for c in cache.get("clients")}
    assert records[1]["status"] == "prospect"
    assert records[2]["status"] == "canceled"


@pytest.mark.asyncio
async def test_unknown_record_still_persists():
    cache = seeded_cache()

    async def persist(client_id, status):
        return {"id": client_id, "status": status}

    updater = OptimisticStatusUpdater(cache, persist)

    assert await updater.change_status(99, "active") == {"id": 99, "status": "active"}
    assert cache.get("clients") == CLIENTS
    assert cache.is_stale("clients")
