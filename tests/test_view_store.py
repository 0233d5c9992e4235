import asyncio
import uuid

import pytest

from imobi.core.view_store import ViewKey, ViewStore


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


ORG = uuid.uuid4()
STATS = ViewKey(name="dashboard_stats", org_id=ORG, entities=("leads", "rentals"))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return ViewStore(ttl_seconds=60, clock=clock)


def counting_loader(values):
    calls = []

    async def load():
        calls.append(1)
        return values[len(calls) - 1]

    return load, calls


async def test_serves_cached_view_while_fresh(store, clock):
    load, calls = counting_loader(["first", "second"])

    assert (await store.get_or_load(STATS, load)).data == "first"
    clock.now = 59
    assert (await store.get_or_load(STATS, load)).data == "first"
    assert len(calls) == 1


async def test_reloads_after_ttl(store, clock):
    load, calls = counting_loader(["first", "second"])

    await store.get_or_load(STATS, load)
    clock.now = 60
    result = await store.get_or_load(STATS, load)

    assert result.data == "second"
    assert result.stale is False
    assert len(calls) == 2


async def test_invalidate_by_entity(store):
    load, calls = counting_loader(["first", "second"])
    other = ViewKey(name="stale_leads", org_id=ORG, entities=("properties",))

    await store.get_or_load(STATS, load)
    await store.get_or_load(other, lambda: asyncio.sleep(0, result="other"))

    assert store.invalidate("leads") == 1
    assert (await store.get_or_load(STATS, load)).data == "second"
    assert (await store.get_or_load(other, load)).data == "other"


async def test_invalidate_detail_view_by_id(store):
    lead_id = uuid.uuid4()
    detail = ViewKey(name="lead", org_id=ORG, entities=("leads",), entity_id=lead_id)
    await store.get_or_load(detail, lambda: asyncio.sleep(0, result="detail"))

    assert store.invalidate("leads", uuid.uuid4()) == 0
    assert store.invalidate("leads", lead_id) == 1


async def test_failed_refresh_serves_previous_snapshot(store, clock):
    await store.get_or_load(STATS, lambda: asyncio.sleep(0, result="snapshot"))
    clock.now = 120

    async def failing():
        raise RuntimeError("database unavailable")

    result = await store.get_or_load(STATS, failing)

    assert result.data == "snapshot"
    assert result.stale is True
    assert "database unavailable" in result.error


async def test_failed_first_load_propagates(store):
    async def failing():
        raise RuntimeError("database unavailable")

    with pytest.raises(RuntimeError):
        await store.get_or_load(STATS, failing)


async def test_load_superseded_by_invalidation_is_not_stored(store):
    release = asyncio.Event()

    async def slow():
        await release.wait()
        return "outdated"

    pending = asyncio.create_task(store.get_or_load(STATS, slow))
    await asyncio.sleep(0)
    store.invalidate("rentals")
    release.set()

    # The superseded caller still gets its answer
    assert (await pending).data == "outdated"

    load, calls = counting_loader(["fresh"])
    assert (await store.get_or_load(STATS, load)).data == "fresh"
    assert len(calls) == 1


async def test_views_are_scoped_by_params(store):
    six = ViewKey(name="monthly", org_id=ORG, entities=("leads",), params=(6,))
    twelve = ViewKey(name="monthly", org_id=ORG, entities=("leads",), params=(12,))

    await store.get_or_load(six, lambda: asyncio.sleep(0, result="six"))
    result = await store.get_or_load(twelve, lambda: asyncio.sleep(0, result="twelve"))

    assert result.data == "twelve"
