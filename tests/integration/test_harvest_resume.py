"""
Crash and restart scenarios for the harvest loop
"""

import pytest

from core.exceptions import AggregationError, EnumerationError
from harvester.checkpoint import CheckpointResolver
from harvester.extractors.aggregator import InscriptionAggregator
from harvester.extractors.enumerator import BlockEnumerator
from harvester.loaders.persister import InscriptionPersister
from harvester.runner import HarvestRunner


def runner_for(ord_source, store, genesis_block=100):
    return HarvestRunner(
        source=ord_source,
        enumerator=BlockEnumerator(ord_source),
        aggregator=InscriptionAggregator(ord_source, throttle_width=8),
        persister=InscriptionPersister(store, batch_size=3),
        resolver=CheckpointResolver(store, genesis_block=genesis_block),
    )


def populate(ord_server):
    ord_server.height = 103
    ord_server.add_block(100, [["a0", "a1", "a2"], ["a3"]])
    ord_server.add_block(101, [["b0", "b1", "b1"]])
    ord_server.add_block(102, [[]])
    ord_server.add_block(103, [["d0", "d1", "d2", "d3", "d4"], ["d5"]])


@pytest.mark.asyncio
async def test_restart_after_failure_matches_clean_run(ord_server, ord_source, fake_store):
    populate(ord_server)

    clean_store = type(fake_store)()
    await runner_for(ord_source, clean_store).run()

    # Block 103 fails part way through its fetches
    missing = ord_server.details.pop("d3")
    with pytest.raises(AggregationError):
        await runner_for(ord_source, fake_store).run()
    assert fake_store.blocks() == [100, 101]

    ord_server.details["d3"] = missing
    summary = await runner_for(ord_source, fake_store).run()

    assert summary.start_block == 101
    assert set(fake_store.rows) == set(clean_store.rows)
    assert len(fake_store.rows) == 12


@pytest.mark.asyncio
async def test_restart_after_partial_write(ord_server, ord_source, fake_store):
    populate(ord_server)
    # One row of block 103 is refused by the store
    fake_store.bad_ids = {"d4"}

    await runner_for(ord_source, fake_store).run()
    assert len([r for r in fake_store.rows.values() if r["genesis_block_height"] == 103]) == 5
    assert "d4" not in fake_store.rows

    fake_store.bad_ids = set()
    await runner_for(ord_source, fake_store).run()

    assert fake_store.deleted_blocks[-1] == 103
    assert len([r for r in fake_store.rows.values() if r["genesis_block_height"] == 103]) == 6


@pytest.mark.asyncio
async def test_restart_is_idempotent(ord_server, ord_source, fake_store):
    populate(ord_server)

    await runner_for(ord_source, fake_store).run()
    first = dict(fake_store.rows)
    summary = await runner_for(ord_source, fake_store).run()

    assert summary.blocks == [103]
    assert set(fake_store.rows) == set(first)


@pytest.mark.asyncio
async def test_new_blocks_picked_up_on_next_run(ord_server, ord_source, fake_store):
    populate(ord_server)
    await runner_for(ord_source, fake_store).run()

    ord_server.height = 104
    ord_server.add_block(104, [["e0"]])
    summary = await runner_for(ord_source, fake_store).run()

    assert summary.blocks == [103, 104]
    assert fake_store.blocks() == [100, 101, 103, 104]


@pytest.mark.asyncio
async def test_transient_listing_errors_are_retried(ord_server, ord_source, fake_store):
    populate(ord_server)
    ord_server.fail("/inscriptions/block/101/0", 503, 502)

    await runner_for(ord_source, fake_store).run()

    assert {"b0", "b1"} <= set(fake_store.rows)


@pytest.mark.asyncio
async def test_listing_failure_stops_before_later_blocks(ord_server, ord_source, fake_store):
    populate(ord_server)
    ord_server.fail("/inscriptions/block/101/0", 500, 500, 500)

    with pytest.raises(EnumerationError):
        await runner_for(ord_source, fake_store).run()

    assert fake_store.blocks() == [100]
