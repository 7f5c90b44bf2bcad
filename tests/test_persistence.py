"""Tests for snapshot persistence backends."""

import random
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from npcverse.persistence import InMemoryPersistence, JsonPersistence
from npcverse.schemas import Employer, SimulationSnapshot
from npcverse.simulation import Simulation

FIXED_TIME = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_snapshot(ticks: int = 2) -> SimulationSnapshot:
    sim = Simulation(
        rng=random.Random(5),
        verbose=False,
        event_chance=0.5,
        spawn_chance=0.5,
        max_active_projects=3,
        history_limit=50,
        clock=lambda: FIXED_TIME,
    )
    sim.join_employer(Employer(name="Initech", prestige_level=4))
    sim.interact(sim.team()[0].id, "praise")
    sim.run(ticks)
    return sim.snapshot()


@pytest.mark.asyncio
async def test_in_memory_persistence_round_trip():
    persistence = InMemoryPersistence()
    await persistence.initialize()

    run_id = uuid4()
    snapshot = make_snapshot()
    await persistence.save_snapshot(run_id, snapshot)

    assert await persistence.get_snapshot(run_id, snapshot.tick) == snapshot
    assert await persistence.get_snapshot(run_id, 99) is None
    assert await persistence.list_ticks(run_id) == [snapshot.tick]

    await persistence.close()


@pytest.mark.asyncio
async def test_in_memory_persistence_stores_copies():
    persistence = InMemoryPersistence()
    run_id = uuid4()
    snapshot = make_snapshot()
    await persistence.save_snapshot(run_id, snapshot)

    original_name = snapshot.roster[0].first_name
    snapshot.roster[0].first_name = "Mutated"
    stored = await persistence.get_snapshot(run_id, snapshot.tick)
    assert stored.roster[0].first_name == original_name

    stored.tick = 42
    assert (await persistence.get_snapshot(run_id, snapshot.tick)).tick == snapshot.tick


@pytest.mark.asyncio
async def test_latest_snapshot_and_delete():
    persistence = InMemoryPersistence()
    run_id = uuid4()
    other_run = uuid4()

    assert await persistence.get_latest_snapshot(run_id) is None

    for ticks in (1, 3, 2):
        await persistence.save_snapshot(run_id, make_snapshot(ticks))
    await persistence.save_snapshot(other_run, make_snapshot(1))

    assert await persistence.list_ticks(run_id) == [1, 2, 3]
    assert (await persistence.get_latest_snapshot(run_id)).tick == 3

    await persistence.delete_run(run_id)
    assert await persistence.list_ticks(run_id) == []
    assert await persistence.list_ticks(other_run) == [1]


@pytest.mark.asyncio
async def test_json_persistence_round_trip(tmp_path):
    persistence = JsonPersistence(tmp_path / "runs")
    await persistence.initialize()

    run_id = uuid4()
    snapshot = make_snapshot(3)
    assert snapshot.history
    await persistence.save_snapshot(run_id, snapshot)

    path = tmp_path / "runs" / str(run_id) / "snapshots" / "00003.json"
    assert path.exists()

    restored = await persistence.get_snapshot(run_id, 3)
    assert restored == snapshot
    assert await persistence.get_latest_snapshot(run_id) == snapshot
    assert await persistence.get_snapshot(run_id, 4) is None

    await persistence.close()


@pytest.mark.asyncio
async def test_json_persistence_restores_simulation(tmp_path):
    persistence = JsonPersistence(tmp_path)
    run_id = uuid4()
    snapshot = make_snapshot()
    await persistence.save_snapshot(run_id, snapshot)

    loaded = await persistence.get_latest_snapshot(run_id)
    sim = Simulation.restore(loaded, seed=0, verbose=False)

    assert sim.snapshot() == snapshot


@pytest.mark.asyncio
async def test_json_persistence_delete_run(tmp_path):
    persistence = JsonPersistence(tmp_path)
    run_id = uuid4()
    await persistence.save_snapshot(run_id, make_snapshot(1))
    await persistence.save_snapshot(run_id, make_snapshot(2))

    assert await persistence.list_ticks(run_id) == [1, 2]
    await persistence.delete_run(run_id)
    assert await persistence.list_ticks(run_id) == []
    assert not (tmp_path / str(run_id)).exists()

    # Deleting an unknown run is a no-op
    await persistence.delete_run(uuid4())
