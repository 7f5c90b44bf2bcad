"""Tests for the Simulation context boundary."""

import random
import threading

import pytest

from npcverse.errors import InvalidInputError
from npcverse.schemas import Employer, InteractionType, ProjectComplexity
from npcverse.simulation import Simulation


def make_simulation(seed: int = 7, **kwargs) -> Simulation:
    kwargs.setdefault("verbose", False)
    kwargs.setdefault("event_chance", 0.1)
    kwargs.setdefault("spawn_chance", 0.2)
    kwargs.setdefault("max_active_projects", 3)
    kwargs.setdefault("history_limit", 50)
    return Simulation(seed=seed, **kwargs)


def test_new_simulation_has_starter_roster():
    sim = make_simulation()
    assert len(sim.roster()) == 8
    assert sim.team() == []
    assert sim.active_projects() == []
    assert sim.current_tick == 0


def test_seed_roster_can_be_skipped():
    assert make_simulation(seed_roster=False).roster() == []


def test_join_employer_forms_team_and_initial_project():
    sim = make_simulation()
    project = sim.join_employer(Employer(name="Initech", prestige_level=4))
    team = sim.team()

    assert len(team) == 4
    assert project.name == "Initech Initiative"
    assert project.complexity is ProjectComplexity.MODERATE
    assert project.member_ids == [agent.id for agent in team[:3]]
    assert [p.id for p in sim.active_projects()] == [project.id]
    assert len(sim.roster()) == 12


def test_join_employer_with_no_prestige_has_no_project():
    sim = make_simulation()
    assert sim.join_employer(Employer(name="Garage Startup", prestige_level=0)) is None
    assert sim.team() == []
    assert sim.active_projects() == []


def test_join_prestigious_employer_caps_team(capsys, monkeypatch):
    monkeypatch.setenv("NPCVERSE_NO_COLOR", "1")
    sim = make_simulation(verbose=True)
    project = sim.join_employer(Employer(name="Megacorp", prestige_level=10))

    assert len(sim.team()) == 5
    assert len(project.member_ids) == 3
    output = capsys.readouterr().out
    assert "Requested size 8 capped to 5" in output
    assert "Megacorp Initiative" in output


def test_interact_records_current_tick():
    sim = make_simulation()
    agent_id = sim.roster()[0].id

    sim.interact(agent_id, "praise")
    sim.tick()
    sim.interact(agent_id, InteractionType.SMALL_TALK)

    ticks = [r.tick for r in sim.recent_interactions() if r.agent_id == agent_id]
    assert ticks[0] == 1
    assert ticks[-1] == 0


def test_interact_unknown_agent():
    sim = make_simulation()
    result = sim.interact("nobody", "praise")
    assert not result.success
    assert result.message == "Character not found"
    assert sim.recent_interactions() == []


def test_tick_increments_counter():
    sim = make_simulation()
    reports = sim.run(3)
    assert [r.tick for r in reports] == [1, 2, 3]
    assert sim.current_tick == 3


def test_run_rejects_negative_ticks():
    with pytest.raises(InvalidInputError):
        make_simulation().run(-1)


@pytest.mark.parametrize("field", ["event_chance", "spawn_chance"])
@pytest.mark.parametrize("value", [-0.1, 1.5])
def test_invalid_probability_raises(field, value):
    with pytest.raises(InvalidInputError):
        make_simulation(**{field: value})


def test_negative_max_active_projects_raises():
    with pytest.raises(InvalidInputError):
        make_simulation(max_active_projects=-1)


def test_start_and_advance_project():
    sim = make_simulation(seed_roster=False)
    team = sim.form_team(2)
    project = sim.start_project("API Overhaul", "simple", [a.id for a in team])

    update = sim.advance_project(project.id, 200)
    assert update.completed
    assert sim.get_project(project.id) is None
    assert sim.advance_project(project.id, 1) is None


def test_rejected_input_is_logged_and_raised(capsys, monkeypatch):
    monkeypatch.setenv("NPCVERSE_NO_COLOR", "1")
    sim = make_simulation(verbose=True, seed_roster=False)
    project = sim.start_project("Guarded", ProjectComplexity.SIMPLE)
    capsys.readouterr()

    with pytest.raises(InvalidInputError):
        sim.advance_project(project.id, -5)

    assert "[!] [Input] Invalid player_contribution=-5" in capsys.readouterr().out
    assert sim.get_project(project.id).progress == 0


def test_team_performance_boost_uses_live_relationships():
    sim = make_simulation()
    team = sim.form_team(3)
    assert sim.team_performance_boost() == 0

    for agent in team:
        sim.directory.update(agent.id, relationship_with_player=90)
    assert sim.team_performance_boost() == 15

    for agent in team:
        sim.directory.update(agent.id, relationship_with_player=10)
    assert sim.team_performance_boost() == -10


def test_queries_are_read_only():
    sim = make_simulation()
    sim.join_employer(Employer(name="Initech", prestige_level=3))
    first = sim.snapshot()

    sim.roster()
    sim.team()
    sim.active_projects()
    sim.recent_interactions(5)
    sim.get_agent(first.roster[0].id).energy = 0

    assert sim.snapshot() == first


def test_same_seed_same_world():
    def play(seed):
        sim = make_simulation(seed=seed, event_chance=0.5, spawn_chance=0.5)
        sim.join_employer(Employer(name="Initech", prestige_level=5))
        sim.run(5)
        return sim.roster(), sim.active_projects()

    assert play(3) == play(3)


def test_snapshot_restore_round_trip():
    sim = make_simulation(event_chance=0.5, spawn_chance=0.5)
    sim.join_employer(Employer(name="Initech", prestige_level=5))
    sim.interact(sim.team()[0].id, "collaborate")
    sim.run(4)

    snapshot = sim.snapshot()
    assert snapshot.history
    restored = Simulation.restore(snapshot, rng=random.Random(0), verbose=False)

    assert restored.snapshot() == snapshot
    assert restored.current_tick == 4
    assert restored.team_performance_boost() == sim.team_performance_boost()


def test_restored_simulation_keeps_running():
    sim = make_simulation(spawn_chance=1.0)
    sim.join_employer(Employer(name="Initech", prestige_level=5))
    sim.run(2)

    restored = Simulation.restore(sim.snapshot(), seed=1, verbose=False, spawn_chance=1.0)
    report = restored.tick()

    assert report.tick == 3
    assert len(restored.roster()) == len(sim.roster())


def test_independent_simulations_do_not_share_state():
    first = make_simulation(seed=1)
    second = make_simulation(seed=1)
    first.form_team(5)
    assert second.team() == []
    assert len(second.roster()) == 8


def test_concurrent_interactions_are_serialized():
    sim = make_simulation(history_limit=200)
    agent_ids = [agent.id for agent in sim.roster()]

    def worker():
        for agent_id in agent_ids:
            sim.interact(agent_id, "small_talk")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(sim.recent_interactions()) == 4 * len(agent_ids)


def test_history_is_shared_with_engine_and_capped():
    sim = make_simulation(history_limit=5)
    assert sim.interactions.history is sim.history

    agent_id = sim.roster()[0].id
    for _ in range(8):
        sim.interact(agent_id, "praise")

    records = sim.recent_interactions()
    assert len(records) == 5
    assert all(r.agent_id == agent_id for r in records)
    assert len(sim.snapshot().history) == 5


def test_zero_history_limit_is_rejected():
    with pytest.raises(InvalidInputError):
        make_simulation(history_limit=0)


def test_restore_keeps_interaction_history():
    sim = make_simulation()
    for agent in sim.roster()[:3]:
        sim.interact(agent.id, "small_talk")
    sim.tick()
    sim.interact(sim.roster()[0].id, "praise")

    snapshot = sim.snapshot()
    assert len(snapshot.history) == 4

    restored = Simulation.restore(snapshot, seed=0, verbose=False)
    assert restored.recent_interactions() == sim.recent_interactions()
    assert restored.recent_interactions(1)[0].tick == 1
