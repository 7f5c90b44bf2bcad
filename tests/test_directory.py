"""Tests for the agent roster and active-team snapshot."""

import random

import pytest

from npcverse.directory import INITIAL_ROSTER, MAX_TEAM_SIZE, TEAM_ROLE_ROTATION, AgentDirectory
from npcverse.errors import InvalidInputError
from npcverse.schemas import Employer, Mood, Role, Seniority
from npcverse.traits import TraitGenerator


def make_directory(seed: int = 1, **kwargs) -> AgentDirectory:
    return AgentDirectory(TraitGenerator(random.Random(seed)), **kwargs)


def test_initial_roster_matches_starter_set():
    directory = make_directory()
    roster = directory.generate_initial_roster()

    assert len(roster) == 8
    assert len(directory) == 8
    assert [(a.role, a.seniority) for a in roster] == INITIAL_ROSTER
    assert len({a.id for a in roster}) == 8


def test_initial_roster_returns_copies():
    directory = make_directory()
    roster = directory.generate_initial_roster()
    roster[0].energy = 0
    assert directory.get(roster[0].id).energy == 80


def test_form_team_caps_at_rotation_length():
    directory = make_directory()
    team = directory.form_team(10)
    assert len(team) == MAX_TEAM_SIZE == 5
    assert [a.role for a in team] == TEAM_ROLE_ROTATION
    for agent in team:
        assert agent.seniority in (Seniority.JUNIOR, Seniority.MID, Seniority.SENIOR)


def test_form_team_zero_gives_empty_team():
    directory = make_directory()
    assert directory.form_team(0) == []
    assert directory.team() == []


@pytest.mark.parametrize("size", [-1, 2.5, "3", True])
def test_form_team_rejects_invalid_size(size):
    directory = make_directory()
    with pytest.raises(InvalidInputError):
        directory.form_team(size)


def test_reforming_replaces_team_but_keeps_roster():
    directory = make_directory()
    first = directory.form_team(3)
    second = directory.form_team(2)

    assert len(directory.team()) == 2
    assert {a.id for a in second}.isdisjoint(a.id for a in first)
    assert len(directory) == 5
    for agent in first:
        assert agent.id in directory


def test_team_snapshot_does_not_follow_roster_changes():
    directory = make_directory()
    member = directory.form_team(1)[0]

    directory.update(member.id, relationship_with_player=95, mood=Mood.HAPPY)

    assert directory.get(member.id).relationship_with_player == 95
    assert directory.team()[0].relationship_with_player == member.relationship_with_player
    assert directory.team()[0].mood is Mood.NEUTRAL


def test_unknown_lookup_returns_none():
    directory = make_directory()
    assert directory.get("nope") is None
    assert directory.update("nope", energy=10) is None
    assert directory.adjust("nope", energy=10) is None


def test_update_clamps_and_replaces_record():
    directory = make_directory()
    agent = directory.generate_initial_roster()[0]
    updated = directory.update(agent.id, energy=150, relationship_with_player=-5)

    assert updated.energy == 100
    assert updated.relationship_with_player == 0
    assert directory.get(agent.id) is updated


def test_update_cannot_change_id():
    directory = make_directory()
    agent = directory.generate_initial_roster()[0]
    with pytest.raises(InvalidInputError):
        directory.update(agent.id, id="other")


def test_adjust_applies_deltas():
    directory = make_directory()
    agent = directory.generate_initial_roster()[0]
    adjusted = directory.adjust(agent.id, energy=-90, productivity=10, relationship=5)

    assert adjusted.energy == 0
    assert adjusted.productivity == 85
    assert adjusted.relationship_with_player == 55


def test_roster_returns_copies():
    directory = make_directory()
    directory.generate_initial_roster()
    directory.roster()[0].energy = 1
    assert directory.roster()[0].energy == 80


def test_verbose_team_cap_is_logged(capsys, monkeypatch):
    monkeypatch.setenv("NPCVERSE_NO_COLOR", "1")
    directory = make_directory(verbose=True)
    directory.form_team(7, Employer(name="Initech", prestige_level=7))

    output = capsys.readouterr().out
    assert "Forming team of 5 at Initech" in output
    assert "Requested size 7 capped to 5" in output


def test_same_seed_same_team():
    first = make_directory(seed=5).form_team(4)
    second = make_directory(seed=5).form_team(4)
    assert first == second


def test_iteration_yields_live_records():
    directory = make_directory()
    directory.generate_initial_roster()
    roles = [agent.role for agent in directory]
    assert roles[0] is Role.SOFTWARE_ENGINEER
    assert len(roles) == 8
