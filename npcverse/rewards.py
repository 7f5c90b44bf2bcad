"""Host-side reward helpers.

The simulation core never pays out money or performance; the host game loop
applies these to its own player record after a tick.
"""

from typing import Iterable, List, Tuple

from .schemas import NPCCharacter, ProjectCompletion

# (exclusive lower bound on mean relationship, performance boost), checked in order
RELATIONSHIP_BOOSTS: List[Tuple[int, int]] = [(70, 15), (50, 5)]
POOR_RELATIONSHIP_THRESHOLD = 30
POOR_RELATIONSHIP_PENALTY = -10

PROJECT_BONUS_RATE = 0.5


def team_performance_boost(team: Iterable[NPCCharacter]) -> int:
    """Performance boost from the team's mean relationship with the player.

    Pass live roster records; the active-team snapshot is taken at formation and goes stale.
    """
    members = list(team)
    if not members:
        return 0

    average = sum(m.relationship_with_player for m in members) // len(members)
    for threshold, boost in RELATIONSHIP_BOOSTS:
        if average > threshold:
            return boost
    if average < POOR_RELATIONSHIP_THRESHOLD:
        return POOR_RELATIONSHIP_PENALTY
    return 0


def project_bonus(completion: ProjectCompletion) -> int:
    """Salary bonus for a completed project: target * quality% * 0.5."""
    return int(completion.target_progress * (completion.quality / 100.0) * PROJECT_BONUS_RATE)


def total_project_bonus(completions: Iterable[ProjectCompletion]) -> int:
    return sum(project_bonus(c) for c in completions)
