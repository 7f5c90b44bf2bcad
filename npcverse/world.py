"""
World tick driver: advances the whole simulation by one step (one in-game year).

Tick order:
1. Character drift for every roster agent: energy +5, non-neutral mood resets
   to neutral with 50% chance, productivity drifts by [-5, 5]
2. Every active project advances with zero player contribution
3. Each active-team agent independently surfaces a random CharacterEvent with
   ``event_chance``; surfacing it performs a small-talk interaction
4. With fewer than ``max_active_projects`` active, a new project spawns with
   ``spawn_chance`` (random title, simple/moderate/complex, 2-5 team members)

All randomness comes from the injected RNG, in the order above.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

from .directory import AgentDirectory
from .interactions import InteractionEngine, validate_tick
from .logging_utils import log_deterministic, log_event, log_info
from .projects import ProjectManager
from .schemas import (
    CharacterEvent,
    CharacterEventType,
    InteractionType,
    Mood,
    NPCCharacter,
    ProjectComplexity,
    TeamProject,
    TickReport,
)

ENERGY_RECOVERY = 5
MOOD_RESET_CHANCE = 0.5
PRODUCTIVITY_DRIFT = (-5, 5)

# (message template, suggested relationship impact)
CHARACTER_EVENTS: Dict[CharacterEventType, Tuple[str, int]] = {
    CharacterEventType.PERSONAL_NEWS: ("{name} shared exciting personal news!", 5),
    CharacterEventType.TECHNICAL_BREAKTHROUGH: (
        "{name} made a technical breakthrough on their task!",
        3,
    ),
    CharacterEventType.NEEDS_HELP: ("{name} is struggling and could use your help.", 0),
    CharacterEventType.SHARING_IDEA: ("{name} wants to share an interesting idea with you.", 2),
}

PROJECT_TITLES = [
    "Performance Optimization",
    "Feature Development",
    "Bug Fixes Sprint",
    "Architecture Redesign",
    "Security Audit",
    "Database Migration",
    "API Overhaul",
    "UI Refresh",
]

SPAWN_COMPLEXITIES = [
    ProjectComplexity.SIMPLE,
    ProjectComplexity.MODERATE,
    ProjectComplexity.COMPLEX,
]

SPAWN_TEAM_SIZE = (2, 5)


class WorldTickDriver:
    """Runs one simulation step across directory, projects and interactions."""

    def __init__(
        self,
        directory: AgentDirectory,
        interactions: InteractionEngine,
        projects: ProjectManager,
        rng: random.Random | None = None,
        *,
        event_chance: float = 0.1,
        spawn_chance: float = 0.2,
        max_active_projects: int = 3,
        verbose: bool = False,
    ):
        self.directory = directory
        self.interactions = interactions
        self.projects = projects
        self.rng = rng if rng is not None else random.Random()
        self.event_chance = event_chance
        self.spawn_chance = spawn_chance
        self.max_active_projects = max_active_projects
        self.verbose = verbose

    def tick(self, tick: int) -> TickReport:
        """Advance the world by one step and report what happened."""
        report = TickReport(tick=validate_tick(tick))

        self.update_all_characters()

        for project_id in self.projects.project_ids():
            update = self.projects.advance_project(project_id, 0, tick=tick)
            if update is not None:
                report.project_updates.append(update)

        for member in self.directory.team():
            if self.rng.random() < self.event_chance:
                event = self.generate_random_event(member)
                report.events.append(event)
                if self.verbose:
                    log_event(event.message, scope="Events")
                if member.id in self.directory:
                    self.interactions.interact(member.id, InteractionType.SMALL_TALK, tick=tick)

        report.spawned_project = self.maybe_spawn_project()

        if self.verbose:
            log_deterministic(
                f"{len(report.project_updates)} project update(s), "
                f"{len(report.completions)} completed, {len(report.events)} event(s)",
                scope=f"Tick {tick}",
            )
        return report

    def update_all_characters(self) -> None:
        """Energy recovery, mood relaxation and productivity drift for the whole roster."""
        for agent in self.directory:
            changes: dict = {
                "energy": agent.energy + ENERGY_RECOVERY,
            }
            if agent.mood is not Mood.NEUTRAL and self.rng.random() < MOOD_RESET_CHANCE:
                changes["mood"] = Mood.NEUTRAL
            changes["productivity"] = agent.productivity + self.rng.randint(*PRODUCTIVITY_DRIFT)
            self.directory.update(agent.id, **changes)

    def generate_random_event(self, agent: NPCCharacter) -> CharacterEvent:
        event_type = self.rng.choice(list(CHARACTER_EVENTS))
        template, impact = CHARACTER_EVENTS[event_type]
        return CharacterEvent(
            agent_id=agent.id,
            event_type=event_type,
            message=template.replace("{name}", agent.first_name),
            relationship_impact=impact,
        )

    def maybe_spawn_project(self) -> Optional[TeamProject]:
        if len(self.projects) >= self.max_active_projects:
            return None
        if self.rng.random() >= self.spawn_chance:
            return None

        team_ids: List[str] = [agent_id for agent_id in self.directory.team_ids() if agent_id in self.directory]
        size = min(self.rng.randint(*SPAWN_TEAM_SIZE), len(team_ids))
        members = self.rng.sample(team_ids, size)
        name = self.rng.choice(PROJECT_TITLES)
        complexity = self.rng.choice(SPAWN_COMPLEXITIES)

        project = self.projects.start_project(name, complexity, members)
        if self.verbose:
            log_info(f"New project assigned: {project.name}", scope="Projects")
        return project
