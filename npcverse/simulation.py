"""
Simulation context: the public boundary of the NPC simulation core.

A Simulation owns one agent directory, one active-project set, one interaction
history and one RNG. Nothing is process-global, so tests and hosts can run
several independent simulations side by side.

Host usage (one tick = one simulated year):

    sim = Simulation(seed=7)
    sim.join_employer(Employer(name="Initech", prestige_level=4))
    result = sim.interact(sim.team()[0].id, "praise")
    report = sim.tick()
    bonus = total_project_bonus(report.completions)
    boost = sim.team_performance_boost()

Every public method runs under a single re-entrant lock, so a multi-threaded
host gets one mutual-exclusion boundary per operation. The core itself never
blocks on I/O.
"""

from __future__ import annotations

import random
import threading
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Union

from .config import Config
from .dialogue import DialogueResolver
from .directory import AgentDirectory
from .errors import InvalidInputError, NPCVerseError
from .interactions import InteractionEngine, InteractionHistory
from .logging_utils import log_error, log_info
from .projects import MemberRef, ProjectManager
from .rewards import team_performance_boost
from .schemas import (
    Employer,
    InteractionRecord,
    InteractionResult,
    InteractionType,
    NPCCharacter,
    ProjectComplexity,
    ProjectUpdate,
    SimulationSnapshot,
    TeamProject,
    TickReport,
)
from .traits import TraitGenerator
from .world import WorldTickDriver

# Prestige maps to requested team size up to this limit; form_team caps further
MAX_REQUESTED_TEAM_SIZE = 8
INITIAL_PROJECT_MEMBERS = 3
INITIAL_PROJECT_COMPLEXITY = ProjectComplexity.MODERATE


def _check_probability(name: str, value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise InvalidInputError(field=name, value=value, reason="must be between 0 and 1")
    return value


class Simulation:
    """Explicit simulation context wiring generator, directory, engines and tick driver.

    Args:
        rng: Random source shared by every component. Takes precedence over seed.
        seed: Seed for a fresh random.Random (defaults to Config.SEED).
        history_limit: Interaction history cap (defaults to Config.HISTORY_LIMIT).
        event_chance: Per-agent random event probability per tick.
        spawn_chance: New-project probability per tick.
        max_active_projects: Spawning only happens below this many active projects.
        verbose: Print color-coded progress (defaults to Config.VERBOSE).
        seed_roster: Generate the 8-agent starter roster on construction.
        clock: Wall-clock source for interaction timestamps.
    """

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        history_limit: Optional[int] = None,
        event_chance: Optional[float] = None,
        spawn_chance: Optional[float] = None,
        max_active_projects: Optional[int] = None,
        verbose: Optional[bool] = None,
        seed_roster: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if rng is None:
            rng = random.Random(seed if seed is not None else Config.SEED)
        self.rng = rng
        self.verbose = Config.VERBOSE if verbose is None else verbose

        event_chance = _check_probability(
            "event_chance", Config.EVENT_CHANCE if event_chance is None else event_chance
        )
        spawn_chance = _check_probability(
            "spawn_chance", Config.PROJECT_SPAWN_CHANCE if spawn_chance is None else spawn_chance
        )
        if max_active_projects is None:
            max_active_projects = Config.MAX_ACTIVE_PROJECTS
        if max_active_projects < 0:
            raise InvalidInputError(
                field="max_active_projects", value=max_active_projects, reason="must be non-negative"
            )

        self.generator = TraitGenerator(rng)
        self.dialogue = DialogueResolver(rng)
        self.directory = AgentDirectory(self.generator, verbose=self.verbose)
        self.history = InteractionHistory(
            Config.HISTORY_LIMIT if history_limit is None else history_limit
        )
        self.interactions = InteractionEngine(
            self.directory, self.dialogue, self.history, rng, clock
        )
        self.projects = ProjectManager(self.directory, self.interactions, rng, verbose=self.verbose)
        self.world = WorldTickDriver(
            self.directory,
            self.interactions,
            self.projects,
            rng,
            event_chance=event_chance,
            spawn_chance=spawn_chance,
            max_active_projects=max_active_projects,
            verbose=self.verbose,
        )

        self._tick = 0
        self._lock = threading.RLock()

        if seed_roster:
            self.directory.generate_initial_roster()

    @property
    def current_tick(self) -> int:
        """Number of world ticks run so far."""
        return self._tick

    # Team ------------------------------------------------------------------------------

    def form_team(self, size: int, employer: Optional[Employer] = None) -> List[NPCCharacter]:
        """Replace the active team; sizes above 5 are capped (see AgentDirectory.form_team)."""
        with self._lock:
            return self._guard(self.directory.form_team, size, employer)

    def join_employer(self, employer: Employer) -> Optional[TeamProject]:
        """Form a team sized by employer prestige and start its initial project.

        Returns the initial project, or None when the team is empty.
        """
        with self._lock:
            size = min(employer.prestige_level, MAX_REQUESTED_TEAM_SIZE)
            team = self._guard(self.directory.form_team, size, employer)
            if not team:
                return None
            project = self.projects.start_project(
                f"{employer.name} Initiative",
                INITIAL_PROJECT_COMPLEXITY,
                [member.id for member in team[:INITIAL_PROJECT_MEMBERS]],
            )
            if self.verbose:
                log_info(f"You've been assigned to: {project.name}", scope="Team")
            return project

    def team_performance_boost(self) -> int:
        """Performance boost from live relationships of the active team."""
        with self._lock:
            live = [self.directory.get(agent_id) for agent_id in self.directory.team_ids()]
            return team_performance_boost(agent for agent in live if agent is not None)

    # Interactions ------------------------------------------------------------------------

    def interact(self, agent_id: str, interaction: Union[InteractionType, str]) -> InteractionResult:
        with self._lock:
            return self._guard(self.interactions.interact, agent_id, interaction, tick=self._tick)

    # Projects -----------------------------------------------------------------------------

    def start_project(
        self,
        name: str,
        complexity: Union[ProjectComplexity, str],
        member_ids: Sequence[MemberRef] = (),
    ) -> TeamProject:
        with self._lock:
            return self._guard(self.projects.start_project, name, complexity, member_ids)

    def advance_project(self, project_id: str, contribution: float = 0.0) -> Optional[ProjectUpdate]:
        """Apply the player's explicit work to a project (outside the tick)."""
        with self._lock:
            return self._guard(
                self.projects.advance_project, project_id, contribution, tick=self._tick
            )

    # World ----------------------------------------------------------------------------------

    def tick(self) -> TickReport:
        """Advance the simulation by one step (one simulated year)."""
        with self._lock:
            self._tick += 1
            return self.world.tick(self._tick)

    def run(self, ticks: int) -> List[TickReport]:
        """Run ``ticks`` consecutive ticks."""
        if ticks < 0:
            raise InvalidInputError(field="ticks", value=ticks, reason="must be non-negative")
        with self._lock:
            return [self.tick() for _ in range(ticks)]

    # Read-only queries -------------------------------------------------------------------

    def roster(self) -> List[NPCCharacter]:
        with self._lock:
            return self.directory.roster()

    def team(self) -> List[NPCCharacter]:
        with self._lock:
            return self.directory.team()

    def active_projects(self) -> List[TeamProject]:
        with self._lock:
            return self.projects.active_projects()

    def recent_interactions(self, limit: Optional[int] = None) -> List[InteractionRecord]:
        with self._lock:
            return self.history.recent(limit)

    def get_agent(self, agent_id: str) -> Optional[NPCCharacter]:
        with self._lock:
            agent = self.directory.get(agent_id)
            return agent.model_copy(deep=True) if agent is not None else None

    def get_project(self, project_id: str) -> Optional[TeamProject]:
        with self._lock:
            return self.projects.get(project_id)

    # Persistence boundary -------------------------------------------------------------------

    def snapshot(self) -> SimulationSnapshot:
        """Capture roster, team, projects and history as a serializable snapshot."""
        with self._lock:
            return SimulationSnapshot(
                tick=self._tick,
                roster=self.directory.roster(),
                team=self.directory.team(),
                projects=self.projects.active_projects(),
                history=self.history.recent(),
            )

    @classmethod
    def restore(cls, snapshot: SimulationSnapshot, **kwargs) -> "Simulation":
        """Build a Simulation whose state equals ``snapshot`` field for field.

        Keyword arguments are passed to the constructor (rng, seed, chances...).
        The starter roster is never generated for a restored simulation.
        """
        kwargs["seed_roster"] = False
        simulation = cls(**kwargs)
        for agent in snapshot.roster:
            simulation.directory.add(agent.model_copy(deep=True))
        simulation.directory.set_team(snapshot.team)
        for project in snapshot.projects:
            simulation.projects.add(project)
        simulation.history.load(snapshot.history)
        simulation._tick = snapshot.tick
        return simulation

    # Helpers ----------------------------------------------------------------------------------

    def _guard(self, operation, *args, **kwargs):
        """Run ``operation``, logging rejected input before re-raising it."""
        try:
            return operation(*args, **kwargs)
        except NPCVerseError as exc:
            if self.verbose:
                log_error(str(exc), scope="Input")
            raise
