"""
Project lifecycle manager: creation, per-tick progress, completion.

State machine per project:

    created -> active (progress grows with every advance) -> completed
                                                             (terminal, removed)

There is no cancellation or failure path; every project completes given
enough advances.

Per-advance contribution of a member (read from the LIVE directory record):

    ((technical + problem_solving) / 2) * (energy / 100) * mood_multiplier
        * (0.5 + relationship / 200) * 10

The floor of (sum of member contributions + player contribution) is added to
progress. Each member pays an energy cost of 5 per advance.

Completion happens inside the advance that reaches the target: every member
is praised (a regular PRAISE interaction), receives a flat relationship bonus
of 10 (quality > 70) or 5, and is set to HAPPY; the project then leaves the
active set. Money/performance rewards are the host's concern (npcverse.rewards).
"""

from __future__ import annotations

import math
import random
import uuid
from numbers import Real
from typing import Dict, List, Optional, Sequence, Union

from .directory import AgentDirectory
from .errors import InvalidInputError, UnknownAgentError
from .interactions import InteractionEngine, validate_tick
from .logging_utils import log_deterministic, log_info, log_success
from .schemas import (
    InteractionType,
    Mood,
    NPCCharacter,
    ProjectCompletion,
    ProjectComplexity,
    ProjectUpdate,
    TeamProject,
)

INITIAL_QUALITY = 50
INITIAL_MORALE = 70

ENERGY_COST_PER_ADVANCE = 5
QUALITY_DRIFT = (-5, 10)
MORALE_GAIN = 3
MORALE_LOSS = 5
MORALE_DEADLINE_DAYS = 5

HIGH_QUALITY_THRESHOLD = 70
HIGH_QUALITY_BONUS = 10
STANDARD_BONUS = 5

DEFAULT_PROJECT_NAME = "New Project"

MemberRef = Union[NPCCharacter, str]


def coerce_complexity(complexity: Union[ProjectComplexity, str]) -> ProjectComplexity:
    if isinstance(complexity, ProjectComplexity):
        return complexity
    if isinstance(complexity, str):
        key = complexity.strip().lower().replace("-", "_").replace(" ", "_")
        for member in ProjectComplexity:
            if key in (member.name.lower(), member.value.lower().replace(" ", "_")):
                return member
    raise InvalidInputError(
        field="complexity",
        value=complexity,
        reason=f"expected one of {[m.value for m in ProjectComplexity]}",
    )


def validate_contribution(value: object) -> float:
    """Reject player contributions that are not finite non-negative numbers."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(field="player_contribution", value=value, reason="must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidInputError(field="player_contribution", value=value, reason="must be finite")
    if number < 0:
        raise InvalidInputError(field="player_contribution", value=value, reason="must be non-negative")
    return number


def member_contribution(agent: NPCCharacter) -> float:
    """Progress contributed by ``agent`` in one advance, from its current stats."""
    skill_factor = (agent.skills.technical + agent.skills.problem_solving) / 2.0
    energy_factor = agent.energy / 100.0
    mood_factor = agent.mood.productivity_multiplier
    relationship_factor = 0.5 + agent.relationship_with_player / 200.0
    return skill_factor * energy_factor * mood_factor * relationship_factor * 10


class ProjectManager:
    """Owns the active-project set and advances projects against the directory."""

    def __init__(
        self,
        directory: AgentDirectory,
        interactions: InteractionEngine,
        rng: random.Random | None = None,
        *,
        verbose: bool = False,
    ):
        self.directory = directory
        self.interactions = interactions
        self.rng = rng if rng is not None else random.Random()
        self.verbose = verbose
        self._projects: Dict[str, TeamProject] = {}

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._projects

    # Queries -----------------------------------------------------------------------

    def get(self, project_id: str) -> Optional[TeamProject]:
        project = self._projects.get(project_id)
        return project.model_copy(deep=True) if project is not None else None

    def active_projects(self) -> List[TeamProject]:
        return [project.model_copy(deep=True) for project in self._projects.values()]

    def project_ids(self) -> List[str]:
        return list(self._projects)

    # Lifecycle -----------------------------------------------------------------------

    def add(self, project: TeamProject) -> TeamProject:
        """Register an existing project verbatim (used when loading state)."""
        self._projects[project.id] = project.model_copy(deep=True)
        return project

    def start_project(
        self,
        name: str,
        complexity: Union[ProjectComplexity, str],
        members: Sequence[MemberRef] = (),
    ) -> TeamProject:
        """Create an active project with a snapshot of ``members``.

        Members may be given as agents or ids; each must exist in the
        directory. The snapshot copies the live records as they are now.
        """
        complexity = coerce_complexity(complexity)
        member_ids = [m.id if isinstance(m, NPCCharacter) else m for m in members]
        missing = [agent_id for agent_id in member_ids if agent_id not in self.directory]
        if missing:
            raise UnknownAgentError(missing)

        project = TeamProject(
            id=str(uuid.UUID(int=self.rng.getrandbits(128), version=4)),
            name=name.strip() or DEFAULT_PROJECT_NAME,
            complexity=complexity,
            team_members=[self.directory.get(agent_id).model_copy(deep=True) for agent_id in member_ids],
            progress=0,
            quality=INITIAL_QUALITY,
            days_remaining=complexity.duration,
            morale=INITIAL_MORALE,
        )
        self._projects[project.id] = project

        if self.verbose:
            log_info(
                f"Started '{project.name}' ({complexity.value}, "
                f"target {complexity.target_progress}) with {len(member_ids)} member(s)",
                scope="Projects",
            )
        return project.model_copy(deep=True)

    def advance_project(
        self,
        project_id: str,
        player_contribution: float = 0.0,
        *,
        tick: int = 0,
    ) -> Optional[ProjectUpdate]:
        """Apply one round of work to ``project_id``.

        Returns None for unknown ids. Raises InvalidInputError for a negative
        or non-finite contribution.
        """
        contribution = validate_contribution(player_contribution)
        tick = validate_tick(tick)
        project = self._projects.get(project_id)
        if project is None:
            return None

        total = contribution
        member_contributions: Dict[str, float] = {}
        for member_id in project.member_ids:
            agent = self.directory.get(member_id)
            if agent is None:
                continue
            amount = member_contribution(agent)
            member_contributions[member_id] = member_contributions.get(member_id, 0.0) + amount
            total += amount
            self.directory.adjust(member_id, energy=-ENERGY_COST_PER_ADVANCE)

        gained = math.floor(total)
        project.progress += gained
        project.days_remaining -= 1
        project.quality = project.quality + self.rng.randint(*QUALITY_DRIFT)

        if project.progress > project.target_progress / 2:
            project.morale = project.morale + MORALE_GAIN
        elif project.days_remaining < MORALE_DEADLINE_DAYS:
            project.morale = project.morale - MORALE_LOSS

        update = ProjectUpdate(
            project_id=project.id,
            tick=tick,
            member_contributions=member_contributions,
            player_contribution=contribution,
            total_contribution=total,
            progress_gained=gained,
            progress=project.progress,
            quality=project.quality,
            morale=project.morale,
            days_remaining=project.days_remaining,
        )

        if self.verbose:
            log_deterministic(
                f"'{project.name}' +{gained} -> {project.progress}/{project.target_progress}",
                scope="Projects",
            )

        if project.is_complete:
            update.completion = self._complete(project, tick)
        return update

    def _complete(self, project: TeamProject, tick: int) -> ProjectCompletion:
        bonus = HIGH_QUALITY_BONUS if project.quality > HIGH_QUALITY_THRESHOLD else STANDARD_BONUS

        for member_id in project.member_ids:
            self.interactions.interact(member_id, InteractionType.PRAISE, tick=tick)
            agent = self.directory.get(member_id)
            if agent is not None:
                self.directory.update(
                    member_id,
                    relationship_with_player=agent.relationship_with_player + bonus,
                    mood=Mood.HAPPY,
                )

        del self._projects[project.id]

        if self.verbose:
            log_success(f"Completed '{project.name}' (quality {project.quality})", scope="Projects")

        return ProjectCompletion(
            project_id=project.id,
            name=project.name,
            complexity=project.complexity,
            quality=project.quality,
            member_ids=project.member_ids,
            relationship_bonus=bonus,
            tick=tick,
        )
