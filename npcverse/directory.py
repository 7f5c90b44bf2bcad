"""Agent directory: the canonical roster and the active-team snapshot.

The roster maps agent id to the live NPCCharacter record. Agents are never
removed, so relationships and history survive job changes.

The active team is a separate list of copies taken when the team was formed.
Roster mutations do NOT propagate to it; read the roster (``get``) for live
state and treat ``team()`` as a membership/ordering reference.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from .errors import InvalidInputError
from .logging_utils import log_info
from .schemas import Employer, NPCCharacter, Role, Seniority
from .traits import TraitGenerator

INITIAL_ROSTER: List[tuple[Role, Seniority]] = [
    (Role.SOFTWARE_ENGINEER, Seniority.JUNIOR),
    (Role.SOFTWARE_ENGINEER, Seniority.MID),
    (Role.SOFTWARE_ENGINEER, Seniority.SENIOR),
    (Role.PRODUCT_MANAGER, Seniority.MID),
    (Role.DESIGNER, Seniority.MID),
    (Role.DATA_SCIENTIST, Seniority.SENIOR),
    (Role.DEVOPS, Seniority.JUNIOR),
    (Role.QA, Seniority.MID),
]

# Team formation fills slots from this rotation. Its length caps the team size.
TEAM_ROLE_ROTATION: List[Role] = [
    Role.SOFTWARE_ENGINEER,
    Role.SOFTWARE_ENGINEER,
    Role.PRODUCT_MANAGER,
    Role.DESIGNER,
    Role.QA,
]

TEAM_SENIORITY_CHOICES: List[Seniority] = [Seniority.JUNIOR, Seniority.MID, Seniority.SENIOR]

MAX_TEAM_SIZE = len(TEAM_ROLE_ROTATION)


class AgentDirectory:
    """Owns every generated agent and the current active-team snapshot."""

    def __init__(self, generator: TraitGenerator | None = None, *, verbose: bool = False):
        self.generator = generator if generator is not None else TraitGenerator()
        self.verbose = verbose
        self._agents: Dict[str, NPCCharacter] = {}
        self._team: List[NPCCharacter] = []

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __iter__(self) -> Iterator[NPCCharacter]:
        return iter(list(self._agents.values()))

    # Generation ----------------------------------------------------------------

    def add(self, agent: NPCCharacter) -> NPCCharacter:
        """Register ``agent`` in the roster (replacing any record with the same id)."""
        self._agents[agent.id] = agent
        return agent

    def generate_initial_roster(self) -> List[NPCCharacter]:
        """Generate the fixed starter set of 8 agents and add them to the roster."""
        characters = [
            self.add(self.generator.generate_character(role, seniority))
            for role, seniority in INITIAL_ROSTER
        ]
        return [c.model_copy(deep=True) for c in characters]

    def form_team(self, size: int, employer: Optional[Employer] = None) -> List[NPCCharacter]:
        """Replace the active team with ``min(size, 5)`` freshly generated agents.

        Slots follow TEAM_ROLE_ROTATION with a random junior/mid/senior level.
        Requests above the rotation length are capped, not honored.
        """
        if isinstance(size, bool) or not isinstance(size, int):
            raise InvalidInputError(field="size", value=size, reason="team size must be an integer")
        if size < 0:
            raise InvalidInputError(field="size", value=size, reason="team size must be non-negative")

        team_size = min(size, MAX_TEAM_SIZE)
        if self.verbose:
            where = f" at {employer.name}" if employer else ""
            log_info(f"Forming team of {team_size}{where}", scope="Team")
            if team_size < size:
                log_info(f"Requested size {size} capped to {MAX_TEAM_SIZE}", scope="Team")

        self._team = []
        for role in TEAM_ROLE_ROTATION[:team_size]:
            seniority = self.generator.rng.choice(TEAM_SENIORITY_CHOICES)
            character = self.add(self.generator.generate_character(role, seniority))
            self._team.append(character.model_copy(deep=True))

        return self.team()

    # Lookup ----------------------------------------------------------------------

    def get(self, agent_id: str) -> Optional[NPCCharacter]:
        """Return the live record for ``agent_id``, or None if unknown."""
        return self._agents.get(agent_id)

    def roster(self) -> List[NPCCharacter]:
        """Copies of every agent, in generation order."""
        return [agent.model_copy(deep=True) for agent in self._agents.values()]

    def team(self) -> List[NPCCharacter]:
        """Copies of the active-team snapshot taken at formation time."""
        return [agent.model_copy(deep=True) for agent in self._team]

    def team_ids(self) -> List[str]:
        return [agent.id for agent in self._team]

    def set_team(self, team: List[NPCCharacter]) -> None:
        """Restore an active-team snapshot verbatim (used when loading state)."""
        self._team = [agent.model_copy(deep=True) for agent in team]

    # Mutation ----------------------------------------------------------------------

    def update(self, agent_id: str, **changes: Any) -> Optional[NPCCharacter]:
        """Replace the record for ``agent_id`` with a copy carrying ``changes``.

        The replacement goes through model validation, so bounded fields are
        clamped. Returns the new record, or None if the id is unknown.
        """
        current = self._agents.get(agent_id)
        if current is None:
            return None
        if "id" in changes and changes["id"] != agent_id:
            raise InvalidInputError(field="id", value=changes["id"], reason="agent ids are immutable")

        data = current.model_dump()
        data.update(changes)
        updated = NPCCharacter.model_validate(data)
        self._agents[agent_id] = updated
        return updated

    def adjust(
        self,
        agent_id: str,
        *,
        energy: int = 0,
        productivity: int = 0,
        relationship: int = 0,
    ) -> Optional[NPCCharacter]:
        """Apply additive deltas to an agent's bounded fields (clamped)."""
        current = self._agents.get(agent_id)
        if current is None:
            return None
        return self.update(
            agent_id,
            energy=current.energy + energy,
            productivity=current.productivity + productivity,
            relationship_with_player=current.relationship_with_player + relationship,
        )
