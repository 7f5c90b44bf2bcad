"""
Interaction engine for player-agent interactions.

Each interaction type has its own resolution rule driven by the target agent's
personality, energy, productivity and current relationship. Resolution always
reads the live directory record, applies a clamped relationship change, may
shift the agent's mood, and appends a record to the capped interaction history.

Resolution rules (delta = relationship change):

    ask_for_help     success if energy > 50 and agreeableness > 0.6
                     delta [3, 8] on success, [-2, 1] on failure
    collaborate      success if draw < (teamwork + (agreeableness + extraversion) / 2) / 2
                     delta [5, 12] on success, 0 on failure
    praise           always succeeds, delta round(emotional_stability * 10) + [5, 10]
    critique         success if emotional_stability > 0.7
                     delta [0, 3] on success, [-8, -3] on failure
    small_talk       always succeeds, delta round(extraversion * 10) + [1, 5]
    request_project  success if relationship > 60 and productivity > 60
                     delta [2, 6] on success, [-3, 0] on failure

Mood: delta > 5 -> HAPPY, delta < -5 -> ANNOYED, otherwise unchanged.

No other agent is touched by an interaction.
"""

from __future__ import annotations

import math
import random
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, Dict, List, Optional, Tuple, Union

from .dialogue import DialogueResolver
from .directory import AgentDirectory
from .errors import InvalidInputError
from .schemas import (
    DialogueContext,
    InteractionRecord,
    InteractionResult,
    InteractionType,
    Mood,
    NPCCharacter,
)
from .traits import TraitGenerator

DEFAULT_HISTORY_LIMIT = 50

NOT_FOUND_MESSAGE = "Character not found"

# Mood thresholds on the (unclamped) relationship delta
HAPPY_THRESHOLD = 5
ANNOYED_THRESHOLD = -5

# Accepted spellings besides enum names and values
INTERACTION_ALIASES: Dict[str, InteractionType] = {
    "ask": InteractionType.ASK_FOR_HELP,
    "help": InteractionType.ASK_FOR_HELP,
    "criticize": InteractionType.CRITIQUE,
    "chat": InteractionType.SMALL_TALK,
}

# (success, dialogue context, relationship delta)
Resolution = Tuple[bool, DialogueContext, int]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def coerce_interaction(interaction: Union[InteractionType, str]) -> InteractionType:
    """Resolve an InteractionType from an enum member, name, value or alias."""
    if isinstance(interaction, InteractionType):
        return interaction
    if isinstance(interaction, str):
        key = interaction.strip().lower().replace("-", "_").replace(" ", "_")
        for member in InteractionType:
            if key in (member.value, member.name.lower()):
                return member
        if key in INTERACTION_ALIASES:
            return INTERACTION_ALIASES[key]
    raise InvalidInputError(
        field="interaction",
        value=interaction,
        reason=f"expected one of {[m.value for m in InteractionType]}",
    )


def validate_tick(tick: object) -> int:
    """Reject tick ordinals that are not non-negative integers."""
    if isinstance(tick, bool) or not isinstance(tick, int):
        raise InvalidInputError(field="tick", value=tick, reason="must be an integer")
    if tick < 0:
        raise InvalidInputError(field="tick", value=tick, reason="must be non-negative")
    return tick


class InteractionHistory:
    """Append-only interaction log capped at ``limit`` entries, newest first.

    When full, appending evicts the oldest entry. Used for UI display only.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise InvalidInputError(field="limit", value=limit, reason="history limit must be at least 1")
        self.limit = limit
        self._records: Deque[InteractionRecord] = deque(maxlen=limit)

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: InteractionRecord) -> None:
        # appendleft on a full deque drops the rightmost (oldest) record
        self._records.appendleft(record)

    def recent(self, limit: Optional[int] = None) -> List[InteractionRecord]:
        """Return copies of the most recent records, newest first."""
        records = list(self._records)
        if limit is not None:
            records = records[: max(limit, 0)]
        return [record.model_copy() for record in records]

    def for_agent(self, agent_id: str) -> List[InteractionRecord]:
        return [record.model_copy() for record in self._records if record.agent_id == agent_id]

    def load(self, records: List[InteractionRecord]) -> None:
        """Replace contents with ``records`` (newest first), keeping the cap."""
        self._records = deque((r.model_copy() for r in records[: self.limit]), maxlen=self.limit)


class InteractionEngine:
    """Resolves interactions against the live AgentDirectory."""

    def __init__(
        self,
        directory: AgentDirectory,
        dialogue: DialogueResolver | None = None,
        history: InteractionHistory | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.directory = directory
        self.rng = rng if rng is not None else random.Random()
        self.dialogue = dialogue if dialogue is not None else DialogueResolver(self.rng)
        self.history = history if history is not None else InteractionHistory()
        self.clock = clock if clock is not None else (lambda: datetime.now(timezone.utc))
        self._resolvers: Dict[InteractionType, Callable[[NPCCharacter], Resolution]] = {
            InteractionType.ASK_FOR_HELP: self._resolve_ask_for_help,
            InteractionType.COLLABORATE: self._resolve_collaborate,
            InteractionType.PRAISE: self._resolve_praise,
            InteractionType.CRITIQUE: self._resolve_critique,
            InteractionType.SMALL_TALK: self._resolve_small_talk,
            InteractionType.REQUEST_PROJECT: self._resolve_request_project,
        }

    def interact(
        self,
        agent_id: str,
        interaction: Union[InteractionType, str],
        *,
        tick: int = 0,
    ) -> InteractionResult:
        """Resolve ``interaction`` with the agent ``agent_id`` and apply its effects.

        Unknown ids return an unsuccessful "Character not found" result and
        change nothing.
        """
        interaction_type = coerce_interaction(interaction)
        tick = validate_tick(tick)
        agent = self.directory.get(agent_id)
        if agent is None:
            return InteractionResult(success=False, message=NOT_FOUND_MESSAGE, relationship_change=0)

        success, context, delta = self._resolvers[interaction_type](agent)
        message = self.dialogue.generate_response(agent, context)

        changes: dict = {"relationship_with_player": agent.relationship_with_player + delta}
        if delta > HAPPY_THRESHOLD:
            changes["mood"] = Mood.HAPPY
        elif delta < ANNOYED_THRESHOLD:
            changes["mood"] = Mood.ANNOYED
        self.directory.update(agent_id, **changes)

        self.history.append(
            InteractionRecord(
                agent_id=agent_id,
                interaction_type=interaction_type,
                tick=tick,
                timestamp=self.clock(),
                outcome=message,
                success=success,
            )
        )
        return InteractionResult(success=success, message=message, relationship_change=delta)

    # Resolution rules ----------------------------------------------------------

    def _resolve_ask_for_help(self, agent: NPCCharacter) -> Resolution:
        if agent.energy > 50 and agent.personality.agreeableness > 0.6:
            return True, DialogueContext.HELPING, self.rng.randint(3, 8)
        return False, DialogueContext.BUSY, self.rng.randint(-2, 1)

    def _resolve_collaborate(self, agent: NPCCharacter) -> Resolution:
        modifier = TraitGenerator.interaction_modifier(agent.personality, InteractionType.COLLABORATE)
        success_chance = (agent.skills.teamwork + modifier) / 2.0
        if self.rng.random() < success_chance:
            return True, DialogueContext.COLLABORATING, self.rng.randint(5, 12)
        return False, DialogueContext.DECLINING, 0

    def _resolve_praise(self, agent: NPCCharacter) -> Resolution:
        reaction = round_half_up(agent.personality.emotional_stability * 10)
        return True, DialogueContext.PRAISED, reaction + self.rng.randint(5, 10)

    def _resolve_critique(self, agent: NPCCharacter) -> Resolution:
        if agent.personality.emotional_stability > 0.7:
            return True, DialogueContext.CONSTRUCTIVE_CRITICISM, self.rng.randint(0, 3)
        return False, DialogueContext.OFFENDED, self.rng.randint(-8, -3)

    def _resolve_small_talk(self, agent: NPCCharacter) -> Resolution:
        social_bonus = round_half_up(agent.personality.extraversion * 10)
        return True, DialogueContext.CASUAL, social_bonus + self.rng.randint(1, 5)

    def _resolve_request_project(self, agent: NPCCharacter) -> Resolution:
        if agent.relationship_with_player > 60 and agent.productivity > 60:
            return True, DialogueContext.ACCEPTING, self.rng.randint(2, 6)
        return False, DialogueContext.TOO_BUSY, self.rng.randint(-3, 0)
