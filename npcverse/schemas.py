"""
Pydantic schemas for the npcverse NPC simulation core.

All data structures used in the simulation are defined here.

Design Philosophy:
- Closed enums for every branching dimension (role, seniority, mood, complexity,
  interaction, dialogue context, event type); every enum member has an entry in
  the lookup tables below or in the module that consumes it
- Bounded fields are clamped by validators, and models validate on assignment,
  so every mutation path (construction, attribute assignment, model_validate)
  keeps values in range
- Project member lists are frozen snapshots; live agent state lives only in
  the AgentDirectory
"""

import zlib
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = TypeVar("Number", int, float)


def clamp(value: Number, low: Number, high: Number) -> Number:
    """Clamp ``value`` into the inclusive range [low, high]."""
    return max(low, min(high, value))


# ============================================================================
# Enumerations
# ============================================================================


class Role(str, Enum):
    """Job role of a team member."""

    SOFTWARE_ENGINEER = "Software Engineer"
    PRODUCT_MANAGER = "Product Manager"
    DESIGNER = "UX Designer"
    DATA_SCIENTIST = "Data Scientist"
    DEVOPS = "DevOps Engineer"
    QA = "QA Engineer"


class Seniority(str, Enum):
    """Career level. Each level implies a range of experience years."""

    JUNIOR = "Junior"
    MID = "Mid-Level"
    SENIOR = "Senior"
    STAFF = "Staff"
    PRINCIPAL = "Principal"

    @property
    def experience_range(self) -> Tuple[int, int]:
        """Inclusive (min, max) experience years for this level."""
        return SENIORITY_EXPERIENCE_YEARS[self]


class Mood(str, Enum):
    """Current mood of a team member. Scales project contribution."""

    VERY_HAPPY = "Very Happy"
    HAPPY = "Happy"
    NEUTRAL = "Neutral"
    STRESSED = "Stressed"
    ANNOYED = "Annoyed"
    FRUSTRATED = "Frustrated"

    @property
    def productivity_multiplier(self) -> float:
        return MOOD_PRODUCTIVITY_MULTIPLIERS[self]

    @property
    def emoji(self) -> str:
        return MOOD_EMOJI[self]


class ProjectComplexity(str, Enum):
    """Project size. Fixes the progress threshold and nominal duration."""

    SIMPLE = "Simple"
    MODERATE = "Moderate"
    COMPLEX = "Complex"
    VERY_COMPLEX = "Very Complex"

    @property
    def target_progress(self) -> int:
        return COMPLEXITY_TARGETS[self][0]

    @property
    def duration(self) -> int:
        """Nominal duration in ticks."""
        return COMPLEXITY_TARGETS[self][1]


class InteractionType(str, Enum):
    """Ways the player can interact with a team member."""

    ASK_FOR_HELP = "ask_for_help"
    COLLABORATE = "collaborate"
    PRAISE = "praise"
    CRITIQUE = "critique"
    SMALL_TALK = "small_talk"
    REQUEST_PROJECT = "request_project"


class DialogueContext(str, Enum):
    """Situation a dialogue line is chosen for."""

    HELPING = "helping"
    BUSY = "busy"
    COLLABORATING = "collaborating"
    DECLINING = "declining"
    PRAISED = "praised"
    CONSTRUCTIVE_CRITICISM = "constructive_criticism"
    OFFENDED = "offended"
    CASUAL = "casual"
    ACCEPTING = "accepting"
    TOO_BUSY = "too_busy"


class CharacterEventType(str, Enum):
    """Category of a random flavor event."""

    PERSONAL_NEWS = "personal_news"
    TECHNICAL_BREAKTHROUGH = "technical_breakthrough"
    NEEDS_HELP = "needs_help"
    SHARING_IDEA = "sharing_idea"


SENIORITY_EXPERIENCE_YEARS: Dict[Seniority, Tuple[int, int]] = {
    Seniority.JUNIOR: (0, 2),
    Seniority.MID: (3, 5),
    Seniority.SENIOR: (6, 10),
    Seniority.STAFF: (11, 15),
    Seniority.PRINCIPAL: (16, 25),
}

MOOD_PRODUCTIVITY_MULTIPLIERS: Dict[Mood, float] = {
    Mood.VERY_HAPPY: 1.2,
    Mood.HAPPY: 1.1,
    Mood.NEUTRAL: 1.0,
    Mood.STRESSED: 0.9,
    Mood.ANNOYED: 0.8,
    Mood.FRUSTRATED: 0.7,
}

MOOD_EMOJI: Dict[Mood, str] = {
    Mood.VERY_HAPPY: "😄",
    Mood.HAPPY: "🙂",
    Mood.NEUTRAL: "😐",
    Mood.STRESSED: "😰",
    Mood.ANNOYED: "😒",
    Mood.FRUSTRATED: "😤",
}

# (target progress, nominal duration in ticks)
COMPLEXITY_TARGETS: Dict[ProjectComplexity, Tuple[int, int]] = {
    ProjectComplexity.SIMPLE: (100, 5),
    ProjectComplexity.MODERATE: (250, 10),
    ProjectComplexity.COMPLEX: (500, 20),
    ProjectComplexity.VERY_COMPLEX: (1000, 30),
}

AVATARS = ["👨‍💻", "👩‍💻", "👨‍🔬", "👩‍🔬", "👨‍💼", "👩‍💼", "👨‍🎨", "👩‍🎨"]


# ============================================================================
# Agent Schemas
# ============================================================================


class PersonalityTraits(BaseModel):
    """Big Five personality vector, each trait in [0, 1].

    Traits are drawn independently by the TraitGenerator; there is no
    correlation between them.
    """

    model_config = ConfigDict(validate_assignment=True)

    openness: float = Field(..., description="Curiosity, creativity")
    conscientiousness: float = Field(..., description="Organized, dependable")
    extraversion: float = Field(..., description="Sociable, energetic")
    agreeableness: float = Field(..., description="Cooperative, friendly")
    emotional_stability: float = Field(..., description="Calm under pressure")

    @field_validator("*")
    @classmethod
    def _clamp_unit(cls, value: float) -> float:
        return clamp(value, 0.0, 1.0)


class CharacterSkills(BaseModel):
    """Six skill dimensions, each in [0, 1]."""

    model_config = ConfigDict(validate_assignment=True)

    technical: float
    communication: float
    leadership: float
    problem_solving: float
    creativity: float
    teamwork: float

    @field_validator("*")
    @classmethod
    def _clamp_unit(cls, value: float) -> float:
        return clamp(value, 0.0, 1.0)


class NPCCharacter(BaseModel):
    """A synthetic team member with persistent personality, skills and relationship state.

    NPCCharacter is the canonical agent record owned by the AgentDirectory.
    Static identity (id, name, role, seniority, personality) is fixed at
    generation; dynamic state (mood, energy, productivity, relationship) changes
    through interactions, project work and world ticks.

    Bounds (enforced on every mutation):
    - energy: 0-100
    - productivity: 30-100
    - relationship_with_player: 0-100
    """

    model_config = ConfigDict(validate_assignment=True)

    # id is frozen: reassigning it raises a ValidationError
    id: str = Field(..., frozen=True, description="Stable unique identifier")
    first_name: str = Field(..., description="Given name, used in dialogue")
    last_name: str = Field(..., description="Family name")
    role: Role = Field(..., description="Job role")
    seniority: Seniority = Field(..., description="Career level")
    personality: PersonalityTraits = Field(..., description="Big Five traits")
    skills: CharacterSkills = Field(..., description="Skill vector")
    mood: Mood = Field(Mood.NEUTRAL, description="Current mood")
    energy: int = Field(80, description="Energy 0-100, spent on project work")
    productivity: int = Field(75, description="Productivity 30-100, drifts each tick")
    relationship_with_player: int = Field(50, description="Relationship 0-100")

    @field_validator("energy", "relationship_with_player")
    @classmethod
    def _clamp_percent(cls, value: int) -> int:
        return clamp(value, 0, 100)

    @field_validator("productivity")
    @classmethod
    def _clamp_productivity(cls, value: int) -> int:
        return clamp(value, 30, 100)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def avatar(self) -> str:
        """Display emoji, stable for a given id across processes."""
        return AVATARS[zlib.crc32(self.id.encode("utf-8")) % len(AVATARS)]


class Employer(BaseModel):
    """Organization the player joins. Prestige drives the requested team size."""

    name: str = Field(..., description="Company name")
    prestige_level: int = Field(1, ge=0, description="Company prestige (team size hint)")


# ============================================================================
# Interaction Schemas
# ============================================================================


class InteractionResult(BaseModel):
    """Outcome of a single player-agent interaction."""

    success: bool
    message: str
    relationship_change: int


class InteractionRecord(BaseModel):
    """Entry of the interaction history (UI display only).

    The history is append-only and capped; the simulation never reads it back.
    """

    agent_id: str = Field(..., description="Agent the player interacted with")
    interaction_type: InteractionType = Field(..., description="Kind of interaction")
    tick: int = Field(..., ge=0, description="Simulation tick of the interaction")
    timestamp: datetime = Field(..., description="Wall-clock time the record was created")
    outcome: str = Field(..., description="Dialogue line returned to the player")
    success: bool = Field(True, description="Whether the interaction succeeded")


class CharacterEvent(BaseModel):
    """Random flavor event surfaced for an active-team agent during a tick.

    Consumed immediately by the caller; not stored by the simulation.
    """

    agent_id: str
    event_type: CharacterEventType
    message: str
    relationship_impact: int = Field(0, description="Suggested impact (reported only)")


# ============================================================================
# Project Schemas
# ============================================================================


class TeamProject(BaseModel):
    """Multi-tick collaborative work item.

    team_members is a snapshot of the agents assigned at creation. It is never
    re-resolved; the ProjectManager looks each member up in the directory by id
    when it needs current stats.

    Lifecycle: created -> active (progress grows every advance) -> completed
    (removed from the active set in the same call that reaches the target).
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., frozen=True, description="Unique project identifier")
    name: str = Field(..., description="Display name")
    complexity: ProjectComplexity = Field(..., frozen=True, description="Size class")
    team_members: List[NPCCharacter] = Field(
        default_factory=list,
        frozen=True,
        description="Snapshot of assigned agents at creation time",
    )
    progress: int = Field(0, ge=0, description="Accumulated progress points")
    quality: int = Field(50, description="Quality 0-100")
    # days_remaining may go negative for overdue projects
    days_remaining: int = Field(..., description="Ticks left before the nominal deadline")
    morale: int = Field(70, description="Project morale 0-100")

    @field_validator("quality", "morale")
    @classmethod
    def _clamp_percent(cls, value: int) -> int:
        return clamp(value, 0, 100)

    @property
    def member_ids(self) -> List[str]:
        return [member.id for member in self.team_members]

    @property
    def target_progress(self) -> int:
        return self.complexity.target_progress

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.target_progress


class ProjectCompletion(BaseModel):
    """Record of a project reaching its target.

    The host game turns this into money/performance rewards (see
    npcverse.rewards); the core only grants relationship bonuses.
    """

    project_id: str
    name: str
    complexity: ProjectComplexity
    quality: int = Field(..., ge=0, le=100)
    member_ids: List[str] = Field(default_factory=list)
    relationship_bonus: int = Field(..., description="Flat bonus granted to each member")
    tick: int = Field(0, ge=0)

    @property
    def target_progress(self) -> int:
        return self.complexity.target_progress


class ProjectUpdate(BaseModel):
    """Outcome of one advance_project call."""

    project_id: str
    tick: int = Field(0, ge=0)
    member_contributions: Dict[str, float] = Field(
        default_factory=dict, description="Contribution per member id"
    )
    player_contribution: float = 0.0
    total_contribution: float = 0.0
    progress_gained: int = 0
    progress: int = 0
    quality: int = 0
    morale: int = 0
    days_remaining: int = 0
    completion: Optional[ProjectCompletion] = None

    @property
    def completed(self) -> bool:
        return self.completion is not None


# ============================================================================
# Simulation Schemas
# ============================================================================


class TickReport(BaseModel):
    """Everything that happened during one world tick."""

    tick: int = Field(..., ge=0)
    project_updates: List[ProjectUpdate] = Field(default_factory=list)
    events: List[CharacterEvent] = Field(default_factory=list)
    spawned_project: Optional[TeamProject] = None

    @property
    def completions(self) -> List[ProjectCompletion]:
        return [u.completion for u in self.project_updates if u.completion is not None]


class SimulationSnapshot(BaseModel):
    """Serializable state of a Simulation.

    Restoring a snapshot reproduces identical field values; nothing is
    recomputed. RNG state is not part of the snapshot.
    """

    tick: int = Field(0, ge=0, description="Number of world ticks run so far")
    roster: List[NPCCharacter] = Field(default_factory=list)
    team: List[NPCCharacter] = Field(default_factory=list)
    projects: List[TeamProject] = Field(default_factory=list)
    history: List[InteractionRecord] = Field(
        default_factory=list, description="Interaction history, newest first"
    )
