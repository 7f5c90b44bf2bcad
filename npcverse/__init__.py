"""
npcverse - NPC simulation core for an engineer life simulator.

Generates synthetic team members, resolves personality-driven player
interactions, and drives multi-tick team projects to completion.

No global state. No file I/O in the core. Randomness injected by the caller.
"""

__version__ = "0.1.0"

# Main simulation context
from .simulation import Simulation

# Components
from .traits import TraitGenerator
from .dialogue import DialogueResolver
from .directory import AgentDirectory
from .interactions import InteractionEngine, InteractionHistory
from .projects import ProjectManager
from .world import WorldTickDriver

# Persistence
from .persistence import PersistenceStrategy, InMemoryPersistence, JsonPersistence

# Host-side rewards
from .rewards import team_performance_boost, project_bonus, total_project_bonus

# Errors
from .errors import NPCVerseError, InvalidInputError, UnknownAgentError

# Core schemas
from .schemas import (
    Role,
    Seniority,
    Mood,
    ProjectComplexity,
    InteractionType,
    DialogueContext,
    CharacterEventType,
    PersonalityTraits,
    CharacterSkills,
    NPCCharacter,
    Employer,
    InteractionResult,
    InteractionRecord,
    CharacterEvent,
    TeamProject,
    ProjectCompletion,
    ProjectUpdate,
    TickReport,
    SimulationSnapshot,
)

__all__ = [
    # Main class
    "Simulation",
    # Components
    "TraitGenerator",
    "DialogueResolver",
    "AgentDirectory",
    "InteractionEngine",
    "InteractionHistory",
    "ProjectManager",
    "WorldTickDriver",
    # Persistence
    "PersistenceStrategy",
    "InMemoryPersistence",
    "JsonPersistence",
    # Rewards
    "team_performance_boost",
    "project_bonus",
    "total_project_bonus",
    # Errors
    "NPCVerseError",
    "InvalidInputError",
    "UnknownAgentError",
    # Enums
    "Role",
    "Seniority",
    "Mood",
    "ProjectComplexity",
    "InteractionType",
    "DialogueContext",
    "CharacterEventType",
    # Agent schemas
    "PersonalityTraits",
    "CharacterSkills",
    "NPCCharacter",
    "Employer",
    # Interaction schemas
    "InteractionResult",
    "InteractionRecord",
    "CharacterEvent",
    # Project schemas
    "TeamProject",
    "ProjectCompletion",
    "ProjectUpdate",
    # Simulation schemas
    "TickReport",
    "SimulationSnapshot",
]
