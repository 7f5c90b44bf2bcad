"""Trait & skill generation for new team members.

The TraitGenerator turns an injected ``random.Random`` into personality and
skill vectors shaped by role and seniority, and assembles complete
NPCCharacter records. Given the same seed it produces the same characters,
ids included.
"""

from __future__ import annotations

import random
import uuid
from typing import Dict

from .schemas import (
    CharacterSkills,
    InteractionType,
    Mood,
    NPCCharacter,
    PersonalityTraits,
    Role,
    Seniority,
)

SKILL_NAMES = (
    "technical",
    "communication",
    "leadership",
    "problem_solving",
    "creativity",
    "teamwork",
)

# Additive offsets on top of the seniority base skill. Roles without a
# specialty use the neutral profile.
_NEUTRAL = dict.fromkeys(SKILL_NAMES, 0.0)

ROLE_SKILL_OFFSETS: Dict[Role, Dict[str, float]] = {
    Role.SOFTWARE_ENGINEER: {
        "technical": 0.0,
        "communication": -0.1,
        "leadership": -0.2,
        "problem_solving": 0.1,
        "creativity": 0.0,
        "teamwork": 0.0,
    },
    Role.PRODUCT_MANAGER: {
        "technical": -0.1,
        "communication": 0.2,
        "leadership": 0.2,
        "problem_solving": 0.1,
        "creativity": 0.0,
        "teamwork": 0.1,
    },
    Role.DESIGNER: {
        "technical": -0.2,
        "communication": 0.1,
        "leadership": -0.1,
        "problem_solving": 0.0,
        "creativity": 0.3,
        "teamwork": 0.0,
    },
    Role.DATA_SCIENTIST: dict(_NEUTRAL),
    Role.DEVOPS: dict(_NEUTRAL),
    Role.QA: dict(_NEUTRAL),
}

SKILL_VARIANCE = 0.2

# (low, high) bounds of the independent uniform draw per trait
PERSONALITY_RANGES: Dict[str, tuple[float, float]] = {
    "openness": (0.3, 1.0),
    "conscientiousness": (0.3, 1.0),
    "extraversion": (0.2, 1.0),
    "agreeableness": (0.3, 1.0),
    "emotional_stability": (0.4, 1.0),
}

FIRST_NAMES = [
    "Alex", "Jordan", "Taylor", "Morgan", "Casey", "Riley", "Avery", "Quinn",
    "Sam", "Jamie", "Drew", "Blake", "Reese", "Peyton", "Cameron", "Dakota",
    "Skyler", "River", "Phoenix", "Sage", "Rowan", "Finley", "Parker", "Charlie",
]

LAST_NAMES = [
    "Chen", "Patel", "Kim", "Garcia", "Nguyen", "Rodriguez", "Singh", "Lee",
    "Martinez", "Johnson", "Williams", "Brown", "Jones", "Davis", "Wilson", "Moore",
    "Taylor", "Anderson", "Thomas", "Jackson", "White", "Harris", "Martin", "Thompson",
]

# Starting state for every newly generated character
INITIAL_ENERGY = 80
INITIAL_PRODUCTIVITY = 75
INITIAL_RELATIONSHIP = 50


class TraitGenerator:
    """Generates personality, skills and whole characters from an injected RNG."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()

    def generate_personality(self) -> PersonalityTraits:
        """Draw five independent traits from their fixed ranges."""
        return PersonalityTraits(
            **{
                trait: self.rng.uniform(low, high)
                for trait, (low, high) in PERSONALITY_RANGES.items()
            }
        )

    def experience_years(self, seniority: Seniority) -> int:
        low, high = seniority.experience_range
        return self.rng.randint(low, high)

    def generate_skills(self, role: Role, seniority: Seniority) -> CharacterSkills:
        """Generate a skill vector for ``role`` at ``seniority``.

        base = experience_years / 25 + 0.3, then each skill gets the role
        offset plus a uniform perturbation in [0, 0.2], capped at 1.0.
        """
        base_skill = self.experience_years(seniority) / 25.0 + 0.3
        offsets = ROLE_SKILL_OFFSETS[role]
        return CharacterSkills(
            **{
                skill: min(1.0, base_skill + offsets[skill] + self.rng.uniform(0, SKILL_VARIANCE))
                for skill in SKILL_NAMES
            }
        )

    def generate_id(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))

    def generate_character(self, role: Role, seniority: Seniority) -> NPCCharacter:
        personality = self.generate_personality()
        skills = self.generate_skills(role, seniority)
        return NPCCharacter(
            id=self.generate_id(),
            first_name=self.rng.choice(FIRST_NAMES),
            last_name=self.rng.choice(LAST_NAMES),
            role=role,
            seniority=seniority,
            personality=personality,
            skills=skills,
            mood=Mood.NEUTRAL,
            energy=INITIAL_ENERGY,
            productivity=INITIAL_PRODUCTIVITY,
            relationship_with_player=INITIAL_RELATIONSHIP,
        )

    @staticmethod
    def interaction_modifier(personality: PersonalityTraits, interaction: InteractionType) -> float:
        """Personality factor relevant to an interaction type."""
        if interaction is InteractionType.ASK_FOR_HELP:
            return personality.agreeableness
        if interaction is InteractionType.COLLABORATE:
            return (personality.agreeableness + personality.extraversion) / 2.0
        if interaction is InteractionType.PRAISE:
            return personality.emotional_stability
        if interaction is InteractionType.CRITIQUE:
            return personality.emotional_stability * personality.openness
        if interaction is InteractionType.SMALL_TALK:
            return personality.extraversion
        if interaction is InteractionType.REQUEST_PROJECT:
            return personality.conscientiousness
        raise ValueError(f"Unhandled interaction type: {interaction!r}")
