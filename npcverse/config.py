"""
npcverse Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


class Config:
    """Application configuration loaded from environment variables."""

    # Randomness. Unset means a fresh unseeded random.Random per simulation.
    SEED: Optional[int] = _optional_int(os.getenv("NPCVERSE_SEED"))

    # World tick tuning
    EVENT_CHANCE: float = float(os.getenv("NPCVERSE_EVENT_CHANCE", "0.1"))
    PROJECT_SPAWN_CHANCE: float = float(os.getenv("NPCVERSE_PROJECT_SPAWN_CHANCE", "0.2"))
    MAX_ACTIVE_PROJECTS: int = int(os.getenv("NPCVERSE_MAX_ACTIVE_PROJECTS", "3"))

    # Interaction history shown in the UI activity panel
    HISTORY_LIMIT: int = int(os.getenv("NPCVERSE_HISTORY_LIMIT", "50"))

    # Logging
    VERBOSE: bool = os.getenv("NPCVERSE_VERBOSE", "false").strip().lower() in {"1", "true", "yes", "on"}

    # Snapshot storage for JsonPersistence
    SNAPSHOT_DIR: Path = Path(os.getenv("NPCVERSE_SNAPSHOT_DIR", "simulation_runs"))

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are out of range."""
        for name in ("EVENT_CHANCE", "PROJECT_SPAWN_CHANCE"):
            value = getattr(cls, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(
                    f"{name} must be a probability between 0 and 1, got {value}"
                )

        if cls.MAX_ACTIVE_PROJECTS < 0:
            raise ValueError(
                f"MAX_ACTIVE_PROJECTS must be non-negative, got {cls.MAX_ACTIVE_PROJECTS}"
            )

        if cls.HISTORY_LIMIT < 1:
            raise ValueError(f"HISTORY_LIMIT must be at least 1, got {cls.HISTORY_LIMIT}")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "npcverse Configuration:",
            f"  Seed: {cls.SEED if cls.SEED is not None else 'random'}",
            f"  Event Chance: {cls.EVENT_CHANCE}",
            f"  Project Spawn Chance: {cls.PROJECT_SPAWN_CHANCE}",
            f"  Max Active Projects: {cls.MAX_ACTIVE_PROJECTS}",
            f"  History Limit: {cls.HISTORY_LIMIT}",
            f"  Verbose: {cls.VERBOSE}",
            f"  Snapshot Dir: {cls.SNAPSHOT_DIR}",
        ]
        return "\n".join(lines)
