"""
PersistenceStrategy interface for pluggable snapshot storage.

The simulation core does not define a storage format; it only promises that a
SimulationSnapshot round-trips with identical field values. This module
provides the abstract strategy plus two concrete backends:

1. InMemoryPersistence - Dict-based storage, data lost on exit (testing, prototyping)
2. JsonPersistence - One human-readable JSON file per saved tick

Async design rationale:
- The host can save while the next tick is being prepared (UI thread stays free)
- File I/O runs in a worker thread via asyncio.to_thread
- initialize() and close() manage backend lifecycle

Usage pattern:
    persistence = JsonPersistence("saves")
    await persistence.initialize()
    await persistence.save_snapshot(run_id, simulation.snapshot())
    restored = Simulation.restore(await persistence.get_latest_snapshot(run_id))
    await persistence.close()
"""

import asyncio
import json
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional
from uuid import UUID

from .config import Config
from .schemas import SimulationSnapshot


class PersistenceStrategy(ABC):
    """Abstract base class for simulation snapshot persistence.

    Snapshots are keyed by (run_id, tick). Saving a second snapshot for the
    same tick overwrites the first.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the persistence backend.

        Raises:
            Exception: If initialization fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Close the persistence backend.

        Raises:
            Exception: If cleanup fails
        """
        pass

    @abstractmethod
    async def save_snapshot(self, run_id: UUID, snapshot: SimulationSnapshot) -> None:
        """
        Save a snapshot under its own tick.

        Args:
            run_id: Unique run identifier
            snapshot: Simulation snapshot to save
        """
        pass

    @abstractmethod
    async def get_snapshot(self, run_id: UUID, tick: int) -> Optional[SimulationSnapshot]:
        """
        Retrieve the snapshot saved for a tick.

        Returns:
            SimulationSnapshot if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_ticks(self, run_id: UUID) -> List[int]:
        """Return the ticks with a saved snapshot, ascending."""
        pass

    @abstractmethod
    async def delete_run(self, run_id: UUID) -> None:
        """Delete every snapshot of a run."""
        pass

    async def get_latest_snapshot(self, run_id: UUID) -> Optional[SimulationSnapshot]:
        """Return the snapshot with the highest tick, or None if the run is empty."""
        ticks = await self.list_ticks(run_id)
        if not ticks:
            return None
        return await self.get_snapshot(run_id, ticks[-1])


class InMemoryPersistence(PersistenceStrategy):
    """In-memory persistence using Python dicts (no files).

    Snapshots are stored as deep copies so later mutations of the simulation
    never leak into saved state.
    """

    def __init__(self):
        self.snapshots: Dict[tuple[UUID, int], SimulationSnapshot] = {}

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        """
        No-op: data is kept after close so callers can inspect it. Use
        delete_run() for explicit cleanup.
        """
        pass

    async def save_snapshot(self, run_id: UUID, snapshot: SimulationSnapshot) -> None:
        self.snapshots[(run_id, snapshot.tick)] = snapshot.model_copy(deep=True)

    async def get_snapshot(self, run_id: UUID, tick: int) -> Optional[SimulationSnapshot]:
        snapshot = self.snapshots.get((run_id, tick))
        return snapshot.model_copy(deep=True) if snapshot is not None else None

    async def list_ticks(self, run_id: UUID) -> List[int]:
        return sorted(tick for (rid, tick) in self.snapshots if rid == run_id)

    async def delete_run(self, run_id: UUID) -> None:
        for key in [key for key in self.snapshots if key[0] == run_id]:
            del self.snapshots[key]


class JsonPersistence(PersistenceStrategy):
    """File-based persistence writing one JSON document per saved tick.

    Layout:
        {base_path}/{run_id}/snapshots/{tick:05d}.json
    """

    def __init__(self, base_path: Path | str | None = None):
        self.base_path = Path(base_path) if base_path is not None else Config.SNAPSHOT_DIR

    async def initialize(self) -> None:
        await asyncio.to_thread(self.base_path.mkdir, parents=True, exist_ok=True)

    async def close(self) -> None:
        # Nothing to clean up for JSON persistence
        return None

    async def save_snapshot(self, run_id: UUID, snapshot: SimulationSnapshot) -> None:
        path = self._snapshot_path(run_id, snapshot.tick)
        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
        payload = snapshot.model_dump(mode="json")
        await asyncio.to_thread(
            path.write_text, json.dumps(payload, indent=2, ensure_ascii=False), "utf-8"
        )

    async def get_snapshot(self, run_id: UUID, tick: int) -> Optional[SimulationSnapshot]:
        path = self._snapshot_path(run_id, tick)
        if not path.exists():
            return None

        payload = await asyncio.to_thread(path.read_text, "utf-8")
        return SimulationSnapshot.model_validate_json(payload)

    async def list_ticks(self, run_id: UUID) -> List[int]:
        directory = self._run_dir(run_id) / "snapshots"
        if not directory.exists():
            return []

        def _scan() -> List[int]:
            return sorted(int(path.stem) for path in directory.glob("*.json"))

        return await asyncio.to_thread(_scan)

    async def delete_run(self, run_id: UUID) -> None:
        run_dir = self._run_dir(run_id)
        if run_dir.exists():
            await asyncio.to_thread(shutil.rmtree, run_dir)

    def _run_dir(self, run_id: UUID) -> Path:
        return self.base_path / str(run_id)

    def _snapshot_path(self, run_id: UUID, tick: int) -> Path:
        return self._run_dir(run_id) / "snapshots" / f"{tick:05d}.json"
