from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .metrics import TickMetrics


@dataclass(frozen=True, slots=True)
class Snapshot:
    tick: int
    metrics: TickMetrics
    agents: List[Dict[str, float]]
    resources: List[Dict[str, float]]
    adversaries: List[Dict[str, float]]
    world: "SnapshotWorld"
    metadata: "SnapshotMetadata"
    fields: "SnapshotFields"


@dataclass(frozen=True, slots=True)
class SnapshotWorld:
    size: int


@dataclass(frozen=True, slots=True)
class SnapshotMetadata:
    grid_size: int
    seed: int
    diffusion_mode: str
    config_version: str
    adversarial_pressure: float


@dataclass(frozen=True, slots=True)
class SnapshotFields:
    resolution: int
    pheromone: Tuple[float, ...]

    def export(self, digits: int = 4) -> Dict[str, Any]:
        # Dense row-major values; index = y * resolution + x.
        return {"resolution": self.resolution, "values": [round(value, digits) for value in self.pheromone]}
