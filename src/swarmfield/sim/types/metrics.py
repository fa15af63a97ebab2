from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    agents: int
    pheromone_total: float
    pheromone_max: float
    occupied_cells: int
    ticks_per_second: float = 0.0
    tick_duration_ms: float = 0.0
