from __future__ import annotations

from time import perf_counter
from typing import Callable, Sequence

from ..types.metrics import TickMetrics


class TickRateMeter:
    """Counts ticks and publishes the count once per elapsed window.

    ``rate`` holds the last completed window's ticks per second and stays at
    0.0 until the first window closes.
    """

    def __init__(self, window_seconds: float = 1.0, clock: Callable[[], float] = perf_counter):
        self._window = window_seconds
        self._clock = clock
        self._count = 0
        self._window_start: float | None = None
        self.rate = 0.0

    def reset(self) -> None:
        self._count = 0
        self._window_start = None
        self.rate = 0.0

    def record(self) -> float:
        now = self._clock()
        if self._window_start is None:
            self._window_start = now
        self._count += 1
        elapsed = now - self._window_start
        if elapsed >= self._window:
            self.rate = self._count / elapsed
            self._count = 0
            self._window_start = now
        return self.rate


def create_metrics(
    tick: int,
    agent_count: int,
    values: Sequence[float],
    ticks_per_second: float,
    duration_ms: float,
) -> TickMetrics:
    # ``values`` is one copy of the field taken after diffusion; cells never go negative.
    return TickMetrics(
        tick=tick,
        agents=agent_count,
        pheromone_total=sum(values),
        pheromone_max=max(values, default=0.0),
        occupied_cells=len(values) - values.count(0.0),
        ticks_per_second=ticks_per_second,
        tick_duration_ms=duration_ms,
    )
