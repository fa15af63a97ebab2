from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import Optional

from ..config import AppConfig, sanitize_config
from ..sim.core.world import World
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)

_HEADER = [
    "tick",
    "agents",
    "pheromone_total",
    "pheromone_max",
    "occupied_cells",
    "ticks_per_second",
    "tick_ms",
]


def _format_row(metrics: TickMetrics, deterministic: bool) -> list[object]:
    tick_ms = 0.0 if deterministic else metrics.tick_duration_ms
    tps = 0.0 if deterministic else metrics.ticks_per_second
    return [
        metrics.tick,
        metrics.agents,
        f"{metrics.pheromone_total:.4f}",
        f"{metrics.pheromone_max:.4f}",
        metrics.occupied_cells,
        f"{tps:.2f}",
        f"{tick_ms:.3f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0, "p95": 0.0, "p99": 0.0}
    sorted_values = sorted(values)
    count = len(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / count),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
        "p95": _percentile(sorted_values, 0.95),
        "p99": _percentile(sorted_values, 0.99),
    }


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    summary_path: Optional[Path] = None,
    summary_window: int = 5000,
    config_path: Optional[Path] = None,
    agent_count: Optional[int] = None,
) -> TickMetrics | None:
    app_config = AppConfig.from_yaml(config_path) if config_path else AppConfig()
    world_config = app_config.world
    if seed is not None:
        world_config = replace(world_config, seed=seed)
    sim_config = app_config.simulation
    if agent_count is not None:
        sim_config = sanitize_config(replace(sim_config, agent_count=agent_count))

    world = World(world_config)
    world.reset(sim_config)
    logger.info("Running %d headless ticks (seed=%d, agents=%d)", steps, world_config.seed, sim_config.agent_count)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    total_series: list[float] = []
    occupied_series: list[float] = []
    max_tick_ms = (-1.0, -1)

    try:
        for _ in range(steps):
            world.tick(sim_config)
            metrics = world.metrics
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            if summary_path:
                tick_ms_series.append(tick_ms)
                total_series.append(metrics.pheromone_total)
                occupied_series.append(float(metrics.occupied_cells))
                if tick_ms > max_tick_ms[0]:
                    max_tick_ms = (tick_ms, metrics.tick)
            if writer:
                writer.writerow(_format_row(metrics, deterministic_log))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        window = max(1, int(summary_window))
        tail_slice = slice(max(0, len(tick_ms_series) - window), len(tick_ms_series))
        summary = {
            "steps": steps,
            "seed": world_config.seed,
            "agents": len(world.pool),
            "grid_size": world_config.grid_size,
            "diffusion_mode": world_config.diffusion_mode,
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "pheromone_total": _summary_stats(total_series),
            "occupied_cells": _summary_stats(occupied_series),
            "peaks": {
                "tick_ms": {"value": float(max_tick_ms[0]), "tick": max_tick_ms[1]},
            },
            "tail_window": {
                "window": window,
                "tick_ms": _summary_stats(tick_ms_series[tail_slice]),
                "pheromone_total": _summary_stats(total_series[tail_slice]),
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    return world.metrics


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless stigmergy simulation")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--agents", type=int, default=None, help="Agent count (100-5000, step 100)")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--summary-window",
        type=int,
        default=5000,
        help="Tail window size (ticks) for summary stats.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (timing columns are forced to zero so identical seeds match).",
    )
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        summary_path=args.summary,
        summary_window=args.summary_window,
        config_path=args.config,
        agent_count=args.agents,
    )


if __name__ == "__main__":
    main()
