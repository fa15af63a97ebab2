from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    pheromone_decay: float = 0.92
    sensor_dist: float = 9.0
    sensor_angle: float = math.pi / 4
    rotation_angle: float = math.pi / 4
    agent_speed: float = 1.5
    adversarial_pressure: float = 0.5
    agent_count: int = 1500


@dataclass
class WorldConfig:
    grid_size: int = 200
    seed: int = 42
    resource_count: int = 5
    resource_radius: tuple[float, float] = (10.0, 30.0)
    resource_intensity: tuple[float, float] = (0.5, 1.0)
    resource_attraction: float = 5.0
    adversary_count: int = 3
    adversary_radius: float = 8.0
    adversary_max_speed: float = 0.25
    adversary_repulsion: float = 10.0
    deposit_amount: float = 0.5
    diffusion_mode: str = "in_place"
    config_version: str = "v1"


@dataclass
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    world: WorldConfig = field(default_factory=WorldConfig)
    broadcast_interval: int = 2
    tick_rate: float = 60.0
    snapshot_queue_limit: int = 8

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


@dataclass(frozen=True)
class ParameterBounds:
    low: float
    high: float
    step: float | None = None

    def clamp(self, value: float) -> float:
        return max(self.low, min(self.high, value))


CONFIG_BOUNDS: Dict[str, ParameterBounds] = {
    "pheromone_decay": ParameterBounds(0.8, 0.99),
    "sensor_dist": ParameterBounds(1.0, 50.0),
    "sensor_angle": ParameterBounds(0.0, math.pi),
    "rotation_angle": ParameterBounds(0.0, math.pi),
    "agent_speed": ParameterBounds(0.5, 4.0),
    "adversarial_pressure": ParameterBounds(0.0, 1.0),
    "agent_count": ParameterBounds(100, 5000, step=100),
}

DIFFUSION_MODES = ("in_place", "buffered")


def _coerce(name: str, value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Config %s=%r is not numeric; using default %s", name, value, default)
        return float(default)
    if math.isnan(number):
        logger.warning("Config %s is NaN; using default %s", name, default)
        return float(default)
    return number


def sanitize_config(config: SimulationConfig) -> SimulationConfig:
    """Return a copy of ``config`` with every field inside CONFIG_BOUNDS.

    Out-of-range and infinite values snap to the nearest bound, NaN or
    non-numeric values fall back to the field default. Values that are
    already valid come back unchanged.
    """
    defaults = SimulationConfig()
    changes: Dict[str, Any] = {}
    for name, bounds in CONFIG_BOUNDS.items():
        raw = getattr(config, name)
        number = _coerce(name, raw, getattr(defaults, name))
        value = bounds.clamp(number)
        if bounds.step is not None:
            value = int(bounds.clamp(round(value / bounds.step) * bounds.step))
        if value != number:
            logger.warning("Config %s=%r adjusted to %s (range [%s, %s])", name, raw, value, bounds.low, bounds.high)
        if value != raw or type(value) is not type(raw):
            changes[name] = value
    if not changes:
        return config
    return replace(config, **changes)


def update_config(config: SimulationConfig, updates: Dict[str, Any]) -> SimulationConfig:
    known = {f.name for f in fields(SimulationConfig)}
    unknown = set(updates) - known
    if unknown:
        raise ValueError(f"Unknown simulation config keys: {sorted(unknown)}")
    return sanitize_config(replace(config, **updates))


def load_config(raw: dict) -> AppConfig:
    def _pair(value: tuple[float, float] | list[float] | None, default: tuple[float, float]) -> tuple[float, float]:
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return (float(value[0]), float(value[1]))
        return default

    default_world = WorldConfig()
    sim_raw = raw.get("simulation", {}) or {}
    world_raw = dict(raw.get("world", {}) or {})

    simulation = update_config(SimulationConfig(), sim_raw)

    world_raw["resource_radius"] = _pair(world_raw.get("resource_radius"), default_world.resource_radius)
    world_raw["resource_intensity"] = _pair(world_raw.get("resource_intensity"), default_world.resource_intensity)
    world = WorldConfig(**world_raw)
    if world.diffusion_mode not in DIFFUSION_MODES:
        raise ValueError(f"Unknown diffusion mode: {world.diffusion_mode}")
    if world.grid_size <= 0:
        raise ValueError(f"grid_size must be positive, got {world.grid_size}")

    app_values = {k: v for k, v in raw.items() if k not in {"simulation", "world"}}
    return AppConfig(simulation=simulation, world=world, **app_values)
