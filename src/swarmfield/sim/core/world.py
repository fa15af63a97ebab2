from __future__ import annotations

import logging
from enum import Enum
from time import perf_counter
from typing import Dict, List, Tuple

from ...config import SimulationConfig, WorldConfig, sanitize_config
from ...rng import DeterministicRng, derive_stream_seed
from ..systems import metrics as metrics_system
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotFields, SnapshotMetadata, SnapshotWorld
from .entities import WorldEntities, repulsion_radius
from .field import PheromoneField
from .pool import AgentPool

logger = logging.getLogger(__name__)

_ENTITY_RNG_SALT = 0xC0A1F00D5EED1234
_AGENT_RNG_SALT = 0x7BADCA11C0FFEE01


class WorldState(str, Enum):
    IDLE = "Idle"
    RUNNING = "Running"


class WorldNotRunningError(RuntimeError):
    pass


class World:
    """Sequences one simulation tick over the field, entities and agent pool.

    A world starts Idle and becomes Running on ``reset``. Changing
    ``agent_count`` between ticks resizes the pool without regenerating
    resources, adversaries or the field.
    """

    def __init__(self, config: WorldConfig | None = None):
        self._config = config if config is not None else WorldConfig()
        self._entity_rng = DeterministicRng(derive_stream_seed(self._config.seed, _ENTITY_RNG_SALT))
        self._agent_rng = DeterministicRng(derive_stream_seed(self._config.seed, _AGENT_RNG_SALT))
        self._state = WorldState.IDLE
        self._field: PheromoneField | None = None
        self._entities: WorldEntities | None = None
        self._pool: AgentPool | None = None
        self._sim_config = SimulationConfig()
        self._tick = 0
        self._metrics: TickMetrics | None = None
        self._tick_rate = metrics_system.TickRateMeter()

    @property
    def config(self) -> WorldConfig:
        return self._config

    @property
    def state(self) -> WorldState:
        return self._state

    @property
    def field(self) -> PheromoneField:
        self._require_running()
        return self._field

    @property
    def entities(self) -> WorldEntities:
        self._require_running()
        return self._entities

    @property
    def pool(self) -> AgentPool:
        self._require_running()
        return self._pool

    @property
    def tick_count(self) -> int:
        return self._tick

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    @property
    def ticks_per_second(self) -> float:
        return self._tick_rate.rate

    def reset(self, config: SimulationConfig | None = None) -> None:
        if config is not None:
            self._sim_config = sanitize_config(config)
        world_config = self._config
        self._entity_rng.reset()
        self._agent_rng.reset()
        self._field = PheromoneField(world_config.grid_size, world_config.diffusion_mode)
        self._entities = WorldEntities(world_config, self._entity_rng)
        self._entities.regenerate()
        self._pool = AgentPool(world_config.grid_size, self._agent_rng, world_config.deposit_amount)
        self._pool.resize(self._sim_config.agent_count)
        self._tick = 0
        self._metrics = None
        self._tick_rate.reset()
        self._state = WorldState.RUNNING
        logger.info(
            "World reset: grid=%d agents=%d resources=%d adversaries=%d",
            world_config.grid_size,
            len(self._pool),
            len(self._entities.resources),
            len(self._entities.adversaries),
        )

    def resize_population(self, count: int) -> None:
        self._require_running()
        previous = len(self._pool)
        self._pool.resize(count)
        if len(self._pool) != previous:
            logger.info("Population resized %d -> %d", previous, len(self._pool))

    def tick(self, config: SimulationConfig | None = None) -> Snapshot:
        self._require_running()
        start = perf_counter()
        if config is not None:
            self._sim_config = sanitize_config(config)
        config = self._sim_config

        if config.agent_count != len(self._pool):
            self.resize_population(config.agent_count)

        self._entities.step_adversaries()
        self._pool.step(self._field, self._entities, config)
        self._field.diffuse_and_decay(config.pheromone_decay)
        self._tick += 1

        values = self._field.values()
        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(
            self._tick, len(self._pool), values, self._tick_rate.record(), duration_ms
        )
        return self._build_snapshot(values, self._metrics)

    def snapshot(self) -> Snapshot:
        self._require_running()
        values = self._field.values()
        metrics = self._metrics
        if metrics is None:
            metrics = metrics_system.create_metrics(self._tick, len(self._pool), values, self.ticks_per_second, 0.0)
        return self._build_snapshot(values, metrics)

    def _build_snapshot(self, values: Tuple[float, ...], metrics: TickMetrics) -> Snapshot:
        config = self._sim_config
        metadata = SnapshotMetadata(
            grid_size=self._config.grid_size,
            seed=self._config.seed,
            diffusion_mode=self._config.diffusion_mode,
            config_version=self._config.config_version,
            adversarial_pressure=config.adversarial_pressure,
        )
        return Snapshot(
            tick=self._tick,
            metrics=metrics,
            agents=[{"x": a.position.x, "y": a.position.y, "heading": a.heading} for a in self._pool],
            resources=self._resource_payload(),
            adversaries=self._adversary_payload(config.adversarial_pressure),
            world=SnapshotWorld(size=self._config.grid_size),
            metadata=metadata,
            fields=SnapshotFields(resolution=self._field.size, pheromone=values),
        )

    def _resource_payload(self) -> List[Dict[str, float]]:
        return [
            {"x": r.x, "y": r.y, "radius": r.radius, "intensity": r.intensity}
            for r in self._entities.resources
        ]

    def _adversary_payload(self, pressure: float) -> List[Dict[str, float]]:
        return [
            {
                "x": adversary.position.x,
                "y": adversary.position.y,
                "radius": adversary.radius,
                "repulsion_radius": repulsion_radius(adversary, pressure),
                "vx": adversary.velocity.x,
                "vy": adversary.velocity.y,
            }
            for adversary in self._entities.adversaries
        ]

    def _require_running(self) -> None:
        if self._state is not WorldState.RUNNING:
            raise WorldNotRunningError("World.reset() must be called before the world can tick")
