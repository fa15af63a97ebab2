from __future__ import annotations

import logging
from typing import Iterator, List, Tuple, TYPE_CHECKING

from pygame.math import Vector2

from ...rng import DeterministicRng
from ..systems import steering
from .agent import Agent

if TYPE_CHECKING:
    from ...config import SimulationConfig
    from .entities import WorldEntities
    from .field import PheromoneField

logger = logging.getLogger(__name__)


class AgentPool:
    def __init__(self, size: int, rng: DeterministicRng, deposit_amount: float = 0.5):
        self._size = size
        self._rng = rng
        self._deposit_amount = deposit_amount
        self._agents: List[Agent] = []

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(self._agents)

    def __getitem__(self, index: int) -> Agent:
        return self._agents[index]

    @property
    def agents(self) -> List[Agent]:
        return self._agents

    def resize(self, new_count: int) -> None:
        new_count = max(0, int(new_count))
        old_count = len(self._agents)
        if new_count == old_count:
            return
        agents = self._agents[:new_count]
        for _ in range(new_count - len(agents)):
            agents.append(self._spawn())
        self._agents = agents
        logger.debug("Agent pool resized %d -> %d", old_count, new_count)

    def step(self, field: PheromoneField, entities: WorldEntities, config: SimulationConfig) -> None:
        size = self._size
        rng = self._rng
        deposit = self._deposit_amount
        sensor_dist = config.sensor_dist
        sensor_angle = config.sensor_angle
        rotation_angle = config.rotation_angle
        speed = config.agent_speed
        pressure = config.adversarial_pressure

        for agent in self._agents:
            left, center, right = steering.sense(agent, field, entities, sensor_dist, sensor_angle, pressure)
            agent.heading = steering.choose_heading(agent.heading, left, center, right, rotation_angle, rng)
            steering.advance(agent, speed, size)
            field.deposit(agent.position.x, agent.position.y, deposit)

    def positions(self) -> List[Tuple[float, float]]:
        return [(agent.position.x, agent.position.y) for agent in self._agents]

    def _spawn(self) -> Agent:
        rng = self._rng
        x = rng.next_range(0.0, self._size)
        y = rng.next_range(0.0, self._size)
        return Agent(position=Vector2(x, y), heading=rng.next_angle())
