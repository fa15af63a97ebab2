from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from pygame.math import Vector2

from ...config import WorldConfig
from ...rng import DeterministicRng


@dataclass(slots=True)
class ResourceCluster:
    x: float
    y: float
    radius: float
    intensity: float


@dataclass(slots=True)
class Adversary:
    position: Vector2
    radius: float
    velocity: Vector2 = field(default_factory=Vector2)


def repulsion_radius(adversary: Adversary, pressure: float) -> float:
    return adversary.radius * (1.0 + pressure * 2.0)


class WorldEntities:
    """Static resource clusters and bouncing adversaries layered over the field."""

    def __init__(self, config: WorldConfig, rng: DeterministicRng):
        self._config = config
        self._rng = rng
        self._size = config.grid_size
        self.resources: List[ResourceCluster] = []
        self.adversaries: List[Adversary] = []

    def regenerate(self) -> None:
        config = self._config
        rng = self._rng
        size = self._size
        self.resources = [
            ResourceCluster(
                x=rng.next_range(0.0, size),
                y=rng.next_range(0.0, size),
                radius=rng.next_range(*config.resource_radius),
                intensity=rng.next_range(*config.resource_intensity),
            )
            for _ in range(config.resource_count)
        ]
        max_speed = config.adversary_max_speed
        self.adversaries = [
            Adversary(
                position=Vector2(rng.next_range(0.0, size), rng.next_range(0.0, size)),
                radius=config.adversary_radius,
                velocity=Vector2(rng.next_range(-max_speed, max_speed), rng.next_range(-max_speed, max_speed)),
            )
            for _ in range(config.adversary_count)
        ]

    def step_adversaries(self) -> None:
        size = self._size
        for adversary in self.adversaries:
            position = adversary.position
            velocity = adversary.velocity
            position.x += velocity.x
            position.y += velocity.y
            # Reflect the velocity only; the position may sit outside the grid for a tick.
            if position.x < 0 or position.x >= size:
                velocity.x = -velocity.x
            if position.y < 0 or position.y >= size:
                velocity.y = -velocity.y

    def potential_at(self, ix: int, iy: int, pressure: float) -> float:
        potential = 0.0
        attraction = self._config.resource_attraction
        for resource in self.resources:
            dx = ix - resource.x
            dy = iy - resource.y
            if dx * dx + dy * dy < resource.radius * resource.radius:
                potential += resource.intensity * attraction

        if pressure == 0.0 or not self.adversaries:
            return potential
        penalty = self._config.adversary_repulsion * pressure
        scale = 1.0 + pressure * 2.0
        for adversary in self.adversaries:
            dx = ix - adversary.position.x
            dy = iy - adversary.position.y
            reach = adversary.radius * scale
            if dx * dx + dy * dy < reach * reach:
                potential -= penalty
        return potential
