from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ...rng import DeterministicRng
from ..utils.math2d import wrap_coordinate

if TYPE_CHECKING:
    from ..core.agent import Agent
    from ..core.entities import WorldEntities
    from ..core.field import PheromoneField


def sample_potential(
    field: PheromoneField, entities: WorldEntities, x: float, y: float, pressure: float
) -> float:
    # Entity distances are measured from the wrapped integer cell, not the raw sensor point.
    ix, iy = field.cell_of(x, y)
    return field.sample(ix, iy) + entities.potential_at(ix, iy, pressure)


def sense(
    agent: Agent,
    field: PheromoneField,
    entities: WorldEntities,
    sensor_dist: float,
    sensor_angle: float,
    pressure: float,
) -> tuple[float, float, float]:
    """Sample the combined potential at the left, centre and right sensors.

    The left sensor sits at ``heading + sensor_angle`` and the right sensor at
    ``heading - sensor_angle``.
    """
    x = agent.position.x
    y = agent.position.y
    heading = agent.heading
    left_angle = heading + sensor_angle
    right_angle = heading - sensor_angle
    left = sample_potential(
        field, entities, x + math.cos(left_angle) * sensor_dist, y + math.sin(left_angle) * sensor_dist, pressure
    )
    center = sample_potential(
        field, entities, x + math.cos(heading) * sensor_dist, y + math.sin(heading) * sensor_dist, pressure
    )
    right = sample_potential(
        field, entities, x + math.cos(right_angle) * sensor_dist, y + math.sin(right_angle) * sensor_dist, pressure
    )
    return left, center, right


def choose_heading(
    heading: float,
    left: float,
    center: float,
    right: float,
    rotation_angle: float,
    rng: DeterministicRng,
) -> float:
    if center >= left and center >= right:
        return heading
    if center < left and center < right:
        return heading + rng.next_range(-rotation_angle, rotation_angle)
    if left > right:
        return heading + rotation_angle
    if right > left:
        return heading - rotation_angle
    # left == right with the centre between them: no turn.
    return heading


def advance(agent: Agent, speed: float, size: int) -> None:
    position = agent.position
    position.x = wrap_coordinate(position.x + math.cos(agent.heading) * speed, size)
    position.y = wrap_coordinate(position.y + math.sin(agent.heading) * speed, size)
