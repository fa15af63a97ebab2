from __future__ import annotations

from pygame.math import Vector2
from pytest import approx

from swarmfield.config import WorldConfig
from swarmfield.rng import DeterministicRng
from swarmfield.sim.core.entities import Adversary, ResourceCluster, WorldEntities, repulsion_radius


def _entities(**overrides) -> WorldEntities:
    config = WorldConfig(grid_size=100, **overrides)
    return WorldEntities(config, DeterministicRng(3))


def test_regenerate_draws_fixed_counts_within_ranges():
    entities = _entities()
    entities.regenerate()

    assert len(entities.resources) == 5
    assert len(entities.adversaries) == 3
    for resource in entities.resources:
        assert 0.0 <= resource.x < 100
        assert 0.0 <= resource.y < 100
        assert 10.0 <= resource.radius < 30.0
        assert 0.5 <= resource.intensity < 1.0
    for adversary in entities.adversaries:
        assert 0.0 <= adversary.position.x < 100
        assert 0.0 <= adversary.position.y < 100
        assert adversary.radius == 8.0
        assert -0.25 <= adversary.velocity.x < 0.25
        assert -0.25 <= adversary.velocity.y < 0.25


def test_regenerate_replaces_previous_world():
    entities = _entities()
    entities.regenerate()
    first = [(r.x, r.y) for r in entities.resources]
    entities.regenerate()
    second = [(r.x, r.y) for r in entities.resources]
    assert len(second) == 5
    assert first != second


def test_adversary_bounces_without_position_correction():
    entities = _entities()
    entities.adversaries = [Adversary(position=Vector2(0.0, 50.0), radius=8.0, velocity=Vector2(-0.2, 0.0))]

    entities.step_adversaries()

    adversary = entities.adversaries[0]
    assert adversary.position.x == approx(-0.2)
    assert adversary.velocity.x == approx(0.2)
    assert adversary.position.y == approx(50.0)
    assert adversary.velocity.y == 0.0

    entities.step_adversaries()
    assert adversary.position.x == approx(0.0)
    assert adversary.velocity.x == approx(0.2)


def test_adversary_bounces_off_far_edge():
    entities = _entities()
    adversary = Adversary(position=Vector2(50.0, 99.9), radius=8.0, velocity=Vector2(0.0, 0.15))
    entities.adversaries = [adversary]

    entities.step_adversaries()

    assert adversary.position.y == approx(100.05)
    assert adversary.velocity.y == approx(-0.15)


def test_potential_is_zero_without_entities():
    entities = _entities()
    assert entities.potential_at(10, 10, 1.0) == 0.0


def test_overlapping_resources_accumulate():
    entities = _entities()
    entities.resources = [
        ResourceCluster(x=10.0, y=10.0, radius=5.0, intensity=0.6),
        ResourceCluster(x=12.0, y=10.0, radius=5.0, intensity=0.8),
    ]
    assert entities.potential_at(11, 10, 0.0) == approx(0.6 * 5 + 0.8 * 5)
    assert entities.potential_at(16, 10, 0.0) == approx(0.8 * 5)
    # Strictly inside the radius only.
    assert entities.potential_at(17, 10, 0.0) == 0.0


def test_adversary_repulsion_scales_with_pressure():
    entities = _entities()
    adversary = Adversary(position=Vector2(50.0, 50.0), radius=8.0)
    entities.adversaries = [adversary]

    assert entities.potential_at(55, 50, 0.0) == 0.0
    assert entities.potential_at(55, 50, 0.5) == approx(-5.0)
    # Reach at pressure 0.5 is 16; at 1.0 it grows to 24.
    assert entities.potential_at(70, 50, 0.5) == 0.0
    assert entities.potential_at(70, 50, 1.0) == approx(-10.0)
    assert repulsion_radius(adversary, 1.0) == approx(24.0)


def test_resources_and_adversaries_combine_additively():
    entities = _entities()
    entities.resources = [ResourceCluster(x=20.0, y=20.0, radius=10.0, intensity=1.0)]
    entities.adversaries = [Adversary(position=Vector2(22.0, 20.0), radius=8.0)]
    assert entities.potential_at(20, 20, 0.25) == approx(5.0 - 2.5)
