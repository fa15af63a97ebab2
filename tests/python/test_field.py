from __future__ import annotations

import random

import pytest
from pytest import approx

from swarmfield.sim.core.field import PheromoneField
from swarmfield.sim.utils.math2d import wrap_coordinate, wrap_index


def test_deposit_clamps_to_one():
    field = PheromoneField(8)
    field.deposit(2.2, 3.7, 0.5)
    assert field.sample(2, 3) == approx(0.5)
    field.deposit(2.9, 3.1, 0.5)
    field.deposit(2.0, 3.0, 0.5)
    assert field.sample(2, 3) == 1.0


def test_random_deposits_and_diffusion_stay_within_unit_interval():
    rng = random.Random(11)
    field = PheromoneField(16)
    for step in range(40):
        for _ in range(60):
            field.deposit(rng.uniform(-50, 50), rng.uniform(-50, 50), rng.uniform(0.0, 1.0))
            assert 0.0 <= field.max_value() <= 1.0
        field.diffuse_and_decay(0.99)
        values = field.values()
        assert min(values) >= 0.0
        assert max(values) <= 1.0


def test_deposit_wraps_toroidally():
    size = 10
    wrapped = PheromoneField(size)
    direct = PheromoneField(size)
    wrapped.deposit(size + 1, -1, 0.3)
    direct.deposit(1, size - 1, 0.3)
    assert wrapped.values() == direct.values()
    assert wrapped.sample(1, size - 1) == approx(0.3)


def test_sample_resolves_any_coordinate_to_a_cell():
    field = PheromoneField(5)
    field.deposit(4.5, 0.2, 0.7)
    assert field.sample(-0.5, 5.2) == approx(0.7)
    assert field.sample(-5.5, -10.0) == approx(0.7)
    assert field.cell_of(1e6 + 0.5, -1e6 - 0.5) == (0, 4)


def test_in_place_diffusion_reads_updated_neighbours():
    field = PheromoneField(3)
    field.deposit(1.5, 1.5, 1.0)
    field.diffuse_and_decay(1.0)

    assert field.sample(1, 0) == approx(0.2)
    # (2, 0) sees the freshly updated (1, 0) on its left.
    assert field.sample(2, 0) == approx(0.04)
    assert field.sample(0, 1) == approx(0.2)
    # Centre averages itself with two already-updated neighbours.
    assert field.sample(1, 1) == approx(0.28)


def test_buffered_diffusion_uses_previous_values():
    field = PheromoneField(3, diffusion_mode="buffered")
    field.deposit(1.5, 1.5, 1.0)
    field.diffuse_and_decay(1.0)

    assert field.sample(1, 1) == approx(0.2)
    for neighbour in [(1, 0), (0, 1), (2, 1), (1, 2)]:
        assert field.sample(*neighbour) == approx(0.2)
    assert field.sample(2, 0) == 0.0
    assert field.total() == approx(1.0)


def test_buffered_diffusion_of_uniform_field_applies_decay_only():
    field = PheromoneField(4, diffusion_mode="buffered")
    for x in range(4):
        for y in range(4):
            field.deposit(x, y, 0.5)
    field.diffuse_and_decay(0.9)
    assert all(value == approx(0.45) for value in field.values())


def test_decay_drains_field():
    field = PheromoneField(6)
    field.deposit(3, 3, 1.0)
    for _ in range(200):
        field.diffuse_and_decay(0.8)
    assert field.max_value() < 1e-6


def test_clear_and_occupancy():
    field = PheromoneField(4)
    field.deposit(0, 0, 0.5)
    field.deposit(3, 3, 0.25)
    assert field.occupied_cells() == 2
    assert field.total() == approx(0.75)
    field.clear()
    assert field.occupied_cells() == 0
    assert field.max_value() == 0.0


def test_invalid_construction():
    with pytest.raises(ValueError):
        PheromoneField(0)
    with pytest.raises(ValueError):
        PheromoneField(4, diffusion_mode="gaussian")


def test_wrap_helpers():
    assert wrap_index(-0.1, 10) == 9
    assert wrap_index(10.0, 10) == 0
    assert wrap_coordinate(-1e-17, 10) < 10
    assert wrap_coordinate(-1.5, 10) == approx(8.5)
    assert wrap_coordinate(12.25, 10) == approx(2.25)
