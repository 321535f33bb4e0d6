import math

import pytest

from orbital_graph import LayoutConfig
from orbital_graph.layout.primary import (
    column_height_at,
    place_column,
    place_on_ring,
    place_on_spiral,
    ring_height_at,
)
from orbital_graph.layout.rings import RingBand


def salah_band(count=19, radius=30.0, elevation=0.0):
    return RingBand('salah', 'ring', count, radius, radius - 5.0, radius + 5.0, elevation)


def test_ring_members_are_evenly_spaced():
    band = salah_band()
    config = LayoutConfig()

    first = place_on_ring(band, 0, config)
    second = place_on_ring(band, 1, config)

    assert math.isclose(band.angle_step, 2 * math.pi / 19)
    assert math.isclose(band.angle_step, 0.3307, abs_tol=1e-4)
    assert (first.x, first.z) == (30.0, 0.0)
    assert math.isclose(second.x, 28.36, abs_tol=0.05)
    assert math.isclose(second.z, 9.74, abs_tol=0.05)
    assert math.isclose(math.hypot(second.x, second.z), 30.0)


def test_ring_members_share_the_radius():
    band = salah_band(count=7, radius=50.0)
    config = LayoutConfig()

    for ordinal in range(7):
        pos = place_on_ring(band, ordinal, config)
        assert math.isclose(math.hypot(pos.x, pos.z), 50.0)
        assert pos.y == 0.0


def test_ring_wave_and_elevation_raise_members():
    config = LayoutConfig(ring_wave_amplitude=2.0)
    band = salah_band(elevation=4.0)

    pos = place_on_ring(band, 3, config)

    assert math.isclose(pos.y, 4.0 + math.sin(3 * 0.18) * 2.0)
    assert math.isclose(ring_height_at(0, config, 4.0), 4.0)


def test_column_members_stack_on_the_axis():
    config = LayoutConfig()
    positions = [place_column(i, 19, config) for i in range(19)]

    assert all(pos.x == 0.0 and pos.z == 0.0 for pos in positions)
    heights = [pos.y for pos in positions]
    assert len(set(heights)) == 19
    assert heights == sorted(heights)
    assert heights[0] == -17.5
    assert math.isclose(heights[1], 35.0 / 19 - 17.5)


def test_column_height_formula():
    assert column_height_at(0, 4, 35.0) == -17.5
    assert column_height_at(2, 4, 35.0) == 0.0


def test_spiral_grows_from_inner_to_outer_radius():
    config = LayoutConfig()
    total = 10

    first = place_on_spiral(0, total, config)
    assert (first.x, first.y, first.z) == (22.0, 0.0, 0.0)

    previous = 0.0
    for ordinal in range(total):
        pos = place_on_spiral(ordinal, total, config)
        radius = math.hypot(pos.x, pos.z)
        assert math.isclose(radius, 22.0 + ordinal / total * 35.0)
        assert radius > previous
        assert abs(pos.y) <= config.spiral_height_variation
        previous = radius


@pytest.mark.parametrize(
    'call',
    [
        lambda cfg: place_column(19, 19, cfg),
        lambda cfg: place_column(0, 0, cfg),
        lambda cfg: place_on_ring(salah_band(), -1, cfg),
        lambda cfg: place_on_ring(salah_band(), 19, cfg),
        lambda cfg: place_on_spiral(5, 5, cfg),
    ],
)
def test_out_of_range_ordinals_raise(call):
    with pytest.raises(ValueError):
        call(LayoutConfig())
