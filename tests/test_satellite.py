import math

import pytest

from orbital_graph import LayoutConfig, Position
from orbital_graph.layout.satellite import aggregate_anchor, place_fallback, place_satellites


PRIMARIES = {
    'east': Position(10.0, 0.0, 0.0),
    'west': Position(-10.0, 0.0, 0.0),
    'far_east': Position(12.0, 0.0, 0.0),
}


def test_multi_reference_satellite_orbits_the_centroid():
    placements = place_satellites([('moon', ('east', 'west'))], PRIMARIES, 100.0, LayoutConfig())
    moon = placements['moon']

    assert moon.anchor == Position(0.0, 0.0, 0.0)
    assert math.isclose(moon.position.distance_to(moon.anchor), 2.5)
    assert moon.position == Position(2.5, 0.0, 0.0)
    assert not moon.is_fallback


def test_single_reference_stays_within_moon_radius():
    config = LayoutConfig()
    placements = place_satellites([('moon', ('east',))], PRIMARIES, 100.0, config)

    moon = placements['moon']
    assert moon.anchor == PRIMARIES['east']
    assert moon.position.distance_to(PRIMARIES['east']) <= config.moon_radius + 1e-9


def test_satellites_sharing_an_anchor_take_distinct_slots():
    satellites = [(f'moon{i}', ('east',)) for i in range(5)]

    placements = place_satellites(satellites, PRIMARIES, 100.0, LayoutConfig())

    positions = [placements[node_id].position for node_id, _ in satellites]
    assert len({pos.as_tuple() for pos in positions}) == 5
    assert [placements[node_id].slot for node_id, _ in satellites] == [0, 1, 2, 3, 4]
    assert all(placements[node_id].slots == 5 for node_id, _ in satellites)
    for pos in positions:
        assert math.isclose(pos.distance_to(PRIMARIES['east']), 2.5)


def test_unconnected_satellites_fill_the_fallback_ring():
    satellites = [(f'lone{i}', ()) for i in range(4)]

    placements = place_satellites(satellites, PRIMARIES, 105.0, LayoutConfig())

    assert list(placements) == [node_id for node_id, _ in satellites]
    for index, (node_id, _) in enumerate(satellites):
        placement = placements[node_id]
        assert placement.is_fallback
        assert math.isclose(math.hypot(placement.position.x, placement.position.z), 105.0)
        assert math.isclose(placement.position.y, math.sin(index * 0.5) * 3.0)
    assert len({placements[node_id].position.as_tuple() for node_id, _ in satellites}) == 4


def test_weighted_policy_uses_reference_strengths():
    config = LayoutConfig(aggregate='weighted')
    strengths = {'moon': {'east': 3.0, 'west': 1.0}}

    placements = place_satellites([('moon', ('east', 'west'))], PRIMARIES, 100.0, config, strengths)

    assert placements['moon'].anchor == Position(5.0, 0.0, 0.0)


def test_weighted_policy_without_strengths_is_the_centroid():
    config = LayoutConfig(aggregate='weighted')

    anchor = aggregate_anchor([PRIMARIES['east'], PRIMARIES['west']], config)

    assert anchor == Position(0.0, 0.0, 0.0)


def test_nearest_policy_orbits_the_closest_primary():
    config = LayoutConfig(aggregate='nearest')
    refs = [PRIMARIES['east'], PRIMARIES['west'], PRIMARIES['far_east']]

    assert aggregate_anchor(refs, config) == PRIMARIES['east']


def test_aggregate_anchor_requires_references():
    with pytest.raises(ValueError):
        aggregate_anchor([], LayoutConfig())


def test_fallback_index_must_be_in_range():
    with pytest.raises(ValueError):
        place_fallback(3, 3, 70.0, LayoutConfig())
