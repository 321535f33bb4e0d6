import math

import pytest

from orbital_graph import (
    ConfigurationError,
    LayoutConfig,
    Position,
    RankingConfig,
    RankingWeights,
    get_layout_config,
    get_ranking_config,
    set_layout_config,
)


def test_getters_return_independent_copies():
    config = get_ranking_config()
    config.category_importance['salah'] = 0.0

    assert get_ranking_config().category_importance['salah'] == 0.95
    assert math.isclose(sum(get_ranking_config().weights.as_tuple()), 1.0)


def test_set_layout_config_replaces_default():
    original = get_layout_config()
    try:
        set_layout_config(LayoutConfig(moon_radius=4.0))
        assert get_layout_config().moon_radius == 4.0
    finally:
        set_layout_config(original)
    assert get_layout_config().moon_radius == 2.5


def test_from_mapping_builds_nested_weights():
    config = RankingConfig.from_mapping(
        {
            'views_cap': 500,
            'weights': {
                'text_relevance': 0.3,
                'edge_confidence': 0.2,
                'category_importance': 0.1,
                'verification': 0.1,
                'centrality': 0.1,
                'engagement': 0.1,
                'recency': 0.1,
            },
        }
    )

    config.check()
    assert config.views_cap == 500
    assert config.weights.text_relevance == 0.3


@pytest.mark.parametrize(
    'factory',
    [
        lambda: LayoutConfig.from_mapping({'moon_size': 3}),
        lambda: RankingConfig.from_mapping({'weights': {'popularity': 1.0}}),
        lambda: RankingConfig(views_cap=0).check(),
        lambda: RankingConfig(verification_levels={'verified': 2.0}).check(),
        lambda: RankingConfig(category_importance={'salah': -1.0}).check(),
        lambda: RankingConfig(views_cap='big').check(),
        lambda: RankingConfig(recency_half_life_days=None).check(),
        lambda: RankingConfig(default_importance='high').check(),
        lambda: RankingConfig(recency_decay='step').check(),
        lambda: RankingConfig(verification_levels={'verified': '1'}).check(),
        lambda: RankingConfig(category_importance={'salah': True}).check(),
        lambda: RankingConfig(weights={'recency': 1.0}).check(),
    ],
)
def test_bad_configuration_is_rejected(factory):
    with pytest.raises(ConfigurationError):
        factory()


@pytest.mark.parametrize('value', [math.nan, math.inf, -math.inf])
def test_position_rejects_non_finite_coordinates(value):
    with pytest.raises(ValueError):
        Position(0.0, value, 0.0)


def test_position_distance():
    assert Position(0.0, 0.0, 0.0).distance_to(Position(3.0, 4.0, 0.0)) == 5.0


@pytest.mark.parametrize('name, value', [('recency', '0.05'), ('centrality', None), ('engagement', False)])
def test_non_numeric_weights_are_rejected(name, value):
    weights = RankingWeights()
    setattr(weights, name, value)

    with pytest.raises(ConfigurationError, match=name):
        weights.check()
