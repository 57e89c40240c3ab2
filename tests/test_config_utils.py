import pytest

from neonsweeper.config import DIFFICULTY_PRESETS, GameConfig
from neonsweeper.utils import format_elapsed, get_neighborhoods, round_percent


def test_default_config():
    config = GameConfig()
    assert (config.size, config.mine_count) == (10, 15)
    assert config.recompute_interval == pytest.approx(0.1)
    assert config.auto_solve_step_delay == pytest.approx(0.2)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"size": 0},
        {"mine_count": -1},
        {"size": 3, "mine_count": 9},
        {"recompute_interval": -0.5},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        GameConfig(**kwargs)


def test_presets():
    for name, (size, mines) in DIFFICULTY_PRESETS.items():
        config = GameConfig.from_preset(name)
        assert (config.size, config.mine_count) == (size, mines)
    with pytest.raises(ValueError):
        GameConfig.from_preset("nightmare")


def test_neighborhoods_are_edge_clipped():
    nbrs = get_neighborhoods(4)
    assert len(nbrs[(0, 0)]) == 3
    assert len(nbrs[(0, 2)]) == 5
    assert len(nbrs[(2, 2)]) == 8
    assert nbrs[(0, 0)] == ((0, 1), (1, 0), (1, 1))
    assert get_neighborhoods(4) is nbrs
    with pytest.raises(ValueError):
        get_neighborhoods(0)


def test_round_percent_rejects_empty_denominator():
    with pytest.raises(ValueError):
        round_percent(1, 0)


def test_format_elapsed():
    assert format_elapsed(0) == "00:00"
    assert format_elapsed(75.9) == "01:15"
    assert format_elapsed(-4) == "00:00"
