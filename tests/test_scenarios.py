"""Unit tests for the named parameter presets."""

import pytest

from queueforge.scenarios import get_params, list_scenarios


def test_list_scenarios_is_sorted():
    names = list(list_scenarios())
    assert names == sorted(names)
    assert "A" in names


def test_get_params_builds_simulation_config():
    config = get_params("d", time_step=0.5, seed=3)
    assert config.lam == 6.0
    assert config.mu == 10.0
    assert config.c == 1
    assert config.K == 5
    assert config.time_step == 0.5
    assert config.seed == 3


def test_unknown_scenario_raises():
    with pytest.raises(KeyError):
        get_params("Z", time_step=0.1)
