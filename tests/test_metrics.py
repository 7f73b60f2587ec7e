"""Unit tests for the shared utilization helpers."""

import math

import pytest

from queueforge.metrics import (
    QueueingParameters,
    factorial,
    is_stable,
    offered_load,
    relative_error,
    utilization,
)


def test_utilization_basic_value():
    params = QueueingParameters(lam=10.0, mu=8.0, c=2)
    assert math.isclose(utilization(params), 0.625)
    assert math.isclose(offered_load(params), 1.25)


def test_stability_is_strict_at_rho_one():
    assert is_stable(QueueingParameters(lam=9.99, mu=10.0, c=1))
    assert not is_stable(QueueingParameters(lam=10.0, mu=10.0, c=1))
    assert not is_stable(QueueingParameters(lam=25.0, mu=10.0, c=2))


def test_factorial_is_iterative_float():
    assert factorial(0) == 1.0
    assert factorial(1) == 1.0
    assert factorial(5) == 120.0
    assert math.isinf(factorial(200))


def test_relative_error_guard_zero_reference():
    assert relative_error(0.0, 0.0) == 0.0
    assert math.isinf(relative_error(1.0, 0.0))
    assert math.isclose(relative_error(1.1, 1.0), 0.1)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lam": -1.0, "mu": 1.0, "c": 1},
        {"lam": 1.0, "mu": 0.0, "c": 1},
        {"lam": 1.0, "mu": 1.0, "c": 0},
        {"lam": 1.0, "mu": 1.0, "c": 1.5},
    ],
)
def test_parameters_reject_invalid_input(kwargs):
    with pytest.raises(ValueError):
        QueueingParameters(**kwargs)
