"""Unit tests for analytical M/M/c metrics."""

import math

import pytest

from queueforge.metrics import QueueingParameters
from queueforge.metrics_mmc import erlang_c, mmc_theory


def test_mmc_matches_known_single_server_case():
    params = QueueingParameters(lam=6.0, mu=10.0, c=1)
    theory = mmc_theory(params)
    assert theory.is_stable
    assert math.isclose(theory.rho, 0.6)
    assert math.isclose(theory.Lq, 0.9)
    assert math.isclose(theory.L, 1.5)
    assert math.isclose(theory.Wq, 0.15)
    assert math.isclose(theory.W, 0.25)
    assert math.isclose(erlang_c(params), 0.6)  # M/M/1: P(wait) = rho


def test_mmc_two_servers_properties():
    params = QueueingParameters(lam=10.0, mu=8.0, c=2)
    theory = mmc_theory(params)
    assert math.isclose(theory.rho, 0.625)
    assert 0.0 <= erlang_c(params) <= 1.0
    for value in (theory.Lq, theory.L, theory.Wq, theory.W):
        assert math.isfinite(value)
        assert value > 0


def test_mmc_reference_values_three_servers():
    theory = mmc_theory(QueueingParameters(lam=5.0, mu=3.0, c=3))
    assert theory.Lq == pytest.approx(0.37470023980815353, rel=1e-9)
    assert theory.Wq == pytest.approx(0.0749400479616307, rel=1e-9)
    assert theory.W == pytest.approx(0.40827338129496404, rel=1e-9)
    assert theory.L == pytest.approx(2.04136690647482, rel=1e-9)


@pytest.mark.parametrize(
    "lam, mu, c",
    [(6.0, 10.0, 1), (10.0, 8.0, 2), (17.0, 5.0, 4), (1.0, 3.0, 10)],
)
def test_little_law_holds_for_stable_inputs(lam, mu, c):
    theory = mmc_theory(QueueingParameters(lam=lam, mu=mu, c=c))
    assert math.isclose(theory.L, lam * theory.W, rel_tol=1e-12)
    assert math.isclose(theory.Lq, lam * theory.Wq, rel_tol=1e-12)
    assert math.isclose(theory.L, theory.Lq + lam / mu, rel_tol=1e-12)


def test_erlang_c_is_one_when_load_reaches_servers():
    assert erlang_c(QueueingParameters(lam=20.0, mu=10.0, c=2)) == 1.0
    assert erlang_c(QueueingParameters(lam=50.0, mu=10.0, c=2)) == 1.0


def test_erlang_c_stays_within_unit_interval():
    for lam in (0.5, 3.0, 9.0, 19.9):
        value = erlang_c(QueueingParameters(lam=lam, mu=10.0, c=2))
        assert 0.0 <= value <= 1.0


def test_unstable_system_reports_infinity():
    theory = mmc_theory(QueueingParameters(lam=10.0, mu=10.0, c=1))
    assert theory.rho == 1.0
    assert not theory.is_stable
    for value in (theory.Lq, theory.L, theory.Wq, theory.W):
        assert math.isinf(value) and value > 0


def test_overloaded_system_keeps_real_utilization():
    theory = mmc_theory(QueueingParameters(lam=30.0, mu=10.0, c=2))
    assert math.isclose(theory.rho, 1.5)
    assert not theory.is_stable
    assert math.isinf(theory.W)


def test_empty_system_has_zero_metrics():
    theory = mmc_theory(QueueingParameters(lam=0.0, mu=4.0, c=3))
    assert theory.is_stable
    assert theory.as_dict() == {
        "rho": 0.0,
        "Lq": 0.0,
        "L": 0.0,
        "Wq": 0.0,
        "W": 0.0,
        "is_stable": True,
    }
