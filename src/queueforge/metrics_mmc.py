"""Closed-form metrics for the M/M/c queue (Erlang-C)."""

from __future__ import annotations

import math

from .metrics import (
    QueueingParameters,
    QueueMetrics,
    factorial,
    is_stable,
    offered_load,
    utilization,
)


def erlang_c(params: QueueingParameters) -> float:
    """
    Probability that an arriving customer has to wait.

    Returns exactly 1.0 when the offered load reaches the number of servers,
    since the series only converges for a < c.
    """
    a = offered_load(params)
    c = params.c
    if a >= c:
        return 1.0

    numerator = (a**c / factorial(c)) * (c / (c - a))
    sum_terms = sum(a**k / factorial(k) for k in range(c))
    return numerator / (sum_terms + numerator)


def mmc_theory(params: QueueingParameters) -> QueueMetrics:
    """
    Compute M/M/c steady-state metrics.

    An unstable system (rho >= 1) reports infinite Lq, L, Wq and W together
    with its real utilization instead of raising.
    """
    r = utilization(params)
    if not is_stable(params):
        return QueueMetrics(
            rho=r,
            Lq=math.inf,
            L=math.inf,
            Wq=math.inf,
            W=math.inf,
            is_stable=False,
        )

    if params.lam == 0:
        return QueueMetrics(rho=0.0, Lq=0.0, L=0.0, Wq=0.0, W=0.0, is_stable=True)

    Lq = erlang_c(params) * r / (1.0 - r)
    L = Lq + offered_load(params)
    # Little's law for both the queue and the whole system.
    Wq = Lq / params.lam
    W = L / params.lam
    return QueueMetrics(rho=r, Lq=Lq, L=L, Wq=Wq, W=W, is_stable=True)
