"""Closed-form metrics for the finite-capacity M/M/c/K queue."""

from __future__ import annotations

from dataclasses import dataclass

from .metrics import QueueingParameters, QueueMetrics, factorial, offered_load, utilization

# Closed geometric sums are singular at rho == 1.
RHO_ONE_TOLERANCE = 1e-10


@dataclass(frozen=True)
class FiniteQueueingParameters(QueueingParameters):
    """M/M/c inputs plus K, the maximum number of customers in the system."""

    K: int

    def __post_init__(self) -> None:
        super().__post_init__()
        if isinstance(self.K, bool) or not isinstance(self.K, int):
            raise ValueError("Capacity K must be an integer.")
        if self.K < self.c:
            raise ValueError("Capacity K must be >= the number of servers c.")


@dataclass(frozen=True)
class FiniteQueueMetrics(QueueMetrics):
    """Steady-state metrics of an M/M/c/K system, always stable."""

    Pb: float
    lam: float

    @property
    def lambda_eff(self) -> float:
        """Throughput of admitted customers, λ(1 - Pb)."""
        return self.lam * (1.0 - self.Pb)


def _near_one(r: float) -> bool:
    return abs(r - 1.0) < RHO_ONE_TOLERANCE


def _server_terms(params: FiniteQueueingParameters) -> tuple[float, float]:
    """Return (Σ_{k<c} a^k/k!, a^c/c!)."""
    a = offered_load(params)
    c = params.c
    head = sum(a**k / factorial(k) for k in range(c))
    return head, a**c / factorial(c)


def mmck_p0(params: FiniteQueueingParameters) -> float:
    """Probability that the system is empty."""
    r = utilization(params)
    c, K = params.c, params.K
    head, ac_over_cfact = _server_terms(params)

    if _near_one(r):
        tail = ac_over_cfact * (K - c + 1)
    else:
        tail = ac_over_cfact * (1.0 - r ** (K - c + 1)) / (1.0 - r)
    return 1.0 / (head + tail)


def mmck_rejection_probability(params: FiniteQueueingParameters) -> float:
    """
    Probability Pb that an arrival finds the system full.

    Poisson arrivals see time averages, so Pb is the stationary probability
    of state K.
    """
    a = offered_load(params)
    r = utilization(params)
    c, K = params.c, params.K
    p0 = mmck_p0(params)

    if K <= c:
        return p0 * a**K / factorial(K)
    return p0 * (a**c / factorial(c)) * r ** (K - c)


def mmck_queue_length(params: FiniteQueueingParameters) -> float:
    """Average number of customers waiting (Lq)."""
    r = utilization(params)
    c, K = params.c, params.K
    p0 = mmck_p0(params)
    _, ac_over_cfact = _server_terms(params)

    if _near_one(r):
        return ac_over_cfact * p0 * (K - c) * (K - c + 1) / 2.0

    n = K - c
    bracket = 1.0 - r ** (n + 1) - (n + 1) * r**n * (1.0 - r)
    return ac_over_cfact * r * p0 * bracket / (1.0 - r) ** 2


def mmck_theory(params: FiniteQueueingParameters) -> FiniteQueueMetrics:
    """
    Compute M/M/c/K steady-state metrics.

    Only admitted customers occupy servers, so L and the waiting times use
    the effective arrival rate. A system rejecting every arrival reports
    zero waiting times.
    """
    r = utilization(params)
    Pb = mmck_rejection_probability(params)
    lambda_eff = params.lam * (1.0 - Pb)

    Lq = mmck_queue_length(params)
    L = Lq + lambda_eff / params.mu
    Wq = Lq / lambda_eff if lambda_eff > 0 else 0.0
    W = L / lambda_eff if lambda_eff > 0 else 0.0

    return FiniteQueueMetrics(
        rho=r,
        Lq=Lq,
        L=L,
        Wq=Wq,
        W=W,
        is_stable=True,
        Pb=Pb,
        lam=params.lam,
    )
