"""Shared parameters and helpers for the analytic queueing models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Mapping


@dataclass(frozen=True)
class QueueingParameters:
    """Inputs of an M/M/c system (rates per minute)."""

    lam: float
    mu: float
    c: int

    def __post_init__(self) -> None:
        if self.lam < 0:
            raise ValueError("Arrival rate lam must be non-negative.")
        if self.mu <= 0:
            raise ValueError("Service rate mu must be strictly positive.")
        if isinstance(self.c, bool) or not isinstance(self.c, int) or self.c < 1:
            raise ValueError("Number of servers c must be an integer >= 1.")


@dataclass(frozen=True)
class QueueMetrics:
    """Steady-state metrics shared by the M/M/c and M/M/c/K models."""

    rho: float
    Lq: float
    L: float
    Wq: float
    W: float
    is_stable: bool

    def as_dict(self) -> Mapping[str, float]:
        """Return the metrics as a plain dictionary (handy for printing)."""
        return asdict(self)


def offered_load(params: QueueingParameters) -> float:
    """Return a = λ/μ, the load offered to the servers in Erlangs."""
    return params.lam / params.mu


def utilization(params: QueueingParameters) -> float:
    """Return ρ = λ/(cμ)."""
    return params.lam / (params.mu * params.c)


def is_stable(params: QueueingParameters) -> bool:
    """ρ exactly 1 is unstable for the infinite-capacity model."""
    return utilization(params) < 1.0


def factorial(n: int) -> float:
    """Iterative factorial in floating point (inf once it overflows)."""
    result = 1.0
    for i in range(2, n + 1):
        result *= i
    return result


def relative_error(sim_value: float, reference_value: float) -> float:
    """Return |sim-ref| / ref guarding division by zero."""
    if reference_value == 0:
        return 0.0 if sim_value == 0 else float("inf")
    return abs(sim_value - reference_value) / abs(reference_value)
