"""Pre-defined parameter sets with varying traffic intensities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .sim_core import SimulationConfig


@dataclass(frozen=True)
class Scenario:
    name: str
    lam: float
    mu: float
    c: int
    K: Optional[int] = None


SCENARIOS: Dict[str, Scenario] = {
    "A": Scenario(name="A", lam=6.0, mu=10.0, c=1),  # ρ = 0.60
    "B": Scenario(name="B", lam=10.0, mu=12.0, c=2),  # ρ ≈ 0.42
    "C": Scenario(name="C", lam=10.0, mu=8.0, c=2),  # ρ = 0.625
    "D": Scenario(name="D", lam=6.0, mu=10.0, c=1, K=5),  # Pb ≈ 0.033
    "E": Scenario(name="E", lam=30.0, mu=10.0, c=2, K=10),  # ρ = 1.5, overloaded
}


def list_scenarios() -> Iterable[str]:
    """Return available scenario identifiers."""
    return sorted(SCENARIOS.keys())


def get_scenario(name: str) -> Scenario:
    key = name.upper()
    if key not in SCENARIOS:
        raise KeyError(f"Scenario '{name}' is not defined. Available: {list_scenarios()}")
    return SCENARIOS[key]


def get_params(name: str, time_step: float, seed: Optional[int] = None) -> SimulationConfig:
    """Return a `SimulationConfig` for a named scenario."""
    scenario = get_scenario(name)
    return SimulationConfig(
        lam=scenario.lam,
        mu=scenario.mu,
        c=scenario.c,
        time_step=time_step,
        K=scenario.K,
        seed=seed,
    )

