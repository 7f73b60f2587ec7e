"""Analytic queueing models and a fixed-step simulation to compare them with."""

from .metrics import (
    QueueingParameters,
    QueueMetrics,
    is_stable,
    offered_load,
    relative_error,
    utilization,
)
from .metrics_mmc import erlang_c, mmc_theory
from .metrics_mmck import (
    FiniteQueueingParameters,
    FiniteQueueMetrics,
    mmck_p0,
    mmck_queue_length,
    mmck_rejection_probability,
    mmck_theory,
)
from .scenarios import Scenario, get_params, list_scenarios
from .sim_core import QueueSimulation, SimulationConfig, SimulationState

__all__ = [
    "FiniteQueueMetrics",
    "FiniteQueueingParameters",
    "QueueMetrics",
    "QueueSimulation",
    "QueueingParameters",
    "Scenario",
    "SimulationConfig",
    "SimulationState",
    "erlang_c",
    "get_params",
    "is_stable",
    "list_scenarios",
    "mmc_theory",
    "mmck_p0",
    "mmck_queue_length",
    "mmck_rejection_probability",
    "mmck_theory",
    "offered_load",
    "relative_error",
    "utilization",
]
