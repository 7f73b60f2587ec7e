"""Fixed-step stochastic simulation of an M/M/c (or M/M/c/K) queue."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

SECONDS_PER_MINUTE = 60.0


@dataclass(frozen=True)
class SimulationConfig:
    """
    Engine parameters. Rates are per minute, the time step is in seconds.

    The Bernoulli approximation admits at most one arrival per step, so the
    step must stay small against 1/lam and 1/mu.
    """

    lam: float
    mu: float
    c: int
    time_step: float = 0.1
    K: Optional[int] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.lam < 0:
            raise ValueError("Arrival rate lam must be non-negative.")
        if self.mu <= 0:
            raise ValueError("Service rate mu must be strictly positive.")
        if isinstance(self.c, bool) or not isinstance(self.c, int) or self.c < 1:
            raise ValueError("Number of servers c must be an integer >= 1.")
        if self.time_step <= 0:
            raise ValueError("Time step must be positive.")
        if self.K is not None and (isinstance(self.K, bool) or not isinstance(self.K, int)):
            raise ValueError("Capacity K must be an integer.")
        if self.K is not None and self.K < self.c:
            raise ValueError("Capacity K must be >= the number of servers c.")


@dataclass
class SimulationState:
    """Running counters of one simulation; all zero at construction."""

    current_time: float = 0.0
    queue_length: int = 0
    servers_busy: int = 0
    total_arrivals: int = 0
    total_served: int = 0
    total_rejected: int = 0
    cumulative_queue_length: int = 0
    cumulative_system_length: int = 0
    cumulative_busy_servers: int = 0
    time_steps: int = 0

    @property
    def in_system(self) -> int:
        return self.queue_length + self.servers_busy


class QueueSimulation:
    """
    Time-sliced approximation of the birth-death process.

    Each step draws one Bernoulli trial for an arrival and one per busy
    server for a departure. Only counts are tracked, so FIFO reduces to
    moving waiting customers into freed servers by number.
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.rng = np.random.default_rng(seed=config.seed)
        self._state = SimulationState()

    def reset(self) -> None:
        """Discard every counter; the configuration and generator are kept."""
        self._state = SimulationState()

    def update_config(self, **changes) -> None:
        """
        Merge new parameters in; they only affect future steps.

        A new seed restarts the random stream from that seed.
        """
        self.config = replace(self.config, **changes)
        if "seed" in changes:
            self.rng = np.random.default_rng(seed=self.config.seed)

    def get_state(self) -> SimulationState:
        """Return a copy of the running state."""
        return replace(self._state)

    @property
    def queue_length(self) -> int:
        return self._state.queue_length

    @property
    def current_time(self) -> float:
        return self._state.current_time

    @property
    def average_queue_length(self) -> float:
        if self._state.time_steps == 0:
            return 0.0
        return self._state.cumulative_queue_length / self._state.time_steps

    @property
    def average_system_length(self) -> float:
        if self._state.time_steps == 0:
            return 0.0
        return self._state.cumulative_system_length / self._state.time_steps

    @property
    def average_utilization(self) -> float:
        """Mean fraction of the currently configured servers that were busy."""
        if self._state.time_steps == 0:
            return 0.0
        busy_mean = self._state.cumulative_busy_servers / self._state.time_steps
        return busy_mean / self.config.c

    @property
    def rejection_ratio(self) -> float:
        """Share of offered arrivals turned away at capacity."""
        offered = self._state.total_arrivals + self._state.total_rejected
        if offered == 0:
            return 0.0
        return self._state.total_rejected / offered

    def _has_room(self) -> bool:
        if self.config.K is None:
            return True
        return self._state.in_system < self.config.K

    def step(self) -> None:
        """Advance the simulation by one time step."""
        cfg = self.config
        state = self._state
        arrival_p = cfg.lam / SECONDS_PER_MINUTE * cfg.time_step
        service_p = cfg.mu / SECONDS_PER_MINUTE * cfg.time_step

        if self.rng.random() < arrival_p:
            if self._has_room():
                state.total_arrivals += 1
                state.queue_length += 1
            else:
                state.total_rejected += 1

        # Idle servers take waiting customers. After a live reduction of c the
        # surplus customers in service go back to the waiting line.
        busy_now = min(state.queue_length + state.servers_busy, cfg.c)
        state.queue_length -= busy_now - state.servers_busy

        completions = int(np.count_nonzero(self.rng.random(busy_now) < service_p))
        state.total_served += completions
        state.servers_busy = max(0, busy_now - completions)

        moved = min(state.queue_length, completions)
        state.queue_length -= moved
        state.servers_busy += moved

        state.cumulative_queue_length += state.queue_length
        state.cumulative_system_length += state.in_system
        state.cumulative_busy_servers += state.servers_busy
        state.time_steps += 1
        state.current_time += cfg.time_step

    def simulate(self, duration: float) -> List[int]:
        """
        Step for `duration` seconds and return the queue length after each step.

        The number of steps is ceil(duration / time_step), rounded to nine
        decimals first so that float division noise (1.0 / 0.1) does not add
        an extra step.
        """
        steps = max(0, math.ceil(round(duration / self.config.time_step, 9)))
        samples: List[int] = []
        for _ in range(steps):
            self.step()
            samples.append(self._state.queue_length)
        return samples

    def run_ticks(self, ticks: int, speed: float = 1.0) -> List[Tuple[float, int]]:
        """
        Drive the engine the way a recurring timer does.

        Every tick runs ceil(speed) steps and records one (time, queue_length)
        sample.
        """
        steps_per_tick = max(1, math.ceil(speed))
        trace: List[Tuple[float, int]] = []
        for _ in range(ticks):
            for _ in range(steps_per_tick):
                self.step()
            trace.append((self._state.current_time, self._state.queue_length))
        return trace
