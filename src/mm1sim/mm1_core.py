"""Discrete-event simulation core for the M/M/1 FIFO queue."""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import asdict, dataclass
from typing import Deque, Dict, List, Optional, Tuple

from .distributions import InvalidParameterError, UniformSource, exponential_sample
from .lcg import UniformGenerator

logger = logging.getLogger(__name__)

ARRIVAL = "arrival"
DEPARTURE = "departure"


@dataclass(frozen=True)
class MM1Params:
    """Simulation parameters bundled for convenience."""

    seed: int
    lam: float
    mu: float
    horizon: float

    def __post_init__(self) -> None:
        # bool is an int subclass but not a meaningful seed.
        if not isinstance(self.seed, int) or isinstance(self.seed, bool):
            raise InvalidParameterError(f"Seed must be an integer, got {self.seed!r}.")
        if not math.isfinite(self.lam) or self.lam <= 0:
            raise InvalidParameterError("Arrival rate lam must be strictly positive.")
        if not math.isfinite(self.mu) or self.mu <= 0:
            raise InvalidParameterError("Service rate mu must be strictly positive.")
        if not math.isfinite(self.horizon) or self.horizon <= 0:
            raise InvalidParameterError("Arrival horizon must be a finite positive time.")


@dataclass
class CustomerRecord:
    """One customer's passage through the system."""

    arrival_time: float
    service_start_time: Optional[float] = None
    departure_time: Optional[float] = None

    @property
    def wait_time(self) -> float:
        return self.service_start_time - self.arrival_time

    @property
    def service_time(self) -> float:
        return self.departure_time - self.service_start_time


@dataclass(frozen=True)
class SimulationResult:
    """Aggregated outputs of one run."""

    seed: int
    lam: float
    mu: float
    horizon: float
    total_customers: int
    sum_wait_time: float
    sum_service_time: float
    server_busy_time: float
    average_wait_time: float
    average_service_time: float
    utilization: float
    end_time: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


class MM1Simulator:
    """Event loop over two competing streams: arrivals and departures.

    ``next_arrival`` and ``next_departure`` hold the time of the pending event
    of each kind, or ``None`` when nothing is scheduled. Arrivals are only
    admitted up to ``params.horizon``; customers already in the system are
    always served to completion, so the final clock may pass the horizon.

    With ``trace=True`` the instance also keeps the completed customers and
    the processed event log, for inspection after :meth:`run`. ``uniform``
    replaces the seeded generator, e.g. with a scripted source in tests.
    """

    def __init__(
        self,
        params: MM1Params,
        trace: bool = False,
        uniform: Optional[UniformSource] = None,
    ):
        self.params = params
        self.uniform = uniform if uniform is not None else UniformGenerator(params.seed).next
        self.trace = trace

        self.queue: Deque[CustomerRecord] = deque()
        self.current_time = 0.0
        self.server_busy = False
        self.in_service: Optional[CustomerRecord] = None

        self.total_customers = 0
        self.sum_wait_time = 0.0
        self.sum_service_time = 0.0
        self.server_busy_time = 0.0
        self.last_event_time = 0.0

        self.completed: List[CustomerRecord] = []
        self.events: List[Tuple[float, str]] = []

        self.next_arrival = self._schedule_arrival(0.0)
        self.next_departure: Optional[float] = None

    def _schedule_arrival(self, now: float) -> Optional[float]:
        """Return the next arrival time, or None once it falls past the horizon."""
        t = now + exponential_sample(self.uniform, self.params.lam)
        if t > self.params.horizon:
            return None
        return t

    def _next_event(self) -> Tuple[float, str]:
        # Arrival wins ties.
        if self.next_departure is None:
            return self.next_arrival, ARRIVAL
        if self.next_arrival is None or self.next_departure < self.next_arrival:
            return self.next_departure, DEPARTURE
        return self.next_arrival, ARRIVAL

    def _finished(self) -> bool:
        return self.next_arrival is None and not self.queue and not self.server_busy

    def run(self) -> SimulationResult:
        """Process events until arrivals have stopped and the system is empty."""
        while not self._finished():
            event_time, kind = self._next_event()
            self._advance_time(event_time)
            if self.trace:
                self.events.append((event_time, kind))
            if kind == ARRIVAL:
                self._handle_arrival()
            else:
                self._handle_departure()

        result = self._collect_results()
        logger.debug(
            "Run finished (seed=%d): %d customers, end time %.4f, utilization %.4f",
            self.params.seed,
            result.total_customers,
            result.end_time,
            result.utilization,
        )
        return result

    def _advance_time(self, new_time: float) -> None:
        # The elapsed interval belongs to the state held before this event.
        if self.server_busy:
            self.server_busy_time += new_time - self.last_event_time
        self.current_time = new_time
        self.last_event_time = new_time

    def _handle_arrival(self) -> None:
        self.queue.append(CustomerRecord(arrival_time=self.current_time))
        self.next_arrival = self._schedule_arrival(self.current_time)
        if not self.server_busy:
            self._start_service()

    def _start_service(self) -> None:
        customer = self.queue.popleft()
        customer.service_start_time = self.current_time
        duration = exponential_sample(self.uniform, self.params.mu)
        customer.departure_time = self.current_time + duration

        self.server_busy = True
        self.in_service = customer
        self.next_departure = customer.departure_time

    def _handle_departure(self) -> None:
        customer = self.in_service
        self.sum_wait_time += customer.wait_time
        self.sum_service_time += customer.service_time
        self.total_customers += 1
        if self.trace:
            self.completed.append(customer)

        self.server_busy = False
        self.in_service = None
        self.next_departure = None

        # Next customer starts at the same instant, with no idle gap.
        if self.queue:
            self._start_service()

    def _collect_results(self) -> SimulationResult:
        n = self.total_customers
        average_wait = self.sum_wait_time / n if n > 0 else 0.0
        average_service = self.sum_service_time / n if n > 0 else 0.0
        utilization = (
            self.server_busy_time / self.current_time if self.current_time > 0 else 0.0
        )
        return SimulationResult(
            seed=self.params.seed,
            lam=self.params.lam,
            mu=self.params.mu,
            horizon=self.params.horizon,
            total_customers=n,
            sum_wait_time=self.sum_wait_time,
            sum_service_time=self.sum_service_time,
            server_busy_time=self.server_busy_time,
            average_wait_time=average_wait,
            average_service_time=average_service,
            utilization=utilization,
            end_time=self.current_time,
        )


def run_mm1(params: MM1Params) -> SimulationResult:
    """Run one M/M/1 simulation and return aggregated statistics."""
    return MM1Simulator(params).run()
