"""Closed-form steady-state metrics used as a reference for simulated runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Mapping


@dataclass(frozen=True)
class MM1Theory:
    """Steady-state M/M/1 quantities comparable with simulated averages."""

    rho: float
    Wq: float
    service_mean: float

    def as_dict(self) -> Mapping[str, float]:
        return asdict(self)


def rho(lam: float, mu: float) -> float:
    """Return the traffic intensity λ/μ validating the input domain."""
    if lam < 0:
        raise ValueError("Arrival rate lam must be non-negative.")
    if mu <= 0:
        raise ValueError("Service rate mu must be strictly positive.")
    return lam / mu


def mm1_theory(lam: float, mu: float) -> MM1Theory:
    """
    Compute steady-state M/M/1 metrics.

    Raises:
        ValueError: when ρ ≥ 1 (system unstable) or inputs are invalid.
    """
    r = rho(lam, mu)
    if r >= 1.0:
        raise ValueError("Unstable system: rho must be < 1 for M/M/1.")

    service_mean = 1.0 / mu
    if lam == 0:
        return MM1Theory(rho=0.0, Wq=0.0, service_mean=service_mean)

    return MM1Theory(rho=r, Wq=r / (mu - lam), service_mean=service_mean)


def relative_error(sim_value: float, reference_value: float) -> float:
    """Return |sim-ref| / ref guarding division by zero."""
    if reference_value == 0:
        return 0.0 if sim_value == 0 else float("inf")
    return abs(sim_value - reference_value) / abs(reference_value)


def compare_with_theory(
    lam: float, mu: float, simulated: Mapping[str, float]
) -> dict[str, tuple[float, float, float]]:
    """
    Pair simulated averages with their steady-state counterparts.

    ``simulated`` maps metric names of :class:`MM1Theory` (e.g. ``Wq``,
    ``service_mean``, ``rho``) to observed values. Returns
    ``{name: (simulated, theory, relative_error)}``.

    Raises:
        ValueError: when the rates describe an unstable queue.
    """
    theory = mm1_theory(lam, mu).as_dict()
    return {
        name: (value, theory[name], relative_error(value, theory[name]))
        for name, value in simulated.items()
    }
