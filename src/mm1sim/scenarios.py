"""Pre-defined workloads expressed the way a counter clerk would state them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

from .mm1_core import MM1Params

WORKDAY_MINUTES = 480.0


@dataclass(frozen=True)
class Scenario:
    name: str
    minutes_between_arrivals: float
    minutes_to_serve: float
    horizon: float = WORKDAY_MINUTES

    @property
    def lam(self) -> float:
        return 1.0 / self.minutes_between_arrivals

    @property
    def mu(self) -> float:
        return 1.0 / self.minutes_to_serve


SCENARIOS: Dict[str, Scenario] = {
    "A": Scenario(name="A", minutes_between_arrivals=5.0, minutes_to_serve=4.0),  # ρ = 0.80
    "B": Scenario(name="B", minutes_between_arrivals=8.0, minutes_to_serve=4.0),  # ρ = 0.50
    "C": Scenario(name="C", minutes_between_arrivals=4.2, minutes_to_serve=4.0),  # ρ ≈ 0.95
}

DEFAULT_SCENARIO = "A"


def list_scenarios() -> Iterable[str]:
    """Return available scenario identifiers."""
    return sorted(SCENARIOS.keys())


def get_params(name: str, seed: int) -> MM1Params:
    """Return `MM1Params` for a named scenario."""
    key = name.upper()
    if key not in SCENARIOS:
        raise KeyError(f"Scenario '{name}' is not defined. Available: {list_scenarios()}")
    scenario = SCENARIOS[key]
    return MM1Params(seed=seed, lam=scenario.lam, mu=scenario.mu, horizon=scenario.horizon)
