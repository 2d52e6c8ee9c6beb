"""Discrete-event simulation of a single-server FIFO (M/M/1) queue."""

from .distributions import InvalidParameterError, UniformSource, exponential_sample
from .lcg import UniformGenerator
from .metrics import MM1Theory, compare_with_theory, mm1_theory, relative_error, rho
from .mm1_core import CustomerRecord, MM1Params, MM1Simulator, SimulationResult, run_mm1
from .scenarios import DEFAULT_SCENARIO, Scenario, get_params, list_scenarios

__all__ = [
    "CustomerRecord",
    "DEFAULT_SCENARIO",
    "InvalidParameterError",
    "MM1Params",
    "MM1Simulator",
    "MM1Theory",
    "Scenario",
    "SimulationResult",
    "UniformGenerator",
    "UniformSource",
    "compare_with_theory",
    "exponential_sample",
    "get_params",
    "list_scenarios",
    "mm1_theory",
    "relative_error",
    "rho",
    "run_mm1",
]
