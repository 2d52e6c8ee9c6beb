"""Behavioural checks for the simulation core."""

import math

import numpy as np
import pytest

from mm1sim.distributions import InvalidParameterError
from mm1sim.mm1_core import ARRIVAL, DEPARTURE, MM1Params, MM1Simulator, run_mm1

REFERENCE = MM1Params(seed=54321, lam=0.2, mu=0.25, horizon=480.0)


def test_reference_run_matches_recorded_output():
    """Golden regression for the workday scenario."""
    result = run_mm1(REFERENCE)
    assert result.total_customers == 96
    assert math.isclose(result.average_wait_time, 4.3113893047020655, abs_tol=1e-9)
    assert math.isclose(result.average_service_time, 3.5752699295036177, abs_tol=1e-9)
    assert math.isclose(result.utilization, 0.6882561376696528, abs_tol=1e-9)
    assert math.isclose(result.sum_wait_time, 413.89337325139826, abs_tol=1e-9)
    assert math.isclose(result.sum_service_time, 343.2259132323473, abs_tol=1e-9)
    assert math.isclose(result.end_time, 498.68921531810287, abs_tol=1e-9)


def test_runs_are_deterministic():
    first = MM1Simulator(REFERENCE, trace=True)
    second = MM1Simulator(REFERENCE, trace=True)
    assert first.run() == second.run()
    assert first.events == second.events
    assert first.completed == second.completed


def test_changing_seed_changes_results():
    other = run_mm1(MM1Params(seed=12345, lam=0.2, mu=0.25, horizon=480.0))
    reference = run_mm1(REFERENCE)
    assert (other.total_customers, other.average_wait_time, other.average_service_time) != (
        reference.total_customers,
        reference.average_wait_time,
        reference.average_service_time,
    )
    assert math.isclose(other.average_wait_time, 8.766316447089501, abs_tol=1e-9)


def test_fifo_order_and_causality():
    sim = MM1Simulator(REFERENCE, trace=True)
    result = sim.run()
    assert len(sim.completed) == result.total_customers

    arrivals = np.array([c.arrival_time for c in sim.completed])
    starts = np.array([c.service_start_time for c in sim.completed])
    departures = np.array([c.departure_time for c in sim.completed])

    # Departure order equals arrival order, and service starts follow it.
    assert np.all(np.diff(arrivals) >= 0)
    assert np.all(np.diff(starts) >= 0)
    assert np.all(arrivals <= starts)
    assert np.all(starts <= departures)
    assert all(c.wait_time >= 0 and c.service_time >= 0 for c in sim.completed)


def test_running_sums_match_customer_records():
    sim = MM1Simulator(REFERENCE, trace=True)
    result = sim.run()
    assert math.isclose(result.sum_wait_time, sum(c.wait_time for c in sim.completed))
    assert math.isclose(result.sum_service_time, sum(c.service_time for c in sim.completed))
    # A single server is busy exactly while it serves.
    assert math.isclose(result.server_busy_time, result.sum_service_time, rel_tol=1e-9)


def test_horizon_bounds_arrivals_but_not_departures():
    sim = MM1Simulator(REFERENCE, trace=True)
    result = sim.run()
    arrival_times = [t for t, kind in sim.events if kind == ARRIVAL]
    assert arrival_times and max(arrival_times) <= REFERENCE.horizon
    assert all(c.arrival_time <= REFERENCE.horizon for c in sim.completed)
    assert result.end_time > REFERENCE.horizon
    assert sim.next_arrival is None and sim.next_departure is None
    assert not sim.queue and not sim.server_busy


@pytest.mark.parametrize("seed", [0, 1, 42, 2024, -7])
@pytest.mark.parametrize("lam, mu", [(0.2, 0.25), (0.5, 0.25), (0.1, 1.0)])
def test_utilization_within_bounds(seed, lam, mu):
    result = run_mm1(MM1Params(seed=seed, lam=lam, mu=mu, horizon=200.0))
    assert 0.0 <= result.utilization <= 1.0
    assert result.average_wait_time >= 0.0
    assert result.average_service_time >= 0.0


def test_first_arrival_past_horizon_gives_empty_run():
    # First inter-arrival for this seed is about 4.89 minutes.
    result = run_mm1(MM1Params(seed=54321, lam=0.2, mu=0.25, horizon=1.0))
    assert result.total_customers == 0
    assert result.average_wait_time == 0.0
    assert result.average_service_time == 0.0
    assert result.utilization == 0.0
    assert result.end_time == 0.0


def test_single_customer_run(scripted):
    # Draws: first arrival, next arrival (past the horizon), service.
    source = scripted([0.5, 0.9, 0.5])
    params = MM1Params(seed=0, lam=1.0, mu=1.0, horizon=1.0)
    sim = MM1Simulator(params, trace=True, uniform=source)
    result = sim.run()

    ln2 = math.log(2.0)
    assert source.calls == 3
    assert result.total_customers == 1
    assert result.average_wait_time == 0.0
    assert math.isclose(result.average_service_time, ln2)
    assert math.isclose(result.end_time, 2 * ln2)
    assert math.isclose(result.utilization, result.average_service_time / result.end_time)
    assert sim.events == [(sim.completed[0].arrival_time, ARRIVAL), (result.end_time, DEPARTURE)]


def test_simultaneous_arrival_is_processed_before_departure(scripted):
    # Customer 1 arrives at 0 and leaves at ln2; customer 2 arrives at ln2.
    source = scripted([0.0, 0.5, 0.5, 0.9, 0.5])
    params = MM1Params(seed=0, lam=1.0, mu=1.0, horizon=2.0)
    sim = MM1Simulator(params, trace=True, uniform=source)
    result = sim.run()

    ln2 = math.log(2.0)
    kinds = [kind for _, kind in sim.events]
    assert kinds == [ARRIVAL, ARRIVAL, DEPARTURE, DEPARTURE]
    assert sim.events[1][0] == sim.events[2][0]
    assert source.calls == 5

    second = sim.completed[1]
    assert second.service_start_time == second.arrival_time
    assert result.total_customers == 2
    assert result.sum_wait_time == 0.0
    assert math.isclose(result.end_time, 2 * ln2)
    assert math.isclose(result.utilization, 1.0)


def test_waiting_customer_starts_at_previous_departure(scripted):
    # Customer 2 arrives at ln2 while customer 1 is served until ln10.
    source = scripted([0.0, 0.5, 0.9, 0.99, 0.5])
    params = MM1Params(seed=0, lam=1.0, mu=1.0, horizon=2.0)
    sim = MM1Simulator(params, trace=True, uniform=source)
    result = sim.run()

    first, second = sim.completed
    assert second.service_start_time == first.departure_time
    assert math.isclose(second.wait_time, math.log(10.0) - math.log(2.0))
    assert math.isclose(result.sum_wait_time, second.wait_time)


def test_run_again_returns_same_result_without_drawing(scripted):
    source = scripted([0.5, 0.9, 0.5])
    sim = MM1Simulator(MM1Params(seed=0, lam=1.0, mu=1.0, horizon=1.0), uniform=source)
    first = sim.run()
    assert sim.run() == first
    assert source.calls == 3


def test_no_trace_keeps_no_customer_records():
    sim = MM1Simulator(REFERENCE)
    sim.run()
    assert sim.completed == []
    assert sim.events == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lam": 0.0},
        {"lam": -1.0},
        {"mu": 0.0},
        {"mu": -0.25},
        {"horizon": 0.0},
        {"horizon": float("inf")},
    ],
)
def test_invalid_parameters_rejected_before_construction(kwargs):
    values = {"seed": 1, "lam": 0.2, "mu": 0.25, "horizon": 480.0}
    values.update(kwargs)
    with pytest.raises(InvalidParameterError):
        MM1Params(**values)


def test_result_as_dict_has_every_field():
    payload = run_mm1(REFERENCE).as_dict()
    assert payload["seed"] == 54321
    assert payload["total_customers"] == 96
    assert set(payload) >= {
        "sum_wait_time",
        "sum_service_time",
        "server_busy_time",
        "average_wait_time",
        "average_service_time",
        "utilization",
        "end_time",
    }


@pytest.mark.parametrize("seed", [1.5, 7.0, "54321", True, None])
def test_non_integer_seed_rejected(seed):
    with pytest.raises(InvalidParameterError):
        MM1Params(seed=seed, lam=0.2, mu=0.25, horizon=480.0)


def test_large_and_negative_integer_seeds_accepted():
    assert MM1Params(seed=-7, lam=0.2, mu=0.25, horizon=480.0).seed == -7
    assert MM1Params(seed=2**40, lam=0.2, mu=0.25, horizon=480.0).seed == 2**40


def test_run_mm1_takes_only_params():
    with pytest.raises(TypeError):
        run_mm1(REFERENCE, trace=True)


def test_trace_is_read_from_the_simulator():
    params = MM1Params(seed=1, lam=0.2, mu=0.25, horizon=50.0)
    sim = MM1Simulator(params, trace=True)
    result = sim.run()
    assert result == run_mm1(params)
    assert len(sim.completed) == result.total_customers
    assert sum(1 for _, kind in sim.events if kind == DEPARTURE) == result.total_customers
