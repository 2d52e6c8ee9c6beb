"""Command line interface to run single-server FIFO queue simulations."""

from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
from tqdm import tqdm

from mm1sim import (
    DEFAULT_SCENARIO,
    InvalidParameterError,
    MM1Params,
    SimulationResult,
    compare_with_theory,
    list_scenarios,
    run_mm1,
)
from mm1sim.scenarios import SCENARIOS

logger = logging.getLogger(__name__)

DEFAULT_SEED = 54321


def parse_positive(text: str) -> float:
    """Parse a strictly positive number of minutes."""
    value = float(text.strip().replace(",", "."))
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Expected a finite positive number, got {text!r}.")
    return value


def positive_minutes(text: str) -> float:
    try:
        return parse_positive(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate a single-server FIFO queue (M/M/1) over a working window."
    )
    parser.add_argument(
        "--between",
        type=positive_minutes,
        help="Mean minutes between arrivals (lambda = 1/between).",
    )
    parser.add_argument(
        "--serve",
        type=positive_minutes,
        help="Mean minutes to serve one customer (mu = 1/serve).",
    )
    parser.add_argument(
        "--scenario",
        type=str,
        choices=list(list_scenarios()),
        help="Named scenario shortcut (A, B, C).",
    )
    parser.add_argument(
        "--horizon",
        type=positive_minutes,
        help="Minutes during which new customers may arrive (default: scenario horizon, 480).",
    )
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed of the first run.")
    parser.add_argument(
        "--seeds",
        type=int,
        default=1,
        help="Number of consecutive seeds to simulate, starting at --seed.",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Ask for every parameter on the terminal instead of using flags.",
    )
    parser.add_argument(
        "--outputs",
        type=Path,
        default=Path("outputs/results.csv"),
        help="Path where the per-seed CSV will be written.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log progress information.")
    return parser.parse_args(argv)


def resolve_rates(args: argparse.Namespace) -> Tuple[float, float, float]:
    """Return lambda, mu and the arrival horizon selected by the flags."""
    if args.scenario and (args.between is not None or args.serve is not None):
        raise SystemExit("--scenario cannot be combined with --between/--serve.")
    if args.scenario:
        scenario = SCENARIOS[args.scenario]
        lam, mu = scenario.lam, scenario.mu
    elif args.between is None and args.serve is None:
        scenario = SCENARIOS[DEFAULT_SCENARIO]
        lam, mu = scenario.lam, scenario.mu
    else:
        if args.between is None or args.serve is None:
            raise SystemExit("Both --between and --serve must be provided together.")
        scenario = SCENARIOS[DEFAULT_SCENARIO]
        lam, mu = 1.0 / args.between, 1.0 / args.serve

    horizon = args.horizon if args.horizon is not None else scenario.horizon
    return lam, mu, horizon


def ask(
    prompt: str,
    parse: Callable[[str], float],
    default,
    input_fn: Callable[[str], str] = input,
):
    """Ask until the answer parses; an empty answer keeps ``default``."""
    while True:
        answer = input_fn(f"{prompt} [{default}]: ").strip()
        if not answer:
            return default
        try:
            return parse(answer)
        except ValueError:
            print(f"Valor invalido: {answer!r}. Intente de nuevo.")


def prompt_params(
    seed: int, lam: float, mu: float, horizon: float, input_fn: Callable[[str], str] = input
) -> MM1Params:
    """Interactive session collecting the four simulation parameters."""
    seed = ask("Semilla", int, seed, input_fn)
    between = ask("Minutos entre llegadas", parse_positive, 1.0 / lam, input_fn)
    serve = ask("Minutos de atencion", parse_positive, 1.0 / mu, input_fn)
    horizon = ask("Minutos de llegadas (horizonte)", parse_positive, horizon, input_fn)
    return MM1Params(seed=seed, lam=1.0 / between, mu=1.0 / serve, horizon=horizon)


def run_replications(
    lam: float, mu: float, horizon: float, seeds: Iterable[int]
) -> Iterable[SimulationResult]:
    """Yield one SimulationResult per seed."""
    seeds = list(seeds)
    for seed in tqdm(seeds, desc="Simulando", unit="seed", disable=len(seeds) < 2):
        yield run_mm1(MM1Params(seed=seed, lam=lam, mu=mu, horizon=horizon))


def summarize(results: Iterable[SimulationResult]) -> pd.DataFrame:
    df = pd.DataFrame([r.as_dict() for r in results])
    if not df.empty:
        df["total_customers"] = df["total_customers"].astype(int)
    return df


def format_result(result: SimulationResult) -> List[str]:
    """Render one result record as report lines."""
    return [
        "=== Resultados de la Simulacion ===",
        f"Semilla:                     {result.seed}",
        f"Total de clientes atendidos: {result.total_customers}",
        f"Tiempo medio de espera:      {result.average_wait_time:.4f} min",
        f"Tiempo medio de servicio:    {result.average_service_time:.4f} min",
        f"Utilizacion del servidor:    {result.utilization * 100:.2f} %",
        f"Tiempo total de simulacion:  {result.end_time:.4f} min",
    ]


def format_theory(lam: float, mu: float, simulated: Mapping[str, float]) -> List[str]:
    """Steady-state comparison lines, empty when the queue is unstable."""
    try:
        comparison = compare_with_theory(lam, mu, simulated)
    except ValueError:
        return []
    lines = ["", "Teoria M/M/1 (estado estacionario):"]
    for name, (sim, ref, err) in comparison.items():
        lines.append(f"  {name:<12}: sim {sim:>10.4f}  teo {ref:>10.4f}  error {err * 100:>8.3f}%")
    return lines


def ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    if args.seeds < 1:
        raise SystemExit("--seeds must be >= 1.")

    lam, mu, horizon = resolve_rates(args)
    try:
        if args.interactive:
            base = prompt_params(args.seed, lam, mu, horizon)
        else:
            base = MM1Params(seed=args.seed, lam=lam, mu=mu, horizon=horizon)
    except InvalidParameterError as exc:
        raise SystemExit(f"Invalid parameters: {exc}") from exc

    seeds = range(base.seed, base.seed + args.seeds)
    logger.info(
        "Simulating lam=%.6f mu=%.6f horizon=%.2f for %d seed(s) from %d",
        base.lam,
        base.mu,
        base.horizon,
        args.seeds,
        base.seed,
    )
    results = list(run_replications(base.lam, base.mu, base.horizon, seeds))
    df = summarize(results)

    ensure_parent(args.outputs)
    df.to_csv(args.outputs, index=False)
    logger.info("Wrote %d row(s) to %s", len(df), args.outputs)

    means = df[["total_customers", "average_wait_time", "average_service_time", "utilization"]].mean()
    if len(results) == 1:
        report = format_result(results[0])
    else:
        report = [
            f"=== Promedio sobre {len(results)} semillas ===",
            f"Clientes atendidos:        {means['total_customers']:.2f}",
            f"Tiempo medio de espera:    {means['average_wait_time']:.4f} min",
            f"Tiempo medio de servicio:  {means['average_service_time']:.4f} min",
            f"Utilizacion del servidor:  {means['utilization'] * 100:.2f} %",
        ]
    simulated = {
        "Wq": float(means["average_wait_time"]),
        "service_mean": float(means["average_service_time"]),
        "rho": float(means["utilization"]),
    }
    for line in report + format_theory(base.lam, base.mu, simulated):
        print(line)

    print(f"\nResultados guardados en {args.outputs.resolve()}")


if __name__ == "__main__":
    main()
