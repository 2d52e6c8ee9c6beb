"""Utility to generate figures from a seed sweep written by run_sim."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from mm1sim import mm1_theory

logger = logging.getLogger(__name__)

THEORY_COLUMNS = {
    "Wq": "average_wait_time",
    "service_mean": "average_service_time",
    "rho": "utilization",
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate plots from simulation results.")
    parser.add_argument(
        "--results",
        type=Path,
        default=Path("outputs/results.csv"),
        help="CSV produced by run_sim.",
    )
    parser.add_argument(
        "--reports-dir",
        type=Path,
        default=Path("reports"),
        help="Directory where PNG files will be saved.",
    )
    return parser.parse_args(argv)


def load_results(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Results file not found: {path}")
    df = pd.read_csv(path)
    if df.empty:
        raise ValueError("Results file is empty. Run the simulation first.")
    return df


def compute_metrics(df: pd.DataFrame) -> Dict[str, Dict[str, float]]:
    """Return ``{metric: {"sim": mean over seeds, "theory": value}}``.

    Theory is omitted (left out of the mapping) when the queue is unstable.
    """
    lam = float(df["lam"].iloc[0])
    mu = float(df["mu"].iloc[0])
    try:
        theory = mm1_theory(lam, mu).as_dict()
    except ValueError:
        logger.warning("lam=%.4f mu=%.4f is unstable; skipping theory comparison", lam, mu)
        return {}
    return {
        name: {"sim": float(df[column].mean()), "theory": theory[name]}
        for name, column in THEORY_COLUMNS.items()
    }


def plot_bar_comparison(metrics: Dict[str, Dict[str, float]], out: Path) -> None:
    labels = list(metrics)
    x = np.arange(len(labels))
    width = 0.35

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar(x - width / 2, [metrics[k]["theory"] for k in labels], width=width, label="Teoria")
    ax.bar(x + width / 2, [metrics[k]["sim"] for k in labels], width=width, label="Simulacion")
    ax.set_xticks(x)
    ax.set_xticklabels(labels)
    ax.set_ylabel("Valor")
    ax.set_title("Comparacion teoria vs. simulacion")
    ax.legend()
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)


def plot_histogram(series: pd.Series, title: str, xlabel: str, out: Path) -> None:
    fig, ax = plt.subplots(figsize=(6, 4))
    bins = np.histogram_bin_edges(series, bins=min(20, max(5, len(series))))
    ax.hist(series, bins=bins, color="#4c72b0", alpha=0.85, edgecolor="white")
    ax.axvline(float(np.mean(series)), color="black", linestyle="--", label="Media")
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel("Frecuencia")
    ax.legend()
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)


def plot_seed_series(df: pd.DataFrame, column: str, ylabel: str, out: Path) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.plot(df["seed"], df[column], marker="o")
    ax.set_xlabel("Semilla")
    ax.set_ylabel(ylabel)
    ax.set_title(f"{ylabel} por semilla")
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    df = load_results(args.results)
    args.reports_dir.mkdir(parents=True, exist_ok=True)

    metrics = compute_metrics(df)
    if metrics:
        plot_bar_comparison(metrics, args.reports_dir / "comp_teo_sim.png")
    plot_histogram(
        df["average_wait_time"],
        "Distribucion del tiempo medio de espera",
        "average_wait_time (min)",
        args.reports_dir / "hist_espera.png",
    )
    plot_seed_series(df, "utilization", "Utilizacion", args.reports_dir / "serie_utilizacion.png")

    print(f"Figuras guardadas en {args.reports_dir.resolve()}")


if __name__ == "__main__":
    main()
