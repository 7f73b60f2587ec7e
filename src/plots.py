"""Utility to generate figures comparing simulation vs. theory."""

from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import pandas as pd

try:
    from queueforge import FiniteQueueingParameters, QueueingParameters, mmc_theory, mmck_theory
except ModuleNotFoundError:  # pragma: no cover
    from .queueforge import FiniteQueueingParameters, QueueingParameters, mmc_theory, mmck_theory


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate plots from simulation results.")
    parser.add_argument(
        "--results",
        type=Path,
        default=Path("outputs/results.csv"),
        help="CSV produced by src.run_sim.",
    )
    parser.add_argument(
        "--trace",
        type=Path,
        default=None,
        help="Optional trace CSV produced by src.run_sim --trace-out.",
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


def theory_from_results(df: pd.DataFrame) -> Dict[str, float]:
    """Rebuild the analytic metrics from the parameters stored in the CSV."""
    lam = float(df["lam"].iloc[0])
    mu = float(df["mu"].iloc[0])
    c = int(df["c"].iloc[0])
    K = df["K"].iloc[0] if "K" in df.columns else float("nan")
    if pd.isna(K):
        return dict(mmc_theory(QueueingParameters(lam=lam, mu=mu, c=c)).as_dict())
    return dict(mmck_theory(FiniteQueueingParameters(lam=lam, mu=mu, c=c, K=int(K))).as_dict())


def compute_error_bars(df: pd.DataFrame, metrics: list[str]) -> list[float]:
    if len(df) < 2:
        return [0.0 for _ in metrics]
    errs = []
    n = len(df)
    for metric in metrics:
        std = float(df[metric].std(ddof=1))
        errs.append(1.96 * std / math.sqrt(n))
    return errs


def bar_values(df: pd.DataFrame, theory: Dict[str, float]) -> Tuple[List[str], List[float], List[float]]:
    """Return labels, theory values and simulated means; infinite theory is shown as 0."""
    labels = ["L", "Lq"]
    sim_means = df[labels].mean()
    theory_values = [theory[label] if math.isfinite(theory[label]) else 0.0 for label in labels]
    return labels, theory_values, [float(sim_means[label]) for label in labels]


def plot_bar_comparison(df: pd.DataFrame, theory: Dict[str, float], out: Path) -> None:
    labels, theory_values, sim_values = bar_values(df, theory)
    errors = compute_error_bars(df, labels)

    x = range(len(labels))
    width = 0.35

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.bar([i - width / 2 for i in x], theory_values, width=width, label="Teoria")
    ax.bar(
        [i + width / 2 for i in x],
        sim_values,
        width=width,
        label="Simulacion",
        yerr=errors,
        capsize=5,
        error_kw={"elinewidth": 1, "alpha": 0.8},
    )
    ax.set_xticks(list(x))
    ax.set_xticklabels(labels)
    ax.set_ylabel("Clientes")
    ax.set_title("Comparacion teoria vs. simulacion (IC95)")
    ax.legend()
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)


def plot_trace(trace: pd.DataFrame, theory: Dict[str, float], out: Path) -> None:
    """Queue length over time with the analytic Lq as a reference line."""
    fig, ax = plt.subplots(figsize=(10, 4))
    ax.step(trace["time"], trace["queue_length"], where="post", linewidth=0.8, label="Cola")
    if math.isfinite(theory["Lq"]):
        ax.axhline(theory["Lq"], color="black", linestyle="--", label=f"Lq teorico = {theory['Lq']:.3f}")
    ax.set_xlabel("Tiempo (s)")
    ax.set_ylabel("Clientes en cola")
    ax.set_title("Evolucion de la cola")
    ax.legend(loc="upper right")
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    df = load_results(args.results)
    theory = theory_from_results(df)

    args.reports_dir.mkdir(parents=True, exist_ok=True)

    plot_bar_comparison(df, theory, args.reports_dir / "comp_teo_sim.png")
    if args.trace is not None:
        trace = pd.read_csv(args.trace)
        plot_trace(trace, theory, args.reports_dir / "traza_cola.png")

    print(f"Figuras guardadas en {args.reports_dir.resolve()}")


if __name__ == "__main__":
    main()
