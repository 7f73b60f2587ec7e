"""Batch comparison between M/M/c/K and M/M/c by sweeping the capacity K."""

from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import Iterable, List, Optional

import matplotlib.pyplot as plt
import pandas as pd
from tqdm import trange

try:
    from queueforge import (
        FiniteQueueingParameters,
        QueueingParameters,
        QueueSimulation,
        SimulationConfig,
        mmc_theory,
        mmck_theory,
    )
except ModuleNotFoundError:  # pragma: no cover
    from .queueforge import (
        FiniteQueueingParameters,
        QueueingParameters,
        QueueSimulation,
        SimulationConfig,
        mmc_theory,
        mmck_theory,
    )


def parse_k_list(spec: str, c: int) -> List[int]:
    values = []
    for chunk in spec.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            K = int(chunk)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Invalid K value '{chunk}'.") from exc
        if K < c:
            raise argparse.ArgumentTypeError(f"Every K must be >= c ({c}).")
        values.append(K)
    if not values:
        raise argparse.ArgumentTypeError("Provide at least one capacity via --k-list.")
    return sorted(set(values))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare M/M/c/K against M/M/c across K.")
    parser.add_argument("--lam", type=float, default=10.0, help="Arrival rate per minute.")
    parser.add_argument("--mu", type=float, default=12.0, help="Service rate per minute.")
    parser.add_argument("--c", type=int, default=2, help="Number of servers.")
    parser.add_argument(
        "--k-list",
        type=str,
        default="2,3,5,10,20",
        help='Comma-separated list of capacities to evaluate (e.g. "2,5,10").',
    )
    parser.add_argument("--time-step", type=float, default=0.25, help="Step size in seconds.")
    parser.add_argument("--duration", type=float, default=36_000.0, help="Simulated seconds.")
    parser.add_argument("--seed", type=int, default=123, help="Base random seed.")
    parser.add_argument("--replications", type=int, default=5, help="Replications per K.")
    parser.add_argument(
        "--results-out",
        type=Path,
        default=Path("outputs/compare_results.csv"),
        help="CSV where per-replication results will be stored.",
    )
    parser.add_argument(
        "--summary-out",
        type=Path,
        default=Path("outputs/compare_summary.csv"),
        help="CSV with aggregated statistics per K.",
    )
    parser.add_argument(
        "--reports-dir",
        type=Path,
        default=Path("reports"),
        help="Directory where comparison figures will be written.",
    )
    return parser.parse_args(argv)


def run_replications_for_k(K: int, args: argparse.Namespace) -> Iterable[dict[str, float]]:
    for rep in trange(args.replications, desc=f"K={K}", unit="rep"):
        config = SimulationConfig(
            lam=args.lam,
            mu=args.mu,
            c=args.c,
            time_step=args.time_step,
            K=K,
            seed=args.seed + rep,
        )
        sim = QueueSimulation(config)
        sim.simulate(args.duration)
        yield {
            "K": K,
            "seed": config.seed,
            "Lq": sim.average_queue_length,
            "L": sim.average_system_length,
            "utilization": sim.average_utilization,
            "Pb_sim": sim.rejection_ratio,
        }


def summarize_by_k(df: pd.DataFrame) -> pd.DataFrame:
    metrics = ["Lq", "L", "utilization", "Pb_sim"]
    rows = []
    for K, group in df.groupby("K"):
        row = {
            "K": int(K),
            "replications": len(group),
            "Pb_theory": float(group["Pb_theory"].iloc[0]),
            "Lq_theory": float(group["Lq_theory"].iloc[0]),
            "L_theory": float(group["L_theory"].iloc[0]),
            "W_theory": float(group["W_theory"].iloc[0]),
            "Wq_theory": float(group["Wq_theory"].iloc[0]),
        }
        for column in metrics:
            series = group[column]
            mean = float(series.mean())
            std = float(series.std(ddof=1)) if len(series) > 1 else 0.0
            half = 1.96 * std / math.sqrt(len(series)) if len(series) > 1 else 0.0
            row[f"{column}_mean"] = mean
            row[f"{column}_ci95"] = half
        rows.append(row)
    return pd.DataFrame(rows).sort_values("K")


def plot_rejection_vs_k(summary: pd.DataFrame, reports_dir: Path) -> None:
    k_values = summary["K"].astype(int).tolist()
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.errorbar(
        k_values,
        summary["Pb_sim_mean"],
        yerr=summary["Pb_sim_ci95"],
        marker="o",
        capsize=4,
        label="Simulacion",
    )
    ax.plot(k_values, summary["Pb_theory"], linestyle="--", marker="x", label="Teoria")
    ax.set_xlabel("K")
    ax.set_ylabel("P(rechazo)")
    ax.set_title("Probabilidad de rechazo vs. capacidad")
    ax.legend()
    fig.tight_layout()
    fig.savefig(reports_dir / "pb_vs_k.png", dpi=150)
    plt.close(fig)


def plot_lengths_vs_k(summary: pd.DataFrame, reference: dict, reports_dir: Path) -> None:
    k_values = summary["K"].astype(int).tolist()
    fig, ax = plt.subplots(figsize=(10, 5))
    for label in ("L", "Lq"):
        ax.plot(k_values, summary[f"{label}_mean"], marker="o", label=f"{label} (sim)")
        ax.plot(
            k_values,
            summary[f"{label}_theory"],
            linestyle="--",
            marker="x",
            label=f"{label} (teo)",
        )
        if math.isfinite(reference[label]):
            ax.axhline(reference[label], color="gray", linestyle=":", label=f"{label} M/M/c")
    ax.set_xlabel("K")
    ax.set_ylabel("Clientes")
    ax.set_title("Longitudes medias vs. capacidad")
    ax.legend(loc="upper left")
    fig.tight_layout()
    fig.savefig(reports_dir / "longitudes_vs_k.png", dpi=150)
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    if args.c < 1:
        raise SystemExit("--c must be >= 1.")
    k_values = parse_k_list(args.k_list, args.c)

    reference = mmc_theory(QueueingParameters(lam=args.lam, mu=args.mu, c=args.c)).as_dict()

    all_results = []
    for K in k_values:
        theory = mmck_theory(FiniteQueueingParameters(lam=args.lam, mu=args.mu, c=args.c, K=K))
        for rep in run_replications_for_k(K, args):
            rep["Pb_theory"] = theory.Pb
            rep["Lq_theory"] = theory.Lq
            rep["L_theory"] = theory.L
            rep["W_theory"] = theory.W
            rep["Wq_theory"] = theory.Wq
            all_results.append(rep)

    if not all_results:
        raise SystemExit("No se generaron resultados; revise los parametros.")

    args.results_out.parent.mkdir(parents=True, exist_ok=True)
    args.summary_out.parent.mkdir(parents=True, exist_ok=True)

    results_df = pd.DataFrame(all_results)
    results_df.to_csv(args.results_out, index=False)

    summary_df = summarize_by_k(results_df)
    summary_df.to_csv(args.summary_out, index=False)

    args.reports_dir.mkdir(parents=True, exist_ok=True)
    plot_rejection_vs_k(summary_df, args.reports_dir)
    plot_lengths_vs_k(summary_df, reference, args.reports_dir)

    print(f"Referencia M/M/c: Lq={reference['Lq']:.4f}, L={reference['L']:.4f}")
    print(f"Resultados por replicacion: {args.results_out.resolve()}")
    print(f"Resumen comparativo: {args.summary_out.resolve()}")
    print(f"Graficos guardados en {args.reports_dir.resolve()}")


if __name__ == "__main__":
    main()
