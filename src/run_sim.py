"""Command line interface to run replicated queue simulations against theory."""

from __future__ import annotations

import argparse
import math
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
from tqdm import trange

try:
    from queueforge import (
        FiniteQueueingParameters,
        QueueingParameters,
        QueueSimulation,
        SimulationConfig,
        get_params,
        list_scenarios,
        mmc_theory,
        mmck_theory,
        relative_error,
    )
except ModuleNotFoundError:  # pragma: no cover - fallback when executed as package
    from .queueforge import (
        FiniteQueueingParameters,
        QueueingParameters,
        QueueSimulation,
        SimulationConfig,
        get_params,
        list_scenarios,
        mmc_theory,
        mmck_theory,
        relative_error,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run replicated fixed-step simulations of an M/M/c or M/M/c/K queue."
    )
    parser.add_argument("--lam", type=float, help="Arrival rate per minute (required unless --scenario).")
    parser.add_argument("--mu", type=float, help="Service rate per minute (required unless --scenario).")
    parser.add_argument("--c", type=int, default=1, help="Number of parallel servers.")
    parser.add_argument(
        "--K",
        type=int,
        default=None,
        help="System capacity; enables the M/M/c/K model when given.",
    )
    parser.add_argument(
        "--scenario",
        type=str,
        choices=list(list_scenarios()),
        help="Named scenario shortcut (overrides --lam/--mu/--c/--K).",
    )
    parser.add_argument("--time-step", type=float, default=0.25, help="Step size in seconds.")
    parser.add_argument(
        "--duration",
        type=float,
        default=36_000.0,
        help="Simulated seconds per replication.",
    )
    parser.add_argument("--seed", type=int, default=123, help="Base random seed.")
    parser.add_argument("--replications", type=int, default=5, help="Number of replications.")
    parser.add_argument(
        "--outputs",
        type=Path,
        default=Path("outputs/results.csv"),
        help="Path where the per-replication CSV will be written.",
    )
    parser.add_argument(
        "--trace-out",
        type=Path,
        default=None,
        help="Optional CSV with the (time, queue_length) ticks of the first replication.",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Steps per recorded tick in the trace (rounded up).",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SimulationConfig:
    if args.scenario:
        return get_params(args.scenario, time_step=args.time_step, seed=args.seed)
    if args.lam is None or args.mu is None:
        raise SystemExit("Either --scenario or both --lam and --mu must be provided.")
    try:
        return SimulationConfig(
            lam=args.lam,
            mu=args.mu,
            c=args.c,
            time_step=args.time_step,
            K=args.K,
            seed=args.seed,
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc


def theory_for(config: SimulationConfig) -> Dict[str, float]:
    """Analytic metrics of the configured model, as a flat dictionary."""
    if config.K is None:
        theory = dict(mmc_theory(QueueingParameters(lam=config.lam, mu=config.mu, c=config.c)).as_dict())
        theory["Pb"] = 0.0
        theory["utilization"] = theory["rho"]
        return theory
    metrics = mmck_theory(
        FiniteQueueingParameters(lam=config.lam, mu=config.mu, c=config.c, K=config.K)
    )
    theory = dict(metrics.as_dict())
    # Busy servers only see admitted customers.
    theory["utilization"] = metrics.lambda_eff / (config.mu * config.c)
    return theory


def run_replication(config: SimulationConfig, duration: float) -> Dict[str, float]:
    """Run one replication and return its aggregated statistics."""
    sim = QueueSimulation(config)
    sim.simulate(duration)
    state = sim.get_state()
    minutes = state.current_time / 60.0
    return {
        "lam": config.lam,
        "mu": config.mu,
        "c": config.c,
        "K": config.K,
        "seed": config.seed,
        "time_step": config.time_step,
        "duration": state.current_time,
        "Lq": sim.average_queue_length,
        "L": sim.average_system_length,
        "utilization": sim.average_utilization,
        "Pb_sim": sim.rejection_ratio,
        "arrivals": state.total_arrivals,
        "served": state.total_served,
        "rejected": state.total_rejected,
        "lambda_hat": state.total_arrivals / minutes if minutes > 0 else 0.0,
    }


def run_replications(config: SimulationConfig, args: argparse.Namespace) -> Iterable[Dict[str, float]]:
    """Yield statistics for each replication, shifting the seed every time."""
    for rep in trange(args.replications, desc="Simulating", unit="rep"):
        seed = None if config.seed is None else config.seed + rep
        yield run_replication(replace(config, seed=seed), args.duration)


def compute_summary(
    df: pd.DataFrame, theory: Dict[str, float]
) -> tuple[pd.DataFrame, Dict[str, Dict[str, float]]]:
    if df.empty:
        return pd.DataFrame(), {}

    n = len(df)
    rows = []
    lookup: Dict[str, Dict[str, float]] = {}

    metric_mapping = [
        ("Lq", "Lq"),
        ("L", "L"),
        ("utilization", "utilization"),
        ("Pb_sim", "Pb"),
        ("lambda_hat", None),
    ]
    for name, theory_key in metric_mapping:
        series = df[name]
        mean = float(series.mean())
        std = float(series.std(ddof=1)) if n > 1 else 0.0
        half = 1.96 * std / math.sqrt(n) if n > 1 else 0.0
        rel_half = (half / mean * 100) if mean else 0.0
        theory_value = theory[theory_key] if theory_key else float("nan")
        rel_err = relative_error(mean, theory_value) * 100 if theory_key else float("nan")

        row = {
            "metric": name,
            "mean": mean,
            "std": std,
            "ci95_halfwidth": half,
            "ci95_rel_pct": rel_half,
            "theory": theory_value,
            "relative_error_pct": rel_err,
            "replications": n,
        }
        rows.append(row)
        lookup[name] = row

    return pd.DataFrame(rows), lookup


def write_trace(config: SimulationConfig, args: argparse.Namespace) -> None:
    sim = QueueSimulation(config)
    steps_per_tick = max(1, math.ceil(args.speed))
    ticks = int(args.duration / (config.time_step * steps_per_tick))
    trace = sim.run_ticks(ticks, speed=args.speed)
    trace_df = pd.DataFrame(trace, columns=["time", "queue_length"])
    args.trace_out.parent.mkdir(parents=True, exist_ok=True)
    trace_df.to_csv(args.trace_out, index=False)
    print(f"Traza guardada en {args.trace_out.resolve()}")


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    config = build_config(args)
    theory = theory_for(config)

    df = pd.DataFrame(list(run_replications(config, args)))
    if df.empty:
        raise SystemExit("No simulation data was produced.")

    args.outputs.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.outputs, index=False)

    summary_df, summary_lookup = compute_summary(df, theory)
    summary_path = args.outputs.parent / "summary.csv"
    summary_df.to_csv(summary_path, index=False)

    model_name = "M/M/c" if config.K is None else "M/M/c/K"
    print(f"\nTeoria {model_name}:")
    for key in ("rho", "Lq", "L", "Wq", "W", "Pb"):
        print(f"  {key:<3}: {theory[key]:>10.6f}")
    if not theory["is_stable"]:
        print("  (sistema inestable: las colas crecen sin limite)")

    print("\nSimulacion (promedios empiricos):")
    for key in ("Lq", "L", "utilization", "Pb_sim", "lambda_hat"):
        print(f"  {key:<11}: {summary_lookup[key]['mean']:>10.6f}")

    print("\nErrores relativos:")
    for key in ("Lq", "L", "utilization", "Pb_sim"):
        print(f"  {key:<11}: {summary_lookup[key]['relative_error_pct']:>9.3f}%")

    print("\nIC95 (media +/- half-width):")
    for key in ("Lq", "L"):
        row = summary_lookup[key]
        print(
            f"  {key:<11}: +/-{row['ci95_halfwidth']:>10.6f} "
            f"({row['ci95_rel_pct']:>6.3f}% del promedio)"
        )

    if args.trace_out is not None:
        write_trace(config, args)

    print(f"\nResultados guardados en {args.outputs.resolve()}")
    print(f"Resumen guardado en {summary_path.resolve()}")


if __name__ == "__main__":
    main()
