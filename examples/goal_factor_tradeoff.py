"""How the goal factor trades execution latency against queueing.

A consumer serving 2000 req/s with exponentially distributed service times
is fed by a Poisson producer at 90% utilisation. The dispatcher admits work
every latency goal (1ms); the goal factor sizes how many requests may sit in
the consumer at once:

    limit = floor(latency_goal * goal_factor / service_interval)

```
  +-----------+      +---------------------+      +-------------------+
  | Producer  |----->| Dispatcher (FIFO)   |----->| Consumer (1 srv)  |
  | Poisson   |      | admits up to limit  |      | Exp service time  |
  +-----------+      +---------------------+      +-------------------+
```

A small limit keeps execution latency close to the service time but makes
requests wait in the dispatcher; a large limit moves the waiting into the
consumer. Total latency is what the client sees either way.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from admissionsim import PipelineConfig
from admissionsim.analysis import run_sweep

GOAL_FACTORS = [0.5, 1.0, 1.5, 2.0, 3.0, 5.0, 8.0]


def run(horizon_s: float, seed: int | None, quantum_us: float) -> pd.DataFrame:
    base = PipelineConfig(
        horizon_s=horizon_s,
        producer_kind="poisson",
        producer_rate=1800,
        dispatcher_kind="uniform",
        consumer_kind="poisson",
        consumer_rate=2000,
        latency_goal_us=1000,
        quantum_s=quantum_us * 1e-6,
        seed=seed,
    )
    return run_sweep(base, goal_factor=GOAL_FACTORS)


def print_summary(df: pd.DataFrame) -> None:
    print("\n" + "=" * 70)
    print("GOAL FACTOR TRADE-OFF")
    print("=" * 70)
    columns = [
        "goal_factor",
        "admission_limit",
        "peak_queued",
        "peak_in_flight",
        "total_mean",
        "total_p99",
        "execution_mean",
        "execution_p99",
    ]
    with pd.option_context("display.float_format", "{:.6f}".format):
        print(df[columns].to_string(index=False))
    print("=" * 70)


def visualize_results(df: pd.DataFrame, output_dir: Path) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    output_dir.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(9, 5))
    ax.plot(df["goal_factor"], df["total_p99"] * 1000, "o-", label="total p99")
    ax.plot(df["goal_factor"], df["execution_p99"] * 1000, "s-", label="execution p99")
    ax.plot(df["goal_factor"], df["total_mean"] * 1000, "o--", alpha=0.6, label="total mean")
    ax.set_xlabel("Goal factor")
    ax.set_ylabel("Latency (ms)")
    ax.set_title("Latency vs admission goal factor")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_dir / "goal_factor_tradeoff.png", dpi=150)
    plt.close(fig)
    print(f"Saved: {output_dir / 'goal_factor_tradeoff.png'}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Goal factor trade-off sweep")
    parser.add_argument("--horizon", type=float, default=5.0, help="Simulated seconds per run")
    parser.add_argument("--quantum-us", type=float, default=5.0, help="Clock step (us)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (-1 for random)")
    parser.add_argument("--output", type=str, default="output/goal_factor_tradeoff", help="Output dir")
    parser.add_argument("--no-viz", action="store_true", help="Skip visualization")
    args = parser.parse_args()

    seed = None if args.seed == -1 else args.seed
    df = run(args.horizon, seed, args.quantum_us)
    print_summary(df)

    if not args.no_viz:
        visualize_results(df, Path(args.output))
