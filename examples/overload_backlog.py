"""Overload: a producer twice as fast as the consumer.

Admission control bounds what the consumer holds, not what waits for it.
With the producer at 2x the consumer rate the dispatcher's queue grows by
(producer_rate - consumer_rate) requests every second and nothing is
dropped, so total latency grows with the run while execution latency stays
flat.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from admissionsim import PipelineConfig, Simulation


def run(horizon_s: float, quantum_us: float) -> Simulation:
    config = PipelineConfig(
        horizon_s=horizon_s,
        producer_kind="uniform",
        producer_rate=2000,
        dispatcher_kind="uniform",
        consumer_kind="uniform",
        consumer_rate=1000,
        latency_goal_us=2000,
        quantum_s=quantum_us * 1e-6,
        progress_interval_s=0.5,
    )
    simulation = Simulation(config, on_progress=lambda sample: print(sample.format()))
    simulation.run()
    return simulation


def visualize_results(simulation: Simulation, output_dir: Path) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    output_dir.mkdir(parents=True, exist_ok=True)
    df = simulation.progress.to_dataframe()
    config = simulation.config

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)
    ax1.plot(df["time_s"], df["queued"], "b-", label="queued")
    ax1.plot(
        df["time_s"],
        (config.producer_rate - config.consumer_rate) * df["time_s"],
        "r--",
        label="(producer - consumer) * t",
    )
    ax1.set_ylabel("Pending requests")
    ax1.set_title("Dispatcher backlog under 2x overload")
    ax1.legend(loc="upper left")
    ax1.grid(True, alpha=0.3)

    ax2.plot(df["time_s"], df["processed_per_s"], "g-", label="processed / s")
    ax2.axhline(y=config.consumer_rate, color="r", linestyle="--", label="consumer rate")
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("Requests / second")
    ax2.legend(loc="lower right")
    ax2.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_dir / "overload_backlog.png", dpi=150)
    plt.close(fig)
    print(f"Saved: {output_dir / 'overload_backlog.png'}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Backlog growth under overload")
    parser.add_argument("--horizon", type=float, default=10.0, help="Simulated seconds")
    parser.add_argument("--quantum-us", type=float, default=10.0, help="Clock step (us)")
    parser.add_argument("--output", type=str, default="output/overload_backlog", help="Output dir")
    parser.add_argument("--no-viz", action="store_true", help="Skip visualization")
    args = parser.parse_args()

    simulation = run(args.horizon, args.quantum_us)
    print()
    print(simulation.report)

    if not args.no_viz:
        visualize_results(simulation, Path(args.output))
