"""End-to-end runs of the admission-controlled pipeline.

Each scenario runs ten simulated seconds with a coarse clock step so the
suite stays fast. Plots and progress CSVs are written when a test asks for
test_output_dir.

Run:
    pytest tests/integration/test_pipeline_scenarios.py -v

Output:
    test_output/test_pipeline_scenarios/<test_name>/
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from admissionsim import Simulation, simulate

HORIZON_S = 10.0


def _save_progress_plot(sim: Simulation, test_output_dir: Path, title: str) -> None:
    df = sim.progress.to_dataframe()
    df.to_csv(test_output_dir / "progress.csv", index=False)

    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, (ax_queue, ax_rate) = plt.subplots(2, 1, figsize=(10, 6), sharex=True)
    ax_queue.plot(df["time_s"], df["queued"], marker="o", label="queued")
    ax_queue.plot(df["time_s"], df["peak_queued"], linestyle="--", label="peak queued")
    ax_queue.set_ylabel("Requests")
    ax_queue.legend()
    ax_queue.grid(True, alpha=0.3)

    ax_rate.plot(df["time_s"], df["generated_per_s"], label="generated/s")
    ax_rate.plot(df["time_s"], df["processed_per_s"], label="processed/s")
    ax_rate.set_xlabel("Simulated time (s)")
    ax_rate.set_ylabel("Rate")
    ax_rate.legend()
    ax_rate.grid(True, alpha=0.3)

    fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(test_output_dir / "progress.png", dpi=150)
    plt.close(fig)


class TestBalancedLoad:
    """Producer and consumer at the same uniform rate."""

    def test_no_sustained_queueing(self, make_config, test_output_dir):
        sim = Simulation(make_config(horizon_s=HORIZON_S))

        report = sim.run()
        _save_progress_plot(sim, test_output_dir, "Balanced 1000/1000 req/s, uniform")

        assert report.admission_limit == 3
        assert 1 <= report.peak_in_flight <= report.admission_limit
        assert report.peak_queued <= report.admission_limit
        # Admission waits at most one attempt period on top of service
        assert report.total.mean < 3 * sim.consumer.service_interval
        assert report.execution.mean < 2 * sim.consumer.service_interval
        assert report.throughput == pytest.approx(1000, rel=0.01)

    def test_queue_stays_flat(self, make_config):
        sim = Simulation(make_config(horizon_s=HORIZON_S))
        sim.run()

        queued = [sample.queued for sample in sim.progress.samples]
        assert max(queued) <= 3


class TestOverload:
    """Producer at twice the consumer's rate."""

    def test_backlog_grows_linearly(self, make_config, test_output_dir):
        sim = Simulation(
            make_config(horizon_s=HORIZON_S, producer_rate=2000, consumer_rate=1000, quantum_s=50e-6)
        )

        report = sim.run()
        _save_progress_plot(sim, test_output_dir, "Overload 2000/1000 req/s, uniform")

        # 2000 produced minus 1000 served per second
        assert report.peak_queued == pytest.approx(1000 * HORIZON_S, rel=0.05)
        assert report.throughput == pytest.approx(1000, rel=0.02)

        samples = sim.progress.samples[1:]
        times = np.array([s.time_s for s in samples])
        queued = np.array([s.queued for s in samples])
        slope, intercept = np.polyfit(times, queued, 1)
        assert slope == pytest.approx(1000, rel=0.05)
        assert np.max(np.abs(queued - (slope * times + intercept))) < 50

    def test_nothing_is_dropped(self, make_config):
        sim = Simulation(
            make_config(horizon_s=HORIZON_S, producer_rate=2000, consumer_rate=1000, quantum_s=50e-6)
        )

        report = sim.run()

        assert report.generated == sim.dispatcher.queued + sim.consumer.in_flight + report.processed
        assert report.peak_in_flight <= report.admission_limit

    def test_latency_grows_with_backlog(self, make_config):
        report = simulate(
            make_config(horizon_s=HORIZON_S, producer_rate=2000, consumer_rate=1000, quantum_s=50e-6)
        )

        # Requests completed late in the run waited seconds in the backlog
        assert report.total.max > 1.0
        assert report.execution.max < 0.01


class TestServiceVariance:
    """Equal rates, Poisson versus uniform service time."""

    def test_poisson_service_amplifies_tail(self, make_config):
        common = dict(horizon_s=HORIZON_S, goal_factor=10.0, quantum_s=50e-6, seed=2024)
        uniform = simulate(make_config(consumer_kind="uniform", **common))
        poisson = simulate(make_config(consumer_kind="poisson", **common))

        assert uniform.admission_limit == poisson.admission_limit == 20
        assert poisson.total.p99 > 2 * uniform.total.p99
        assert poisson.throughput == pytest.approx(1000, rel=0.10)
        assert uniform.throughput == pytest.approx(1000, rel=0.01)


class TestDeterminism:
    def test_uniform_runs_are_identical(self, make_config):
        config = make_config(horizon_s=2.0, seed=None)

        first = simulate(config)
        second = simulate(config)

        assert str(first) == str(second)
        assert first.format_compact() == second.format_compact()
        assert first.to_dict() == second.to_dict()

    def test_seeded_random_runs_are_identical(self, make_config):
        config = make_config(horizon_s=2.0, producer_kind="poisson", consumer_kind="expdelay", seed=99)

        assert str(simulate(config)) == str(simulate(config))
