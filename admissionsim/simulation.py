"""Fixed-step driver for the producer -> dispatcher -> consumer pipeline.

The driver is the only component that knows the global clock. Each step
ticks the stages in a fixed order:

1. consumer.tick(now)   - drain completions first
2. producer.tick(now)   - emit newly due requests
3. dispatcher.tick(now) - admit requests if an attempt is due

so a request can never be admitted and completed within the same instant.
After each step the driver updates the peak queued / in-flight depths and,
every progress interval, records a ProgressSample. The clock is derived
from an integer step counter (now = step * quantum) so long runs do not
accumulate floating-point drift.

Example:
    config = PipelineConfig(
        horizon_s=10.0,
        producer_kind="uniform", producer_rate=1000,
        dispatcher_kind="uniform",
        consumer_kind="poisson", consumer_rate=1000,
        latency_goal_us=4000,
        seed=42,
    )
    report = Simulation(config).run()
    print(report)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import Enum, auto

import numpy as np

from admissionsim.config import PipelineConfig
from admissionsim.entities import Consumer, Dispatcher, Producer
from admissionsim.instrumentation import (
    ProgressRecorder,
    ProgressSample,
    SimulationReport,
    StatisticsCollector,
)
from admissionsim.math import StochasticProcess

logger = logging.getLogger(__name__)

# Warn when the quantum is coarser than this share of the fastest interval
_COARSE_QUANTUM_RATIO = 0.1


class SimulationState(Enum):
    RUNNING = auto()
    DONE = auto()


class Simulation:
    """One run of the admission-control pipeline.

    Components are built in the constructor, so every configuration error
    (unknown process kind, zero admission limit) surfaces before any
    simulated time elapses.

    Args:
        config: Run parameters.
        on_progress: Optional callback invoked with each ProgressSample.
    """

    def __init__(
        self,
        config: PipelineConfig,
        on_progress: Callable[[ProgressSample], None] | None = None,
    ):
        self.config = config
        self._on_progress = on_progress

        producer_seed, dispatcher_seed, consumer_seed = np.random.SeedSequence(config.seed).spawn(3)

        self.collector = StatisticsCollector()
        self.consumer = Consumer(
            StochasticProcess(
                config.consumer_kind,
                config.consumer_interval_s,
                cap_factor=config.cap_factor,
                seed=consumer_seed,
            ),
            self.collector,
        )
        self.dispatcher = Dispatcher(
            StochasticProcess(
                config.dispatcher_kind,
                config.latency_goal_s,
                cap_factor=config.cap_factor,
                seed=dispatcher_seed,
            ),
            self.consumer,
            latency_goal=config.latency_goal_s,
            goal_factor=config.goal_factor,
        )
        self.producer = Producer(
            StochasticProcess(
                config.producer_kind,
                config.producer_interval_s,
                cap_factor=config.cap_factor,
                seed=producer_seed,
            ),
            self.dispatcher,
        )
        self.progress = ProgressRecorder()

        self._state = SimulationState.RUNNING
        self._now = 0.0
        self._peak_queued = 0
        self._peak_in_flight = 0
        self._report: SimulationReport | None = None

        fastest = min(config.producer_interval_s, config.consumer_interval_s, config.latency_goal_s)
        if config.quantum_s > fastest * _COARSE_QUANTUM_RATIO:
            logger.warning(
                "Clock quantum %.3gs is coarse relative to the fastest interval %.3gs; "
                "latency statistics will be quantised",
                config.quantum_s,
                fastest,
            )

        logger.debug(
            "Simulation configured: %s, admission limit %d",
            config.to_dict(),
            self.dispatcher.limit,
        )

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def now(self) -> float:
        """Current simulated time in seconds."""
        return self._now

    @property
    def peak_queued(self) -> int:
        return self._peak_queued

    @property
    def peak_in_flight(self) -> int:
        return self._peak_in_flight

    @property
    def report(self) -> SimulationReport | None:
        """Report of the finished run, or None while running."""
        return self._report

    def run(self) -> SimulationReport:
        """Advance the clock to the horizon and return the final report.

        Raises:
            RuntimeError: If the simulation has already run.
        """
        if self._state is SimulationState.DONE:
            raise RuntimeError("Simulation has already completed; build a new one to run again")

        config = self.config
        quantum = config.quantum_s
        horizon = config.horizon_s
        consumer, producer, dispatcher = self.consumer, self.producer, self.dispatcher

        logger.info(
            "Simulation started: horizon=%gs quantum=%gs producer=%s@%g dispatcher=%s consumer=%s@%g limit=%d",
            horizon,
            quantum,
            config.producer_kind.value,
            config.producer_rate,
            config.dispatcher_kind.value,
            config.consumer_kind.value,
            config.consumer_rate,
            dispatcher.limit,
        )
        wall_start = time.perf_counter()

        step = 0
        next_progress_step = 0
        progress_every = max(1, round(config.progress_interval_s / quantum))
        now = 0.0
        peak_queued = self._peak_queued
        peak_in_flight = self._peak_in_flight

        while now <= horizon:
            consumer.tick(now)
            producer.tick(now)
            dispatcher.tick(now)

            queued = dispatcher.queued
            if queued > peak_queued:
                peak_queued = queued
            in_flight = consumer.in_flight
            if in_flight > peak_in_flight:
                peak_in_flight = in_flight

            if step == next_progress_step:
                self._now, self._peak_queued, self._peak_in_flight = now, peak_queued, peak_in_flight
                self._record_progress(now)
                next_progress_step += progress_every

            step += 1
            now = step * quantum

        self._now = now
        self._peak_queued = peak_queued
        self._peak_in_flight = peak_in_flight
        self._state = SimulationState.DONE
        self._report = self._build_report()

        logger.info(
            "Simulation completed: %d generated, %d dispatched, %d processed in %.3fs wall",
            producer.generated,
            dispatcher.dispatched,
            consumer.processed,
            time.perf_counter() - wall_start,
        )
        return self._report

    def _record_progress(self, now: float) -> None:
        sample = self.progress.record(
            time_s=now,
            queued=self.dispatcher.queued,
            peak_queued=self._peak_queued,
            in_flight=self.consumer.in_flight,
            generated=self.producer.generated,
            dispatched=self.dispatcher.dispatched,
            processed=self.consumer.processed,
        )
        logger.debug("Progress: %s", sample.format())
        if self._on_progress is not None:
            self._on_progress(sample)

    def _build_report(self) -> SimulationReport:
        return SimulationReport(
            horizon_s=self.config.horizon_s,
            producer_rate=self.config.producer_rate,
            consumer_rate=self.config.consumer_rate,
            admission_limit=self.dispatcher.limit,
            peak_queued=self._peak_queued,
            peak_in_flight=self._peak_in_flight,
            generated=self.producer.generated,
            dispatched=self.dispatcher.dispatched,
            processed=self.consumer.processed,
            total=self.collector.total.summary(),
            execution=self.collector.execution.summary(),
        )


def simulate(
    config: PipelineConfig,
    on_progress: Callable[[ProgressSample], None] | None = None,
) -> SimulationReport:
    """Build and run a simulation in one call."""
    return Simulation(config, on_progress=on_progress).run()
