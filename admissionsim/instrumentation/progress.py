"""Periodic progress samples taken while a simulation runs.

The driver records one ProgressSample per progress interval of simulated
time (one second by default). Samples are purely observational: recording
them never changes the simulation's outcome.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

import pandas as pd


@dataclass(frozen=True)
class ProgressSample:
    """Snapshot of the pipeline at one instant of simulated time.

    Rates are cumulative averages since time zero, in requests per second;
    they are 0.0 at time zero.
    """
    time_s: float
    queued: int
    peak_queued: int
    in_flight: int
    generated_per_s: float
    dispatched_per_s: float
    processed_per_s: float

    def format(self) -> str:
        return (
            f"{self.time_s:8.3f}s   {self.queued:10}/{self.peak_queued:<10}   "
            f"g {self.generated_per_s:<10.0f} d {self.dispatched_per_s:<10.0f} "
            f"c {self.processed_per_s:<10.0f}"
        )


class ProgressRecorder:
    """Stores progress samples in time order."""

    COLUMNS = [
        "time_s",
        "queued",
        "peak_queued",
        "in_flight",
        "generated_per_s",
        "dispatched_per_s",
        "processed_per_s",
    ]

    def __init__(self) -> None:
        self._samples: list[ProgressSample] = []

    @property
    def samples(self) -> list[ProgressSample]:
        return self._samples

    def record(
        self,
        time_s: float,
        queued: int,
        peak_queued: int,
        in_flight: int,
        generated: int,
        dispatched: int,
        processed: int,
    ) -> ProgressSample:
        """Append a sample built from cumulative stage counters."""
        if time_s > 0:
            rates = (generated / time_s, dispatched / time_s, processed / time_s)
        else:
            rates = (0.0, 0.0, 0.0)
        sample = ProgressSample(time_s, queued, peak_queued, in_flight, *rates)
        self._samples.append(sample)
        return sample

    def to_dataframe(self) -> pd.DataFrame:
        """All samples as a DataFrame, one row per sample."""
        return pd.DataFrame([asdict(s) for s in self._samples], columns=self.COLUMNS)

    def __len__(self) -> int:
        return len(self._samples)
