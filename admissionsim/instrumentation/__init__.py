"""Latency statistics, progress samples and the final run report."""

from admissionsim.instrumentation.collector import LatencySeries, StatisticsCollector
from admissionsim.instrumentation.progress import ProgressRecorder, ProgressSample
from admissionsim.instrumentation.summary import LatencySummary, SimulationReport

__all__ = [
    "LatencySeries",
    "LatencySummary",
    "ProgressRecorder",
    "ProgressSample",
    "SimulationReport",
    "StatisticsCollector",
]
