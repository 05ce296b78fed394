"""Post-run analysis helpers."""

from admissionsim.analysis.sweep import run_sweep

__all__ = ["run_sweep"]
