"""Tests for the analysis package: parameter sweeps."""

import numpy as np
import pandas as pd
import pytest

from admissionsim import ConfigurationError
from admissionsim.analysis import run_sweep


class TestRunSweep:
    def test_one_row_per_combination(self, make_config):
        df = run_sweep(make_config(horizon_s=0.2), producer_rate=[500, 1000], goal_factor=[1.5, 3.0])

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 4
        assert sorted(zip(df["producer_rate"], df["goal_factor"])) == [
            (500, 1.5),
            (500, 3.0),
            (1000, 1.5),
            (1000, 3.0),
        ]

    def test_columns_include_config_and_report(self, make_config):
        df = run_sweep(make_config(horizon_s=0.2), consumer_kind=["uniform", "poisson"])

        for column in ("consumer_kind", "latency_goal_us", "peak_queued", "total_p99", "execution_mean"):
            assert column in df.columns
        assert df["consumer_kind"].tolist() == ["uniform", "poisson"]

    def test_limit_follows_goal_factor(self, make_config):
        df = run_sweep(make_config(horizon_s=0.1), goal_factor=[1.5, 3.0, 10.0])

        assert df["admission_limit"].tolist() == [3, 6, 20]

    def test_numpy_grid(self, make_config):
        """Values from numpy ranges are valid sweep points."""
        df = run_sweep(
            make_config(horizon_s=0.1),
            producer_rate=np.arange(500, 1001, 500),
            goal_factor=np.linspace(1.5, 3.0, 2),
        )

        assert len(df) == 4
        assert sorted(df["producer_rate"].unique().tolist()) == [500, 1000]
        assert sorted(df["admission_limit"].unique().tolist()) == [3, 6]
        assert (df["processed"] > 0).all()

    def test_empty_grid_runs_base(self, make_config):
        df = run_sweep(make_config(horizon_s=0.1))

        assert len(df) == 1
        assert df.loc[0, "processed"] > 0

    def test_unknown_field(self, make_config):
        with pytest.raises(ValueError, match="Unknown PipelineConfig fields: producer_speed"):
            run_sweep(make_config(), producer_speed=[1])

    def test_bad_combination_fails_before_running(self, make_config):
        """A zero admission limit anywhere in the grid aborts the whole sweep."""
        with pytest.raises(ConfigurationError, match="consumer rate too low"):
            run_sweep(make_config(), latency_goal_us=[2000, 500])
