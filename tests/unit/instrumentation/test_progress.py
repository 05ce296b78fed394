"""Tests for ProgressRecorder."""

import pandas as pd
import pytest

from admissionsim import ProgressRecorder, ProgressSample


class TestProgressRecorder:
    def test_record_computes_cumulative_rates(self):
        recorder = ProgressRecorder()

        sample = recorder.record(
            time_s=2.0,
            queued=10,
            peak_queued=12,
            in_flight=3,
            generated=2_000,
            dispatched=1_990,
            processed=1_987,
        )

        assert sample == ProgressSample(2.0, 10, 12, 3, 1_000.0, 995.0, 993.5)
        assert recorder.samples == [sample]
        assert len(recorder) == 1

    def test_rates_are_zero_at_time_zero(self):
        recorder = ProgressRecorder()

        sample = recorder.record(0.0, 1, 1, 0, 1, 0, 0)

        assert sample.generated_per_s == 0.0
        assert sample.dispatched_per_s == 0.0
        assert sample.processed_per_s == 0.0

    def test_to_dataframe(self):
        recorder = ProgressRecorder()
        recorder.record(0.0, 0, 0, 0, 0, 0, 0)
        recorder.record(1.0, 5, 7, 2, 1_000, 995, 993)

        df = recorder.to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ProgressRecorder.COLUMNS
        assert len(df) == 2
        assert df["queued"].tolist() == [0, 5]
        assert df.loc[1, "processed_per_s"] == pytest.approx(993.0)

    def test_empty_dataframe_has_columns(self):
        df = ProgressRecorder().to_dataframe()

        assert df.empty
        assert list(df.columns) == ProgressRecorder.COLUMNS

    def test_format(self):
        sample = ProgressSample(1.0, 5, 7, 2, 1_000.0, 995.0, 993.0)

        line = sample.format()
        assert "5/7" in line
        assert "g 1000" in line
        assert "c 993" in line
