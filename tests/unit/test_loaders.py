"""Unit tests for the CSV readers."""

import pandas as pd
import pytest

from forecast_store.data.loaders import read_time_series, series_tag
from forecast_store.data.series import Deterministic, SingleTimeSeries
from forecast_store.utils.error_handling import (
    ArgumentError,
    DataFormatError,
    FeatureNotImplementedError,
)

from conftest import T0


class TestReadTimeSeries:
    def test_deterministic_rows_are_windows(self, deterministic_csv):
        raw = read_time_series(Deterministic, deterministic_csv, "gen1")

        assert raw.initial_time == T0
        assert raw.length == 3
        assert list(raw.data) == list(pd.date_range(T0, periods=3, freq="h"))
        assert raw.data[T0] == [10.0, 11.0, 12.0]

    def test_single_selects_component_column(self, single_csv):
        raw = read_time_series("SingleTimeSeries", single_csv, "load1")
        assert raw.length == 6
        assert list(raw.data.values()) == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]

    def test_single_unknown_component(self, single_csv):
        with pytest.raises(ArgumentError, match="no column for component"):
            read_time_series(SingleTimeSeries, single_csv, "load3")

    def test_single_only_column_is_used(self, tmp_path):
        path = tmp_path / "one.csv"
        pd.DataFrame({
            "DateTime": pd.date_range(T0, periods=2, freq="h"),
            "value": [1.0, 2.0],
        }).to_csv(path, index=False)

        raw = read_time_series(SingleTimeSeries, path, "anything")
        assert list(raw.data.values()) == [1.0, 2.0]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_time_series(Deterministic, tmp_path / "missing.csv", "gen1")

    def test_non_numeric_values(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({"DateTime": [T0], "value": ["high"]}).to_csv(path, index=False)
        with pytest.raises(DataFormatError, match="non-numeric"):
            read_time_series(Deterministic, path, "gen1")

    def test_bad_timestamps(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({"DateTime": ["not a date"], "value": [1.0]}).to_csv(path, index=False)
        with pytest.raises(DataFormatError, match="timestamps"):
            read_time_series(Deterministic, path, "gen1")

    def test_single_column_file(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({"DateTime": [T0]}).to_csv(path, index=False)
        with pytest.raises(DataFormatError):
            read_time_series(Deterministic, path, "gen1")

    def test_unsupported_kind(self, deterministic_csv):
        with pytest.raises(FeatureNotImplementedError):
            read_time_series("Scenarios", deterministic_csv, "gen1")


def test_series_tag():
    assert series_tag(Deterministic) == "Deterministic"
    assert series_tag("Probabilistic") == "Probabilistic"
