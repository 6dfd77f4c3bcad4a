"""Unit tests for resolution inference and window-start algebra."""

from datetime import timedelta

import pandas as pd
import pytest

from forecast_store.data.resolution import (
    ZERO_PERIOD,
    check_uniform_interval,
    format_period,
    get_initial_timestamp,
    get_initial_times,
    get_resolution,
    get_total_period,
    parse_period,
    resolution_components,
)
from forecast_store.utils.error_handling import ArgumentError, DataFormatError


T0 = pd.Timestamp("2024-01-01")


class TestGetResolution:
    def test_hourly(self):
        index = pd.date_range(T0, periods=5, freq="h")
        assert get_resolution(index) == pd.Timedelta(hours=1)

    def test_largest_dividing_unit(self):
        index = pd.date_range(T0, periods=3, freq="120min")
        resolution = get_resolution(index)
        assert resolution == pd.Timedelta(hours=2)
        assert resolution_components(resolution) == (2, "hours")

    def test_daily(self):
        index = pd.date_range(T0, periods=3, freq="D")
        assert resolution_components(get_resolution(index)) == (1, "days")

    def test_ninety_minutes_stays_in_minutes(self):
        timestamps = [T0, T0 + pd.Timedelta(minutes=90), T0 + pd.Timedelta(minutes=180)]
        assert resolution_components(get_resolution(timestamps)) == (90, "minutes")

    def test_non_uniform(self):
        timestamps = [T0, T0 + pd.Timedelta(hours=1), T0 + pd.Timedelta(hours=3)]
        with pytest.raises(DataFormatError, match="non-uniform resolution"):
            get_resolution(timestamps)

    def test_sub_second(self):
        timestamps = [T0, T0 + pd.Timedelta(milliseconds=500)]
        with pytest.raises(DataFormatError, match="cannot understand the resolution"):
            get_resolution(timestamps)

    def test_too_few_timestamps(self):
        with pytest.raises(ArgumentError):
            get_resolution([T0])

    def test_decreasing(self):
        with pytest.raises(DataFormatError, match="strictly increasing"):
            get_resolution([T0, T0 - pd.Timedelta(hours=1)])


class TestPeriods:
    @pytest.mark.parametrize("period,expected", [
        (pd.Timedelta(hours=1), "1 hour"),
        (pd.Timedelta(minutes=15), "15 minutes"),
        (pd.Timedelta(days=2), "2 days"),
        (pd.Timedelta(seconds=30), "30 seconds"),
        (ZERO_PERIOD, "0 seconds"),
    ])
    def test_format(self, period, expected):
        assert format_period(period) == expected

    @pytest.mark.parametrize("value,expected", [
        ("1 hour", pd.Timedelta(hours=1)),
        ("15 minutes", pd.Timedelta(minutes=15)),
        ("15min", pd.Timedelta(minutes=15)),
        ("1h", pd.Timedelta(hours=1)),
        (3600, pd.Timedelta(hours=1)),
        (timedelta(minutes=5), pd.Timedelta(minutes=5)),
    ])
    def test_parse(self, value, expected):
        assert parse_period(value) == expected

    def test_parse_reverses_format(self):
        for period in (pd.Timedelta(hours=3), pd.Timedelta(days=1), pd.Timedelta(minutes=45)):
            assert parse_period(format_period(period)) == period

    @pytest.mark.parametrize("value", ["not a period", True, None])
    def test_parse_invalid(self, value):
        with pytest.raises(ArgumentError):
            parse_period(value)


class TestInitialTimes:
    def test_hourly_windows(self):
        assert get_initial_times(T0, 3, pd.Timedelta(hours=1)) == [
            T0,
            T0 + pd.Timedelta(hours=1),
            T0 + pd.Timedelta(hours=2),
        ]

    def test_zero_interval_yields_single_start(self):
        assert get_initial_times(T0, 5, ZERO_PERIOD) == [T0]

    def test_zero_count(self):
        assert get_initial_times(T0, 0, pd.Timedelta(hours=1)) == []

    def test_negative_count(self):
        with pytest.raises(ArgumentError):
            get_initial_times(T0, -1, pd.Timedelta(hours=1))

    def test_initial_timestamp(self):
        assert get_initial_timestamp(["2024-01-01", "2024-01-02"]) == T0
        with pytest.raises(ArgumentError):
            get_initial_timestamp([])


class TestTotalPeriod:
    def test_multiple_windows(self):
        # Three hourly windows of four steps: 3 intervals plus 3 resolutions
        period = get_total_period(T0, 3, pd.Timedelta(hours=1), 4, pd.Timedelta(hours=1))
        assert period == pd.Timedelta(hours=6)

    def test_single_window(self):
        period = get_total_period(T0, 1, ZERO_PERIOD, 24, pd.Timedelta(hours=1))
        assert period == pd.Timedelta(hours=23)

    def test_interval_and_resolution_differ(self):
        period = get_total_period(T0, 2, pd.Timedelta(days=1), 48, pd.Timedelta(minutes=30))
        assert period == pd.Timedelta(days=2) + pd.Timedelta(minutes=30) * 47

    def test_no_windows(self):
        period = get_total_period(T0, 0, pd.Timedelta(hours=1), 4, pd.Timedelta(hours=1))
        assert period == pd.Timedelta(hours=3)

    def test_invalid_arguments(self):
        with pytest.raises(ArgumentError):
            get_total_period(T0, -1, pd.Timedelta(hours=1), 4, pd.Timedelta(hours=1))
        with pytest.raises(ArgumentError):
            get_total_period(T0, 1, pd.Timedelta(hours=1), 0, pd.Timedelta(hours=1))


class TestCheckUniformInterval:
    def test_uniform(self):
        starts = pd.date_range(T0, periods=4, freq="6h")
        assert check_uniform_interval(starts) == pd.Timedelta(hours=6)

    def test_single_window(self):
        assert check_uniform_interval([T0]) == ZERO_PERIOD

    def test_non_uniform(self):
        with pytest.raises(DataFormatError, match="non-uniform interval"):
            check_uniform_interval([T0, T0 + pd.Timedelta(hours=1), T0 + pd.Timedelta(hours=5)])
