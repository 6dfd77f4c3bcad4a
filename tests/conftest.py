"""Pytest configuration and shared fixtures."""

import pytest
import pandas as pd
import numpy as np

from forecast_store.components import Component


T0 = pd.Timestamp("2024-01-01 00:00:00")


def double_rating(component):
    """Module-level multiplier so metadata can serialize its import path."""
    return component.rating * 2.0


class Generator(Component):
    def __init__(self, name, rating=1.0):
        super().__init__(name)
        self.rating = rating


class ThermalGenerator(Generator):
    pass


class Load(Component):
    pass


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def constant_windows():
    """Three hourly windows of four constant values each."""
    return {
        T0: [1.0, 2.0, 3.0, 4.0],
        T0 + pd.Timedelta(hours=1): [5.0, 6.0, 7.0, 8.0],
        T0 + pd.Timedelta(hours=2): [9.0, 10.0, 11.0, 12.0],
    }


@pytest.fixture
def polynomial_windows():
    """Two windows of quadratic coefficient triples."""
    return {
        T0: [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0)],
        T0 + pd.Timedelta(hours=1): [(7.0, 8.0, 9.0), (10.0, 11.0, 12.0)],
    }


@pytest.fixture
def curve_windows():
    """Two windows of three-point piecewise linear curves."""
    curve = ((0.0, 0.0), (50.0, 10.0), (100.0, 30.0))
    return {
        T0: [curve, curve],
        T0 + pd.Timedelta(hours=1): [curve, curve],
    }


@pytest.fixture
def hourly_series():
    """A day of hourly values."""
    index = pd.date_range(T0, periods=24, freq="h")
    return pd.Series(np.arange(24, dtype=np.float64), index=index)


@pytest.fixture
def generator():
    return Generator("gen1", rating=5.0)


@pytest.fixture
def deterministic_csv(tmp_path):
    """Deterministic forecast file: window start followed by the window values."""
    path = tmp_path / "gen1_forecast.csv"
    df = pd.DataFrame({
        "DateTime": pd.date_range(T0, periods=3, freq="h"),
        "1": [10.0, 20.0, 30.0],
        "2": [11.0, 21.0, 31.0],
        "3": [12.0, 22.0, 32.0],
    })
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def single_csv(tmp_path):
    """Single time series file with one column per component."""
    path = tmp_path / "load.csv"
    df = pd.DataFrame({
        "DateTime": pd.date_range(T0, periods=6, freq="15min"),
        "load1": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
        "load2": [6.0, 5.0, 4.0, 3.0, 2.0, 1.0],
    })
    df.to_csv(path, index=False)
    return path
