"""Time-indexed forecast store: windowed series, inference, and array shaping."""

from forecast_store.components import Component, Components, get_time_series_array
from forecast_store.data import (
    Deterministic,
    ElementKind,
    NormalizationType,
    Probabilistic,
    Scenarios,
    SingleTimeSeries,
    get_initial_times,
    get_resolution,
    shape_for_storage,
    transform_array_for_storage,
)
from forecast_store.storage import InMemoryTimeSeriesStorage, load_forecast, save_forecast
from forecast_store.utils.config_manager import ConfigManager
from forecast_store.utils.error_handling import (
    ArgumentError,
    DataFormatError,
    FeatureNotImplementedError,
)

__version__ = "0.1.0"

__all__ = [
    "Component",
    "Components",
    "get_time_series_array",
    "Deterministic",
    "ElementKind",
    "NormalizationType",
    "Probabilistic",
    "Scenarios",
    "SingleTimeSeries",
    "get_initial_times",
    "get_resolution",
    "shape_for_storage",
    "transform_array_for_storage",
    "InMemoryTimeSeriesStorage",
    "load_forecast",
    "save_forecast",
    "ConfigManager",
    "ArgumentError",
    "DataFormatError",
    "FeatureNotImplementedError",
]
