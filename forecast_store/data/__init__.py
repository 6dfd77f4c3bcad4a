"""Payload types, resolution inference, forecast containers, and array shaping."""

from .structs import (
    ElementKind,
    LinearFunctionData,
    PiecewiseLinearData,
    PiecewiseStepData,
    QuadraticFunctionData,
    XYCoords,
    convert_data,
)
from .resolution import (
    format_period,
    get_initial_timestamp,
    get_initial_times,
    get_resolution,
    get_total_period,
    parse_period,
)
from .metadata import (
    DeterministicMetadata,
    ProbabilisticMetadata,
    ScenariosMetadata,
    SingleTimeSeriesMetadata,
    metadata_from_dict,
)
from .loaders import RawTimeSeries, TimeSeriesParsedInfo, read_time_series
from .series import (
    Deterministic,
    Forecast,
    NormalizationType,
    Probabilistic,
    Scenarios,
    SingleTimeSeries,
    TimeSeriesData,
    from_parsed_info,
)
from .shaping import restore_from_storage, shape_for_storage, transform_array_for_storage

__all__ = [
    "ElementKind",
    "LinearFunctionData",
    "PiecewiseLinearData",
    "PiecewiseStepData",
    "QuadraticFunctionData",
    "XYCoords",
    "convert_data",
    "format_period",
    "get_initial_timestamp",
    "get_initial_times",
    "get_resolution",
    "get_total_period",
    "parse_period",
    "DeterministicMetadata",
    "ProbabilisticMetadata",
    "ScenariosMetadata",
    "SingleTimeSeriesMetadata",
    "metadata_from_dict",
    "RawTimeSeries",
    "TimeSeriesParsedInfo",
    "read_time_series",
    "Deterministic",
    "Forecast",
    "NormalizationType",
    "Probabilistic",
    "Scenarios",
    "SingleTimeSeries",
    "TimeSeriesData",
    "from_parsed_info",
    "restore_from_storage",
    "shape_for_storage",
    "transform_array_for_storage",
]
