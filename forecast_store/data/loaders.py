"""Readers that turn delimited files into raw timestamp -> values mappings."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union
import logging

import numpy as np
import pandas as pd

from forecast_store.utils.error_handling import (
    ArgumentError,
    DataFormatError,
    FeatureNotImplementedError,
)

logger = logging.getLogger(__name__)


@dataclass
class RawTimeSeries:
    """
    Time series values as read from a file, before typing and normalization.

    Attributes:
        initial_time: First timestamp in the file
        data: Window start -> window values for forecasts, or
            timestamp -> value for a single contiguous series
        length: Window length, or number of timesteps for a single series
    """
    initial_time: pd.Timestamp
    data: Dict[pd.Timestamp, Any]
    length: int


@dataclass
class TimeSeriesParsedInfo:
    """
    Description of one time series to build from a file, as listed in a
    descriptor configuration.

    Attributes:
        name: Name of the time series
        series_type: Tag of the series class, e.g. 'Deterministic'
        component_name: Owning component, used to select the data column
        data_file: Path to the CSV file
        resolution: Timestep spacing; inferred from the file when None
        normalization_factor: A number or 'max'
        scaling_factor_multiplier: Import path of the read-time multiplier
        features: Annotations copied to the series
    """
    name: str
    series_type: str
    component_name: str
    data_file: Path
    resolution: Optional[pd.Timedelta] = None
    normalization_factor: Union[float, str] = 1.0
    scaling_factor_multiplier: Optional[str] = None
    features: Dict[str, Any] = field(default_factory=dict)


def _read_table(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Time series file not found: {path}")

    df = pd.read_csv(path)
    if df.shape[1] < 2:
        raise DataFormatError(
            f"{path} must have a timestamp column followed by at least one value column"
        )

    time_col = df.columns[0]
    try:
        df[time_col] = pd.to_datetime(df[time_col])
    except (TypeError, ValueError) as e:
        raise DataFormatError(f"first column of {path} must contain timestamps: {e}") from e

    non_numeric = [
        col for col in df.columns[1:] if not pd.api.types.is_numeric_dtype(df[col])
    ]
    if non_numeric:
        raise DataFormatError(f"{path} has non-numeric value columns: {non_numeric}")

    return df.set_index(time_col)


def _read_deterministic(path: Path, component_name: str) -> RawTimeSeries:
    """
    Each row is one window: the window start time followed by the values of
    every timestep in the window.
    """
    df = _read_table(path)
    values = df.to_numpy(dtype=np.float64)
    data = {pd.Timestamp(ts): row.tolist() for ts, row in zip(df.index, values)}
    if len(data) != len(df):
        raise DataFormatError(f"{path} has duplicate window start times")

    logger.info(f"Read {len(data)} forecast windows for {component_name} from {path}")
    return RawTimeSeries(initial_time=pd.Timestamp(df.index[0]), data=data, length=df.shape[1])


def _read_single(path: Path, component_name: str) -> RawTimeSeries:
    """One row per timestep and one value column per component."""
    df = _read_table(path)
    if component_name in df.columns:
        column = df[component_name]
    elif df.shape[1] == 1:
        column = df.iloc[:, 0]
    else:
        raise ArgumentError(f"{path} has no column for component {component_name}")

    data = {pd.Timestamp(ts): float(v) for ts, v in column.items()}
    logger.info(f"Read {len(data)} timesteps for {component_name} from {path}")
    return RawTimeSeries(initial_time=pd.Timestamp(df.index[0]), data=data, length=len(data))


_READERS: Dict[str, Callable[[Path, str], RawTimeSeries]] = {
    "Deterministic": _read_deterministic,
    "SingleTimeSeries": _read_single,
}


def series_tag(kind: Any) -> str:
    """Stable tag of a series class, class name, or tag string."""
    if isinstance(kind, str):
        return kind
    return getattr(kind, "series_type", getattr(kind, "__name__", repr(kind)))


def read_time_series(
    kind: Any,
    filename: Union[str, Path],
    component_name: str,
) -> RawTimeSeries:
    """
    Read a time series file for the given series kind.

    Args:
        kind: Series class or its tag ('Deterministic', 'SingleTimeSeries')
        filename: Path to the CSV file
        component_name: Name of the owning component

    Returns:
        RawTimeSeries with values in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        DataFormatError: If the file layout is not understood
        FeatureNotImplementedError: If no reader exists for the kind
    """
    tag = series_tag(kind)
    reader = _READERS.get(tag)
    if reader is None:
        raise FeatureNotImplementedError("read_time_series", tag)
    return reader(Path(filename), component_name)
