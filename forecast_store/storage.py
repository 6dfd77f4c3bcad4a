"""Persistence of shaped time series arrays."""

import abc
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import pandas as pd

from forecast_store.data.metadata import metadata_from_dict
from forecast_store.data.series import SingleTimeSeries, TimeSeriesData
from forecast_store.data.shaping import restore_from_storage, shape_for_storage
from forecast_store.utils.error_handling import ArgumentError
from forecast_store.utils.serialization import load_array, load_json, save_array, save_json

logger = logging.getLogger(__name__)

DATA_FILE = "data.npy"
METADATA_FILE = "metadata.json"


def _subset(series: TimeSeriesData, start_time: Optional[Any], length: Optional[int]) -> TimeSeriesData:
    """
    Derive a copy holding part of the payload. For forecasts `length` counts
    windows; for a single series it counts timesteps.
    """
    if start_time is None and length is None:
        return series

    start = series.initial_timestamp if start_time is None else pd.Timestamp(start_time)
    if isinstance(series, SingleTimeSeries):
        values = series.to_series()
        if start not in values.index:
            raise ArgumentError(f"{start} is not a timestamp of {series.name}")
        values = values.loc[start:]
        if length is not None:
            values = values.iloc[:length]
        return series.with_data(values)

    if start not in series.data:
        raise ArgumentError(f"{start} is not a window start time of {series.name}")
    keys = [k for k in series.data if k >= start]
    if length is not None:
        keys = keys[:length]
    return series.with_data({k: series.data[k] for k in keys})


class TimeSeriesStorageBase(abc.ABC):
    """Base class for time series storage."""

    @abc.abstractmethod
    def add_time_series(self, series: TimeSeriesData) -> Any:
        """Store a series' array and return its metadata."""

    @abc.abstractmethod
    def get_time_series(
        self,
        metadata: Any,
        start_time: Optional[Any] = None,
        length: Optional[int] = None,
    ) -> TimeSeriesData:
        """Return the series described by metadata, optionally a subset of it."""

    @abc.abstractmethod
    def remove_time_series(self, metadata: Any) -> None:
        """Remove the stored array."""


class InMemoryTimeSeriesStorage(TimeSeriesStorageBase):
    """Keeps shaped arrays in a dict keyed by payload uuid."""

    def __init__(self):
        self._arrays: Dict[uuid.UUID, np.ndarray] = {}

    def __len__(self) -> int:
        return len(self._arrays)

    def __contains__(self, time_series_uuid: uuid.UUID) -> bool:
        return time_series_uuid in self._arrays

    def add_time_series(self, series: TimeSeriesData) -> Any:
        if series.uuid in self._arrays:
            raise ArgumentError(f"time series {series.uuid} is already stored")
        array = shape_for_storage(series)
        array.setflags(write=False)
        self._arrays[series.uuid] = array
        logger.debug(f"Stored {series.name} ({series.uuid}) with shape {array.shape}")
        return series.get_metadata()

    def get_time_series(
        self,
        metadata: Any,
        start_time: Optional[Any] = None,
        length: Optional[int] = None,
    ) -> TimeSeriesData:
        if metadata.time_series_uuid not in self._arrays:
            raise ArgumentError(f"time series {metadata.time_series_uuid} is not stored")
        series = restore_from_storage(self._arrays[metadata.time_series_uuid], metadata)
        return _subset(series, start_time, length)

    def remove_time_series(self, metadata: Any) -> None:
        if metadata.time_series_uuid not in self._arrays:
            raise ArgumentError(f"time series {metadata.time_series_uuid} is not stored")
        del self._arrays[metadata.time_series_uuid]
        logger.debug(f"Removed time series {metadata.time_series_uuid}")


def save_forecast(series: TimeSeriesData, path: Union[str, Path]) -> Path:
    """
    Save a series to a directory.

    Structure:
    - path/
        - data.npy (shaped array)
        - metadata.json
    """
    save_dir = Path(path)
    save_dir.mkdir(parents=True, exist_ok=True)

    save_array(shape_for_storage(series), save_dir / DATA_FILE)
    save_json(series.get_metadata().to_dict(), save_dir / METADATA_FILE)

    logger.info(f"Saved {series.series_type} {series.name} to {save_dir}")
    return save_dir


def load_forecast(path: Union[str, Path]) -> TimeSeriesData:
    """Load a series saved by save_forecast."""
    load_dir = Path(path)
    if not load_dir.exists():
        raise FileNotFoundError(f"Time series directory not found: {path}")

    metadata = metadata_from_dict(load_json(load_dir / METADATA_FILE))
    array = load_array(load_dir / DATA_FILE)
    return restore_from_storage(array, metadata)
