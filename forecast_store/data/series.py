"""
Forecast and time series containers.

A series owns a read-only, ascending mapping of window start time to window
values (the windowed store). Deterministic, Probabilistic and Scenarios hold
one entry per forecast issue time; SingleTimeSeries holds exactly one.
Instances are never mutated after construction: use with_data to derive a
copy with a new payload.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from forecast_store.data.loaders import RawTimeSeries, TimeSeriesParsedInfo, read_time_series
from forecast_store.data.metadata import (
    DeterministicMetadata,
    ProbabilisticMetadata,
    ScenariosMetadata,
    SingleTimeSeriesMetadata,
    multiplier_from_path,
)
from forecast_store.data.resolution import (
    ZERO_PERIOD,
    PeriodLike,
    check_uniform_interval,
    format_period,
    get_initial_times,
    get_resolution,
    get_total_period,
    parse_period,
    resolution_components,
)
from forecast_store.data.structs import (
    ElementKind,
    WindowedData,
    convert_data,
    convert_matrix_data,
    freeze_array,
)
from forecast_store.utils.error_handling import (
    ArgumentError,
    ConflictingInputsError,
    DataFormatError,
    FeatureNotImplementedError,
    InvalidRange,
)

logger = logging.getLogger(__name__)


class NormalizationType(Enum):
    """Normalization policies computed from the data itself."""
    MAX = "max"


NormalizationFactor = Union[float, NormalizationType]


def parse_normalization_factor(value: Union[float, str, NormalizationType]) -> NormalizationFactor:
    """Accept a number, a NormalizationType, or its string value ('max')."""
    if isinstance(value, NormalizationType):
        return value
    if isinstance(value, str):
        try:
            return NormalizationType(value.lower())
        except ValueError as e:
            raise ArgumentError(f"unknown normalization type: {value}") from e
    return float(value)


def handle_normalization_factor(
    data: WindowedData,
    element_kind: ElementKind,
    normalization_factor: NormalizationFactor,
) -> WindowedData:
    """
    Divide every value of every window by the normalization factor.

    Args:
        data: Converted windows
        element_kind: Kind of the window elements
        normalization_factor: A divisor, or NormalizationType.MAX to divide
            by the largest value across all windows

    Returns:
        The normalized windows; the input mapping when the factor is 1.0
    """
    if isinstance(normalization_factor, NormalizationType):
        if element_kind != ElementKind.CONSTANT:
            raise FeatureNotImplementedError(f"normalization by {normalization_factor.value}", element_kind)
        non_empty = [v for v in data.values() if v.size]
        if not non_empty:
            return data
        divisor = max(float(np.max(v)) for v in non_empty)
    else:
        divisor = float(normalization_factor)
        if divisor == 1.0:
            return data

    if divisor == 0.0 or not np.isfinite(divisor):
        raise ArgumentError(f"cannot normalize by {divisor}")

    if element_kind not in (ElementKind.CONSTANT, ElementKind.POLYNOMIAL):
        raise FeatureNotImplementedError("normalization_factor", element_kind)

    logger.debug(f"Normalizing {len(data)} windows by {divisor}")
    return MappingProxyType({k: freeze_array(v / divisor) for k, v in data.items()})


def _window_index(start: pd.Timestamp, resolution: pd.Timedelta, length: int) -> pd.DatetimeIndex:
    return pd.DatetimeIndex([start + resolution * i for i in range(length)])


def _object_array(values: Sequence[Any]) -> np.ndarray:
    array = np.empty(len(values), dtype=object)
    for i, value in enumerate(values):
        array[i] = value
    return array


class TimeSeriesData(ABC):
    """
    Base class holding the windowed store and the accessors shared by all
    series kinds.
    """

    series_type = "TimeSeriesData"

    def __init__(
        self,
        name: str,
        data: WindowedData,
        resolution: PeriodLike,
        element_kind: ElementKind,
        degree: Optional[int] = None,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
        time_series_uuid: Optional[uuid.UUID] = None,
    ):
        resolution = parse_period(resolution)
        if resolution <= ZERO_PERIOD:
            raise ArgumentError(f"resolution must be positive, got {resolution}")
        keys: Tuple[pd.Timestamp, ...] = tuple(data.keys())
        # Metadata records periods as whole seconds
        resolution_components(resolution)
        if len(keys) >= 2:
            resolution_components(keys[1] - keys[0])
        if scaling_factor_multiplier is not None and not callable(scaling_factor_multiplier):
            raise ArgumentError("scaling_factor_multiplier must be callable")

        self._name = name
        self._data = data
        self._keys = keys
        self._resolution = resolution
        self._element_kind = element_kind
        self._degree = degree
        self._scaling_factor_multiplier = scaling_factor_multiplier
        self._features = MappingProxyType(dict(features or {}))
        self._uuid = time_series_uuid or uuid.uuid4()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, count={self.count}, "
            f"horizon={self.horizon}, resolution={format_period(self._resolution)!r}, "
            f"element_kind={self._element_kind.value})"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def data(self) -> WindowedData:
        """Read-only mapping of window start time to window values."""
        return self._data

    @property
    def resolution(self) -> pd.Timedelta:
        return self._resolution

    @property
    def element_kind(self) -> ElementKind:
        return self._element_kind

    @property
    def degree(self) -> Optional[int]:
        """Polynomial degree, None for other element kinds."""
        return self._degree

    @property
    def scaling_factor_multiplier(self) -> Optional[Callable]:
        return self._scaling_factor_multiplier

    @property
    def features(self) -> Mapping[str, Any]:
        return self._features

    @property
    def uuid(self) -> uuid.UUID:
        return self._uuid

    @property
    def count(self) -> int:
        """Number of windows."""
        return len(self._keys)

    @property
    def horizon(self) -> int:
        """Number of timesteps in each window."""
        return len(self._data[self._keys[0]])

    @property
    def interval(self) -> pd.Timedelta:
        """Spacing between window start times; zero for a single window."""
        if self.count <= 1:
            return ZERO_PERIOD
        return self._keys[1] - self._keys[0]

    @property
    def initial_timestamp(self) -> pd.Timestamp:
        return self._keys[0]

    def get_initial_times(self) -> List[pd.Timestamp]:
        return get_initial_times(self.initial_timestamp, self.count, self.interval)

    def get_total_period(self) -> pd.Timedelta:
        return get_total_period(
            self.initial_timestamp, self.count, self.interval, self.horizon, self.resolution
        )

    def get_window(self, initial_time: Any, length: Optional[int] = None) -> Union[pd.Series, pd.DataFrame]:
        """
        Return the window that starts at initial_time.

        Args:
            initial_time: Must equal one of the window start times
            length: Return only the first `length` timesteps. Ignored when
                larger than the horizon.

        Raises:
            ArgumentError: If no window starts at initial_time
        """
        start = pd.Timestamp(initial_time)
        if start not in self._data:
            raise ArgumentError(f"{start} is not a window start time of {self._name}")
        if length is not None and length < 0:
            raise ArgumentError(f"length must be non-negative, got {length}")

        values = self._data[start]
        if length is not None and length <= self.horizon:
            values = values[:length]
        return self._window_to_pandas(start, values)

    def iterate_windows(self) -> Iterator[Tuple[pd.Timestamp, Union[pd.Series, pd.DataFrame]]]:
        """Yield (start time, window) pairs in ascending order. Each call starts over."""
        for start in self._keys:
            yield start, self._window_to_pandas(start, self._data[start])

    def make_time_array(self) -> Union[pd.Series, pd.DataFrame]:
        """Return the full trajectory of a series that holds exactly one window."""
        # Only the single-window case is supported.
        if self.count != 1:
            raise FeatureNotImplementedError(
                "make_time_array for more than one window", f"{self._name} (count={self.count})"
            )
        return self._window_to_pandas(self.initial_timestamp, self._data[self.initial_timestamp])

    def _window_to_pandas(self, start: pd.Timestamp, values: Any) -> pd.Series:
        index = _window_index(start, self._resolution, len(values))
        if self._element_kind == ElementKind.CONSTANT:
            return pd.Series(np.array(values, dtype=np.float64), index=index, name=self._name)
        if self._element_kind == ElementKind.POLYNOMIAL:
            values = [tuple(float(c) for c in row) for row in values]
        return pd.Series(_object_array(values), index=index, name=self._name)

    def _copy_kwargs(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "scaling_factor_multiplier": self._scaling_factor_multiplier,
            "features": dict(self._features),
        }

    @classmethod
    def from_parsed_info(cls, info: TimeSeriesParsedInfo) -> "TimeSeriesData":
        """Build from a descriptor entry whose type matches this class."""
        if info.series_type != cls.series_type:
            raise ArgumentError(
                f"descriptor {info.name} describes a {info.series_type}, not a {cls.series_type}"
            )
        return from_parsed_info(info)

    @abstractmethod
    def get_metadata(self):
        """Build the metadata record describing this series."""

    @abstractmethod
    def with_data(self, data: Any) -> "TimeSeriesData":
        """Return a copy holding `data`, with a newly generated uuid."""


class Forecast(TimeSeriesData):
    """Base class for series made of repeated forecast windows."""

    series_type = "Forecast"

    @classmethod
    def _check_metadata(cls, metadata: Any, expected: type) -> None:
        if not isinstance(metadata, expected):
            raise ArgumentError(
                f"{cls.__name__} cannot be built from {type(metadata).__name__}"
            )


class Deterministic(Forecast):
    """One trajectory per forecast window."""

    series_type = "Deterministic"

    def __init__(
        self,
        name: str,
        data: Mapping[Any, Any],
        resolution: PeriodLike,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
        element_kind: Optional[ElementKind] = None,
        assume_constant: bool = False,
        time_series_uuid: Optional[uuid.UUID] = None,
    ):
        """
        Build a deterministic forecast from a window start -> values mapping.

        Args:
            name: User-defined name
            data: Window start time -> sequence of timestep values
            resolution: Spacing of timesteps within a window
            normalization_factor: Divisor applied to every value, or
                NormalizationType.MAX
            scaling_factor_multiplier: Stored for the owning component to
                apply at read time; never applied here
            features: Annotations distinguishing otherwise identical series
            element_kind: Skip payload inference and coerce to this kind
            assume_constant: Treat structurally ambiguous data as constants
            time_series_uuid: Payload identity; generated when omitted

        Raises:
            DataFormatError: If shapes, lengths or window spacing are not uniform
            ArgumentError: If data is empty or an argument is out of range
        """
        converted = convert_data(data, element_kind=element_kind, assume_constant=assume_constant)
        check_uniform_interval(list(converted.data.keys()))
        normalized = handle_normalization_factor(
            converted.data, converted.element_kind, parse_normalization_factor(normalization_factor)
        )
        super().__init__(
            name,
            normalized,
            resolution,
            converted.element_kind,
            degree=converted.degree,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
            time_series_uuid=time_series_uuid,
        )
        logger.debug(f"Built {self!r}")

    @classmethod
    def from_frames(
        cls,
        name: str,
        input_data: Mapping[Any, Union[pd.Series, pd.DataFrame]],
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
    ) -> "Deterministic":
        """
        Build from a mapping of window start -> time-indexed Series or
        single-column DataFrame. The resolution is inferred from the indexes.

        Raises:
            ArgumentError: If a DataFrame has more than one value column
            ConflictingInputsError: If a key differs from its frame's first timestamp
            DataFormatError: If the frames disagree on resolution
        """
        data: Dict[pd.Timestamp, List[Any]] = {}
        resolutions = set()
        for key, frame in input_data.items():
            if isinstance(frame, pd.DataFrame):
                if frame.shape[1] > 1:
                    raise ArgumentError(f"DataFrame with timestamp {key} has more than one column")
                frame = frame.iloc[:, 0]
            elif not isinstance(frame, pd.Series):
                raise ArgumentError(
                    f"expected a Series or DataFrame at {key}, got {type(frame).__name__}"
                )

            start = pd.Timestamp(key)
            if len(frame) and pd.Timestamp(frame.index[0]) != start:
                raise ConflictingInputsError(
                    f"window key {start} does not match its first timestamp {frame.index[0]}"
                )
            resolutions.add(get_resolution(frame.index))
            data[start] = frame.tolist()

        if len(resolutions) > 1:
            raise DataFormatError(
                f"forecast windows have different resolutions: {sorted(format_period(r) for r in resolutions)}"
            )
        if not resolutions:
            raise ArgumentError("time series data is empty")

        return cls(
            name,
            data,
            resolutions.pop(),
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
        )

    @classmethod
    def from_raw(
        cls,
        name: str,
        raw: RawTimeSeries,
        resolution: PeriodLike,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
    ) -> "Deterministic":
        return cls(
            name,
            raw.data,
            resolution,
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
        )

    @classmethod
    def from_csv(
        cls,
        name: str,
        filename: str,
        component: Any,
        resolution: PeriodLike,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
    ) -> "Deterministic":
        """
        Build from a CSV file whose first column is the window start time and
        whose remaining columns are the window values.

        Args:
            component: Owning component (anything with a `name`) or its name
        """
        component_name = component if isinstance(component, str) else component.name
        raw = read_time_series(cls, filename, component_name)
        return cls.from_raw(
            name,
            raw,
            resolution,
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
        )

    @classmethod
    def from_metadata(
        cls,
        metadata: DeterministicMetadata,
        data: Mapping[Any, Any],
        element_kind: Optional[ElementKind] = None,
    ) -> "Deterministic":
        """Rejoin stored metadata with its payload, keeping the payload identity."""
        cls._check_metadata(metadata, DeterministicMetadata)
        return cls(
            metadata.name,
            data,
            metadata.resolution,
            scaling_factor_multiplier=metadata.scaling_factor_multiplier,
            features=metadata.features,
            element_kind=element_kind,
            time_series_uuid=metadata.time_series_uuid,
        )

    def with_data(self, data: Mapping[Any, Any]) -> "Deterministic":
        return type(self)(
            data=data,
            resolution=self.resolution,
            element_kind=self.element_kind,
            **self._copy_kwargs(),
        )

    def get_metadata(self) -> DeterministicMetadata:
        return DeterministicMetadata(
            name=self.name,
            resolution=self.resolution,
            initial_timestamp=self.initial_timestamp,
            interval=self.interval,
            count=self.count,
            horizon=self.horizon,
            time_series_uuid=self.uuid,
            scaling_factor_multiplier=self.scaling_factor_multiplier,
            features=dict(self.features),
        )


class _MatrixForecast(Forecast):
    """Forecast whose windows are [horizon, n] matrices of constants."""

    def __init__(
        self,
        name: str,
        data: Mapping[Any, Any],
        resolution: PeriodLike,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
        time_series_uuid: Optional[uuid.UUID] = None,
    ):
        converted = convert_matrix_data(data)
        check_uniform_interval(list(converted.keys()))
        normalized = handle_normalization_factor(
            converted, ElementKind.CONSTANT, parse_normalization_factor(normalization_factor)
        )
        super().__init__(
            name,
            normalized,
            resolution,
            ElementKind.CONSTANT,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
            time_series_uuid=time_series_uuid,
        )
        logger.debug(f"Built {self!r}")

    @property
    @abstractmethod
    def _columns(self) -> List[Any]:
        """Column labels of a window."""

    def _window_to_pandas(self, start: pd.Timestamp, values: Any) -> pd.DataFrame:
        index = _window_index(start, self.resolution, len(values))
        return pd.DataFrame(np.array(values, dtype=np.float64), index=index, columns=self._columns)


class Probabilistic(_MatrixForecast):
    """Forecast windows holding one trajectory per percentile."""

    series_type = "Probabilistic"

    def __init__(
        self,
        name: str,
        data: Mapping[Any, Any],
        percentiles: Sequence[float],
        resolution: PeriodLike,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
        time_series_uuid: Optional[uuid.UUID] = None,
    ):
        """
        Args:
            data: Window start -> [horizon, len(percentiles)] matrix
            percentiles: Ascending percentile labels in [0, 100]

        Raises:
            ArgumentError: If the matrix width differs from the percentile count
            InvalidRange: If a percentile lies outside [0, 100] or they are not ascending
        """
        percentiles = [float(p) for p in percentiles]
        if any(p < 0.0 or p > 100.0 for p in percentiles):
            raise InvalidRange(f"percentiles must lie in [0, 100], got {percentiles}")
        if any(b <= a for a, b in zip(percentiles, percentiles[1:])):
            raise InvalidRange(f"percentiles must be strictly ascending, got {percentiles}")
        self._percentiles = tuple(percentiles)
        super().__init__(
            name,
            data,
            resolution,
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
            time_series_uuid=time_series_uuid,
        )
        n_columns = self._data[self._keys[0]].shape[1]
        if n_columns != len(self._percentiles):
            raise ArgumentError(
                f"data has {n_columns} columns but {len(self._percentiles)} percentiles were given"
            )

    @property
    def percentiles(self) -> Tuple[float, ...]:
        return self._percentiles

    @property
    def _columns(self) -> List[Any]:
        return list(self._percentiles)

    @classmethod
    def from_metadata(cls, metadata: ProbabilisticMetadata, data: Mapping[Any, Any]) -> "Probabilistic":
        cls._check_metadata(metadata, ProbabilisticMetadata)
        return cls(
            metadata.name,
            data,
            metadata.percentiles,
            metadata.resolution,
            scaling_factor_multiplier=metadata.scaling_factor_multiplier,
            features=metadata.features,
            time_series_uuid=metadata.time_series_uuid,
        )

    def with_data(self, data: Mapping[Any, Any]) -> "Probabilistic":
        return type(self)(
            data=data,
            percentiles=self._percentiles,
            resolution=self.resolution,
            **self._copy_kwargs(),
        )

    def get_metadata(self) -> ProbabilisticMetadata:
        return ProbabilisticMetadata(
            name=self.name,
            resolution=self.resolution,
            initial_timestamp=self.initial_timestamp,
            interval=self.interval,
            count=self.count,
            horizon=self.horizon,
            time_series_uuid=self.uuid,
            scaling_factor_multiplier=self.scaling_factor_multiplier,
            features=dict(self.features),
            percentiles=list(self._percentiles),
        )


class Scenarios(_MatrixForecast):
    """Forecast windows holding one trajectory per scenario."""

    series_type = "Scenarios"

    @property
    def scenario_count(self) -> int:
        return next(iter(self.data.values())).shape[1]

    @property
    def _columns(self) -> List[Any]:
        return list(range(1, self.scenario_count + 1))

    @classmethod
    def from_metadata(cls, metadata: ScenariosMetadata, data: Mapping[Any, Any]) -> "Scenarios":
        cls._check_metadata(metadata, ScenariosMetadata)
        scenarios = cls(
            metadata.name,
            data,
            metadata.resolution,
            scaling_factor_multiplier=metadata.scaling_factor_multiplier,
            features=metadata.features,
            time_series_uuid=metadata.time_series_uuid,
        )
        if scenarios.scenario_count != metadata.scenario_count:
            raise ConflictingInputsError(
                f"metadata declares {metadata.scenario_count} scenarios, data has {scenarios.scenario_count}"
            )
        return scenarios

    def with_data(self, data: Mapping[Any, Any]) -> "Scenarios":
        return type(self)(data=data, resolution=self.resolution, **self._copy_kwargs())

    def get_metadata(self) -> ScenariosMetadata:
        return ScenariosMetadata(
            name=self.name,
            resolution=self.resolution,
            initial_timestamp=self.initial_timestamp,
            interval=self.interval,
            count=self.count,
            horizon=self.horizon,
            time_series_uuid=self.uuid,
            scaling_factor_multiplier=self.scaling_factor_multiplier,
            features=dict(self.features),
            scenario_count=self.scenario_count,
        )


class SingleTimeSeries(TimeSeriesData):
    """One contiguous trajectory, stored as a single window."""

    series_type = "SingleTimeSeries"

    def __init__(
        self,
        name: str,
        data: pd.Series,
        resolution: Optional[PeriodLike] = None,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
        element_kind: Optional[ElementKind] = None,
        assume_constant: bool = False,
        time_series_uuid: Optional[uuid.UUID] = None,
    ):
        """
        Args:
            data: Values indexed by timestamp
            resolution: Inferred from the index when omitted. Required when
                the series has a single timestep.

        Raises:
            ConflictingInputsError: If resolution disagrees with the index
        """
        if not isinstance(data, pd.Series):
            raise ArgumentError(f"SingleTimeSeries data must be a pandas Series, got {type(data).__name__}")
        if len(data) == 0:
            raise ArgumentError("time series data is empty")

        index = pd.DatetimeIndex(data.index)
        if len(index) >= 2:
            inferred = get_resolution(index)
            if resolution is not None and parse_period(resolution) != inferred:
                raise ConflictingInputsError(
                    f"resolution {format_period(resolution)} does not match the data ({format_period(inferred)})"
                )
            resolution = inferred
        elif resolution is None:
            raise ArgumentError("resolution is required for a series with a single timestep")

        converted = convert_data(
            {index[0]: data.tolist()}, element_kind=element_kind, assume_constant=assume_constant
        )
        normalized = handle_normalization_factor(
            converted.data, converted.element_kind, parse_normalization_factor(normalization_factor)
        )
        super().__init__(
            name,
            normalized,
            resolution,
            converted.element_kind,
            degree=converted.degree,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
            time_series_uuid=time_series_uuid,
        )
        logger.debug(f"Built {self!r}")

    @property
    def length(self) -> int:
        return self.horizon

    def to_series(self) -> pd.Series:
        return self.make_time_array()

    @classmethod
    def from_frame(
        cls,
        name: str,
        df: pd.DataFrame,
        timestamp: Optional[str] = "timestamp",
        value_column: Optional[str] = None,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
    ) -> "SingleTimeSeries":
        """
        Build from a DataFrame holding a timestamp column (or a DatetimeIndex)
        and one value column.

        Raises:
            ArgumentError: If more than one value column is present and
                value_column is not given
        """
        if timestamp is not None and timestamp in df.columns:
            df = df.set_index(timestamp)
        if value_column is None:
            if df.shape[1] != 1:
                raise ArgumentError(
                    f"DataFrame has {df.shape[1]} value columns; pass value_column to choose one"
                )
            value_column = df.columns[0]
        elif value_column not in df.columns:
            raise ArgumentError(f"DataFrame has no column {value_column}")

        return cls(
            name,
            df[value_column],
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
        )

    @classmethod
    def from_raw(
        cls,
        name: str,
        raw: RawTimeSeries,
        resolution: Optional[PeriodLike] = None,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
    ) -> "SingleTimeSeries":
        series = pd.Series(list(raw.data.values()), index=pd.DatetimeIndex(list(raw.data.keys())))
        return cls(
            name,
            series,
            resolution=resolution,
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
        )

    @classmethod
    def from_csv(
        cls,
        name: str,
        filename: str,
        component: Any,
        normalization_factor: NormalizationFactor = 1.0,
        scaling_factor_multiplier: Optional[Callable] = None,
        features: Optional[Dict[str, Any]] = None,
    ) -> "SingleTimeSeries":
        """Build from a CSV file with a timestamp column and one column per component."""
        component_name = component if isinstance(component, str) else component.name
        raw = read_time_series(cls, filename, component_name)
        return cls.from_raw(
            name,
            raw,
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=features,
        )

    @classmethod
    def from_metadata(
        cls,
        metadata: SingleTimeSeriesMetadata,
        data: Any,
        element_kind: Optional[ElementKind] = None,
    ) -> "SingleTimeSeries":
        """
        Rejoin metadata with its payload. `data` may be a Series or the bare
        values, in which case the index is rebuilt from the metadata.
        """
        if not isinstance(metadata, SingleTimeSeriesMetadata):
            raise ArgumentError(f"SingleTimeSeries cannot be built from {type(metadata).__name__}")
        if not isinstance(data, pd.Series):
            values = list(data)
            data = pd.Series(
                _object_array(values) if values and not np.isscalar(values[0]) else values,
                index=_window_index(metadata.initial_timestamp, metadata.resolution, len(values)),
            )
        return cls(
            metadata.name,
            data,
            resolution=metadata.resolution,
            scaling_factor_multiplier=metadata.scaling_factor_multiplier,
            features=metadata.features,
            element_kind=element_kind,
            time_series_uuid=metadata.time_series_uuid,
        )

    def with_data(self, data: pd.Series) -> "SingleTimeSeries":
        return type(self)(
            data=data,
            resolution=self.resolution,
            element_kind=self.element_kind,
            **self._copy_kwargs(),
        )

    def get_metadata(self) -> SingleTimeSeriesMetadata:
        return SingleTimeSeriesMetadata(
            name=self.name,
            resolution=self.resolution,
            initial_timestamp=self.initial_timestamp,
            length=self.length,
            time_series_uuid=self.uuid,
            scaling_factor_multiplier=self.scaling_factor_multiplier,
            features=dict(self.features),
        )


SERIES_TYPES: Dict[str, type] = {
    "Deterministic": Deterministic,
    "Probabilistic": Probabilistic,
    "Scenarios": Scenarios,
    "SingleTimeSeries": SingleTimeSeries,
}


def from_parsed_info(info: TimeSeriesParsedInfo) -> TimeSeriesData:
    """
    Build a series from a descriptor entry, reading its data file.

    Raises:
        FeatureNotImplementedError: If the series type cannot be read from a file
    """
    scaling_factor_multiplier = multiplier_from_path(info.scaling_factor_multiplier)
    normalization_factor = parse_normalization_factor(info.normalization_factor)

    if info.series_type == "Deterministic":
        if info.resolution is None:
            raise ArgumentError(f"{info.name}: Deterministic descriptors require a resolution")
        return Deterministic.from_csv(
            info.name,
            str(info.data_file),
            info.component_name,
            info.resolution,
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=info.features,
        )
    if info.series_type == "SingleTimeSeries":
        raw = read_time_series(SingleTimeSeries, info.data_file, info.component_name)
        return SingleTimeSeries.from_raw(
            info.name,
            raw,
            resolution=info.resolution,
            normalization_factor=normalization_factor,
            scaling_factor_multiplier=scaling_factor_multiplier,
            features=info.features,
        )
    raise FeatureNotImplementedError("building from a data file", info.series_type)
