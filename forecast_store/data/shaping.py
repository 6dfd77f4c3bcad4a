"""
Conversion between windowed stores and dense float64 arrays for storage.

| Element kind      | Source     | Shape                               |
|-------------------|------------|-------------------------------------|
| CONSTANT          | one window | [horizon]                           |
| CONSTANT          | store      | [horizon, count]                    |
| CONSTANT matrix   | one window | [horizon, n]                        |
| CONSTANT matrix   | store      | [horizon, count, n]                 |
| POLYNOMIAL        | one window | [horizon, degree]                   |
| POLYNOMIAL        | store      | [horizon, count, degree]            |
| PIECEWISE_LINEAR  | one window | [horizon, n_points, 2]              |
| PIECEWISE_LINEAR  | store      | [horizon, count, n_points, 2]       |

Matrix windows are the [horizon, n] percentile or scenario trajectories.
Point counts of piecewise curves are validated here, not at construction.
"""

import logging
from typing import Any, Dict, List, Mapping, Sequence

import numpy as np

from forecast_store.data.metadata import (
    DeterministicMetadata,
    ForecastMetadata,
    ProbabilisticMetadata,
    ScenariosMetadata,
    SingleTimeSeriesMetadata,
)
from forecast_store.data.resolution import get_initial_times
from forecast_store.data.series import (
    Deterministic,
    Forecast,
    Probabilistic,
    Scenarios,
    SingleTimeSeries,
    TimeSeriesData,
)
from forecast_store.data.structs import POLYNOMIAL_DEGREES, ElementKind, get_raw_data
from forecast_store.utils.error_handling import (
    ArgumentError,
    ConflictingInputsError,
    FeatureNotImplementedError,
)

logger = logging.getLogger(__name__)

# Element kind implied by the rank of one stored window
_KIND_BY_WINDOW_RANK = {
    1: ElementKind.CONSTANT,
    2: ElementKind.POLYNOMIAL,
    3: ElementKind.PIECEWISE_LINEAR,
}


def _shape_constant_window(values: Any) -> np.ndarray:
    array = np.array(values, dtype=np.float64)
    if array.ndim not in (1, 2):
        raise ArgumentError(f"constant window must have rank 1 or 2, got shape {array.shape}")
    return array


def _shape_polynomial_window(values: Sequence[Any]) -> np.ndarray:
    if isinstance(values, np.ndarray) and values.ndim == 2:
        array = values.astype(np.float64)
    else:
        rows = [get_raw_data(v) for v in values]
        if not rows:
            raise ArgumentError("cannot infer the degree of an empty polynomial window")
        degrees = {len(r) for r in rows}
        if len(degrees) > 1:
            raise ArgumentError(
                f"degree mismatch: every timestep must have the same degree, got {sorted(degrees)}"
            )
        array = np.array(rows, dtype=np.float64).reshape(len(rows), degrees.pop())

    if array.shape[1] not in POLYNOMIAL_DEGREES:
        raise ArgumentError(f"degree must be one of {POLYNOMIAL_DEGREES}, got {array.shape[1]}")
    return array


def _shape_curve_window(values: Sequence[Any]) -> np.ndarray:
    curves = [get_raw_data(v) for v in values]
    point_counts = {len(curve) for curve in curves}
    if len(point_counts) > 1:
        raise ArgumentError(
            f"point count mismatch: every timestep must have the same number of points, "
            f"got {sorted(point_counts)}"
        )
    n_points = point_counts.pop() if point_counts else 0

    arities = {len(point) for curve in curves for point in curve}
    if arities - {2}:
        raise ArgumentError(
            f"point arity mismatch: every point must have exactly 2 components (x, y), "
            f"got {sorted(arities)}"
        )

    shaped = np.empty((len(curves), n_points, 2), dtype=np.float64)
    for r, curve in enumerate(curves):
        for t, point in enumerate(curve):
            shaped[r, t, :] = point
    return shaped


def _shape_window(values: Any, element_kind: ElementKind) -> np.ndarray:
    if element_kind == ElementKind.CONSTANT:
        return _shape_constant_window(values)
    if element_kind == ElementKind.POLYNOMIAL:
        return _shape_polynomial_window(values)
    if element_kind == ElementKind.PIECEWISE_LINEAR:
        return _shape_curve_window(values)
    raise FeatureNotImplementedError("transform_array_for_storage", element_kind)


def _shape_store(data: Mapping[Any, Any], element_kind: ElementKind) -> np.ndarray:
    if element_kind not in (ElementKind.CONSTANT, ElementKind.POLYNOMIAL, ElementKind.PIECEWISE_LINEAR):
        raise FeatureNotImplementedError("transform_array_for_storage", element_kind)
    if not data:
        raise ArgumentError("cannot shape an empty store")

    windows = [_shape_window(values, element_kind) for values in data.values()]

    shapes = {w.shape for w in windows}
    if len(shapes) > 1:
        horizons = {s[0] for s in shapes}
        if len(horizons) > 1:
            raise ArgumentError(f"horizon mismatch across windows: {sorted(horizons)}")
        if element_kind == ElementKind.PIECEWISE_LINEAR:
            raise ArgumentError(
                f"point count mismatch across windows: {sorted({s[1] for s in shapes})}"
            )
        raise ArgumentError(f"window shape mismatch across windows: {sorted(shapes)}")

    # Each window becomes one column along axis 1
    return np.stack(windows, axis=1)


def transform_array_for_storage(data: Any, element_kind: ElementKind) -> np.ndarray:
    """
    Convert one window, or a full store, into a dense float64 array.

    Args:
        data: A window's values, or a mapping of window start -> window values
        element_kind: Kind of the elements

    Returns:
        Array shaped as described in the module docstring

    Raises:
        ArgumentError: If point counts, point arities, degrees or horizons differ
        FeatureNotImplementedError: If the element kind has no array layout
    """
    if isinstance(data, Mapping):
        return _shape_store(data, element_kind)
    return _shape_window(data, element_kind)


def shape_for_storage(series: TimeSeriesData) -> np.ndarray:
    """Shape a series' payload for the persistence layer."""
    if isinstance(series, SingleTimeSeries):
        array = transform_array_for_storage(series.data[series.initial_timestamp], series.element_kind)
    elif isinstance(series, Forecast):
        array = transform_array_for_storage(series.data, series.element_kind)
    else:
        raise FeatureNotImplementedError("shape_for_storage", type(series))
    logger.debug(f"Shaped {series.name} ({series.uuid}) to {array.shape}")
    return array


def _unshape_window(array: np.ndarray) -> List[Any]:
    if array.ndim == 1:
        return list(array)
    if array.ndim == 2:
        return [tuple(row) for row in array]
    if array.ndim == 3 and array.shape[-1] == 2:
        return [tuple(tuple(point) for point in curve) for curve in array]
    raise ArgumentError(f"cannot interpret an array of shape {array.shape} as a window")


def restore_from_storage(array: np.ndarray, metadata: Any) -> TimeSeriesData:
    """
    Rebuild a series from a stored array and its metadata. The inverse of
    shape_for_storage; the array rank selects the element kind.

    Raises:
        ConflictingInputsError: If the array does not match the metadata
    """
    array = np.asarray(array, dtype=np.float64)

    if isinstance(metadata, SingleTimeSeriesMetadata):
        if array.shape[0] != metadata.length:
            raise ConflictingInputsError(
                f"stored array has {array.shape[0]} timesteps, metadata declares {metadata.length}"
            )
        return SingleTimeSeries.from_metadata(
            metadata, _unshape_window(array), element_kind=_KIND_BY_WINDOW_RANK.get(array.ndim)
        )

    if not isinstance(metadata, ForecastMetadata):
        raise FeatureNotImplementedError("restore_from_storage", type(metadata))

    if array.ndim < 2 or array.shape[:2] != (metadata.horizon, metadata.count):
        raise ConflictingInputsError(
            f"stored array of shape {array.shape} does not match "
            f"horizon={metadata.horizon}, count={metadata.count}"
        )
    initial_times = get_initial_times(metadata.initial_timestamp, metadata.count, metadata.interval)
    if len(initial_times) != metadata.count:
        raise ConflictingInputsError(
            f"metadata declares {metadata.count} windows but a zero interval"
        )

    columns = [array[:, j] for j in range(metadata.count)]

    if isinstance(metadata, (ProbabilisticMetadata, ScenariosMetadata)):
        if array.ndim != 3:
            raise ConflictingInputsError(f"expected a rank 3 array, got shape {array.shape}")
        data: Dict[Any, Any] = dict(zip(initial_times, columns))
        if isinstance(metadata, ProbabilisticMetadata):
            return Probabilistic.from_metadata(metadata, data)
        return Scenarios.from_metadata(metadata, data)

    if isinstance(metadata, DeterministicMetadata):
        if array.ndim == 2:
            data = dict(zip(initial_times, columns))
        else:
            data = {t: _unshape_window(column) for t, column in zip(initial_times, columns)}
        return Deterministic.from_metadata(
            metadata, data, element_kind=_KIND_BY_WINDOW_RANK.get(array.ndim - 1)
        )

    raise FeatureNotImplementedError("restore_from_storage", type(metadata))
