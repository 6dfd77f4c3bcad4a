"""Payload element types and classification of raw forecast windows."""

import logging
import numbers
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple

import numpy as np
import pandas as pd

from forecast_store.utils.error_handling import ArgumentError, DataFormatError

logger = logging.getLogger(__name__)

POLYNOMIAL_DEGREES = (2, 3)

# Read-only, ascending mapping of window start -> window values
WindowedData = Mapping[pd.Timestamp, Any]


class ElementKind(Enum):
    """Shape of the value stored at one timestep."""
    CONSTANT = "constant"
    POLYNOMIAL = "polynomial"
    PIECEWISE_LINEAR = "piecewise_linear"
    PIECEWISE_STEP = "piecewise_step"


class XYCoords(NamedTuple):
    """One breakpoint of a piecewise curve."""
    x: float
    y: float


@dataclass(frozen=True)
class LinearFunctionData:
    """Linear cost-style data: proportional_term * x + constant_term."""
    proportional_term: float
    constant_term: float = 0.0

    def raw(self) -> Tuple[float, float]:
        return (float(self.proportional_term), float(self.constant_term))


@dataclass(frozen=True)
class QuadraticFunctionData:
    """Quadratic cost-style data: quadratic_term * x^2 + proportional_term * x + constant_term."""
    quadratic_term: float
    proportional_term: float
    constant_term: float = 0.0

    def raw(self) -> Tuple[float, float, float]:
        return (
            float(self.quadratic_term),
            float(self.proportional_term),
            float(self.constant_term),
        )


@dataclass(frozen=True)
class PiecewiseLinearData:
    """
    Breakpoint curve defined by ordered (x, y) points.

    Attributes:
        points: Ordered breakpoints
    """
    points: Tuple[XYCoords, ...]

    def __post_init__(self):
        object.__setattr__(
            self, "points", tuple(XYCoords(float(p[0]), float(p[1])) for p in self.points)
        )

    def raw(self) -> Tuple[Tuple[float, float], ...]:
        return tuple((p.x, p.y) for p in self.points)


@dataclass(frozen=True)
class PiecewiseStepData:
    """
    Step curve: y_coords[i] holds on [x_coords[i], x_coords[i + 1]).

    There is no dense array layout for this shape yet, so series holding it
    cannot be shaped for storage.
    """
    x_coords: Tuple[float, ...]
    y_coords: Tuple[float, ...]

    def __post_init__(self):
        object.__setattr__(self, "x_coords", tuple(float(x) for x in self.x_coords))
        object.__setattr__(self, "y_coords", tuple(float(y) for y in self.y_coords))
        if len(self.x_coords) != len(self.y_coords) + 1:
            raise ArgumentError(
                f"PiecewiseStepData needs one more x coordinate than y values, "
                f"got {len(self.x_coords)} and {len(self.y_coords)}"
            )


class ConvertedData(NamedTuple):
    """Result of classifying and coercing a raw window mapping."""
    data: WindowedData
    element_kind: ElementKind
    degree: Optional[int]


def get_raw_data(element: Any) -> Any:
    """Lower a typed function-data element to its raw tuple form."""
    if isinstance(element, (LinearFunctionData, QuadraticFunctionData, PiecewiseLinearData)):
        return element.raw()
    return element


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, np.ndarray))


def classify_element(value: Any) -> Optional[Tuple[ElementKind, Optional[int]]]:
    """
    Classify one timestep value.

    Returns:
        (kind, degree) or None when the value carries no recognizable structure
    """
    if _is_number(value):
        return ElementKind.CONSTANT, None
    if isinstance(value, LinearFunctionData):
        return ElementKind.POLYNOMIAL, 2
    if isinstance(value, QuadraticFunctionData):
        return ElementKind.POLYNOMIAL, 3
    if isinstance(value, PiecewiseLinearData):
        return ElementKind.PIECEWISE_LINEAR, None
    if isinstance(value, PiecewiseStepData):
        return ElementKind.PIECEWISE_STEP, None
    if _is_sequence(value) and len(value) > 0:
        if all(_is_number(v) for v in value):
            return ElementKind.POLYNOMIAL, len(value)
        if all(_is_sequence(p) and all(_is_number(c) for c in p) for p in value):
            return ElementKind.PIECEWISE_LINEAR, None
    return None


def infer_element_kind(
    windows: Iterable[Sequence[Any]],
    assume_constant: bool = False,
) -> Tuple[ElementKind, Optional[int]]:
    """
    Infer the single element kind shared by every timestep of every window.

    Args:
        windows: Window value sequences
        assume_constant: Treat the data as CONSTANT when no element carries
            structure beyond plain numbers. This is an opt-in narrowing to the
            most common case and is never applied implicitly.

    Returns:
        (kind, degree)

    Raises:
        DataFormatError: If shapes are mixed or cannot be determined
    """
    found: Set[Tuple[ElementKind, Optional[int]]] = set()
    unknown = 0
    for window in windows:
        for value in window:
            kind = classify_element(value)
            if kind is None:
                unknown += 1
            else:
                found.add(kind)

    if len(found) > 1:
        shapes = ", ".join(sorted(_describe(k, d) for k, d in found))
        raise DataFormatError(f"time series data mixes payload shapes: {shapes}")

    if unknown or not found:
        if assume_constant and found <= {(ElementKind.CONSTANT, None)}:
            logger.debug("Payload shape not inferable; assuming constant values as requested")
            return ElementKind.CONSTANT, None
        raise DataFormatError(
            "cannot infer the payload shape of the time series data; "
            "pass element_kind explicitly or assume_constant=True"
        )

    kind, degree = found.pop()
    if kind == ElementKind.POLYNOMIAL and degree not in POLYNOMIAL_DEGREES:
        raise DataFormatError(
            f"polynomial data must have degree in {POLYNOMIAL_DEGREES}, got {degree}"
        )
    return kind, degree


def _describe(kind: ElementKind, degree: Optional[int]) -> str:
    return f"{kind.value}({degree})" if degree is not None else kind.value


def freeze_array(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def coerce_window(values: Sequence[Any], kind: ElementKind, degree: Optional[int] = None) -> Any:
    """
    Coerce one window to the canonical in-memory form for its kind.

    CONSTANT -> read-only float64 vector; POLYNOMIAL -> read-only
    (horizon, degree) float64 matrix; PIECEWISE_LINEAR -> tuple of point
    tuples (point counts are checked when shaping, not here);
    PIECEWISE_STEP -> tuple of PiecewiseStepData.
    """
    try:
        if kind == ElementKind.CONSTANT:
            array = np.array(values, dtype=np.float64)
            if array.ndim != 1:
                raise DataFormatError(f"constant window must be one-dimensional, got shape {array.shape}")
            return freeze_array(array)

        if kind == ElementKind.POLYNOMIAL:
            rows = [get_raw_data(v) for v in values]
            if degree is None:
                degree = len(rows[0]) if rows else None
            if degree not in POLYNOMIAL_DEGREES:
                raise DataFormatError(
                    f"polynomial data must have degree in {POLYNOMIAL_DEGREES}, got {degree}"
                )
            array = np.array(rows, dtype=np.float64) if rows else np.empty((0, degree))
            if array.shape != (len(rows), degree):
                raise DataFormatError(f"polynomial window has inconsistent arity: {array.shape}")
            return freeze_array(array)

        if kind == ElementKind.PIECEWISE_LINEAR:
            return tuple(
                tuple(tuple(float(c) for c in point) for point in get_raw_data(v))
                for v in values
            )

        if kind == ElementKind.PIECEWISE_STEP:
            for value in values:
                if not isinstance(value, PiecewiseStepData):
                    raise DataFormatError(f"expected PiecewiseStepData, got {type(value).__name__}")
            return tuple(values)
    except (TypeError, ValueError) as e:
        if isinstance(e, DataFormatError):
            raise
        raise DataFormatError(f"cannot convert window to {kind.value} data: {e}") from e

    raise ArgumentError(f"unknown element kind: {kind!r}")


def _sorted_windows(data: Mapping[Any, Any]) -> List[Tuple[pd.Timestamp, List[Any]]]:
    if not data:
        raise ArgumentError("time series data is empty")

    windows: Dict[pd.Timestamp, List[Any]] = {}
    for key, values in data.items():
        timestamp = pd.Timestamp(key)
        if timestamp in windows:
            raise ArgumentError(f"duplicate window start time {timestamp}")
        if isinstance(values, pd.Series):
            values = values.tolist()
        elif isinstance(values, np.ndarray):
            values = list(values)
        elif not isinstance(values, (list, tuple)):
            raise DataFormatError(
                f"window at {timestamp} must be a sequence of values, got {type(values).__name__}"
            )
        windows[timestamp] = list(values)

    horizons = {len(v) for v in windows.values()}
    if len(horizons) > 1:
        raise DataFormatError(f"all windows must have the same length, got lengths {sorted(horizons)}")

    return sorted(windows.items(), key=lambda item: item[0])


def convert_data(
    data: Mapping[Any, Any],
    element_kind: Optional[ElementKind] = None,
    assume_constant: bool = False,
) -> ConvertedData:
    """
    Classify a raw timestamp -> window mapping and coerce every window.

    Args:
        data: Mapping of window start time to a sequence of timestep values
        element_kind: Skip inference and coerce to this kind
        assume_constant: See infer_element_kind

    Returns:
        ConvertedData with a read-only mapping in ascending key order
    """
    items = _sorted_windows(data)
    degree: Optional[int] = None
    if element_kind is None:
        element_kind, degree = infer_element_kind((w for _, w in items), assume_constant)

    converted = {key: coerce_window(values, element_kind, degree) for key, values in items}
    if element_kind == ElementKind.POLYNOMIAL:
        degrees = {v.shape[1] for v in converted.values()}
        if len(degrees) > 1:
            raise DataFormatError(f"polynomial windows mix degrees {sorted(degrees)}")
        degree = degrees.pop()

    return ConvertedData(MappingProxyType(converted), element_kind, degree)


def convert_matrix_data(data: Mapping[Any, Any]) -> WindowedData:
    """
    Coerce a mapping of window start -> [horizon, n] matrices, as used by
    percentile and scenario forecasts.

    Raises:
        DataFormatError: If a matrix is not two-dimensional or shapes differ
    """
    if not data:
        raise ArgumentError("time series data is empty")

    converted: Dict[pd.Timestamp, np.ndarray] = {}
    for key, values in data.items():
        timestamp = pd.Timestamp(key)
        if timestamp in converted:
            raise ArgumentError(f"duplicate window start time {timestamp}")
        try:
            matrix = np.array(values, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise DataFormatError(f"window at {timestamp} is not a numeric matrix: {e}") from e
        if matrix.ndim != 2:
            raise DataFormatError(
                f"window at {timestamp} must be a [horizon, n] matrix, got shape {matrix.shape}"
            )
        converted[timestamp] = freeze_array(matrix)

    shapes = {m.shape for m in converted.values()}
    if len(shapes) > 1:
        raise DataFormatError(f"all windows must have the same shape, got {sorted(shapes)}")

    return MappingProxyType(dict(sorted(converted.items(), key=lambda item: item[0])))
