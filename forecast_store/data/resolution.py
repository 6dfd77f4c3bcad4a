"""Resolution inference and window-start algebra."""

import logging
import numbers
from datetime import timedelta
from typing import Any, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from forecast_store.utils.error_handling import ArgumentError, DataFormatError

logger = logging.getLogger(__name__)

PeriodLike = Union[pd.Timedelta, timedelta, str, int, float]

ZERO_PERIOD = pd.Timedelta(0)

# Largest unit first
_UNITS: Tuple[Tuple[str, pd.Timedelta], ...] = (
    ("days", pd.Timedelta(days=1)),
    ("hours", pd.Timedelta(hours=1)),
    ("minutes", pd.Timedelta(minutes=1)),
    ("seconds", pd.Timedelta(seconds=1)),
)


def resolution_components(period: PeriodLike) -> Tuple[int, str]:
    """
    Express a period as a whole count of the largest unit that divides it.

    Units are tried in the order days, hours, minutes, seconds.

    Raises:
        DataFormatError: If the period is not a whole number of seconds
    """
    td = parse_period(period)
    if td == ZERO_PERIOD:
        return 0, "seconds"
    for unit, size in _UNITS:
        if td % size == ZERO_PERIOD:
            return int(td // size), unit
    raise DataFormatError(f"cannot understand the resolution of the time series: {td}")


def format_period(period: PeriodLike) -> str:
    """Render a period as e.g. '1 hour' or '15 minutes'."""
    count, unit = resolution_components(period)
    if count == 1:
        unit = unit[:-1]
    return f"{count} {unit}"


def parse_period(value: PeriodLike) -> pd.Timedelta:
    """
    Convert a period-like value to a Timedelta.

    Accepts Timedelta/timedelta objects, numbers of seconds, strings produced
    by format_period ('2 hours') and pandas aliases ('1h', '15min').
    """
    if isinstance(value, bool):
        raise ArgumentError(f"invalid period: {value!r}")
    try:
        if isinstance(value, numbers.Real) and not isinstance(value, np.timedelta64):
            return pd.Timedelta(seconds=value)
        td = pd.Timedelta(value)
    except (TypeError, ValueError) as e:
        raise ArgumentError(f"invalid period: {value!r}") from e
    if pd.isna(td):
        raise ArgumentError(f"invalid period: {value!r}")
    return td


def get_resolution(timestamps: Sequence[Any]) -> pd.Timedelta:
    """
    Return the uniform sampling resolution of a timestamp sequence.

    Args:
        timestamps: Ordered timestamps, at least two

    Returns:
        The single distinct consecutive difference, built from the largest
        unit that divides it evenly

    Raises:
        ArgumentError: If fewer than two timestamps are given
        DataFormatError: If the differences are not all equal or are not
            whole seconds
    """
    index = pd.DatetimeIndex(timestamps)
    if len(index) < 2:
        raise ArgumentError(f"at least two timestamps are required to infer a resolution, got {len(index)}")

    distinct = (index[1:] - index[:-1]).unique()
    if len(distinct) > 1:
        raise DataFormatError(
            "time series has non-uniform resolution: this is currently not supported"
        )

    diff = pd.Timedelta(distinct[0])
    if diff <= ZERO_PERIOD:
        raise DataFormatError(f"timestamps must be strictly increasing, got step {diff}")

    count, unit = resolution_components(diff)
    resolution = pd.Timedelta(**{unit: count})
    logger.debug(f"Inferred resolution {format_period(resolution)} from {len(index)} timestamps")
    return resolution


def get_initial_timestamp(timestamps: Sequence[Any]) -> pd.Timestamp:
    """Return the first timestamp of the sequence."""
    if len(timestamps) == 0:
        raise ArgumentError("cannot take the initial timestamp of an empty sequence")
    return pd.Timestamp(timestamps[0])


def get_initial_times(
    initial_timestamp: Any,
    count: int,
    interval: PeriodLike,
) -> List[pd.Timestamp]:
    """
    Return the start times of `count` windows spaced by `interval`.

    A zero interval describes a single window, so exactly one start time is
    returned regardless of count.
    """
    if count < 0:
        raise ArgumentError(f"count must be non-negative, got {count}")
    if count == 0:
        return []

    start = pd.Timestamp(initial_timestamp)
    step = parse_period(interval)
    if step == ZERO_PERIOD:
        return [start]
    return [start + step * i for i in range(count)]


def get_total_period(
    initial_timestamp: Any,
    count: int,
    interval: PeriodLike,
    horizon: int,
    resolution: PeriodLike,
) -> pd.Timedelta:
    """
    Span from the first window start to the last timestep of a window starting
    `count` intervals after it.

    Equals `interval * count + resolution * (horizon - 1)`; the end point lies
    one interval past the last stored window start.

    Raises:
        ArgumentError: If count is negative or horizon is not positive
    """
    if count < 0:
        raise ArgumentError(f"count must be non-negative, got {count}")
    if horizon < 1:
        raise ArgumentError(f"horizon must be positive, got {horizon}")
    start = pd.Timestamp(initial_timestamp)
    last_initial_time = start + parse_period(interval) * count
    last_timestamp = last_initial_time + parse_period(resolution) * (horizon - 1)
    return last_timestamp - start


def check_uniform_interval(window_starts: Sequence[Any]) -> pd.Timedelta:
    """
    Validate that window start times are evenly spaced.

    Returns:
        The interval, or a zero period for fewer than two windows
    """
    index = pd.DatetimeIndex(window_starts)
    if len(index) < 2:
        return ZERO_PERIOD
    distinct = (index[1:] - index[:-1]).unique()
    if len(distinct) > 1:
        raise DataFormatError(
            "forecast windows have a non-uniform interval: this is currently not supported"
        )
    return pd.Timedelta(distinct[0])
