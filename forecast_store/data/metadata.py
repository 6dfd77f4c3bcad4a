"""Lightweight metadata records describing stored forecasts."""

import importlib
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

import pandas as pd

from forecast_store.data.resolution import format_period, parse_period
from forecast_store.utils.error_handling import ArgumentError

logger = logging.getLogger(__name__)


def multiplier_to_path(func: Optional[Callable]) -> Optional[str]:
    """Encode a module-level callable as 'module:qualname'."""
    if func is None:
        return None
    module = getattr(func, "__module__", None)
    qualname = getattr(func, "__qualname__", None)
    if not module or not qualname or "<" in qualname:
        raise ArgumentError(
            f"scaling_factor_multiplier {func!r} must be a module-level function to be serialized"
        )
    return f"{module}:{qualname}"


def multiplier_from_path(path: Optional[str]) -> Optional[Callable]:
    """Resolve a 'module:qualname' path produced by multiplier_to_path."""
    if path is None:
        return None
    module_name, _, qualname = path.partition(":")
    if not qualname:
        raise ArgumentError(f"invalid scaling_factor_multiplier path: {path}")
    obj: Any = importlib.import_module(module_name)
    for attr in qualname.split("."):
        obj = getattr(obj, attr)
    return obj


@dataclass
class ForecastMetadata:
    """
    Metadata for a windowed forecast, usable without loading its payload.

    Attributes:
        name: User-defined name
        resolution: Spacing of timesteps within a window
        initial_timestamp: Start of the first window
        interval: Spacing of window start times (zero for a single window)
        count: Number of windows
        horizon: Number of timesteps per window
        time_series_uuid: Identifier of the out-of-line payload
        scaling_factor_multiplier: Applied by the owning component at read time
        features: Annotations that distinguish otherwise identical series
    """
    name: str
    resolution: pd.Timedelta
    initial_timestamp: pd.Timestamp
    interval: pd.Timedelta
    count: int
    horizon: int
    time_series_uuid: uuid.UUID
    scaling_factor_multiplier: Optional[Callable] = None
    features: Dict[str, Any] = field(default_factory=dict)

    series_type = "Forecast"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.series_type,
            "name": self.name,
            "resolution": format_period(self.resolution),
            "initial_timestamp": self.initial_timestamp.isoformat(),
            "interval": format_period(self.interval),
            "count": self.count,
            "horizon": self.horizon,
            "time_series_uuid": str(self.time_series_uuid),
            "scaling_factor_multiplier": multiplier_to_path(self.scaling_factor_multiplier),
            "features": dict(self.features),
        }

    @classmethod
    def _common_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "name": data["name"],
            "resolution": parse_period(data["resolution"]),
            "initial_timestamp": pd.Timestamp(data["initial_timestamp"]),
            "interval": parse_period(data["interval"]),
            "count": int(data["count"]),
            "horizon": int(data["horizon"]),
            "time_series_uuid": uuid.UUID(data["time_series_uuid"]),
            "scaling_factor_multiplier": multiplier_from_path(data.get("scaling_factor_multiplier")),
            "features": dict(data.get("features", {})),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForecastMetadata":
        """Create from dictionary."""
        return cls(**cls._common_kwargs(data))


@dataclass
class DeterministicMetadata(ForecastMetadata):
    series_type = "Deterministic"


@dataclass
class ProbabilisticMetadata(ForecastMetadata):
    percentiles: List[float] = field(default_factory=list)

    series_type = "Probabilistic"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["percentiles"] = [float(p) for p in self.percentiles]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProbabilisticMetadata":
        return cls(**cls._common_kwargs(data), percentiles=list(data["percentiles"]))


@dataclass
class ScenariosMetadata(ForecastMetadata):
    scenario_count: int = 0

    series_type = "Scenarios"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["scenario_count"] = self.scenario_count
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScenariosMetadata":
        return cls(**cls._common_kwargs(data), scenario_count=int(data["scenario_count"]))


@dataclass
class SingleTimeSeriesMetadata:
    """Metadata for one contiguous series. There is no interval."""
    name: str
    resolution: pd.Timedelta
    initial_timestamp: pd.Timestamp
    length: int
    time_series_uuid: uuid.UUID
    scaling_factor_multiplier: Optional[Callable] = None
    features: Dict[str, Any] = field(default_factory=dict)

    series_type = "SingleTimeSeries"

    @property
    def count(self) -> int:
        return 1

    @property
    def horizon(self) -> int:
        return self.length

    @property
    def interval(self) -> None:
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.series_type,
            "name": self.name,
            "resolution": format_period(self.resolution),
            "initial_timestamp": self.initial_timestamp.isoformat(),
            "length": self.length,
            "time_series_uuid": str(self.time_series_uuid),
            "scaling_factor_multiplier": multiplier_to_path(self.scaling_factor_multiplier),
            "features": dict(self.features),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SingleTimeSeriesMetadata":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            resolution=parse_period(data["resolution"]),
            initial_timestamp=pd.Timestamp(data["initial_timestamp"]),
            length=int(data["length"]),
            time_series_uuid=uuid.UUID(data["time_series_uuid"]),
            scaling_factor_multiplier=multiplier_from_path(data.get("scaling_factor_multiplier")),
            features=dict(data.get("features", {})),
        )


METADATA_TYPES: Dict[str, Type] = {
    "Deterministic": DeterministicMetadata,
    "Probabilistic": ProbabilisticMetadata,
    "Scenarios": ScenariosMetadata,
    "SingleTimeSeries": SingleTimeSeriesMetadata,
}


def metadata_from_dict(data: Dict[str, Any]):
    """Rebuild any metadata record from its dictionary form."""
    series_type = data.get("type")
    if series_type not in METADATA_TYPES:
        raise ArgumentError(f"unknown time series metadata type: {series_type}")
    return METADATA_TYPES[series_type].from_dict(data)
