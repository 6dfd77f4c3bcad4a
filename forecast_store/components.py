"""
Registry of the components that own time series, and read-time application
of scaling factor multipliers.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar, Union

import pandas as pd

from forecast_store.data.series import TimeSeriesData
from forecast_store.data.structs import ElementKind
from forecast_store.utils.error_handling import ArgumentError, FeatureNotImplementedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Component:
    """Minimal owning entity: anything with a unique name per type."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class Components:
    """
    Stores components by type, then by name. Names are unique per type but not
    across types.
    """

    def __init__(self):
        self._data: Dict[type, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return sum(len(by_name) for by_name in self._data.values())

    def add_component(self, component: Any) -> None:
        """
        Add a component.

        Raises:
            ArgumentError: If the name is already stored for the component's type
        """
        component_type = type(component)
        by_name = self._data.setdefault(component_type, {})
        if component.name in by_name:
            raise ArgumentError(f"{component.name} is already stored for type {component_type.__name__}")
        by_name[component.name] = component
        logger.debug(f"Added component {component_type.__name__} name={component.name}")

    def remove_component(self, component_type: Type[T], name: str) -> T:
        """
        Remove and return a component by type and name.

        Raises:
            ArgumentError: If the component is not stored
        """
        if component_type not in self._data:
            raise ArgumentError(f"component {component_type.__name__} is not stored")
        if name not in self._data[component_type]:
            raise ArgumentError(f"component {component_type.__name__} name={name} is not stored")

        component = self._data[component_type].pop(name)
        if not self._data[component_type]:
            del self._data[component_type]
        logger.debug(f"Removed component {component_type.__name__} name={name}")
        return component

    def remove_components(self, component_type: type) -> None:
        """Remove all components of exactly this type."""
        if component_type not in self._data:
            raise ArgumentError(f"component {component_type.__name__} is not stored")
        del self._data[component_type]
        logger.debug(f"Removed all components of type {component_type.__name__}")

    def get_component(self, component_type: Type[T], name: str) -> Optional[T]:
        """Return the component of exactly this type with this name, or None."""
        return self._data.get(component_type, {}).get(name)

    def get_components(self, component_type: type) -> Iterator[Any]:
        """Yield every component whose type is component_type or a subclass of it."""
        for stored_type in list(self._data):
            if issubclass(stored_type, component_type):
                yield from list(self._data[stored_type].values())

    def get_components_by_name(self, component_type: type, name: str) -> List[Any]:
        """
        Return components named `name` across all stored subclasses of
        component_type. Use get_component when the exact type is known.
        """
        return [
            by_name[name]
            for stored_type, by_name in self._data.items()
            if issubclass(stored_type, component_type) and name in by_name
        ]

    def iterate_components(self) -> Iterator[Any]:
        for by_name in list(self._data.values()):
            yield from list(by_name.values())

    def summary(self) -> pd.DataFrame:
        """One row per stored type with its base classes and component count."""
        rows = []
        for stored_type, by_name in self._data.items():
            parents = [c.__name__ for c in stored_type.__mro__[1:] if c is not object]
            rows.append({
                "ConcreteType": stored_type.__name__,
                "SuperTypes": " <: ".join(parents),
                "Count": len(by_name),
            })
        df = pd.DataFrame(rows, columns=["ConcreteType", "SuperTypes", "Count"])
        return df.sort_values("ConcreteType").reset_index(drop=True)


def get_time_series_array(
    component: Any,
    series: TimeSeriesData,
    start_time: Optional[Any] = None,
    length: Optional[int] = None,
) -> Union[pd.Series, pd.DataFrame]:
    """
    Return a window of the series with the scaling factor multiplier applied.

    Args:
        component: Component owning the series; passed to the multiplier
        series: Source series
        start_time: Window start, defaults to the first window
        length: Number of timesteps to return

    Returns:
        The window values multiplied by series.scaling_factor_multiplier(component),
        or the raw window when the series has no multiplier
    """
    window = series.get_window(
        series.initial_timestamp if start_time is None else start_time, length
    )
    multiplier = series.scaling_factor_multiplier
    if multiplier is None:
        return window
    if series.element_kind != ElementKind.CONSTANT:
        raise FeatureNotImplementedError("scaling_factor_multiplier", series.element_kind)

    factor = multiplier(component)
    logger.debug(f"Applying scaling factor {factor} from {component!r} to {series.name}")
    return window * factor
