"""Error types raised by the forecast store."""

from typing import Any


class ForecastStoreError(Exception):
    """Base class for errors raised by this package."""


class DataFormatError(ForecastStoreError, ValueError):
    """
    Raised when user data violates a structural invariant that cannot be
    reconciled, such as non-uniform resolution or an ambiguous payload shape.
    """


class ArgumentError(ForecastStoreError, ValueError):
    """Raised when a caller supplies a value outside the documented domain."""


class InvalidRange(ForecastStoreError, ValueError):
    """Raised when a value lies outside its allowed range."""


class ConflictingInputsError(ForecastStoreError, ValueError):
    """Raised when two inputs that must agree do not."""


class FeatureNotImplementedError(ForecastStoreError, NotImplementedError):
    """
    Indicates that a feature happens to not be implemented for the given data
    even though it could be.

    If it is a category mistake to imagine the feature defined on that data,
    use ArgumentError or TypeError instead.
    """

    def __init__(self, feature: Any, data: Any = None):
        if data is None:
            message = str(feature)
        else:
            message = f"{feature} not currently implemented for {_describe(data)}"
        super().__init__(message)
        self.feature = feature
        self.data = data


def _describe(data: Any) -> str:
    if isinstance(data, type):
        return data.__name__
    name = getattr(data, "name", None)
    if isinstance(name, str) and hasattr(data, "value"):
        # Enum members
        return f"{type(data).__name__}.{name}"
    return repr(data)
