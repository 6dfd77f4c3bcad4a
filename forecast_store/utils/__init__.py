"""Error types, logging setup, configuration, and JSON helpers."""

from forecast_store.utils.error_handling import (
    ArgumentError,
    ConflictingInputsError,
    DataFormatError,
    FeatureNotImplementedError,
    ForecastStoreError,
    InvalidRange,
)
from forecast_store.utils.logging_config import get_logger, setup_logging
from forecast_store.utils.serialization import load_json, save_json

__all__ = [
    "ArgumentError",
    "ConflictingInputsError",
    "DataFormatError",
    "FeatureNotImplementedError",
    "ForecastStoreError",
    "InvalidRange",
    "get_logger",
    "setup_logging",
    "load_json",
    "save_json",
]
