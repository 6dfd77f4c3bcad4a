"""
Serialization helpers for stored time series.

JSON carries metadata records (pandas timestamps and periods, numpy scalars);
.npy files carry the shaped float64 arrays.
"""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder for timestamps, periods and numpy values."""

    def default(self, obj):
        if isinstance(obj, (datetime, pd.Timestamp)):
            return obj.isoformat()
        if isinstance(obj, (timedelta, pd.Timedelta)):
            # ISO 8601 duration, parsed back by pd.Timedelta
            return pd.Timedelta(obj).isoformat()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


def save_json(data: Any, path: Union[str, Path], **kwargs) -> None:
    """Save data to JSON with timestamp and numpy support."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, cls=DateTimeEncoder, indent=2, **kwargs)
    logger.debug(f"Saved JSON to {path}")


def load_json(path: Union[str, Path]) -> Any:
    with open(path, "r") as f:
        return json.load(f)


def save_array(array: np.ndarray, path: Union[str, Path]) -> None:
    """
    Save a numeric array to .npy as float64.

    Values are coerced to float64 and never pickled.
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    np.save(path, np.asarray(array, dtype=np.float64), allow_pickle=False)
    logger.debug(f"Saved array of shape {np.shape(array)} to {path}")


def load_array(path: Union[str, Path]) -> np.ndarray:
    """Load a .npy array written by save_array."""
    array = np.load(path, allow_pickle=False)
    logger.debug(f"Loaded array of shape {array.shape} from {path}")
    return array
