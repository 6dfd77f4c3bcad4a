"""
Configuration management utilities.

Besides generic YAML/JSON loading, this reads descriptor files that list the
time series to build from CSV data:

    defaults:
      type: Deterministic
      resolution: 1 hour
    time_series:
      - name: max_active_power
        component_name: gen1
        data_file: gen1.csv
        normalization_factor: max
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from forecast_store.data.loaders import TimeSeriesParsedInfo
from forecast_store.data.resolution import parse_period

logger = logging.getLogger(__name__)

PACKAGE_SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"
DESCRIPTOR_SCHEMA = "time_series_descriptors.json"


class ConfigManager:
    """
    Manages loading, validation, and merging of configurations.
    """

    def __init__(self, config_dir: Optional[str] = None, schema_dir: Optional[str] = None):
        self.config_dir = Path(config_dir) if config_dir else Path("config")
        self.schema_dir = Path(schema_dir) if schema_dir else PACKAGE_SCHEMA_DIR

    def load_config(self, config_name: str, schema_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Load a configuration file (YAML or JSON).
        Optionally validate against a schema.

        Args:
            config_name: Name of config file (e.g. 'time_series.yaml')
            schema_name: Name of schema file in schema_dir

        Returns:
            Loaded configuration dictionary
        """
        config_path = self.config_dir / config_name

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            if config_path.suffix in (".yaml", ".yml"):
                config = yaml.safe_load(f)
            elif config_path.suffix == ".json":
                config = json.load(f)
            else:
                raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

        if config is None:
            config = {}

        if schema_name:
            self.validate_config(config, schema_name)

        return config

    def validate_config(self, config: Dict[str, Any], schema_name: str) -> None:
        """
        Validate configuration against a schema.

        Raises:
            FileNotFoundError: If the schema file is missing
            ValueError: If validation fails; the message names the failing path
        """
        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with open(schema_path, "r") as f:
            schema = json.load(f)

        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.exceptions.ValidationError as e:
            path_str = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
            error_msg = f"Configuration validation failed at '{path_str}': {e.message}"
            logger.error(error_msg)
            raise ValueError(error_msg) from e

        logger.info(f"Configuration successfully validated against {schema_name}")

    def merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two configurations. Values in override win.
        """
        merged = base.copy()
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self.merge_configs(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get_value(self, config: Dict[str, Any], path: str, default: Any = None) -> Any:
        """
        Get a value from configuration using dot notation.

        Args:
            config: Configuration dictionary
            path: Dot-separated path (e.g., 'defaults.resolution')
            default: Default value if path not found
        """
        current = config
        for key in path.split("."):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def parse_time_series_descriptors(self, config: Dict[str, Any]) -> List[TimeSeriesParsedInfo]:
        """
        Expand a descriptor configuration into TimeSeriesParsedInfo records.

        Each entry is merged over `defaults`, then the expanded document is
        validated against the descriptor schema. Relative data_file paths are
        resolved against config_dir.
        """
        defaults = self.get_value(config, "defaults", {}) or {}
        entries = [self.merge_configs(defaults, entry) for entry in config.get("time_series", [])]
        self.validate_config({"time_series": entries}, DESCRIPTOR_SCHEMA)

        infos = []
        for entry in entries:
            data_file = Path(entry["data_file"])
            if not data_file.is_absolute():
                data_file = self.config_dir / data_file
            resolution = entry.get("resolution")
            infos.append(TimeSeriesParsedInfo(
                name=entry["name"],
                series_type=entry["type"],
                component_name=entry["component_name"],
                data_file=data_file,
                resolution=parse_period(resolution) if resolution is not None else None,
                normalization_factor=entry.get("normalization_factor", 1.0),
                scaling_factor_multiplier=entry.get("scaling_factor_multiplier"),
                features=dict(entry.get("features", {})),
            ))

        logger.info(f"Parsed {len(infos)} time series descriptors")
        return infos

    def load_time_series_descriptors(self, config_name: str) -> List[TimeSeriesParsedInfo]:
        """Load a descriptor file and expand it."""
        return self.parse_time_series_descriptors(self.load_config(config_name))
