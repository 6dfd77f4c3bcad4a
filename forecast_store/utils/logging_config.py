"""Logging configuration for the forecast store."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "forecast_store"


class JSONFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
            "lineNo": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Structured fields passed as extra={"props": {...}}
        if hasattr(record, "props"):
            log_obj.update({k: str(v) for k, v in record.props.items()})

        return json.dumps(log_obj)


def setup_logging(
    log_level: Union[str, int] = "INFO",
    log_dir: Optional[str] = None,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Configure logging for the package.

    Library code only creates module loggers; applications call this once at
    startup.

    Args:
        log_level: Logging level (INFO, DEBUG, etc.)
        log_dir: Optional directory for JSON-lines log files. When given,
            all records go to app.jsonl and errors also go to errors.jsonl.
        logger_name: Logger to configure. Defaults to the package logger.

    Returns:
        The configured logger
    """
    target = logging.getLogger(logger_name)
    target.setLevel(log_level)

    # Reconfiguring replaces earlier handlers
    for handler in list(target.handlers):
        target.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    target.addHandler(console_handler)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(Path(log_dir) / "app.jsonl")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(JSONFormatter())
        target.addHandler(file_handler)

        error_handler = logging.FileHandler(Path(log_dir) / "errors.jsonl")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())
        target.addHandler(error_handler)

    target.info(f"Logging configured with level {logging.getLevelName(target.level)}")
    return target


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance under the package namespace."""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
