"""
Logging setup for the URL load-time probe.

Standard output carries the collector's line protocol, so every built-in
configuration logs to standard error only. A logging configuration that
cannot be applied must not cost the collector its answer: the entry point
catches LoggingSetupError and installs the fallback handler instead.
"""

import json
import logging.config
import os
import sys
from typing import Any, Dict

from http_loadtime.config import ProbeContext

BUILTIN_CONFIGS: Dict[str, str] = {
    "dev": "logging-config-dev.json",
    "prod": "logging-config-prod.json",
}
CUSTOM_LOGGING_TYPE = "custom"
FALLBACK_FORMAT = "%(levelname)s [%(probe_name)s] %(name)s: %(message)s"


class LoggingSetupError(Exception):
    """Raised when the requested logging configuration cannot be applied."""


def logging_config_path(context: ProbeContext) -> str:
    """
    Returns the dictConfig file selected by the context's logging type.

    The built-in types resolve to the JSON files shipped beside this module;
    ``custom`` uses the file given on the command line or in the environment.
    The type is matched case-insensitively.

    Args:
        context: Runtime context carrying the logging type and custom file.

    Returns:
        str: Path of the JSON configuration to load.

    Raises:
        LoggingSetupError: For an unknown type, or ``custom`` without a file.
    """
    logging_type = context.logging_type.strip().lower()
    if logging_type in BUILTIN_CONFIGS:
        return os.path.join(os.path.dirname(__file__), BUILTIN_CONFIGS[logging_type])
    if logging_type == CUSTOM_LOGGING_TYPE:
        if not context.logging_config_file:
            raise LoggingSetupError("The custom logging type needs a logging config file.")
        return context.logging_config_file
    raise LoggingSetupError(
        f"Unknown logging type {context.logging_type!r}; expected dev, prod or custom."
    )


def _read_config(path: str) -> Dict[str, Any]:
    try:
        with open(path) as f:
            return json.load(f)
    except OSError as err:
        raise LoggingSetupError(f"Cannot read logging config {path}: {err}") from err
    except json.JSONDecodeError as err:
        raise LoggingSetupError(f"Logging config {path} is not valid JSON: {err}") from err


def configure_logging(context: ProbeContext) -> None:
    """
    Applies the logging configuration selected by the context.

    Args:
        context: Runtime context containing logging settings.

    Raises:
        LoggingSetupError: If the configuration cannot be located, read or applied.
    """
    path = logging_config_path(context)
    config = _read_config(path)
    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as err:
        raise LoggingSetupError(f"Logging config {path} was rejected: {err}") from err

    _tag_with_probe_name(context.probe_name)
    logging.debug(f"Logging configured from {path}.")


def configure_fallback_logging(context: ProbeContext) -> None:
    """Replaces any handlers with a single WARNING-level handler on standard error."""
    logging.basicConfig(
        stream=sys.stderr, level=logging.WARNING, format=FALLBACK_FORMAT, force=True
    )
    _tag_with_probe_name(context.probe_name)


def _tag_with_probe_name(probe_name: str) -> None:
    # Root logger filters never see records propagated from child loggers,
    # so each root handler gets the filter as well.
    root_logger = logging.getLogger()
    probe_filter = _ProbeNameFilter(probe_name)
    root_logger.addFilter(probe_filter)
    for handler in root_logger.handlers:
        handler.addFilter(probe_filter)


class _ProbeNameFilter(logging.Filter):
    """Stamps each record with the probe instance name the formatters print."""

    def __init__(self, probe_name: str) -> None:
        super().__init__()
        self.probe_name: str = probe_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.probe_name = self.probe_name
        return True
