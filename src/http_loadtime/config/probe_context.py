"""
Runtime context for the URL load-time probe.

This module defines a data structure that holds the process-level parameters
of a single probe invocation. It serves as a central point for passing that
configuration throughout the application.
"""

from typing import NamedTuple

from http_loadtime.domain import ProbeMode


class ProbeContext(NamedTuple):
    """
    A data structure containing the process-level parameters of one invocation.

    This class is immutable and is created by parsing command-line arguments
    and environment variables. Per-target settings are not part of it; they
    are loaded separately by the option resolver.

    Attributes:
        mode: The invocation mode (autoconf, config or fetch).
        probe_name: Identifier of this probe instance, injected into log records.
        logging_type: Type of logging configuration to use (dev, prod, or custom).
        logging_config_file: Path to custom logging configuration file (if logging_type is 'custom').
        dirty_config: Whether config mode should also emit the values.
    """

    mode: ProbeMode
    probe_name: str
    logging_type: str
    logging_config_file: str
    dirty_config: bool
