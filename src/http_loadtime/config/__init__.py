"""
Configuration module for the URL load-time probe.

This module provides functionality to parse command-line arguments and
environment variables to create the runtime context of a probe invocation.
It defines default values and help text for all process-level parameters.
"""

import argparse
import os
from typing import Any

from http_loadtime.config.constants import (
    DEFAULT_LOGGING_CONFIG_FILE,
    DEFAULT_LOGGING_TYPE,
    DIRTYCONFIG_ENV,
)
from http_loadtime.config.probe_context import ProbeContext
from http_loadtime.domain import ProbeMode


def get_context() -> ProbeContext:
    """
    Parse command-line arguments and environment variables to create a runtime context.

    The first positional argument selects the invocation mode; when it is absent
    the probe runs in fetch mode. For each option, it first checks for a
    command-line argument, then falls back to an environment variable, and
    finally uses a default value.

    Returns:
        ProbeContext: A runtime context object containing all parsed settings.
    """
    parser = argparse.ArgumentParser(
        description="Measures the load time of the configured URLs and reports it "
        "in the collector's key/value line protocol."
    )

    parser.add_argument(
        "mode",
        nargs="?",
        type=str,
        default=ProbeMode.FETCH.value,
        choices=[mode.value for mode in ProbeMode],
        help="autoconf: check that the probe can run.\n"
        "config: print graph metadata and field declarations.\n"
        "fetch (or nothing): measure every target and print its value.",
    )

    parser.add_argument(
        "-pn",
        "--probe-name",
        type=str,
        default=os.getenv(
            "HTTP_LOADTIME_PROBE_NAME", os.path.basename(parser.prog) or "http_loadtime"
        ),
        help="Specifies the name of this probe instance, added to every log record.\n"
        "If not provided, the value is read from the HTTP_LOADTIME_PROBE_NAME environment variable.\n"
        "If that is also absent, the name the probe was invoked under is used.",
    )

    parser.add_argument(
        "-lt",
        "--logging-type",
        type=str,
        default=os.getenv("HTTP_LOADTIME_LOGGING_TYPE", DEFAULT_LOGGING_TYPE),
        help="Specifies the logging configuration type to use.\n"
        "Allowed values: dev, prod, custom (case insensitive).\n"
        "For 'dev' and 'prod', system will use built-in configurations.\n"
        "For 'custom', the --logging-config-file argument is required.",
    )

    parser.add_argument(
        "-lcf",
        "--logging-config-file",
        type=str,
        default=os.getenv("HTTP_LOADTIME_LOGGING_CONFIG_FILE", DEFAULT_LOGGING_CONFIG_FILE),
        help="Path to custom logging configuration file.\n"
        "Required when --logging-type is set to 'custom'.",
    )

    # Parse the command-line arguments
    args: Any = parser.parse_args()

    # The hosting collector advertises dirty config support through the environment
    dirty_config = os.getenv(DIRTYCONFIG_ENV, "") == "1"

    return ProbeContext(
        mode=ProbeMode(args.mode),
        probe_name=args.probe_name,
        logging_type=args.logging_type,
        logging_config_file=args.logging_config_file,
        dirty_config=dirty_config,
    )
