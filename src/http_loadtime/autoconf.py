"""
Capability check for the ``autoconf`` invocation mode.

The hosting collector runs ``autoconf`` to decide whether the probe can be
enabled. Five capabilities are checked in order; the first missing one
determines the exit code (1 to 5).
"""

import importlib
import logging
import os
import tempfile
import time
from typing import Callable, List, Optional, Sequence, TextIO, Tuple

from http_loadtime.config.constants import DEFAULT_MATCH_OPTS
from http_loadtime.processor.munin_reporter import write_lines
from http_loadtime.validation.regex_chain import compile_pattern, has_match, parse_match_options

# Module logger
logger = logging.getLogger(__name__)

_PROBE_BYTES = b"http_loadtime autoconf\n"
_CLOCK_STEP = 0.01

Check = Tuple[str, Callable[[], bool]]


def _http_client_available() -> bool:
    try:
        importlib.import_module("aiohttp")
    except ImportError as e:
        logger.warning(f"HTTP client cannot be imported: {e}")
        return False
    return True


def _clock_advances() -> bool:
    start = time.time()
    time.sleep(_CLOCK_STEP)
    return time.time() > start


def _temp_storage_writable() -> bool:
    fd, path = tempfile.mkstemp(prefix="http_loadtime.autoconf.")
    try:
        with os.fdopen(fd, "wb") as artifact:
            artifact.write(_PROBE_BYTES)
    finally:
        os.unlink(path)
    return True


def _pattern_matcher_available() -> bool:
    options = parse_match_options(DEFAULT_MATCH_OPTS)
    return has_match(compile_pattern("AUTOCONF", options), _PROBE_BYTES.decode())


def _artifact_readable() -> bool:
    fd, path = tempfile.mkstemp(prefix="http_loadtime.autoconf.")
    try:
        with os.fdopen(fd, "wb") as artifact:
            artifact.write(_PROBE_BYTES)
        with open(path, "rb") as artifact:
            return artifact.read() == _PROBE_BYTES
    finally:
        os.unlink(path)


DEFAULT_CHECKS: List[Check] = [
    ("HTTP client (aiohttp)", _http_client_available),
    ("wall clock", _clock_advances),
    ("temporary storage", _temp_storage_writable),
    ("pattern matcher", _pattern_matcher_available),
    ("artifact reader", _artifact_readable),
]


def run_autoconf(checks: Sequence[Check] = DEFAULT_CHECKS, stream: Optional[TextIO] = None) -> int:
    """
    Runs the capability checks and prints ``yes`` or ``no``.

    A check that raises is treated as failed.

    Args:
        checks: Named checks, in order; the position of the first failing one is the exit code.
        stream: Destination of the answer; standard output when None.

    Returns:
        int: 0 when every check passes, else the 1-based position of the first failure.
    """
    for position, (name, check) in enumerate(checks, start=1):
        try:
            available = check()
        except Exception as e:
            logger.warning(f"Capability check '{name}' raised: {e}")
            available = False

        if not available:
            logger.warning(f"Missing capability: {name}")
            write_lines(["no"], stream)
            return position

    write_lines(["yes"], stream)
    return 0
