"""
Failure logging for resolved targets.

This module provides a result processor that records, in the probe's log, why
a target reported an override value instead of its measured load time.
"""

import logging

from http_loadtime.contracts import ResultProcessor
from http_loadtime.domain import LoadTimeOutcome, ProbeResult

# Module logger
logger = logging.getLogger(__name__)


class OutcomeLoggingProcessor(ResultProcessor):
    """
    A result processor that logs every target whose load time is a failure value.

    Successful targets are logged at debug level only.
    """

    async def process(self, result: ProbeResult) -> None:
        """
        Logs the outcome of a resolved target.

        Args:
            result: The resolved target.
        """
        target = result.target
        load_time = result.load_time

        if load_time.outcome is LoadTimeOutcome.OK:
            logger.debug(f"Target {target.name} loaded in {load_time.value:.3f}s")
        elif load_time.outcome is LoadTimeOutcome.TRANSPORT_ERROR:
            logger.warning(
                f"Target {target.name} ({target.url}) failed to load: "
                f"{result.fetch.error!r}. Reporting {load_time.value}."
            )
        elif load_time.outcome is LoadTimeOutcome.STORAGE_ERROR:
            logger.warning(
                f"Target {target.name} ({target.url}) response could not be stored. "
                f"Reporting {load_time.value}."
            )
        elif load_time.outcome is LoadTimeOutcome.REGEX_MISMATCH:
            logger.warning(
                f"Target {target.name} ({target.url}) response did not match its patterns "
                f"(status {result.fetch.status_code}). Reporting {load_time.value}."
            )
        elif load_time.outcome is LoadTimeOutcome.PIPELINE_ERROR:
            logger.warning(
                f"Target {target.name} ({target.url}) could not be probed: "
                f"{result.fetch.error!r}. Reporting {load_time.value}."
            )

    async def flush(self) -> None:
        """Nothing is buffered."""
        pass
