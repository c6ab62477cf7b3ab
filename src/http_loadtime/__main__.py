"""
Main entry point for the URL load-time probe.

This module parses the invocation mode, sets up logging and dispatches to the
autoconf check, the config declaration or the fetch run. In fetch mode it
creates the HTTP session, wires the fetcher and result processors into a
worker and probes every configured target once.
"""

import asyncio
import logging
import os
import sys
from typing import Optional, Sequence, TextIO

from http_loadtime.autoconf import run_autoconf
from http_loadtime.config import ProbeContext, get_context
from http_loadtime.config.logging_config import (
    LoggingSetupError,
    configure_fallback_logging,
    configure_logging,
)
from http_loadtime.config.options import (
    ConfigurationError,
    load_graph_info,
    load_targets,
)
from http_loadtime.domain import ProbeMode, Settings, UrlTarget
from http_loadtime.processor.delegating_processor import DelegatingResultProcessor
from http_loadtime.processor.munin_reporter import (
    MuninValueReporter,
    render_config,
    write_lines,
)
from http_loadtime.processor.outcome_logging_processor import OutcomeLoggingProcessor
from http_loadtime.worker import ProbeWorker


async def main(
    context: ProbeContext, targets: Sequence[UrlTarget], stream: Optional[TextIO] = None
) -> None:
    """
    Probe every target and print its value line.

    Args:
        context: Runtime context of the invocation.
        targets: The targets to probe, in sequence order.
        stream: Destination of the value lines; standard output when None.

    Returns:
        None
    """
    # Imported here so autoconf can report a missing HTTP client instead of failing to start
    from http_loadtime.config.http_config import get_http_session
    from http_loadtime.fetcher.aiohttp_fetcher import AiohttpFetcher

    logger: logging.Logger = logging.getLogger(__name__)
    logger.debug("Starting fetch run...")

    http_session = get_http_session(context)
    logger.debug("configured: http_session")

    worker: ProbeWorker = ProbeWorker(
        fetcher=AiohttpFetcher(session=http_session),
        processor=DelegatingResultProcessor(
            [
                OutcomeLoggingProcessor(),
                MuninValueReporter(stream=stream),
            ]
        ),
    )

    try:
        await worker.run(targets)
    finally:
        await http_session.close()
        logger.debug("Fetch run complete.")


def run_probe(context: ProbeContext, settings: Settings, stream: Optional[TextIO] = None) -> int:
    """
    Dispatch one invocation according to its mode.

    Args:
        context: Runtime context of the invocation.
        settings: The flat settings namespace supplied by the collector.
        stream: Destination of the line protocol; standard output when None.

    Returns:
        int: The process exit code.
    """
    if context.mode is ProbeMode.AUTOCONF:
        return run_autoconf(stream=stream)

    try:
        targets = load_targets(settings)
    except ConfigurationError as e:
        write_lines([f"Configuration error: {e}"], stream)
        return 1

    if context.mode is ProbeMode.CONFIG:
        write_lines(render_config(load_graph_info(settings), targets), stream)
        if not context.dirty_config:
            return 0

    asyncio.run(main(context, targets, stream))
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        # Parse command-line arguments and environment variables
        probe_context: ProbeContext = get_context()

        # Configure logging based on the context; stdout stays reserved for the collector
        try:
            configure_logging(probe_context)
        except LoggingSetupError as e:
            configure_fallback_logging(probe_context)
            logging.warning(f"{e} Logging to standard error with the fallback format.")

        sys.exit(run_probe(probe_context, os.environ))
    except KeyboardInterrupt:
        logging.info("Probe interrupted by user (Ctrl+C).")
        sys.exit(130)


if __name__ == "__main__":
    run()
