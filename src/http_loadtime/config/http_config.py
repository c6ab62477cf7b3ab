"""
HTTP client configuration module for the URL load-time probe.

This module provides functionality to create and configure the HTTP client
session used by the fetcher. The session is built so that every target is
measured from a cold start: no pooled connections and no cookies carry over
from one target to the next.
"""

import logging

import aiohttp

from http_loadtime.config import ProbeContext

# Module logger
logger = logging.getLogger(__name__)


def get_http_session(context: ProbeContext) -> aiohttp.ClientSession:
    """
    Create and configure an HTTP client session based on the provided configuration.

    Must be called from inside a running event loop.

    Args:
        context: Runtime context of the probe invocation.

    Returns:
        aiohttp.ClientSession: A session whose connections are closed after each response.
    """
    logger.debug(f"Creating HTTP session for probe {context.probe_name}")
    return aiohttp.ClientSession(
        connector=aiohttp.TCPConnector(force_close=True),
        cookie_jar=aiohttp.DummyCookieJar(),
    )
