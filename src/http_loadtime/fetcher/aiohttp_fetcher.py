"""
HTTP fetcher implementation using the aiohttp library.

This module provides an implementation of the TargetFetcher interface that uses
the aiohttp library to perform the timed request of a target. The raw response
(status line, header lines, blank line, body) is captured to a transient
artifact file for later validation.
"""

import contextlib
import logging
import os
import tempfile
import time
from typing import List, Optional, Tuple

import aiohttp

from http_loadtime.contracts import TargetFetcher
from http_loadtime.domain import ClientOptions, FetchResult, UrlTarget
from http_loadtime.fetcher.client_options import parse_client_options

# Module logger
logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "http_loadtime."
ARTIFACT_SUFFIX = ".response"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _status_line(response: aiohttp.ClientResponse) -> bytes:
    version = response.version or aiohttp.HttpVersion11
    line = f"HTTP/{version.major}.{version.minor} {response.status} {response.reason or ''}"
    return line.rstrip().encode("latin-1", errors="replace") + b"\r\n"


def _header_block(response: aiohttp.ClientResponse) -> bytes:
    return b"".join(name + b": " + value + b"\r\n" for name, value in response.raw_headers)


def _request_headers(target: UrlTarget, options: ClientOptions) -> List[Tuple[str, str]]:
    headers = list(options.headers)
    if target.post_data is not None and not any(
        name.lower() == "content-type" for name, _ in headers
    ):
        headers.append(("Content-Type", FORM_CONTENT_TYPE))
    return headers


class AiohttpFetcher(TargetFetcher):
    """
    A concrete implementation of TargetFetcher using the aiohttp library.

    This class handles the entire lifecycle of a single timed fetch: creating
    the response artifact, issuing the request with the target's client options
    and timeout, measuring wall-clock elapsed time and recording the transport
    outcome. The caller owns the artifact of every returned result and must remove
    it; when the fetch is cancelled the fetcher removes it itself.
    """

    def __init__(self, session: aiohttp.ClientSession, temp_dir: Optional[str] = None) -> None:
        """
        Initializes the fetcher with a shared aiohttp ClientSession.

        Args:
            session: An active aiohttp.ClientSession to be used for requests.
            temp_dir: Directory for response artifacts; the system default when None.
        """
        self._session: aiohttp.ClientSession = session
        self._temp_dir: Optional[str] = temp_dir

    async def fetch(self, target: UrlTarget) -> FetchResult:
        """
        Performs a timed HTTP GET (or POST when a payload is configured) against the target.

        When the artifact cannot be created no request is issued and the result
        carries no artifact path. Any exception raised while requesting or
        capturing the response marks the transport as failed.

        Args:
            target: The UrlTarget to fetch.

        Returns:
            FetchResult: Elapsed seconds, transport outcome and artifact path.
        """
        logger.debug(f"Starting fetch for target {target.name}: {target.method.value} {target.url}")
        options: ClientOptions = parse_client_options(target.client_options)

        try:
            fd, artifact_path = tempfile.mkstemp(
                prefix=ARTIFACT_PREFIX, suffix=ARTIFACT_SUFFIX, dir=self._temp_dir
            )
        except OSError as e:
            logger.error(f"Could not create response artifact for target {target.name}: {e}")
            return FetchResult(
                target=target,
                elapsed=0.0,
                transport_succeeded=False,
                artifact_path=None,
                error=e,
            )

        error: Optional[Exception] = None
        status_code: Optional[int] = None
        start_time: float = time.time()

        try:
            with os.fdopen(fd, "wb") as artifact:
                try:
                    async with self._session.request(
                        target.method.value,
                        target.url,
                        data=target.post_data.encode() if target.post_data is not None else None,
                        headers=_request_headers(target, options),
                        timeout=aiohttp.ClientTimeout(
                            total=target.timeout if target.timeout > 0 else None
                        ),
                        allow_redirects=options.follow_redirects,
                        max_redirects=options.max_redirects,
                        ssl=options.verify_ssl,
                        auth=aiohttp.BasicAuth(*options.basic_auth) if options.basic_auth else None,
                    ) as response:
                        status_code = response.status
                        artifact.write(_status_line(response))
                        artifact.write(_header_block(response))
                        artifact.write(b"\r\n")
                        if options.fail_on_http_error:
                            response.raise_for_status()
                        artifact.write(await response.read())

                except Exception as e:
                    error = e
                    logger.debug(f"Error fetching {target.url}", exc_info=True)
        except BaseException:
            # Cancelled or interrupted: no FetchResult reaches the caller to clean up
            with contextlib.suppress(OSError):
                os.unlink(artifact_path)
            raise

        end_time: float = time.time()
        elapsed = max(end_time - start_time, 0.0)
        if error is None:
            logger.debug(
                f"Fetched {target.url} in {elapsed:.3f}s with status {status_code}"
            )
        else:
            logger.info(f"Transport failed for {target.url} after {elapsed:.3f}s: {error!r}")

        return FetchResult(
            target=target,
            elapsed=elapsed,
            transport_succeeded=error is None,
            artifact_path=artifact_path,
            status_code=status_code,
            error=error,
        )
