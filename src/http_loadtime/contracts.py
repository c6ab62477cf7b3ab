"""
Core interfaces for the URL load-time probe.

This module defines the abstract base classes that form the seams of the
probe's pipeline. These interfaces establish a clear contract for
implementations and keep the fetcher and the reporting side pluggable.
"""

import abc

from .domain import FetchResult, ProbeResult, UrlTarget


class TargetFetcher(abc.ABC):
    """
    Abstract interface for a component that performs the timed fetch of a single target.

    Its responsibility is to encapsulate the network I/O for a given UrlTarget,
    capture the raw response to a transient artifact and return a structured result.
    """

    @abc.abstractmethod
    async def fetch(self, target: UrlTarget) -> FetchResult:
        """
        Performs a timed HTTP request against the given target.

        Args:
            target: The UrlTarget to fetch, containing URL, payload, timeout and client options.

        Returns:
            FetchResult: The elapsed time, the transport outcome and the path of the
                captured response artifact (None if it could not be created).

        Raises:
            Exception: Implementations should handle network errors internally and encode
                them in the FetchResult rather than raising them.
        """
        pass


class ResultProcessor(abc.ABC):
    """
    Abstract interface for a component that processes a resolved target.

    This enables a pipeline pattern where multiple processors can act on the
    outcome of a probe to perform tasks like emitting metric lines or logging
    failure classes.
    """

    @abc.abstractmethod
    async def process(self, result: ProbeResult) -> None:
        """
        Processes or buffers a single ProbeResult object.

        Args:
            result: A target together with its fetch outcome and resolved load time.

        Returns:
            None
        """
        pass

    @abc.abstractmethod
    async def flush(self) -> None:
        """
        Forces the output of any buffered results.

        This method is called once every target has been processed. For processors
        that do not buffer data, this method can be a no-op.

        Returns:
            None
        """
        pass
