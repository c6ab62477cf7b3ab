"""
Core worker implementation for the URL load-time probe.

This module provides the ProbeWorker class, which runs the per-target
pipeline (fetch, resolve, process) over the configured targets. Targets are
handled one at a time in declaration order; each target's response artifact
is removed before the next target starts.
"""

import logging
import os
from typing import Callable, Optional, Sequence

from .contracts import ResultProcessor, TargetFetcher
from .domain import FetchResult, LoadTime, LoadTimeOutcome, ProbeResult, UrlTarget
from .resolver import resolve_load_time

LoadTimeResolver = Callable[[FetchResult, UrlTarget], LoadTime]


def discard_artifact(path: Optional[str]) -> None:
    """Removes a response artifact, tolerating one that is already gone."""
    if path is None:
        return
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


class ProbeWorker:
    """
    Coordinates the probe workflow for one invocation.

    For every target the fetcher produces a FetchResult, the resolver turns it
    into a LoadTime and the processor receives the resulting ProbeResult. The
    processor is flushed once all targets are done.
    """

    def __init__(
        self,
        fetcher: TargetFetcher,
        processor: ResultProcessor,
        resolver: LoadTimeResolver = resolve_load_time,
    ) -> None:
        """
        Initializes a new ProbeWorker instance.

        Args:
            fetcher: Component that performs the timed fetch of a target.
            processor: Component that processes resolved targets.
            resolver: Function deriving the reported value from a fetch.
        """
        self._fetcher: TargetFetcher = fetcher
        self._processor: ResultProcessor = processor
        self._resolver: LoadTimeResolver = resolver
        self._logger: logging.Logger = logging.getLogger(__name__)

    async def _probe(self, target: UrlTarget) -> None:
        result: Optional[FetchResult] = None
        try:
            result = await self._fetcher.fetch(target)
            load_time = self._resolver(result, target)
        except Exception as e:
            self._logger.exception(f"Pipeline failed for target {target.name} with error: {e}")
            if result is None:
                result = FetchResult(
                    target=target,
                    elapsed=0.0,
                    transport_succeeded=False,
                    artifact_path=None,
                    error=e,
                )
            # Every target with a URL reports a value
            load_time = LoadTime(target.storage_error_value, LoadTimeOutcome.PIPELINE_ERROR)
        finally:
            if result is not None:
                discard_artifact(result.artifact_path)

        await self._processor.process(ProbeResult(target=target, fetch=result, load_time=load_time))

    async def run(self, targets: Sequence[UrlTarget]) -> None:
        """
        Probes every target in order, then flushes the processor.

        A target whose fetch or resolution fails is reported at its storage
        error value. A processing failure is logged and does not stop the
        remaining targets.

        Args:
            targets: The targets to probe, in sequence order.
        """
        self._logger.info(f"Probing {len(targets)} target(s).")

        for target in targets:
            try:
                await self._probe(target)
            except Exception as e:
                self._logger.exception(
                    f"Processing failed for target {target.name} with error: {e}"
                )

        self._logger.debug("Flushing results processor...")
        await self._processor.flush()
