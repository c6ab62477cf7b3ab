"""
Delegating result processor implementation.

This module provides a composite implementation of the ResultProcessor interface
that delegates processing to multiple child processors. It ensures that
failures in one processor don't affect the others.
"""

import logging
from typing import List

from http_loadtime.contracts import ResultProcessor
from http_loadtime.domain import ProbeResult

# Module logger
logger = logging.getLogger(__name__)


class DelegatingResultProcessor(ResultProcessor):
    """
    A concrete implementation of ResultProcessor that follows the Composite pattern.

    This class holds a list of other ResultProcessor instances and delegates the
    'process' and 'flush' calls to each of them in order. Children run one after
    the other so the output of the reporting processors keeps target order.

    The implementation is fault-tolerant: if one processor fails, the others
    will still be executed.
    """

    def __init__(self, processors: List[ResultProcessor]) -> None:
        """
        Initializes the delegator with a list of processors to delegate to.

        Args:
            processors: A list of objects that adhere to the ResultProcessor interface.
        """
        self._processors: List[ResultProcessor] = processors

    async def _process_with_one(self, processor: ResultProcessor, result: ProbeResult) -> None:
        """
        A helper method to safely run a single processor.

        It wraps the individual process call in a try-except block, ensuring
        that one processor's failure does not affect any others. All exceptions
        are caught and logged, but not propagated.

        Args:
            processor: The individual processor to run.
            result: The resolved target to be processed.
        """
        try:
            await processor.process(result)
        except Exception as e:
            logger.exception(
                f"Processor '{type(processor).__name__}' failed for target {result.target.name} with error: {e}",
            )

    async def process(self, result: ProbeResult) -> None:
        """
        Processes a single ProbeResult by delegating to all child processors.

        Args:
            result: The resolved target to be processed by all child processors.
        """
        for processor in self._processors:
            await self._process_with_one(processor, result)

    async def flush(self) -> None:
        """
        Flushes every child processor, isolating failures the same way as process.
        """
        for processor in self._processors:
            try:
                await processor.flush()
            except Exception as e:
                logger.exception(f"Processor '{type(processor).__name__}' failed to flush: {e}")
