"""
Line protocol output for the hosting metrics collector.

This module renders the graph metadata and field declarations printed in
config mode, and provides the result processor that prints one value line
per resolved target in fetch mode. Fields are named ``loadtime<N>`` where N is
the target's 1-based sequence number.
"""

import logging
import sys
from typing import List, Optional, Sequence, TextIO

from http_loadtime.config.constants import FIELD_PREFIX
from http_loadtime.contracts import ResultProcessor
from http_loadtime.domain import GraphInfo, ProbeResult, UrlTarget

# Module logger
logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """
    Formats a value with at most two decimals and no trailing zeros.

    >>> format_number(30.0), format_number(1.234), format_number(7.5)
    ('30', '1.23', '7.5')
    """
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def field_name(target: UrlTarget) -> str:
    """Returns the reported field name of a target."""
    return f"{FIELD_PREFIX}{target.index}"


def render_config(graph: GraphInfo, targets: Sequence[UrlTarget]) -> List[str]:
    """
    Renders the config mode output.

    Warning and critical thresholds are only declared when strictly positive.

    Args:
        graph: Graph-level metadata.
        targets: The targets with a URL, in sequence order.

    Returns:
        List[str]: The output lines, without line terminators.
    """
    lines = [
        f"graph_title {graph.title}",
        f"graph_args {graph.args}",
        f"graph_scale {graph.scale}",
        f"graph_vlabel {graph.vlabel}",
        f"graph_category {graph.category}",
        f"graph_info {graph.info}",
    ]
    for target in targets:
        field = field_name(target)
        lines.append(f"{field}.label {target.label}")
        lines.append(f"{field}.info {target.url}")
        lines.append(f"{field}.min 0")
        lines.append(f"{field}.max {format_number(target.max)}")
        if target.warning > 0:
            lines.append(f"{field}.warning {format_number(target.warning)}")
        if target.critical > 0:
            lines.append(f"{field}.critical {format_number(target.critical)}")
    return lines


def write_lines(lines: Sequence[str], stream: Optional[TextIO] = None) -> None:
    """Writes lines to the collector's stream, standard output by default."""
    out = stream if stream is not None else sys.stdout
    for line in lines:
        out.write(f"{line}\n")
    out.flush()


class MuninValueReporter(ResultProcessor):
    """
    A result processor that prints ``loadtime<N>.value <number>`` lines.

    Lines are buffered while targets are processed and written on flush, so
    the collector reads a single contiguous block.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        """
        Initialize a new MuninValueReporter.

        Args:
            stream: Destination of the value lines; standard output when None.
        """
        self._stream: Optional[TextIO] = stream
        self._buffer: List[str] = []

    async def process(self, result: ProbeResult) -> None:
        """
        Buffers the value line of a resolved target.

        Args:
            result: The resolved target.
        """
        line = f"{field_name(result.target)}.value {format_number(result.load_time.value)}"
        self._buffer.append(line)

    async def flush(self) -> None:
        """Writes and clears the buffered value lines."""
        if not self._buffer:
            return
        lines = list(self._buffer)
        self._buffer.clear()
        logger.debug(f"Writing {len(lines)} value line(s).")
        write_lines(lines, self._stream)
