"""
Splitting of a captured raw response into header and body text.

The captured artifact holds the status line, the header lines, a blank line
and the body. The split is a two-state line scanner that moves from the
header to the body on the first empty line.
"""

from enum import Enum
from typing import List

from http_loadtime.domain import SplitResponse


class _ScanState(Enum):
    IN_HEADER = 1
    IN_BODY = 2


def split_response(raw: bytes, join_body: bool) -> SplitResponse:
    """
    Splits raw response bytes into header text and body text.

    Carriage returns are stripped and a final newline is appended when missing
    before scanning. Header lines are newline-terminated. Body lines are
    newline-terminated, or concatenated without separator when ``join_body``
    is set so that a pattern can span what were several lines.

    Args:
        raw: The captured response bytes.
        join_body: Whether body lines are concatenated.

    Returns:
        SplitResponse: The header and body text.
    """
    text = raw.decode("utf-8", errors="replace").replace("\r", "")
    if not text.endswith("\n"):
        text += "\n"

    header: List[str] = []
    body: List[str] = []
    state = _ScanState.IN_HEADER

    # The final element after the last newline is always empty
    for line in text.split("\n")[:-1]:
        if state is _ScanState.IN_HEADER:
            if line == "":
                state = _ScanState.IN_BODY
            else:
                header.append(line + "\n")
        elif join_body:
            body.append(line)
        else:
            body.append(line + "\n")

    return SplitResponse(header="".join(header), body="".join(body))
