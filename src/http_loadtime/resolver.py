"""
Derivation of the single load-time value reported for a target.

The measured elapsed time is only reported when the fetch stored its
response, the transport succeeded (or transport errors are ignored because
the error value is 0) and every configured pattern matched. Each failure
class reports its own override value instead.
"""

import logging

from http_loadtime.domain import FetchResult, LoadTime, LoadTimeOutcome, UrlTarget
from http_loadtime.validation.regex_chain import validate_chain
from http_loadtime.validation.splitter import split_response

# Module logger
logger = logging.getLogger(__name__)


def resolve_load_time(result: FetchResult, target: UrlTarget) -> LoadTime:
    """
    Combines a fetch outcome and pattern validation into the reported value.

    Decision order, first match wins:
    1. No artifact: storage failure value (twice the error value).
    2. Transport failed and the error value is positive: the error value.
    3. A pattern did not match: the regex error value.
    4. Otherwise the elapsed seconds of the fetch.

    Args:
        result: The outcome of the target's fetch.
        target: The target with its resolved override values and patterns.

    Returns:
        LoadTime: The value to report and the outcome it was derived from.
    """
    if result.artifact_path is None:
        return LoadTime(target.storage_error_value, LoadTimeOutcome.STORAGE_ERROR)

    if not result.transport_succeeded and target.error_value > 0:
        return LoadTime(target.error_value, LoadTimeOutcome.TRANSPORT_ERROR)

    if target.header_patterns or target.body_patterns:
        try:
            with open(result.artifact_path, "rb") as artifact:
                raw = artifact.read()
        except OSError as e:
            logger.error(f"Could not read response artifact {result.artifact_path}: {e}")
            return LoadTime(target.storage_error_value, LoadTimeOutcome.STORAGE_ERROR)

        response = split_response(raw, target.join_lines)
        if not validate_chain(
            response, target.header_patterns, target.body_patterns, target.match_options
        ):
            return LoadTime(target.regex_error_value, LoadTimeOutcome.REGEX_MISMATCH)

    return LoadTime(result.elapsed, LoadTimeOutcome.OK)
