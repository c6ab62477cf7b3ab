"""
Domain models for the URL load-time probe.

This module defines the core data structures used throughout the application,
including probed targets, client and match options, fetch results, split
responses and resolved load times. These models serve as the foundation for
the probe's data flow.
"""

from enum import Enum
from typing import Mapping, NamedTuple, Optional, Tuple


class HttpMethod(str, Enum):
    """
    Defines the HTTP methods the probe issues as a type-safe enumeration.

    Inheriting from 'str' allows enum members to behave like strings,
    making them compatible with libraries expecting string values.
    """

    GET = "GET"
    POST = "POST"


class ProbeMode(str, Enum):
    """Invocation modes selected by the first positional argument."""

    AUTOCONF = "autoconf"
    CONFIG = "config"
    FETCH = "fetch"


class LoadTimeOutcome(str, Enum):
    """
    Classification of how a target's load time was derived.

    OK means the measured elapsed time is reported; every other member names
    the failure class whose override value was reported instead.
    """

    OK = "ok"
    TRANSPORT_ERROR = "transport_error"
    STORAGE_ERROR = "storage_error"
    REGEX_MISMATCH = "regex_mismatch"
    PIPELINE_ERROR = "pipeline_error"


class ClientOptions(NamedTuple):
    """
    HTTP client behaviour parsed from a curl-style option string.

    Attributes:
        headers: Extra request headers, in the order they were given.
        follow_redirects: Whether 3xx responses are followed.
        max_redirects: Upper bound on followed redirects.
        verify_ssl: Whether TLS certificates are verified.
        fail_on_http_error: Whether an HTTP status >= 400 counts as a transport failure.
        basic_auth: Optional (user, password) pair for HTTP basic authentication.
    """

    headers: Tuple[Tuple[str, str], ...] = ()
    follow_redirects: bool = False
    max_redirects: int = 50
    verify_ssl: bool = True
    fail_on_http_error: bool = False
    basic_auth: Optional[Tuple[str, str]] = None


class MatchOptions(NamedTuple):
    """
    Pattern matching behaviour parsed from a grep-style option string.

    Attributes:
        ignore_case: Match without regard to letter case.
        fixed_strings: Treat the pattern as a literal string.
        word_regexp: Only match whole words.
        line_regexp: Only match whole lines.
        invert_match: Succeed when at least one line does not match.
    """

    ignore_case: bool = False
    fixed_strings: bool = False
    word_regexp: bool = False
    line_regexp: bool = False
    invert_match: bool = False


class UrlTarget(NamedTuple):
    """
    A single URL to probe with its fully resolved settings.

    Targets are built once from the environment, in declaration order. Only
    targets with a URL become UrlTarget records, so `index` is the 1-based
    sequence number used in the reported field names.

    Attributes:
        index: The 1-based sequence number among reported targets.
        name: The short name the target is configured under.
        url: The URL to fetch.
        label: The display label of the graphed field.
        post_data: Request body; when set the request is a POST.
        timeout: Client-side timeout in seconds.
        error_value: Value reported on transport failure.
        regex_error_value: Value reported when a pattern does not match.
        match_options: Raw grep-style pattern matching flags.
        client_options: Raw curl-style HTTP client flags.
        join_lines: Whether body lines are concatenated before matching.
        warning: Warning threshold; not declared unless positive.
        critical: Critical threshold; not declared unless positive.
        max: Upper bound declared for the graphed field.
        header_patterns: Ordered header pattern chain (index 1 first).
        body_patterns: Ordered body pattern chain (index 1 first).
    """

    index: int
    name: str
    url: str
    label: str
    post_data: Optional[str]
    timeout: float
    error_value: float
    regex_error_value: float
    match_options: str
    client_options: str
    join_lines: bool
    warning: float
    critical: float
    max: float
    header_patterns: Tuple[str, ...]
    body_patterns: Tuple[str, ...]

    @property
    def method(self) -> HttpMethod:
        """The HTTP method implied by the presence of a POST payload."""
        return HttpMethod.POST if self.post_data is not None else HttpMethod.GET

    @property
    def storage_error_value(self) -> float:
        """Value reported when the response artifact could not be created."""
        return 2 * self.error_value


class FetchResult(NamedTuple):
    """
    The outcome of a single timed fetch.

    Attributes:
        target: The target that was fetched.
        elapsed: Wall-clock seconds spent on the whole request.
        transport_succeeded: Whether the client completed without error.
        artifact_path: Path to the captured raw response, or None if it could not be created.
        status_code: The HTTP status code received, or None if none was received.
        error: The exception that made the transport fail, if any.
    """

    target: UrlTarget
    elapsed: float
    transport_succeeded: bool
    artifact_path: Optional[str]
    status_code: Optional[int] = None
    error: Optional[Exception] = None


class SplitResponse(NamedTuple):
    """Header and body text of a captured response."""

    header: str
    body: str


class LoadTime(NamedTuple):
    """The numeric value reported for a target and how it was derived."""

    value: float
    outcome: LoadTimeOutcome


class ProbeResult(NamedTuple):
    """
    A resolved target, passed through the result processing pipeline.

    Attributes:
        target: The target that was probed.
        fetch: The raw fetch outcome.
        load_time: The value to report and its classification.
    """

    target: UrlTarget
    fetch: FetchResult
    load_time: LoadTime


class GraphInfo(NamedTuple):
    """Graph-level metadata declared in config mode."""

    title: str
    args: str
    scale: str
    vlabel: str
    category: str
    info: str


# Mapping type of the flat settings namespace supplied by the collector.
Settings = Mapping[str, str]
