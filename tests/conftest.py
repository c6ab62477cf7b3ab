"""
Shared fixtures for the probe's test suite.
"""

from typing import Any, Callable

import pytest

from http_loadtime.domain import UrlTarget


@pytest.fixture
def make_target() -> Callable[..., UrlTarget]:
    """
    Provides a factory for UrlTarget records with sensible test values.

    Returns:
        Callable[..., UrlTarget]: A factory accepting field overrides as keyword arguments.
    """

    def _make(**overrides: Any) -> UrlTarget:
        values = dict(
            index=1,
            name="site",
            url="https://example.com",
            label="site",
            post_data=None,
            timeout=20.0,
            error_value=30.0,
            regex_error_value=40.0,
            match_options="-Ei",
            client_options="",
            join_lines=True,
            warning=10.0,
            critical=20.0,
            max=40.0,
            header_patterns=(),
            body_patterns=(),
        )
        values.update(overrides)
        return UrlTarget(**values)

    return _make
