"""
Unit tests for the regex chain validator.

This module contains tests for match option parsing, line-oriented matching
and the ordered header/body chain evaluation.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

from unittest.mock import patch

import pytest

from http_loadtime.domain import MatchOptions, SplitResponse
from http_loadtime.validation.regex_chain import (
    compile_pattern,
    has_match,
    parse_match_options,
    validate_chain,
)


@pytest.fixture
def response() -> SplitResponse:
    """
    Creates a split response for testing.

    Returns:
        SplitResponse: Header lines and a joined body.
    """
    return SplitResponse(
        header="HTTP/1.1 200 OK\nContent-Type: text/html; charset=utf-8\nServer: nginx\n",
        body="<html><title>Online Shop</title><p>In stock</p></html>",
    )


def test_parse_match_options_should_parse_default_flags() -> None:
    """
    Tests that the default extended, case-insensitive flags are recognised.
    """
    # Act
    options = parse_match_options("-Ei")

    # Assert
    assert options == MatchOptions(ignore_case=True)


def test_parse_match_options_should_parse_long_and_bundled_flags() -> None:
    """
    Tests long flags, bundled short flags and the case-sensitivity override.
    """
    # Act
    options = parse_match_options("-iwv --fixed-strings --line-regexp --no-ignore-case")

    # Assert
    assert options == MatchOptions(
        ignore_case=False,
        fixed_strings=True,
        word_regexp=True,
        line_regexp=True,
        invert_match=True,
    )


def test_parse_match_options_should_ignore_unknown_flags(caplog: pytest.LogCaptureFixture) -> None:
    """
    Tests that unsupported flags are logged and skipped.
    """
    # Act
    options = parse_match_options("-iz --color")

    # Assert
    assert options == MatchOptions(ignore_case=True)
    assert "-z" in caplog.text
    assert "--color" in caplog.text


def test_has_match_should_succeed_when_any_line_matches() -> None:
    """
    Tests that matching is line-oriented and anchors apply per line.
    """
    # Arrange
    pattern = compile_pattern("^Server: nginx$", MatchOptions())

    # Act & Assert
    assert has_match(pattern, "HTTP/1.1 200 OK\nServer: nginx\n") is True
    assert has_match(pattern, "HTTP/1.1 200 OK\nX-Server: nginx\n") is False


def test_has_match_should_treat_empty_text_as_one_empty_line() -> None:
    """
    Tests that an empty header or body is matched as a single empty line.
    """
    # Arrange
    anything = compile_pattern("anything", MatchOptions())
    blank = compile_pattern("^$", MatchOptions())

    # Act & Assert
    assert has_match(anything, "") is False
    assert has_match(anything, "", invert=True) is True
    assert has_match(blank, "") is True
    assert has_match(blank, "\n") is True
    assert has_match(blank, "content\n") is False


def test_has_match_should_look_for_a_non_matching_line_when_inverted() -> None:
    """
    Tests inverted matching semantics.
    """
    # Arrange
    pattern = compile_pattern("error", MatchOptions())

    # Act & Assert
    assert has_match(pattern, "error\nerror\n", invert=True) is False
    assert has_match(pattern, "error\nfine\n", invert=True) is True


@pytest.mark.parametrize(
    "pattern, options, text, expected",
    [
        ("ONLINE shop", MatchOptions(ignore_case=True), "Online Shop", True),
        ("ONLINE shop", MatchOptions(), "Online Shop", False),
        ("a.b", MatchOptions(fixed_strings=True), "axb", False),
        ("a.b", MatchOptions(fixed_strings=True), "a.b", True),
        ("stock", MatchOptions(word_regexp=True), "in stock now", True),
        ("stock", MatchOptions(word_regexp=True), "stockpile", False),
        ("ok", MatchOptions(line_regexp=True), "ok", True),
        ("ok", MatchOptions(line_regexp=True), "not ok", False),
    ],
)
def test_compile_pattern_should_honour_match_options(
    pattern: str, options: MatchOptions, text: str, expected: bool
) -> None:
    """
    Tests the effect of each match option on a compiled pattern.
    """
    # Act
    compiled = compile_pattern(pattern, options)

    # Assert
    assert has_match(compiled, text) is expected


def test_validate_chain_should_succeed_without_patterns(response: SplitResponse) -> None:
    """
    Tests that an empty chain always validates.
    """
    # Act & Assert
    assert validate_chain(response, (), (), "-Ei") is True


def test_validate_chain_should_succeed_when_every_pattern_matches(
    response: SplitResponse,
) -> None:
    """
    Tests a chain whose header and body patterns all match.
    """
    # Act
    result = validate_chain(
        response,
        header_patterns=("^HTTP/1\\.1 200", "content-type: text/html"),
        body_patterns=("<title>online shop</title>",),
        match_options="-Ei",
    )

    # Assert
    assert result is True


def test_validate_chain_should_fail_on_header_mismatch(response: SplitResponse) -> None:
    """
    Tests that a header pattern that does not match fails validation.
    """
    # Act & Assert
    assert validate_chain(response, ("^HTTP/1\\.1 500",), (), "-Ei") is False


def test_validate_chain_should_fail_on_body_mismatch(response: SplitResponse) -> None:
    """
    Tests that a body pattern that does not match fails validation.
    """
    # Act & Assert
    assert validate_chain(response, (), ("out of stock",), "-Ei") is False


def test_validate_chain_should_match_blank_pattern_against_empty_body(
    response: SplitResponse,
) -> None:
    """
    Tests that an empty body satisfies a pattern requiring a blank line.
    """
    # Arrange
    empty = response._replace(body="")

    # Act & Assert
    assert validate_chain(empty, (), ("^$",), "-Ei") is True
    assert validate_chain(empty, (), ("<html>",), "-Eiv") is True
    assert validate_chain(response, (), ("^$",), "-Ei") is False


def test_validate_chain_should_stop_at_first_mismatch(response: SplitResponse) -> None:
    """
    Tests that no pattern after the first mismatch is evaluated.
    """
    # Arrange
    header_patterns = ("^HTTP/1\\.1 200", "X-Missing", "never-evaluated")
    body_patterns = ("In stock", "never-evaluated-either")

    # Act
    with patch(
        "http_loadtime.validation.regex_chain.compile_pattern", wraps=compile_pattern
    ) as mock_compile:
        result = validate_chain(response, header_patterns, body_patterns, "-Ei")

    # Assert
    assert result is False
    compiled = [call.args[0] for call in mock_compile.call_args_list]
    assert compiled == ["^HTTP/1\\.1 200", "In stock", "X-Missing"]


def test_validate_chain_should_check_longer_chain_after_shorter_one_ends(
    response: SplitResponse,
) -> None:
    """
    Tests that a body chain continues past the end of a shorter header chain.
    """
    # Act
    result = validate_chain(
        response,
        header_patterns=("200 OK",),
        body_patterns=("<html>", "missing-in-body"),
        match_options="-Ei",
    )

    # Assert
    assert result is False


def test_validate_chain_should_treat_invalid_pattern_as_mismatch(
    response: SplitResponse, caplog: pytest.LogCaptureFixture
) -> None:
    """
    Tests that a pattern that does not compile fails validation with a warning.
    """
    # Act
    result = validate_chain(response, ("(unclosed",), (), "-Ei")

    # Assert
    assert result is False
    assert "Invalid header pattern #1" in caplog.text
