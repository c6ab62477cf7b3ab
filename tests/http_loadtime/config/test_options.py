"""
Unit tests for the target settings resolution module.

This module contains tests for the OptionResolver class and the target and
graph loaders, ensuring that per-target settings override global ones, that
built-in and derived defaults apply, and that pattern chains stop at the
first gap.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

import pytest

from http_loadtime.config.constants import (
    DEFAULT_CLIENT_OPTS,
    DEFAULT_GRAPH_CATEGORY,
    DEFAULT_GRAPH_TITLE,
    DEFAULT_MATCH_OPTS,
)
from http_loadtime.config.options import (
    ConfigurationError,
    OptionResolver,
    load_graph_info,
    load_targets,
    target_names,
)
from http_loadtime.domain import HttpMethod


def test_resolve_should_prefer_per_target_value_over_global() -> None:
    """
    Tests that a per-target setting overrides the global setting.
    """
    # Arrange
    resolver = OptionResolver({"timeout": "10", "timeout_shop": "5"})

    # Act
    shop = resolver.resolve_number("shop", "timeout", 20)
    blog = resolver.resolve_number("blog", "timeout", 20)

    # Assert
    assert shop == 5.0
    assert blog == 10.0


def test_resolve_should_fall_back_to_builtin_default() -> None:
    """
    Tests that the built-in default is used when neither layer defines a setting.
    """
    # Arrange
    resolver = OptionResolver({})

    # Act
    result = resolver.resolve("shop", "match_opts", DEFAULT_MATCH_OPTS)

    # Assert
    assert result == DEFAULT_MATCH_OPTS


def test_resolve_should_treat_empty_values_as_absent() -> None:
    """
    Tests that an empty per-target value does not hide the global value.
    """
    # Arrange
    resolver = OptionResolver({"client_opts": "-k", "client_opts_shop": "  "})

    # Act
    result = resolver.resolve("shop", "client_opts", DEFAULT_CLIENT_OPTS)

    # Assert
    assert result == "-k"


def test_resolve_number_should_skip_non_numeric_layer(caplog: pytest.LogCaptureFixture) -> None:
    """
    Tests that a non-numeric value falls through to the next layer with a warning.
    """
    # Arrange
    resolver = OptionResolver({"error_value_shop": "lots", "error_value": "12"})

    # Act
    result = resolver.resolve_number("shop", "error_value", 30)

    # Assert
    assert result == 12.0
    assert "error_value_shop" in caplog.text


@pytest.mark.parametrize(
    "raw, expected",
    [("yes", True), ("1", True), ("On", True), ("no", False), ("0", False), ("false", False)],
)
def test_resolve_flag_should_accept_common_boolean_spellings(raw: str, expected: bool) -> None:
    """
    Tests that boolean settings accept the usual spellings.
    """
    # Arrange
    resolver = OptionResolver({"join_lines_shop": raw})

    # Act
    result = resolver.resolve_flag("shop", "join_lines", "yes")

    # Assert
    assert result is expected


def test_pattern_chain_should_stop_at_first_missing_index() -> None:
    """
    Tests that a gap in the pattern indices terminates the chain.
    """
    # Arrange
    resolver = OptionResolver(
        {
            "regex_body_1_shop": "first",
            "regex_body_2_shop": "second",
            "regex_body_4_shop": "unreachable",
        }
    )

    # Act
    result = resolver.pattern_chain("shop", "regex_body")

    # Assert
    assert result == ("first", "second")


def test_pattern_chain_should_be_empty_when_index_one_is_missing() -> None:
    """
    Tests that a chain starting at index 2 is never read.
    """
    # Arrange
    resolver = OptionResolver({"regex_header_2_shop": "HTTP/1.1 200"})

    # Act
    result = resolver.pattern_chain("shop", "regex_header")

    # Assert
    assert result == ()


def test_target_names_should_raise_when_names_are_missing() -> None:
    """
    Tests that a missing name list is a configuration error.
    """
    # Act & Assert
    with pytest.raises(ConfigurationError, match="names"):
        target_names({})


def test_target_names_should_raise_when_names_are_blank() -> None:
    """
    Tests that a blank name list is a configuration error.
    """
    # Act & Assert
    with pytest.raises(ConfigurationError):
        target_names({"names": "   "})


def test_load_targets_should_apply_builtin_defaults() -> None:
    """
    Tests that a target with only a URL receives every built-in default.
    """
    # Arrange
    settings = {"names": "shop", "url_shop": "https://shop.example.com/"}

    # Act
    targets = load_targets(settings)

    # Assert
    assert len(targets) == 1
    target = targets[0]
    assert target.index == 1
    assert target.name == "shop"
    assert target.label == "shop"
    assert target.url == "https://shop.example.com/"
    assert target.post_data is None
    assert target.method is HttpMethod.GET
    assert target.timeout == 20.0
    assert target.error_value == 30.0
    assert target.regex_error_value == 40.0
    assert target.storage_error_value == 60.0
    assert target.match_options == DEFAULT_MATCH_OPTS
    assert target.client_options == DEFAULT_CLIENT_OPTS
    assert target.join_lines is True
    assert target.warning == 10.0
    assert target.critical == 20.0
    assert target.max == 40.0
    assert target.header_patterns == ()
    assert target.body_patterns == ()


def test_load_targets_should_derive_thresholds_from_resolved_timeout() -> None:
    """
    Tests that warning, critical and max follow an overridden timeout.
    """
    # Arrange
    settings = {
        "names": "shop blog",
        "url_shop": "https://shop.example.com/",
        "url_blog": "https://blog.example.com/",
        "timeout": "8",
        "timeout_blog": "3",
        "critical_blog": "2.5",
    }

    # Act
    shop, blog = load_targets(settings)

    # Assert
    assert (shop.warning, shop.critical, shop.max) == (4.0, 8.0, 16.0)
    assert (blog.warning, blog.critical, blog.max) == (1.5, 2.5, 6.0)


def test_load_targets_should_skip_names_without_url_without_consuming_an_index() -> None:
    """
    Tests that a name without a URL is skipped and later targets keep contiguous indices.
    """
    # Arrange
    settings = {
        "names": "first missing third",
        "url_first": "https://one.example.com/",
        "url_third": "https://three.example.com/",
    }

    # Act
    targets = load_targets(settings)

    # Assert
    assert [(t.index, t.name) for t in targets] == [(1, "first"), (2, "third")]


def test_load_targets_should_not_use_a_global_url() -> None:
    """
    Tests that the URL is only read from the per-target setting.
    """
    # Arrange
    settings = {"names": "shop", "url": "https://global.example.com/"}

    # Act
    targets = load_targets(settings)

    # Assert
    assert targets == []


def test_load_targets_should_read_per_target_settings() -> None:
    """
    Tests that label, payload, flags and both pattern chains are read per target.
    """
    # Arrange
    settings = {
        "names": "api",
        "url_api": "https://api.example.com/login",
        "label_api": "Login API",
        "post_data_api": "user=probe&password=secret",
        "join_lines_api": "no",
        "match_opts_api": "-F",
        "regex_header_1_api": "^HTTP/1.1 200",
        "regex_header_2_api": "Content-Type: application/json",
        "regex_body_1_api": '"token"',
    }

    # Act
    (target,) = load_targets(settings)

    # Assert
    assert target.label == "Login API"
    assert target.post_data == "user=probe&password=secret"
    assert target.method is HttpMethod.POST
    assert target.join_lines is False
    assert target.match_options == "-F"
    assert target.header_patterns == ("^HTTP/1.1 200", "Content-Type: application/json")
    assert target.body_patterns == ('"token"',)


def test_load_graph_info_should_apply_defaults_and_overrides() -> None:
    """
    Tests that graph metadata uses defaults unless overridden.
    """
    # Arrange
    settings = {"graph_title": "Shop latency"}

    # Act
    graph = load_graph_info(settings)

    # Assert
    assert graph.title == "Shop latency"
    assert graph.category == DEFAULT_GRAPH_CATEGORY
    assert graph.args == "--base 1000 -l 0"
    assert graph.scale == "no"
    assert load_graph_info({}).title == DEFAULT_GRAPH_TITLE
