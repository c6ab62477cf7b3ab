"""
Target settings resolution for the URL load-time probe.

The hosting collector supplies every setting through a flat namespace (the
process environment). A setting can be given globally (``timeout``) and
overridden per target (``timeout_<name>``). This module resolves those layers
on top of the built-in defaults and turns the namespace into an ordered list
of UrlTarget records, pattern chains included, once per invocation.
"""

import logging
from typing import List, Optional, Tuple

from http_loadtime.config.constants import (
    CLIENT_OPTS_SETTING,
    CRITICAL_SETTING,
    CRITICAL_TIMEOUT_FACTOR,
    DEFAULT_CLIENT_OPTS,
    DEFAULT_ERROR_VALUE,
    DEFAULT_GRAPH_ARGS,
    DEFAULT_GRAPH_CATEGORY,
    DEFAULT_GRAPH_INFO,
    DEFAULT_GRAPH_SCALE,
    DEFAULT_GRAPH_TITLE,
    DEFAULT_GRAPH_VLABEL,
    DEFAULT_JOIN_LINES,
    DEFAULT_MATCH_OPTS,
    DEFAULT_REGEX_ERROR_VALUE,
    DEFAULT_TIMEOUT,
    ERROR_VALUE_SETTING,
    JOIN_LINES_SETTING,
    LABEL_SETTING,
    MATCH_OPTS_SETTING,
    MAX_SETTING,
    MAX_TIMEOUT_FACTOR,
    NAMES_SETTING,
    POST_DATA_SETTING,
    REGEX_BODY_SETTING,
    REGEX_ERROR_VALUE_SETTING,
    REGEX_HEADER_SETTING,
    TIMEOUT_SETTING,
    URL_SETTING,
    WARNING_SETTING,
    WARNING_TIMEOUT_FACTOR,
)
from http_loadtime.domain import GraphInfo, Settings, UrlTarget

# Module logger
logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "yes", "true", "on"})
_FALSE_VALUES = frozenset({"0", "no", "false", "off"})


class ConfigurationError(Exception):
    """Raised when the settings do not allow the probe to run at all."""


class OptionResolver:
    """
    Resolves a target's effective settings from the layered namespace.

    Lookup order for ``resolve(name, key)`` is ``<key>_<name>``, then ``<key>``,
    then the caller's built-in default. Empty values count as absent.
    """

    def __init__(self, settings: Settings) -> None:
        """
        Initializes the resolver over a settings namespace.

        Args:
            settings: The flat settings namespace, usually ``os.environ``.
        """
        self._settings: Settings = settings

    def _lookup(self, key: str) -> Optional[str]:
        value = self._settings.get(key)
        if value is None or not value.strip():
            return None
        return value

    def get(self, name: str, key: str) -> Optional[str]:
        """
        Returns the per-target value of a setting, else the global one, else None.

        Args:
            name: The target name.
            key: The setting key, without the target suffix.

        Returns:
            Optional[str]: The raw setting value, or None if neither layer defines it.
        """
        value = self._lookup(f"{key}_{name}")
        if value is None:
            value = self._lookup(key)
        return value

    def get_own(self, name: str, key: str) -> Optional[str]:
        """Returns a setting that only exists per target (``<key>_<name>``)."""
        return self._lookup(f"{key}_{name}")

    def resolve(self, name: str, key: str, default: str) -> str:
        """
        Returns the effective string value of a setting for a target.

        Args:
            name: The target name.
            key: The setting key, without the target suffix.
            default: The built-in default.

        Returns:
            str: The per-target, global or built-in value, in that order.
        """
        value = self.get(name, key)
        return default if value is None else value

    def resolve_number(self, name: str, key: str, default: float) -> float:
        """
        Returns the effective numeric value of a setting for a target.

        A layer whose value is not a number is skipped with a warning, so the
        lookup falls through to the next layer.
        """
        for candidate in (f"{key}_{name}", key):
            raw = self._lookup(candidate)
            if raw is None:
                continue
            try:
                return float(raw)
            except ValueError:
                logger.warning(f"Ignoring non-numeric value {raw!r} for setting '{candidate}'.")
        return float(default)

    def resolve_flag(self, name: str, key: str, default: str) -> bool:
        """Returns the effective boolean value of a setting for a target."""
        for candidate in (f"{key}_{name}", key):
            raw = self._lookup(candidate)
            if raw is None:
                continue
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            logger.warning(f"Ignoring non-boolean value {raw!r} for setting '{candidate}'.")
        return default.lower() in _TRUE_VALUES

    def pattern_chain(self, name: str, key: str) -> Tuple[str, ...]:
        """
        Collects the contiguous chain ``<key>_1_<name>``, ``<key>_2_<name>``, ...

        The chain ends at the first missing index; later indices are never read.

        Args:
            name: The target name.
            key: The pattern family, ``regex_header`` or ``regex_body``.

        Returns:
            Tuple[str, ...]: The patterns in index order.
        """
        patterns: List[str] = []
        index = 1
        while True:
            pattern = self._settings.get(f"{key}_{index}_{name}")
            if not pattern:
                break
            patterns.append(pattern)
            index += 1
        return tuple(patterns)


def target_names(settings: Settings) -> List[str]:
    """
    Returns the configured target names in declaration order.

    Raises:
        ConfigurationError: If the name list is missing or blank.
    """
    raw = settings.get(NAMES_SETTING, "")
    names = raw.split()
    if not names:
        raise ConfigurationError(f"The '{NAMES_SETTING}' setting is not defined.")
    return names


def load_targets(settings: Settings) -> List[UrlTarget]:
    """
    Builds the ordered list of targets to probe from the settings namespace.

    Names without a ``url_<name>`` setting are skipped and do not consume a
    sequence number. Warning, critical and max default to fractions of the
    target's resolved timeout.

    Args:
        settings: The flat settings namespace.

    Returns:
        List[UrlTarget]: One record per target with a URL, in declaration order.

    Raises:
        ConfigurationError: If the name list is missing or blank.
    """
    resolver = OptionResolver(settings)
    targets: List[UrlTarget] = []

    for name in target_names(settings):
        url = resolver.get_own(name, URL_SETTING)
        if url is None:
            logger.info(f"Skipping target '{name}': no {URL_SETTING}_{name} setting.")
            continue

        timeout = resolver.resolve_number(name, TIMEOUT_SETTING, DEFAULT_TIMEOUT)
        targets.append(
            UrlTarget(
                index=len(targets) + 1,
                name=name,
                url=url.strip(),
                label=resolver.get_own(name, LABEL_SETTING) or name,
                post_data=settings.get(f"{POST_DATA_SETTING}_{name}") or None,
                timeout=timeout,
                error_value=resolver.resolve_number(
                    name, ERROR_VALUE_SETTING, DEFAULT_ERROR_VALUE
                ),
                regex_error_value=resolver.resolve_number(
                    name, REGEX_ERROR_VALUE_SETTING, DEFAULT_REGEX_ERROR_VALUE
                ),
                match_options=resolver.resolve(name, MATCH_OPTS_SETTING, DEFAULT_MATCH_OPTS),
                client_options=resolver.resolve(name, CLIENT_OPTS_SETTING, DEFAULT_CLIENT_OPTS),
                join_lines=resolver.resolve_flag(name, JOIN_LINES_SETTING, DEFAULT_JOIN_LINES),
                warning=resolver.resolve_number(
                    name, WARNING_SETTING, timeout * WARNING_TIMEOUT_FACTOR
                ),
                critical=resolver.resolve_number(
                    name, CRITICAL_SETTING, timeout * CRITICAL_TIMEOUT_FACTOR
                ),
                max=resolver.resolve_number(name, MAX_SETTING, timeout * MAX_TIMEOUT_FACTOR),
                header_patterns=resolver.pattern_chain(name, REGEX_HEADER_SETTING),
                body_patterns=resolver.pattern_chain(name, REGEX_BODY_SETTING),
            )
        )

    logger.debug(f"Loaded {len(targets)} target(s).")
    return targets


def load_graph_info(settings: Settings) -> GraphInfo:
    """Returns the graph-level metadata, honouring the ``graph_*`` overrides."""

    def _setting(key: str, default: str) -> str:
        value = settings.get(key)
        return value if value else default

    return GraphInfo(
        title=_setting("graph_title", DEFAULT_GRAPH_TITLE),
        args=DEFAULT_GRAPH_ARGS,
        scale=DEFAULT_GRAPH_SCALE,
        vlabel=_setting("graph_vlabel", DEFAULT_GRAPH_VLABEL),
        category=_setting("graph_category", DEFAULT_GRAPH_CATEGORY),
        info=_setting("graph_info", DEFAULT_GRAPH_INFO),
    )
