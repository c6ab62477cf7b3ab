"""
Validation of a split response against ordered header and body pattern chains.

Matching follows grep semantics: a text matches when at least one of its
lines matches the pattern (or, with an inverted match, when at least one line
does not). Matching behaviour is configured with a grep-style flag string such
as ``-Ei``.
"""

import logging
import re
import shlex
from typing import Dict, List, Pattern, Sequence

from http_loadtime.domain import MatchOptions, SplitResponse

# Module logger
logger = logging.getLogger(__name__)

_SHORT_FLAGS: Dict[str, str] = {
    "i": "ignore_case",
    "E": "extended",
    "F": "fixed_strings",
    "w": "word_regexp",
    "x": "line_regexp",
    "v": "invert_match",
}

_LONG_FLAGS: Dict[str, str] = {
    "--ignore-case": "ignore_case",
    "--extended-regexp": "extended",
    "--fixed-strings": "fixed_strings",
    "--word-regexp": "word_regexp",
    "--line-regexp": "line_regexp",
    "--invert-match": "invert_match",
}


def parse_match_options(raw: str) -> MatchOptions:
    """
    Parses a grep-style flag string into a MatchOptions record.

    Short flags may be bundled (``-Eiw``). ``-E`` selects the native regular
    expression syntax, which is always used. ``--no-ignore-case`` cancels an
    earlier ``-i``. Unknown flags are logged and skipped.

    Args:
        raw: The flag string as configured.

    Returns:
        MatchOptions: The parsed options.
    """
    try:
        tokens = shlex.split(raw)
    except ValueError as e:
        logger.warning(f"Ignoring unparsable match options {raw!r}: {e}")
        return MatchOptions()

    enabled: Dict[str, bool] = {}
    for token in tokens:
        if token == "--no-ignore-case":
            enabled["ignore_case"] = False
        elif token in _LONG_FLAGS:
            enabled[_LONG_FLAGS[token]] = True
        elif token.startswith("-") and not token.startswith("--") and len(token) > 1:
            for char in token[1:]:
                if char in _SHORT_FLAGS:
                    enabled[_SHORT_FLAGS[char]] = True
                else:
                    logger.warning(f"Ignoring unsupported match option -{char}.")
        else:
            logger.warning(f"Ignoring unsupported match option {token!r}.")

    enabled.pop("extended", None)
    return MatchOptions(**enabled)


def compile_pattern(pattern: str, options: MatchOptions) -> Pattern[str]:
    """
    Compiles a pattern according to the match options.

    Raises:
        re.error: If the pattern is not a valid regular expression.
    """
    source = re.escape(pattern) if options.fixed_strings else pattern
    if options.word_regexp:
        source = rf"(?<!\w)(?:{source})(?!\w)"
    if options.line_regexp:
        source = rf"^(?:{source})$"
    return re.compile(source, re.IGNORECASE if options.ignore_case else 0)


def has_match(pattern: Pattern[str], text: str, invert: bool = False) -> bool:
    """
    Checks whether any line of a text matches a compiled pattern.

    Args:
        pattern: The compiled pattern.
        text: Newline-terminated lines; a final unterminated line also counts.
        invert: Look for a line that does not match instead.

    Returns:
        bool: True if a qualifying line exists. An empty text is one empty line,
        so ``^$`` and inverted patterns can match an empty header or body.
    """
    lines: List[str] = text.split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return any(bool(pattern.search(line)) != invert for line in lines)


def _check(kind: str, index: int, pattern: str, text: str, options: MatchOptions) -> bool:
    try:
        compiled = compile_pattern(pattern, options)
    except re.error as e:
        logger.warning(f"Invalid {kind} pattern #{index} {pattern!r}: {e}")
        return False
    matched = has_match(compiled, text, options.invert_match)
    if not matched:
        logger.debug(f"{kind.capitalize()} pattern #{index} {pattern!r} did not match.")
    return matched


def validate_chain(
    response: SplitResponse,
    header_patterns: Sequence[str],
    body_patterns: Sequence[str],
    match_options: str,
) -> bool:
    """
    Checks a split response against the header and body pattern chains.

    Index k (from 1) checks the header pattern at k, then the body pattern at
    k, whichever exist. The scan stops at the first index that has neither and
    fails at the first pattern that does not match.

    Args:
        response: The split response.
        header_patterns: Header patterns, index 1 first.
        body_patterns: Body patterns, index 1 first.
        match_options: Grep-style flag string.

    Returns:
        bool: True if every checked pattern matched.
    """
    options = parse_match_options(match_options)

    index = 0
    while index < len(header_patterns) or index < len(body_patterns):
        if index < len(header_patterns) and not _check(
            "header", index + 1, header_patterns[index], response.header, options
        ):
            return False
        if index < len(body_patterns) and not _check(
            "body", index + 1, body_patterns[index], response.body, options
        ):
            return False
        index += 1

    return True
