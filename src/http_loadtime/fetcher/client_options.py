"""
Parsing of curl-style HTTP client option strings.

Client options are configured as a single opaque string of curl-like flags
(``-H "Pragma: no-cache" -L -k``). This module turns that string into a
ClientOptions record the aiohttp fetcher can apply. Flags without an aiohttp
equivalent are accepted and ignored.
"""

import logging
import shlex
from typing import Dict, Iterator, List, Optional, Tuple

from http_loadtime.domain import ClientOptions

# Module logger
logger = logging.getLogger(__name__)

# Flags that consume the following token as their value
_VALUE_FLAGS: Dict[str, str] = {
    "-H": "header",
    "--header": "header",
    "-A": "user-agent",
    "--user-agent": "user-agent",
    "-e": "referer",
    "--referer": "referer",
    "-u": "user",
    "--user": "user",
    "--max-redirs": "max-redirs",
    "--retry": "retry",
}

# Flags that stand alone
_SWITCH_FLAGS: Dict[str, str] = {
    "-L": "location",
    "--location": "location",
    "-k": "insecure",
    "--insecure": "insecure",
    "-f": "fail",
    "--fail": "fail",
    "--compressed": "ignored",
    "-s": "ignored",
    "--silent": "ignored",
    "-S": "ignored",
    "--show-error": "ignored",
    "-i": "ignored",
    "--include": "ignored",
}


def _expand(tokens: List[str]) -> Iterator[str]:
    """Splits ``--flag=value`` pairs and bundled short switches like ``-sSL``."""
    for token in tokens:
        if token.startswith("--") and "=" in token:
            flag, value = token.split("=", 1)
            yield flag
            yield value
        elif (
            len(token) > 2
            and token.startswith("-")
            and not token.startswith("--")
            and token[:2] in _VALUE_FLAGS
        ):
            # -H'Name: value' style, value glued to the flag
            yield token[:2]
            yield token[2:]
        elif (
            len(token) > 2
            and token.startswith("-")
            and not token.startswith("--")
            and all(f"-{char}" in _SWITCH_FLAGS for char in token[1:])
        ):
            for char in token[1:]:
                yield f"-{char}"
        else:
            yield token


def _parse_header(raw: str) -> Optional[Tuple[str, str]]:
    if ":" not in raw:
        logger.warning(f"Ignoring malformed header option {raw!r}.")
        return None
    name, value = raw.split(":", 1)
    return name.strip(), value.strip()


def parse_client_options(raw: str) -> ClientOptions:
    """
    Parses a curl-style option string into a ClientOptions record.

    Supported flags: ``-H/--header``, ``-A/--user-agent``, ``-e/--referer``,
    ``-u/--user``, ``-L/--location``, ``--max-redirs``, ``-k/--insecure``,
    ``-f/--fail``. ``--retry``, ``--compressed``, ``-s``, ``-S`` and ``-i``
    are accepted without effect. Unknown flags are logged and skipped.

    Args:
        raw: The option string as configured.

    Returns:
        ClientOptions: The parsed options; defaults for anything not given.
    """
    try:
        tokens = shlex.split(raw)
    except ValueError as e:
        logger.warning(f"Ignoring unparsable client options {raw!r}: {e}")
        return ClientOptions()

    headers: List[Tuple[str, str]] = []
    follow_redirects = False
    max_redirects = ClientOptions().max_redirects
    verify_ssl = True
    fail_on_http_error = False
    basic_auth: Optional[Tuple[str, str]] = None

    expanded = _expand(tokens)
    for token in expanded:
        if token in _VALUE_FLAGS:
            option = _VALUE_FLAGS[token]
            value = next(expanded, None)
            if value is None:
                logger.warning(f"Client option {token} is missing its value.")
                break
            if option == "header":
                header = _parse_header(value)
                if header is not None:
                    headers.append(header)
            elif option == "user-agent":
                headers.append(("User-Agent", value))
            elif option == "referer":
                headers.append(("Referer", value))
            elif option == "user":
                user, _, password = value.partition(":")
                basic_auth = (user, password)
            elif option == "max-redirs":
                try:
                    max_redirects = int(value)
                except ValueError:
                    logger.warning(f"Ignoring non-numeric --max-redirs value {value!r}.")
            elif option == "retry" and value.strip() != "0":
                logger.info(f"Ignoring --retry {value}: each target is fetched once.")
        elif token in _SWITCH_FLAGS:
            option = _SWITCH_FLAGS[token]
            if option == "location":
                follow_redirects = True
            elif option == "insecure":
                verify_ssl = False
            elif option == "fail":
                fail_on_http_error = True
        else:
            logger.warning(f"Ignoring unsupported client option {token!r}.")

    return ClientOptions(
        headers=tuple(headers),
        follow_redirects=follow_redirects,
        max_redirects=max_redirects,
        verify_ssl=verify_ssl,
        fail_on_http_error=fail_on_http_error,
        basic_auth=basic_auth,
    )
