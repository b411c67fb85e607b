"""URL decomposition into region-tagged tokens."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional
from urllib.parse import unquote, unquote_plus, urlsplit

from uwx.models import OriginTag, Token
from uwx.splitter import split_runs

logger = logging.getLogger(__name__)

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class QueryParseError(ValueError):
    """Raised when a raw query string is not valid form encoding."""


@dataclass(frozen=True)
class UrlParts:
    scheme: str
    hostname: str
    path: str
    query: str
    fragment: str


def _host(netloc: str) -> str:
    return netloc.rpartition("@")[2]


def _split_host_port(host: str) -> tuple[str, str]:
    """Split ``host`` into hostname and port text, keeping the original case."""
    if host.startswith("["):
        end = host.find("]")
        if end == -1:
            return host[1:], ""
        return host[1:end], host[end + 1:]
    hostname, sep, port = host.rpartition(":")
    if not sep:
        return host, ""
    return hostname, sep + port


def _port_is_valid(port: str) -> bool:
    """Accept an empty port or ``:`` followed by ASCII digits of any length."""
    if not port:
        return True
    if not port.startswith(":"):
        return False
    digits = port[1:]
    return all("0" <= ch <= "9" for ch in digits)


def parse_absolute_url(line: str) -> Optional[UrlParts]:
    """Return URL parts only for lines with both a scheme and a host."""
    if line[:1].isspace() or _CONTROL_RE.search(line):
        return None
    try:
        # Raises on unbalanced IPv6 brackets.
        parsed = urlsplit(line)
    except ValueError:
        return None

    host = _host(parsed.netloc)
    if not parsed.scheme or not host:
        return None
    if " " in host or _BAD_ESCAPE_RE.search(host):
        return None
    hostname, port = _split_host_port(host)
    if not _port_is_valid(port):
        return None
    if _BAD_ESCAPE_RE.search(parsed.path) or _BAD_ESCAPE_RE.search(parsed.fragment):
        return None

    return UrlParts(
        scheme=parsed.scheme,
        hostname=hostname,
        path=unquote(parsed.path),
        query=parsed.query,
        fragment=unquote(parsed.fragment),
    )


def parse_query(raw_query: str) -> dict[str, list[str]]:
    """Parse form-encoded pairs; repeated keys accumulate values in order."""
    values: dict[str, list[str]] = {}
    for pair in raw_query.split("&"):
        if not pair:
            continue
        if ";" in pair:
            raise QueryParseError(f"invalid semicolon separator in query: {pair!r}")
        if _BAD_ESCAPE_RE.search(pair):
            raise QueryParseError(f"invalid escape in query: {pair!r}")
        key, _, value = pair.partition("=")
        values.setdefault(unquote_plus(key), []).append(unquote_plus(value))
    return values


def decompose_line(line: str) -> Iterator[Token]:
    """Tokenize one input line region by region.

    Region order is hostname labels, path segments, parameter names each
    followed by their values, then the fragment. Lines that are not absolute
    URLs are tokenized whole as generic text.
    """
    parts = parse_absolute_url(line)
    if parts is None:
        logger.debug("Not an absolute URL, tokenizing as generic text: %r", line)
        yield from split_runs(line, OriginTag.GENERIC)
        return

    for label in parts.hostname.split("."):
        yield from split_runs(label, OriginTag.SUBDOMAIN)

    for segment in parts.path.split("/"):
        yield from split_runs(segment, OriginTag.PATH)

    try:
        query = parse_query(parts.query)
    except QueryParseError as exc:
        logger.debug("Skipping query parameters for %r: %s", line, exc)
    else:
        for key, key_values in query.items():
            yield from split_runs(key, OriginTag.PARAM_NAME)
            for value in key_values:
                yield from split_runs(value, OriginTag.PARAM_VALUE)

    yield from split_runs(parts.fragment, OriginTag.FRAGMENT)
