# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers: percent-encoding and query injection."""

from __future__ import annotations

import logging
from urllib.parse import quote, urlsplit, urlunsplit

from .entity import Entity

logger = logging.getLogger(__name__)


def percent_encode(value: object) -> str | None:
    """
    Percent-encode a value for use in a query string or form body.

    Only RFC 3986 unreserved characters are left as-is. Returns None when the value
    cannot be encoded as UTF-8 (for example a string holding lone surrogates).
    """
    text = value if isinstance(value, str) else str(value)
    try:
        return quote(text, safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError:
        return None


def encode_pairs(values: dict[str, str], *, context: str) -> str:
    """
    Join `key=encoded(value)` pairs with `&`.

    Keys pass through untouched. Pairs whose value fails percent-encoding are dropped
    from the output instead of failing the whole string.
    """
    pairs: list[str] = []
    for key, value in values.items():
        encoded = percent_encode(value)
        if encoded is None:
            logger.debug("Dropping %s pair %r: value cannot be percent-encoded", context, key)
            continue
        pairs.append(f"{key}={encoded}")
    return "&".join(pairs)


def inject_query_parameters(url: str, query: Entity) -> str:
    """
    Append the query entity to the URL.

    Returns the URL unchanged when there is nothing to add or when it cannot be
    split and recombined (fail-open).
    """
    if query.count() == 0:
        return url
    try:
        parts = urlsplit(url)
        encoded = encode_pairs(query.all(), context="query")
        if not encoded:
            return url
        combined = f"{parts.query}&{encoded}" if parts.query else encoded
        return urlunsplit((parts.scheme, parts.netloc, parts.path, combined, parts.fragment))
    except (TypeError, ValueError) as exc:
        logger.debug("Leaving URL %r untouched, query injection failed: %s", url, exc)
        return url


def is_resolvable_url(url: str | None) -> bool:
    """Return True when the URL has a scheme and host a transport can connect to."""
    if url is None or not str(url).strip():
        return False
    try:
        parts = urlsplit(str(url).strip())
        _ = parts.port
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc and parts.hostname)


__all__ = ["encode_pairs", "inject_query_parameters", "is_resolvable_url", "percent_encode"]
