# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header lookup utilities.

HTTP header field names are case-insensitive (RFC 9110), while entities store them
under whatever casing the caller used. Lookups and overrides here ignore casing.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .entity import Entity


def coerce_headers(headers: Any) -> Mapping[object, object] | None:
    """
    Best-effort coercion of "dict-like" header containers into a Mapping.

    Accepts plain dicts, Entity instances, httpx.Headers and iterables of pairs.
    """
    if headers is None:
        return None
    if isinstance(headers, Entity):
        return headers.all()
    if isinstance(headers, Mapping):
        return headers

    items = getattr(headers, "items", None)
    if callable(items):
        return dict(items())

    try:
        return dict(headers)
    except (TypeError, ValueError):
        return None


def header_value(headers: Any, name: str, default: str | None = None) -> str | None:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths the exact casing before falling back to a full scan.
    """
    if not name:
        return default

    coerced = coerce_headers(headers)
    if not coerced:
        return default

    if name in coerced:
        value = coerced.get(name)
        return default if value is None else str(value)

    lower = name.lower()
    for key, value in coerced.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value)

    return default


def replace_header(entity: Entity, name: str, value: str) -> None:
    """Set a header on the entity, dropping any entries whose name differs only in casing."""
    lower = name.lower()
    for key in [key for key in entity.all() if key.lower() == lower]:
        entity.remove(key)
    entity.set(name, value)


__all__ = ["coerce_headers", "header_value", "replace_header"]
