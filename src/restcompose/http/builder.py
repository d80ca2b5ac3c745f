# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request body resolution and request descriptor construction."""

from __future__ import annotations

import json
import logging

from ..errors import BodyEncodingError, RequestCreationError
from .constants import HttpHeader, HttpMethod, MimeType
from .entity import Entity
from .headers import header_value
from .models import HttpRequest
from .url import encode_pairs, is_resolvable_url

logger = logging.getLogger(__name__)


def resolve_body(headers: Entity, body: Entity, raw_body: bytes | None = None) -> bytes | None:
    """
    Build the request body according to the Content-Type header.

    - `application/json`: the body entity as a JSON object with sorted keys.
    - `application/x-www-form-urlencoded`: `key=value` pairs joined by `&`; pairs whose
      value cannot be percent-encoded are dropped.
    - anything else, or no Content-Type at all: `raw_body` as given (None means no body);
      a raw body that is not bytes-like raises BodyEncodingError.

    Matching is by substring, so parameters such as `; charset=utf-8` are tolerated.
    """
    content_type = header_value(headers, HttpHeader.CONTENT_TYPE.value) or ""

    if MimeType.APPLICATION_JSON.value in content_type:
        try:
            return json.dumps(body.all(), sort_keys=True).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise BodyEncodingError(str(exc)) from exc

    if MimeType.APPLICATION_FORM_URLENCODED.value in content_type:
        return encode_pairs(body.all(), context="form body").encode("utf-8")

    if raw_body is None:
        return None
    if not isinstance(raw_body, (bytes, bytearray, memoryview)):
        raise BodyEncodingError(f"raw body must be bytes, got {type(raw_body).__name__}")
    return bytes(raw_body)


def build_request(
    url: str | None,
    headers: Entity,
    body: bytes | None,
    method: HttpMethod | str = HttpMethod.GET,
    *,
    timeout: float | None = None,
    allow_redirects: bool = True,
) -> HttpRequest:
    """
    Create the request descriptor, copying every header.

    Raises RequestCreationError when the URL is missing or blank, cannot be parsed,
    or lacks a scheme or a host. Host-less URLs such as `file:///x` are rejected too.
    """
    if not is_resolvable_url(url):
        raise RequestCreationError(f"unusable URL {url!r}")
    method_name = method.value if isinstance(method, HttpMethod) else str(method).upper()
    request = HttpRequest(
        url=str(url).strip(),
        method=method_name,
        headers=headers.all(),
        body=body,
        timeout=timeout,
        allow_redirects=allow_redirects,
    )
    logger.debug("Built %s request for %s (%d headers)", request.method, request.url, len(request.headers))
    return request


__all__ = ["build_request", "resolve_body"]
