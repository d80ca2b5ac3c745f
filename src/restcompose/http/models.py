# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across restcompose."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..errors import TransportError
from .decoding import DecoderConfig, decode_json
from .entity import Entity, EntityKind
from .headers import coerce_headers

Headers = dict[str, str]


@dataclass(frozen=True)
class HttpRequest:
    """Transport-ready request descriptor; built once per call and never mutated."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None
    timeout: float | None = None
    allow_redirects: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))


@dataclass
class HttpResponse:
    """Raw transport reply: payload bytes, status, headers, or the transport error."""

    content: bytes | None = None
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    url: str | None = None
    error: TransportError | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FileInfo:
    """A file to upload. Usable only when contents, MIME type and filename are all set."""

    contents: bytes | None = None
    mime_type: str | None = None
    filename: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.contents is not None and self.mime_type is not None and self.filename is not None


@dataclass(frozen=True)
class ResponseMeta:
    """
    Status code (0 when unknown) plus the response headers as an entity.

    `truncated` is set when the transport stopped reading the body at its size cap.
    """

    status_code: int = 0
    headers: Entity = field(default_factory=lambda: Entity(EntityKind.RESPONSE_HEADER))
    truncated: bool = False

    @classmethod
    def from_http_response(cls, response: HttpResponse | None) -> ResponseMeta:
        if response is None:
            return cls()
        headers = Entity(EntityKind.RESPONSE_HEADER)
        for key, value in (coerce_headers(response.headers) or {}).items():
            if key is None:
                continue
            headers.set(str(key), "" if value is None else str(value))
        return cls(
            status_code=response.status_code or 0,
            headers=headers,
            truncated=bool(response.meta.get("body_truncated", False)),
        )


@dataclass(frozen=True)
class Result:
    """
    Uniform outcome of a call.

    `error` is set when the request never reached the transport or the transport
    itself failed; otherwise `data` and `response` carry the reply.
    """

    data: bytes | None = None
    response: ResponseMeta | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: Exception) -> Result:
        return cls(error=error)

    @classmethod
    def from_http_response(cls, response: HttpResponse) -> Result:
        return cls(
            data=response.content,
            response=ResponseMeta.from_http_response(response),
            error=response.error,
        )

    def decode(
        self,
        schema: Any,
        configure: Callable[[DecoderConfig], None] | None = None,
    ) -> Any:
        """
        Decode the JSON payload into `schema`.

        Returns None when there is no data. `configure` receives a fresh DecoderConfig
        before parsing, e.g. to install `convert_from_camel_case` as key transform.
        Raises DecodingError when the payload does not match.
        """
        if self.data is None:
            return None
        return decode_json(self.data, schema, configure)


__all__ = [
    "FileInfo",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ResponseMeta",
    "Result",
]
