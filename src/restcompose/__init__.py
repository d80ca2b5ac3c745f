# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
restcompose package entrypoint.

restcompose builds HTTP requests from header, query and body parameter collections,
encoding JSON, form-urlencoded and multipart/form-data bodies, and hands them to an
injectable transport. Calls run on a background executor and always resolve to a
uniform Result.
"""

from .config import HttpSettings, load_http_settings
from .errors import (
    BodyEncodingError,
    BoundaryCreationError,
    DecodingError,
    ErrorCategory,
    RequestCreationError,
    RestComposeError,
    TransportError,
)
from .http import (
    DecoderConfig,
    Entity,
    EntityKind,
    FileInfo,
    HttpClient,
    HttpHeader,
    HttpMethod,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    MimeType,
    ResponseMeta,
    Result,
    StubHttpClient,
    convert_from_camel_case,
    convert_to_camel_case,
    create_default_http_client,
)
from .log import setup_logging
from .runtime import RestClient
from .store import KeyValueStore
from .version import __version__

__all__ = [
    "BodyEncodingError",
    "BoundaryCreationError",
    "DecoderConfig",
    "DecodingError",
    "Entity",
    "EntityKind",
    "ErrorCategory",
    "FileInfo",
    "HttpClient",
    "HttpHeader",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "KeyValueStore",
    "MimeType",
    "RequestCreationError",
    "ResponseMeta",
    "RestClient",
    "RestComposeError",
    "Result",
    "StubHttpClient",
    "TransportError",
    "convert_from_camel_case",
    "convert_to_camel_case",
    "create_default_http_client",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
