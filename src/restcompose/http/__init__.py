# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request composition, encoding and transport exports."""

from .adapters import StubHttpClient
from .builder import build_request, resolve_body
from .client import HttpClient, create_default_http_client
from .constants import HttpHeader, HttpMethod, MimeType
from .decoding import DecoderConfig, convert_from_camel_case, convert_to_camel_case
from .entity import Entity, EntityKind, body_parameters, query_parameters, request_headers
from .headers import header_value
from .httpx_client import HttpxClient
from .models import FileInfo, Headers, HttpRequest, HttpResponse, ResponseMeta, Result
from .multipart import (
    build_upload_request,
    close_body,
    encode_file,
    encode_fields,
    encode_files,
    generate_boundary,
)
from .url import inject_query_parameters, percent_encode

__all__ = [
    "DecoderConfig",
    "Entity",
    "EntityKind",
    "FileInfo",
    "Headers",
    "HttpClient",
    "HttpHeader",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "MimeType",
    "ResponseMeta",
    "Result",
    "StubHttpClient",
    "body_parameters",
    "build_request",
    "build_upload_request",
    "close_body",
    "convert_from_camel_case",
    "convert_to_camel_case",
    "create_default_http_client",
    "encode_file",
    "encode_fields",
    "encode_files",
    "generate_boundary",
    "header_value",
    "inject_query_parameters",
    "percent_encode",
    "query_parameters",
    "request_headers",
    "resolve_body",
]
