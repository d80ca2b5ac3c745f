# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class RestComposeError(Exception):
    """Base class for every error delivered through a Result."""

    default_message = "restcompose: request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        message = self.default_message if not detail else f"{self.default_message}: {detail}"
        super().__init__(message)


class RequestCreationError(RestComposeError):
    default_message = "restcompose: unable to create the request"


class BoundaryCreationError(RestComposeError):
    default_message = "restcompose: unable to create the multipart boundary"


class BodyEncodingError(RestComposeError):
    default_message = "restcompose: unable to encode the request body"


class DecodingError(RestComposeError):
    default_message = "restcompose: response data does not match the requested type"


class TransportError(RestComposeError):
    """Opaque failure forwarded from the transport collaborator."""

    default_message = "restcompose: transport failed"

    def __init__(
        self,
        detail: str | None = None,
        *,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
        error_type: str | None = None,
    ):
        super().__init__(detail)
        self.category = category
        self.error_type = error_type

    @property
    def reason(self) -> str:
        """Short human reason for the failure category, e.g. "Network timeout"."""
        return error_category_to_reason(self.category)

    @classmethod
    def from_exception(cls, exc: BaseException) -> TransportError:
        error = cls(str(exc) or None, category=categorize_exception(exc), error_type=type(exc).__name__)
        error.__cause__ = exc
        return error


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


__all__ = [
    "BodyEncodingError",
    "BoundaryCreationError",
    "DecodingError",
    "ErrorCategory",
    "RequestCreationError",
    "RestComposeError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
]
