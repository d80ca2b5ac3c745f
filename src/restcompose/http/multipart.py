# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
multipart/form-data encoding for file uploads.

Bodies follow RFC 2046: CRLF line endings, one boundary per request, nothing before
the first delimiter and nothing after the closing delimiter.
"""

from __future__ import annotations

import logging
import re
import secrets
import string
import time
from collections.abc import Callable, Iterable

from ..errors import BodyEncodingError, BoundaryCreationError
from .builder import build_request
from .constants import HttpHeader, HttpMethod, MimeType
from .entity import Entity
from .headers import replace_header
from .models import FileInfo, HttpRequest
from .url import inject_query_parameters

logger = logging.getLogger(__name__)

BOUNDARY_PREFIX = "----RestComposeFormBoundary"
BOUNDARY_RANDOM_LENGTH = 16
MAX_BOUNDARY_LENGTH = 70
CRLF = "\r\n"

_BOUNDARY_ALPHABET = string.ascii_letters + string.digits
# RFC 2046 bchars; a boundary may not end in a space.
_BOUNDARY_RE = re.compile(r"[0-9A-Za-z'()+_,\-./:=? ]{0,69}[0-9A-Za-z'()+_,\-./:=?]")

BoundaryFactory = Callable[[], str]


def generate_boundary() -> str:
    """
    Return a fresh boundary: fixed prefix, random alphanumerics, current epoch seconds.

    Uniqueness is probabilistic. A collision with body content is astronomically
    unlikely but not impossible.
    """
    token = "".join(secrets.choice(_BOUNDARY_ALPHABET) for _ in range(BOUNDARY_RANDOM_LENGTH))
    return f"{BOUNDARY_PREFIX}{token}{int(time.time())}"


def validate_boundary(boundary: object) -> str:
    """Return the boundary if RFC 2046 accepts it, else raise BoundaryCreationError."""
    if not isinstance(boundary, str) or not boundary:
        raise BoundaryCreationError("boundary is empty")
    if len(boundary) > MAX_BOUNDARY_LENGTH:
        raise BoundaryCreationError(f"boundary longer than {MAX_BOUNDARY_LENGTH} characters")
    if not _BOUNDARY_RE.fullmatch(boundary):
        raise BoundaryCreationError(f"boundary {boundary!r} contains characters not allowed by RFC 2046")
    return boundary


def create_boundary(factory: BoundaryFactory | None = None) -> str:
    """Run the boundary factory, turning any failure into BoundaryCreationError."""
    try:
        boundary = (factory or generate_boundary)()
    except BoundaryCreationError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise BoundaryCreationError(str(exc)) from exc
    return validate_boundary(boundary)


def multipart_content_type(boundary: str) -> str:
    return f"{MimeType.MULTIPART_FORM_DATA.value}; boundary={boundary}"


def encode_fields(body: Entity, boundary: str) -> bytes:
    """Encode every body parameter as a form-data part."""
    out = bytearray()
    for key, value in body.all().items():
        try:
            out += f"--{boundary}{CRLF}".encode()
            out += f'Content-Disposition: form-data; name="{key}"{CRLF}{CRLF}'.encode()
            out += f"{value}{CRLF}".encode()
        except UnicodeEncodeError as exc:
            raise BodyEncodingError(f"form field {key!r}: {exc}") from exc
    return bytes(out)


def encode_file(file: FileInfo, boundary: str) -> tuple[bytes | None, bool]:
    """Encode one file part; returns (None, False) when the file info is incomplete."""
    if not file.is_complete:
        return None, False
    out = bytearray()
    try:
        out += f"--{boundary}{CRLF}".encode()
        out += f'Content-Disposition: form-data; name="{file.filename}"; filename="{file.filename}"{CRLF}'.encode()
        out += f"Content-Type: {file.mime_type}{CRLF}{CRLF}".encode()
        out += file.contents
    except (UnicodeEncodeError, TypeError):
        return None, False
    out += CRLF.encode()
    return bytes(out), True


def encode_files(files: Iterable[FileInfo], boundary: str) -> tuple[bytes, list[str] | None]:
    """
    Encode every file, skipping the ones that fail.

    The second item lists the filenames that could not be encoded ("" for a file
    without a name). It stays None when every file succeeded.
    """
    body = bytearray()
    failed: list[str] | None = None
    for file in files:
        part, ok = encode_file(file, boundary)
        if ok and part is not None:
            body += part
            continue
        if failed is None:
            failed = []
        failed.append(file.filename or "")
        logger.debug("Skipping incomplete upload file %r", file.filename)
    return bytes(body), failed


def close_body(boundary: str) -> bytes:
    return f"--{boundary}--{CRLF}".encode()


def build_upload_request(
    files: Iterable[FileInfo],
    url: str,
    method: HttpMethod | str,
    headers: Entity,
    query: Entity,
    body: Entity,
    *,
    boundary_factory: BoundaryFactory | None = None,
    timeout: float | None = None,
    allow_redirects: bool = True,
) -> tuple[HttpRequest, list[str] | None]:
    """
    Assemble a multipart upload request.

    The headers entity is modified in place (its Content-Type is replaced), so pass
    a per-call copy. Any Content-Type the caller set is overwritten so that the
    header always names the boundary actually used in the body.
    """
    target_url = inject_query_parameters(url, query)
    boundary = create_boundary(boundary_factory)
    replace_header(headers, HttpHeader.CONTENT_TYPE.value, multipart_content_type(boundary))

    payload = bytearray(encode_fields(body, boundary))
    encoded_files, failed = encode_files(files, boundary)
    payload += encoded_files
    payload += close_body(boundary)

    request = build_request(
        target_url,
        headers,
        bytes(payload),
        method,
        timeout=timeout,
        allow_redirects=allow_redirects,
    )
    if failed:
        logger.info("Upload to %s proceeding without %d file(s): %s", request.url, len(failed), failed)
    return request, failed


__all__ = [
    "BOUNDARY_PREFIX",
    "BoundaryFactory",
    "build_upload_request",
    "close_body",
    "create_boundary",
    "encode_file",
    "encode_fields",
    "encode_files",
    "generate_boundary",
    "multipart_content_type",
    "validate_boundary",
]
