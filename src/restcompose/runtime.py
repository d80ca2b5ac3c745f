# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level client facade: compose requests and dispatch them in the background."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import suppress
from typing import TypeVar

from .config import HttpSettings, load_http_settings
from .errors import RequestCreationError, RestComposeError, TransportError
from .http.builder import build_request, resolve_body
from .http.client import HttpClient, create_default_http_client
from .http.constants import HttpMethod
from .http.entity import Entity, EntityKind
from .http.models import FileInfo, HttpRequest, HttpResponse, Result
from .http.multipart import BoundaryFactory, build_upload_request
from .http.url import inject_query_parameters

logger = logging.getLogger(__name__)

T = TypeVar("T")

UploadOutcome = tuple[Result, list[str] | None]


class RestClient:
    """
    Request composer bound to one transport.

    Populate `request_headers`, `query_parameters`, `body_parameters` (for JSON and
    form bodies) or `http_body` (for any other content type), then call
    `perform_request`, `upload_files` or `fetch_raw`. Each call copies that state
    before returning, so mutating it afterwards never affects a call in flight.

    Calls return a `concurrent.futures.Future` right away. Optional `completion`
    callbacks run on the worker thread before the future resolves; hop back to your
    own thread or event loop if needed. Exceptions raised by a callback are logged.
    Every failure, including composition errors, is delivered as `Result.error`
    rather than raised.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        settings: HttpSettings | None = None,
        executor: ThreadPoolExecutor | None = None,
        boundary_factory: BoundaryFactory | None = None,
    ):
        self.settings = settings or load_http_settings()
        self.http_client = http_client or create_default_http_client(self.settings)
        self.request_headers = Entity(EntityKind.REQUEST_HEADER)
        self.query_parameters = Entity(EntityKind.QUERY_PARAMETER)
        self.body_parameters = Entity(EntityKind.BODY_PARAMETER)
        self.http_body: bytes | None = None
        self._boundary_factory = boundary_factory
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="restcompose",
        )

    def perform_request(
        self,
        url: str,
        method: HttpMethod | str = HttpMethod.GET,
        *,
        completion: Callable[[Result], None] | None = None,
    ) -> Future[Result]:
        """Send a request whose body is derived from the Content-Type header."""
        headers = self.request_headers.copy()
        query = self.query_parameters.copy()
        body = self.body_parameters.copy()
        raw_body = self.http_body
        if isinstance(raw_body, (bytearray, memoryview)):
            raw_body = bytes(raw_body)

        def _work() -> Result:
            try:
                target_url = inject_query_parameters(url, query)
                payload = resolve_body(headers, body, raw_body)
                request = build_request(
                    target_url,
                    headers,
                    payload,
                    method,
                    allow_redirects=self.settings.allow_redirects,
                )
            except RestComposeError as exc:
                logger.warning("Could not compose request for %s: %s", url, exc)
                return Result.failure(exc)
            return Result.from_http_response(self._send(request))

        return self._dispatch(_work, completion, Result.failure)

    def upload_files(
        self,
        files: Iterable[FileInfo],
        url: str,
        method: HttpMethod | str = HttpMethod.POST,
        *,
        completion: Callable[[Result, list[str] | None], None] | None = None,
    ) -> Future[UploadOutcome]:
        """
        Upload files as multipart/form-data along with the body parameters.

        Resolves to `(result, failed_filenames)`; `failed_filenames` is None when every
        file was encoded. Files that cannot be encoded are left out and the request
        still goes ahead.
        """
        headers = self.request_headers.copy()
        query = self.query_parameters.copy()
        body = self.body_parameters.copy()
        file_list, snapshot_error = _snapshot_files(files)

        def _work() -> UploadOutcome:
            try:
                if snapshot_error is not None:
                    raise snapshot_error
                request, failed = build_upload_request(
                    file_list,
                    url,
                    method,
                    headers,
                    query,
                    body,
                    boundary_factory=self._boundary_factory,
                    allow_redirects=self.settings.allow_redirects,
                )
            except RestComposeError as exc:
                logger.warning("Could not compose upload for %s: %s", url, exc)
                return Result.failure(exc), None
            return Result.from_http_response(self._send(request)), failed

        return self._dispatch(_work, completion, lambda error: (Result.failure(error), None), unpack=True)

    def fetch_raw(
        self,
        url: str,
        *,
        completion: Callable[[bytes | None], None] | None = None,
    ) -> Future[bytes | None]:
        """GET the URL as-is, ignoring the client's entities; resolves to the payload or None."""

        def _work() -> bytes | None:
            try:
                request = build_request(url, Entity(EntityKind.REQUEST_HEADER), None, HttpMethod.GET)
            except RestComposeError as exc:
                logger.warning("Could not fetch %s: %s", url, exc)
                return None
            response = self._send(request)
            if response.error is not None:
                return None
            return response.content

        return self._dispatch(_work, completion, lambda _error: None)

    def _dispatch(
        self,
        work: Callable[[], T],
        completion: Callable[..., None] | None,
        on_error: Callable[[RestComposeError], T],
        *,
        unpack: bool = False,
    ) -> Future[T]:
        def _run() -> T:
            try:
                outcome = work()
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected failure while composing a call")
                outcome = on_error(_as_compose_error(exc))
            if completion is not None:
                try:
                    if unpack:
                        completion(*outcome)
                    else:
                        completion(outcome)
                except Exception:  # noqa: BLE001
                    logger.exception("Completion callback raised")
            return outcome

        return self._executor.submit(_run)

    def _send(self, request: HttpRequest) -> HttpResponse:
        try:
            response = self.http_client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(url=request.url, error=TransportError.from_exception(exc))
        if response.error is not None:
            logger.info("%s %s failed (%s): %s", request.method, request.url, response.error.reason, response.error)
        return response

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


def _snapshot_files(files: Iterable[FileInfo]) -> tuple[list[FileInfo], RestComposeError | None]:
    try:
        return copy.deepcopy(list(files)), None
    except Exception as exc:  # noqa: BLE001
        return [], _as_compose_error(exc)


def _as_compose_error(exc: Exception) -> RestComposeError:
    if isinstance(exc, RestComposeError):
        return exc
    error = RequestCreationError(f"{type(exc).__name__}: {exc}")
    error.__cause__ = exc
    return error


__all__ = ["RestClient", "UploadOutcome"]
