# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from restcompose.config import HttpSettings
from restcompose.errors import (
    BodyEncodingError,
    BoundaryCreationError,
    ErrorCategory,
    RequestCreationError,
    TransportError,
)
from restcompose.http.adapters import StubHttpClient
from restcompose.http.constants import HttpMethod
from restcompose.http.models import FileInfo, HttpRequest, HttpResponse
from restcompose.runtime import RestClient

TIMEOUT = 5


@pytest.fixture
def stub():
    return StubHttpClient()


@pytest.fixture
def client(stub):
    with RestClient(stub, settings=HttpSettings(max_workers=2), boundary_factory=lambda: "RuntimeBoundary42") as rest:
        yield rest


def test_perform_request_sends_json_body_and_query(client, stub):
    stub.add(
        "https://api.example/items?page=2",
        HttpResponse(content=b'{"ok": true}', status_code=201, headers={"Content-Type": "application/json"}),
    )
    client.request_headers.set("Content-Type", "application/json")
    client.query_parameters.set("page", "2")
    client.body_parameters.set("name", "widget")

    result = client.perform_request("https://api.example/items", HttpMethod.POST).result(timeout=TIMEOUT)

    assert result.ok is True
    assert result.decode(dict) == {"ok": True}
    assert result.response.status_code == 201
    assert result.response.headers.get("Content-Type") == "application/json"
    sent = stub.requests[0]
    assert sent.method == "POST"
    assert json.loads(sent.body) == {"name": "widget"}


def test_perform_request_sends_raw_body_for_other_content_types(client, stub):
    stub.add("https://api.example/notes", HttpResponse(content=b"", status_code=204))
    client.request_headers.set("Content-Type", "text/plain")
    client.body_parameters.set("ignored", "1")
    client.http_body = b"plain text"

    result = client.perform_request("https://api.example/notes", "put").result(timeout=TIMEOUT)

    assert result.ok is True
    assert stub.requests[0].method == "PUT"
    assert stub.requests[0].body == b"plain text"


def test_perform_request_snapshots_state_at_dispatch(stub):
    gate = threading.Event()
    stub.add("https://api.example/a?v=1", HttpResponse(content=b"", status_code=200))
    executor = ThreadPoolExecutor(max_workers=1)
    rest = RestClient(stub, executor=executor)
    try:
        executor.submit(gate.wait, TIMEOUT)
        rest.request_headers.set("X-Version", "1")
        rest.query_parameters.set("v", "1")
        future = rest.perform_request("https://api.example/a")

        rest.request_headers.set("X-Version", "2")
        rest.query_parameters.set("v", "2")
        gate.set()
        result = future.result(timeout=TIMEOUT)
    finally:
        rest.close()
        executor.shutdown(wait=True)

    assert result.ok is True
    assert stub.requests[0].url == "https://api.example/a?v=1"
    assert stub.requests[0].headers["X-Version"] == "1"


def test_composition_errors_are_delivered_through_the_future(client, stub):
    result = client.perform_request("not a url").result(timeout=TIMEOUT)
    assert isinstance(result.error, RequestCreationError)
    assert result.data is None

    client.request_headers.set("Content-Type", "application/json")
    client.body_parameters.set("blob", object())  # type: ignore[arg-type]
    result = client.perform_request("https://api.example/items").result(timeout=TIMEOUT)
    assert isinstance(result.error, BodyEncodingError)
    assert stub.requests == []


def test_transport_failures_are_wrapped(client, stub):
    def explode(request: HttpRequest) -> HttpResponse:
        raise ConnectionRefusedError("refused")

    stub.add("https://api.example/down", explode)
    result = client.perform_request("https://api.example/down").result(timeout=TIMEOUT)

    assert isinstance(result.error, TransportError)
    assert result.error.category is ErrorCategory.CONNECTION_ERROR
    assert result.error.error_type == "ConnectionRefusedError"
    assert result.response.status_code == 0


def test_completion_runs_on_worker_thread(client, stub):
    stub.add("https://api.example/ping", HttpResponse(content=b"pong", status_code=200))
    done = threading.Event()
    seen = {}

    def completion(result):
        seen["data"] = result.data
        seen["thread"] = threading.current_thread().name
        done.set()

    client.perform_request("https://api.example/ping", completion=completion)
    assert done.wait(TIMEOUT)
    assert seen["data"] == b"pong"
    assert seen["thread"].startswith("restcompose")


def test_completion_errors_do_not_break_the_future(client, stub):
    stub.add("https://api.example/ping", HttpResponse(content=b"pong", status_code=200))

    def completion(_result):
        raise RuntimeError("caller bug")

    result = client.perform_request("https://api.example/ping", completion=completion).result(timeout=TIMEOUT)
    assert result.data == b"pong"


def test_upload_files_reports_failures_and_overwrites_content_type(client, stub):
    stub.add("https://upload.example/files?album=1", HttpResponse(content=b"stored", status_code=200))
    client.request_headers.set("Content-Type", "text/plain")
    client.query_parameters.set("album", "1")
    client.body_parameters.set("owner", "ada")
    files = [
        FileInfo(contents=b"first", mime_type="text/plain", filename="file1.txt"),
        FileInfo(contents=None, mime_type="text/plain", filename="file2.txt"),
        FileInfo(contents=b"third", mime_type="text/plain", filename="file3.txt"),
    ]

    result, failed = client.upload_files(files, "https://upload.example/files").result(timeout=TIMEOUT)

    assert result.ok is True
    assert result.data == b"stored"
    assert failed == ["file2.txt"]
    sent = stub.requests[0]
    assert sent.method == "POST"
    assert sent.headers["Content-Type"] == "multipart/form-data; boundary=RuntimeBoundary42"
    assert b'filename="file1.txt"' in sent.body
    assert b'filename="file3.txt"' in sent.body
    assert b"file2.txt" not in sent.body
    assert b'name="owner"\r\n\r\nada\r\n' in sent.body
    assert client.request_headers.get("Content-Type") == "text/plain"


def test_upload_completion_receives_result_and_failures(client, stub):
    stub.add("https://upload.example/files", HttpResponse(content=b"", status_code=200))
    done = threading.Event()
    seen = {}

    def completion(result, failed):
        seen["ok"] = result.ok
        seen["failed"] = failed
        done.set()

    client.upload_files(
        [FileInfo(contents=b"x", mime_type="text/plain", filename="x.txt")],
        "https://upload.example/files",
        completion=completion,
    )
    assert done.wait(TIMEOUT)
    assert seen == {"ok": True, "failed": None}


def test_upload_boundary_failure_is_reported(stub):
    def broken() -> str:
        raise RuntimeError("no entropy")

    with RestClient(stub, boundary_factory=broken) as rest:
        result, failed = rest.upload_files([], "https://upload.example/files").result(timeout=TIMEOUT)

    assert isinstance(result.error, BoundaryCreationError)
    assert failed is None
    assert stub.requests == []


def test_fetch_raw_returns_payload_or_none(client, stub):
    stub.add("https://cdn.example/avatar.png", HttpResponse(content=b"\x89PNG", status_code=200))
    client.request_headers.set("Authorization", "Bearer secret")
    client.query_parameters.set("ignored", "1")

    assert client.fetch_raw("https://cdn.example/avatar.png").result(timeout=TIMEOUT) == b"\x89PNG"
    assert stub.requests[0].url == "https://cdn.example/avatar.png"
    assert dict(stub.requests[0].headers) == {}

    assert client.fetch_raw("https://cdn.example/missing.png").result(timeout=TIMEOUT) is None
    assert client.fetch_raw("").result(timeout=TIMEOUT) is None


def test_close_closes_transport(stub):
    rest = RestClient(stub)
    rest.close()
    assert stub.closed is True


def test_non_bytes_raw_body_is_reported_through_the_future(client, stub):
    stub.add("https://api.example/notes", HttpResponse(content=b"", status_code=204))
    client.request_headers.set("Content-Type", "text/plain")
    client.http_body = "plain text"  # type: ignore[assignment]

    future = client.perform_request("https://api.example/notes", HttpMethod.PUT)
    result = future.result(timeout=TIMEOUT)

    assert isinstance(result.error, BodyEncodingError)
    assert stub.requests == []


def test_raw_bytearray_body_is_snapshotted(stub):
    gate = threading.Event()
    stub.add("https://api.example/notes", HttpResponse(content=b"", status_code=204))
    executor = ThreadPoolExecutor(max_workers=1)
    rest = RestClient(stub, executor=executor)
    try:
        executor.submit(gate.wait, TIMEOUT)
        body = bytearray(b"first")
        rest.http_body = body  # type: ignore[assignment]
        future = rest.perform_request("https://api.example/notes", HttpMethod.POST)
        body[:] = b"second"
        gate.set()
        future.result(timeout=TIMEOUT)
    finally:
        rest.close()
        executor.shutdown(wait=True)

    assert stub.requests[0].body == b"first"


def test_unreadable_upload_files_still_run_the_completion(client, stub):
    done = threading.Event()
    seen = {}

    def completion(result, failed):
        seen["error"] = result.error
        seen["failed"] = failed
        done.set()

    future = client.upload_files(42, "https://upload.example/files", completion=completion)  # type: ignore[arg-type]
    result, failed = future.result(timeout=TIMEOUT)

    assert done.wait(TIMEOUT)
    assert isinstance(result.error, RequestCreationError)
    assert isinstance(result.error.__cause__, TypeError)
    assert failed is None
    assert seen == {"error": result.error, "failed": None}
    assert stub.requests == []


def test_unexpected_upload_item_is_wrapped_into_a_result(client, stub):
    done = threading.Event()
    seen = {}

    def completion(result, failed):
        seen["error"] = result.error
        done.set()

    result, failed = client.upload_files(
        ["not-a-file-info"],  # type: ignore[list-item]
        "https://upload.example/files",
        completion=completion,
    ).result(timeout=TIMEOUT)

    assert done.wait(TIMEOUT)
    assert isinstance(result.error, RequestCreationError)
    assert isinstance(result.error.__cause__, AttributeError)
    assert seen["error"] is result.error
    assert failed is None
    assert stub.requests == []
