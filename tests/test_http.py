"""Tests for drivemirror.http."""

from __future__ import annotations

from http.client import IncompleteRead
from urllib.error import URLError

import pytest

from drivemirror.errors import AuthFailure, NotFound, RemoteServiceError
from drivemirror.http import HttpTransport, error_for_status
from tests._fixtures.http_fakes import RecordingOpener


@pytest.fixture
def opener(monkeypatch) -> RecordingOpener:
    recorder = RecordingOpener()
    monkeypatch.setattr("drivemirror.http.urlopen", recorder)
    return recorder


@pytest.mark.parametrize(
    ("status", "expected"),
    [(401, AuthFailure), (403, AuthFailure), (404, NotFound), (500, RemoteServiceError), (422, RemoteServiceError)],
)
def test_error_for_status_maps_kinds(status: int, expected: type) -> None:
    error = error_for_status(status, {"message": "x"}, "failed")

    assert isinstance(error, expected)
    assert error.status == status
    assert error.payload == {"message": "x"}


def test_post_json_sends_headers_and_body(opener: RecordingOpener) -> None:
    opener.queue_json({"ok": True})
    transport = HttpTransport({"Authorization": "token abc"}, request_timeout=12.0)

    assert transport.post_json("https://api.test/things", {"a": 1}) == {"ok": True}
    sent = opener.requests[0]
    assert sent["method"] == "POST"
    assert sent["headers"]["authorization"] == "token abc"
    assert sent["headers"]["content-type"] == "application/json"
    assert sent["payload"] == {"a": 1}
    assert sent["timeout"] == 12.0


def test_get_skips_none_parameters(opener: RecordingOpener) -> None:
    opener.queue_json({})
    HttpTransport({}).get_json("https://api.test/list", {"q": "x", "pageToken": None})

    assert opener.requests[0]["query"] == {"q": "x"}


def test_http_error_preserves_raw_payload(opener: RecordingOpener) -> None:
    opener.queue_error(404, {"error": {"message": "File not found"}})

    with pytest.raises(NotFound) as excinfo:
        HttpTransport({}).get_bytes("https://api.test/files/1")

    assert excinfo.value.payload == {"error": {"message": "File not found"}}
    assert excinfo.value.status == 404


def test_non_json_error_body_kept_as_text(opener: RecordingOpener) -> None:
    opener.queue_error(502, b"Bad Gateway")

    with pytest.raises(RemoteServiceError) as excinfo:
        HttpTransport({}).get_json("https://api.test/x")

    assert excinfo.value.payload == "Bad Gateway"


def test_network_failure_is_remote_service_error(monkeypatch) -> None:
    def broken(request, timeout=None):
        raise URLError("connection refused")

    monkeypatch.setattr("drivemirror.http.urlopen", broken)

    with pytest.raises(RemoteServiceError):
        HttpTransport({}).get_json("https://api.test/x")


def test_invalid_json_response_is_remote_service_error(opener: RecordingOpener) -> None:
    opener.queue_bytes(b"<html>")

    with pytest.raises(RemoteServiceError):
        HttpTransport({}).get_json("https://api.test/x")


class _StalledResponse:
    def __init__(self, error: BaseException) -> None:
        self._error = error

    def read(self) -> bytes:
        raise self._error

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


@pytest.mark.parametrize(
    "error",
    [
        TimeoutError("The read operation timed out"),
        ConnectionResetError("Connection reset by peer"),
        IncompleteRead(b"partial", 100),
    ],
)
def test_failure_while_reading_body_is_remote_service_error(monkeypatch, error) -> None:
    monkeypatch.setattr(
        "drivemirror.http.urlopen", lambda request, timeout=None: _StalledResponse(error)
    )

    with pytest.raises(RemoteServiceError) as excinfo:
        HttpTransport({}).get_bytes("https://api.test/files/1/export?mimeType=application%2Fpdf")

    assert "https://api.test/files/1/export" in excinfo.value.message
    assert "mimeType" not in excinfo.value.message
    assert excinfo.value.__cause__ is error
