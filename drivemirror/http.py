"""Minimal JSON-over-HTTP transport shared by the remote service clients."""

from __future__ import annotations

import json
from http.client import HTTPException
from typing import Any, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from .errors import AuthFailure, MirrorError, NotFound, RemoteServiceError


def error_for_status(status: int, payload: Any, message: str) -> MirrorError:
    """Map an HTTP status to the matching error kind, preserving the raw payload."""
    if status in (401, 403):
        return AuthFailure(message, status=status, payload=payload)
    if status == 404:
        return NotFound(message, status=status, payload=payload)
    return RemoteServiceError(message, status=status, payload=payload)


class HttpTransport:
    """Sends requests with a fixed header set and decodes JSON responses."""

    def __init__(
        self,
        headers: Mapping[str, str],
        *,
        request_timeout: Optional[float] = 60.0,
    ) -> None:
        self.headers = dict(headers)
        self.request_timeout = request_timeout

    def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._decode(self.send("GET", url, params=params), url)

    def get_bytes(self, url: str, params: Mapping[str, Any] | None = None) -> bytes:
        return self.send("GET", url, params=params)

    def post_json(self, url: str, payload: Mapping[str, Any]) -> Any:
        return self._decode(self.send("POST", url, payload=payload), url)

    def send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> bytes:
        """Perform the request and return the raw response body."""
        if params:
            query = urlencode({k: v for k, v in params.items() if v is not None})
            if query:
                url = f"{url}?{query}"

        headers = dict(self.headers)
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        http_request = Request(url, data=data, headers=headers, method=method)
        timeout = self.request_timeout or 60.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                return response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace") if hasattr(exc, "read") else ""
            raise error_for_status(
                exc.code,
                _maybe_json(detail),
                f"{method} {_strip_query(url)} failed with status {exc.code}",
            ) from exc
        except URLError as exc:
            raise RemoteServiceError(
                f"{method} {_strip_query(url)} failed: {exc.reason}"
            ) from exc
        except (OSError, HTTPException) as exc:
            raise RemoteServiceError(
                f"{method} {_strip_query(url)} failed: {exc}"
            ) from exc

    @staticmethod
    def _decode(raw: bytes, url: str) -> Any:
        if not raw:
            return {}
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise RemoteServiceError(
                f"{_strip_query(url)} returned invalid JSON",
                payload=raw.decode("utf-8", errors="replace"),
            ) from exc


def _maybe_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return text


def _strip_query(url: str) -> str:
    return url.split("?", 1)[0]


__all__ = ["HttpTransport", "error_for_status"]
