"""Unit tests for the shared HTTP client wrapper."""

from __future__ import annotations

import json

import httpx
import pytest

from packages.switchyard_shared.http import (
    HttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
    HttpTimeoutError,
)


def _client(handler) -> HttpClient:
    return HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )


def test_http_client_get_json_returns_decoded_payload() -> None:
    """HttpClient.get_json should decode and return JSON content."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True}, request=request)

    with _client(handler) as client:
        assert client.get_json("/api/tags") == {"ok": True}


def test_http_client_post_json_sends_body() -> None:
    seen: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content)
        return httpx.Response(200, json={"echo": True}, request=request)

    with _client(handler) as client:
        assert client.post_json("/api/embeddings", json={"prompt": "x"}) == {
            "echo": True
        }

    assert json.loads(seen[0]) == {"prompt": "x"}


def test_http_client_maps_status_failure_to_typed_error() -> None:
    """HttpClient should raise HttpStatusError on non-2xx status codes."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpStatusError) as exc_info:
            client.request("GET", "/health")

    error = exc_info.value
    assert error.method == "GET"
    assert error.status_code == 503
    assert error.retryable is True
    assert error.response_body == "unavailable"


def test_http_client_client_errors_are_not_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="missing", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpStatusError) as exc_info:
            client.request("GET", "/missing")

    assert exc_info.value.retryable is False


def test_http_client_maps_transport_failure_to_typed_error() -> None:
    """HttpClient should raise HttpRequestError on transport failures."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection failed", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpRequestError) as exc_info:
            client.request("GET", "/health")

    error = exc_info.value
    assert error.method == "GET"
    assert error.url == "https://example.test/health"
    assert error.retryable is True
    assert isinstance(error.cause, httpx.ConnectError)


def test_http_client_maps_timeout_to_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpTimeoutError):
            client.request("POST", "/api/generate", json={})


def test_http_client_maps_invalid_json_to_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpJsonDecodeError) as exc_info:
            client.get_json("/api/tags")

    assert exc_info.value.response_body == "not json"


def test_http_client_per_request_timeout_overrides_default() -> None:
    seen: list[dict[str, float]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.extensions["timeout"])
        return httpx.Response(200, json={}, request=request)

    with _client(handler) as client:
        client.request("GET", "/a", timeout_seconds=1.5)

    assert seen[0]["read"] == 1.5
