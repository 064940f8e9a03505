"""Minimal synchronous JSON-over-HTTP client built on httpx."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .errors import (
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
    HttpTimeoutError,
)


def _response_text(response: httpx.Response) -> str:
    """Return response text without raising secondary decode errors."""
    try:
        return response.text
    except Exception:  # noqa: BLE001
        return ""


def _status_error(response: httpx.Response) -> HttpStatusError:
    status_code = response.status_code
    return HttpStatusError(
        message=f"HTTP {status_code} for {response.request.method} {response.request.url}",
        method=response.request.method,
        url=str(response.request.url),
        retryable=status_code >= 500 or status_code == 429,
        status_code=status_code,
        response_body=_response_text(response),
        response_headers=dict(response.headers.items()),
    )


class HttpClient:
    """Thin wrapper over ``httpx.Client`` mapping failures to typed errors.

    The wrapper never retries; a failed call raises exactly once.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=dict(headers or {}),
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying transport when this wrapper created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def request(
        self,
        method: str,
        url: str,
        *,
        timeout_seconds: float | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue one request; raise on transport failure or non-2xx status."""
        if timeout_seconds is not None:
            kwargs["timeout"] = timeout_seconds
        try:
            response = self._client.request(method=method, url=url, **kwargs)
        except httpx.TimeoutException as exc:
            raise self._request_error(HttpTimeoutError, exc, method, url) from exc
        except httpx.RequestError as exc:
            raise self._request_error(HttpRequestError, exc, method, url) from exc

        if response.is_error:
            raise _status_error(response)
        return response

    def request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Issue one request and decode the JSON body of the response."""
        response = self.request(method, url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpJsonDecodeError(
                message=f"Invalid JSON response for {response.request.method} {response.request.url}",
                method=response.request.method,
                url=str(response.request.url),
                status_code=response.status_code,
                response_body=_response_text(response),
                cause=exc,
            ) from exc

    def get_json(self, url: str, **kwargs: Any) -> Any:
        return self.request_json("GET", url, **kwargs)

    def post_json(self, url: str, *, json: Any, **kwargs: Any) -> Any:
        return self.request_json("POST", url, json=json, **kwargs)

    @staticmethod
    def _request_error(
        error_type: type[HttpRequestError],
        exc: httpx.RequestError,
        method: str,
        url: str,
    ) -> HttpRequestError:
        try:
            request = exc.request
        except RuntimeError:
            request = None
        request_url = str(request.url) if request is not None else url
        request_method = request.method if request is not None else method.upper()
        return error_type(
            message=f"HTTP request failed for {request_method} {request_url}: {exc}",
            method=request_method,
            url=request_url,
            retryable=True,
            cause=exc,
        )
