"""Typed errors raised by the shared HTTP client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(eq=False)
class HttpClientError(Exception):
    """Base error for outbound HTTP call failures."""

    message: str
    method: str
    url: str
    retryable: bool = False

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class HttpRequestError(HttpClientError):
    """Transport-level failure (connect, read, timeout)."""

    cause: Exception | None = None


@dataclass(eq=False)
class HttpTimeoutError(HttpRequestError):
    """The request did not finish within its timeout."""


@dataclass(eq=False)
class HttpStatusError(HttpClientError):
    """The server answered with a non-success status code."""

    status_code: int = 0
    response_body: str = ""
    response_headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(eq=False)
class HttpJsonDecodeError(HttpClientError):
    """A successful response did not carry a JSON body."""

    status_code: int = 0
    response_body: str = ""
    cause: Exception | None = None
