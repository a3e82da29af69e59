# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Generic, Mapping, NoReturn, Optional, TypeVar, Union

import httpx

from fetchkit.exceptions import FetchError

T = TypeVar("T")
P = TypeVar("P")


class HTTPMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


@dataclass(frozen=True)
class RawRequest:
    """
    Wire-ready request being assembled by encoders and adapters.

    Instances are never mutated. Every ``with_*`` helper returns a new request
    with its own copy of the headers, so two tasks built from the same
    template never observe each other's changes.
    """

    url: str
    method: str = HTTPMethod.GET.value
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    payload: Optional[bytes] = None

    def __post_init__(self) -> None:
        # Always own a private, case-insensitive header map
        object.__setattr__(self, "headers", httpx.Headers(self.headers))
        if isinstance(self.method, HTTPMethod):
            object.__setattr__(self, "method", self.method.value)

    def with_url(self, url: str) -> "RawRequest":
        return replace(self, url=url)

    def with_method(self, method: Union[str, HTTPMethod]) -> "RawRequest":
        return replace(self, method=method)

    def with_payload(self, payload: Optional[bytes]) -> "RawRequest":
        return replace(self, payload=payload)

    def with_header(self, name: str, value: str) -> "RawRequest":
        headers = httpx.Headers(self.headers)
        headers[name] = value
        return replace(self, headers=headers)

    def with_headers(self, headers: Mapping[str, str]) -> "RawRequest":
        merged = httpx.Headers(self.headers)
        for name, value in headers.items():
            merged[name] = value
        return replace(self, headers=merged)

    def with_default_header(self, name: str, value: str) -> "RawRequest":
        """Set ``name`` only when the request does not carry it yet"""
        if name in self.headers:
            return self
        return self.with_header(name, value)


@dataclass(frozen=True)
class ResponseMetadata:
    status_code: int
    headers: httpx.Headers
    url: str
    elapsed: Optional[float] = None

    @classmethod
    def from_httpx(
        cls, response: httpx.Response, elapsed: Optional[float] = None
    ) -> "ResponseMetadata":
        return cls(
            status_code=response.status_code,
            headers=httpx.Headers(response.headers),
            url=str(response.url),
            elapsed=elapsed,
        )


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: FetchError

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error


Result = Union[Success[T], Failure]


@dataclass(frozen=True)
class TransportOutcome(Generic[P]):
    """What a transport primitive hands back once the exchange is over"""

    payload: Optional[P] = None
    response: Optional[ResponseMetadata] = None
    error: Optional[FetchError] = None


DataOutcome = TransportOutcome[bytes]
DownloadOutcome = TransportOutcome[Path]


__all__ = [
    "HTTPMethod",
    "RawRequest",
    "ResponseMetadata",
    "Success",
    "Failure",
    "Result",
    "TransportOutcome",
    "DataOutcome",
    "DownloadOutcome",
]
