# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import base64
from typing import Protocol

from fetchkit.models import RawRequest


class RequestMiddleware(Protocol):

    def on_request(self, request: RawRequest) -> RawRequest: ...


class AuthenticationMiddleware(RequestMiddleware):
    """Base class for authentication middleware"""

    def on_request(self, request: RawRequest) -> RawRequest:
        return self.add_auth(request)

    def add_auth(self, request: RawRequest) -> RawRequest:
        raise NotImplementedError


class BearerTokenAuth(AuthenticationMiddleware):
    """Bearer token authentication middleware"""

    def __init__(self, token: str):
        self.token = token

    def add_auth(self, request: RawRequest) -> RawRequest:
        return request.with_default_header("Authorization", f"Bearer {self.token}")


class BasicAuth(AuthenticationMiddleware):
    """Basic authentication middleware"""

    def __init__(self, username: str, password: str):
        credentials = base64.b64encode(f"{username}:{password}".encode()).decode()
        self.credentials = credentials

    def add_auth(self, request: RawRequest) -> RawRequest:
        return request.with_default_header("Authorization", f"Basic {self.credentials}")


class ApiKeyAuth(AuthenticationMiddleware):
    """API key authentication middleware"""

    def __init__(self, api_key: str, header_name: str = "X-API-Key"):
        self.api_key = api_key
        self.header_name = header_name

    def add_auth(self, request: RawRequest) -> RawRequest:
        return request.with_default_header(self.header_name, self.api_key)


class DefaultHeaders(RequestMiddleware):
    """Adds headers the caller did not set explicitly"""

    def __init__(self, headers: dict[str, str]):
        self.headers = headers

    def on_request(self, request: RawRequest) -> RawRequest:
        for name, value in self.headers.items():
            request = request.with_default_header(name, value)
        return request


__all__ = [
    "RequestMiddleware",
    "AuthenticationMiddleware",
    "BearerTokenAuth",
    "BasicAuth",
    "ApiKeyAuth",
    "DefaultHeaders",
]
