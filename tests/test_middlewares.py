# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Tests for request middlewares.
"""

import base64

from opentelemetry.sdk.trace import TracerProvider

from fetchkit.backends.otel import TracedRequestMiddleware
from fetchkit.middlewares import ApiKeyAuth, BasicAuth, BearerTokenAuth, DefaultHeaders
from fetchkit.models import RawRequest


class TestAuthentication:
    """Test suite for authentication middlewares."""

    def test_bearer_token(self) -> None:
        request = BearerTokenAuth("test-token").on_request(RawRequest(url="https://a.test"))

        assert request.headers["Authorization"] == "Bearer test-token"

    def test_basic_auth(self) -> None:
        request = BasicAuth("user", "pass").on_request(RawRequest(url="https://a.test"))

        expected = base64.b64encode(b"user:pass").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"

    def test_api_key_custom_header(self) -> None:
        auth = ApiKeyAuth("secret-key", "x-api-key")

        request = auth.on_request(RawRequest(url="https://a.test"))

        assert request.headers["X-Api-Key"] == "secret-key"

    def test_explicit_authorization_is_kept(self) -> None:
        original = RawRequest(url="https://a.test", headers={"Authorization": "Token x"})

        request = BearerTokenAuth("test-token").on_request(original)

        assert request.headers["Authorization"] == "Token x"


class TestDefaultHeaders:
    """Test suite for DefaultHeaders."""

    def test_adds_missing_headers_only(self) -> None:
        middleware = DefaultHeaders({"User-Agent": "fetchkit", "Accept": "*/*"})
        original = RawRequest(url="https://a.test", headers={"accept": "text/csv"})

        request = middleware.on_request(original)

        assert request.headers["User-Agent"] == "fetchkit"
        assert request.headers["Accept"] == "text/csv"


class TestTracedRequestMiddleware:
    """Test suite for trace context propagation."""

    def test_injects_traceparent_inside_span(self) -> None:
        tracer = TracerProvider().get_tracer(__name__)

        with tracer.start_as_current_span("outgoing"):
            request = TracedRequestMiddleware().on_request(
                RawRequest(url="https://a.test")
            )

        assert "traceparent" in request.headers

    def test_no_headers_without_span(self) -> None:
        original = RawRequest(url="https://a.test")

        request = TracedRequestMiddleware().on_request(original)

        assert "traceparent" not in request.headers
