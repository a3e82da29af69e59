# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from opentelemetry import trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from fetchkit.middlewares import RequestMiddleware
from fetchkit.models import RawRequest


class TracedRequestMiddleware(RequestMiddleware):
    """Propagates the caller's trace context and baggage as request headers"""

    def on_request(self, request: RawRequest) -> RawRequest:

        span = trace.get_current_span()

        if not span.get_span_context().is_valid:
            return request

        headers: dict[str, str] = {}
        W3CBaggagePropagator().inject(headers)
        TraceContextTextMapPropagator().inject(headers)

        for key, value in headers.items():
            request = request.with_default_header(key, value)

        return request
