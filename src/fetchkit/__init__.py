# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .backends.base import FetchTransport
    from .backends.httpx import HTTPXFetchTransport
    from .backends.otel import TracedRequestMiddleware
    from .config import FetchSettings
    from .dispatch import (
        BackgroundWorker,
        DeliveryContext,
        EventLoopContext,
        ExecutorContext,
        main_context,
    )
    from .exceptions import (
        DecodeError,
        EncodeError,
        FetchError,
        MissingResponseError,
        TransportError,
        TransportTimeoutError,
    )
    from .client import Fetch, fetch
    from .middlewares import (
        ApiKeyAuth,
        AuthenticationMiddleware,
        BasicAuth,
        BearerTokenAuth,
        DefaultHeaders,
        RequestMiddleware,
    )
    from .models import (
        Failure,
        HTTPMethod,
        RawRequest,
        ResponseMetadata,
        Result,
        Success,
        TransportOutcome,
    )
    from .request_body import BodyEncoder
    from .response_body import ResponseDecoder
    from .task import FetchTask, TaskExecution, TaskState

    __all__ = [
        "Fetch",
        "fetch",
        "FetchTask",
        "TaskExecution",
        "TaskState",
        "BodyEncoder",
        "ResponseDecoder",
        "HTTPMethod",
        "RawRequest",
        "ResponseMetadata",
        "Result",
        "Success",
        "Failure",
        "TransportOutcome",
        "FetchError",
        "EncodeError",
        "DecodeError",
        "TransportError",
        "TransportTimeoutError",
        "MissingResponseError",
        "FetchTransport",
        "HTTPXFetchTransport",
        "TracedRequestMiddleware",
        "RequestMiddleware",
        "AuthenticationMiddleware",
        "BearerTokenAuth",
        "BasicAuth",
        "ApiKeyAuth",
        "DefaultHeaders",
        "BackgroundWorker",
        "DeliveryContext",
        "EventLoopContext",
        "ExecutorContext",
        "main_context",
        "FetchSettings",
    ]

__SPEC_PARENT__: str = __spec__.parent  # type: ignore
# A mapping of {<member name>: (package, <module name>, <member realname>)} defining dynamic imports
_dynamic_imports: "dict[str, tuple[str, str, str | None]]" = {
    "Fetch": (__SPEC_PARENT__, "client", None),
    "fetch": (__SPEC_PARENT__, "client", None),
    "FetchTask": (__SPEC_PARENT__, "task", None),
    "TaskExecution": (__SPEC_PARENT__, "task", None),
    "TaskState": (__SPEC_PARENT__, "task", None),
    "BodyEncoder": (__SPEC_PARENT__, "request_body", None),
    "ResponseDecoder": (__SPEC_PARENT__, "response_body", None),
    "HTTPMethod": (__SPEC_PARENT__, "models", None),
    "RawRequest": (__SPEC_PARENT__, "models", None),
    "ResponseMetadata": (__SPEC_PARENT__, "models", None),
    "Result": (__SPEC_PARENT__, "models", None),
    "Success": (__SPEC_PARENT__, "models", None),
    "Failure": (__SPEC_PARENT__, "models", None),
    "TransportOutcome": (__SPEC_PARENT__, "models", None),
    "FetchError": (__SPEC_PARENT__, "exceptions", None),
    "EncodeError": (__SPEC_PARENT__, "exceptions", None),
    "DecodeError": (__SPEC_PARENT__, "exceptions", None),
    "TransportError": (__SPEC_PARENT__, "exceptions", None),
    "TransportTimeoutError": (__SPEC_PARENT__, "exceptions", None),
    "MissingResponseError": (__SPEC_PARENT__, "exceptions", None),
    "FetchTransport": (__SPEC_PARENT__, "backends.base", None),
    "HTTPXFetchTransport": (__SPEC_PARENT__, "backends.httpx", None),
    "TracedRequestMiddleware": (__SPEC_PARENT__, "backends.otel", None),
    "RequestMiddleware": (__SPEC_PARENT__, "middlewares", None),
    "AuthenticationMiddleware": (__SPEC_PARENT__, "middlewares", None),
    "BearerTokenAuth": (__SPEC_PARENT__, "middlewares", None),
    "BasicAuth": (__SPEC_PARENT__, "middlewares", None),
    "ApiKeyAuth": (__SPEC_PARENT__, "middlewares", None),
    "DefaultHeaders": (__SPEC_PARENT__, "middlewares", None),
    "BackgroundWorker": (__SPEC_PARENT__, "dispatch", None),
    "DeliveryContext": (__SPEC_PARENT__, "dispatch", None),
    "EventLoopContext": (__SPEC_PARENT__, "dispatch", None),
    "ExecutorContext": (__SPEC_PARENT__, "dispatch", None),
    "main_context": (__SPEC_PARENT__, "dispatch", None),
    "FetchSettings": (__SPEC_PARENT__, "config", None),
}


def __getattr__(attr_name: str) -> object:

    dynamic_attr = _dynamic_imports.get(attr_name)
    if dynamic_attr is None:
        raise AttributeError(f"module {__name__!r} has no attribute {attr_name!r}")

    package, module_name, realname = dynamic_attr

    module = import_module(f"{package}.{module_name}", package=package)
    result = getattr(module, attr_name if realname is None else realname)
    globals()[attr_name] = result
    return result


def __dir__() -> "list[str]":
    return list(_dynamic_imports)
