# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
import threading
from typing import Iterable, Mapping, Optional, Union

from fetchkit.backends.base import FetchTransport
from fetchkit.backends.httpx import HTTPXFetchTransport
from fetchkit.config import FetchSettings
from fetchkit.dispatch import BackgroundWorker
from fetchkit.middlewares import DefaultHeaders, RequestMiddleware
from fetchkit.models import HTTPMethod, RawRequest
from fetchkit.request_body import BodyEncoder
from fetchkit.task import FetchTask

logger = logging.getLogger(__name__)


class Fetch:
    """
    Creates fetch tasks bound to one transport.

    The transport and the background worker are shared by every task this
    client creates. Middlewares adapt the request template when a task is
    created, before the task's own build steps run.
    """

    _default: "Optional[Fetch]" = None
    _default_lock = threading.Lock()

    def __init__(
        self,
        transport: Optional[FetchTransport] = None,
        worker: Optional[BackgroundWorker] = None,
        middlewares: Iterable[RequestMiddleware] = (),
    ):
        self.transport = transport or HTTPXFetchTransport()
        self.worker = worker or BackgroundWorker.shared()
        self.middlewares = list(middlewares)

    @classmethod
    def from_settings(cls, settings: FetchSettings) -> "Fetch":
        transport = HTTPXFetchTransport(
            prefix_url=settings.base_url,
            default_timeout=settings.timeout,
            follow_redirects=settings.follow_redirects,
        )
        middlewares: list[RequestMiddleware] = []
        if settings.headers:
            middlewares.append(DefaultHeaders(settings.headers))
        return cls(transport, middlewares=middlewares)

    @classmethod
    def default(cls) -> "Fetch":
        """The process wide client, created from the environment on first use"""
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls.from_settings(FetchSettings.from_env())
                logger.debug("Created default fetch client")
            return cls._default

    @classmethod
    def set_default(cls, fetch: "Optional[Fetch]") -> None:
        """Replace the process wide client, ``None`` resets it"""
        with cls._default_lock:
            cls._default = fetch

    def request(
        self,
        request: Union[str, RawRequest],
        method: Union[str, HTTPMethod] = HTTPMethod.GET,
        query: Optional[Mapping[str, Optional[str]]] = None,
        body: Optional[BodyEncoder] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> FetchTask:
        if isinstance(request, str):
            request = RawRequest(url=request)

        task = FetchTask(
            self.transport,
            request,
            method=method,
            query=query,
            body=body,
            headers=headers,
            worker=self.worker,
        )

        for middleware in self.middlewares:
            task.request = middleware.on_request(task.request)

        return task


def fetch(
    request: Union[str, RawRequest],
    method: Union[str, HTTPMethod] = HTTPMethod.GET,
    query: Optional[Mapping[str, Optional[str]]] = None,
    body: Optional[BodyEncoder] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> FetchTask:
    """Create a task on :meth:`Fetch.default`"""
    return Fetch.default().request(
        request, method=method, query=query, body=body, headers=headers
    )


__all__ = [
    "Fetch",
    "fetch",
]
