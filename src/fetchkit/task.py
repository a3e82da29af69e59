# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from enum import Enum
from pathlib import Path
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    Mapping,
    Optional,
    TypeVar,
    Union,
    overload,
)

from fetchkit.backends.base import FetchTransport
from fetchkit.dispatch import (
    BackgroundWorker,
    DeliveryContext,
    DeliveryTarget,
    resolve_delivery_context,
)
from fetchkit.exceptions import (
    DecodeError,
    EncodeError,
    FetchError,
    MissingResponseError,
    TransportError,
)
from fetchkit.models import (
    Failure,
    HTTPMethod,
    RawRequest,
    ResponseMetadata,
    Result,
    Success,
    TransportOutcome,
)
from fetchkit.query import merge_query
from fetchkit.request_body import BodyEncoder
from fetchkit.response_body import ResponseDecoder

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = TypeVar("P")

CompletionHandler = Callable[[Result[T], Optional[ResponseMetadata]], None]
Submit = Callable[[FetchTransport, RawRequest], Awaitable[TransportOutcome[Any]]]
Project = Callable[[TransportOutcome[Any]], Result[T]]
RequestAdapter = Callable[[RawRequest], RawRequest]


class TaskState(str, Enum):
    BUILT = "built"
    SUBMITTED = "submitted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def result_of(error: Optional[FetchError], data: Optional[P]) -> Result[Optional[P]]:
    """An error wins, otherwise the data is a success even when absent"""
    if error is not None:
        return Failure(error)
    return Success(data)


def decoded_result_of(
    error: Optional[FetchError],
    data: Optional[bytes],
    response: Optional[ResponseMetadata],
    decoder: ResponseDecoder[T],
) -> Result[T]:
    """
    Decode a finished exchange.

    Unlike :func:`result_of`, a decoded result needs both the bytes and the
    response, so an exchange that carries neither fails with
    :class:`MissingResponseError`.
    """
    if error is not None:
        return Failure(error)

    if data is None or response is None:
        return Failure(MissingResponseError())

    try:
        return Success(decoder.decode(response, data))
    except DecodeError as err:
        return Failure(err)


def build_request(
    request: RawRequest,
    query: Optional[Mapping[str, Optional[str]]] = None,
    body: Optional[BodyEncoder] = None,
    adaptor: Optional[RequestAdapter] = None,
) -> RawRequest:
    """
    Assemble the wire request: merge the query, encode the body, then let
    the response decoder adapt it. Raises :class:`EncodeError`.
    """
    request = request.with_url(merge_query(request.url, query))

    if body is not None:
        request = body.adapt(request)

    if adaptor is not None:
        request = adaptor(request)

    return request


class TaskExecution(Generic[T]):
    """
    One in-flight operation of a :class:`FetchTask`.

    Moves through ``BUILT -> SUBMITTED -> SUCCEEDED | FAILED`` exactly once and
    calls its completion handler exactly once, on its delivery context. There
    is no way to cancel it.
    """

    def __init__(
        self,
        transport: FetchTransport,
        request: RawRequest,
        query: Optional[Mapping[str, Optional[str]]],
        body: Optional[BodyEncoder],
        adaptor: Optional[RequestAdapter],
        submit: Submit,
        project: Project[T],
        delivery: DeliveryContext,
        completion_handler: CompletionHandler[T],
    ):
        self.transport = transport
        self.request = request.with_headers({})
        self.query = dict(query) if query is not None else None
        self.body = body
        self.adaptor = adaptor
        self.delivery = delivery
        self._submit = submit
        self._project = project
        self._completion_handler = completion_handler
        self._state = TaskState.BUILT

    @property
    def state(self) -> TaskState:
        return self._state

    def build(self) -> RawRequest:
        return build_request(self.request, self.query, self.body, self.adaptor)

    async def run(self) -> None:
        try:
            request = self.build()
        except EncodeError as err:
            self._fail_build(err)
            return
        except Exception as err:
            self._fail_build(EncodeError(f"Could not build request: {err}", err))
            return

        logger.debug(
            "Prepared request: %s %s\nHeaders: %s\nBody: %s",
            request.method,
            request.url,
            request.headers,
            request.payload,
        )

        self._state = TaskState.SUBMITTED

        try:
            outcome = await self._submit(self.transport, request)
        except FetchError as err:
            outcome = TransportOutcome(error=err)
        except Exception as err:
            outcome = TransportOutcome(error=TransportError(str(err), err))

        self._finish(self._project(outcome), outcome.response)

    def _fail_build(self, err: EncodeError) -> None:
        logger.debug(
            "Encoding %s %s failed: %s", self.request.method, self.request.url, err
        )
        self._finish(Failure(err), None)

    def _finish(self, result: Result[T], response: Optional[ResponseMetadata]) -> None:
        self._state = TaskState.SUCCEEDED if result.is_success else TaskState.FAILED
        logger.debug(
            "Delivering %s result for %s %s",
            self._state.value,
            self.request.method,
            self.request.url,
        )
        self.delivery.dispatch(lambda: self._completion_handler(result, response))


class FetchTask:
    """
    Declarative description of one logical call.

    The request template, query parameters and body encoder may be changed
    freely until an operation starts, each operation works on a snapshot
    taken when it is called. Operations run on a background worker and hand
    their result to ``completion_handler`` on the ``queue`` delivery context,
    which defaults to the caller's running event loop or to
    :func:`fetchkit.dispatch.main_context`.
    """

    def __init__(
        self,
        transport: FetchTransport,
        request: RawRequest,
        method: Union[str, HTTPMethod] = HTTPMethod.GET,
        query: Optional[Mapping[str, Optional[str]]] = None,
        body: Optional[BodyEncoder] = None,
        headers: Optional[Mapping[str, str]] = None,
        worker: Optional[BackgroundWorker] = None,
    ):
        self.transport = transport
        self.request = request.with_method(method).with_headers(headers or {})
        self.query = query
        self.body = body
        self.worker = worker or BackgroundWorker.shared()

    def _start(
        self,
        submit: Submit,
        project: Project[T],
        adaptor: Optional[RequestAdapter],
        queue: Optional[DeliveryTarget],
        completion_handler: CompletionHandler[T],
    ) -> TaskExecution[T]:
        execution = TaskExecution(
            transport=self.transport,
            request=self.request,
            query=self.query,
            body=self.body,
            adaptor=adaptor,
            submit=submit,
            project=project,
            delivery=resolve_delivery_context(queue),
            completion_handler=completion_handler,
        )
        self.worker.submit(execution.run())
        return execution

    def _project(
        self, decoder: Optional[ResponseDecoder[Any]]
    ) -> tuple[Project[Any], Optional[RequestAdapter]]:
        if decoder is None:
            return (lambda outcome: result_of(outcome.error, outcome.payload)), None

        return (
            lambda outcome: decoded_result_of(
                outcome.error, outcome.payload, outcome.response, decoder
            )
        ), decoder.adapt

    @overload
    def response(
        self,
        completion_handler: CompletionHandler[Optional[bytes]],
        *,
        body: None = None,
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[Optional[bytes]]: ...

    @overload
    def response(
        self,
        completion_handler: CompletionHandler[T],
        *,
        body: ResponseDecoder[T],
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[T]: ...

    def response(
        self,
        completion_handler: CompletionHandler[Any],
        *,
        body: Optional[ResponseDecoder[Any]] = None,
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[Any]:
        """
        Fetch the response body.

        With a ``body`` decoder the handler receives the decoded value and an
        exchange without data fails. Without one it receives the raw bytes,
        which may be ``None``.
        """
        project, adaptor = self._project(body)
        return self._start(
            lambda transport, request: transport.data_task(request),
            project,
            adaptor,
            queue,
            completion_handler,
        )

    def download(
        self,
        completion_handler: CompletionHandler[Optional[Path]],
        *,
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[Optional[Path]]:
        """Store the response body in a file and receive its location"""
        return self._start(
            lambda transport, request: transport.download_task(request),
            lambda outcome: result_of(outcome.error, outcome.payload),
            None,
            queue,
            completion_handler,
        )

    @overload
    def upload(
        self,
        data: bytes,
        completion_handler: CompletionHandler[Optional[bytes]],
        *,
        body: None = None,
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[Optional[bytes]]: ...

    @overload
    def upload(
        self,
        data: bytes,
        completion_handler: CompletionHandler[T],
        *,
        body: ResponseDecoder[T],
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[T]: ...

    def upload(
        self,
        data: bytes,
        completion_handler: CompletionHandler[Any],
        *,
        body: Optional[ResponseDecoder[Any]] = None,
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[Any]:
        """Send ``data`` as the request body in place of the encoder's payload"""
        project, adaptor = self._project(body)
        return self._start(
            lambda transport, request: transport.upload_task(request, data),
            project,
            adaptor,
            queue,
            completion_handler,
        )

    @overload
    def upload_file(
        self,
        path: Union[str, Path],
        completion_handler: CompletionHandler[Optional[bytes]],
        *,
        body: None = None,
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[Optional[bytes]]: ...

    @overload
    def upload_file(
        self,
        path: Union[str, Path],
        completion_handler: CompletionHandler[T],
        *,
        body: ResponseDecoder[T],
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[T]: ...

    def upload_file(
        self,
        path: Union[str, Path],
        completion_handler: CompletionHandler[Any],
        *,
        body: Optional[ResponseDecoder[Any]] = None,
        queue: Optional[DeliveryTarget] = None,
    ) -> TaskExecution[Any]:
        file_path = Path(path)
        project, adaptor = self._project(body)
        return self._start(
            lambda transport, request: transport.upload_file_task(request, file_path),
            project,
            adaptor,
            queue,
            completion_handler,
        )


__all__ = [
    "TaskState",
    "TaskExecution",
    "FetchTask",
    "CompletionHandler",
    "result_of",
    "decoded_result_of",
    "build_request",
]
