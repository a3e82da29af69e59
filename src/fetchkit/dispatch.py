# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import asyncio
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Coroutine, Optional, Protocol, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DeliveryContext(Protocol):
    """Where completion handlers run"""

    def dispatch(self, callback: Callable[[], None]) -> None: ...


class EventLoopContext(DeliveryContext):
    """Runs callbacks on an asyncio event loop, from any thread"""

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self.loop = loop

    def dispatch(self, callback: Callable[[], None]) -> None:
        self.loop.call_soon_threadsafe(callback)


def _log_callback_failure(future: "Future[Any]") -> None:
    if not future.cancelled() and (err := future.exception()) is not None:
        logger.exception("Callback raised on delivery", exc_info=err)


def _log_worker_failure(future: "Future[Any]") -> None:
    if not future.cancelled() and (err := future.exception()) is not None:
        logger.exception("Background work raised", exc_info=err)


class ExecutorContext(DeliveryContext):
    """Runs callbacks on a ``concurrent.futures`` executor"""

    def __init__(self, executor: Executor):
        self.executor = executor

    def dispatch(self, callback: Callable[[], None]) -> None:
        self.executor.submit(callback).add_done_callback(_log_callback_failure)


_main_lock = threading.Lock()
_main_context: Optional[ExecutorContext] = None


def main_context() -> ExecutorContext:
    """
    Process wide serial delivery context.

    Created on first use and kept for the lifetime of the process. Handlers
    dispatched here run one at a time, in dispatch order, on a single thread
    named ``fetchkit-main``.
    """
    global _main_context
    with _main_lock:
        if _main_context is None:
            _main_context = ExecutorContext(
                ThreadPoolExecutor(max_workers=1, thread_name_prefix="fetchkit-main")
            )
        return _main_context


DeliveryTarget = Union[DeliveryContext, asyncio.AbstractEventLoop, Executor]


def resolve_delivery_context(queue: Optional[DeliveryTarget] = None) -> DeliveryContext:
    """
    Pick the context a completion handler is delivered on.

    Without an explicit target, a caller running inside an event loop gets its
    own loop back. Anyone else gets :func:`main_context`.
    """
    if queue is None:
        try:
            return EventLoopContext(asyncio.get_running_loop())
        except RuntimeError:
            return main_context()

    if isinstance(queue, asyncio.AbstractEventLoop):
        return EventLoopContext(queue)

    if isinstance(queue, Executor):
        return ExecutorContext(queue)

    return queue


class BackgroundWorker:
    """
    An asyncio event loop running on its own daemon thread.

    Request building and transport calls are scheduled here so the calling
    thread never blocks. The thread starts lazily on the first submission.
    """

    _shared: "Optional[BackgroundWorker]" = None
    _shared_lock = threading.Lock()

    def __init__(self, name: str = "fetchkit-worker"):
        self.name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @classmethod
    def shared(cls) -> "BackgroundWorker":
        with cls._shared_lock:
            if cls._shared is None:
                cls._shared = cls()
            return cls._shared

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                self._start()
            assert self._loop is not None
            return self._loop

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _start(self) -> None:
        loop = asyncio.new_event_loop()
        started = threading.Event()

        def run() -> None:
            asyncio.set_event_loop(loop)
            loop.call_soon(started.set)
            loop.run_forever()

        self._thread = threading.Thread(target=run, name=self.name, daemon=True)
        self._thread.start()
        started.wait()
        self._loop = loop
        logger.debug("Started background worker %s", self.name)

    def submit(self, coroutine: Coroutine[Any, Any, T]) -> "Future[T]":
        future = asyncio.run_coroutine_threadsafe(coroutine, self.loop)
        future.add_done_callback(_log_worker_failure)
        return future

    def stop(self) -> None:
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None

        if loop is None or thread is None:
            return

        async def shutdown() -> None:
            await loop.shutdown_asyncgens()
            loop.stop()

        asyncio.run_coroutine_threadsafe(shutdown(), loop)
        thread.join()
        loop.close()
        logger.debug("Stopped background worker %s", self.name)


__all__ = [
    "DeliveryContext",
    "DeliveryTarget",
    "EventLoopContext",
    "ExecutorContext",
    "main_context",
    "resolve_delivery_context",
    "BackgroundWorker",
]
