"""
Pytest configuration and fixtures for fetchkit tests.
"""

import threading
from pathlib import Path
from typing import Any, Generator, Optional

import httpx
import pytest

from fetchkit.client import Fetch
from fetchkit.dispatch import BackgroundWorker
from fetchkit.models import RawRequest, ResponseMetadata, Result, TransportOutcome


class FakeTransport:
    """Records every exchange and answers with a canned outcome"""

    def __init__(
        self,
        outcome: Optional[TransportOutcome[Any]] = None,
        download: Optional[TransportOutcome[Any]] = None,
    ):
        self.outcome = outcome or TransportOutcome()
        self.download = download or self.outcome
        self.calls: list[tuple[str, RawRequest, Any]] = []

    async def data_task(self, request: RawRequest) -> TransportOutcome[Any]:
        self.calls.append(("data", request, None))
        return self.outcome

    async def download_task(self, request: RawRequest) -> TransportOutcome[Any]:
        self.calls.append(("download", request, None))
        return self.download

    async def upload_task(self, request: RawRequest, data: bytes) -> TransportOutcome[Any]:
        self.calls.append(("upload", request, data))
        return self.outcome

    async def upload_file_task(
        self, request: RawRequest, path: Path
    ) -> TransportOutcome[Any]:
        self.calls.append(("upload_file", request, path))
        return self.outcome


class Completion:
    """Completion handler that remembers how and where it was called"""

    def __init__(self) -> None:
        self.calls: list[tuple[Result[Any], Optional[ResponseMetadata]]] = []
        self.threads: list[threading.Thread] = []
        self._event = threading.Event()

    def __call__(self, result: Result[Any], response: Optional[ResponseMetadata]) -> None:
        self.calls.append((result, response))
        self.threads.append(threading.current_thread())
        self._event.set()

    def wait(self, timeout: float = 5.0) -> tuple[Result[Any], Optional[ResponseMetadata]]:
        assert self._event.wait(timeout), "completion handler was not called"
        return self.calls[0]


def make_response(status_code: int = 200, **headers: str) -> ResponseMetadata:
    return ResponseMetadata(
        status_code=status_code,
        headers=httpx.Headers(headers),
        url="https://api.test/items",
    )


@pytest.fixture
def worker() -> Generator[BackgroundWorker, None, None]:
    """A background worker private to one test."""
    background = BackgroundWorker(name="test-worker")
    yield background
    background.stop()


@pytest.fixture
def completion() -> Completion:
    return Completion()


@pytest.fixture(autouse=True)
def reset_default_client() -> Generator[None, None, None]:
    """Tests never leak a default client into each other."""
    Fetch.set_default(None)
    yield
    Fetch.set_default(None)
