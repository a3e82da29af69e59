# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import asyncio
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, AsyncIterator, Optional
from urllib.parse import urljoin

import httpx

from fetchkit.backends.base import FetchTransport
from fetchkit.exceptions import TransportError, TransportTimeoutError
from fetchkit.models import DataOutcome, DownloadOutcome, RawRequest, ResponseMetadata

logger = logging.getLogger(__name__)


class HTTPXFetchTransport(FetchTransport):

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        prefix_url: str = "",
        default_timeout: float = 30.0,
        follow_redirects: bool = True,
        download_dir: Optional[Path] = None,
        chunk_size: int = 64 * 1024,
    ):
        self.prefix_url = prefix_url
        self.default_timeout = default_timeout
        self.follow_redirects = follow_redirects
        self.download_dir = download_dir
        self.chunk_size = chunk_size
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        # Created on first use so it binds to the loop that drives it
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.default_timeout,
                follow_redirects=self.follow_redirects,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build(self, request: RawRequest, content: Any = None) -> httpx.Request:
        return self.client.build_request(
            method=request.method,
            url=urljoin(self.prefix_url, request.url),
            headers=request.headers,
            content=content if content is not None else request.payload,
        )

    async def _send(
        self, request: RawRequest, content: Any = None
    ) -> tuple[bytes, ResponseMetadata]:
        start_time = time.time()
        backend_request = self._build(request, content)

        logger.debug("Sending %s %s", backend_request.method, backend_request.url)

        try:
            response = await self.client.send(backend_request)
        except httpx.TimeoutException as err:
            raise TransportTimeoutError(f"Request timed out: {err}", err) from err
        except httpx.HTTPError as err:
            raise TransportError(f"Network error: {err}", err) from err

        elapsed_time = time.time() - start_time
        logger.debug("Received %s from %s", response.status_code, response.url)

        return response.content, ResponseMetadata.from_httpx(response, elapsed_time)

    async def data_task(self, request: RawRequest) -> DataOutcome:
        try:
            data, response = await self._send(request)
        except TransportError as err:
            return DataOutcome(error=err)
        return DataOutcome(payload=data, response=response)

    async def upload_task(self, request: RawRequest, data: bytes) -> DataOutcome:
        try:
            body, response = await self._send(request, content=data)
        except TransportError as err:
            return DataOutcome(error=err)
        return DataOutcome(payload=body, response=response)

    async def _read_file(self, path: Path) -> AsyncIterator[bytes]:
        with open(path, "rb") as stream:
            while chunk := await asyncio.to_thread(stream.read, self.chunk_size):
                yield chunk

    async def upload_file_task(self, request: RawRequest, path: Path) -> DataOutcome:
        if not os.path.isfile(path):
            return DataOutcome(
                error=TransportError(f"Cannot upload {path}: not a readable file")
            )

        request = request.with_default_header(
            "Content-Length", str(os.path.getsize(path))
        )

        try:
            body, response = await self._send(request, content=self._read_file(path))
        except TransportError as err:
            return DataOutcome(error=err)
        except OSError as err:
            return DataOutcome(
                error=TransportError(f"Cannot upload {path}: {err}", err)
            )
        return DataOutcome(payload=body, response=response)

    async def download_task(self, request: RawRequest) -> DownloadOutcome:
        start_time = time.time()
        backend_request = self._build(request)
        fd, name = tempfile.mkstemp(
            prefix="fetchkit-", suffix=".download", dir=self.download_dir
        )
        location = Path(name)

        logger.debug("Downloading %s %s", backend_request.method, backend_request.url)

        try:
            with os.fdopen(fd, "wb") as target:
                response = await self.client.send(backend_request, stream=True)
                try:
                    async for chunk in response.aiter_bytes(self.chunk_size):
                        target.write(chunk)
                finally:
                    await response.aclose()
        except httpx.TimeoutException as err:
            location.unlink(missing_ok=True)
            return DownloadOutcome(
                error=TransportTimeoutError(f"Request timed out: {err}", err)
            )
        except httpx.HTTPError as err:
            location.unlink(missing_ok=True)
            return DownloadOutcome(error=TransportError(f"Network error: {err}", err))

        elapsed_time = time.time() - start_time
        return DownloadOutcome(
            payload=location,
            response=ResponseMetadata.from_httpx(response, elapsed_time),
        )


__all__ = [
    "HTTPXFetchTransport",
]
