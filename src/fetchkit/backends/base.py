# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from pathlib import Path
from typing import Protocol

from fetchkit.models import DataOutcome, DownloadOutcome, RawRequest


class FetchTransport(Protocol):
    """
    The network collaborator behind every fetch task.

    Each primitive is a coroutine function: calling it prepares the exchange,
    nothing is sent until the returned coroutine is awaited. Failures are
    reported through ``TransportOutcome.error`` rather than raised.
    """

    async def data_task(self, request: RawRequest) -> DataOutcome: ...

    async def download_task(self, request: RawRequest) -> DownloadOutcome: ...

    async def upload_task(self, request: RawRequest, data: bytes) -> DataOutcome: ...

    async def upload_file_task(
        self, request: RawRequest, path: Path
    ) -> DataOutcome: ...
