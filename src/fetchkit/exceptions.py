# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import Optional


class FetchError(Exception):
    """Base class for every failure delivered by a fetch task"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class EncodeError(FetchError):
    """The request body encoder failed, no request was sent"""


class DecodeError(FetchError):
    """The response decoder failed on otherwise successful bytes"""


class TransportError(FetchError):
    """Opaque failure reported by the transport"""


class TransportTimeoutError(TransportError):
    """Exception raised when a request times out"""


class MissingResponseError(FetchError):

    def __init__(self, message: str = "Transport returned neither data nor response"):
        super().__init__(message)


__all__ = [
    "FetchError",
    "EncodeError",
    "DecodeError",
    "TransportError",
    "TransportTimeoutError",
    "MissingResponseError",
]
