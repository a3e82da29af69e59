# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Fetch transports
"""
Transport implementations for fetch tasks.
"""

from .base import FetchTransport
from .httpx import HTTPXFetchTransport

__all__ = [
    "FetchTransport",
    "HTTPXFetchTransport",
]
