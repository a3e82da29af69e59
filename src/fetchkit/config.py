# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from typing import Optional

from fetchkit.utils.env_parse_utils import (
    get_env_bool,
    get_env_dict,
    get_env_float,
    get_env_str,
)

ENV_TIMEOUT = "FETCHKIT_TIMEOUT"
ENV_FOLLOW_REDIRECTS = "FETCHKIT_FOLLOW_REDIRECTS"
ENV_BASE_URL = "FETCHKIT_BASE_URL"
ENV_USER_AGENT = "FETCHKIT_USER_AGENT"
ENV_DEFAULT_HEADERS = "FETCHKIT_DEFAULT_HEADERS"


@dataclass
class FetchSettings:
    """Settings used to build the default client"""

    timeout: float = 30.0
    follow_redirects: bool = True
    base_url: str = ""
    user_agent: Optional[str] = None
    default_headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "FetchSettings":
        """Read the settings, raising :class:`ValueError` naming a bad variable"""
        return cls(
            timeout=get_env_float(ENV_TIMEOUT, cls.timeout, positive=True),
            follow_redirects=get_env_bool(ENV_FOLLOW_REDIRECTS, cls.follow_redirects),
            base_url=get_env_str(ENV_BASE_URL, ""),
            user_agent=get_env_str(ENV_USER_AGENT),
            default_headers=get_env_dict(ENV_DEFAULT_HEADERS),
        )

    @property
    def headers(self) -> dict[str, str]:
        headers = dict(self.default_headers)
        if self.user_agent:
            headers.setdefault("User-Agent", self.user_agent)
        return headers


__all__ = [
    "FetchSettings",
]
