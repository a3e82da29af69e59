# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Tests for environment driven settings.
"""

import pytest

from fetchkit.config import FetchSettings
from fetchkit.utils.env_parse_utils import get_env_bool, get_env_dict, get_env_float

ENV_VARS = [
    "FETCHKIT_TIMEOUT",
    "FETCHKIT_FOLLOW_REDIRECTS",
    "FETCHKIT_BASE_URL",
    "FETCHKIT_USER_AGENT",
    "FETCHKIT_DEFAULT_HEADERS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestFetchSettings:
    """Test suite for FetchSettings.from_env."""

    def test_defaults(self) -> None:
        settings = FetchSettings.from_env()

        assert settings == FetchSettings()
        assert settings.timeout == 30.0
        assert settings.follow_redirects is True
        assert settings.headers == {}

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHKIT_TIMEOUT", "2.5")
        monkeypatch.setenv("FETCHKIT_FOLLOW_REDIRECTS", "off")
        monkeypatch.setenv("FETCHKIT_BASE_URL", "https://api.test/")
        monkeypatch.setenv("FETCHKIT_USER_AGENT", "agent/1.0")
        monkeypatch.setenv("FETCHKIT_DEFAULT_HEADERS", "X-A=1, X-B=2")

        settings = FetchSettings.from_env()

        assert settings.timeout == 2.5
        assert settings.follow_redirects is False
        assert settings.base_url == "https://api.test/"
        assert settings.headers == {
            "X-A": "1",
            "X-B": "2",
            "User-Agent": "agent/1.0",
        }

    def test_explicit_user_agent_header_wins(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FETCHKIT_USER_AGENT", "agent/1.0")
        monkeypatch.setenv("FETCHKIT_DEFAULT_HEADERS", "User-Agent=custom")

        assert FetchSettings.from_env().headers == {"User-Agent": "custom"}

    @pytest.mark.parametrize("value", ["soon", "0", "-1"])
    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("FETCHKIT_TIMEOUT", value)

        with pytest.raises(ValueError, match="FETCHKIT_TIMEOUT"):
            FetchSettings.from_env()

    def test_invalid_follow_redirects(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHKIT_FOLLOW_REDIRECTS", "sometimes")

        with pytest.raises(ValueError, match="FETCHKIT_FOLLOW_REDIRECTS"):
            FetchSettings.from_env()

    def test_malformed_default_headers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHKIT_DEFAULT_HEADERS", "X-A=1,broken")

        with pytest.raises(ValueError, match="FETCHKIT_DEFAULT_HEADERS"):
            FetchSettings.from_env()

    def test_blank_user_agent_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHKIT_USER_AGENT", "  ")

        assert FetchSettings.from_env().user_agent is None


class TestEnvParseUtils:
    """Test suite for the environment readers."""

    @pytest.mark.parametrize(
        "value, expected", [("YES", True), (" on ", True), ("0", False), ("off", False)]
    )
    def test_get_env_bool(
        self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
    ) -> None:
        monkeypatch.setenv("FETCHKIT_TEST_FLAG", value)

        assert get_env_bool("FETCHKIT_TEST_FLAG", not expected) is expected

    def test_get_env_bool_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FETCHKIT_TEST_FLAG", raising=False)

        assert get_env_bool("FETCHKIT_TEST_FLAG", True) is True

    def test_get_env_float_allows_zero_unless_positive(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FETCHKIT_TEST_NUMBER", "0")

        assert get_env_float("FETCHKIT_TEST_NUMBER", 1.0) == 0.0
        with pytest.raises(ValueError, match="FETCHKIT_TEST_NUMBER"):
            get_env_float("FETCHKIT_TEST_NUMBER", 1.0, positive=True)

    def test_get_env_dict_skips_blank_items(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHKIT_TEST_PAIRS", "a=1,, b = 2 ,c=")

        assert get_env_dict("FETCHKIT_TEST_PAIRS") == {"a": "1", "b": "2", "c": ""}
