# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Tests for query parameter merging.
"""

from fetchkit.query import encode_query_items, merge_query, parse_query_items


class TestMergeQuery:
    """Test suite for merge_query."""

    def test_appends_items_to_url_without_query(self) -> None:
        url = merge_query("https://api.test/items", {"limit": "10", "page": "2"})

        assert url == "https://api.test/items?limit=10&page=2"

    def test_base_items_come_before_new_items(self) -> None:
        url = merge_query("https://api.test/items?tag=a&tag=b", {"tag": "c"})

        assert url == "https://api.test/items?tag=a&tag=b&tag=c"

    def test_none_value_is_a_bare_name(self) -> None:
        url = merge_query("https://api.test/items", {"a": "1", "flag": None})

        assert url == "https://api.test/items?a=1&flag"

    def test_base_items_are_kept_verbatim(self) -> None:
        url = merge_query("https://api.test/items?q=a%20b&raw", {"x": "1"})

        assert url == "https://api.test/items?q=a%20b&raw&x=1"

    def test_values_are_percent_encoded(self) -> None:
        url = merge_query("https://api.test/search", {"q": "a b&c=d#e"})

        assert url == "https://api.test/search?q=a%20b%26c%3Dd%23e"

    def test_fragment_is_preserved(self) -> None:
        url = merge_query("https://api.test/page?a=1#top", {"b": "2"})

        assert url == "https://api.test/page?a=1&b=2#top"

    def test_none_query_leaves_url_untouched(self) -> None:
        assert merge_query("https://api.test/items?a=1", None) == (
            "https://api.test/items?a=1"
        )

    def test_unparseable_url_is_returned_unmodified(self) -> None:
        url = "http://[::1/items"

        assert merge_query(url, {"a": "1"}) == url


class TestQueryItems:
    """Test suite for query item encoding helpers."""

    def test_encode_keeps_plus_literal(self) -> None:
        assert encode_query_items([("sum", "1+1")]) == "sum=1+1"

    def test_parse_bare_names_and_empty_values(self) -> None:
        assert parse_query_items("a=1&b&c=") == [("a", "1"), ("b", None), ("c", "")]

    def test_parse_does_not_read_plus_as_space(self) -> None:
        assert parse_query_items("q=a+b%2Bc") == [("q", "a+b+c")]

    def test_parse_skips_empty_segments(self) -> None:
        assert parse_query_items("&a=1&&") == [("a", "1")]
