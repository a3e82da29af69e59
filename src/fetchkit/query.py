# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from typing import Iterable, Mapping, Optional
from urllib.parse import quote, unquote, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

# Characters allowed unescaped inside a query component, except the
# separators "&", "=" and "#"
QUERY_COMPONENT_SAFE = "!$'()*+,;:@/?"

QueryItems = Iterable[tuple[str, Optional[str]]]


def encode_query_items(items: QueryItems) -> str:
    """
    Percent encode ``(name, value)`` pairs into a query string.

    A ``None`` value produces a bare ``name`` without ``=``.
    """
    parts: list[str] = []
    for name, value in items:
        encoded = quote(name, safe=QUERY_COMPONENT_SAFE)
        if value is not None:
            encoded += "=" + quote(value, safe=QUERY_COMPONENT_SAFE)
        parts.append(encoded)
    return "&".join(parts)


def parse_query_items(query: str) -> list[tuple[str, Optional[str]]]:
    """
    Split a percent encoded query into ``(name, value)`` pairs.

    ``+`` is kept literally, it is not read as a space.
    """
    items: list[tuple[str, Optional[str]]] = []
    for part in query.split("&"):
        if not part:
            continue
        name, sep, value = part.partition("=")
        items.append((unquote(name), unquote(value) if sep else None))
    return items


def merge_query(url: str, query: Optional[Mapping[str, Optional[str]]]) -> str:
    """
    Append ``query`` to the items already present in ``url``.

    Existing items come first and are kept verbatim, then the mapping's items
    in iteration order. A URL that cannot be split is returned unmodified.
    """
    if query is None:
        return url

    try:
        parts = urlsplit(url)
    except ValueError:
        logger.debug("Could not parse %r, query parameters are not merged", url)
        return url

    appended = encode_query_items(query.items())
    merged = "&".join(part for part in (parts.query, appended) if part)

    return urlunsplit(parts._replace(query=merged))


__all__ = [
    "encode_query_items",
    "parse_query_items",
    "merge_query",
]
