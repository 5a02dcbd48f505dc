"""Query sources for event list parameters.

A context call reads its parameters either from the page request or, when
the list is embedded into another page, from the query string of the
embed URI.  Both are exposed through the same QuerySource protocol so the
assembler never needs to know which one it got.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional, Protocol
from urllib.parse import parse_qs, urlsplit

from event_context.core.errors import MalformedEmbedURIError
from event_context.domain.event import UNBOUNDED, QueryParameters
from event_context.domain.request import EmbedNode, ResolvedRequest

# "%" must start a two-digit hex escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# Decimal integer with optional sign, nothing else
_INTEGER = re.compile(r"[+-]?[0-9]+")


class QuerySource(Protocol):
    """Protocol for query parameter lookup."""

    def values(self, key: str) -> list[str]:
        """Return every value given for *key*, in order; empty if absent."""
        ...


class RequestQuerySource:
    """Reads parameters from the page request's own query."""

    def __init__(self, query: Mapping[str, list[str]]) -> None:
        self._query = query

    def values(self, key: str) -> list[str]:
        return list(self._query.get(key, []))


class URIQuerySource:
    """Reads parameters from the query string of an embed URI.

    Raises:
        MalformedEmbedURIError: If *uri* cannot be parsed.
    """

    def __init__(self, uri: str) -> None:
        try:
            parts = urlsplit(uri)
            # raises ValueError for a non-numeric or out-of-range port
            parts.port
            if _BAD_ESCAPE.search(parts.path):
                raise ValueError(f"invalid escape in path {parts.path!r}")
            self._query = parse_qs(parts.query, keep_blank_values=True)
        except ValueError as exc:
            raise MalformedEmbedURIError(f"{uri!r}: {exc}") from exc

    def values(self, key: str) -> list[str]:
        return list(self._query.get(key, []))


def query_source_for(
    request: ResolvedRequest,
    embed: Optional[EmbedNode] = None,
) -> QuerySource:
    """Pick the embed URI's query when embedded, the request's otherwise."""
    if embed is not None:
        return URIQuerySource(embed.uri)
    return RequestQuerySource(request.query)


def parse_query_parameters(source: QuerySource) -> QueryParameters:
    """Derive list parameters from ``past``, ``upcoming`` and ``limit``.

    ``past`` and ``upcoming`` count as set when present at all, even
    without a value.  An unparsable ``limit`` means unbounded.
    """
    limit = UNBOUNDED
    raw_limit = source.values("limit")
    if raw_limit and _INTEGER.fullmatch(raw_limit[0]):
        limit = int(raw_limit[0])
    return QueryParameters(
        past_only=len(source.values("past")) > 0,
        upcoming_only=len(source.values("upcoming")) > 0,
        limit=limit,
    )
