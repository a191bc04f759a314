"""Graylog search client.

Composes parameter encoding, one HTTP GET through a `Transport`, and payload
mapping into one method per search endpoint.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

import requests

from GraylogSearch.core.errors import CommunicationError, EmptyBodyError
from GraylogSearch.core.models import (
    FieldHistogram,
    GraylogMessage,
    Histogram,
    SearchEndpoint,
    SearchRequestSpec,
    Statistics,
    Terms,
    TimeRange,
    TimeUnit,
)
from GraylogSearch.core.query import GraylogQuery
from GraylogSearch.graylog.client import Transport
from GraylogSearch.graylog.encoder import build_url
from GraylogSearch.graylog.parser import (
    decode_body,
    parse_field_histogram,
    parse_histogram,
    parse_messages,
    parse_statistics,
    parse_terms,
)
from GraylogSearch.utils.log import log

T = TypeVar("T")
R = TypeVar("R")

QueryLike = GraylogQuery | str | None


class GraylogSearch:
    """Stateless client for Graylog's absolute-time universal search.

    Safe to share between threads as long as the transport is. Performs no
    retries; a transport timeout propagates unchanged, any other transport
    error is wrapped in `CommunicationError`.
    """

    def __init__(self, transport: Transport, *, base_url: str, stream_id: str | None = None) -> None:
        """Initialize the client.

        Args:
            transport: HTTP collaborator returning ``(status, body)``.
            base_url: Graylog base URL, e.g. ``http://graylog:9000``.
            stream_id: Default stream searched when a call gives none.
        """
        self._transport = transport
        self._base_url = base_url.rstrip("/")
        self._stream_id = stream_id

    def close(self) -> None:
        """Close the transport if it has a `close` method."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> GraylogSearch:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def messages(
        self,
        time_range: TimeRange,
        query: QueryLike = None,
        *,
        shape: type[T] = GraylogMessage,
        stream_id: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        sort: str | None = None,
        fields: Sequence[str] = (),
    ) -> list[T]:
        """Search messages, mapped into `shape`; empty list when none match."""
        spec = SearchRequestSpec(
            endpoint=SearchEndpoint.MESSAGES,
            stream_id=self._resolve_stream(stream_id),
            time_range=time_range,
            query=_query_text(query),
            limit=limit,
            offset=offset,
            sort=sort,
            fields=tuple(fields),
        )
        return self._execute(spec, lambda payload: parse_messages(payload, shape))

    def first_message(
        self,
        time_range: TimeRange,
        query: QueryLike = None,
        *,
        shape: type[T] = GraylogMessage,
        stream_id: str | None = None,
    ) -> T | None:
        """Return the first matching message, or ``None`` when none match."""
        found = self.messages(time_range, query, shape=shape, stream_id=stream_id, limit=1)
        return found[0] if found else None

    def statistics(
        self,
        field: str,
        time_range: TimeRange,
        query: QueryLike = None,
        *,
        stream_id: str | None = None,
    ) -> Statistics:
        spec = SearchRequestSpec(
            endpoint=SearchEndpoint.STATISTICS,
            stream_id=self._resolve_stream(stream_id),
            time_range=time_range,
            query=_query_text(query),
            field=field,
        )
        return self._execute(spec, parse_statistics)

    def histogram(
        self,
        interval: TimeUnit | str,
        time_range: TimeRange,
        query: QueryLike = None,
        *,
        stream_id: str | None = None,
    ) -> Histogram:
        spec = SearchRequestSpec(
            endpoint=SearchEndpoint.HISTOGRAM,
            stream_id=self._resolve_stream(stream_id),
            time_range=time_range,
            query=_query_text(query),
            interval=TimeUnit.coerce(interval),
        )
        return self._execute(spec, parse_histogram)

    def field_histogram(
        self,
        field: str,
        interval: TimeUnit | str,
        time_range: TimeRange,
        query: QueryLike = None,
        *,
        cardinality: bool = False,
        stream_id: str | None = None,
    ) -> FieldHistogram:
        spec = SearchRequestSpec(
            endpoint=SearchEndpoint.FIELD_HISTOGRAM,
            stream_id=self._resolve_stream(stream_id),
            time_range=time_range,
            query=_query_text(query),
            field=field,
            interval=TimeUnit.coerce(interval),
            cardinality=cardinality,
        )
        return self._execute(spec, parse_field_histogram)

    def terms(
        self,
        field: str,
        size: int,
        time_range: TimeRange,
        query: QueryLike = None,
        *,
        stacked_fields: str = "",
        reverse_order: bool = False,
        top_values_only: bool = False,
        stream_id: str | None = None,
    ) -> Terms:
        """Rank the values of `field`; `reverse_order` ranks ascending."""
        spec = SearchRequestSpec(
            endpoint=SearchEndpoint.TERMS,
            stream_id=self._resolve_stream(stream_id),
            time_range=time_range,
            query=_query_text(query),
            field=field,
            size=size,
            order="asc" if reverse_order else "desc",
            top_values_only=top_values_only,
            stacked_fields=stacked_fields,
        )
        return self._execute(spec, parse_terms)

    def _resolve_stream(self, stream_id: str | None) -> str:
        return stream_id if stream_id is not None else (self._stream_id or "")

    def _execute(self, spec: SearchRequestSpec, mapper: Callable[[dict[str, Any]], R]) -> R:
        url = build_url(self._base_url, spec)
        endpoint = spec.endpoint.path
        log.debug("Graylog search: endpoint=%s query=%s", endpoint, spec.query)

        try:
            status, body = self._transport.get(url)
        except (requests.Timeout, TimeoutError):
            raise
        except OSError as error:
            raise CommunicationError(f"Graylog server unreachable: {error}", endpoint=endpoint) from error

        if not 200 <= status < 300:
            raise CommunicationError("Graylog server communication error", endpoint=endpoint, status=status)
        if not body or not body.strip():
            raise EmptyBodyError("Graylog server responded with an empty body", endpoint=endpoint, status=status)

        return mapper(decode_body(body, endpoint=endpoint))


def _query_text(query: QueryLike) -> str:
    if query is None:
        return ""
    if isinstance(query, GraylogQuery):
        return query.build()
    return str(query)
