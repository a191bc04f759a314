"""Search recipes built on the Graylog search client.

Each recipe calls `GraylogSearch` one or more times with queries derived from
a caller-supplied base query and pairs or labels the results.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypeVar

from dateutil.relativedelta import relativedelta

from GraylogSearch.core.models import (
    FieldHistograms,
    GraylogMessage,
    Histograms,
    Terms,
    TimeRange,
    TimeUnit,
    TwoStatistics,
)
from GraylogSearch.core.query import GraylogQuery
from GraylogSearch.graylog.search import GraylogSearch
from GraylogSearch.utils.log import log

PROCESS_TIME_FIELD = "process_time"
PROCESS_TIME_THRESHOLD = 500
REQUEST_ID_FIELD = "request_id"
SOURCE_FIELD = "source"

T = TypeVar("T")


@dataclass(slots=True)
class GraylogSearchService:
    """Application service composing multi-call searches.

    Attributes:
        client: Search client bound to the configured stream.
        clock: Returns "now"; replaced in tests.
    """

    client: GraylogSearch
    clock: Callable[[], datetime] = datetime.now

    def get_message(
        self,
        time_range: TimeRange,
        query: GraylogQuery,
        *,
        shape: type[T] = GraylogMessage,
    ) -> T | None:
        """Return the first matching message, or None when nothing matched."""
        message = self.client.first_message(time_range, query, shape=shape)
        if message is None:
            log.info("No message found for query=%s", query.build())
        return message

    def get_message_by_request_id(
        self,
        request_id: str,
        *,
        lookback_months: int = 3,
        shape: type[T] = GraylogMessage,
    ) -> T | None:
        """Find the message logged for one API request id."""
        now = self.clock()
        time_range = TimeRange(now - relativedelta(months=lookback_months), now)
        query = GraylogQuery.builder().field(REQUEST_ID_FIELD, request_id)
        return self.get_message(time_range, query, shape=shape)

    def get_two_stats(
        self,
        field: str,
        first_from: datetime,
        second_from: datetime,
        query: GraylogQuery,
    ) -> TwoStatistics:
        """Compare statistics of two windows ending at tomorrow's midnight.

        Exactly two statistics searches are made; zero-count results are
        returned as they are.
        """
        ceiling = (self.clock() + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
        first = self.client.statistics(field, TimeRange(first_from, ceiling), query)
        second = self.client.statistics(field, TimeRange(second_from, ceiling), query)
        log.info("Statistics compared: field=%s first.count=%d second.count=%d", field, first.count, second.count)
        return TwoStatistics(first=first, second=second)

    def get_process_time_histograms(
        self,
        interval: TimeUnit | str,
        time_range: TimeRange,
        query: GraylogQuery,
        *,
        field: str = PROCESS_TIME_FIELD,
        threshold: int = PROCESS_TIME_THRESHOLD,
    ) -> Histograms:
        """Build the All / 0-threshold / threshold- message histograms.

        The three queries extend `query` with ``field:>=0``,
        ``field:[0 TO threshold]`` and ``field:>threshold``.
        """
        base = GraylogQuery.builder(query)
        labelled = (
            ("All", base.and_().field(field, ">=", 0)),
            (f"0-{threshold}", base.and_().range(field, "[", 0, threshold, "]")),
            (f"{threshold}-", base.and_().field(field, ">", threshold)),
        )
        histograms = tuple(self.client.histogram(interval, time_range, bucket_query) for _, bucket_query in labelled)
        return Histograms(labels=tuple(label for label, _ in labelled), histograms=histograms)

    def get_process_time_field_histograms_by_top_sources(
        self,
        size: int,
        interval: TimeUnit | str,
        time_range: TimeRange,
        query: GraylogQuery,
        *,
        group_field: str = SOURCE_FIELD,
        value_field: str = PROCESS_TIME_FIELD,
    ) -> FieldHistograms:
        """Field histograms of `value_field` for the top `size` values of `group_field`."""
        top = self.client.terms(group_field, size, time_range, query)
        labels: list[str] = []
        field_histograms = []
        for term in top.terms:
            scoped = GraylogQuery.builder(query).and_().field(group_field, term.value)
            field_histograms.append(self.client.field_histogram(value_field, interval, time_range, scoped))
            labels.append(term.value)
        log.info("Field histograms built for %d %s values", len(labels), group_field)
        return FieldHistograms(labels=tuple(labels), field_histograms=tuple(field_histograms))

    def get_usage_ranking(
        self,
        field: str,
        stacked_fields: str,
        size: int,
        time_range: TimeRange,
        reverse_order: bool,
        top_values_only: bool,
        query: GraylogQuery,
    ) -> Terms:
        return self.client.terms(
            field,
            size,
            time_range,
            query,
            stacked_fields=stacked_fields,
            reverse_order=reverse_order,
            top_values_only=top_values_only,
        )

    def close(self) -> None:
        self.client.close()
