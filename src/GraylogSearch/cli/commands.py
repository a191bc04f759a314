"""Command implementations for the GraylogSearch CLI.

Each command holds its raw CLI arguments, builds the query and time range,
and calls one search recipe. Timestamps are parsed before any HTTP call.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol

from GraylogSearch.core.models import TimeRange
from GraylogSearch.core.query import GraylogQuery
from GraylogSearch.services.search import (
    PROCESS_TIME_FIELD,
    PROCESS_TIME_THRESHOLD,
    GraylogSearchService,
)

FINISHED_MESSAGE = "API_REQUEST_FINISHED"


def finished_requests() -> GraylogQuery:
    """Base query matching the access-log line written when a request ends."""
    return GraylogQuery.builder().field("message", FINISHED_MESSAGE)


class Command(Protocol):
    title: str

    def execute(self, service: GraylogSearchService) -> Any:
        """Run the command and return its result (None when nothing found)."""
        ...


@dataclass(slots=True)
class MessageCommand:
    """Look up the message of one API request id."""

    request_id: str
    title: str = "Message"

    def execute(self, service: GraylogSearchService) -> Any:
        return service.get_message_by_request_id(self.request_id)


@dataclass(slots=True)
class StatsCompareCommand:
    """Compare last-day and last-week statistics of fast finished requests."""

    field: str = "source"
    title: str = "Statistics comparison (1 day vs 7 days)"

    def execute(self, service: GraylogSearchService) -> Any:
        now = service.clock()
        query = finished_requests().and_().range(PROCESS_TIME_FIELD, "[", 0, PROCESS_TIME_THRESHOLD, "]")
        return service.get_two_stats(self.field, now - timedelta(days=1), now - timedelta(days=7), query)


@dataclass(slots=True)
class HistogramsCommand:
    interval: str
    from_text: str
    to_text: str
    title: str = "Process time histograms"

    def execute(self, service: GraylogSearchService) -> Any:
        time_range = TimeRange.parse(self.from_text, self.to_text)
        return service.get_process_time_histograms(self.interval, time_range, finished_requests())


@dataclass(slots=True)
class FieldHistogramsCommand:
    size: int
    interval: str
    from_text: str
    to_text: str
    title: str = "Process time field histograms by top sources"

    def execute(self, service: GraylogSearchService) -> Any:
        time_range = TimeRange.parse(self.from_text, self.to_text)
        return service.get_process_time_field_histograms_by_top_sources(
            self.size,
            self.interval,
            time_range,
            finished_requests(),
        )


@dataclass(slots=True)
class TermsCommand:
    """Rank values of a field (request paths by default) by usage."""

    size: int
    from_text: str
    to_text: str
    field: str = "request_path"
    order: str = "desc"
    top_values_only: bool = False
    title: str = "Usage ranking"

    def execute(self, service: GraylogSearchService) -> Any:
        time_range = TimeRange.parse(self.from_text, self.to_text)
        return service.get_usage_ranking(
            self.field,
            "",
            self.size,
            time_range,
            self.order == "asc",
            self.top_values_only,
            finished_requests(),
        )
