from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from dateutil import parser as dt_parser

from GraylogSearch.core.errors import InvalidRangeError, ParseError, ValidationError
from GraylogSearch.core.shape import check_kind, map_object, mapped_field

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_PATTERN = "yyyy-MM-dd HH:mm:ss"


def parse_timestamp(text: str) -> datetime:
    """Parse ``yyyy-MM-dd HH:mm:ss`` text into a naive local datetime.

    Raises:
        ParseError: If the text uses any other format.
    """
    if not isinstance(text, str):
        raise ParseError(f"Timestamp must be text in {TIMESTAMP_PATTERN} format, got {type(text).__name__}")
    try:
        return datetime.strptime(text.strip(), TIMESTAMP_FORMAT)
    except ValueError as error:
        raise ParseError(f"Invalid timestamp {text!r}; expected {TIMESTAMP_PATTERN}") from error


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ``yyyy-MM-dd HH:mm:ss``.

    Aware datetimes are converted to the local zone first; naive ones are
    taken to be local already.
    """
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Absolute search window, ``from_ <= to``.

    Attributes:
        from_: Window start.
        to: Window end.
    """

    from_: datetime
    to: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.from_, datetime) or not isinstance(self.to, datetime):
            raise ValidationError("Time range bounds must be datetime values")
        try:
            reversed_range = self.from_ > self.to
        except TypeError as error:
            raise ValidationError("Time range cannot mix naive and timezone-aware datetimes") from error
        if reversed_range:
            raise InvalidRangeError(
                f"Time range start {format_timestamp(self.from_)} is after end {format_timestamp(self.to)}"
            )

    @classmethod
    def parse(cls, from_text: str, to_text: str) -> TimeRange:
        """Build a range from two ``yyyy-MM-dd HH:mm:ss`` strings."""
        return cls(parse_timestamp(from_text), parse_timestamp(to_text))


class TimeUnit(str, Enum):
    """Histogram bucket interval accepted by Graylog."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @classmethod
    def coerce(cls, value: TimeUnit | str) -> TimeUnit:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as error:
            allowed = ", ".join(unit.value for unit in cls)
            raise ValidationError(f"Unsupported interval {value!r}; use one of {allowed}") from error


class SearchEndpoint(Enum):
    """Absolute-time universal search endpoints."""

    MESSAGES = "/api/search/universal/absolute"
    STATISTICS = "/api/search/universal/absolute/stats"
    HISTOGRAM = "/api/search/universal/absolute/histogram"
    FIELD_HISTOGRAM = "/api/search/universal/absolute/fieldhistogram"
    TERMS = "/api/search/universal/absolute/terms"

    @property
    def path(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SearchRequestSpec:
    """Everything needed to encode one search request.

    Only the attributes relevant to `endpoint` are encoded.
    """

    endpoint: SearchEndpoint
    stream_id: str
    time_range: TimeRange
    query: str = ""
    field: Optional[str] = None
    interval: Optional[TimeUnit] = None
    size: Optional[int] = None
    order: str = "desc"
    top_values_only: bool = False
    stacked_fields: str = ""
    cardinality: bool = False
    limit: Optional[int] = None
    offset: Optional[int] = None
    sort: Optional[str] = None
    fields: Sequence[str] = ()


def _parse_iso(raw: str) -> datetime:
    try:
        parsed = dt_parser.isoparse(raw)
    except (TypeError, ValueError) as error:
        raise ParseError(f"Invalid ISO timestamp in payload: {raw!r}") from error
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _bucket_start(key: str, field_path: str) -> int:
    try:
        return int(key)
    except (TypeError, ValueError) as error:
        raise ParseError(f"Bucket key at {field_path} is not an epoch timestamp: {key!r}") from error


@dataclass(frozen=True, slots=True)
class GraylogMessage:
    """Default message shape; subclass it to map extra message fields."""

    id: str = mapped_field(str, default="", key="_id")
    message: str = mapped_field(str, default="")
    source: str = mapped_field(str, default="")
    timestamp: Optional[datetime] = mapped_field(str, default=None, convert=_parse_iso)


@dataclass(frozen=True, slots=True)
class Statistics:
    """Field statistics over the matching messages."""

    field: str = mapped_field(str, default="")
    count: int = mapped_field(int, default=0)
    sum: float = mapped_field(float, default=0.0)
    sum_of_squares: float = mapped_field(float, default=0.0)
    mean: float = mapped_field(float, default=0.0)
    min: float = mapped_field(float, default=0.0)
    max: float = mapped_field(float, default=0.0)
    variance: float = mapped_field(float, default=0.0)
    std_deviation: float = mapped_field(float, default=0.0)
    cardinality: int = mapped_field(int, default=0)
    built_query: str = mapped_field(str, default="")
    time: int = mapped_field(int, default=0)


@dataclass(frozen=True, slots=True)
class QueriedTimeRange:
    from_: Optional[datetime] = mapped_field(str, default=None, key="from", convert=_parse_iso)
    to: Optional[datetime] = mapped_field(str, default=None, convert=_parse_iso)


def _queried_timerange(raw: Mapping[str, Any]) -> QueriedTimeRange:
    return map_object(raw, QueriedTimeRange, path="queried_timerange")


@dataclass(frozen=True, slots=True)
class HistogramBucket:
    """Message count of one interval, keyed by its epoch-second start."""

    start: int
    count: int

    @property
    def started_at(self) -> datetime:
        return datetime.fromtimestamp(self.start, tz=timezone.utc)


def _histogram_buckets(results: Mapping[str, Any]) -> tuple[HistogramBucket, ...]:
    buckets: list[HistogramBucket] = []
    for key, value in results.items():
        field_path = f"results.{key}"
        count = check_kind(value, int, field_path)
        buckets.append(HistogramBucket(start=_bucket_start(key, field_path), count=count))
    return tuple(sorted(buckets, key=lambda bucket: bucket.start))


@dataclass(frozen=True, slots=True)
class Histogram:
    """Date histogram of message counts."""

    interval: str = mapped_field(str, default="")
    buckets: tuple[HistogramBucket, ...] = mapped_field(dict, default=(), key="results", convert=_histogram_buckets)
    built_query: str = mapped_field(str, default="")
    time: int = mapped_field(int, default=0)
    queried_timerange: Optional[QueriedTimeRange] = mapped_field(dict, default=None, convert=_queried_timerange)


@dataclass(frozen=True, slots=True)
class FieldHistogramBucket:
    """Statistics of a numeric field within one interval."""

    start: int = 0
    total_count: int = mapped_field(int, default=0)
    count: int = mapped_field(int, default=0)
    min: float = mapped_field(float, default=0.0)
    max: float = mapped_field(float, default=0.0)
    mean: float = mapped_field(float, default=0.0)
    total: float = mapped_field(float, default=0.0)
    cardinality: int = mapped_field(int, default=0)

    @property
    def started_at(self) -> datetime:
        return datetime.fromtimestamp(self.start, tz=timezone.utc)


def _field_histogram_buckets(results: Mapping[str, Any]) -> tuple[FieldHistogramBucket, ...]:
    buckets: list[FieldHistogramBucket] = []
    for key, value in results.items():
        field_path = f"results.{key}"
        bucket = map_object(value, FieldHistogramBucket, path=field_path)
        buckets.append(replace(bucket, start=_bucket_start(key, field_path)))
    return tuple(sorted(buckets, key=lambda bucket: bucket.start))


@dataclass(frozen=True, slots=True)
class FieldHistogram:
    """Date histogram of a numeric field's statistics."""

    interval: str = mapped_field(str, default="")
    buckets: tuple[FieldHistogramBucket, ...] = mapped_field(
        dict, default=(), key="results", convert=_field_histogram_buckets
    )
    built_query: str = mapped_field(str, default="")
    time: int = mapped_field(int, default=0)
    queried_timerange: Optional[QueriedTimeRange] = mapped_field(dict, default=None, convert=_queried_timerange)


@dataclass(frozen=True, slots=True)
class TermCount:
    value: str
    count: int


def _term_counts(terms: Mapping[str, Any]) -> tuple[TermCount, ...]:
    return tuple(
        TermCount(value=str(value), count=check_kind(count, int, f"terms.{value}"))
        for value, count in terms.items()
    )


@dataclass(frozen=True, slots=True)
class Terms:
    """Term ranking of one field, in payload order."""

    terms: tuple[TermCount, ...] = mapped_field(dict, default=(), convert=_term_counts)
    missing: int = mapped_field(int, default=0)
    other: int = mapped_field(int, default=0)
    total: int = mapped_field(int, default=0)
    built_query: str = mapped_field(str, default="")
    time: int = mapped_field(int, default=0)

    def as_dict(self) -> dict[str, int]:
        return {term.value: term.count for term in self.terms}


@dataclass(frozen=True, slots=True)
class TwoStatistics:
    """Statistics of two windows sharing the same end."""

    first: Statistics
    second: Statistics


@dataclass(frozen=True, slots=True)
class Histograms:
    """Labelled histograms, `labels[i]` naming `histograms[i]`."""

    labels: tuple[str, ...]
    histograms: tuple[Histogram, ...]


@dataclass(frozen=True, slots=True)
class FieldHistograms:
    """Labelled field histograms, `labels[i]` naming `field_histograms[i]`."""

    labels: tuple[str, ...]
    field_histograms: tuple[FieldHistogram, ...]
