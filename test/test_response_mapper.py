"""Tests for response decoding and result-shape mapping."""

from __future__ import annotations

import sys
import unittest
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from GraylogSearch.core.errors import ParseError, TypeMismatchError
from GraylogSearch.core.models import GraylogMessage, Statistics
from GraylogSearch.core.shape import map_object, mapped_field, shape_fields
from GraylogSearch.graylog.parser import (
    decode_body,
    map_many,
    map_one,
    parse_field_histogram,
    parse_histogram,
    parse_messages,
    parse_statistics,
    parse_terms,
)


@dataclass(frozen=True, slots=True)
class _MessageSource:
    message: str = mapped_field(str, default="")
    source: str = mapped_field(str, default="")


@dataclass(frozen=True, slots=True)
class _ApiMessage(GraylogMessage):
    request_id: str = mapped_field(str, default="")
    process_time: int = mapped_field(int, default=0)


@dataclass(frozen=True, slots=True)
class _Required:
    name: str = mapped_field(str)


@dataclass
class _Unmapped:
    name: str = ""


def _wrap(*messages: dict) -> dict:
    return {"messages": [{"message": message, "index": "graylog_0"} for message in messages], "total_results": 1}


class TestShapeMapping(unittest.TestCase):
    def test_extra_keys_are_ignored(self) -> None:
        result = map_object({"message": "x", "source": "y", "extra": "z"}, _MessageSource)
        self.assertEqual(result, _MessageSource(message="x", source="y"))

    def test_missing_and_null_fields_keep_defaults(self) -> None:
        result = map_object({"message": "x", "source": None}, GraylogMessage)
        self.assertEqual(result.message, "x")
        self.assertEqual(result.source, "")
        self.assertEqual(result.id, "")
        self.assertIsNone(result.timestamp)

    def test_type_mismatch_names_the_field(self) -> None:
        with self.assertRaises(TypeMismatchError) as ctx:
            map_object({"message": 5}, _MessageSource)
        self.assertEqual(ctx.exception.field, "message")
        self.assertEqual(ctx.exception.actual, "int")
        self.assertIn("message", str(ctx.exception))

    def test_bool_does_not_count_as_number(self) -> None:
        with self.assertRaises(TypeMismatchError) as ctx:
            map_object({"count": True}, Statistics)
        self.assertEqual(ctx.exception.field, "count")

    def test_int_widens_to_float(self) -> None:
        stats = map_object({"mean": 3, "count": 2}, Statistics)
        self.assertIsInstance(stats.mean, float)
        self.assertEqual(stats.mean, 3.0)

    def test_non_object_payload(self) -> None:
        with self.assertRaises(TypeMismatchError):
            map_object(["x"], _MessageSource)

    def test_invalid_shapes(self) -> None:
        with self.assertRaises(ParseError):
            shape_fields(dict)
        with self.assertRaises(ParseError):
            map_object({"name": "x"}, _Unmapped)

    def test_missing_required_field(self) -> None:
        with self.assertRaises(ParseError):
            map_object({}, _Required)
        self.assertEqual(map_object({"name": "x"}, _Required).name, "x")

    def test_timestamp_and_renamed_key(self) -> None:
        result = map_object(
            {"_id": "abc", "message": "m", "timestamp": "2024-01-01T10:00:00.000Z"},
            GraylogMessage,
        )
        self.assertEqual(result.id, "abc")
        self.assertEqual(result.timestamp, datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc))

    def test_malformed_timestamp(self) -> None:
        with self.assertRaises(ParseError):
            map_object({"timestamp": "not a date"}, GraylogMessage)


class TestParser(unittest.TestCase):
    def test_decode_body(self) -> None:
        self.assertEqual(decode_body(b'{"a": 1}', endpoint="/x"), {"a": 1})

    def test_decode_body_invalid_json(self) -> None:
        with self.assertRaises(ParseError):
            decode_body(b"{not json", endpoint="/x")

    def test_decode_body_non_object_root(self) -> None:
        with self.assertRaises(TypeMismatchError) as ctx:
            decode_body(b"[1, 2]", endpoint="/x")
        self.assertEqual(ctx.exception.field, "<root>")

    def test_messages_use_caller_shape(self) -> None:
        payload = _wrap({"message": "x", "source": "y", "extra": "z"})
        self.assertEqual(parse_messages(payload, _MessageSource), [_MessageSource(message="x", source="y")])

    def test_messages_subclass_shape(self) -> None:
        payload = _wrap(
            {"_id": "1", "message": "API_REQUEST_FINISHED", "source": "web-1", "request_id": "r-1", "process_time": 12}
        )
        [message] = parse_messages(payload, _ApiMessage)
        self.assertIsInstance(message, GraylogMessage)
        self.assertEqual(message.request_id, "r-1")
        self.assertEqual(message.process_time, 12)
        self.assertEqual(message.source, "web-1")

    def test_empty_messages(self) -> None:
        self.assertEqual(parse_messages({"messages": []}), [])
        self.assertEqual(parse_messages({}), [])

    def test_nested_type_mismatch_path(self) -> None:
        with self.assertRaises(TypeMismatchError) as ctx:
            parse_messages(_wrap({"message": "ok"}, {"source": 7}))
        self.assertEqual(ctx.exception.field, "messages[1].message.source")

    def test_map_one_and_map_many(self) -> None:
        self.assertIsNone(map_one({}, _MessageSource))
        self.assertIsNone(map_one(None, _MessageSource))
        self.assertEqual(map_one({"message": "x"}, _MessageSource), _MessageSource(message="x"))
        self.assertEqual(map_many(None, _MessageSource), [])
        self.assertEqual(
            map_many([{"message": "a"}, {"message": "b"}], _MessageSource),
            [_MessageSource(message="a"), _MessageSource(message="b")],
        )
        with self.assertRaises(TypeMismatchError):
            map_many({"message": "a"}, _MessageSource)  # type: ignore[arg-type]

    def test_statistics_zero_count(self) -> None:
        stats = parse_statistics({"field": "source", "count": 0, "min": None, "max": None, "time": 3})
        self.assertEqual(stats.count, 0)
        self.assertEqual(stats.min, 0.0)
        self.assertEqual(stats.time, 3)

    def test_histogram(self) -> None:
        histogram = parse_histogram(
            {
                "interval": "hour",
                "results": {"1704070800": 3, "1704067200": 5},
                "time": 4,
                "built_query": "{}",
                "queried_timerange": {"from": "2024-01-01T00:00:00.000Z", "to": "2024-01-02T00:00:00.000Z"},
            }
        )
        self.assertEqual(histogram.interval, "hour")
        self.assertEqual([(b.start, b.count) for b in histogram.buckets], [(1704067200, 5), (1704070800, 3)])
        self.assertEqual(histogram.buckets[0].started_at, datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc))
        self.assertEqual(histogram.queried_timerange.from_, datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_histogram_bad_buckets(self) -> None:
        with self.assertRaises(ParseError):
            parse_histogram({"results": {"abc": 1}})
        with self.assertRaises(TypeMismatchError) as ctx:
            parse_histogram({"results": {"1704067200": "3"}})
        self.assertEqual(ctx.exception.field, "results.1704067200")

    def test_field_histogram(self) -> None:
        histogram = parse_field_histogram(
            {
                "interval": "minute",
                "results": {
                    "1704067260": {"total_count": 1, "count": 1, "min": 7, "max": 7, "mean": 7, "total": 7},
                    "1704067200": {
                        "total_count": 2,
                        "count": 2,
                        "min": 10,
                        "max": 40.5,
                        "mean": 25.25,
                        "total": 50.5,
                        "cardinality": 0,
                    },
                },
            }
        )
        first, second = histogram.buckets
        self.assertEqual(first.start, 1704067200)
        self.assertEqual(first.min, 10.0)
        self.assertEqual(first.max, 40.5)
        self.assertEqual(second.start, 1704067260)
        self.assertEqual(second.total, 7.0)

    def test_terms_keep_payload_order(self) -> None:
        terms = parse_terms({"terms": {"/api/a": 10, "/api/b": 4}, "missing": 0, "other": 2, "total": 16})
        self.assertEqual([(t.value, t.count) for t in terms.terms], [("/api/a", 10), ("/api/b", 4)])
        self.assertEqual(terms.as_dict(), {"/api/a": 10, "/api/b": 4})
        self.assertEqual(terms.other, 2)
        self.assertEqual(terms.total, 16)


if __name__ == "__main__":
    unittest.main()
