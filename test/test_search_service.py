"""Tests for the multi-call search recipes."""

from __future__ import annotations

import json
import sys
import unittest
from datetime import datetime
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from GraylogSearch.core.models import TimeRange, TimeUnit
from GraylogSearch.core.query import GraylogQuery
from GraylogSearch.graylog.search import GraylogSearch
from GraylogSearch.services.search import GraylogSearchService

_RANGE = TimeRange(datetime(2024, 1, 1), datetime(2024, 1, 2))
_FINISHED = GraylogQuery.builder().field("message", "API_REQUEST_FINISHED")


class _RecordingTransport:
    def __init__(self, *payloads: dict) -> None:
        self.payloads = list(payloads)
        self.urls: list[str] = []
        self.closed = False

    def get(self, url: str) -> tuple[int, bytes]:
        self.urls.append(url)
        return 200, json.dumps(self.payloads.pop(0)).encode("utf-8")

    def close(self) -> None:
        self.closed = True

    def params(self, idx: int) -> dict[str, str]:
        return {key: values[0] for key, values in parse_qs(urlsplit(self.urls[idx]).query).items()}

    def path(self, idx: int) -> str:
        return urlsplit(self.urls[idx]).path


def _service(transport: _RecordingTransport, now: datetime = datetime(2024, 1, 10, 15, 30, 0)) -> GraylogSearchService:
    client = GraylogSearch(transport, base_url="http://graylog:9000", stream_id="S1")
    return GraylogSearchService(client=client, clock=lambda: now)


class TestMessageRecipes(unittest.TestCase):
    def test_get_message(self) -> None:
        transport = _RecordingTransport({"messages": [{"message": {"message": "API_REQUEST_FINISHED"}}]})

        message = _service(transport).get_message(_RANGE, _FINISHED)

        self.assertEqual(message.message, "API_REQUEST_FINISHED")
        self.assertEqual(transport.params(0)["limit"], "1")

    def test_get_message_none_when_empty(self) -> None:
        transport = _RecordingTransport({"messages": []})
        self.assertIsNone(_service(transport).get_message(_RANGE, _FINISHED))
        self.assertEqual(len(transport.urls), 1)

    def test_get_message_by_request_id(self) -> None:
        transport = _RecordingTransport({"messages": [{"message": {"message": "m", "request_id": "abc-123"}}]})

        message = _service(transport, now=datetime(2024, 4, 15, 12, 0, 0)).get_message_by_request_id("abc-123")

        self.assertEqual(message.message, "m")
        params = transport.params(0)
        self.assertEqual(params["query"], 'request_id:"abc-123"')
        self.assertEqual(params["from"], "2024-01-15 12:00:00")
        self.assertEqual(params["to"], "2024-04-15 12:00:00")


class TestAggregationRecipes(unittest.TestCase):
    def test_two_stats_share_the_ceiling(self) -> None:
        transport = _RecordingTransport(
            {"field": "source", "count": 0},
            {"field": "source", "count": 7, "cardinality": 2},
        )
        query = GraylogQuery.builder(_FINISHED).and_().field("process_time", "<", 500)

        result = _service(transport).get_two_stats(
            "source", datetime(2024, 1, 9, 15, 30), datetime(2024, 1, 3, 15, 30), query
        )

        self.assertEqual(len(transport.urls), 2)
        self.assertEqual(result.first.count, 0)
        self.assertEqual(result.second.count, 7)
        first, second = transport.params(0), transport.params(1)
        self.assertEqual(first["to"], "2024-01-11 00:00:00")
        self.assertEqual(second["to"], "2024-01-11 00:00:00")
        self.assertEqual(first["from"], "2024-01-09 15:30:00")
        self.assertEqual(second["from"], "2024-01-03 15:30:00")
        self.assertEqual(first["query"], "message:API_REQUEST_FINISHED AND process_time:<500")
        self.assertEqual(first["field"], "source")

    def test_process_time_histograms(self) -> None:
        transport = _RecordingTransport(
            {"interval": "hour", "results": {"1704067200": 9}},
            {"interval": "hour", "results": {"1704067200": 6}},
            {"interval": "hour", "results": {"1704067200": 3}},
        )

        result = _service(transport).get_process_time_histograms(TimeUnit.HOUR, _RANGE, _FINISHED)

        self.assertEqual(result.labels, ("All", "0-500", "500-"))
        self.assertEqual([h.buckets[0].count for h in result.histograms], [9, 6, 3])
        self.assertEqual(
            [transport.params(idx)["query"] for idx in range(3)],
            [
                "message:API_REQUEST_FINISHED AND process_time:>=0",
                "message:API_REQUEST_FINISHED AND process_time:[0 TO 500]",
                "message:API_REQUEST_FINISHED AND process_time:>500",
            ],
        )
        self.assertTrue(all(transport.path(idx).endswith("/histogram") for idx in range(3)))

    def test_field_histograms_by_top_sources(self) -> None:
        transport = _RecordingTransport(
            {"terms": {"web-1": 5, "web-2": 3}, "total": 8},
            {"interval": "day", "results": {"1704067200": {"count": 5, "mean": 20}}},
            {"interval": "day", "results": {"1704067200": {"count": 3, "mean": 30}}},
        )

        result = _service(transport).get_process_time_field_histograms_by_top_sources(
            2, TimeUnit.DAY, _RANGE, _FINISHED
        )

        self.assertEqual(result.labels, ("web-1", "web-2"))
        self.assertEqual([h.buckets[0].mean for h in result.field_histograms], [20.0, 30.0])
        terms = transport.params(0)
        self.assertEqual(terms["field"], "source")
        self.assertEqual(terms["size"], "2")
        self.assertEqual(transport.params(1)["query"], 'message:API_REQUEST_FINISHED AND source:"web-1"')
        self.assertEqual(transport.params(2)["query"], 'message:API_REQUEST_FINISHED AND source:"web-2"')
        self.assertEqual(transport.params(1)["field"], "process_time")

    def test_field_histograms_without_sources(self) -> None:
        transport = _RecordingTransport({"terms": {}})

        result = _service(transport).get_process_time_field_histograms_by_top_sources(
            3, TimeUnit.DAY, _RANGE, _FINISHED
        )

        self.assertEqual(result.labels, ())
        self.assertEqual(len(transport.urls), 1)

    def test_usage_ranking(self) -> None:
        transport = _RecordingTransport({"terms": {"/api/a": 2}, "total": 2})

        result = _service(transport).get_usage_ranking(
            "request_path", "", 10, _RANGE, True, True, _FINISHED
        )

        self.assertEqual(result.as_dict(), {"/api/a": 2})
        params = transport.params(0)
        self.assertEqual(params["order"], "asc")
        self.assertEqual(params["top_values_only"], "true")
        self.assertNotIn("stacked_fields", params)

    def test_close(self) -> None:
        transport = _RecordingTransport()
        _service(transport).close()
        self.assertTrue(transport.closed)

    def test_close_with_get_only_transport(self) -> None:
        class _GetOnly:
            def get(self, url: str) -> tuple[int, bytes]:
                return 200, b"{}"

        client = GraylogSearch(_GetOnly(), base_url="http://graylog:9000", stream_id="S1")
        service = GraylogSearchService(client=client)
        self.assertEqual(service.get_usage_ranking("request_path", "", 5, _RANGE, False, False, _FINISHED).terms, ())
        service.close()


if __name__ == "__main__":
    unittest.main()
