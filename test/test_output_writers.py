"""Tests for console and JSON result rendering."""

import json
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from GraylogSearch.core.models import (
    Histogram,
    HistogramBucket,
    Histograms,
    Statistics,
    TermCount,
    Terms,
    TwoStatistics,
)
from GraylogSearch.renderers import JsonFileWriter, render_json, render_text


class TestRenderText(unittest.TestCase):
    def test_no_result(self) -> None:
        self.assertEqual(render_text(None), "No result\n")

    def test_labelled_histograms(self) -> None:
        histograms = Histograms(
            labels=("All", "500-"),
            histograms=(Histogram(interval="hour", buckets=(HistogramBucket(1704067200, 4),)), Histogram()),
        )
        text = render_text(histograms)
        self.assertIn("[All]", text)
        self.assertIn("2024-01-01 00:00  4", text)
        self.assertIn("[500-]", text)
        self.assertIn("(no buckets)", text)

    def test_terms_ranking(self) -> None:
        terms = Terms(terms=(TermCount("/api/a", 3), TermCount("/api/b", 1)), total=4)
        lines = render_text(terms).splitlines()
        self.assertEqual(lines[0], "1. /api/a  (3)")
        self.assertEqual(lines[1], "2. /api/b  (1)")

    def test_two_statistics(self) -> None:
        text = render_text(TwoStatistics(first=Statistics(count=2, mean=1.5), second=Statistics()))
        self.assertIn("First:", text)
        self.assertIn("Count: 2", text)
        self.assertIn("Mean: 1.50", text)


class TestJsonWriter(unittest.TestCase):
    def test_render_json(self) -> None:
        rendered = render_json(Terms(terms=(TermCount("/api/a", 3),), total=3))
        self.assertEqual(rendered["terms"], [{"value": "/api/a", "count": 3}])
        self.assertIsNone(render_json(None))

    def test_writes_one_file_per_run(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            writer = JsonFileWriter(tmp)
            writer.write_result("Statistics", Statistics(field="source", count=1))
            path = writer.finalize("stats-compare")

            self.assertIsNotNone(path)
            self.assertTrue(path.name.startswith("stats-compare_"))
            data = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(data[0]["title"], "Statistics")
            self.assertEqual(data[0]["result"]["count"], 1)

    def test_nothing_to_write(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsNone(JsonFileWriter(tmp).finalize("terms"))


if __name__ == "__main__":
    unittest.main()
