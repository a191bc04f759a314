"""Console text output renderers.

Renders search results into human-friendly text written via logging.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from typing import Any

from GraylogSearch.core.models import (
    FieldHistogram,
    FieldHistograms,
    Histogram,
    Histograms,
    Statistics,
    Terms,
    TwoStatistics,
)
from GraylogSearch.renderers.base import OutputWriter
from GraylogSearch.utils.log import log


def _fmt_dt(dt: datetime | None) -> str:
    if not dt:
        return "-"
    return dt.strftime("%Y-%m-%d %H:%M")


def _fmt_num(value: float) -> str:
    return f"{value:.2f}"


def render_text(result: Any) -> str:
    """Render a search result into a text block.

    Args:
        result: Any result produced by the search service, or None.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    if result is None:
        lines.append("No result")
    elif isinstance(result, TwoStatistics):
        lines.append("First:")
        lines.extend(_statistics_lines(result.first, indent="   "))
        lines.append("Second:")
        lines.extend(_statistics_lines(result.second, indent="   "))
    elif isinstance(result, Statistics):
        lines.extend(_statistics_lines(result, indent=""))
    elif isinstance(result, Histograms):
        for label, histogram in zip(result.labels, result.histograms):
            lines.append(f"[{label}]")
            lines.extend(_histogram_lines(histogram))
    elif isinstance(result, Histogram):
        lines.extend(_histogram_lines(result))
    elif isinstance(result, FieldHistograms):
        for label, field_histogram in zip(result.labels, result.field_histograms):
            lines.append(f"[{label}]")
            lines.extend(_field_histogram_lines(field_histogram))
    elif isinstance(result, FieldHistogram):
        lines.extend(_field_histogram_lines(result))
    elif isinstance(result, Terms):
        for idx, term in enumerate(result.terms, start=1):
            lines.append(f"{idx}. {term.value}  ({term.count})")
        lines.append(f"   Total: {result.total}  Other: {result.other}  Missing: {result.missing}")
    elif is_dataclass(result):
        for item in fields(result):
            value = getattr(result, item.name)
            shown = _fmt_dt(value) if isinstance(value, datetime) else value
            lines.append(f"{item.name}: {shown}")
    else:
        lines.append(str(result))
    return "\n".join(lines).rstrip() + "\n"


def _statistics_lines(stats: Statistics, *, indent: str) -> list[str]:
    return [
        f"{indent}Count: {stats.count}",
        f"{indent}Min: {_fmt_num(stats.min)}  Max: {_fmt_num(stats.max)}  Mean: {_fmt_num(stats.mean)}",
        f"{indent}Std deviation: {_fmt_num(stats.std_deviation)}",
    ]


def _histogram_lines(histogram: Histogram) -> list[str]:
    if not histogram.buckets:
        return ["   (no buckets)"]
    return [f"   {_fmt_dt(bucket.started_at)}  {bucket.count}" for bucket in histogram.buckets]


def _field_histogram_lines(field_histogram: FieldHistogram) -> list[str]:
    if not field_histogram.buckets:
        return ["   (no buckets)"]
    return [
        f"   {_fmt_dt(bucket.started_at)}  count={bucket.count} mean={_fmt_num(bucket.mean)}"
        f" min={_fmt_num(bucket.min)} max={_fmt_num(bucket.max)}"
        for bucket in field_histogram.buckets
    ]


class ConsoleOutputWriter(OutputWriter):
    """Write results to console via logging."""

    def write_result(self, title: str, result: Any) -> None:
        log.info("=== %s ===", title)
        for line in render_text(result).splitlines():
            log.info(line)

    def finalize(self, action: str) -> None:
        """No-op for console output."""
