"""Output renderers for command results.

Exports the OutputWriter base class and a factory building writers from the
``output`` config section.
"""

from __future__ import annotations

from GraylogSearch.config import AppConfig
from GraylogSearch.renderers.base import MultiOutputWriter, OutputWriter
from GraylogSearch.renderers.console import ConsoleOutputWriter, render_text
from GraylogSearch.renderers.json import JsonFileWriter, render_json


def create_output_writer(config: AppConfig) -> OutputWriter:
    """Create output writer based on config.

    Raises:
        ValueError: If no writer is configured.
    """
    writers: list[OutputWriter] = []
    if "console" in config.output.formats:
        writers.append(ConsoleOutputWriter())
    if "json" in config.output.formats:
        writers.append(JsonFileWriter(config.output.base_dir))

    if not writers:
        raise ValueError("No output writers configured")
    return MultiOutputWriter(writers)


__all__ = [
    "OutputWriter",
    "ConsoleOutputWriter",
    "JsonFileWriter",
    "MultiOutputWriter",
    "render_json",
    "render_text",
    "create_output_writer",
]
