"""JSON output renderers.

Converts result dataclasses into JSON-serializable objects and writes them to
a timestamped file per command run.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from GraylogSearch.renderers.base import OutputWriter
from GraylogSearch.utils.log import log


def render_json(result: Any) -> Any:
    """Render a result into JSON-serializable Python objects.

    Dataclasses become dicts, tuples become lists, datetimes ISO strings.
    """
    if result is None:
        return None
    if is_dataclass(result) and not isinstance(result, type):
        return _jsonable(asdict(result))
    return _jsonable(result)


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


class JsonFileWriter(OutputWriter):
    """Accumulate results and write them as one JSON file on finalize."""

    def __init__(self, base_dir: str) -> None:
        self.output_dir = Path(base_dir) / "json"
        self.results: list[dict[str, Any]] = []

    def write_result(self, title: str, result: Any) -> None:
        self.results.append({"title": title, "result": render_json(result)})

    def finalize(self, action: str) -> Path | None:
        """Write accumulated results to ``<base_dir>/json/<action>_<ts>.json``."""
        if not self.results:
            return None
        self.output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = self.output_dir / f"{action}_{timestamp}.json"
        output_path.write_text(json.dumps(self.results, ensure_ascii=False, indent=2), encoding="utf-8")
        log.info("JSON saved to %s", output_path)
        return output_path
