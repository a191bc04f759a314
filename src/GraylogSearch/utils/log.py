"""GraylogSearch logging utilities.

One package logger shared by every module. Library code only logs through
`log`; handlers are attached by `configure_logging`, called from the CLI.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final


_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelabbr)s] %(message)s"
_DATE_FORMAT: Final[str] = "%m-%d %H:%M:%S"


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        """Attach the four-letter level tag before formatting."""
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("GraylogSearch")


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> Path | None:
    """Attach console (and optionally file) handlers to the package logger.

    Lines look like ``10-19 08:43:12 [INFO] message``.

    Args:
        level: Console logging level name (DEBUG, INFO, ...).
        action: CLI command name; names the per-run log file.
        log_to_file: Mirror DEBUG and above to ``<log_dir>/<action>/``.
        log_dir: Base directory for log files.

    Returns:
        Path of the log file when one was opened, else None.
    """
    console_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = _AbbrevLevelFormatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)

    log.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(formatter)
    log.addHandler(console)

    log_path: Path | None = None
    if log_to_file and action:
        action_dir = Path(log_dir or "log") / action
        action_dir.mkdir(parents=True, exist_ok=True)
        log_path = action_dir / f"{action}_{datetime.now().strftime('%m%d%H%M%S')}.log"
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    log.setLevel(logging.DEBUG if log_path else console_level)
    log.propagate = False
    return log_path
