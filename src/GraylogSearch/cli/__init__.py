"""CLI package for GraylogSearch command orchestration.

Click definitions live in `ui`, per-command logic in `commands`, and the
logging/cleanup/error boundary in `runner`.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from GraylogSearch.cli.runner import CommandRunner
from GraylogSearch.cli.ui import cli


def main() -> None:
    """Run GraylogSearch CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
