"""Command runner for coordinating CLI execution.

Manages logging configuration, component creation, resource cleanup and
error handling for command execution.
"""

from __future__ import annotations

from typing import Any

import click

from GraylogSearch.cli.commands import Command
from GraylogSearch.config import AppConfig
from GraylogSearch.renderers import create_output_writer
from GraylogSearch.services import create_search_service
from GraylogSearch.utils.log import configure_logging, log


class CommandRunner:
    """Runs one command with logging, output and cleanup in place."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run(self, action: str, command: Command) -> Any:
        """Execute a command and write its result through the output writers.

        Args:
            action: The CLI command name (e.g., 'histograms').
            command: Command to execute.

        Returns:
            The command result; None when nothing was found.

        Raises:
            click.Abort: When the search fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        try:
            output_writer = create_output_writer(self.config)
            service = create_search_service(self.config)
            try:
                result = command.execute(service)
            finally:
                service.close()

            output_writer.write_result(command.title, result)
            output_writer.finalize(action)
            return result
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Search failed: %s", e)
            raise click.Abort from e
