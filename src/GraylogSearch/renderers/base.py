"""Base classes for output writers.

Separates command control flow from how results are shown or stored.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_result(self, title: str, result: Any) -> None:
        """Write the result of one search command.

        Args:
            title: Short description of the search.
            result: Result object, or None when nothing was found.
        """

    @abstractmethod
    def finalize(self, action: str) -> None:
        """Flush accumulated output.

        Args:
            action: The CLI command name (e.g., 'histograms').
        """


@dataclass(slots=True)
class MultiOutputWriter(OutputWriter):
    """Delegate output to multiple writers."""

    writers: Sequence[OutputWriter]

    def write_result(self, title: str, result: Any) -> None:
        for writer in self.writers:
            writer.write_result(title, result)

    def finalize(self, action: str) -> None:
        for writer in self.writers:
            writer.finalize(action)
