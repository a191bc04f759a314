"""Error taxonomy for Graylog searches.

Every failure raised by the library derives from `GraylogSearchError`, so
callers can catch by kind. Validation and parse errors are also `ValueError`,
type mismatches are also `TypeError`, matching what the config loaders raise.
"""

from __future__ import annotations


class GraylogSearchError(Exception):
    """Base class of all library errors."""


class ValidationError(GraylogSearchError, ValueError):
    """Caller input rejected before any HTTP call."""


class InvalidRangeError(ValidationError):
    """Time range whose start lies after its end."""


class ParseError(GraylogSearchError, ValueError):
    """Malformed timestamp text, response body or result shape."""


class TypeMismatchError(GraylogSearchError, TypeError):
    """Payload value whose JSON type disagrees with the result shape.

    Attributes:
        field: Name of the offending field.
        expected: Human-readable expected type.
        actual: Name of the JSON value's Python type.
    """

    def __init__(self, field: str, expected: str, actual: str) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(f"Field '{field}' expected {expected}, got {actual}")


class CommunicationError(GraylogSearchError):
    """Transport failure or non-success HTTP status.

    Attributes:
        endpoint: Endpoint path that was requested.
        status: HTTP status code, or None when no response was received.
    """

    def __init__(self, message: str, *, endpoint: str, status: int | None = None) -> None:
        self.endpoint = endpoint
        self.status = status
        super().__init__(f"{message} (endpoint={endpoint} status={status})")


class EmptyBodyError(CommunicationError):
    """Success status with no payload."""
