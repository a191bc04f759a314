"""Graylog search payload parser.

Maps decoded JSON responses into result shapes. List endpoints always return
a list (empty when nothing matched); single-object helpers return ``None``
as the explicit "no result" value.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence, TypeVar

from GraylogSearch.core.errors import ParseError, TypeMismatchError
from GraylogSearch.core.models import FieldHistogram, GraylogMessage, Histogram, Statistics, Terms
from GraylogSearch.core.shape import map_object

T = TypeVar("T")


def decode_body(body: bytes | str, *, endpoint: str) -> dict[str, Any]:
    """Decode a response body into a JSON object.

    Raises:
        ParseError: If the body is not valid JSON.
        TypeMismatchError: If the JSON root is not an object.
    """
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, ValueError) as error:
        raise ParseError(f"Invalid JSON from {endpoint}: {error}") from error
    if not isinstance(payload, dict):
        raise TypeMismatchError("<root>", "object", type(payload).__name__)
    return payload


def map_one(payload: Mapping[str, Any] | None, shape: type[T]) -> T | None:
    """Map one object, or return ``None`` when the payload is empty."""
    if not payload:
        return None
    return map_object(payload, shape)


def map_many(items: Sequence[Any] | None, shape: type[T], *, path: str = "items") -> list[T]:
    """Map each element of a JSON list; ``None`` maps to an empty list."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise TypeMismatchError(path, "list", type(items).__name__)
    return [map_object(item, shape, path=f"{path}[{idx}]") for idx, item in enumerate(items)]


def parse_messages(payload: Mapping[str, Any], shape: type[T] = GraylogMessage) -> list[T]:
    """Map ``messages[].message`` into the caller's message shape."""
    wrappers = payload.get("messages")
    if wrappers is None:
        return []
    if not isinstance(wrappers, list):
        raise TypeMismatchError("messages", "list", type(wrappers).__name__)

    messages: list[T] = []
    for idx, wrapper in enumerate(wrappers):
        if not isinstance(wrapper, Mapping):
            raise TypeMismatchError(f"messages[{idx}]", "object", type(wrapper).__name__)
        messages.append(map_object(wrapper.get("message"), shape, path=f"messages[{idx}].message"))
    return messages


def parse_statistics(payload: Mapping[str, Any]) -> Statistics:
    return map_object(payload, Statistics)


def parse_histogram(payload: Mapping[str, Any]) -> Histogram:
    return map_object(payload, Histogram)


def parse_field_histogram(payload: Mapping[str, Any]) -> FieldHistogram:
    return map_object(payload, FieldHistogram)


def parse_terms(payload: Mapping[str, Any]) -> Terms:
    return map_object(payload, Terms)
