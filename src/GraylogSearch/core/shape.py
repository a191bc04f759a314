"""Result-shape contract for the response mapper.

A result shape is a dataclass whose mappable fields are declared with
`mapped_field`. The declaration names the JSON key, the accepted JSON type
and an optional converter; `map_object` then does a lookup-and-assign pass
over those declarations only:

- JSON keys the shape does not declare are ignored.
- Declared fields missing from the payload (or JSON ``null``) keep the
  dataclass default.
- A JSON value of the wrong type raises `TypeMismatchError`.

Example::

    @dataclass(frozen=True, slots=True)
    class ApiMessage(GraylogMessage):
        request_id: str = mapped_field(str, default="")
        process_time: int = mapped_field(int, default=0)
"""

from __future__ import annotations

from collections.abc import Callable
import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping, TypeVar, Union

from GraylogSearch.core.errors import ParseError, TypeMismatchError

T = TypeVar("T")

Kind = Union[type, tuple[type, ...]]

_SHAPE_META = "graylog_search.mapped"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Declared mapping of one JSON key onto one shape attribute."""

    attr: str
    key: str
    kind: Kind
    convert: Callable[[Any], Any] | None = None


@dataclass(frozen=True, slots=True)
class _MappedMeta:
    kind: Kind
    key: str | None
    convert: Callable[[Any], Any] | None


def mapped_field(
    kind: Kind,
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    key: str | None = None,
    convert: Callable[[Any], Any] | None = None,
) -> Any:
    """Declare a dataclass field populated from a JSON payload.

    Args:
        kind: Accepted JSON type(s): str, int, float, bool, dict or list.
            ``float`` also accepts integers; ``bool`` never counts as a number.
        default: Value used when the key is absent.
        default_factory: Factory used when the key is absent.
        key: JSON key when it differs from the attribute name.
        convert: Callable applied to the type-checked JSON value.

    Returns:
        A `dataclasses.field` carrying the mapping declaration.
    """
    meta = {_SHAPE_META: _MappedMeta(kind=kind, key=key, convert=convert)}
    if default_factory is not dataclasses.MISSING:
        return dataclasses.field(default_factory=default_factory, metadata=meta)
    return dataclasses.field(default=default, metadata=meta)


def shape_fields(shape: type) -> tuple[FieldSpec, ...]:
    """Return the mapped-field declarations of a result shape.

    Raises:
        ParseError: If `shape` is not a dataclass with mapped fields.
    """
    if not isinstance(shape, type) or not dataclasses.is_dataclass(shape):
        raise ParseError(f"Result shape must be a dataclass type, got {shape!r}")

    specs: list[FieldSpec] = []
    for item in dataclasses.fields(shape):
        meta = item.metadata.get(_SHAPE_META)
        if meta is None:
            continue
        specs.append(FieldSpec(attr=item.name, key=meta.key or item.name, kind=meta.kind, convert=meta.convert))
    if not specs:
        raise ParseError(f"Result shape {shape.__name__} declares no mapped fields")
    return tuple(specs)


def map_object(payload: Any, shape: type[T], *, path: str = "") -> T:
    """Populate one shape instance from a JSON object.

    Args:
        payload: Decoded JSON object.
        shape: Result shape type.
        path: Key path prefix used in error messages for nested objects.

    Returns:
        A new `shape` instance.

    Raises:
        TypeMismatchError: If the payload or one of its values has the wrong type.
        ParseError: If the shape is invalid or cannot be constructed.
    """
    specs = shape_fields(shape)
    if not isinstance(payload, Mapping):
        raise TypeMismatchError(path or shape.__name__, "object", type(payload).__name__)

    values: dict[str, Any] = {}
    for spec in specs:
        raw = payload.get(spec.key)
        if raw is None:
            continue
        field_path = f"{path}.{spec.key}" if path else spec.key
        value = check_kind(raw, spec.kind, field_path)
        if spec.convert is not None:
            value = spec.convert(value)
        values[spec.attr] = value

    try:
        return shape(**values)
    except TypeError as error:
        raise ParseError(f"Cannot build {shape.__name__} from payload: {error}") from error


def check_kind(value: Any, kind: Kind, field_path: str) -> Any:
    """Type-check a JSON value against a declared kind.

    Integers are widened to float when only ``float`` is accepted.
    """
    kinds = kind if isinstance(kind, tuple) else (kind,)
    if isinstance(value, bool):
        if bool in kinds:
            return value
        raise TypeMismatchError(field_path, _kind_name(kinds), "bool")
    if isinstance(value, int) and int not in kinds and float in kinds:
        return float(value)
    if isinstance(value, tuple(_json_type(k) for k in kinds)):
        return value
    raise TypeMismatchError(field_path, _kind_name(kinds), type(value).__name__)


def _json_type(kind: type) -> type:
    if kind is dict:
        return Mapping
    return kind


def _kind_name(kinds: tuple[type, ...]) -> str:
    return " or ".join(k.__name__ for k in kinds)
