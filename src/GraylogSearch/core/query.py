"""Graylog query builder.

Builds Graylog (Lucene-like) query strings from field, comparison, range and
free-text clauses.

Rules
- The builder is immutable: every call returns a new `GraylogQuery`.
- `and_()` / `or_()` record the combinator placed before the next clause.
  Without one, clauses are joined with an explicit ``AND``.
- A combinator before the first clause is dropped, so a recipe can extend an
  empty base query with ``.and_().field(...)``.
- Values with whitespace, quotes or Lucene special characters are quoted.

Syntax produced
- field(name, value)            -> name:value
- field(name, ">=", value)      -> name:>=value
- range(name, "[", 0, 500, "]") -> name:[0 TO 500]
- exists(name)                  -> _exists_:name
- not_().field(name, value)     -> NOT name:value
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import math
import re
from typing import Union

from GraylogSearch.core.errors import ValidationError

Scalar = Union[str, int, float, bool]

AND = "AND"
OR = "OR"
DEFAULT_COMBINATOR = AND

COMPARISON_OPERATORS = frozenset({">", ">=", "<", "<="})
LOWER_BRACKETS = frozenset({"[", "{"})
UPPER_BRACKETS = frozenset({"]", "}"})

_RE_NEEDS_QUOTE = re.compile(r'[\s+\-&|!(){}\[\]^"~*?:\\/]')
_RE_FIELD_NAME = re.compile(r"^[^\s:()\"]+$")
_RESERVED_WORDS = frozenset({"AND", "OR", "NOT", "TO"})


def escape_value(value: Scalar) -> str:
    """Render a clause value in query syntax.

    Numbers and booleans are rendered bare, except negative numbers, which
    are quoted so the leading ``-`` is not read as the prohibit operator.
    Strings are quoted when they contain whitespace, quotes, Lucene special
    characters, or are one of the reserved words; inner backslashes and
    quotes are backslash-escaped.

    Raises:
        ValidationError: If the value is not a string, finite number or boolean.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError(f"Query value must be a finite number, got {value!r}")
        text = str(value)
        return f'"{text}"' if text.startswith("-") else text
    if not isinstance(value, str):
        raise ValidationError(f"Unsupported query value type: {type(value).__name__}")
    if not value:
        return '""'
    if _RE_NEEDS_QUOTE.search(value) or value.upper() in _RESERVED_WORDS:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def _range_bound(value: Scalar | None) -> str:
    if value is None:
        return "*"
    return escape_value(value)


def _check_field_name(name: str) -> str:
    if not isinstance(name, str) or not _RE_FIELD_NAME.match(name):
        raise ValidationError(f"Invalid field name: {name!r}")
    return name


@dataclass(frozen=True, slots=True)
class FieldClause:
    """Equality (`operator` empty) or comparison clause on one field."""

    name: str
    value: Scalar
    operator: str = ""

    def render(self) -> str:
        return f"{self.name}:{self.operator}{escape_value(self.value)}"


@dataclass(frozen=True, slots=True)
class RangeClause:
    """Bracketed range clause; ``[``/``]`` inclusive, ``{``/``}`` exclusive."""

    name: str
    lower_bracket: str
    lower: Scalar | None
    upper: Scalar | None
    upper_bracket: str

    def render(self) -> str:
        return (
            f"{self.name}:{self.lower_bracket}{_range_bound(self.lower)}"
            f" TO {_range_bound(self.upper)}{self.upper_bracket}"
        )


@dataclass(frozen=True, slots=True)
class TermClause:
    """Free-text term searched in the default message field."""

    value: Scalar

    def render(self) -> str:
        return escape_value(self.value)


@dataclass(frozen=True, slots=True)
class RawClause:
    """Pre-serialized text kept verbatim (seed queries, groups)."""

    text: str

    def render(self) -> str:
        return self.text


Clause = Union[FieldClause, RangeClause, TermClause, RawClause]


@dataclass(frozen=True, slots=True)
class _Entry:
    combinator: str
    negated: bool
    clause: Clause


@dataclass(frozen=True, slots=True)
class GraylogQuery:
    """Immutable query expression.

    Attributes:
        entries: Clauses in order, each with the combinator placed before it
            (ignored for the first clause) and its negation flag.
        pending_combinator: Combinator waiting for the next clause.
        pending_not: Whether the next clause is negated.
    """

    entries: tuple[_Entry, ...] = ()
    pending_combinator: str | None = None
    pending_not: bool = False

    @classmethod
    def builder(cls, base: GraylogQuery | str | None = None) -> GraylogQuery:
        """Start a builder, optionally seeded from a query or query string.

        A string seed is kept verbatim as the first clause, so the built
        query always starts with it.
        """
        if base is None:
            return cls()
        if isinstance(base, GraylogQuery):
            return base
        if isinstance(base, str):
            text = base.strip()
            return cls()._append(RawClause(text)) if text else cls()
        raise ValidationError(f"Cannot seed a query from {type(base).__name__}")

    @property
    def clauses(self) -> tuple[Clause, ...]:
        return tuple(entry.clause for entry in self.entries)

    def field(self, name: str, *args: Scalar) -> GraylogQuery:
        """Add ``field(name, value)`` or ``field(name, operator, value)``."""
        if len(args) == 1:
            return self._append(FieldClause(_check_field_name(name), args[0]))
        if len(args) == 2:
            operator, value = args
            if operator not in COMPARISON_OPERATORS:
                raise ValidationError(
                    f"Unsupported comparison operator {operator!r}; use one of {sorted(COMPARISON_OPERATORS)}"
                )
            return self._append(FieldClause(_check_field_name(name), value, str(operator)))
        raise TypeError(f"field() takes a value or an operator and a value, got {len(args)} arguments")

    def range(
        self,
        name: str,
        lower_bracket: str,
        lower: Scalar | None,
        upper: Scalar | None,
        upper_bracket: str,
    ) -> GraylogQuery:
        """Add a range clause; a ``None`` bound is open (``*``)."""
        if lower_bracket not in LOWER_BRACKETS:
            raise ValidationError(f"Lower bracket must be '[' or '{{', got {lower_bracket!r}")
        if upper_bracket not in UPPER_BRACKETS:
            raise ValidationError(f"Upper bracket must be ']' or '}}', got {upper_bracket!r}")
        return self._append(RangeClause(_check_field_name(name), lower_bracket, lower, upper, upper_bracket))

    def term(self, value: Scalar) -> GraylogQuery:
        return self._append(TermClause(value))

    def exists(self, name: str) -> GraylogQuery:
        return self._append(RawClause(f"_exists_:{_check_field_name(name)}"))

    def group(self, query: GraylogQuery | str) -> GraylogQuery:
        """Add another query wrapped in parentheses as one clause."""
        inner = query.build() if isinstance(query, GraylogQuery) else str(query).strip()
        if not inner:
            raise ValidationError("Cannot group an empty query")
        return self._append(RawClause(f"({inner})"))

    def and_(self) -> GraylogQuery:
        return self._combine(AND)

    def or_(self) -> GraylogQuery:
        return self._combine(OR)

    def not_(self) -> GraylogQuery:
        if self.pending_not:
            raise ValidationError("NOT cannot follow NOT")
        return replace(self, pending_not=True)

    def build(self) -> str:
        """Serialize the expression; an empty builder yields ``""``.

        Raises:
            ValidationError: If a combinator or NOT has no clause after it.
        """
        if self.pending_combinator is not None:
            raise ValidationError(f"Dangling {self.pending_combinator} at end of query")
        if self.pending_not:
            raise ValidationError("Dangling NOT at end of query")

        parts: list[str] = []
        for idx, entry in enumerate(self.entries):
            if idx:
                parts.append(entry.combinator)
            if entry.negated:
                parts.append("NOT")
            parts.append(entry.clause.render())
        return " ".join(parts)

    def __str__(self) -> str:
        return self.build()

    def _combine(self, combinator: str) -> GraylogQuery:
        if self.pending_combinator is not None:
            raise ValidationError(f"{combinator} cannot follow {self.pending_combinator}")
        if self.pending_not:
            raise ValidationError(f"{combinator} cannot follow NOT")
        if not self.entries:
            return self
        return replace(self, pending_combinator=combinator)

    def _append(self, clause: Clause) -> GraylogQuery:
        entry = _Entry(
            combinator=self.pending_combinator or DEFAULT_COMBINATOR,
            negated=self.pending_not,
            clause=clause,
        )
        return replace(self, entries=self.entries + (entry,), pending_combinator=None, pending_not=False)
