"""Typed filter expressions for record store queries.

Predicates are built from validated field names and typed values instead of
hand-assembled strings:

    from libs.baas.filters import Field

    where = Field("merchantId") == store_id
    where.to_where()      # "merchantId = 'ABC-123'"
    where.matches(record) # evaluated in-process by the memory store

Values are rendered with quotes escaped, so a value can never terminate the
literal and inject another clause.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

FilterValue = Union[str, int, float, bool, None]

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def _render_value(value: FilterValue) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    raise TypeError(f"Unsupported filter value type: {type(value).__name__}")


def _lookup(record: Mapping[str, Any], path: str) -> Any:
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


class Predicate:
    """Base class for filter expressions."""

    def to_where(self) -> str:
        raise NotImplementedError

    def matches(self, record: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def __and__(self, other: "Predicate") -> "And":
        left = self.clauses if isinstance(self, And) else (self,)
        right = other.clauses if isinstance(other, And) else (other,)
        return And(left + right)

    def __str__(self) -> str:
        return self.to_where()


@dataclass(frozen=True)
class Eq(Predicate):
    field: str
    value: FilterValue

    def to_where(self) -> str:
        if self.value is None:
            return f"{self.field} IS NULL"
        return f"{self.field} = {_render_value(self.value)}"

    def matches(self, record: Mapping[str, Any]) -> bool:
        return _lookup(record, self.field) == self.value


@dataclass(frozen=True)
class And(Predicate):
    clauses: tuple

    def to_where(self) -> str:
        return " AND ".join(
            f"({clause.to_where()})" if isinstance(clause, And) else clause.to_where()
            for clause in self.clauses
        )

    def matches(self, record: Mapping[str, Any]) -> bool:
        return all(clause.matches(record) for clause in self.clauses)


class Field:
    """A validated column name; comparing it with a value yields a predicate."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, name: str):
        if not _FIELD_NAME.match(name):
            raise ValueError(f"Invalid field name: {name!r}")
        self.name = name

    def __eq__(self, value: FilterValue) -> Eq:  # type: ignore[override]
        if value is not None and not isinstance(value, (str, int, float, bool)):
            raise TypeError(f"Unsupported filter value type: {type(value).__name__}")
        return Eq(self.name, value)

    def __repr__(self) -> str:
        return f"Field({self.name!r})"


def where_clause(predicate: Optional[Predicate]) -> Optional[str]:
    """Render a predicate, or None for an unfiltered query."""
    return predicate.to_where() if predicate is not None else None
