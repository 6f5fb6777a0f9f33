"""Backend-neutral query predicates.

Repositories describe reads and writes with ``Filter`` and ``Order`` values;
storage backends translate them into their own query language. ``matches``
evaluates filters against a plain row and is shared by backends that filter
in Python.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class FilterOp(str, Enum):
    EQ = "eq"
    NEQ = "neq"
    CONTAINS = "contains"
    GTE = "gte"
    LTE = "lte"
    IN = "in"


@dataclass(frozen=True)
class Filter:
    """A single column predicate."""

    column: str
    op: FilterOp
    value: Any

    def matches(self, row: Mapping[str, Any]) -> bool:
        actual = row.get(self.column)
        match self.op:
            case FilterOp.EQ:
                return actual == self.value
            case FilterOp.NEQ:
                return actual != self.value
            case FilterOp.GTE:
                return actual is not None and actual >= self.value
            case FilterOp.LTE:
                return actual is not None and actual <= self.value
            case FilterOp.IN:
                return actual in self.value
            case FilterOp.CONTAINS:
                if not isinstance(actual, list | tuple):
                    return False
                return all(item in actual for item in self.value)
        raise ValueError(f"Unsupported filter operator: {self.op}")


@dataclass(frozen=True)
class Order:
    column: str
    descending: bool = False


def eq(column: str, value: Any) -> Filter:
    return Filter(column, FilterOp.EQ, value)


def neq(column: str, value: Any) -> Filter:
    return Filter(column, FilterOp.NEQ, value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, FilterOp.GTE, value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, FilterOp.LTE, value)


def in_(column: str, values: Iterable[Any]) -> Filter:
    return Filter(column, FilterOp.IN, tuple(values))


def contains(column: str, values: Iterable[Any]) -> Filter:
    """Array column contains every one of ``values``."""
    return Filter(column, FilterOp.CONTAINS, list(values))


def matches(row: Mapping[str, Any], filters: Sequence[Filter]) -> bool:
    return all(f.matches(row) for f in filters)


def sort_rows(rows: list[dict[str, Any]], order_by: Sequence[Order]) -> list[dict[str, Any]]:
    """Stable multi-column sort; ``None`` values sort last."""
    for order in reversed(order_by):
        present = [r for r in rows if r.get(order.column) is not None]
        missing = [r for r in rows if r.get(order.column) is None]
        present.sort(key=lambda r, c=order.column: r[c], reverse=order.descending)
        rows = present + missing
    return rows
