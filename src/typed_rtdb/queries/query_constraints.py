"""Query constraint entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from typed_rtdb.schema_management.schema_models import LeafKind


class ConstraintType(str, Enum):
    """Constraint kinds, named after the native query functions."""

    ORDER_BY_KEY = "orderByKey"
    ORDER_BY_VALUE = "orderByValue"
    ORDER_BY_PRIORITY = "orderByPriority"
    ORDER_BY_CHILD = "orderByChild"
    START_AT = "startAt"
    START_AFTER = "startAfter"
    END_AT = "endAt"
    END_BEFORE = "endBefore"
    EQUAL_TO = "equalTo"
    LIMIT_TO_FIRST = "limitToFirst"
    LIMIT_TO_LAST = "limitToLast"

    @property
    def is_ordering(self) -> bool:
        return self in _ORDERING_TYPES

    @property
    def is_range(self) -> bool:
        return self in _RANGE_TYPES


_ORDERING_TYPES = frozenset(
    {
        ConstraintType.ORDER_BY_KEY,
        ConstraintType.ORDER_BY_VALUE,
        ConstraintType.ORDER_BY_PRIORITY,
        ConstraintType.ORDER_BY_CHILD,
    }
)
_RANGE_TYPES = frozenset(
    {
        ConstraintType.START_AT,
        ConstraintType.START_AFTER,
        ConstraintType.END_AT,
        ConstraintType.END_BEFORE,
        ConstraintType.EQUAL_TO,
    }
)


@dataclass(frozen=True)
class QueryConstraint:
    """One ordering, range or limit directive of a query."""

    constraint_type: ConstraintType
    child_path: str | None = None
    value: Any = None
    key: str | None = None
    limit: int | None = None

    @property
    def arguments(self) -> tuple[Any, ...]:
        """Arguments passed to the native constraint function, in call order."""
        if self.constraint_type is ConstraintType.ORDER_BY_CHILD:
            return (self.child_path,)
        if self.constraint_type.is_range:
            return (self.value,) if self.key is None else (self.value, self.key)
        if self.limit is not None:
            return (self.limit,)
        return ()

    def describe(self) -> str:
        rendered = ", ".join(repr(argument) for argument in self.arguments)
        return f"{self.constraint_type.value}({rendered})"


@dataclass(frozen=True)
class ComparisonType:
    """Primitive kinds accepted by range constraints once an ordering is active.

    ``null`` is always admitted as a range bound.
    """

    kinds: frozenset[LeafKind]
    ordering: ConstraintType

    def accepts(self, kind: LeafKind) -> bool:
        return kind is LeafKind.NULL or kind in self.kinds

    def describe(self) -> str:
        names = sorted(kind.value for kind in self.kinds | {LeafKind.NULL})
        return " | ".join(names)
