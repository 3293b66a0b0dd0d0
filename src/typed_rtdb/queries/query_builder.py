"""Incremental query builder that narrows the accepted range value type."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from typed_rtdb.database_client import ConstraintFactory, EventType, Unsubscribe
from typed_rtdb.errors import ConstraintConflictError, InvalidPathError, SchemaMismatchError
from typed_rtdb.path_algebra.path_resolution import any_child_shape, resolve
from typed_rtdb.path_algebra.path_segments import normalize_path
from typed_rtdb.schema_management.schema_models import (
    Descriptor,
    LeafKind,
    describe_shape,
)
from typed_rtdb.schema_management.shape_conformance import primitive_kinds, value_kind
from typed_rtdb.snapshots.data_snapshots import DataSnapshot
from typed_rtdb.snapshots.snapshot_reading import SnapshotCallback, listen, read_snapshot

from .constraint_compiler import compile_constraints
from .query_constraints import ComparisonType, ConstraintType, QueryConstraint

if TYPE_CHECKING:
    from typed_rtdb.references.typed_references import Reference

_KEY_KINDS = frozenset({LeafKind.STRING})
_PRIORITY_KINDS = frozenset({LeafKind.STRING, LeafKind.NUMBER, LeafKind.NULL})


@dataclass(frozen=True)
class Query:
    """A reference plus an append-only chain of constraints.

    Every chaining method returns a new query. The first ordering call fixes the
    comparison type that later range constraints must match.
    """

    ref: Reference
    constraints: tuple[QueryConstraint, ...] = ()
    comparison: ComparisonType | None = None

    @property
    def path(self) -> str:
        return self.ref.path

    @property
    def shape(self) -> Descriptor:
        return self.ref.shape

    def order_by_key(self) -> Query:
        return self._order(ConstraintType.ORDER_BY_KEY, _KEY_KINDS)

    def order_by_value(self) -> Query:
        return self._order(ConstraintType.ORDER_BY_VALUE, primitive_kinds(self.shape))

    def order_by_priority(self) -> Query:
        return self._order(ConstraintType.ORDER_BY_PRIORITY, _PRIORITY_KINDS)

    def order_by_child(self, path: str) -> Query:
        """Order children by the value found at ``path`` inside each child."""
        normalized = normalize_path(path)
        if not normalized:
            raise InvalidPathError(f"orderByChild needs a non-empty child path, got {path!r}.")
        child_shape = any_child_shape(self.shape)
        target = resolve(child_shape, normalized) if child_shape is not None else None
        if target is None:
            raise InvalidPathError(
                f"Cannot order {self._where()} by child {path!r}: children of "
                f"{describe_shape(self.shape)} have no such path."
            )
        return self._order(
            ConstraintType.ORDER_BY_CHILD, primitive_kinds(target), child_path=normalized
        )

    def start_at(self, value: Any, key: str | None = None) -> Query:
        return self._range(ConstraintType.START_AT, value, key)

    def start_after(self, value: Any, key: str | None = None) -> Query:
        return self._range(ConstraintType.START_AFTER, value, key)

    def end_at(self, value: Any, key: str | None = None) -> Query:
        return self._range(ConstraintType.END_AT, value, key)

    def end_before(self, value: Any, key: str | None = None) -> Query:
        return self._range(ConstraintType.END_BEFORE, value, key)

    def equal_to(self, value: Any, key: str | None = None) -> Query:
        return self._range(ConstraintType.EQUAL_TO, value, key)

    def limit_to_first(self, limit: int) -> Query:
        return self._limit(ConstraintType.LIMIT_TO_FIRST, limit)

    def limit_to_last(self, limit: int) -> Query:
        return self._limit(ConstraintType.LIMIT_TO_LAST, limit)

    def compile(self, factory: ConstraintFactory | None = None) -> list[Any]:
        """Return native constraints, built by ``factory`` or the attached client."""
        builder = factory if factory is not None else self.ref.database.require_client()
        return compile_constraints(self.constraints, builder)

    def get(self) -> DataSnapshot:
        return read_snapshot(self.ref, self.compile())

    def listen(self, event_type: EventType | str, callback: SnapshotCallback) -> Unsubscribe:
        return listen(self.ref, event_type, callback, self.compile())

    def _order(
        self,
        constraint_type: ConstraintType,
        kinds: frozenset[LeafKind],
        *,
        child_path: str | None = None,
    ) -> Query:
        if self.comparison is not None:
            raise ConstraintConflictError(
                f"{self._where()} is already ordered by {self.comparison.ordering.value}; "
                f"{constraint_type.value} is not allowed."
            )
        if self.constraints:
            raise ConstraintConflictError(
                f"{constraint_type.value} must be the first constraint of {self._where()}."
            )
        constraint = QueryConstraint(constraint_type=constraint_type, child_path=child_path)
        return replace(
            self,
            constraints=(*self.constraints, constraint),
            comparison=ComparisonType(kinds=kinds, ordering=constraint_type),
        )

    def _range(self, constraint_type: ConstraintType, value: Any, key: str | None) -> Query:
        kind = value_kind(value)
        if kind is None:
            raise SchemaMismatchError(
                f"{constraint_type.value} needs a string, number, boolean or null value, "
                f"got {type(value).__name__}."
            )
        if key is not None and not isinstance(key, str):
            raise SchemaMismatchError(f"{constraint_type.value} key must be a string.")
        if self.comparison is not None and not self.comparison.accepts(kind):
            raise ConstraintConflictError(
                f"{constraint_type.value} value {value!r} is a {kind.value}, but "
                f"{self.comparison.ordering.value} on {self._where()} compares "
                f"{self.comparison.describe()}."
            )
        constraint = QueryConstraint(constraint_type=constraint_type, value=value, key=key)
        return replace(self, constraints=(*self.constraints, constraint))

    def _limit(self, constraint_type: ConstraintType, limit: int) -> Query:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise SchemaMismatchError(
                f"{constraint_type.value} needs a non-negative integer, got {limit!r}."
            )
        constraint = QueryConstraint(constraint_type=constraint_type, limit=limit)
        return replace(self, constraints=(*self.constraints, constraint))

    def _where(self) -> str:
        return f"query at '/{self.path}'"
