"""Schema-checked references to locations in the database."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any

from typed_rtdb.database_client import (
    ABORT_TRANSACTION,
    NOT_FOUND,
    DatabaseClient,
    EventType,
    Unsubscribe,
)
from typed_rtdb.errors import DetachedDatabaseError, InvalidPathError, SchemaMismatchError
from typed_rtdb.path_algebra.path_resolution import (
    dynamic_child_value_shape,
    matches_child_pattern,
    resolve,
    resolve_segments,
    valid_child_patterns,
)
from typed_rtdb.path_algebra.path_segments import (
    join_path,
    last_segment,
    normalize_path,
    parent_path,
    split_path,
)
from typed_rtdb.queries.query_builder import Query
from typed_rtdb.schema_management.schema_models import Descriptor, Leaf, describe_shape
from typed_rtdb.schema_management.shape_conformance import ensure_conforms, is_removable
from typed_rtdb.snapshots.data_snapshots import DataSnapshot, wrap_snapshot
from typed_rtdb.snapshots.snapshot_reading import SnapshotCallback, listen, read_snapshot

logger = logging.getLogger(__name__)

TransactionFunction = Callable[[Any], Any]


@dataclass(frozen=True, eq=False)
class TypedDatabase:
    """Schema root paired with the external client it borrows."""

    schema: Descriptor
    client: DatabaseClient | None = None

    def ref(self, path: str = "") -> Reference:
        return make_reference(self, path)

    def require_client(self) -> DatabaseClient:
        if self.client is None:
            raise DetachedDatabaseError("No database client is attached to this database.")
        return self.client


@dataclass(frozen=True)
class Reference:
    """A path known to resolve against the schema, with its shape.

    Construction fails with ``InvalidPathError`` when the path does not resolve,
    so every reference points at a declared location.
    """

    database: TypedDatabase
    path: str = ""
    shape: Descriptor = field(init=False, compare=False)

    def __post_init__(self) -> None:
        segments = split_path(self.path)
        if segments is None:
            raise InvalidPathError(f"Malformed path {self.path!r}.")
        shape = resolve_segments(self.database.schema, segments)
        if shape is None:
            raise InvalidPathError(f"Path {self.path!r} does not exist in the schema.")
        object.__setattr__(self, "path", "/".join(segments))
        object.__setattr__(self, "shape", shape)

    @property
    def key(self) -> str | None:
        return last_segment(self.path)

    @property
    def parent(self) -> Reference | None:
        if not self.path:
            return None
        return Reference(self.database, parent_path(self.path))

    @property
    def root(self) -> Reference:
        return Reference(self.database, "")

    def child(self, path: str) -> Reference:
        """Return the reference at a relative path below this one."""
        normalized = normalize_path(path)
        if not normalized:
            raise InvalidPathError(f"Malformed child path {path!r} below '/{self.path}'.")
        if not matches_child_pattern(valid_child_patterns(self.shape), normalized):
            raise InvalidPathError(
                f"'{normalized}' is not a child of '/{self.path}' "
                f"({describe_shape(self.shape)})."
            )
        return Reference(self.database, join_path(self.path, normalized))

    def query(self) -> Query:
        return Query(ref=self)

    def order_by_key(self) -> Query:
        return self.query().order_by_key()

    def order_by_value(self) -> Query:
        return self.query().order_by_value()

    def order_by_priority(self) -> Query:
        return self.query().order_by_priority()

    def order_by_child(self, path: str) -> Query:
        return self.query().order_by_child(path)

    def limit_to_first(self, limit: int) -> Query:
        return self.query().limit_to_first(limit)

    def limit_to_last(self, limit: int) -> Query:
        return self.query().limit_to_last(limit)

    def get(self) -> DataSnapshot:
        return read_snapshot(self)

    def listen(self, event_type: EventType | str, callback: SnapshotCallback) -> Unsubscribe:
        return listen(self, event_type, callback)

    def check_set(self, value: Any) -> None:
        """Raise ``SchemaMismatchError`` unless ``value`` may be stored here."""
        ensure_conforms(self.shape, value, path=self._display_path())

    def set(self, value: Any) -> Any:
        """Validate ``value`` against this location's shape and write it."""
        self.check_set(value)
        client = self.database.require_client()
        logger.debug("Setting value at %r", self.path)
        return client.set(self.path, value)

    def set_with_priority(self, value: Any, priority: str | float | None) -> Any:
        if isinstance(priority, bool) or not isinstance(priority, (str, int, float, type(None))):
            raise SchemaMismatchError(f"Priority must be a string, number or null: {priority!r}.")
        self.check_set(value)
        client = self.database.require_client()
        logger.debug("Setting value with priority at %r", self.path)
        return client.set_with_priority(self.path, value, priority)

    def check_update(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Validate a multi-path update and return it keyed by normalized paths.

        Keys are relative paths. ``None`` deletes a descendant and is accepted
        only where removing it leaves the data valid.
        """
        if isinstance(self.shape, Leaf):
            raise SchemaMismatchError(
                f"Cannot update '/{self.path}': {self.shape.kind.value} has no children."
            )
        if not isinstance(values, Mapping):
            raise SchemaMismatchError(f"Update values for '/{self.path}' must be a mapping.")
        normalized_values: dict[str, Any] = {}
        for raw_key, value in values.items():
            relative = normalize_path(raw_key) if isinstance(raw_key, str) else None
            if not relative:
                raise InvalidPathError(f"Malformed update key {raw_key!r}.")
            target = resolve(self.shape, relative)
            if target is None:
                raise InvalidPathError(f"'{relative}' does not exist below '/{self.path}'.")
            location = f"{self._display_path().rstrip('/')}/{relative}"
            if value is None:
                self._ensure_removable(relative, target, location)
            else:
                ensure_conforms(target, value, path=location)
            normalized_values[relative] = value
        return normalized_values

    def update(self, values: Mapping[str, Any]) -> Any:
        """Validate and write several descendants at once."""
        normalized_values = self.check_update(values)
        client = self.database.require_client()
        logger.debug("Updating %d path(s) below %r", len(normalized_values), self.path)
        return client.update(self.path, normalized_values)

    def check_push(self, value: Any) -> None:
        """Raise unless this location accepts ``value`` under a generated key."""
        value_shape = dynamic_child_value_shape(self.shape)
        if value_shape is None:
            raise SchemaMismatchError(
                f"'/{self.path}' ({describe_shape(self.shape)}) does not accept generated keys."
            )
        location = f"{self._display_path().rstrip('/')}/<new key>"
        ensure_conforms(value_shape, value, path=location)

    def push(self, value: Any) -> ThenableReference:
        """Store ``value`` under a key generated by the database."""
        self.check_push(value)
        client = self.database.require_client()
        key, completion = client.push(self.path, value)
        logger.debug("Pushed child %r below %r", key, self.path)
        return ThenableReference(reference=self.child(key), completion=completion)

    def remove(self) -> Any:
        client = self.database.require_client()
        logger.debug("Removing %r", self.path)
        return client.remove(self.path)

    def transaction(self, update: TransactionFunction) -> TransactionResult:
        """Run an atomic read-modify-write.

        ``update`` receives the current value (``None`` when absent) and returns
        the new value, ``None`` to delete, or ``ABORT_TRANSACTION``. The client
        may call it several times; every returned value is checked.
        """
        display_path = self._display_path()

        def checked_update(current: Any) -> Any:
            result = update(None if current is NOT_FOUND else current)
            if result is not ABORT_TRANSACTION and result is not None:
                ensure_conforms(self.shape, result, path=display_path)
            return result

        client = self.database.require_client()
        logger.debug("Running transaction at %r", self.path)
        committed, raw_value = client.run_transaction(self.path, checked_update)
        return TransactionResult(
            committed=committed,
            snapshot=wrap_snapshot(self, raw_value, found=raw_value is not NOT_FOUND),
        )

    def _ensure_removable(self, relative: str, target: Descriptor, location: str) -> None:
        parent_shape = resolve(self.shape, parent_path(relative))
        name = last_segment(relative) or ""
        if parent_shape is None or not is_removable(parent_shape, name, target):
            raise SchemaMismatchError(f"{location}: required value cannot be deleted.")

    def _display_path(self) -> str:
        return f"/{self.path}"


@dataclass(frozen=True)
class ThenableReference:
    """Reference to a pushed child plus the pending write that created it."""

    reference: Reference
    completion: Future[Any]

    @property
    def key(self) -> str:
        return self.reference.key or ""

    def done(self) -> bool:
        return self.completion.done()

    def result(self, timeout: float | None = None) -> Reference:
        """Wait for the write to finish and return the child reference."""
        self.completion.result(timeout=timeout)
        return self.reference

    def add_done_callback(self, callback: Callable[[ThenableReference], None]) -> None:
        self.completion.add_done_callback(lambda _: callback(self))


@dataclass(frozen=True)
class TransactionResult:
    """Outcome of a transaction and the value it left behind."""

    committed: bool
    snapshot: DataSnapshot


def make_reference(database: TypedDatabase, path: str = "") -> Reference:
    """Build a reference, raising ``InvalidPathError`` if ``path`` does not resolve."""
    return Reference(database, path)
