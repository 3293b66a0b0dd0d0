"""Boundary with the external hierarchical database client."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import Future
from enum import Enum
from typing import Any, Protocol


class _Marker:
    """Named sentinel used at the client boundary."""

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


NOT_FOUND: Any = _Marker("NOT_FOUND")
"""Returned by ``DatabaseClient.get`` when nothing is stored at the path."""

ABORT_TRANSACTION: Any = _Marker("ABORT_TRANSACTION")
"""Returned by a transaction update function to abort without writing."""


class EventType(str, Enum):
    """Realtime event kinds a client can deliver."""

    VALUE = "value"
    CHILD_ADDED = "child_added"
    CHILD_CHANGED = "child_changed"
    CHILD_MOVED = "child_moved"
    CHILD_REMOVED = "child_removed"


RawEventHandler = Callable[[Any, str | None, str | None], None]
"""Receives ``(raw_value, key, previous_key)`` for each delivered event."""

TransactionUpdate = Callable[[Any], Any]
Unsubscribe = Callable[[], None]


class ConstraintFactory(Protocol):  # pylint: disable=too-few-public-methods
    """Builds the client's native query constraint objects."""

    def build_constraint(self, constraint_type: str, *arguments: Any) -> Any: ...


class DatabaseClient(ConstraintFactory, Protocol):
    """Protocol implemented by real database adapters and by test fakes.

    Paths are normalized (no leading slash, ``""`` is the root). Failures are
    raised by the client and reach the caller unchanged.
    """

    def get(self, path: str, constraints: Sequence[Any]) -> Any: ...

    def set(self, path: str, value: Any) -> Any: ...

    def set_with_priority(self, path: str, value: Any, priority: str | float | None) -> Any: ...

    def update(self, path: str, values: Mapping[str, Any]) -> Any: ...

    def push(self, path: str, value: Any) -> tuple[str, Future[Any]]: ...

    def remove(self, path: str) -> Any: ...

    def run_transaction(self, path: str, update: TransactionUpdate) -> tuple[bool, Any]: ...

    def subscribe(
        self,
        path: str,
        event_type: str,
        constraints: Sequence[Any],
        handler: RawEventHandler,
    ) -> Unsubscribe: ...
