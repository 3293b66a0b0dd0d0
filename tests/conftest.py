"""Shared fakes for the external database client."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from concurrent.futures import Future
from typing import Any

import pytest
from typed_rtdb.database_client import ABORT_TRANSACTION, NOT_FOUND


class FakeDatabaseClient:
    """In-memory stand-in for a realtime database client."""

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.calls: list[tuple[Any, ...]] = []
        self.subscriptions: list[dict[str, Any]] = []
        self.transaction_attempts = 1
        self._next_key = 0

    def build_constraint(self, constraint_type: str, *arguments: Any) -> tuple[Any, ...]:
        return (constraint_type, *arguments)

    def get(self, path: str, constraints: Sequence[Any]) -> Any:
        self.calls.append(("get", path, tuple(constraints)))
        return self._read(path)

    def set(self, path: str, value: Any) -> str:
        self.calls.append(("set", path, value))
        self._write(path, value)
        return "set-ok"

    def set_with_priority(self, path: str, value: Any, priority: Any) -> str:
        self.calls.append(("set_with_priority", path, value, priority))
        self._write(path, value)
        return "set-ok"

    def update(self, path: str, values: Mapping[str, Any]) -> str:
        self.calls.append(("update", path, dict(values)))
        for relative, value in values.items():
            self._write(f"{path}/{relative}" if path else relative, value)
        return "update-ok"

    def push(self, path: str, value: Any) -> tuple[str, Future[Any]]:
        self._next_key += 1
        key = f"-k{self._next_key}"
        self.calls.append(("push", path, value))
        self._write(f"{path}/{key}" if path else key, value)
        completion: Future[Any] = Future()
        completion.set_result(None)
        return key, completion

    def remove(self, path: str) -> str:
        self.calls.append(("remove", path))
        self._write(path, None)
        return "remove-ok"

    def run_transaction(self, path: str, update: Any) -> tuple[bool, Any]:
        self.calls.append(("transaction", path))
        result = ABORT_TRANSACTION
        for _ in range(self.transaction_attempts):
            result = update(self._read(path))
        if result is ABORT_TRANSACTION:
            return False, self._read(path)
        self._write(path, result)
        return True, self._read(path)

    def subscribe(
        self, path: str, event_type: str, constraints: Sequence[Any], handler: Any
    ) -> Any:
        subscription = {
            "path": path,
            "event_type": event_type,
            "constraints": tuple(constraints),
            "handler": handler,
            "active": True,
        }
        self.subscriptions.append(subscription)

        def unsubscribe() -> None:
            subscription["active"] = False

        return unsubscribe

    def emit(
        self,
        event_type: str,
        raw_value: Any,
        key: str | None = None,
        previous_key: str | None = None,
    ) -> None:
        for subscription in self.subscriptions:
            if subscription["active"] and subscription["event_type"] == event_type:
                subscription["handler"](raw_value, key, previous_key)

    def _segments(self, path: str) -> list[str]:
        return [segment for segment in path.split("/") if segment]

    def _read(self, path: str) -> Any:
        current: Any = self.data
        for segment in self._segments(path):
            if not isinstance(current, Mapping) or segment not in current:
                return NOT_FOUND
            current = current[segment]
        return NOT_FOUND if current is None else current

    def _write(self, path: str, value: Any) -> None:
        segments = self._segments(path)
        if not segments:
            self.data = dict(value) if isinstance(value, Mapping) else {}
            return
        current = self.data
        for segment in segments[:-1]:
            current = current.setdefault(segment, {})
        if value is None:
            current.pop(segments[-1], None)
        else:
            current[segments[-1]] = value


@pytest.fixture
def fake_client() -> FakeDatabaseClient:
    return FakeDatabaseClient()
