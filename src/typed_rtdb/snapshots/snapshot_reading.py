"""Reads and realtime listeners that produce typed snapshots."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from typed_rtdb.database_client import NOT_FOUND, EventType, Unsubscribe

from .data_snapshots import DataSnapshot, ExistingDataSnapshot, wrap_snapshot

if TYPE_CHECKING:
    from typed_rtdb.references.typed_references import Reference

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[..., Any]


def read_snapshot(ref: Reference, native_constraints: Sequence[Any] = ()) -> DataSnapshot:
    """Fetch the value at ``ref`` once and wrap it."""
    client = ref.database.require_client()
    logger.debug("Reading %r with %d constraint(s)", ref.path, len(native_constraints))
    raw_value = client.get(ref.path, list(native_constraints))
    return wrap_snapshot(ref, raw_value, found=raw_value is not NOT_FOUND)


def listen(
    ref: Reference,
    event_type: EventType | str,
    callback: SnapshotCallback,
    native_constraints: Sequence[Any] = (),
) -> Unsubscribe:
    """Subscribe to realtime events at ``ref``.

    ``value`` callbacks receive a ``DataSnapshot``. ``child_removed`` callbacks
    receive the removed child as an ``ExistingDataSnapshot``; the other child
    events also pass the previous sibling key.
    """
    event = EventType(event_type)
    client = ref.database.require_client()

    def handle(raw_value: Any, key: str | None, previous_key: str | None) -> None:
        if event is EventType.VALUE:
            callback(wrap_snapshot(ref, raw_value, found=raw_value is not NOT_FOUND))
            return
        if key is None:
            raise ValueError(f"Child event {event.value!r} delivered without a key.")
        child = ExistingDataSnapshot(ref=ref.child(key), raw_value=raw_value, found=True)
        if event is EventType.CHILD_REMOVED:
            callback(child)
        else:
            callback(child, previous_key)

    logger.debug("Subscribing to %s events at %r", event.value, ref.path)
    return client.subscribe(ref.path, event.value, list(native_constraints), handle)
