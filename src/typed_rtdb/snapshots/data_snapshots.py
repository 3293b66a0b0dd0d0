"""Snapshot entities wrapping values fetched from the database."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from typed_rtdb.path_algebra.path_segments import is_index_segment, split_path
from typed_rtdb.schema_management.schema_models import Descriptor

if TYPE_CHECKING:
    from typed_rtdb.references.typed_references import Reference

_MISSING = object()


@dataclass(frozen=True)
class DataSnapshot:
    """Value read at a reference, not yet known to exist.

    ``val()`` and ``key`` are ``None`` unless the value was found. Use
    ``exists()`` or ``existing()`` before relying on either.
    """

    ref: Reference
    raw_value: Any = None
    found: bool = False

    @property
    def shape(self) -> Descriptor:
        return self.ref.shape

    @property
    def key(self) -> str | None:
        return self.ref.key if self.found else None

    def exists(self) -> bool:
        return self.found

    def existing(self) -> ExistingDataSnapshot | None:
        """Return the narrowed snapshot when the value exists, else None."""
        if isinstance(self, ExistingDataSnapshot):
            return self
        return None

    def val(self) -> Any | None:
        return self.raw_value if self.found else None

    def child(self, path: str) -> DataSnapshot:
        """Return the snapshot of a descendant, resolved against this snapshot's shape."""
        child_ref = self.ref.child(path)
        value = _descend(self.raw_value, split_path(path) or ()) if self.found else _MISSING
        if value is _MISSING or value is None:
            return wrap_snapshot(child_ref, None, found=False)
        return wrap_snapshot(child_ref, value, found=True)

    def has_child(self, path: str) -> bool:
        return self.child(path).exists()

    def has_children(self) -> bool:
        return self.size > 0

    @property
    def size(self) -> int:
        return sum(1 for _ in _present_children(self.raw_value)) if self.found else 0

    def for_each(self, action: Callable[[ExistingDataSnapshot], bool | None]) -> bool:
        """Call ``action`` for every child in stored order.

        Every child key is resolved before ``action`` runs, so stored keys the
        schema does not declare raise ``InvalidPathError`` without partial
        iteration. Returns True when ``action`` cancelled the iteration by
        returning a truthy value.
        """
        if not self.found:
            return False
        children = [
            ExistingDataSnapshot(ref=self.ref.child(key), raw_value=value, found=True)
            for key, value in _present_children(self.raw_value)
        ]
        for child in children:
            if action(child):
                return True
        return False


@dataclass(frozen=True)
class ExistingDataSnapshot(DataSnapshot):
    """Snapshot whose value is known to be present."""

    found: bool = True

    @property
    def key(self) -> str:
        return self.ref.key or ""

    def val(self) -> Any:
        return self.raw_value


def wrap_snapshot(ref: Reference, raw_value: Any, found: bool) -> DataSnapshot:
    """Wrap a raw value, choosing the existing variant when it was found.

    A found ``None`` is treated as absent; the store reports missing values that way.
    """
    if found and raw_value is not None:
        return ExistingDataSnapshot(ref=ref, raw_value=raw_value, found=True)
    return DataSnapshot(ref=ref, raw_value=None, found=False)


def _present_children(value: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(value, Mapping):
        for key, child in value.items():
            if child is not None:
                yield str(key), child
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        for index, child in enumerate(value):
            if child is not None:
                yield str(index), child


def _descend(value: Any, segments: Sequence[str]) -> Any:
    current = value
    for segment in segments:
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not is_index_segment(segment) or int(segment) >= len(current):
                return _MISSING
            current = current[int(segment)]
        else:
            return _MISSING
        if current is _MISSING:
            return _MISSING
    return current
