"""Structural checks of plain Python values against schema descriptors."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from typed_rtdb.errors import SchemaMismatchError

from .schema_models import (
    ArrayObject,
    Descriptor,
    DynamicObject,
    FixedObject,
    Leaf,
    LeafKind,
    describe_shape,
)


def value_kind(value: Any) -> LeafKind | None:
    """Return the primitive kind of ``value``, or None for non-primitives."""
    if value is None:
        return LeafKind.NULL
    if isinstance(value, bool):
        return LeafKind.BOOLEAN
    if isinstance(value, (int, float)):
        return LeafKind.NUMBER
    if isinstance(value, str):
        return LeafKind.STRING
    return None


def primitive_kinds(shape: Descriptor | None) -> frozenset[LeafKind]:
    """Return the primitive kinds a shape can hold (empty for containers)."""
    if isinstance(shape, Leaf):
        return frozenset({shape.kind})
    return frozenset()


def find_mismatches(shape: Descriptor, value: Any, *, path: str = "") -> list[str]:
    """Return human-readable mismatch descriptions; empty when ``value`` conforms."""
    mismatches: list[str] = []
    _collect(shape, value, path or "/", mismatches)
    return mismatches


def ensure_conforms(shape: Descriptor, value: Any, *, path: str = "") -> None:
    """Raise ``SchemaMismatchError`` unless ``value`` matches ``shape``."""
    mismatches = find_mismatches(shape, value, path=path)
    if mismatches:
        raise SchemaMismatchError("; ".join(mismatches))


def is_removable(parent: Descriptor, key: str, shape: Descriptor) -> bool:
    """Return True when deleting ``key`` below ``parent`` keeps the data valid."""
    if isinstance(shape, Leaf) and shape.kind is LeafKind.NULL:
        return True
    if isinstance(parent, (DynamicObject, ArrayObject)):
        return True
    if isinstance(parent, FixedObject):
        if key in parent.fields:
            return key in parent.optional
        return parent.additional is not None
    return False


def _collect(shape: Descriptor, value: Any, path: str, mismatches: list[str]) -> None:
    if isinstance(shape, Leaf):
        kind = value_kind(value)
        if kind is not shape.kind:
            mismatches.append(_type_mismatch(path, shape.kind.value, value))
        return
    if isinstance(shape, ArrayObject):
        items = _array_items(value)
        if items is None:
            mismatches.append(_type_mismatch(path, describe_shape(shape), value))
            return
        for key, item in items:
            _collect(shape.element, item, _child(path, key), mismatches)
        return
    if not isinstance(value, Mapping):
        mismatches.append(_type_mismatch(path, describe_shape(shape), value))
        return
    if isinstance(shape, DynamicObject):
        for key, item in value.items():
            if not _is_key(key):
                mismatches.append(f"{path}: keys must be non-empty strings, got {key!r}")
                continue
            _collect(shape.value, item, _child(path, key), mismatches)
        return
    for name, field_shape in shape.fields.items():
        if value.get(name) is None and name in shape.optional:
            continue
        if name not in value:
            mismatches.append(f"{_child(path, name)}: missing required field")
            continue
        _collect(field_shape, value[name], _child(path, name), mismatches)
    for key, item in value.items():
        if key in shape.fields:
            continue
        if shape.additional is None or not _is_key(key):
            mismatches.append(f"{_child(path, str(key))}: unexpected field")
            continue
        _collect(shape.additional, item, _child(path, key), mismatches)


def _array_items(value: Any) -> list[tuple[str, Any]] | None:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [(str(index), item) for index, item in enumerate(value)]
    if isinstance(value, Mapping):
        keys = [str(key) for key in value]
        if all(key.isascii() and key.isdigit() for key in keys):
            return list(zip(keys, value.values()))
    return None


def _is_key(key: Any) -> bool:
    return isinstance(key, str) and bool(key) and "/" not in key


def _child(path: str, key: str) -> str:
    return f"{path.rstrip('/')}/{key}"


def _describe_value(value: Any) -> str:
    if value is None:
        return "null"
    kind = value_kind(value)
    if kind is not None:
        return f"{kind.value} {value!r}"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return "array"
    return type(value).__name__


def _type_mismatch(path: str, expected: str, value: Any) -> str:
    return f"{path}: expected {expected}, got {_describe_value(value)}"
