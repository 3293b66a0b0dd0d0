"""Resolution of paths against schema descriptors."""

from __future__ import annotations

from collections.abc import Iterable

from typed_rtdb.schema_management.schema_models import (
    ArrayObject,
    Descriptor,
    DynamicObject,
    FixedObject,
    Leaf,
    has_children,
)

from .path_segments import is_index_segment, split_path

ANY_KEY_PATTERN = "*"
ANY_INDEX_PATTERN = "#"
_DEEPER_SUFFIX = "/*"


def resolve_segment(shape: Descriptor, segment: str) -> Descriptor | None:
    """Return the shape addressed by one key below ``shape``."""
    if not segment:
        return None
    if isinstance(shape, Leaf):
        return None
    if isinstance(shape, DynamicObject):
        return shape.value
    if isinstance(shape, ArrayObject):
        return shape.element if is_index_segment(segment) else None
    if segment in shape.fields:
        return shape.fields[segment]
    return shape.additional


def resolve_segments(shape: Descriptor, segments: Iterable[str]) -> Descriptor | None:
    current: Descriptor | None = shape
    for segment in segments:
        if current is None:
            return None
        current = resolve_segment(current, segment)
    return current


def resolve(schema: Descriptor, path: str) -> Descriptor | None:
    """Walk ``path`` from ``schema`` and return the shape found there.

    Example: for ``{a: {b: number}}``, ``"/a/b"`` resolves to the number leaf,
    while ``"/a/b/"`` is absent because of the trailing empty segment.
    """
    segments = split_path(path)
    if segments is None:
        return None
    return resolve_segments(schema, segments)


def dynamic_child_value_shape(shape: Descriptor) -> Descriptor | None:
    """Return the shape accepted for a child stored under a generated key."""
    if isinstance(shape, DynamicObject):
        return shape.value
    if isinstance(shape, FixedObject):
        return shape.additional
    return None


def any_child_shape(shape: Descriptor) -> Descriptor | None:
    """Return the shape shared by every child of ``shape``, if there is one."""
    if isinstance(shape, DynamicObject):
        return shape.value
    if isinstance(shape, ArrayObject):
        return shape.element
    if isinstance(shape, Leaf):
        return None
    candidates = list(shape.fields.values())
    if shape.additional is not None:
        candidates.append(shape.additional)
    if not candidates:
        return None
    first = candidates[0]
    if all(candidate == first for candidate in candidates[1:]):
        return first
    return None


def valid_child_patterns(shape: Descriptor) -> frozenset[str]:
    """Return the relative child path patterns accepted below ``shape``.

    ``*`` stands for any key and ``#`` for any decimal index. A ``/*`` suffix
    means the child may be followed by deeper segments.
    """
    if isinstance(shape, Leaf):
        return frozenset()
    if isinstance(shape, DynamicObject):
        return frozenset({_pattern(ANY_KEY_PATTERN, shape.value)})
    if isinstance(shape, ArrayObject):
        return frozenset({_pattern(ANY_INDEX_PATTERN, shape.element)})
    patterns = {_pattern(name, child) for name, child in shape.fields.items()}
    if shape.additional is not None:
        patterns.add(_pattern(ANY_KEY_PATTERN, shape.additional))
    return frozenset(patterns)


def matches_child_pattern(patterns: Iterable[str], child_path: str) -> bool:
    """Return True when a relative child path is admitted by one of the patterns."""
    segments = split_path(child_path)
    if not segments:
        return False
    head, deeper = segments[0], len(segments) > 1
    for pattern in patterns:
        allows_deeper = pattern.endswith(_DEEPER_SUFFIX)
        name = pattern[: -len(_DEEPER_SUFFIX)] if allows_deeper else pattern
        if deeper and not allows_deeper:
            continue
        if name == ANY_KEY_PATTERN or name == head:
            return True
        if name == ANY_INDEX_PATTERN and is_index_segment(head):
            return True
    return False


def is_valid_child_path(shape: Descriptor, child_path: str) -> bool:
    """Return True when ``child_path`` is both admitted and resolvable below ``shape``."""
    if not matches_child_pattern(valid_child_patterns(shape), child_path):
        return False
    return resolve(shape, child_path) is not None


def _pattern(name: str, child: Descriptor) -> str:
    return f"{name}{_DEEPER_SUFFIX}" if has_children(child) else name
