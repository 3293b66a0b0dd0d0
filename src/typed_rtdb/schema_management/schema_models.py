"""Schema descriptor entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType


class LeafKind(str, Enum):
    """Primitive value kinds stored at a leaf."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True)
class Leaf:
    """Primitive value without children."""

    kind: LeafKind


@dataclass(frozen=True)
class FixedObject:
    """Object with exactly the declared field names.

    ``optional`` names fields that may be missing. ``additional`` is the shape of
    any key that is not a declared field; without it unknown keys are invalid.
    """

    fields: Mapping[str, Descriptor] = field(default_factory=dict)
    optional: frozenset[str] = frozenset()
    additional: Descriptor | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        object.__setattr__(self, "optional", frozenset(self.optional))
        unknown = self.optional - set(self.fields)
        if unknown:
            raise ValueError(f"Optional names are not declared fields: {sorted(unknown)}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedObject):
            return NotImplemented
        return (
            dict(self.fields) == dict(other.fields)
            and self.optional == other.optional
            and self.additional == other.additional
        )

    def __hash__(self) -> int:
        return hash((frozenset(self.fields.items()), self.optional, self.additional))


@dataclass(frozen=True)
class DynamicObject:
    """Object whose arbitrary string keys all share one value shape."""

    value: Descriptor


@dataclass(frozen=True)
class ArrayObject:
    """Numeric-indexed container; decimal keys address ``element`` slots."""

    element: Descriptor


Descriptor = Leaf | FixedObject | DynamicObject | ArrayObject

STRING = Leaf(LeafKind.STRING)
NUMBER = Leaf(LeafKind.NUMBER)
BOOLEAN = Leaf(LeafKind.BOOLEAN)
NULL = Leaf(LeafKind.NULL)


def fixed(
    fields: Mapping[str, Descriptor] | None = None,
    *,
    optional: frozenset[str] | set[str] | tuple[str, ...] = (),
    additional: Descriptor | None = None,
    **named: Descriptor,
) -> FixedObject:
    """Build a fixed object from a mapping and/or keyword fields."""
    merged = dict(fields or {})
    merged.update(named)
    return FixedObject(fields=merged, optional=frozenset(optional), additional=additional)


def dynamic(value: Descriptor) -> DynamicObject:
    return DynamicObject(value=value)


def array(element: Descriptor) -> ArrayObject:
    return ArrayObject(element=element)


def has_children(shape: Descriptor) -> bool:
    """Return True when the shape can hold child keys."""
    return not isinstance(shape, Leaf)


def describe_shape(shape: Descriptor | None) -> str:
    """Render a compact, TypeScript-like description of a shape."""
    if shape is None:
        return "<absent>"
    if isinstance(shape, Leaf):
        return shape.kind.value
    if isinstance(shape, DynamicObject):
        return f"{{[key: string]: {describe_shape(shape.value)}}}"
    if isinstance(shape, ArrayObject):
        element = describe_shape(shape.element)
        if isinstance(shape.element, Leaf):
            return f"{element}[]"
        return f"Array<{element}>"
    parts = []
    for name, child in shape.fields.items():
        marker = "?" if name in shape.optional else ""
        parts.append(f"{name}{marker}: {describe_shape(child)}")
    if shape.additional is not None:
        parts.append(f"[key: string]: {describe_shape(shape.additional)}")
    return "{" + ", ".join(parts) + "}"


@dataclass(frozen=True)
class SchemaDocument:
    """Loaded schema declaration together with its origin."""

    root: Descriptor
    source_path: Path | None = None
