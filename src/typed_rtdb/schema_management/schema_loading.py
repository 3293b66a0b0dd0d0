"""Schema declaration loading service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from typed_rtdb.errors import TypedRtdbError

from .schema_models import (
    ArrayObject,
    Descriptor,
    DynamicObject,
    FixedObject,
    Leaf,
    LeafKind,
    SchemaDocument,
)

if TYPE_CHECKING:
    from typed_rtdb.configuration.runtime_settings import SchemaConfig

DYNAMIC_KEY = "*"
ARRAY_KEY = "[]"
OPTIONAL_SUFFIX = "?"


class SchemaError(TypedRtdbError):
    """Raised for schema declaration parsing failures."""


def load_schema_document(config: SchemaConfig) -> SchemaDocument:
    """Parse schema text into a descriptor tree."""
    return SchemaDocument(root=load_schema_text(config.text), source_path=config.source_path)


def load_schema_text(text: str) -> Descriptor:
    """Parse a YAML or JSON schema declaration."""
    try:
        declaration = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid schema declaration: {exc}") from exc
    if declaration is None:
        raise SchemaError("Schema declaration is empty.")
    return build_descriptor(declaration)


def load_schema_file(path: Path | str) -> SchemaDocument:
    schema_path = Path(path)
    if not schema_path.exists():
        raise SchemaError(f"Schema file not found: {schema_path}")
    text = schema_path.read_text(encoding="utf-8")
    return SchemaDocument(root=load_schema_text(text), source_path=schema_path.resolve())


def build_descriptor(declaration: Any, *, location: str = "/") -> Descriptor:
    """Convert a parsed declaration into a descriptor.

    Strings name leaf kinds, ``{"*": ...}`` declares dynamic keys, ``{"[]": ...}``
    or a one-element list declares an array, and any other mapping declares fixed
    fields (a ``?`` suffix marks a field optional).
    """
    if declaration is None:
        return Leaf(LeafKind.NULL)
    if isinstance(declaration, str):
        return _build_leaf(declaration, location)
    if isinstance(declaration, list):
        if len(declaration) != 1:
            raise SchemaError(f"{location}: array declarations need exactly one element shape.")
        return ArrayObject(element=build_descriptor(declaration[0], location=f"{location}[]"))
    if isinstance(declaration, Mapping):
        return _build_object(declaration, location)
    raise SchemaError(f"{location}: unsupported schema declaration {declaration!r}.")


def _build_leaf(declaration: str, location: str) -> Leaf:
    try:
        return Leaf(LeafKind(declaration.strip()))
    except ValueError as exc:
        allowed = ", ".join(kind.value for kind in LeafKind)
        raise SchemaError(
            f"{location}: unknown leaf type {declaration!r} (expected one of {allowed})."
        ) from exc


def _build_object(declaration: Mapping[Any, Any], location: str) -> Descriptor:
    keys = list(declaration)
    for key in keys:
        if not isinstance(key, str):
            raise SchemaError(f"{location}: field names must be strings, got {key!r}.")
    if ARRAY_KEY in declaration:
        if len(keys) != 1:
            raise SchemaError(f"{location}: '{ARRAY_KEY}' cannot be combined with other fields.")
        element = build_descriptor(declaration[ARRAY_KEY], location=_join(location, ARRAY_KEY))
        return ArrayObject(element=element)
    additional = None
    if DYNAMIC_KEY in declaration:
        additional = build_descriptor(declaration[DYNAMIC_KEY], location=_join(location, "*"))
        if len(keys) == 1:
            return DynamicObject(value=additional)

    fields: dict[str, Descriptor] = {}
    optional: set[str] = set()
    for key, child in declaration.items():
        if key == DYNAMIC_KEY:
            continue
        name = key[: -len(OPTIONAL_SUFFIX)] if key.endswith(OPTIONAL_SUFFIX) else key
        _validate_field_name(name, location)
        if name in fields:
            raise SchemaError(f"{location}: duplicate field {name!r}.")
        if name != key:
            optional.add(name)
        fields[name] = build_descriptor(child, location=_join(location, name))
    return FixedObject(fields=fields, optional=frozenset(optional), additional=additional)


def _validate_field_name(name: str, location: str) -> None:
    if not name.strip():
        raise SchemaError(f"{location}: field names must not be empty.")
    if "/" in name:
        raise SchemaError(f"{location}: field name {name!r} must not contain '/'.")


def _join(location: str, name: str) -> str:
    return f"{location.rstrip('/')}/{name}"
