"""Schema management exports."""

from .schema_loading import (
    SchemaError,
    build_descriptor,
    load_schema_document,
    load_schema_file,
    load_schema_text,
)
from .schema_models import (
    BOOLEAN,
    NULL,
    NUMBER,
    STRING,
    ArrayObject,
    Descriptor,
    DynamicObject,
    FixedObject,
    Leaf,
    LeafKind,
    SchemaDocument,
    array,
    describe_shape,
    dynamic,
    fixed,
    has_children,
)
from .shape_conformance import (
    ensure_conforms,
    find_mismatches,
    is_removable,
    primitive_kinds,
    value_kind,
)

__all__ = [
    "BOOLEAN",
    "NULL",
    "NUMBER",
    "STRING",
    "ArrayObject",
    "Descriptor",
    "DynamicObject",
    "FixedObject",
    "Leaf",
    "LeafKind",
    "SchemaDocument",
    "SchemaError",
    "array",
    "build_descriptor",
    "describe_shape",
    "dynamic",
    "ensure_conforms",
    "find_mismatches",
    "fixed",
    "has_children",
    "is_removable",
    "load_schema_document",
    "load_schema_file",
    "load_schema_text",
    "primitive_kinds",
    "value_kind",
]
