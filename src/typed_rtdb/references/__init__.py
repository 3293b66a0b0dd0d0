"""Typed reference exports."""

from .typed_references import (
    Reference,
    ThenableReference,
    TransactionResult,
    TypedDatabase,
    make_reference,
)

__all__ = [
    "Reference",
    "ThenableReference",
    "TransactionResult",
    "TypedDatabase",
    "make_reference",
]
