"""Schema-aware references, queries and snapshots for hierarchical databases."""

import logging

from .database_client import ABORT_TRANSACTION, NOT_FOUND, DatabaseClient, EventType
from .errors import (
    ConstraintConflictError,
    DetachedDatabaseError,
    InvalidPathError,
    SchemaMismatchError,
    StoreFailureError,
    TypedRtdbError,
)
from .queries import Query, compile_constraints
from .references import (
    Reference,
    ThenableReference,
    TransactionResult,
    TypedDatabase,
    make_reference,
)
from .snapshots import DataSnapshot, ExistingDataSnapshot, wrap_snapshot

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ABORT_TRANSACTION",
    "NOT_FOUND",
    "ConstraintConflictError",
    "DataSnapshot",
    "DatabaseClient",
    "DetachedDatabaseError",
    "EventType",
    "ExistingDataSnapshot",
    "InvalidPathError",
    "Query",
    "Reference",
    "SchemaMismatchError",
    "StoreFailureError",
    "ThenableReference",
    "TransactionResult",
    "TypedDatabase",
    "TypedRtdbError",
    "compile_constraints",
    "make_reference",
    "wrap_snapshot",
]
