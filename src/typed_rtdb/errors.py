"""Error taxonomy shared by every typed database operation."""

from __future__ import annotations


class TypedRtdbError(Exception):
    """Base class for errors raised by the typed database layer."""


class SchemaMismatchError(TypedRtdbError):
    """Raised when a value, path or constraint does not match the resolved shape."""


class InvalidPathError(TypedRtdbError):
    """Raised when a path does not resolve against the schema."""


class ConstraintConflictError(TypedRtdbError):
    """Raised when query constraints contradict each other."""


class StoreFailureError(TypedRtdbError):
    """Base class for failures reported by a database client adapter.

    Errors raised by a client are never wrapped or retried here; adapters may
    subclass this to give callers a single type to catch.
    """


class DetachedDatabaseError(TypedRtdbError):
    """Raised when a store operation runs on a database without a client."""
