"""Query building exports."""

from .constraint_compiler import compile_constraints
from .query_builder import Query
from .query_constraints import ComparisonType, ConstraintType, QueryConstraint

__all__ = [
    "ComparisonType",
    "ConstraintType",
    "Query",
    "QueryConstraint",
    "compile_constraints",
]
