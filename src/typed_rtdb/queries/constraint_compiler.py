"""Translation of accumulated constraints into native client constraints."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from typed_rtdb.database_client import ConstraintFactory

from .query_constraints import QueryConstraint

logger = logging.getLogger(__name__)


def compile_constraints(
    constraints: Sequence[QueryConstraint], factory: ConstraintFactory
) -> list[Any]:
    """Build one native constraint per entry, preserving declaration order."""
    compiled = [
        factory.build_constraint(constraint.constraint_type.value, *constraint.arguments)
        for constraint in constraints
    ]
    logger.debug(
        "Compiled constraints: %s", ", ".join(constraint.describe() for constraint in constraints)
    )
    return compiled
