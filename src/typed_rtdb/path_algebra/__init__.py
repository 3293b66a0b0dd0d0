"""Path algebra exports."""

from .path_resolution import (
    ANY_INDEX_PATTERN,
    ANY_KEY_PATTERN,
    any_child_shape,
    dynamic_child_value_shape,
    is_valid_child_path,
    matches_child_pattern,
    resolve,
    resolve_segment,
    resolve_segments,
    valid_child_patterns,
)
from .path_segments import (
    is_index_segment,
    join_path,
    last_segment,
    normalize_path,
    parent_path,
    split_path,
)

__all__ = [
    "ANY_INDEX_PATTERN",
    "ANY_KEY_PATTERN",
    "any_child_shape",
    "dynamic_child_value_shape",
    "is_index_segment",
    "is_valid_child_path",
    "join_path",
    "last_segment",
    "matches_child_pattern",
    "normalize_path",
    "parent_path",
    "resolve",
    "resolve_segment",
    "resolve_segments",
    "split_path",
    "valid_child_patterns",
]
