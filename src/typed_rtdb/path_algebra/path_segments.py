"""Slash-delimited path helpers."""

from __future__ import annotations

PATH_SEPARATOR = "/"


def split_path(path: str) -> tuple[str, ...] | None:
    """Split a path into segments, or return None when the path is malformed.

    One leading slash is ignored and ``""`` addresses the root. Empty segments
    left by double or trailing slashes make the path invalid.
    """
    if path.startswith(PATH_SEPARATOR):
        path = path[1:]
    if not path:
        return ()
    segments = tuple(path.split(PATH_SEPARATOR))
    if any(not segment for segment in segments):
        return None
    return segments


def normalize_path(path: str) -> str | None:
    """Return the canonical form of a path (no leading slash), or None if malformed."""
    segments = split_path(path)
    if segments is None:
        return None
    return PATH_SEPARATOR.join(segments)


def join_path(base: str, child: str) -> str:
    """Append a relative child path to a base path."""
    if not base:
        return child
    if not child:
        return base
    return f"{base}{PATH_SEPARATOR}{child}"


def parent_path(path: str) -> str:
    """Drop the last non-empty segment; the root is its own parent."""
    segments = [segment for segment in path.split(PATH_SEPARATOR) if segment]
    return PATH_SEPARATOR.join(segments[:-1])


def last_segment(path: str) -> str | None:
    segments = [segment for segment in path.split(PATH_SEPARATOR) if segment]
    return segments[-1] if segments else None


def is_index_segment(segment: str) -> bool:
    """Return True for decimal-digit segments that address array slots."""
    return segment.isascii() and segment.isdigit()
