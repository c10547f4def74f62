"""Path queries over walked nested structures."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from data_explorer_mcp.core.inference import classify_value
from data_explorer_mcp.core.walker import DEFAULT_MAX_DEPTH, TreeWalker
from data_explorer_mcp.models.tree import PathDifference, PathEntry
from data_explorer_mcp.models.types import UNDEFINED, ValueKind

logger = logging.getLogger(__name__)

WILDCARD = "*"


def split_path(path: str) -> list[str]:
    """Segments of a dot-joined path; the root path has none."""
    return path.split(".") if path else []


def find_by_pattern(paths: Mapping[str, PathEntry], pattern: str) -> list[PathEntry]:
    """
    Find indexed paths matching a dot-separated pattern.

    ``*`` matches exactly one segment; other segments must match literally
    and the number of segments must be equal.

    Args:
        paths: Path index from a tree walk
        pattern: Pattern such as ``users.*.name``

    Returns:
        Matching entries in index order
    """
    pattern_parts = split_path(pattern)
    matches = []

    for path, entry in paths.items():
        parts = split_path(path)
        if len(parts) != len(pattern_parts):
            continue
        if all(p == WILDCARD or p == s for p, s in zip(pattern_parts, parts)):
            matches.append(entry)

    return matches


def resolve(root: Any, path: str) -> Any:
    """
    Look up the value at a path.

    Args:
        root: Nested value
        path: Dot-joined keys and array indices (``""`` is the root)

    Returns:
        The value, or ``UNDEFINED`` if any segment does not exist
    """
    current = root
    for segment in split_path(path):
        if isinstance(current, Mapping):
            if segment not in current:
                return UNDEFINED
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not segment.isdigit():
                return UNDEFINED
            index = int(segment)
            if index >= len(current):
                return UNDEFINED
            current = current[index]
        else:
            return UNDEFINED
    return current


def deep_equal(a: Any, b: Any) -> bool:
    """Structural equality where values of different kinds never match."""
    kind = classify_value(a)
    if kind is not classify_value(b):
        return False

    if kind is ValueKind.OBJECT:
        if a.keys() != b.keys():
            return False
        return all(deep_equal(a[key], b[key]) for key in a)

    if kind is ValueKind.ARRAY:
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    return a == b


def diff(a: Any, b: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> list[PathDifference]:
    """
    Compare two nested values path by path.

    Both values are walked with the same depth limit. Shared paths whose
    values differ are reported as changed, so a change in a leaf also marks
    each of its ancestors.

    Args:
        a: Original value
        b: New value
        max_depth: Depth limit for both walks

    Returns:
        Differences: paths of ``a`` in index order, then paths only in ``b``
    """
    walker = TreeWalker(max_depth=max_depth)
    paths_a = walker.walk(a).paths
    paths_b = walker.walk(b).paths

    differences = []

    for path in paths_a:
        original = resolve(a, path)
        if path not in paths_b:
            differences.append(
                PathDifference(path=path, kind="removed", original=original)
            )
            continue
        new = resolve(b, path)
        if not deep_equal(original, new):
            differences.append(
                PathDifference(path=path, kind="changed", original=original, new=new)
            )

    for path in paths_b:
        if path not in paths_a:
            differences.append(
                PathDifference(path=path, kind="added", new=resolve(b, path))
            )

    logger.debug(f"Found {len(differences)} differences")
    return differences


def flatten(paths: Mapping[str, PathEntry]) -> dict[str, Any]:
    """Map each leaf path to its value."""
    return {path: entry.value for path, entry in paths.items() if entry.is_leaf}


def search(paths: Mapping[str, PathEntry], text: str) -> list[PathEntry]:
    """
    Find entries whose key or leaf value contains the given text.

    Matching is case-insensitive. Container entries match on their key only.

    Args:
        paths: Path index from a tree walk
        text: Text to look for

    Returns:
        Matching entries in index order
    """
    needle = text.lower()
    matches = []

    for entry in paths.values():
        if entry.path and needle in entry.key.lower():
            matches.append(entry)
        elif entry.is_leaf and entry.value is not None:
            if needle in str(entry.value).lower():
                matches.append(entry)

    return matches
