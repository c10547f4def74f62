"""Recursive structure walker for nested (JSON-like) values."""

import logging
from collections.abc import Mapping
from typing import Any, Iterator

from data_explorer_mcp.core.inference import classify_value
from data_explorer_mcp.models.tree import (
    MAX_DEPTH_EXCEEDED,
    LengthStats,
    NumberStats,
    PathEntry,
    StructureStats,
    TreeNode,
    TreeWalkResult,
)
from data_explorer_mcp.models.types import ValueKind

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 20


def join_path(parent: str, key: Any) -> str:
    """Path of a child: the key at the root, parent.key below it."""
    return f"{parent}.{key}" if parent else str(key)


def iter_children(value: Any) -> Iterator[tuple[str, Any]]:
    """Yield (key, child) pairs of an object or array."""
    if isinstance(value, Mapping):
        for key, child in value.items():
            yield str(key), child
    else:
        for index, child in enumerate(value):
            yield str(index), child


class _StatsAccumulator:
    """Running totals gathered during one walk."""

    def __init__(self) -> None:
        self.total_keys = 0
        self.max_depth = 0
        self.array_count = 0
        self.null_count = 0
        self.value_type_counts: dict[str, int] = {}
        self.truncated = False
        self.string_min = None
        self.string_max = None
        self.string_total = 0
        self.string_count = 0
        self.number_min = None
        self.number_max = None
        self.number_sum = 0
        self.number_count = 0

    def add_leaf(self, kind: ValueKind, value: Any) -> None:
        if kind is ValueKind.NULL:
            self.null_count += 1
            return

        counts = self.value_type_counts
        counts[kind.value] = counts.get(kind.value, 0) + 1

        if kind is ValueKind.STRING:
            length = len(value)
            if self.string_count == 0:
                self.string_min = self.string_max = length
            else:
                self.string_min = min(self.string_min, length)
                self.string_max = max(self.string_max, length)
            self.string_total += length
            self.string_count += 1
        elif kind is ValueKind.NUMBER:
            if self.number_count == 0:
                self.number_min = self.number_max = value
            else:
                self.number_min = min(self.number_min, value)
                self.number_max = max(self.number_max, value)
            self.number_sum += value
            self.number_count += 1

    def build(self) -> StructureStats:
        string_avg = (
            self.string_total / self.string_count if self.string_count else None
        )
        number_avg = (
            self.number_sum / self.number_count if self.number_count else None
        )
        return StructureStats(
            total_keys=self.total_keys,
            max_depth=self.max_depth,
            array_count=self.array_count,
            value_type_counts=self.value_type_counts,
            null_count=self.null_count,
            string_lengths=LengthStats(
                min=self.string_min,
                max=self.string_max,
                avg=string_avg,
                count=self.string_count,
            ),
            number_stats=NumberStats(
                min=self.number_min,
                max=self.number_max,
                sum=self.number_sum,
                count=self.number_count,
                avg=number_avg,
            ),
            truncated=self.truncated,
        )


class TreeWalker:
    """Builds the structural mirror, path index and statistics of a value.

    A single depth-first, pre-order pass visits every node once. Nodes deeper
    than ``max_depth`` are replaced by a sentinel node and not traversed.
    Input is assumed to be acyclic, as anything decoded from JSON text is.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Initialize tree walker.

        Args:
            max_depth: Deepest level traversed (the root is level 0)
        """
        self.max_depth = max_depth

    def walk(self, value: Any) -> TreeWalkResult:
        """
        Walk a nested value.

        Args:
            value: Decoded JSON value (dicts, lists, scalars)

        Returns:
            Structural mirror, flattened path index and structure statistics
        """
        paths: dict[str, PathEntry] = {}
        stats = _StatsAccumulator()

        structure = self._visit(value, "", 0, paths, stats)

        if stats.truncated:
            logger.warning(
                f"Structure deeper than {self.max_depth} levels; "
                "deeper nodes not traversed"
            )

        return TreeWalkResult(structure=structure, paths=paths, stats=stats.build())

    def _visit(
        self,
        value: Any,
        path: str,
        depth: int,
        paths: dict[str, PathEntry],
        stats: _StatsAccumulator,
    ) -> TreeNode:
        stats.max_depth = max(stats.max_depth, depth)

        if depth > self.max_depth:
            stats.truncated = True
            return TreeNode(type=MAX_DEPTH_EXCEEDED)

        kind = classify_value(value)

        if not kind.is_container:
            paths[path] = PathEntry(
                path=path, type=kind.value, value=value, depth=depth
            )
            stats.add_leaf(kind, value)
            return TreeNode(type=kind.value, value=value)

        if kind is ValueKind.OBJECT:
            stats.total_keys += len(value)
        else:
            stats.array_count += 1

        paths[path] = PathEntry(
            path=path, type=kind.value, child_count=len(value), depth=depth
        )

        children = {
            key: self._visit(child, join_path(path, key), depth + 1, paths, stats)
            for key, child in iter_children(value)
        }
        return TreeNode(type=kind.value, children=children)
