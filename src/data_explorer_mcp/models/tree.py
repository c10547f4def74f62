"""Nested structure (JSON) exploration models."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

MAX_DEPTH_EXCEEDED = "max_depth_exceeded"


class TreeNode(BaseModel):
    """Structural mirror of one node of a nested value."""

    type: str = Field(..., description="Value kind, or the max-depth sentinel")
    value: Any = Field(None, description="Leaf value")
    children: Optional[dict[str, "TreeNode"]] = Field(
        None, description="Child nodes keyed by object key or array index"
    )

    @property
    def is_leaf(self) -> bool:
        """Whether this node has no children."""
        return self.children is None

    @property
    def is_truncated(self) -> bool:
        """Whether traversal stopped at this node."""
        return self.type == MAX_DEPTH_EXCEEDED


class PathEntry(BaseModel):
    """Flattened index entry for one path."""

    path: str = Field(..., description="Dot-joined keys and indices")
    type: str = Field(..., description="Value kind at this path")
    value: Any = Field(None, description="Leaf value")
    child_count: Optional[int] = Field(
        None, description="Number of children for objects and arrays"
    )
    depth: int = Field(..., description="Nesting depth (root is 0)")

    @property
    def is_leaf(self) -> bool:
        """Whether the entry describes a leaf."""
        return self.child_count is None

    @property
    def key(self) -> str:
        """Last segment of the path."""
        return self.path.rsplit(".", 1)[-1]


class LengthStats(BaseModel):
    """Length distribution of string leaves."""

    min: Optional[int] = Field(None, description="Shortest string length")
    max: Optional[int] = Field(None, description="Longest string length")
    avg: Optional[float] = Field(None, description="Average string length")
    count: int = Field(0, description="Number of string leaves")


class NumberStats(BaseModel):
    """Distribution of numeric leaves."""

    min: Optional[float] = Field(None, description="Smallest number")
    max: Optional[float] = Field(None, description="Largest number")
    sum: float = Field(0, description="Sum of all numbers")
    count: int = Field(0, description="Number of numeric leaves")
    avg: Optional[float] = Field(None, description="Average of all numbers")


class StructureStats(BaseModel):
    """Aggregate statistics of a nested structure."""

    total_keys: int = Field(0, description="Sum of object key counts")
    max_depth: int = Field(0, description="Deepest nesting level visited")
    array_count: int = Field(0, description="Number of arrays")
    value_type_counts: dict[str, int] = Field(
        default_factory=dict, description="Number of non-null leaves per kind"
    )
    null_count: int = Field(0, description="Number of explicit nulls")
    string_lengths: LengthStats = Field(default_factory=LengthStats)
    number_stats: NumberStats = Field(default_factory=NumberStats)
    truncated: bool = Field(
        False, description="Whether any branch exceeded the depth limit"
    )


class TreeWalkResult(BaseModel):
    """Result of walking a nested value."""

    structure: TreeNode = Field(..., description="Structural mirror")
    paths: dict[str, PathEntry] = Field(
        default_factory=dict, description="Flattened path index"
    )
    stats: StructureStats = Field(..., description="Structure statistics")


class PathDifference(BaseModel):
    """One difference between two nested values."""

    path: str = Field(..., description="Path where the values differ")
    kind: Literal["added", "removed", "changed"] = Field(
        ..., description="Kind of difference"
    )
    original: Any = Field(None, description="Value in the first structure")
    new: Any = Field(None, description="Value in the second structure")
