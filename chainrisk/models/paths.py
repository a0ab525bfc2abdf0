"""
Path analysis models.

A path is a plain list of node ids without repeats. These models wrap
enumeration results, per-path metrics and the id sets a renderer uses to
highlight the shortest path apart from the union of all paths.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PathSearchResult(BaseModel):
    """
    Simple paths found between two nodes.

    Attributes:
        paths: Paths in discovery order
        truncated: True when max_paths paths were collected, or when a
            node on a route to the target was refused by max_depth;
            ``paths`` may then be incomplete
    """

    paths: list[list[str]] = Field(default_factory=list)
    truncated: bool = Field(default=False)


class PathMetrics(BaseModel):
    """
    Metrics of a single path.

    Attributes:
        hop_count: Number of edges along the path
        total_weight: Sum of edge weights along the path
        risk_score: Arithmetic mean of node risk scores along the path
    """

    hop_count: int = Field(ge=0)
    total_weight: float = Field(ge=0.0)
    risk_score: float = Field(ge=0.0, le=1.0)


class PathHighlight(BaseModel):
    """Id sets distinguishing the shortest path from all paths between two nodes."""

    source_id: str
    target_id: str
    shortest_path: list[str] = Field(default_factory=list)
    shortest_node_ids: set[str] = Field(default_factory=set)
    shortest_edge_ids: set[str] = Field(default_factory=set)
    paths: list[list[str]] = Field(default_factory=list)
    all_node_ids: set[str] = Field(default_factory=set)
    all_edge_ids: set[str] = Field(default_factory=set)
    metrics: Optional[PathMetrics] = None
    truncated: bool = False

    @property
    def is_active(self) -> bool:
        return bool(self.shortest_path)
