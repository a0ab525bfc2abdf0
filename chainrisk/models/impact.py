"""
Impact tracing models.

Options that steer a disruption trace and the affected-set result it
produces. Result collections are hash sets so that renderers can test
membership at render-loop frequency.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import NodeKind
from .graph import Node


class CriticalCriteria(BaseModel):
    """
    Predicate deciding which reached nodes close a critical path.

    A node matches when its tier is listed in ``tiers`` or its kind is
    listed in ``kinds``.

    Example:
        >>> criteria = CriticalCriteria(tiers={0}, kinds={NodeKind.MANUFACTURER})
        >>> criteria.matches(Node(id="m", tier=2, kind="manufacturer"))
        True
    """

    model_config = ConfigDict(frozen=True)

    tiers: frozenset[int] = Field(default_factory=frozenset)
    kinds: frozenset[NodeKind] = Field(default_factory=frozenset)

    def matches(self, node: Node) -> bool:
        return node.tier in self.tiers or node.kind in self.kinds


# Downstream traces flag paths reaching the finished-good end of the chain
DOWNSTREAM_CRITICAL = CriticalCriteria(
    tiers=frozenset({0}), kinds=frozenset({NodeKind.MANUFACTURER})
)

# Upstream traces flag paths starting at a raw-material leaf
UPSTREAM_CRITICAL = CriticalCriteria(kinds=frozenset({NodeKind.RAW_MATERIALS}))


class TraceOptions(BaseModel):
    """
    Constraints applied to an impact trace.

    Attributes:
        max_depth: Nodes at this hop depth are not expanded (None = unbounded)
        include_revisits: Re-expand a node reached again at a strictly
            smaller depth
        weight_threshold: Edges lighter than this do not propagate impact
        critical: Critical-path predicate (None = direction default)
    """

    model_config = ConfigDict(frozen=True)

    max_depth: Optional[int] = Field(default=None)
    include_revisits: bool = Field(default=True)
    weight_threshold: float = Field(default=0.0)
    critical: Optional[CriticalCriteria] = Field(default=None)

    @classmethod
    def from_settings(cls, settings=None) -> "TraceOptions":
        """Build the crisis-simulation defaults from engine settings."""
        if settings is None:
            from chainrisk.config import get_settings

            settings = get_settings()
        return cls(
            max_depth=settings.trace_max_depth,
            include_revisits=settings.trace_include_revisits,
            weight_threshold=settings.trace_weight_threshold,
        )


class AffectedSet(BaseModel):
    """
    Result of a downstream or upstream impact trace.

    Attributes:
        affected_nodes: Reached node ids, seeds included
        affected_edges: Ids of the edges actually traversed
        depth: Minimum hop count from any seed, per reached node
        critical_paths: Node-id sequences ending (downstream) or starting
            (upstream) at a critical node
        total_impact: Aggregate impact score over ``affected_nodes``
    """

    affected_nodes: set[str] = Field(default_factory=set)
    affected_edges: set[str] = Field(default_factory=set)
    depth: dict[str, int] = Field(default_factory=dict)
    critical_paths: list[list[str]] = Field(default_factory=list)
    total_impact: float = Field(default=0.0, ge=0.0)

    def is_node_affected(self, node_id: str) -> bool:
        return node_id in self.affected_nodes

    def is_edge_affected(self, edge_id: str) -> bool:
        return edge_id in self.affected_edges

    @property
    def is_empty(self) -> bool:
        return not self.affected_nodes


class TraceProgress(BaseModel):
    """Snapshot reported once per completed depth level of a trace."""

    model_config = ConfigDict(frozen=True)

    depth: int = Field(ge=0, description="Depth level just completed")
    frontier_size: int = Field(ge=0, description="Nodes queued for the next level")
    affected_count: int = Field(ge=0, description="Nodes reached so far")
