"""
Supply chain graph models.

This module defines the graph snapshot handed to the engine by the
graph-data collaborator: entities (nodes), flows between them (edges)
and the snapshot that groups both. Field aliases accept the camelCase
and ``type`` spellings used by the JSON datasets.
"""

from collections import Counter
from typing import Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    model_validator,
)

from chainrisk.exceptions import DuplicateNodeError

from .enums import EdgeKind, NodeKind


class Node(BaseModel):
    """
    An entity in the supply chain.

    Attributes:
        id: Unique node identifier
        tier: Rank in the hierarchy (0 = finished-good end)
        kind: Role of the entity (raw material, supplier, ...)
        importance: Relative business importance used for impact scoring
        risk_score: Standalone disruption risk in [0, 1]
        label: Optional display name
        material: Optional material produced (raw-material nodes)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Unique node identifier", min_length=1)
    tier: int = Field(description="Rank in the supply chain hierarchy", ge=0)
    kind: NodeKind = Field(
        description="Role of the entity",
        validation_alias=AliasChoices("kind", "type"),
    )
    importance: float = Field(
        default=0.5, ge=0.0, description="Relative business importance"
    )
    risk_score: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Standalone disruption risk",
        validation_alias=AliasChoices("risk_score", "riskScore"),
    )
    label: Optional[str] = Field(default=None, description="Display name")
    material: Optional[str] = Field(default=None, description="Material produced")


class Edge(BaseModel):
    """
    A directed, weighted flow between two entities.

    ``source`` and ``target`` are not checked against the node set here;
    dangling edges are dropped (with a warning) when the graph is indexed.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique edge identifier", min_length=1)
    source: str = Field(description="Upstream node id")
    target: str = Field(description="Downstream node id")
    weight: float = Field(ge=0.0, description="Flow strength")
    kind: Optional[EdgeKind] = Field(
        default=None,
        description="Kind of flow",
        validation_alias=AliasChoices("kind", "type"),
    )
    label: Optional[str] = Field(default=None, description="Display label")


class Graph(BaseModel):
    """
    Snapshot of a supply chain: nodes plus edges.

    Either list may be empty. Node ids must be unique; edge endpoints are
    validated later, during indexing.

    Example:
        >>> graph = Graph(
        ...     nodes=[Node(id="A", tier=0, kind="manufacturer")],
        ...     edges=[],
        ... )
        >>> graph.get_node("A").tier
        0
    """

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    _node_map: Optional[dict[str, Node]] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def validate_unique_node_ids(self) -> "Graph":
        """Reject snapshots that declare a node id twice."""
        duplicates = find_duplicate_ids(self.nodes)
        if duplicates:
            raise DuplicateNodeError(duplicates)
        return self

    def get_node(self, node_id: str) -> Optional[Node]:
        """O(1) node lookup; None when the id is unknown."""
        if self._node_map is None:
            self._node_map = {node.id: node for node in self.nodes}
        return self._node_map.get(node_id)


class IndexWarning(BaseModel):
    """A non-fatal problem found while indexing a graph."""

    edge_id: str
    source: str
    target: str
    missing: list[str] = Field(description="Endpoint ids absent from the node set")

    @property
    def message(self) -> str:
        return (
            f"Edge {self.edge_id} ({self.source} -> {self.target}) skipped: "
            f"unknown node(s) {', '.join(self.missing)}"
        )


class SupplyChainStats(BaseModel):
    """
    Aggregate counts over a graph snapshot for the statistics panel.

    Attributes:
        total_nodes: Number of nodes
        total_edges: Number of edges (as supplied, dangling ones included)
        nodes_by_tier: Node count per tier
        nodes_by_kind: Node count per kind value
        avg_connections_per_node: Edges per node (0.0 for an empty graph)
    """

    total_nodes: int = Field(ge=0)
    total_edges: int = Field(ge=0)
    nodes_by_tier: dict[int, int] = Field(default_factory=dict)
    nodes_by_kind: dict[str, int] = Field(default_factory=dict)
    avg_connections_per_node: float = Field(default=0.0, ge=0.0)


def find_duplicate_ids(nodes: list[Node]) -> list[str]:
    """Return node ids declared more than once, in first-seen order."""
    counts = Counter(node.id for node in nodes)
    return [node_id for node_id, count in counts.items() if count > 1]
