"""
Pydantic v2 data models for the ChainRisk engine.

Model Organization:
    - enums: Node/edge kinds, traversal direction, session status
    - graph: Graph snapshot (nodes, edges), index warnings, statistics
    - impact: Trace options, critical-path criteria, affected sets
    - paths: Path search results, path metrics, highlight id sets
    - session: Crisis simulation session snapshots

Usage:
    >>> from chainrisk.models import Edge, Graph, Node
    >>> graph = Graph(
    ...     nodes=[Node(id="A", tier=0, kind="manufacturer")],
    ...     edges=[],
    ... )
"""

from .enums import EdgeKind, NodeKind, SessionStatus, TraversalDirection
from .graph import Edge, Graph, IndexWarning, Node, SupplyChainStats
from .impact import (
    DOWNSTREAM_CRITICAL,
    UPSTREAM_CRITICAL,
    AffectedSet,
    CriticalCriteria,
    TraceOptions,
    TraceProgress,
)
from .paths import PathHighlight, PathMetrics, PathSearchResult
from .session import Session

__all__ = [
    "AffectedSet",
    "CriticalCriteria",
    "DOWNSTREAM_CRITICAL",
    "Edge",
    "EdgeKind",
    "Graph",
    "IndexWarning",
    "Node",
    "NodeKind",
    "PathHighlight",
    "PathMetrics",
    "PathSearchResult",
    "Session",
    "SessionStatus",
    "SupplyChainStats",
    "TraceOptions",
    "TraceProgress",
    "TraversalDirection",
    "UPSTREAM_CRITICAL",
]
