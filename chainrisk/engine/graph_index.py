"""
Graph Index — Immutable adjacency snapshot of a supply chain.

The index is built once per Graph snapshot and consumed by every
traversal in the engine. It stores the graph as a frozen NetworkX
DiGraph, which gives:

- forward adjacency (successors) and reverse adjacency (predecessors)
  in the order edges were supplied
- an entry for every node, isolated nodes included
- O(1) edge lookup by (source, target) pair

Multi-edge collapse: a DiGraph keeps one edge per (source, target) pair.
When several edges share a pair, the most recently indexed edge's
attributes win and the neighbour is listed once. Callers that need the
full multiset keep using ``Graph.edges``.

Rebuild the index whenever the underlying graph changes; stale indexes
are not detected.

Version: graph_index_v1
"""

from typing import Iterator, Optional

import networkx as nx

from chainrisk.exceptions import DuplicateNodeError
from chainrisk.models.graph import Edge, Graph, IndexWarning, Node, find_duplicate_ids
from chainrisk.utils.logging import get_logger

logger = get_logger(__name__)


class GraphIndex:
    """
    Read-only adjacency index over a Graph snapshot.

    Concurrent read-only queries against one index are safe; the
    underlying DiGraph is frozen and cannot be mutated.

    Attributes:
        graph: The Graph snapshot this index was built from
        warnings: Edges skipped during indexing (dangling endpoints)

    Example:
        >>> index = GraphIndex.build(graph)
        >>> index.forward("A")
        ['B']
        >>> index.edge_between("A", "B").weight
        10.0
    """

    VERSION = "graph_index_v1"

    def __init__(
        self,
        digraph: nx.DiGraph,
        graph: Graph,
        warnings: tuple[IndexWarning, ...] = (),
    ):
        """
        Wrap an already populated DiGraph. Use ``GraphIndex.build``.

        Args:
            digraph: DiGraph with ``node`` attributes on nodes and
                ``edge``/``weight`` attributes on edges
            graph: Source snapshot
            warnings: Problems recorded while indexing
        """
        self._digraph = nx.freeze(digraph)
        self.graph = graph
        self.warnings = warnings

    @classmethod
    def build(cls, graph: Graph) -> "GraphIndex":
        """
        Build an index from a graph snapshot.

        Edges whose source or target is not a node are skipped and
        reported through ``warnings``; building never fails for them.

        Args:
            graph: Graph snapshot

        Returns:
            Immutable GraphIndex

        Raises:
            DuplicateNodeError: If a node id is declared twice
        """
        duplicates = find_duplicate_ids(graph.nodes)
        if duplicates:
            raise DuplicateNodeError(duplicates)

        digraph = nx.DiGraph()
        for node in graph.nodes:
            digraph.add_node(node.id, node=node)

        warnings: list[IndexWarning] = []
        collapsed = 0

        for edge in graph.edges:
            missing = [
                endpoint
                for endpoint in dict.fromkeys((edge.source, edge.target))
                if endpoint not in digraph
            ]
            if missing:
                warning = IndexWarning(
                    edge_id=edge.id,
                    source=edge.source,
                    target=edge.target,
                    missing=missing,
                )
                warnings.append(warning)
                logger.warning(
                    "dangling_edge_skipped",
                    edge_id=edge.id,
                    source=edge.source,
                    target=edge.target,
                    missing=missing,
                )
                continue

            if digraph.has_edge(edge.source, edge.target):
                collapsed += 1

            # Re-adding an existing pair overwrites its attributes
            digraph.add_edge(edge.source, edge.target, edge=edge, weight=edge.weight)

        index = cls(digraph, graph, tuple(warnings))

        logger.info(
            "graph_index_built",
            version=cls.VERSION,
            node_count=index.node_count,
            edge_count=index.edge_count,
            skipped_edges=len(warnings),
            collapsed_edges=collapsed,
        )

        return index

    # =========================================================================
    # Lookups
    # =========================================================================

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._digraph

    def __len__(self) -> int:
        return self.node_count

    @property
    def node_count(self) -> int:
        return self._digraph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Number of indexed (source, target) pairs."""
        return self._digraph.number_of_edges()

    def node_ids(self) -> Iterator[str]:
        """Node ids in the order they were supplied."""
        return iter(self._digraph)

    def get_node(self, node_id: str) -> Optional[Node]:
        if node_id not in self._digraph:
            return None
        return self._digraph.nodes[node_id]["node"]

    def forward(self, node_id: str) -> list[str]:
        """Downstream neighbours of a node; empty for unknown ids."""
        if node_id not in self._digraph:
            return []
        return list(self._digraph.successors(node_id))

    def reverse(self, node_id: str) -> list[str]:
        """Upstream neighbours of a node; empty for unknown ids."""
        if node_id not in self._digraph:
            return []
        return list(self._digraph.predecessors(node_id))

    def edge_between(self, source: str, target: str) -> Optional[Edge]:
        """Edge indexed for the (source, target) pair, or None."""
        data = self._digraph.get_edge_data(source, target)
        if data is None:
            return None
        return data["edge"]

    def to_networkx(self) -> nx.DiGraph:
        """The frozen DiGraph backing this index."""
        return self._digraph
