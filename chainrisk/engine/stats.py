"""
Supply chain statistics and crisis source lookup.

Helpers feeding the statistics panel and the material-crisis shortcut:
aggregate counts over a graph snapshot, and the raw-material nodes that
produce a given material.
"""

from collections import Counter

from chainrisk.models.enums import NodeKind
from chainrisk.models.graph import Graph, SupplyChainStats
from chainrisk.utils.logging import get_logger

logger = get_logger(__name__)


def supply_chain_stats(graph: Graph) -> SupplyChainStats:
    """
    Count nodes by tier and kind.

    Args:
        graph: Graph snapshot

    Returns:
        SupplyChainStats; ``avg_connections_per_node`` is 0.0 for a graph
        without nodes
    """
    nodes_by_tier = Counter(node.tier for node in graph.nodes)
    nodes_by_kind = Counter(node.kind.value for node in graph.nodes)
    total_nodes = len(graph.nodes)
    total_edges = len(graph.edges)

    return SupplyChainStats(
        total_nodes=total_nodes,
        total_edges=total_edges,
        nodes_by_tier=dict(sorted(nodes_by_tier.items())),
        nodes_by_kind=dict(nodes_by_kind),
        avg_connections_per_node=total_edges / total_nodes if total_nodes else 0.0,
    )


def find_material_sources(graph: Graph, material: str) -> list[str]:
    """
    Raw-material nodes producing ``material``.

    Matches case-insensitively on the node label or material name.

    Example:
        >>> find_material_sources(graph, "lithium")
        ['rm_lithium_chile', 'rm_lithium_australia']
    """
    needle = material.strip().lower()
    if not needle:
        return []

    sources = [
        node.id
        for node in graph.nodes
        if node.kind == NodeKind.RAW_MATERIALS
        and (
            needle in (node.label or "").lower()
            or needle in (node.material or "").lower()
        )
    ]

    if not sources:
        logger.warning("material_sources_not_found", material=material)

    return sources
