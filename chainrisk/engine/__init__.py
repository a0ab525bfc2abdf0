"""
ChainRisk engine components.

- GraphIndex: immutable adjacency snapshot built once per graph
- ImpactTracer / ImpactScorer: disruption propagation and severity
- PathFinder: simple path enumeration, canonical shortest path, metrics
- CrisisSession: re-computable disruption simulation for consumers

All components are synchronous and read-only with respect to the index;
long traversals accept a cancellation callback so callers can run them
off an interactive thread.
"""

from chainrisk.engine.crisis_session import CrisisSession
from chainrisk.engine.graph_index import GraphIndex
from chainrisk.engine.impact import ImpactScorer, ImpactTracer
from chainrisk.engine.paths import PathFinder
from chainrisk.engine.stats import find_material_sources, supply_chain_stats

__all__ = [
    "CrisisSession",
    "GraphIndex",
    "ImpactScorer",
    "ImpactTracer",
    "PathFinder",
    "find_material_sources",
    "supply_chain_stats",
]
