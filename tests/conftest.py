"""
Pytest configuration and shared fixtures for the ChainRisk test suite.

Model factories and small reference graphs reused across unit, golden
and property-based tests.
"""

import os

import pytest

os.environ.setdefault("LOG_LEVEL", "warning")

from chainrisk.config import get_settings
from chainrisk.engine.graph_index import GraphIndex
from chainrisk.models.enums import NodeKind
from chainrisk.models.graph import Edge, Graph, Node


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


def make_node(
    node_id: str,
    tier: int = 1,
    kind: NodeKind = NodeKind.SUPPLIER,
    importance: float = 0.5,
    risk_score: float = 0.5,
    **overrides,
) -> Node:
    """Factory function for creating test Node objects."""
    defaults = dict(
        id=node_id,
        tier=tier,
        kind=kind,
        importance=importance,
        risk_score=risk_score,
    )
    defaults.update(overrides)
    return Node(**defaults)


def make_edge(source: str, target: str, weight: float = 1.0, edge_id: str = None, **overrides) -> Edge:
    """Factory function for creating test Edge objects; id defaults to 'source->target'."""
    defaults = dict(
        id=edge_id or f"{source}->{target}",
        source=source,
        target=target,
        weight=weight,
    )
    defaults.update(overrides)
    return Edge(**defaults)


def make_graph(nodes: list[Node], edges: list[tuple] = ()) -> Graph:
    """
    Build a Graph from nodes and (source, target[, weight]) tuples.

    Edge objects are accepted as-is.
    """
    built = []
    for item in edges:
        if isinstance(item, Edge):
            built.append(item)
        else:
            built.append(make_edge(*item))
    return Graph(nodes=nodes, edges=built)


def chain_graph() -> Graph:
    """A(tier 0) -> B(tier 1) -> C(tier 2, manufacturer), weights 10 and 20."""
    return make_graph(
        nodes=[
            make_node("A", tier=0, kind=NodeKind.SUPPLIER, importance=0.8, risk_score=0.6),
            make_node("B", tier=1, kind=NodeKind.SUPPLIER),
            make_node("C", tier=2, kind=NodeKind.MANUFACTURER),
        ],
        edges=[("A", "B", 10.0), ("B", "C", 20.0)],
    )


def diamond_graph() -> Graph:
    """S -> X -> T and S -> Y -> T, every edge weight 1."""
    return make_graph(
        nodes=[
            make_node("S", tier=3),
            make_node("X", tier=2),
            make_node("Y", tier=2),
            make_node("T", tier=1),
        ],
        edges=[("S", "X"), ("X", "T"), ("S", "Y"), ("Y", "T")],
    )


def lithium_graph() -> Graph:
    """
    Battery supply chain with two lithium sources and a cycle.

    rm_li_cl, rm_li_au (tier 7 raw materials) -> refiner (6) ->
    cell_maker (2) -> pack_maker (1) -> oem (0, manufacturer).
    rm_cobalt (7) -> refiner. pack_maker <-> recycler forms a cycle.
    """
    return make_graph(
        nodes=[
            make_node("rm_li_cl", tier=7, kind=NodeKind.RAW_MATERIALS,
                      label="Lithium Brine Chile", material="lithium"),
            make_node("rm_li_au", tier=7, kind=NodeKind.RAW_MATERIALS,
                      label="Spodumene Mine", material="lithium"),
            make_node("rm_cobalt", tier=7, kind=NodeKind.RAW_MATERIALS,
                      label="Cobalt Mine DRC", material="cobalt"),
            make_node("refiner", tier=6, kind=NodeKind.SUPPLIER, risk_score=0.7),
            make_node("cell_maker", tier=2, kind=NodeKind.SUPPLIER, importance=0.9),
            make_node("pack_maker", tier=1, kind=NodeKind.SUPPLIER, importance=0.9),
            make_node("recycler", tier=4, kind=NodeKind.WAREHOUSE, importance=0.2),
            make_node("oem", tier=0, kind=NodeKind.MANUFACTURER, importance=1.0, risk_score=0.3),
        ],
        edges=[
            ("rm_li_cl", "refiner", 30.0),
            ("rm_li_au", "refiner", 25.0),
            ("rm_cobalt", "refiner", 4.0),
            ("refiner", "cell_maker", 40.0),
            ("cell_maker", "pack_maker", 35.0),
            ("pack_maker", "oem", 50.0),
            ("pack_maker", "recycler", 6.0),
            ("recycler", "pack_maker", 6.0),
        ],
    )


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Isolate tests that override settings through the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def chain_index():
    return GraphIndex.build(chain_graph())


@pytest.fixture
def diamond_index():
    return GraphIndex.build(diamond_graph())


@pytest.fixture
def lithium_index():
    return GraphIndex.build(lithium_graph())
