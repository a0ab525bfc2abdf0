"""
Property-based tests using Hypothesis for the ChainRisk engine.

Random small graphs (cycles, self-loops, parallel edges and isolated
nodes included) are checked against the traversal invariants the
engine guarantees, using NetworkX reachability as the oracle.
"""

import hypothesis.strategies as st
import networkx as nx
import pytest
from hypothesis import HealthCheck, assume, given, settings

from chainrisk.engine.graph_index import GraphIndex
from chainrisk.engine.impact import ImpactScorer, ImpactTracer
from chainrisk.engine.paths import PathFinder
from chainrisk.models import Graph, NodeKind, TraceOptions
from tests.conftest import make_edge, make_node

# Fixtures in conftest are function-scoped and autouse; they only reset caches
PROPERTY_SETTINGS = settings(
    max_examples=75,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


@st.composite
def supply_graphs(draw, max_nodes=8, max_edges=16):
    """Random Graph with 1..max_nodes nodes and up to max_edges edges."""
    node_count = draw(st.integers(min_value=1, max_value=max_nodes))
    node_ids = [f"n{i}" for i in range(node_count)]
    nodes = [
        make_node(
            node_id,
            tier=draw(st.integers(min_value=0, max_value=9)),
            kind=draw(st.sampled_from(list(NodeKind))),
            importance=draw(st.floats(min_value=0.0, max_value=1.0)),
            risk_score=draw(st.floats(min_value=0.0, max_value=1.0)),
        )
        for node_id in node_ids
    ]

    pairs = draw(
        st.lists(
            st.tuples(st.sampled_from(node_ids), st.sampled_from(node_ids)),
            max_size=max_edges,
        )
    )
    edges = [
        make_edge(
            source,
            target,
            weight=draw(st.floats(min_value=0.0, max_value=20.0)),
            edge_id=f"e{i}",
        )
        for i, (source, target) in enumerate(pairs)
    ]
    return Graph(nodes=nodes, edges=edges)


def propagating_graph(index: GraphIndex, threshold: float) -> nx.DiGraph:
    """Indexed edges that carry impact under ``threshold``."""
    reference = nx.DiGraph()
    reference.add_nodes_from(index.node_ids())
    reference.add_edges_from(
        (u, v)
        for u, v, weight in index.to_networkx().edges(data="weight")
        if weight >= threshold
    )
    return reference


# =============================================================================
# ImpactTracer Property Tests
# =============================================================================


@given(graph=supply_graphs())
@PROPERTY_SETTINGS
def test_prop_trace_absent_source_is_empty(graph):
    """A source outside the graph never affects anything."""
    index = GraphIndex.build(graph)
    result = ImpactTracer().trace_downstream(index, ["not-a-node"])
    assert result.affected_nodes == set()
    assert result.affected_edges == set()
    assert result.total_impact == 0.0


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_trace_source_affected_at_depth_zero(graph, data):
    """A known source is always affected, at depth 0."""
    index = GraphIndex.build(graph)
    source = data.draw(st.sampled_from(list(index.node_ids())))
    max_depth = data.draw(st.none() | st.integers(min_value=0, max_value=6))

    result = ImpactTracer().trace_downstream(index, [source], TraceOptions(max_depth=max_depth))

    assert source in result.affected_nodes
    assert result.depth[source] == 0
    assert set(result.depth) == result.affected_nodes


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_trace_monotonic_in_max_depth(graph, data):
    """Raising max_depth never shrinks the affected set."""
    index = GraphIndex.build(graph)
    source = data.draw(st.sampled_from(list(index.node_ids())))
    depth = data.draw(st.integers(min_value=0, max_value=6))
    tracer = ImpactTracer()

    shallow = tracer.trace_downstream(index, [source], TraceOptions(max_depth=depth))
    deeper = tracer.trace_downstream(index, [source], TraceOptions(max_depth=depth + 1))

    assert shallow.affected_nodes <= deeper.affected_nodes
    assert shallow.total_impact <= deeper.total_impact + 1e-9


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_trace_depth_matches_shortest_hops(graph, data):
    """Depths are shortest hop counts over edges at or above the threshold."""
    index = GraphIndex.build(graph)
    source = data.draw(st.sampled_from(list(index.node_ids())))
    threshold = data.draw(st.sampled_from([0.0, 5.0, 12.5]))

    result = ImpactTracer().trace_downstream(
        index, [source], TraceOptions(weight_threshold=threshold)
    )
    expected = nx.single_source_shortest_path_length(propagating_graph(index, threshold), source)

    assert result.depth == expected


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_trace_downstream_upstream_duality(graph, data):
    """t is reached downstream from s exactly when s is reached upstream from t."""
    index = GraphIndex.build(graph)
    ids = list(index.node_ids())
    source = data.draw(st.sampled_from(ids))
    target = data.draw(st.sampled_from(ids))
    tracer = ImpactTracer()

    downstream = tracer.trace_downstream(index, [source])
    upstream = tracer.trace_upstream(index, target)

    assert (target in downstream.affected_nodes) == (source in upstream.affected_nodes)


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_trace_critical_paths_follow_edges(graph, data):
    """Critical paths start at a source, follow indexed edges and end at a critical node."""
    index = GraphIndex.build(graph)
    sources = data.draw(
        st.lists(st.sampled_from(list(index.node_ids())), min_size=1, max_size=3)
    )

    result = ImpactTracer().trace_downstream(index, sources)

    for path in result.critical_paths:
        assert path[0] in sources
        assert len(path) - 1 == result.depth[path[-1]]
        end = index.get_node(path[-1])
        assert end.tier == 0 or end.kind == NodeKind.MANUFACTURER
        for u, v in zip(path, path[1:]):
            assert index.edge_between(u, v).id in result.affected_edges


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_trace_total_impact_matches_scorer(graph, data):
    """total_impact is the scorer's sum over the affected nodes."""
    index = GraphIndex.build(graph)
    source = data.draw(st.sampled_from(list(index.node_ids())))

    result = ImpactTracer().trace_downstream(index, [source])

    assert result.total_impact == pytest.approx(
        ImpactScorer().score(index, result.affected_nodes)
    )
    assert result.total_impact >= 0.0


# =============================================================================
# PathFinder Property Tests
# =============================================================================


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_paths_to_self(graph, data):
    """The only path from a node to itself is the node alone."""
    index = GraphIndex.build(graph)
    node_id = data.draw(st.sampled_from(list(index.node_ids())))

    result = PathFinder().find_all_paths(index, node_id, node_id)

    assert result.paths == [[node_id]]
    assert not result.truncated


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_paths_exist_iff_reachable(graph, data):
    """Unbounded enumeration finds a path exactly when the target is reachable."""
    index = GraphIndex.build(graph)
    ids = list(index.node_ids())
    source = data.draw(st.sampled_from(ids))
    target = data.draw(st.sampled_from(ids))

    result = PathFinder().find_all_paths(index, source, target)

    assert bool(result.paths) == nx.has_path(index.to_networkx(), source, target)
    assert not result.truncated


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_paths_are_simple_and_valid(graph, data):
    """Every enumerated path is simple, follows edges and is no shorter than the shortest."""
    index = GraphIndex.build(graph)
    ids = list(index.node_ids())
    source = data.draw(st.sampled_from(ids))
    target = data.draw(st.sampled_from(ids))
    assume(source != target)

    finder = PathFinder()
    paths = finder.find_all_paths(index, source, target).paths
    assume(paths)

    reference = nx.shortest_path_length(index.to_networkx(), source, target)
    assert len({tuple(path) for path in paths}) == len(paths)
    for path in paths:
        assert path[0] == source and path[-1] == target
        assert len(path) == len(set(path))
        assert len(path) - 1 >= reference
        assert all(index.edge_between(u, v) is not None for u, v in zip(path, path[1:]))

    shortest = finder.select_shortest(paths, index)
    assert len(shortest) - 1 == reference
    assert finder.metrics(index, shortest).hop_count == reference


@given(graph=supply_graphs(), data=st.data())
@PROPERTY_SETTINGS
def test_prop_paths_respect_bounds(graph, data):
    """Bounded enumeration never exceeds its bounds and flags what it cut."""
    index = GraphIndex.build(graph)
    ids = list(index.node_ids())
    source = data.draw(st.sampled_from(ids))
    target = data.draw(st.sampled_from(ids))
    assume(source != target)
    max_paths = data.draw(st.integers(min_value=1, max_value=4))
    max_depth = data.draw(st.integers(min_value=0, max_value=4))

    finder = PathFinder()
    full = finder.find_all_paths(index, source, target)
    bounded = finder.find_all_paths(
        index, source, target, max_paths=max_paths, max_depth=max_depth
    )

    assert len(bounded.paths) <= max_paths
    assert all(len(path) - 1 <= max_depth for path in bounded.paths)
    assert all(path in full.paths for path in bounded.paths)
    if len(bounded.paths) < len(full.paths):
        assert bounded.truncated
