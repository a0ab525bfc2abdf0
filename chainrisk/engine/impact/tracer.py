"""
Impact Tracer — Disruption propagation over a supply chain.

This module implements breadth-first traversal over a GraphIndex to find
every entity reached by a disruption, downstream from one or more sources
or upstream towards a single target.

Traversal algorithm:
1. Seed every known source at depth 0 (unknown ids are ignored)
2. Dequeue in FIFO order; nodes at depth >= max_depth are not expanded
3. Skip edges lighter than weight_threshold (they stay in the graph,
   they just do not carry impact)
4. Expand a neighbour when it is new, or, with include_revisits, when the
   candidate depth is strictly smaller than its best known depth
5. Record a critical path whenever an expanded neighbour matches the
   critical criteria
6. Delegate to ImpactScorer for the aggregate score

Step 4 is the termination guarantee on cyclic graphs: a node is
re-enqueued only on a strict depth improvement, so each node is expanded
at most max_depth times.

Traversal order within a depth level follows adjacency insertion order,
so depth maps and critical-path ordering are reproducible.

Version: impact_trace_v1
"""

from collections import deque
from typing import Callable, Iterable, Optional, Union

from chainrisk.engine.graph_index import GraphIndex
from chainrisk.exceptions import TraversalCancelled
from chainrisk.models.enums import TraversalDirection
from chainrisk.models.graph import Edge
from chainrisk.models.impact import (
    DOWNSTREAM_CRITICAL,
    UPSTREAM_CRITICAL,
    AffectedSet,
    CriticalCriteria,
    TraceOptions,
    TraceProgress,
)
from chainrisk.utils.logging import get_logger

from .impact_scorer import ImpactScorer

logger = get_logger(__name__)

CancelCheck = Callable[[], bool]
ProgressCallback = Callable[[TraceProgress], None]


class ImpactTracer:
    """
    Traces disruption impact downstream or upstream over a GraphIndex.

    The tracer holds no per-query state; one instance can serve
    concurrent queries against read-only indexes.

    Attributes:
        scorer: Impact scoring engine
        logger: Structured logger

    Example:
        >>> tracer = ImpactTracer()
        >>> result = tracer.trace_downstream(index, ["A"], TraceOptions(max_depth=10))
        >>> sorted(result.affected_nodes)
        ['A', 'B', 'C']
    """

    def __init__(self, scorer: Optional[ImpactScorer] = None):
        self.scorer = scorer or ImpactScorer()
        self.logger = get_logger(__name__)

    def trace_downstream(
        self,
        index: GraphIndex,
        source_ids: Union[str, Iterable[str]],
        options: Optional[TraceOptions] = None,
        *,
        should_cancel: Optional[CancelCheck] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> AffectedSet:
        """
        Find everything a disruption at ``source_ids`` propagates to.

        Args:
            index: Graph index to traverse
            source_ids: One id or several; ids absent from the index are ignored
            options: Depth/weight constraints (default: unbounded, threshold 0)
            should_cancel: Checked once per dequeue; True aborts the trace
            on_progress: Called once per completed depth level

        Returns:
            AffectedSet; empty when no source is known

        Raises:
            TraversalCancelled: If ``should_cancel`` returned True
        """
        if isinstance(source_ids, str):
            source_ids = [source_ids]
        source_ids = list(source_ids)
        options = options or TraceOptions()

        result = self._traverse(
            index=index,
            seeds=source_ids,
            neighbours=index.forward,
            edge_for=index.edge_between,
            direction=TraversalDirection.DOWNSTREAM,
            options=options,
            criteria=options.critical or DOWNSTREAM_CRITICAL,
            should_cancel=should_cancel,
            on_progress=on_progress,
        )

        self.logger.info(
            "downstream_traced",
            source_count=len(source_ids),
            affected_nodes=len(result.affected_nodes),
            affected_edges=len(result.affected_edges),
            critical_paths=len(result.critical_paths),
            total_impact=round(result.total_impact, 4),
        )

        return result

    def trace_upstream(
        self,
        index: GraphIndex,
        target_id: str,
        options: Optional[TraceOptions] = None,
        *,
        should_cancel: Optional[CancelCheck] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> AffectedSet:
        """
        Find everything ``target_id`` depends on.

        Mirrors ``trace_downstream`` over reverse adjacency from a single
        seed. Critical paths are ordered earliest node first and are
        recorded when that earliest node matches the criteria (raw
        materials by default).

        Args:
            index: Graph index to traverse
            target_id: Node whose suppliers are traced
            options: Depth/weight constraints (default: unbounded, threshold 0)
            should_cancel: Checked once per dequeue; True aborts the trace
            on_progress: Called once per completed depth level

        Returns:
            AffectedSet; empty when the target is unknown

        Raises:
            TraversalCancelled: If ``should_cancel`` returned True
        """
        options = options or TraceOptions()

        result = self._traverse(
            index=index,
            seeds=[target_id],
            neighbours=index.reverse,
            edge_for=lambda node_id, supplier_id: index.edge_between(supplier_id, node_id),
            direction=TraversalDirection.UPSTREAM,
            options=options,
            criteria=options.critical or UPSTREAM_CRITICAL,
            should_cancel=should_cancel,
            on_progress=on_progress,
        )

        self.logger.info(
            "upstream_traced",
            target_id=target_id,
            affected_nodes=len(result.affected_nodes),
            affected_edges=len(result.affected_edges),
            critical_paths=len(result.critical_paths),
            total_impact=round(result.total_impact, 4),
        )

        return result

    # =========================================================================
    # Traversal
    # =========================================================================

    def _traverse(
        self,
        index: GraphIndex,
        seeds: list[str],
        neighbours: Callable[[str], list[str]],
        edge_for: Callable[[str, str], Optional[Edge]],
        direction: TraversalDirection,
        options: TraceOptions,
        criteria: CriticalCriteria,
        should_cancel: Optional[CancelCheck],
        on_progress: Optional[ProgressCallback],
    ) -> AffectedSet:
        """
        Breadth-first traversal shared by both directions.

        Queue entries carry the path walked so far, ordered in graph
        direction: source first downstream, earliest supplier first
        upstream.
        """
        affected_nodes: set[str] = set()
        affected_edges: set[str] = set()
        depth: dict[str, int] = {}
        critical_paths: list[list[str]] = []
        queue: deque[tuple[str, int, tuple[str, ...]]] = deque()

        for seed in seeds:
            if seed in index and seed not in depth:
                depth[seed] = 0
                affected_nodes.add(seed)
                queue.append((seed, 0, (seed,)))

        if not queue:
            self.logger.debug(
                "trace_seeds_not_found",
                direction=direction.value,
                seeds=seeds[:10],
            )
            return AffectedSet()

        max_depth = options.max_depth
        level = 0
        processed = 0

        while queue:
            if should_cancel is not None and should_cancel():
                raise TraversalCancelled(f"trace_{direction.value}", processed)

            node_id, node_depth, path = queue.popleft()
            processed += 1

            if node_depth > level:
                self._report_progress(on_progress, level, len(queue) + 1, len(affected_nodes))
                level = node_depth

            # Superseded by a shallower visit
            if node_depth > depth[node_id]:
                continue

            if max_depth is not None and node_depth >= max_depth:
                continue

            next_depth = node_depth + 1

            for neighbour_id in neighbours(node_id):
                edge = edge_for(node_id, neighbour_id)
                if edge is None or edge.weight < options.weight_threshold:
                    continue

                known_depth = depth.get(neighbour_id)
                if known_depth is not None and not (
                    options.include_revisits and next_depth < known_depth
                ):
                    continue

                depth[neighbour_id] = next_depth
                affected_nodes.add(neighbour_id)
                affected_edges.add(edge.id)

                if direction == TraversalDirection.DOWNSTREAM:
                    next_path = path + (neighbour_id,)
                else:
                    next_path = (neighbour_id,) + path
                queue.append((neighbour_id, next_depth, next_path))

                neighbour = index.get_node(neighbour_id)
                if neighbour is not None and criteria.matches(neighbour):
                    critical_paths.append(list(next_path))

        self._report_progress(on_progress, level, 0, len(affected_nodes))

        return AffectedSet(
            affected_nodes=affected_nodes,
            affected_edges=affected_edges,
            depth=depth,
            critical_paths=critical_paths,
            total_impact=self.scorer.score(index, affected_nodes),
        )

    @staticmethod
    def _report_progress(
        on_progress: Optional[ProgressCallback],
        depth: int,
        frontier_size: int,
        affected_count: int,
    ) -> None:
        if on_progress is None:
            return
        on_progress(
            TraceProgress(
                depth=depth,
                frontier_size=frontier_size,
                affected_count=affected_count,
            )
        )
