"""
Path Finder — Simple path enumeration between two supply chain entities.

Enumerates every simple directed path from a source to a target with an
iterative depth-first search. The visited set is path-local: a node is
blocked only while it is on the path being built and is released on
backtrack, so a node may appear in many returned paths but never twice
in one.

Simple-path enumeration is exponential on dense or cyclic graphs. The
search only descends into nodes from which the target is reachable, and
it accepts ``max_paths`` and ``max_depth`` bounds. It stops as soon as
``max_paths`` paths are collected. ``truncated`` reports that a bound
stopped the search while a route towards the target was still open.

Shortest-path selection is deterministic. Candidates are ordered by:
1. Fewest hops
2. Lowest cumulative edge weight
3. Lexicographically smallest node-id sequence

Version: path_finder_v1
"""

from itertools import islice
from typing import Callable, Optional

import networkx as nx
import numpy as np

from chainrisk.engine.graph_index import GraphIndex
from chainrisk.exceptions import InvalidPathError, TraversalCancelled
from chainrisk.models.paths import PathHighlight, PathMetrics, PathSearchResult
from chainrisk.utils.logging import get_logger

logger = get_logger(__name__)

Path = list[str]


class PathFinder:
    """
    Enumerates, ranks and measures paths over a GraphIndex.

    Attributes:
        max_paths: Default cap on enumerated paths (None = unbounded)
        max_depth: Default cap on path hop count (None = unbounded)
        alternative_count: Default number of alternative paths
        logger: Structured logger

    Example:
        >>> finder = PathFinder(max_paths=100, max_depth=12)
        >>> result = finder.find_all_paths(index, "S", "T")
        >>> finder.select_shortest(result.paths, index)
        ['S', 'X', 'T']
    """

    def __init__(
        self,
        max_paths: Optional[int] = None,
        max_depth: Optional[int] = None,
        alternative_count: int = 3,
    ):
        self.max_paths = max_paths
        self.max_depth = max_depth
        self.alternative_count = alternative_count
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(cls, settings=None) -> "PathFinder":
        """Path finder bounded by the configured production limits."""
        if settings is None:
            from chainrisk.config import get_settings

            settings = get_settings()
        return cls(
            max_paths=settings.path_max_paths,
            max_depth=settings.path_max_depth,
            alternative_count=settings.alternative_path_count,
        )

    # =========================================================================
    # Enumeration
    # =========================================================================

    def find_all_paths(
        self,
        index: GraphIndex,
        source_id: str,
        target_id: str,
        *,
        max_paths: Optional[int] = None,
        max_depth: Optional[int] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> PathSearchResult:
        """
        Enumerate simple directed paths from ``source_id`` to ``target_id``.

        Args:
            index: Graph index to search
            source_id: Start node
            target_id: End node
            max_paths: Stop after this many paths (default: instance bound)
            max_depth: Max hops per path (default: instance bound)
            should_cancel: Checked once per pop; True aborts the search

        Returns:
            PathSearchResult; ``[[source_id]]`` when source equals target,
            no paths when either id is unknown or no route exists.
            ``truncated`` is set when ``max_paths`` paths were collected,
            or when a node on a route to the target was refused for
            exceeding ``max_depth``

        Raises:
            TraversalCancelled: If ``should_cancel`` returned True
        """
        if source_id not in index or target_id not in index:
            self.logger.debug(
                "path_endpoints_not_found",
                source_id=source_id,
                target_id=target_id,
                source_exists=source_id in index,
                target_exists=target_id in index,
            )
            return PathSearchResult()

        if source_id == target_id:
            return PathSearchResult(paths=[[source_id]])

        max_paths = self.max_paths if max_paths is None else max_paths
        max_depth = self.max_depth if max_depth is None else max_depth

        # Nodes from which the target is reachable; everything else is a dead end
        reaches_target = nx.ancestors(index.to_networkx(), target_id)
        if source_id not in reaches_target:
            return PathSearchResult()
        reaches_target.add(target_id)

        if max_paths is not None and max_paths <= 0:
            return PathSearchResult(truncated=True)

        paths: list[Path] = []
        truncated = False
        processed = 0

        path: Path = [source_id]
        on_path = {source_id}
        stack = [iter(index.forward(source_id))]

        while stack:
            if should_cancel is not None and should_cancel():
                raise TraversalCancelled("find_all_paths", processed)

            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                on_path.discard(path.pop())
                continue
            processed += 1

            if child in on_path or child not in reaches_target:
                continue

            # Hop count of path + [child]
            hops = len(path)
            if max_depth is not None and hops > max_depth:
                truncated = True
                continue

            if child == target_id:
                paths.append(path + [child])
                if max_paths is not None and len(paths) >= max_paths:
                    truncated = True
                    break
                continue

            path.append(child)
            on_path.add(child)
            stack.append(iter(index.forward(child)))

        self.logger.debug(
            "paths_enumerated",
            source_id=source_id,
            target_id=target_id,
            path_count=len(paths),
            truncated=truncated,
            nodes_processed=processed,
        )

        return PathSearchResult(paths=paths, truncated=truncated)

    def find_alternative_paths(
        self,
        index: GraphIndex,
        source_id: str,
        target_id: str,
        k: Optional[int] = None,
    ) -> list[Path]:
        """
        Up to ``k`` simple paths in increasing hop order.

        Uses Yen's algorithm (``networkx.shortest_simple_paths``), so the
        cost grows with ``k`` rather than with the total number of simple
        paths. Paths with equal hop count are ordered like
        ``select_shortest``.

        Returns:
            List of paths, empty when either id is unknown or no route exists
        """
        k = self.alternative_count if k is None else k
        if k <= 0 or source_id not in index or target_id not in index:
            return []
        if source_id == target_id:
            return [[source_id]]

        try:
            candidates = list(
                islice(
                    nx.shortest_simple_paths(index.to_networkx(), source_id, target_id),
                    k,
                )
            )
        except nx.NetworkXNoPath:
            self.logger.debug("no_path_exists", source_id=source_id, target_id=target_id)
            return []

        return sorted(candidates, key=lambda p: self._shortest_key(p, index))

    # =========================================================================
    # Ranking and metrics
    # =========================================================================

    def select_shortest(self, paths: list[Path], index: GraphIndex) -> Optional[Path]:
        """
        Pick the canonical shortest path.

        Tie-break: fewest hops, then lowest cumulative edge weight as
        indexed in ``index``, then the lexicographically smallest node-id
        sequence.

        Returns:
            The winning path, or None when ``paths`` is empty
        """
        if not paths:
            return None
        return list(min(paths, key=lambda p: self._shortest_key(p, index)))

    def metrics(self, index: GraphIndex, path: Path) -> PathMetrics:
        """
        Hop count, total weight and mean risk of a path.

        A consecutive pair with no indexed edge contributes weight 0; it
        can only occur for a path not produced by ``find_all_paths``.

        Raises:
            InvalidPathError: If the path is empty, repeats a node or names
                a node absent from the index
        """
        if not path:
            raise InvalidPathError("Cannot measure an empty path")

        unknown = [node_id for node_id in path if node_id not in index]
        if unknown:
            raise InvalidPathError(
                f"Path names nodes absent from the index: {', '.join(unknown)}"
            )
        if len(set(path)) != len(path):
            raise InvalidPathError(f"Path repeats a node: {' -> '.join(path)}")

        total_weight = 0.0
        for source, target in zip(path, path[1:]):
            edge = index.edge_between(source, target)
            if edge is None:
                self.logger.warning("path_edge_missing", source=source, target=target)
                continue
            total_weight += edge.weight

        risk_score = float(np.mean([index.get_node(node_id).risk_score for node_id in path]))

        return PathMetrics(
            hop_count=len(path) - 1,
            total_weight=total_weight,
            risk_score=risk_score,
        )

    def path_edge_ids(self, index: GraphIndex, path: Path) -> list[str]:
        """Ids of the indexed edges along a path, in path order."""
        edge_ids = []
        for source, target in zip(path, path[1:]):
            edge = index.edge_between(source, target)
            if edge is not None:
                edge_ids.append(edge.id)
        return edge_ids

    def highlight(self, index: GraphIndex, source_id: str, target_id: str) -> PathHighlight:
        """
        Id sets for rendering the shortest path apart from all paths.

        When enumeration was truncated the hop-shortest route is added to
        the candidates, so the highlighted shortest path stays correct even
        if the bounded search missed it.
        """
        search = self.find_all_paths(index, source_id, target_id)
        candidates = list(search.paths)
        if search.truncated:
            candidates.extend(self.find_alternative_paths(index, source_id, target_id, k=1))

        shortest = self.select_shortest(candidates, index)
        if shortest is None:
            self.logger.info(
                "no_path_to_highlight", source_id=source_id, target_id=target_id
            )
            return PathHighlight(
                source_id=source_id, target_id=target_id, truncated=search.truncated
            )

        all_node_ids: set[str] = set()
        all_edge_ids: set[str] = set()
        for path in search.paths:
            all_node_ids.update(path)
            all_edge_ids.update(self.path_edge_ids(index, path))

        highlight = PathHighlight(
            source_id=source_id,
            target_id=target_id,
            shortest_path=shortest,
            shortest_node_ids=set(shortest),
            shortest_edge_ids=set(self.path_edge_ids(index, shortest)),
            paths=search.paths,
            all_node_ids=all_node_ids,
            all_edge_ids=all_edge_ids,
            metrics=self.metrics(index, shortest),
            truncated=search.truncated,
        )

        self.logger.info(
            "path_highlight_computed",
            source_id=source_id,
            target_id=target_id,
            hops=highlight.metrics.hop_count,
            path_count=len(search.paths),
            truncated=search.truncated,
        )

        return highlight

    @staticmethod
    def _shortest_key(path: Path, index: GraphIndex) -> tuple[int, float, tuple[str, ...]]:
        weight = 0.0
        for source, target in zip(path, path[1:]):
            edge = index.edge_between(source, target)
            if edge is not None:
                weight += edge.weight
        return (len(path) - 1, weight, tuple(path))
