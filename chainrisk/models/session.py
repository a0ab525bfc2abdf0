"""
Crisis simulation session model.

A Session is an immutable snapshot of one disruption simulation. Every
transition of a CrisisSession produces a new Session; nothing is
updated in place.
"""

from functools import cached_property
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import SessionStatus
from .impact import AffectedSet


class Session(BaseModel):
    """
    Read-only view of a crisis simulation for the statistics panel.

    Attributes:
        status: Inactive or active
        source_ids: Disruption sources the analysis was seeded with
        label: Free-form crisis label (e.g. "lithium_shortage")
        analysis: Downstream trace backing the accessors (None when inactive)
    """

    model_config = ConfigDict(frozen=True)

    status: SessionStatus = Field(default=SessionStatus.INACTIVE)
    source_ids: tuple[str, ...] = Field(default_factory=tuple)
    label: str = Field(default="")
    analysis: Optional[AffectedSet] = Field(default=None)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def source_id(self) -> Optional[str]:
        return self.source_ids[0] if self.source_ids else None

    @cached_property
    def affected_node_ids(self) -> frozenset[str]:
        if self.analysis is None:
            return frozenset()
        return frozenset(self.analysis.affected_nodes)

    @cached_property
    def affected_edge_ids(self) -> frozenset[str]:
        if self.analysis is None:
            return frozenset()
        return frozenset(self.analysis.affected_edges)

    @property
    def total_impact(self) -> float:
        return self.analysis.total_impact if self.analysis is not None else 0.0

    @property
    def critical_path_count(self) -> int:
        return len(self.analysis.critical_paths) if self.analysis is not None else 0

    def is_node_affected(self, node_id: str) -> bool:
        return self.is_active and self.analysis.is_node_affected(node_id)

    def is_edge_affected(self, edge_id: str) -> bool:
        return self.is_active and self.analysis.is_edge_affected(edge_id)

    def impact_stats(self) -> dict:
        """Counts and score shown by the statistics panel."""
        return {
            "affected_nodes": len(self.affected_node_ids),
            "affected_edges": len(self.affected_edge_ids),
            "critical_paths": self.critical_path_count,
            "total_impact": round(self.total_impact, 4),
        }
