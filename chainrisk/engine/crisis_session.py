"""
Crisis Session — Disruption simulation over a fixed graph index.

Composes ImpactTracer and ImpactScorer behind a small, re-computable
surface for the statistics panel:

    Inactive --start--> Active(source) --reconfigure--> Active(source')
    Active --stop--> Inactive

Every transition returns a new immutable Session and every activation
recomputes the downstream trace from scratch. The session is bound to
one GraphIndex; if the graph changes, build a new index and start a new
session against it.
"""

from typing import Optional

from chainrisk.engine.graph_index import GraphIndex
from chainrisk.engine.impact import ImpactTracer
from chainrisk.engine.stats import find_material_sources
from chainrisk.exceptions import InvalidSessionTransition
from chainrisk.models.enums import SessionStatus
from chainrisk.models.impact import TraceOptions
from chainrisk.models.session import Session
from chainrisk.utils.logging import analysis_context, get_logger

logger = get_logger(__name__)


class CrisisSession:
    """
    Runs disruption simulations against one GraphIndex.

    Attributes:
        index: Graph index the simulations run on
        tracer: Impact tracer (owns the scorer)
        options: Trace constraints applied to every simulation

    Example:
        >>> crisis = CrisisSession(index)
        >>> session = crisis.start("rm_lithium_chile", "lithium_shortage")
        >>> session.critical_path_count
        4
        >>> session = crisis.stop(session)
    """

    def __init__(
        self,
        index: GraphIndex,
        tracer: Optional[ImpactTracer] = None,
        options: Optional[TraceOptions] = None,
    ):
        """
        Initialize the crisis session runner.

        Args:
            index: Graph index to simulate on
            tracer: Optional custom impact tracer
            options: Trace constraints (default: configured crisis defaults)
        """
        self.index = index
        self.tracer = tracer or ImpactTracer()
        self.options = options or TraceOptions.from_settings()
        self.logger = get_logger(__name__)

    def start(self, source_id: str, label: str) -> Session:
        """Activate a simulation seeded at ``source_id``."""
        session = self._activate([source_id], label)
        self.logger.info(
            "crisis_session_started",
            source_id=source_id,
            label=label,
            **session.impact_stats(),
        )
        return session

    def start_material(self, material: str, label: Optional[str] = None) -> Session:
        """
        Activate a simulation seeded at every raw-material source of ``material``.

        Returns an inactive session when no source produces the material.
        """
        label = label or f"{material.strip().lower()}_shortage"
        source_ids = find_material_sources(self.index.graph, material)
        if not source_ids:
            return Session(label=label)

        session = self._activate(source_ids, label)
        self.logger.info(
            "crisis_session_started",
            material=material,
            source_count=len(source_ids),
            label=label,
            **session.impact_stats(),
        )
        return session

    def reconfigure(self, session: Session, new_source_id: str, new_label: str) -> Session:
        """
        Move an active simulation to a new source; always a full recompute.

        Raises:
            InvalidSessionTransition: If ``session`` is not active
        """
        if not session.is_active:
            raise InvalidSessionTransition(
                "Only an active crisis session can be reconfigured; call start() first"
            )

        updated = self._activate([new_source_id], new_label)
        self.logger.info(
            "crisis_session_reconfigured",
            previous_source_ids=list(session.source_ids),
            source_id=new_source_id,
            label=new_label,
            **updated.impact_stats(),
        )
        return updated

    def stop(self, session: Session) -> Session:
        """End a simulation. Stopping an inactive session is a no-op."""
        if session.is_active:
            self.logger.info(
                "crisis_session_stopped",
                source_ids=list(session.source_ids),
                label=session.label,
            )
        return Session()

    def _activate(self, source_ids: list[str], label: str) -> Session:
        with analysis_context(crisis_label=label, crisis_sources=list(source_ids)):
            analysis = self.tracer.trace_downstream(self.index, source_ids, self.options)
        return Session(
            status=SessionStatus.ACTIVE,
            source_ids=tuple(source_ids),
            label=label,
            analysis=analysis,
        )
