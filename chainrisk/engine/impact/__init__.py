"""
Impact Analysis Engine.

Components:
    ImpactTracer: Downstream/upstream BFS under depth and weight constraints
    ImpactScorer: Tier-weighted severity score over an affected set

Example:
    >>> from chainrisk.engine.impact import ImpactTracer
    >>> tracer = ImpactTracer()
    >>> affected = tracer.trace_downstream(index, ["rm_lithium"])
    >>> print(f"Total impact: {affected.total_impact:.2f}")
"""

from .impact_scorer import ImpactScorer
from .tracer import ImpactTracer

__all__ = [
    "ImpactScorer",
    "ImpactTracer",
]
