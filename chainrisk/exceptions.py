"""
Exception types for the ChainRisk engine.

Not-found and empty conditions are ordinary results and never raise.
The exceptions below are reserved for programmer errors and for
cooperative cancellation of long-running traversals.
"""


class ChainRiskError(Exception):
    """Base exception for all engine failures."""

    pass


class DuplicateNodeError(ChainRiskError, ValueError):
    """A graph snapshot declares the same node id more than once."""

    def __init__(self, node_ids: list[str]):
        self.node_ids = node_ids
        super().__init__(f"Duplicate node ids in graph: {', '.join(node_ids)}")


class InvalidPathError(ChainRiskError, ValueError):
    """A path handed to the path finder was not produced against this index."""

    pass


class InvalidSessionTransition(ChainRiskError, ValueError):
    """A crisis session was asked for a transition its state does not allow."""

    pass


class TraversalCancelled(ChainRiskError):
    """A traversal was stopped by its cancellation callback."""

    def __init__(self, operation: str, processed: int):
        self.operation = operation
        self.processed = processed
        super().__init__(f"{operation} cancelled after {processed} node(s)")
