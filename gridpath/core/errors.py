# gridpath/core/errors.py
"""Exceptions raised by the grid core."""


class GridPathError(Exception):
    """Base class for every error raised by gridpath."""


class InvalidNodeError(GridPathError, IndexError):
    def __init__(self, node: int, node_count: int):
        super().__init__(f"node {node} out of range (graph has {node_count} nodes)")
        self.node = node
        self.node_count = node_count


class MissingEndpointError(GridPathError, ValueError):
    """A search was requested before both Start and End were placed."""


class GraphAlreadyTraversedError(GridPathError, RuntimeError):
    """The graph already holds a traversal result; call reset() first."""


class SearchInProgressError(GridPathError, RuntimeError):
    """An edit arrived while a search is still stepping over the grid."""
