# gridpath/core/graph.py
#!/usr/bin/env python3
"""
Graph model: adjacency, per-node state and the active traversal result.

- Edges are undirected but stored as two independent entries, one per endpoint.
  Whoever rewrites a weight must rewrite both (see core.weights).
- Node state is a single NodeState per index.
- At most one TraversalResult is attached at a time; reset() detaches it.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple
import logging

from gridpath.core.errors import GraphAlreadyTraversedError, InvalidNodeError
from gridpath.core.types import NodeState, TraversalResult

logger = logging.getLogger(__name__)


@dataclass
class Edge:
    neighbor: int
    weight: int


@dataclass
class Graph:
    node_count: int
    adjacency: List[List[Edge]] = field(default_factory=list)
    state: List[NodeState] = field(default_factory=list)
    result: Optional[TraversalResult] = None

    def __post_init__(self):
        if self.node_count < 0:
            raise ValueError(f"node_count must be >= 0, got {self.node_count}")
        if not self.adjacency:
            self.adjacency = [[] for _ in range(self.node_count)]
        if not self.state:
            self.state = [NodeState.EMPTY] * self.node_count

    # -------------------- structure --------------------

    def validate(self, node: int) -> None:
        if not (0 <= node < self.node_count):
            raise InvalidNodeError(node, self.node_count)

    def add_edge(self, u: int, v: int, weight: int = 1) -> None:
        """Append the pair (v, w) to u's list and (u, w) to v's list."""
        self.validate(u)
        self.validate(v)
        if u == v:
            raise ValueError(f"self-loop on node {u} is not allowed")
        self.adjacency[u].append(Edge(v, weight))
        self.adjacency[v].append(Edge(u, weight))

    def neighbors(self, node: int) -> Iterator[Tuple[int, int]]:
        """Yield (neighbor, weight) in adjacency-list order."""
        for edge in self.adjacency[node]:
            yield edge.neighbor, edge.weight

    def edge_weights(self, u: int, v: int) -> List[int]:
        """Weights recorded at u→v, one per parallel edge."""
        return [e.weight for e in self.adjacency[u] if e.neighbor == v]

    @property
    def edge_count(self) -> int:
        return sum(len(entries) for entries in self.adjacency) // 2

    def check_symmetry(self) -> List[Tuple[int, int]]:
        """Return every (u, v) whose u→v weights differ from v→u. Empty means consistent."""
        broken: List[Tuple[int, int]] = []
        for u in range(self.node_count):
            for v in {e.neighbor for e in self.adjacency[u]}:
                if u < v and sorted(self.edge_weights(u, v)) != sorted(self.edge_weights(v, u)):
                    broken.append((u, v))
        return broken

    # -------------------- state --------------------

    def state_of(self, node: int) -> NodeState:
        self.validate(node)
        return self.state[node]

    def set_state(self, node: int, new_state: NodeState) -> None:
        self.validate(node)
        self.state[node] = NodeState(new_state)

    # -------------------- traversal bookkeeping --------------------

    @property
    def found(self) -> bool:
        return self.result is not None and self.result.found

    @property
    def traversed(self) -> bool:
        return self.result is not None

    def attach_result(self, result: TraversalResult) -> None:
        if self.result is not None:
            logger.warning("Rejected %s: graph already holds a %s result",
                           result.algorithm, self.result.algorithm)
            raise GraphAlreadyTraversedError(
                f"graph was already traversed by {self.result.algorithm}; reset() before running again"
            )
        if len(result.parent) != self.node_count or len(result.distance) != self.node_count:
            raise ValueError("traversal result does not match graph size")
        self.result = result

    def detach_result(self, result: TraversalResult) -> bool:
        """Drop `result` if it is the attached one; another run's result is left alone."""
        if self.result is not result:
            return False
        self.result = None
        return True

    def reset(self) -> None:
        """Back to construction-time values: no edges, all Empty, no result."""
        self.adjacency = [[] for _ in range(self.node_count)]
        self.state = [NodeState.EMPTY] * self.node_count
        self.result = None
