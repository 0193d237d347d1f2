# gridpath/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from math import inf
from typing import List, Tuple, Optional, Dict, Any

Cell = Tuple[int, int]  # (col, row)

NO_PARENT = -1
INFINITY = inf


class NodeState(IntEnum):
    EMPTY = 0
    VISITED = 1
    WEIGHTED = 2
    OBSTACLE = 3
    START = 4
    END = 5
    PATH = 6

    @property
    def passable(self) -> bool:
        return self is not NodeState.OBSTACLE


class Algorithm(str, Enum):
    BFS = "BFS"
    DIJKSTRA = "Dijkstra"
    DFS = "DFS"

    @classmethod
    def parse(cls, label: str) -> "Algorithm":
        """Accept 'bfs', 'Dijkstra', 'DFS', ... case-insensitively."""
        for algo in cls:
            if algo.value.lower() == str(label).strip().lower():
                return algo
        raise ValueError(f"Unknown algorithm {label!r} (expected one of "
                         f"{', '.join(a.value for a in cls)})")


@dataclass
class TraversalResult:
    """Bookkeeping produced by exactly one traversal run."""
    algorithm: str
    source: int
    destination: int
    parent: List[int]
    distance: List[float]
    found: bool = False
    visited: List[int] = field(default_factory=list)   # discovery order
    path: List[int] = field(default_factory=list)      # filled by reconstruct_path

    @classmethod
    def empty(cls, algorithm: str, node_count: int, source: int, destination: int) -> "TraversalResult":
        return cls(
            algorithm=algorithm,
            source=source,
            destination=destination,
            parent=[NO_PARENT] * node_count,
            distance=[INFINITY] * node_count,
        )

    def reached(self, node: int) -> bool:
        return self.distance[node] != INFINITY

    @property
    def total_cost(self) -> Optional[float]:
        if not self.found:
            return None
        return self.distance[self.destination]


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[int] = field(default_factory=list)
    closed: List[int] = field(default_factory=list)
    current: Optional[int] = None
    path: Optional[List[int]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def finished(self) -> bool:
        return self.status in ("done", "no_path")
