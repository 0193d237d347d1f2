# gridpath/core/traversal.py
#!/usr/bin/env python3
"""
Search strategies: one expansion per step() so a viewer can animate them.

All three share the Algorithm API:
- init(graph, source, destination) - reset() - step() -> StepResult

Each run builds a fresh TraversalResult (parent / distance / found) and
attaches it to the graph; the graph refuses a second one until reset().
The strategies only look at node state to skip OBSTACLE cells, so they never
depend on the lattice shape. Newly reached EMPTY cells are retagged VISITED
for display.

Dijkstra tie-break: among equal tentative distances the lowest node index
is finalized first, for both frontiers.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterator, List, Optional, Set, Tuple, Type
import heapq
import logging

from gridpath.core.graph import Graph
from gridpath.core.types import (
    Algorithm, NO_PARENT, INFINITY, NodeState, StepResult, TraversalResult,
)

logger = logging.getLogger(__name__)


@dataclass
class Traversal:
    name: str = "traversal"

    graph: Optional[Graph] = None
    source: int = NO_PARENT
    destination: int = NO_PARENT
    result: Optional[TraversalResult] = None
    closed_set: Set[int] = field(default_factory=set)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False

    # -------------------- lifecycle --------------------

    def init(self, graph: Graph, source: int, destination: int) -> None:
        graph.validate(source)
        graph.validate(destination)
        self.graph = graph
        self.source = source
        self.destination = destination
        self.reset()

    def reset(self) -> None:
        """Restart from the source with a fresh result attached to the graph.

        A result this search attached earlier is withdrawn first, and the
        VISITED / PATH tags it left are cleared, so reset() mid-run or after a
        finished run replays the same search. Raises GraphAlreadyTraversedError
        if the graph holds some other search's result.
        """
        if self.graph is None:
            return
        if self.result is not None and self.graph.detach_result(self.result):
            self._untag(self.result)
        self.result = TraversalResult.empty(self.name, self.graph.node_count, self.source, self.destination)
        self.graph.attach_result(self.result)
        self.closed_set.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self._clear_frontier()
        self._seed()

    # -------------------- helpers --------------------

    def _untag(self, result: TraversalResult) -> None:
        for node in (*result.visited, *result.path):
            if self.graph.state[node] in (NodeState.VISITED, NodeState.PATH):
                self.graph.state[node] = NodeState.EMPTY

    def _passable(self, node: int) -> bool:
        return self.graph.state[node].passable

    def _discover(self, node: int, parent: int, distance: float) -> None:
        """Record a route to `node`; tag it VISITED on first contact."""
        first = self.result.distance[node] == INFINITY
        self.result.distance[node] = distance
        self.result.parent[node] = parent
        if first:
            self.result.visited.append(node)
            if self.graph.state[node] is NodeState.EMPTY:
                self.graph.state[node] = NodeState.VISITED

    def _finish(self, found: bool, current: Optional[int], closed: List[int]) -> StepResult:
        if found:
            self.done = True
            self.result.found = True
            logger.debug("%s reached %d after %d pops", self.name, self.destination, self.popped_count)
            return StepResult(status="done", closed=closed, current=current, metrics=self._metrics())
        self.no_path = True
        logger.debug("%s exhausted the frontier without reaching %d", self.name, self.destination)
        return StepResult(status="no_path", closed=closed, current=current, metrics=self._metrics())

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        if self.graph is None or self.result is None:
            return StepResult(status="idle", metrics={"algo": self.name})
        if self.done:
            return StepResult(status="done", metrics=self._metrics())
        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())
        return self._expand()

    def _clear_frontier(self) -> None:
        raise NotImplementedError

    def _seed(self) -> None:
        raise NotImplementedError

    def _expand(self) -> StepResult:
        raise NotImplementedError

    def _open_size(self) -> int:
        return 0

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        found = self.result is not None and self.result.found
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": self._open_size(),
            "closed_count": len(self.closed_set),
            "path_len": 0,
            "total_cost": self.result.total_cost if found else None,
        }


@dataclass
class BreadthFirstSearch(Traversal):
    """
    FIFO order: fewest hops, not least weight. Distances still add edge
    weights so the viewer can report the cost of the hop-shortest route.
    """
    name: str = Algorithm.BFS.value
    queue: Deque[int] = field(default_factory=deque)

    def _clear_frontier(self) -> None:
        self.queue.clear()

    def _seed(self) -> None:
        self._discover(self.source, NO_PARENT, 0)
        self.queue.append(self.source)

    def _open_size(self) -> int:
        return len(self.queue)

    def _expand(self) -> StepResult:
        if not self.queue:
            return self._finish(False, None, [])

        u = self.queue.popleft()
        self.popped_count += 1
        self.closed_set.add(u)
        if u == self.destination:
            return self._finish(True, u, [u])

        opened_now: List[int] = []
        for v, w in self.graph.neighbors(u):
            # a node with a finite distance has already been enqueued once
            if not self._passable(v) or self.result.reached(v):
                continue
            self._discover(v, u, self.result.distance[u] + w)
            self.queue.append(v)
            opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())


@dataclass
class DepthFirstSearch(Traversal):
    """
    Enter a node, then its first unentered neighbour, in adjacency order.
    The recursion is an explicit stack of neighbour iterators, so the call
    stack stays flat however long the corridor.
    """
    name: str = Algorithm.DFS.value
    stack: List[Tuple[int, Iterator[Tuple[int, int]]]] = field(default_factory=list)
    started: bool = False

    def _clear_frontier(self) -> None:
        self.stack.clear()
        self.started = False

    def _seed(self) -> None:
        pass

    def _open_size(self) -> int:
        return len(self.stack)

    def _enter(self, node: int, parent: int, distance: float) -> StepResult:
        self._discover(node, parent, distance)
        self.popped_count += 1
        self.closed_set.add(node)
        if node == self.destination:
            return self._finish(True, node, [node])
        self.stack.append((node, self.graph.neighbors(node)))
        return StepResult(status="running", opened=[node], closed=[node], current=node,
                          metrics=self._metrics())

    def _expand(self) -> StepResult:
        if not self.started:
            self.started = True
            return self._enter(self.source, NO_PARENT, 0)

        while self.stack:
            u, pending = self.stack[-1]
            for v, w in pending:
                if self._passable(v) and v not in self.closed_set:
                    return self._enter(v, u, self.result.distance[u] + w)
            self.stack.pop()

        return self._finish(False, None, [])


@dataclass
class Dijkstra(Traversal):
    """
    frontier="heap": binary heap of (distance, node); stale entries skipped on pop.
    frontier="scan": plain set, linear scan for the minimum each step.
    Both finalize nodes in (distance, node index) order.
    """
    name: str = Algorithm.DIJKSTRA.value
    frontier: str = "heap"
    open_pq: List[Tuple[float, int]] = field(default_factory=list)
    open_set: Set[int] = field(default_factory=set)

    def __post_init__(self):
        if self.frontier not in ("heap", "scan"):
            raise ValueError(f"frontier must be 'heap' or 'scan', got {self.frontier!r}")

    def _clear_frontier(self) -> None:
        self.open_pq.clear()
        self.open_set.clear()

    def _seed(self) -> None:
        self._discover(self.source, NO_PARENT, 0)
        self._push(self.source)

    def _open_size(self) -> int:
        return len(self.open_set)

    def _push(self, node: int) -> None:
        self.open_set.add(node)
        if self.frontier == "heap":
            heapq.heappush(self.open_pq, (self.result.distance[node], node))

    def _pop(self) -> Optional[int]:
        if self.frontier == "scan":
            if not self.open_set:
                return None
            u = min(self.open_set, key=lambda n: (self.result.distance[n], n))
            self.open_set.remove(u)
            return u

        while self.open_pq:
            d_u, u = heapq.heappop(self.open_pq)
            if u in self.closed_set or d_u != self.result.distance[u]:
                continue  # stale
            self.open_set.discard(u)
            return u
        return None

    def _expand(self) -> StepResult:
        u = self._pop()
        if u is None:
            return self._finish(False, None, [])

        self.popped_count += 1
        self.closed_set.add(u)
        if u == self.destination:
            return self._finish(True, u, [u])

        opened_now: List[int] = []
        for v, w in self.graph.neighbors(u):
            if not self._passable(v) or v in self.closed_set:
                continue
            alt = self.result.distance[u] + w
            if alt < self.result.distance[v]:
                if v not in self.open_set:
                    opened_now.append(v)
                self._discover(v, u, alt)
                self._push(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())


TRAVERSALS: Dict[Algorithm, Type[Traversal]] = {
    Algorithm.BFS: BreadthFirstSearch,
    Algorithm.DFS: DepthFirstSearch,
    Algorithm.DIJKSTRA: Dijkstra,
}


def make_traversal(algorithm, **options) -> Traversal:
    algo = algorithm if isinstance(algorithm, Algorithm) else Algorithm.parse(algorithm)
    return TRAVERSALS[algo](**options)


def traverse(graph: Graph, algorithm, source: int, destination: int, **options) -> TraversalResult:
    """Run a search to completion in one call and return its result."""
    search = make_traversal(algorithm, **options)
    search.init(graph, source, destination)
    res = search.step()
    while not res.finished:
        res = search.step()
    logger.info("%s %d -> %d: %s after %d pops", search.name, source, destination,
                "found" if search.result.found else "no path", search.popped_count)
    return search.result
