# gridpath/core/session.py
#!/usr/bin/env python3
"""
Session: the command / query surface a front-end drives.

Commands:  set_obstacle, set_weighted, set_start, set_end, clear_cell,
           start + step (animated) or run (one call), reset
Queries:   state_of, path_indices, found, result, index_of, coord_of

Edits are refused with SearchInProgressError while a search is unfinished.

The session owns the exclusive Start/End pointers and the weight painted on
each weighted cell. Every edit that touches a marker or terrain goes through
_retag(), so the pointers and the edge weights never drift from node state.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from gridpath.config import ALGORITHM_CYCLE, BASE_WEIGHT, WEIGHTED_COST
from gridpath.core.errors import MissingEndpointError, SearchInProgressError
from gridpath.core.graph import Graph
from gridpath.core.grid import build_lattice, coord_of, index_of
from gridpath.core.path import reconstruct_path
from gridpath.core.traversal import Traversal, make_traversal
from gridpath.core.types import Algorithm, Cell, NodeState, StepResult, TraversalResult
from gridpath.core.weights import update_node_weight

logger = logging.getLogger(__name__)


def next_algorithm(current: Algorithm) -> Algorithm:
    i = ALGORITHM_CYCLE.index(current)
    return ALGORITHM_CYCLE[(i + 1) % len(ALGORITHM_CYCLE)]


@dataclass
class Session:
    width: int
    height: int
    graph: Graph
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    weights: Dict[int, int] = field(default_factory=dict)   # weighted cell -> its weight
    search: Optional[Traversal] = None
    last_step: Optional[StepResult] = None

    @classmethod
    def build(cls, width: int, height: int) -> "Session":
        graph = build_lattice(width, height, weight=BASE_WEIGHT)
        logger.info("New %dx%d session", width, height)
        return cls(width=width, height=height, graph=graph)

    # -------------------- coordinates --------------------

    def index_of(self, col: int, row: int) -> int:
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise ValueError(f"cell ({col}, {row}) outside {self.width}x{self.height} grid")
        return index_of(col, row, self.width)

    def coord_of(self, index: int) -> Cell:
        self.graph.validate(index)
        return coord_of(index, self.width)

    # -------------------- queries --------------------

    def state_of(self, index: int) -> NodeState:
        return self.graph.state_of(index)

    def weight_of(self, index: int) -> int:
        self.graph.validate(index)
        return self.weights.get(index, BASE_WEIGHT)

    @property
    def result(self) -> Optional[TraversalResult]:
        return self.graph.result

    @property
    def found(self) -> bool:
        return self.graph.found

    @property
    def finished(self) -> bool:
        return self.last_step is not None and self.last_step.finished

    @property
    def running(self) -> bool:
        return self.search is not None and not self.finished

    def path_indices(self) -> List[int]:
        """Start -> End route of the last finished run; [] if none."""
        if not self.finished or self.result is None:
            return []
        return list(self.result.path)

    # -------------------- edits --------------------

    def _check_idle(self) -> None:
        if self.running:
            logger.warning("Rejected edit: %s is still running", self.search.name)
            raise SearchInProgressError(
                f"{self.search.name} is still running; let it finish or reset() before editing"
            )

    def _retag(self, index: int, new_state: NodeState, weight: int = BASE_WEIGHT) -> None:
        """Move `index` to `new_state`, keeping markers and edge weights in step."""
        self._check_idle()
        self.graph.validate(index)
        if self.start_index == index:
            self.start_index = None
        if self.end_index == index:
            self.end_index = None

        had_weight = self.weights.pop(index, None)
        if new_state is NodeState.WEIGHTED:
            self.weights[index] = weight
            update_node_weight(self.graph, index, weight)
        elif had_weight is not None:
            update_node_weight(self.graph, index, BASE_WEIGHT)
            # shared edges with other weighted cells take their weight back
            for v, _ in list(self.graph.neighbors(index)):
                if v in self.weights:
                    update_node_weight(self.graph, v, self.weights[v])

        self.graph.set_state(index, new_state)

    def set_obstacle(self, index: int, on: bool = True) -> None:
        if on:
            self._retag(index, NodeState.OBSTACLE)
        elif self.state_of(index) is NodeState.OBSTACLE:
            self._retag(index, NodeState.EMPTY)

    def set_weighted(self, index: int, on: bool = True, weight: int = WEIGHTED_COST) -> None:
        if weight < 0:
            raise ValueError(f"terrain weight must be non-negative, got {weight}")
        if on:
            self._retag(index, NodeState.WEIGHTED, weight)
        elif self.state_of(index) is NodeState.WEIGHTED:
            self._retag(index, NodeState.EMPTY)

    def set_start(self, index: int) -> None:
        self._check_idle()
        self.graph.validate(index)
        if self.start_index is not None and self.start_index != index:
            self.graph.set_state(self.start_index, NodeState.EMPTY)
        self._retag(index, NodeState.START)
        self.start_index = index

    def set_end(self, index: int) -> None:
        self._check_idle()
        self.graph.validate(index)
        if self.end_index is not None and self.end_index != index:
            self.graph.set_state(self.end_index, NodeState.EMPTY)
        self._retag(index, NodeState.END)
        self.end_index = index

    def clear_cell(self, index: int) -> None:
        self._retag(index, NodeState.EMPTY)

    # -------------------- searching --------------------

    def start(self, algorithm, **options) -> Traversal:
        """Prepare an animated run; drive it with step()."""
        if self.start_index is None or self.end_index is None:
            missing = [name for name, idx in (("start", self.start_index), ("end", self.end_index))
                       if idx is None]
            logger.warning("Rejected run: no %s cell", " or ".join(missing))
            raise MissingEndpointError(f"set the {' and '.join(missing)} cell before running")

        search = make_traversal(algorithm, **options)
        search.init(self.graph, self.start_index, self.end_index)
        self.search = search
        self.last_step = None
        logger.info("%s: %s -> %s", search.name,
                    self.coord_of(self.start_index), self.coord_of(self.end_index))
        return search

    def step(self) -> StepResult:
        if self.search is None:
            return StepResult(status="idle")
        if self.finished:
            return self.last_step

        res = self.search.step()
        if res.finished:
            path = reconstruct_path(self.graph, self.search.destination, self.search.source)
            res.path = path
            res.metrics["path_len"] = len(path)
            if path:
                logger.info("%s found a %d-cell path, cost %s",
                            self.search.name, len(path), self.result.total_cost)
            else:
                logger.info("%s: no path", self.search.name)
        self.last_step = res
        return res

    def run(self, algorithm, **options) -> TraversalResult:
        self.start(algorithm, **options)
        while not self.step().finished:
            pass
        return self.result

    def reset(self) -> None:
        """Fresh lattice of the same size; every edit and result is dropped."""
        build_lattice(self.width, self.height, weight=BASE_WEIGHT, graph=self.graph)
        self.start_index = None
        self.end_index = None
        self.weights.clear()
        self.search = None
        self.last_step = None
        logger.info("Session reset")
