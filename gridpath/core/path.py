# gridpath/core/path.py
#!/usr/bin/env python3
from typing import List, Optional
import logging

from gridpath.core.graph import Graph
from gridpath.core.types import NO_PARENT, NodeState, TraversalResult

logger = logging.getLogger(__name__)


def reconstruct_path(graph: Graph, destination: int, source: int,
                     result: Optional[TraversalResult] = None) -> List[int]:
    """
    Walk parent pointers from `destination` back to `source`.

    Returns the route in source -> destination order, both ends included, and
    retags every intermediate cell PATH. Returns [] (and tags nothing) when the
    destination was never reached, when the chain breaks on NO_PARENT, or when
    it loops for longer than the graph has nodes.
    """
    graph.validate(destination)
    graph.validate(source)
    result = result if result is not None else graph.result
    if result is None or not result.found:
        return []

    path: List[int] = []
    node = destination
    while node != source:
        if node == NO_PARENT or len(path) >= graph.node_count:
            logger.warning("parent chain from %d does not lead back to %d", destination, source)
            return []
        path.append(node)
        node = result.parent[node]
    path.append(source)
    path.reverse()

    for node in path[1:-1]:
        graph.set_state(node, NodeState.PATH)
    graph.set_state(source, NodeState.START)
    graph.set_state(destination, NodeState.END)

    result.path = list(path)
    return path
