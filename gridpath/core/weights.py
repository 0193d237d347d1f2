# gridpath/core/weights.py
#!/usr/bin/env python3
import logging

from gridpath.core.graph import Graph

logger = logging.getLogger(__name__)


def update_node_weight(graph: Graph, node: int, weight: int) -> int:
    """
    Set every edge incident to `node` to `weight`, on both sides of the edge.

    For each entry node→v that differs, the entry is rewritten together with
    every mirrored entry v→node, so parallel edges stay paired. Entries already
    at `weight` are skipped, which makes repeated calls no-ops.

    Returns the number of adjacency entries rewritten.
    """
    graph.validate(node)
    if weight < 0:
        raise ValueError(f"edge weight must be non-negative, got {weight}")

    changed = 0
    for edge in graph.adjacency[node]:
        if edge.weight == weight:
            continue
        edge.weight = weight
        changed += 1

    # mirrored side
    for v in {edge.neighbor for edge in graph.adjacency[node]}:
        for back in graph.adjacency[v]:
            if back.neighbor == node and back.weight != weight:
                back.weight = weight
                changed += 1

    logger.debug("node %d -> weight %d (%d entries rewritten)", node, weight, changed)
    return changed
