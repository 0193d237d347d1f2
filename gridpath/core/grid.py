# gridpath/core/grid.py
#!/usr/bin/env python3
"""
Lattice construction: the only place that knows the graph is a grid.

Cells are numbered row-major: index = row * width + col.
"""

from typing import Optional
import logging

from gridpath.core.graph import Graph
from gridpath.core.types import Cell

logger = logging.getLogger(__name__)


def index_of(col: int, row: int, width: int) -> int:
    return row * width + col


def coord_of(index: int, width: int) -> Cell:
    return index % width, index // width


def build_lattice(width: int, height: int, weight: int = 1, graph: Optional[Graph] = None) -> Graph:
    """
    4-connected grid with uniform edge weight.

    Each cell links to its right and lower neighbour, so every node's adjacency
    list ends up ordered up, left, right, down. Pass `graph` to rebuild an
    existing (reset) graph of the same size in place.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"grid must be at least 1x1, got {width}x{height}")

    n = width * height
    if graph is None:
        graph = Graph(n)
    elif graph.node_count != n:
        raise ValueError(f"graph has {graph.node_count} nodes, lattice needs {n}")
    else:
        graph.reset()

    for row in range(height):
        for col in range(width):
            i = index_of(col, row, width)
            if col < width - 1:
                graph.add_edge(i, index_of(col + 1, row, width), weight)
            if row < height - 1:
                graph.add_edge(i, index_of(col, row + 1, width), weight)

    logger.debug("built %dx%d lattice: %d nodes, %d edges", width, height, n, graph.edge_count)
    return graph
