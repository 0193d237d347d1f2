"""
Configuration for the grid sandbox.

Defaults live here as module constants. Each can be overridden with an
environment variable, and a matching --flag=value on the command line wins
over the environment.
"""

import logging
import os
import sys
from typing import List, Optional, Tuple

from gridpath.core.types import Algorithm

# =============================================================================
# Grid
# =============================================================================

# Window size in pixels; the lattice is window // cell
WINDOW_SIZE: Tuple[int, int] = (1280, 720)
CELL_SIZE = 20

# Edge weights
BASE_WEIGHT = 1
WEIGHTED_COST = 2

# =============================================================================
# Search
# =============================================================================

DEFAULT_ALGORITHM = Algorithm.BFS

# Alt / Tab cycles through this order
ALGORITHM_CYCLE = (Algorithm.BFS, Algorithm.DIJKSTRA, Algorithm.DFS)

# Animation speed bounds (expansions per second)
STEPS_PER_SEC = 30
MAX_STEPS_PER_SEC = 240

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# =============================================================================
# Overrides
# =============================================================================

ENV_PREFIX = "GRIDPATH_"


def _lookup(name: str, argv: Optional[List[str]] = None) -> Optional[str]:
    """--name=value from argv beats GRIDPATH_NAME from the environment."""
    value = os.getenv(ENV_PREFIX + name.upper())
    for arg in (sys.argv[1:] if argv is None else argv):
        if arg.startswith(f"--{name}="):
            value = arg.split("=", 1)[1]
    return value


def resolve_algorithm(argv: Optional[List[str]] = None) -> Algorithm:
    raw = _lookup("algo", argv)
    if raw is None:
        return DEFAULT_ALGORITHM
    return Algorithm.parse(raw)


def resolve_cell_size(argv: Optional[List[str]] = None) -> int:
    raw = _lookup("cell", argv)
    if raw is None:
        return CELL_SIZE
    size = int(raw)
    if size < 4:
        raise ValueError(f"cell size must be at least 4 px, got {size}")
    return size


def resolve_window_size(argv: Optional[List[str]] = None) -> Tuple[int, int]:
    raw = _lookup("size", argv)
    if raw is None:
        return WINDOW_SIZE
    try:
        w, h = (int(part) for part in raw.lower().split("x", 1))
    except ValueError:
        raise ValueError(f"window size must look like 1280x720, got {raw!r}") from None
    return w, h


def resolve_grid_shape(argv: Optional[List[str]] = None) -> Tuple[int, int]:
    """Lattice width/height in cells for the resolved window and cell size."""
    w, h = resolve_window_size(argv)
    cell = resolve_cell_size(argv)
    return max(1, w // cell), max(1, h // cell)


def resolve_log_level(argv: Optional[List[str]] = None) -> int:
    raw = (_lookup("log", argv) or LOG_LEVEL).upper()
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {raw!r}")
    return level


def configure_logging(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=resolve_log_level(argv), format=LOG_FORMAT)
