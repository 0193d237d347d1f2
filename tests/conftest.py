"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files.
"""

import pytest

from gridpath.core.graph import Graph
from gridpath.core.grid import build_lattice
from gridpath.core.session import Session


@pytest.fixture
def lattice() -> Graph:
    """A 6x4 open lattice with unit weights."""
    return build_lattice(6, 4)


@pytest.fixture
def triangle() -> Graph:
    """
    1 - (3) - 3
    |        /
   (1)    (1)
    |    /
    2
    Node 0 is an isolated spare so indices match the drawing.
    """
    g = Graph(4)
    g.add_edge(1, 3, 3)
    g.add_edge(1, 2, 1)
    g.add_edge(2, 3, 1)
    return g


@pytest.fixture
def session() -> Session:
    """A 7x5 session with nothing painted."""
    return Session.build(7, 5)


@pytest.fixture
def split_session() -> Session:
    """
    7x5 session cut in two by an obstacle wall on column 3,
    start on the left half, end on the right half.
    """
    s = Session.build(7, 5)
    for row in range(5):
        s.set_obstacle(s.index_of(3, row))
    s.set_start(s.index_of(0, 2))
    s.set_end(s.index_of(6, 2))
    return s
