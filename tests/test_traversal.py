"""
Unit tests for BFS, DFS and Dijkstra.
"""

import pytest

from gridpath.core.errors import GraphAlreadyTraversedError
from gridpath.core.graph import Graph
from gridpath.core.grid import build_lattice, index_of
from gridpath.core.path import reconstruct_path
from gridpath.core.session import Session
from gridpath.core.traversal import (
    BreadthFirstSearch, DepthFirstSearch, Dijkstra, make_traversal, traverse,
)
from gridpath.core.types import Algorithm, INFINITY, NO_PARENT, NodeState

ALL_ALGORITHMS = [Algorithm.BFS, Algorithm.DFS, Algorithm.DIJKSTRA]


def _maze() -> Session:
    """7x5 grid with a few obstacles and a weighted strip."""
    s = Session.build(7, 5)
    for col, row in [(2, 0), (2, 1), (2, 2), (4, 2), (4, 3), (4, 4)]:
        s.set_obstacle(s.index_of(col, row))
    for col, row in [(3, 3), (3, 4), (5, 0)]:
        s.set_weighted(s.index_of(col, row), True, 4)
    s.set_start(s.index_of(0, 0))
    s.set_end(s.index_of(6, 4))
    return s


class TestDijkstra:
    """Test cost-optimal search."""

    def test_triangle_takes_cheaper_detour(self, triangle):
        """1->2->3 costs 2; the direct 1->3 edge costs 3."""
        result = traverse(triangle, Algorithm.DIJKSTRA, 1, 3)
        assert result.found
        assert result.distance[3] == 2
        assert result.total_cost == 2
        assert reconstruct_path(triangle, 3, 1) == [1, 2, 3]

    def test_avoids_weighted_strip(self):
        """A 4-hop route through cost-5 cells loses to a 6-cost detour."""
        s = Session.build(5, 3)
        for col in (1, 2, 3):
            s.set_weighted(s.index_of(col, 1), True, 5)
        s.set_start(s.index_of(0, 1))
        s.set_end(s.index_of(4, 1))
        result = s.run(Algorithm.DIJKSTRA)
        assert result.total_cost == 6
        assert all(s.weight_of(i) == 1 for i in s.path_indices())
        assert all(s.state_of(s.index_of(col, 1)) is NodeState.WEIGHTED for col in (1, 2, 3))

    def test_heap_and_scan_agree(self):
        """Both frontier strategies give identical parent and distance."""
        heap_s, scan_s = _maze(), _maze()
        heap = heap_s.run(Algorithm.DIJKSTRA, frontier="heap")
        scan = scan_s.run(Algorithm.DIJKSTRA, frontier="scan")
        assert heap.parent == scan.parent
        assert heap.distance == scan.distance
        assert heap_s.path_indices() == scan_s.path_indices()

    @pytest.mark.parametrize("frontier", ["heap", "scan"])
    def test_equal_cost_tie_goes_to_lower_index(self, frontier):
        """0->1->3 and 0->2->3 both cost 2; node 1 is finalized first and becomes 3's parent."""
        g = Graph(4)
        # node 2 listed first in every adjacency list, so list order alone would pick it
        g.add_edge(0, 2, 1)
        g.add_edge(0, 1, 1)
        g.add_edge(2, 3, 1)
        g.add_edge(1, 3, 1)
        result = traverse(g, Algorithm.DIJKSTRA, 0, 3, frontier=frontier)
        assert result.distance[3] == 2
        assert result.parent[3] == 1
        assert reconstruct_path(g, 3, 0) == [0, 1, 3]

    def test_unknown_frontier_rejected(self):
        with pytest.raises(ValueError):
            Dijkstra(frontier="fibonacci")

    def test_uniform_cost_matches_manhattan(self):
        g = build_lattice(6, 4)
        result = traverse(g, Algorithm.DIJKSTRA, index_of(0, 0, 6), index_of(5, 3, 6))
        assert result.total_cost == 8


class TestBreadthFirst:
    """Test hop-optimal search."""

    @pytest.mark.parametrize("src, dst", [((0, 0), (5, 3)), ((2, 1), (2, 1 + 2)), ((5, 0), (0, 3)),
                                          ((3, 2), (0, 0))])
    def test_hop_count_is_manhattan(self, src, dst):
        """Open uniform lattice: path hops == Manhattan distance."""
        s = Session.build(6, 4)
        s.set_start(s.index_of(*src))
        s.set_end(s.index_of(*dst))
        s.run(Algorithm.BFS)
        hops = len(s.path_indices()) - 1
        assert hops == abs(src[0] - dst[0]) + abs(src[1] - dst[1])

    def test_ignores_weight_for_order(self, triangle):
        """BFS takes the one-hop edge even though it costs more."""
        result = traverse(triangle, Algorithm.BFS, 1, 3)
        assert result.found
        assert result.parent[3] == 1
        assert result.distance[3] == 3
        assert reconstruct_path(triangle, 3, 1) == [1, 3]

    def test_straight_through_weighted_strip(self):
        s = Session.build(5, 3)
        for col in (1, 2, 3):
            s.set_weighted(s.index_of(col, 1), True, 5)
        s.set_start(s.index_of(0, 1))
        s.set_end(s.index_of(4, 1))
        result = s.run(Algorithm.BFS)
        assert s.path_indices() == [s.index_of(c, 1) for c in range(5)]
        assert result.total_cost == 20


class TestDepthFirst:
    """Test depth-first search."""

    def test_deterministic(self):
        a, b = _maze(), _maze()
        a.run(Algorithm.DFS)
        b.run(Algorithm.DFS)
        assert a.path_indices() == b.path_indices()
        assert a.path_indices()

    def test_path_is_connected(self):
        s = _maze()
        s.run(Algorithm.DFS)
        path = s.path_indices()
        for u, v in zip(path, path[1:]):
            assert v in [n for n, _ in s.graph.neighbors(u)]

    def test_follows_adjacency_order(self):
        """From the top-left corner DFS goes right first (up/left do not exist)."""
        s = Session.build(3, 3)
        s.set_start(s.index_of(0, 0))
        s.set_end(s.index_of(2, 0))
        s.run(Algorithm.DFS)
        assert s.path_indices() == [0, 1, 2]

    def test_long_corridor_without_recursion(self):
        """A chain far deeper than the interpreter recursion limit."""
        n = 5000
        g = Graph(n)
        for i in range(n - 1):
            g.add_edge(i, i + 1)
        result = traverse(g, Algorithm.DFS, 0, n - 1)
        assert result.found
        assert result.distance[n - 1] == n - 1
        assert len(reconstruct_path(g, n - 1, 0)) == n


@pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
class TestCommonContract:
    """Properties every strategy must satisfy."""

    def test_obstacles_never_reached(self, algorithm):
        s = _maze()
        result = s.run(algorithm)
        assert result.found
        for i in range(s.graph.node_count):
            if s.state_of(i) is NodeState.OBSTACLE:
                assert result.distance[i] == INFINITY
                assert result.parent[i] == NO_PARENT
                assert i not in s.path_indices()

    def test_no_path_on_split_grid(self, algorithm, split_session):
        result = split_session.run(algorithm)
        assert not result.found
        assert split_session.path_indices() == []
        assert not any(split_session.state_of(i) is NodeState.PATH
                       for i in range(split_session.graph.node_count))
        for row in range(5):
            for col in range(4, 7):
                assert result.distance[split_session.index_of(col, row)] == INFINITY

    def test_source_bookkeeping(self, algorithm):
        s = _maze()
        result = s.run(algorithm)
        assert result.distance[s.start_index] == 0
        assert result.parent[s.start_index] == NO_PARENT

    def test_endpoints_keep_markers(self, algorithm):
        s = _maze()
        s.run(algorithm)
        path = s.path_indices()
        assert path[0] == s.start_index and path[-1] == s.end_index
        assert s.state_of(s.start_index) is NodeState.START
        assert s.state_of(s.end_index) is NodeState.END
        assert all(s.state_of(i) is NodeState.PATH for i in path[1:-1])

    def test_second_run_rejected(self, algorithm, lattice):
        traverse(lattice, algorithm, 0, 23)
        with pytest.raises(GraphAlreadyTraversedError):
            traverse(lattice, algorithm, 0, 23)

    def test_step_protocol(self, algorithm, lattice):
        search = make_traversal(algorithm)
        assert search.step().status == "idle"
        search.init(lattice, 0, 23)
        first = search.step()
        assert first.status == "running"
        assert first.closed == [0]
        res = first
        while not res.finished:
            res = search.step()
        assert res.status == "done"
        assert res.metrics["algo"] == algorithm.value
        assert search.step().status == "done"

    def test_reset_mid_run_replays(self, algorithm, lattice):
        """reset() after a few steps restarts the same search from scratch."""
        search = make_traversal(algorithm)
        search.init(lattice, 0, 23)
        for _ in range(5):
            search.step()
        search.reset()
        assert lattice.result is search.result
        assert search.popped_count == 0
        while not search.step().finished:
            pass

        fresh = build_lattice(6, 4)
        expected = traverse(fresh, algorithm, 0, 23)
        assert search.result.found
        assert search.result.parent == expected.parent
        assert search.result.distance == expected.distance
        assert search.result.visited == expected.visited
        assert lattice.state == fresh.state

    def test_reset_after_finish_replays(self, algorithm, lattice):
        search = make_traversal(algorithm)
        search.init(lattice, 0, 23)
        while not search.step().finished:
            pass
        first = search.result
        search.reset()
        assert first is not search.result
        assert all(lattice.state_of(n) is NodeState.EMPTY for n in range(lattice.node_count))
        while not search.step().finished:
            pass
        assert search.result.parent == first.parent

    def test_reset_leaves_other_result_alone(self, algorithm, lattice):
        """A search whose result was replaced cannot take over the graph."""
        search = make_traversal(algorithm)
        search.init(lattice, 0, 23)
        lattice.reset()
        other = traverse(build_lattice(6, 4, graph=lattice), Algorithm.BFS, 5, 6)
        with pytest.raises(GraphAlreadyTraversedError):
            search.reset()
        assert lattice.result is other

    def test_empty_cells_tagged_visited(self, algorithm, lattice):
        lattice.set_state(0, NodeState.START)
        lattice.set_state(23, NodeState.END)
        result = traverse(lattice, algorithm, 0, 23)
        for node in result.visited:
            if node not in (0, 23):
                assert lattice.state_of(node) is NodeState.VISITED


def test_registry():
    assert isinstance(make_traversal("bfs"), BreadthFirstSearch)
    assert isinstance(make_traversal(Algorithm.DFS), DepthFirstSearch)
    assert isinstance(make_traversal("Dijkstra"), Dijkstra)
    with pytest.raises(ValueError):
        make_traversal("astar")
