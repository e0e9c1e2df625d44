"""
Backtracking search for a Hamiltonian cycle in an undirected graph.

The path is grown one vertex at a time from a fixed start vertex. A vertex may
extend the path if it is adjacent to the last placed vertex and not yet on the
path. When no vertex fits, the last assignment is undone and the next
candidate is tried. Candidates are tried in increasing index order, so the
returned cycle is deterministic.
"""
import logging
import math
import sys
from typing import Iterator, List, Optional, Sequence

from _timer import Timer
from data_schema import Graph


class SearchLimitReached(TimeoutError):
    """
    The search visited more nodes than its node limit allows.
    """


class _PathState:
    """
    The partial cycle under construction: one slot per vertex, `None` for
    slots that are not assigned yet. Assignments are pushed and popped in
    stack order by the search.
    """

    def __init__(self, n: int, start: int) -> None:
        self._slots: List[Optional[int]] = [None] * n
        self._slots[0] = start

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, position: int) -> Optional[int]:
        return self._slots[position]

    def __iter__(self) -> Iterator[Optional[int]]:
        return iter(self._slots)

    def assign(self, position: int, vertex: int) -> None:
        assert position > 0, "The start vertex is fixed."
        assert self._slots[position] is None, f"Slot {position} is already assigned."
        self._slots[position] = vertex

    def unassign(self, position: int) -> None:
        assert position > 0, "The start vertex is fixed."
        self._slots[position] = None

    def as_cycle(self) -> List[int]:
        """
        Return the completed path with the start vertex appended to close it.
        """
        assert all(v is not None for v in self._slots), "The path is incomplete."
        return list(self._slots) + [self._slots[0]]


def can_extend(graph: Graph, path: Sequence[Optional[int]], position: int, candidate: int) -> bool:
    """
    Check whether `candidate` may be placed at `position`, given that
    path[0..position-1] is already assigned.
    """
    if not graph.adjacent(path[position - 1], candidate):
        return False
    for i in range(position):
        if path[i] == candidate:
            return False
    return True


def _stack_depth() -> int:
    frame, depth = sys._getframe(), 0
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return depth


def is_hamiltonian_cycle(graph: Graph, cycle: Sequence[int]) -> bool:
    """
    Check that `cycle` visits every vertex of `graph` exactly once, returns to
    its first vertex, and only uses edges of the graph.
    """
    n = graph.vertex_count()
    if len(cycle) != n + 1 or cycle[0] != cycle[-1]:
        return False
    if sorted(cycle[:-1]) != list(range(n)):
        return False
    return all(graph.adjacent(u, v) for u, v in zip(cycle, cycle[1:]))


class HamiltonianCycleSolver:
    def __init__(self, graph: Graph, start: int = 0, logger: Optional[logging.Logger] = None) -> None:
        """
        Creates a backtracking solver for the Hamiltonian cycle problem on `graph`.
        The search always starts at `start` (vertex 0 unless stated otherwise).
        In an undirected graph every Hamiltonian cycle can be rotated to begin
        at any vertex, so fixing the start loses no solutions and avoids
        exploring the same cycle once per rotation.
        """
        if not 0 <= start < graph.vertex_count():
            msg = f"Start vertex {start} is not a vertex of the graph."
            raise ValueError(msg)
        self._logger = logger or logging.getLogger("HamiltonianCycle-Solver")
        self.graph = graph
        self.start = start
        self.nodes_explored = 0
        self._path: Optional[_PathState] = None
        self._timer: Optional[Timer] = None
        self._node_limit: Optional[int] = None

    def _has_low_degree_vertex(self) -> bool:
        # Every vertex of a cycle on at least 3 vertices needs two distinct neighbors.
        n = self.graph.vertex_count()
        if n < 3:
            return False
        for u in range(n):
            if self.graph.degree(u) < 2:
                self._logger.info(f"Vertex {u} has degree {self.graph.degree(u)}, no Hamiltonian cycle possible.")
                return True
        return False

    def _check_budget(self) -> None:
        self.nodes_explored += 1
        self._timer.check()  # throws TimeoutError if time is up
        if self._node_limit is not None and self.nodes_explored > self._node_limit:
            msg = f"Node limit of {self._node_limit} reached."
            raise SearchLimitReached(msg)

    def _explore(self, position: int) -> bool:
        self._check_budget()
        path = self._path
        n = self.graph.vertex_count()

        if position == n:
            # all vertices are placed, the last one has to close the cycle
            return self.graph.adjacent(path[n - 1], path[0])

        for candidate in range(n):
            if candidate == self.start:
                continue
            if can_extend(self.graph, path, position, candidate):
                path.assign(position, candidate)
                if self._explore(position + 1):
                    return True
                path.unassign(position)

        self._logger.debug(f"Dead end at position {position} after vertex {path[position - 1]}.")
        return False

    def _raise_recursion_limit(self) -> int:
        """
        Make room for one frame per position on top of the current stack.
        Returns the previous limit, so it can be restored.
        """
        previous = sys.getrecursionlimit()
        needed = _stack_depth() + self.graph.vertex_count() + 50
        if previous < needed:
            sys.setrecursionlimit(needed)
        return previous

    def solve(self, time_limit: float = math.inf, node_limit: Optional[int] = None) -> Optional[List[int]]:
        """
        Search for a Hamiltonian cycle.
        Returns the cycle as a list of N+1 vertices, starting and ending at the
        start vertex, or None if the graph has no Hamiltonian cycle.
        Raises TimeoutError (or SearchLimitReached, for `node_limit`) if the
        budget runs out before the search is decided.
        """
        n = self.graph.vertex_count()
        self.nodes_explored = 0
        self._timer = Timer(time_limit)
        self._node_limit = node_limit
        self._logger.info(f"Searching a Hamiltonian cycle on {n} vertices, starting at vertex {self.start}.")

        if self._has_low_degree_vertex():
            return None

        previous_limit = self._raise_recursion_limit()
        self._path = _PathState(n, self.start)
        try:
            found = self._explore(1)
        except TimeoutError:
            self._logger.info(f"Search stopped after {self.nodes_explored} nodes ({self._timer.elapsed():.4f}s).")
            raise
        finally:
            path, self._path = self._path, None
            sys.setrecursionlimit(previous_limit)

        if not found:
            self._logger.info(f"No Hamiltonian cycle exists ({self.nodes_explored} nodes, {self._timer.elapsed():.4f}s).")
            return None  # A Hamiltonian Cycle doesnt exist

        cycle = path.as_cycle()
        assert is_hamiltonian_cycle(self.graph, cycle)
        self._logger.info(f"Found Hamiltonian cycle {cycle} ({self.nodes_explored} nodes, {self._timer.elapsed():.4f}s).")
        return cycle


def solve_hamiltonian_cycle(graph: Graph) -> Optional[List[int]]:
    """
    Return a Hamiltonian cycle of `graph` starting and ending at vertex 0,
    or None if there is none.
    """
    return HamiltonianCycleSolver(graph).solve()
