import itertools
import logging
import sys

import networkx as nx
import pytest

from _timer import Timer
from data_schema import Graph
from solution_hamiltonian import (
    HamiltonianCycleSolver,
    SearchLimitReached,
    _PathState,
    can_extend,
    is_hamiltonian_cycle,
    solve_hamiltonian_cycle,
)

SAMPLE_EDGES = [(0, 1), (0, 3), (1, 2), (1, 3), (1, 4), (2, 4), (3, 4)]


def _brute_force_has_cycle(graph: Graph) -> bool:
    n = graph.vertex_count()
    for rest in itertools.permutations(range(1, n)):
        if is_hamiltonian_cycle(graph, [0, *rest, 0]):
            return True
    return False


def test_sample_graph():
    graph = Graph.from_edges(5, SAMPLE_EDGES)
    assert solve_hamiltonian_cycle(graph) == [0, 1, 2, 4, 3, 0]


def test_sample_graph_matrix_form():
    graph = Graph.from_matrix(
        [
            [False, True, False, True, False],
            [True, False, True, True, True],
            [False, True, False, False, True],
            [True, True, False, False, True],
            [False, True, True, True, False],
        ]
    )
    assert solve_hamiltonian_cycle(graph) == [0, 1, 2, 4, 3, 0]


@pytest.mark.parametrize("n", range(3, 10))
def test_complete_graph_always_has_cycle(n):
    graph = Graph.from_networkx(nx.complete_graph(n))
    cycle = solve_hamiltonian_cycle(graph)
    # ascending candidates walk straight through the vertices
    assert cycle == list(range(n)) + [0]


@pytest.mark.parametrize(
    "tree",
    [nx.path_graph(3), nx.path_graph(7), nx.star_graph(5), nx.balanced_tree(2, 3)],
)
def test_tree_has_no_cycle(tree):
    assert solve_hamiltonian_cycle(Graph.from_networkx(tree)) is None


@pytest.mark.parametrize("n", [2, 3, 6])
def test_isolated_vertex_means_no_cycle(n):
    nx_graph = nx.complete_graph(n - 1)
    nx_graph.add_node(n - 1)
    assert solve_hamiltonian_cycle(Graph.from_networkx(nx_graph)) is None


def test_isolated_vertex_found_by_search_as_well():
    # bypass the degree pre-check by starting the search directly
    nx_graph = nx.complete_graph(4)
    nx_graph.add_node(4)
    solver = HamiltonianCycleSolver(Graph.from_networkx(nx_graph))
    solver._timer = Timer()
    solver._path = _PathState(5, 0)
    assert solver._explore(1) is False


def test_disconnected_graph_has_no_cycle():
    graph = Graph.from_edges(6, [(0, 1), (1, 2), (2, 0), (3, 4), (4, 5), (5, 3)])
    assert solve_hamiltonian_cycle(graph) is None


def test_petersen_graph_has_no_cycle():
    assert solve_hamiltonian_cycle(Graph.from_networkx(nx.petersen_graph())) is None


@pytest.mark.parametrize("n", [3, 5, 8])
def test_cycle_graph(n):
    cycle = solve_hamiltonian_cycle(Graph.from_networkx(nx.cycle_graph(n)))
    assert cycle == list(range(n)) + [0]


def test_hypercube_has_cycle():
    nx_graph = nx.convert_node_labels_to_integers(nx.hypercube_graph(4), ordering="sorted")
    graph = Graph.from_networkx(nx_graph)
    assert is_hamiltonian_cycle(graph, solve_hamiltonian_cycle(graph))


def test_single_vertex():
    assert solve_hamiltonian_cycle(Graph.from_matrix([[False]])) is None
    assert solve_hamiltonian_cycle(Graph.from_matrix([[True]])) == [0, 0]


def test_two_vertices():
    assert solve_hamiltonian_cycle(Graph.from_edges(2, [(0, 1)])) == [0, 1, 0]
    assert solve_hamiltonian_cycle(Graph.from_edges(2, [])) is None


def test_duplicate_edges_do_not_change_result():
    graph = Graph.from_edges(5, SAMPLE_EDGES + SAMPLE_EDGES[::-1])
    assert solve_hamiltonian_cycle(graph) == [0, 1, 2, 4, 3, 0]


def test_determinism():
    graph = Graph.from_networkx(nx.gnp_random_graph(9, 0.5, seed=7))
    solver = HamiltonianCycleSolver(graph)
    first = solver.solve()
    assert solver.solve() == first
    assert solve_hamiltonian_cycle(graph) == first


@pytest.mark.parametrize("seed", range(25))
def test_agrees_with_brute_force(seed):
    graph = Graph.from_networkx(nx.gnp_random_graph(7, 0.45, seed=seed))
    cycle = solve_hamiltonian_cycle(graph)
    if cycle is None:
        assert not _brute_force_has_cycle(graph)
    else:
        assert is_hamiltonian_cycle(graph, cycle)
        assert cycle[0] == 0


def test_other_start_vertex():
    graph = Graph.from_edges(5, SAMPLE_EDGES)
    cycle = HamiltonianCycleSolver(graph, start=2).solve()
    assert cycle == [2, 1, 0, 3, 4, 2]


@pytest.mark.parametrize("start", [-1, 5])
def test_invalid_start_vertex(start):
    with pytest.raises(ValueError):
        HamiltonianCycleSolver(Graph.from_edges(5, SAMPLE_EDGES), start=start)


def test_node_limit_raises_instead_of_returning():
    graph = Graph.from_networkx(nx.petersen_graph())
    solver = HamiltonianCycleSolver(graph)
    with pytest.raises(SearchLimitReached):
        solver.solve(node_limit=5)
    assert solver.nodes_explored == 6


def test_node_limit_is_a_timeout():
    assert issubclass(SearchLimitReached, TimeoutError)


def test_time_limit_raises():
    graph = Graph.from_networkx(nx.petersen_graph())
    with pytest.raises(TimeoutError):
        HamiltonianCycleSolver(graph).solve(time_limit=0)


def test_nodes_explored_counts_recursive_entries():
    graph = Graph.from_networkx(nx.complete_graph(4))
    solver = HamiltonianCycleSolver(graph)
    solver.solve()
    # one entry per position 1..N, no backtracking needed
    assert solver.nodes_explored == 4


def test_solver_logs_result(caplog):
    graph = Graph.from_edges(5, SAMPLE_EDGES)
    with caplog.at_level(logging.INFO, logger="HamiltonianCycle-Solver"):
        solve_hamiltonian_cycle(graph)
    assert "Found Hamiltonian cycle [0, 1, 2, 4, 3, 0]" in caplog.text


def test_can_extend():
    graph = Graph.from_edges(5, SAMPLE_EDGES)
    path = _PathState(5, 0)
    path.assign(1, 1)
    assert can_extend(graph, path, 2, 2)
    assert not can_extend(graph, path, 2, 0)  # already on the path
    assert not can_extend(graph, path, 1, 2)  # not adjacent to vertex 0
    assert can_extend(graph, path, 1, 3)


def test_path_state_slots():
    path = _PathState(3, 0)
    assert list(path) == [0, None, None]
    path.assign(1, 2)
    path.assign(2, 1)
    assert path.as_cycle() == [0, 2, 1, 0]
    path.unassign(2)
    assert list(path) == [0, 2, None]


def test_path_state_distinguishes_unassigned_from_vertex_zero():
    path = _PathState(3, 1)
    path.assign(1, 0)
    assert path[1] == 0
    assert path[2] is None


@pytest.mark.parametrize(
    "cycle, expected",
    [
        ([0, 1, 2, 4, 3, 0], True),
        ([0, 1, 2, 4, 3], False),
        ([0, 1, 2, 4, 3, 1], False),
        ([0, 1, 1, 4, 3, 0], False),
        ([0, 3, 2, 4, 1, 0], False),
    ],
)
def test_is_hamiltonian_cycle(cycle, expected):
    graph = Graph.from_edges(5, SAMPLE_EDGES)
    assert is_hamiltonian_cycle(graph, cycle) is expected


def test_recursion_limit_is_restored():
    previous = sys.getrecursionlimit()
    solve_hamiltonian_cycle(Graph.from_edges(5, SAMPLE_EDGES))
    assert sys.getrecursionlimit() == previous


def test_long_cycle_deeper_than_the_recursion_limit():
    previous = sys.getrecursionlimit()
    n = previous + 100
    graph = Graph.from_networkx(nx.cycle_graph(n))
    assert solve_hamiltonian_cycle(graph) == list(range(n)) + [0]
    assert sys.getrecursionlimit() == previous


def test_recursion_limit_is_restored_after_a_budget_stop():
    previous = sys.getrecursionlimit()
    with pytest.raises(SearchLimitReached):
        HamiltonianCycleSolver(Graph.from_networkx(nx.petersen_graph())).solve(node_limit=3)
    assert sys.getrecursionlimit() == previous
