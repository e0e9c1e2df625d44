"""
Command line entry point: read a graph, search a Hamiltonian cycle, report it.

    python solve_instance.py instances/graph.json --output solution.json
    python solve_instance.py --demo
    python solve_instance.py --generate erdos_renyi --vertices 12 --seed 3

Exit status: 0 cycle found, 1 no cycle, 2 invalid graph, 3 budget reached.
"""
import argparse
import logging
import math
import sys
from typing import List, Optional

import networkx as nx
from pydantic import ValidationError

from data_schema import Graph, InvalidGraph, Solution
from instance_generator import FAMILIES, Generator, load_instance
from solution_hamiltonian import HamiltonianCycleSolver, is_hamiltonian_cycle

EXIT_FOUND = 0
EXIT_NO_CYCLE = 1
EXIT_INVALID = 2
EXIT_BUDGET = 3

# (0)---(1)---(2)
#  |   /  \   |
#  |  /    \  |
#  | /      \ |
# (3)-------(4)
DEMO_EDGES = [(0, 1), (0, 3), (1, 2), (1, 3), (1, 4), (2, 4), (3, 4)]


def demo_graph() -> Graph:
    return Graph.from_edges(5, DEMO_EDGES)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Find a Hamiltonian cycle by backtracking.")
    source = ap.add_mutually_exclusive_group(required=True)
    source.add_argument("instance", nargs="?", help="JSON file with an adjacency matrix")
    source.add_argument("--demo", action="store_true", help="solve the built-in 5 vertex example")
    source.add_argument("--generate", choices=sorted(FAMILIES), help="solve a generated graph of this family")
    ap.add_argument("--vertices", type=int, default=10, help="vertex count for --generate")
    ap.add_argument("--seed", type=int, default=None, help="random seed for --generate")
    ap.add_argument("--start", type=int, default=0, help="start vertex of the cycle")
    ap.add_argument("--time-limit", type=float, default=math.inf, help="time limit in seconds")
    ap.add_argument("--node-limit", type=int, default=None, help="maximum number of search nodes")
    ap.add_argument("--output", default=None, help="write the solution as JSON to this file")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def _read_graph(args: argparse.Namespace) -> Graph:
    if args.demo:
        return demo_graph()
    if args.generate:
        return Generator(args.seed).generate(args.generate, args.vertices)
    return load_instance(args.instance)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    logger = logging.getLogger("HamiltonianCycle-Solver")

    try:
        graph = _read_graph(args)
    except (InvalidGraph, ValidationError, ValueError, nx.NetworkXError) as e:
        logger.error(f"Invalid graph: {e}")
        return EXIT_INVALID
    except OSError as e:
        logger.error(f"Cannot read instance: {e}")
        return EXIT_INVALID

    try:
        solver = HamiltonianCycleSolver(graph, start=args.start, logger=logger)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_INVALID

    try:
        cycle = solver.solve(time_limit=args.time_limit, node_limit=args.node_limit)
    except TimeoutError as e:
        logger.warning(f"Undecided: {e}")
        return EXIT_BUDGET

    if cycle is None:
        print("No Hamiltonian cycle exists.")
        return EXIT_NO_CYCLE

    # Verify the solution
    assert is_hamiltonian_cycle(graph, cycle), "The solver returned an invalid cycle!"
    solution = Solution(cycle=cycle)
    print("Hamiltonian cycle:", " -> ".join(str(v) for v in solution.cycle))

    if args.output:
        # Dump the solution to a file
        with open(args.output, "w") as f:
            f.write(solution.model_dump_json(indent=2))
    return EXIT_FOUND


if __name__ == "__main__":
    sys.exit(main())
