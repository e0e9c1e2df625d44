import random
from typing import Any, Callable, Dict, Optional

import networkx as nx

from data_schema import Graph


def _erdos_renyi(n: int, rng: random.Random, p: float = 0.5, **_: Any) -> nx.Graph:
    return nx.gnp_random_graph(n=n, p=p, seed=rng.randrange(2**32))


def _random_regular(n: int, rng: random.Random, d: int = 3, **_: Any) -> nx.Graph:
    d = max(0, min(d, n - 1))
    if (n * d) % 2 == 1:
        d = max(0, d - 1)
    return nx.random_regular_graph(d=d, n=n, seed=rng.randrange(2**32))


def _watts_strogatz(n: int, rng: random.Random, k: int = 4, p: float = 0.2, **_: Any) -> nx.Graph:
    k = min(max(2, min(k, n - 1)), n)
    return nx.watts_strogatz_graph(n=n, k=k, p=p, seed=rng.randrange(2**32))


def _hypercube(n: int, rng: random.Random, **_: Any) -> nx.Graph:
    # n is the dimension here, the graph has 2**n vertices
    return nx.hypercube_graph(n)


FAMILIES: Dict[str, Callable[..., nx.Graph]] = {
    "complete": lambda n, rng, **_: nx.complete_graph(n),
    "cycle": lambda n, rng, **_: nx.cycle_graph(n),
    "path": lambda n, rng, **_: nx.path_graph(n),
    "star": lambda n, rng, **_: nx.star_graph(n - 1),
    "wheel": lambda n, rng, **_: nx.wheel_graph(n),
    "petersen": lambda n, rng, **_: nx.petersen_graph(),
    "hypercube": _hypercube,
    "erdos_renyi": _erdos_renyi,
    "random_regular": _random_regular,
    "watts_strogatz": _watts_strogatz,
}


def load_instance(name: str) -> Graph:
    with open(name) as f:
        return Graph.model_validate_json(f.read())


class Generator:
    """
    Builds graph instances from named networkx families.
    All randomness comes from one seeded random.Random, so a Generator with a
    fixed seed produces the same sequence of instances every time.
    """

    def __init__(self, seed: Optional[int] = None):
        self.random = random.Random(seed)
        self.instance = None
        self.instance_json = None

    def generate(self, family: str, n: int, **params) -> Graph:
        if family not in FAMILIES:
            raise KeyError(f"Unknown graph family '{family}'. Available: {sorted(FAMILIES)}")
        if n < 1:
            raise ValueError(f"A graph needs at least one vertex, got n={n}.")

        nx_graph = FAMILIES[family](n, self.random, **params)
        # hypercube nodes are bit tuples, relabel them in a stable order
        nx_graph = nx.convert_node_labels_to_integers(nx_graph, ordering="sorted")

        self.instance = Graph.from_networkx(nx_graph)
        self.instance_json = self.instance.model_dump_json(indent=2)
        return self.instance

    def save_instance(self, name: str):
        assert self.instance_json is not None, "Generate an instance first."
        with open(name, "w") as f:
            f.write(self.instance_json)
