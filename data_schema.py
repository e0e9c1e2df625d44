from collections import abc
from typing import Any, Iterable, Iterator, List, Sequence, Tuple

import networkx as nx
from pydantic import BaseModel, model_validator


class InvalidGraph(Exception):
    """
    Raised when an adjacency matrix does not describe a valid undirected graph
    (empty, not square or not symmetric).
    """


class Graph(BaseModel):
    """
    An undirected graph on the vertices 0..N-1, stored as an N x N boolean
    adjacency matrix. Adjacency queries are O(1).
    """
    adjacency: Tuple[Tuple[bool, ...], ...]

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _check_rows(cls, data: Any) -> Any:
        if isinstance(data, dict) and "adjacency" in data:
            adjacency = data["adjacency"]
            if not isinstance(adjacency, (list, tuple)):
                raise InvalidGraph("Adjacency matrix must be a list of rows.")
            for u, row in enumerate(adjacency):
                if not isinstance(row, (list, tuple)):
                    raise InvalidGraph(f"Adjacency matrix is not square: row {u} is not a list.")
        return data

    @model_validator(mode="after")
    def _check_adjacency(self) -> "Graph":
        n = len(self.adjacency)
        if n < 1:
            raise InvalidGraph("A graph needs at least one vertex.")
        for u, row in enumerate(self.adjacency):
            if len(row) != n:
                raise InvalidGraph(f"Adjacency matrix is not square: row {u} has {len(row)} entries, expected {n}.")
        for u in range(n):
            for v in range(u + 1, n):
                if self.adjacency[u][v] != self.adjacency[v][u]:
                    raise InvalidGraph(f"Adjacency matrix is not symmetric at ({u}, {v}).")
        return self

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[Any]]) -> "Graph":
        rows = []
        for u, row in enumerate(matrix):
            if isinstance(row, (str, bytes)) or not isinstance(row, abc.Sequence):
                raise InvalidGraph(f"Adjacency matrix is not square: row {u} is not a sequence.")
            rows.append(list(row))
        return cls(adjacency=rows)

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[Tuple[int, int]]) -> "Graph":
        """
        Build a graph on n vertices from an edge list.
        Duplicate edges are merged, self-loops are rejected.
        """
        if n < 1:
            raise InvalidGraph("A graph needs at least one vertex.")
        matrix = [[False] * n for _ in range(n)]
        for u, v in edges:
            if not (0 <= u < n and 0 <= v < n):
                raise InvalidGraph(f"Edge ({u}, {v}) has an endpoint outside 0..{n - 1}.")
            if u == v:
                raise InvalidGraph(f"Self-loop on vertex {u}.")
            matrix[u][v] = matrix[v][u] = True
        return cls(adjacency=matrix)

    @classmethod
    def from_networkx(cls, graph: nx.Graph) -> "Graph":
        """
        Convert a networkx graph. Vertex i is the i-th node in graph.nodes.
        """
        if graph.is_directed():
            raise InvalidGraph("Only undirected graphs are supported.")
        index = {node: i for i, node in enumerate(graph.nodes)}
        return cls.from_edges(len(index), ((index[u], index[v]) for u, v in graph.edges))

    def to_networkx(self) -> nx.Graph:
        graph = nx.Graph()
        graph.add_nodes_from(range(self.vertex_count()))
        graph.add_edges_from(self.edges())
        return graph

    def vertex_count(self) -> int:
        return len(self.adjacency)

    def _check_vertex(self, u: int) -> None:
        if not 0 <= u < len(self.adjacency):
            raise IndexError(f"Vertex {u} is outside 0..{len(self.adjacency) - 1}.")

    def adjacent(self, u: int, v: int) -> bool:
        self._check_vertex(u)
        self._check_vertex(v)
        return self.adjacency[u][v]

    def neighbors(self, u: int) -> List[int]:
        self._check_vertex(u)
        return [v for v, is_edge in enumerate(self.adjacency[u]) if is_edge and v != u]

    def degree(self, u: int) -> int:
        return len(self.neighbors(u))

    def edges(self) -> Iterator[Tuple[int, int]]:
        """
        Iterate over every undirected edge once, as (u, v) with u < v.
        """
        n = self.vertex_count()
        for u in range(n):
            for v in range(u + 1, n):
                if self.adjacency[u][v]:
                    yield u, v


class Solution(BaseModel):
    """
    A Hamiltonian cycle in visiting order. The start vertex appears at both ends.
    """
    cycle: List[int]

    class Config:
        frozen = True

    def edges(self) -> List[Tuple[int, int]]:
        return list(zip(self.cycle, self.cycle[1:]))
