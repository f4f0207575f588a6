"""Graph data structures: index-addressed vertices with probability-weighted edges."""

from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field

import numpy as np
import scipy.sparse

Symbol = Hashable


@dataclass(frozen=True, slots=True)
class Edge:
    """Directed transition to the vertex at `target` with a given probability."""

    target: int  # index into Graph.vertices
    probability: float


@dataclass(frozen=True, slots=True)
class Vertex:
    """One distinct symbol and its outgoing edges, ascending by probability."""

    symbol: Symbol
    edges: tuple[Edge, ...] = ()

    @property
    def is_terminal(self) -> bool:
        """True for dead-end vertices that have no outgoing edges."""
        return not self.edges


@dataclass(frozen=True)
class Graph:
    """Immutable Markov chain graph shared by any number of steppers.

    Vertices live in one tuple and edges refer to them by position, so the
    structure holds no reference cycles. A symbol -> index map is built once
    on construction for constant-time lookup. Omits slots=True so the cached
    index can be set from __post_init__.
    """

    vertices: tuple[Vertex, ...] = ()
    _index: dict[Symbol, int] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        index: dict[Symbol, int] = {}
        for i, vertex in enumerate(self.vertices):
            # Keep the first occurrence; duplicates are reported by validation
            index.setdefault(vertex.symbol, i)
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self.vertices)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._index

    def find(self, symbol: Symbol) -> int | None:
        """Return the index of the vertex holding `symbol`, or None if absent."""
        return self._index.get(symbol)

    def vertex(self, index: int) -> Vertex:
        """Fetch a vertex by index.

        Raises:
            IndexError: If index is outside [0, len(graph)).
        """
        if not 0 <= index < len(self.vertices):
            raise IndexError(
                f"vertex index {index} out of range for graph with "
                f"{len(self.vertices)} vertices"
            )
        return self.vertices[index]

    @property
    def symbols(self) -> tuple[Symbol, ...]:
        return tuple(v.symbol for v in self.vertices)

    @property
    def edge_count(self) -> int:
        return sum(len(v.edges) for v in self.vertices)

    @property
    def terminal_count(self) -> int:
        return sum(1 for v in self.vertices if v.is_terminal)

    def to_adjacency(self) -> scipy.sparse.csr_matrix:
        """Transition matrix with P[i, j] = probability of edge i -> j.

        Row order matches vertex order. Terminal vertices have all-zero rows.
        """
        n = len(self.vertices)
        rows = np.fromiter(
            (i for i, v in enumerate(self.vertices) for _ in v.edges),
            dtype=np.int64,
            count=self.edge_count,
        )
        cols = np.fromiter(
            (e.target for v in self.vertices for e in v.edges),
            dtype=np.int64,
            count=self.edge_count,
        )
        data = np.fromiter(
            (e.probability for v in self.vertices for e in v.edges),
            dtype=np.float64,
            count=self.edge_count,
        )
        return scipy.sparse.csr_matrix((data, (rows, cols)), shape=(n, n))
