"""Transition-frequency accumulation and conversion to a probability graph.

GraphConstructor is the only mutable stage of the pipeline. It records
observed (current, next) symbol transitions and is consumed exactly once by
construct(), which normalizes counts into an immutable Graph:

1. Every registered source symbol becomes a vertex, in registration order.
2. Symbols seen only as successors become terminal vertices with no edges,
   appended after the source vertices in first-discovery order.
3. Each vertex's edge probabilities are count / total and are sorted
   ascending, which is the order the stepper's roulette wheel expects.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from markovgen.config.settings import SEQUENCE_END, SEQUENCE_START
from markovgen.graph.types import Edge, Graph, Symbol, Vertex

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ProtoVertex:
    """Construction-only vertex: a symbol and its successor counts.

    successor_counts preserves first-observation order, which is the
    tie-break order for equally probable edges.
    """

    symbol: Symbol
    successor_counts: dict[Symbol, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.successor_counts.values())


class GraphConstructor:
    """Accumulates symbol-to-symbol transition counts."""

    def __init__(self) -> None:
        self._vertices: dict[Symbol, ProtoVertex] = {}
        self._transition_count = 0
        self._consumed = False

    def __len__(self) -> int:
        return len(self._vertices)

    @property
    def transition_count(self) -> int:
        return self._transition_count

    def register_sequence(self, current: Symbol, next_symbol: Symbol) -> None:
        """Record one observed transition current -> next_symbol."""
        self._check_not_consumed()
        proto = self._vertices.get(current)
        if proto is None:
            proto = ProtoVertex(current)
            self._vertices[current] = proto
        counts = proto.successor_counts
        counts[next_symbol] = counts.get(next_symbol, 0) + 1
        self._transition_count += 1

    def register_record(
        self,
        record: Iterable[Symbol],
        start_symbol: Symbol = SEQUENCE_START,
        end_symbol: Symbol = SEQUENCE_END,
    ) -> None:
        """Register every transition of one record framed by sentinels.

        "ab" registers (start, a), (a, b), (b, end). An empty record
        registers (start, end).
        """
        previous = start_symbol
        for symbol in record:
            self.register_sequence(previous, symbol)
            previous = symbol
        self.register_sequence(previous, end_symbol)

    def register_records(
        self,
        records: Iterable[Iterable[Symbol]],
        start_symbol: Symbol = SEQUENCE_START,
        end_symbol: Symbol = SEQUENCE_END,
    ) -> int:
        """Register many records; returns how many were registered."""
        n_records = 0
        for record in records:
            self.register_record(record, start_symbol, end_symbol)
            n_records += 1
        return n_records

    def construct(self) -> Graph:
        """Consume the accumulated counts and build the immutable Graph.

        Raises:
            RuntimeError: If this constructor was already consumed.
        """
        self._check_not_consumed()
        self._consumed = True

        protos = list(self._vertices.values())
        n_sources = len(protos)
        source_index = {proto.symbol: i for i, proto in enumerate(protos)}

        # Terminal vertices, keyed by symbol in discovery order
        dead_ends: dict[Symbol, int] = {}

        vertices: list[Vertex] = []
        for proto in protos:
            total = proto.total
            edges: list[Edge] = []
            for successor, count in proto.successor_counts.items():
                target = source_index.get(successor)
                if target is None:
                    target = dead_ends.get(successor)
                if target is None:
                    target = n_sources + len(dead_ends)
                    dead_ends[successor] = target
                    log.debug(
                        "No source vertex for %r, synthesized terminal vertex %d",
                        successor,
                        target,
                    )
                edges.append(Edge(target=target, probability=count / total))

            # sorted() is stable: ties keep first-observation order
            edges.sort(key=lambda e: e.probability)
            vertices.append(Vertex(symbol=proto.symbol, edges=tuple(edges)))

        vertices.extend(Vertex(symbol=symbol) for symbol in dead_ends)
        self._vertices = {}

        graph = Graph(vertices=tuple(vertices))
        log.info(
            "Graph constructed: %d vertices (%d terminal), %d edges from %d transitions",
            len(graph),
            len(dead_ends),
            graph.edge_count,
            self._transition_count,
        )
        return graph

    def _check_not_consumed(self) -> None:
        if self._consumed:
            raise RuntimeError("GraphConstructor was already consumed by construct()")


def build_graph(
    records: Iterable[Iterable[Symbol]],
    start_symbol: Symbol = SEQUENCE_START,
    end_symbol: Symbol = SEQUENCE_END,
) -> Graph:
    """Frame every record between sentinels and construct the graph.

    Args:
        records: Training records, each an iterable of symbols (e.g. str).
        start_symbol: Sentinel registered before each record's first symbol.
        end_symbol: Sentinel registered after each record's last symbol.

    Returns:
        The constructed Graph.
    """
    constructor = GraphConstructor()
    n_records = constructor.register_records(records, start_symbol, end_symbol)
    log.info("Registered %d records", n_records)
    return constructor.construct()
