"""Weighted random walk over a shared Graph.

GraphStepper is a mutable cursor: a current vertex, the symbols produced
since the last flush, and an injected numpy Generator. Many steppers may
share one Graph since the graph is never mutated.

Each step uses roulette-wheel selection over the current vertex's edges,
which are stored ascending by probability. While a minimum length is
configured and not yet reached, edges into terminal vertices are removed
and their probability mass is spread evenly over the remaining edges.
"""

import logging
from collections.abc import Sequence

import numpy as np

from markovgen.config.settings import StepperConfig
from markovgen.graph.types import Edge, Graph, Symbol, Vertex
from markovgen.stepper.types import (
    ConfigParameter,
    EdgeExhaustionError,
    EmptyGraphError,
    InvalidParameterError,
    Outcome,
    StepperOutput,
)

log = logging.getLogger(__name__)


class GraphStepper:
    """Stateful generator of symbol sequences from a Graph.

    Args:
        graph: Graph to walk. Shared, never modified.
        config: Start symbol and minimum length.
        rng: Random source. A fresh unseeded Generator when None.

    Raises:
        InvalidParameterError: If config.start_symbol is not in the graph.
        EmptyGraphError: If no start symbol is configured and the graph has
            no vertices to start from.
    """

    def __init__(
        self,
        graph: Graph,
        config: StepperConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._graph = graph
        self._config = config or StepperConfig()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._buffer: list[Symbol] = []
        self._start_index: int | None = None

        if self._config.start_symbol is not None:
            self._start_index = graph.find(self._config.start_symbol)
            if self._start_index is None:
                raise InvalidParameterError(ConfigParameter.START_SYMBOL)
        elif len(graph) == 0:
            raise EmptyGraphError()

        self._position = 0
        self._reset_position()

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def config(self) -> StepperConfig:
        return self._config

    @property
    def position(self) -> int:
        return self._position

    @property
    def current_symbol(self) -> Symbol:
        return self._current_vertex().symbol

    @property
    def buffer(self) -> list[Symbol]:
        """Copy of the symbols produced since the last flush."""
        return list(self._buffer)

    def _reset_position(self) -> None:
        if self._start_index is not None:
            self._position = self._start_index
        else:
            self._position = int(self._rng.integers(0, len(self._graph)))

    def _current_vertex(self) -> Vertex:
        return self._graph.vertex(self._position)

    def _candidate_edges(self, vertex: Vertex) -> Sequence[Edge]:
        """Edges eligible for the next step, adjusted for minimum length.

        Raises:
            EdgeExhaustionError: If minimum-length enforcement leaves no edge.
        """
        min_length = self._config.min_length
        if min_length is None or len(self._buffer) >= min_length:
            return vertex.edges

        kept: list[Edge] = []
        lost_probability = 0.0
        for edge in vertex.edges:
            if self._graph.vertex(edge.target).is_terminal:
                lost_probability += edge.probability
            else:
                kept.append(edge)

        if not kept:
            raise EdgeExhaustionError()
        if lost_probability == 0.0:
            return kept

        # Adding the same amount to every edge keeps the ascending order
        share = lost_probability / len(kept)
        return [Edge(e.target, e.probability + share) for e in kept]

    def step(self) -> None:
        """Perform exactly one weighted random transition.

        Raises:
            EdgeExhaustionError: If the current vertex has no outgoing edges,
                or minimum-length enforcement excluded all of them.
        """
        random_value = float(self._rng.random())
        vertex = self._current_vertex()
        if vertex.is_terminal:
            raise EdgeExhaustionError()

        edges = self._candidate_edges(vertex)

        selection: int | None = None
        probability_sum = 0.0
        for edge in edges:
            probability_sum += edge.probability
            if random_value < probability_sum:
                selection = edge.target
                break

        if selection is None:
            # Rounding left the cumulative sum short of random_value; take
            # the most probable edge.
            selection = edges[-1].target

        self._position = selection
        self._buffer.append(self._current_vertex().symbol)

    def step_until(self, value: Symbol, timeout: int) -> StepperOutput:
        """Step until the output ends with `value`, a dead end, or `timeout` symbols.

        The buffer is flushed into the returned output in every case.

        Args:
            value: Symbol that ends the drive once produced.
            timeout: Maximum buffer length before giving up.

        Returns:
            REACHED if `value` was produced, TIMEOUT if the buffer reached
            `timeout` symbols first, EXHAUSTED if a step found no usable edge.

        Raises:
            InvalidParameterError: If `value` is not in the graph.
        """
        if self._graph.find(value) is None:
            raise InvalidParameterError(ConfigParameter.END_SYMBOL)

        while True:
            if self._buffer and self._buffer[-1] == value:
                return self._finish(Outcome.REACHED)
            if len(self._buffer) >= timeout:
                return self._finish(Outcome.TIMEOUT)
            try:
                self.step()
            except EdgeExhaustionError:
                return self._finish(Outcome.EXHAUSTED)

    def step_until_end_state(self, timeout: int) -> StepperOutput:
        """Step until no step is possible, or until `timeout` symbols.

        Arriving at a dead end is the success condition here.

        Returns:
            REACHED on a dead end, TIMEOUT if the buffer reached `timeout`
            symbols first.
        """
        while True:
            if len(self._buffer) >= timeout:
                return self._finish(Outcome.TIMEOUT)
            try:
                self.step()
            except EdgeExhaustionError:
                return self._finish(Outcome.REACHED)

    def flush(self) -> list[Symbol]:
        """Return and clear the produced symbols, then reset the position.

        The position resets to the start symbol when one is configured,
        otherwise to a fresh uniformly random vertex.
        """
        out = self._buffer
        self._buffer = []
        self._reset_position()
        return out

    def _finish(self, outcome: Outcome) -> StepperOutput:
        symbols = tuple(self.flush())
        log.debug("Drive ended: %s after %d symbols", outcome.value, len(symbols))
        return StepperOutput(outcome=outcome, symbols=symbols)
