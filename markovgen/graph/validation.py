"""Structural validation of constructed or deserialized graphs."""

import logging

import numpy as np
from scipy.sparse.csgraph import breadth_first_order

from markovgen.graph.types import Graph

log = logging.getLogger(__name__)

PROBABILITY_TOLERANCE = 1e-5


def validate_graph(
    graph: Graph, tolerance: float = PROBABILITY_TOLERANCE
) -> list[str]:
    """Validate a graph against the invariants the stepper relies on.

    Checks (cheapest first):
    1. Vertex symbols are unique
    2. Every edge target is a valid vertex index
    3. Every probability lies in [0, 1]
    4. Each vertex's edges are sorted ascending by probability
    5. Non-terminal rows of the transition matrix sum to 1 within tolerance

    Args:
        graph: Graph to check.
        tolerance: Allowed absolute deviation of a row sum from 1.0.

    Returns:
        List of error strings (empty = valid graph).
    """
    errors: list[str] = []
    n = len(graph)

    # 1. Unique symbols
    seen: dict[object, int] = {}
    for i, vertex in enumerate(graph.vertices):
        if vertex.symbol in seen:
            errors.append(
                f"Duplicate symbol {vertex.symbol!r} at vertices "
                f"{seen[vertex.symbol]} and {i}"
            )
        else:
            seen[vertex.symbol] = i

    # 2-4. Per-edge checks
    targets_valid = True
    for i, vertex in enumerate(graph.vertices):
        previous = -np.inf
        for edge in vertex.edges:
            if not 0 <= edge.target < n:
                targets_valid = False
                errors.append(
                    f"Vertex {i}: edge target {edge.target} out of range [0, {n})"
                )
            if not 0.0 <= edge.probability <= 1.0:
                errors.append(
                    f"Vertex {i}: edge probability {edge.probability} outside [0, 1]"
                )
            if edge.probability < previous:
                errors.append(f"Vertex {i}: edges not sorted ascending by probability")
                break
            previous = edge.probability

    # 5. Row sums (needs valid targets to build the matrix)
    if targets_valid and n > 0:
        row_sums = np.asarray(graph.to_adjacency().sum(axis=1)).ravel()
        for i, vertex in enumerate(graph.vertices):
            if vertex.is_terminal:
                continue
            if abs(row_sums[i] - 1.0) > tolerance:
                errors.append(
                    f"Vertex {i}: edge probabilities sum to {row_sums[i]:.8f}, "
                    f"expected 1.0 +/- {tolerance}"
                )

    if errors:
        log.debug("Graph validation found %d errors", len(errors))
    return errors


def reachable_from(graph: Graph, start: int) -> set[int]:
    """Vertex indices reachable from `start` along edges, including `start`.

    Raises:
        IndexError: If start is not a valid vertex index.
    """
    graph.vertex(start)
    order = breadth_first_order(
        graph.to_adjacency(), start, directed=True, return_predecessors=False
    )
    return set(order.tolist())
