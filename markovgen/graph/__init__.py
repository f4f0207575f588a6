"""Graph construction, validation, and persistence for symbol Markov chains."""

from markovgen.graph.constructor import GraphConstructor, ProtoVertex, build_graph
from markovgen.graph.corpus import compile_corpus, load_records
from markovgen.graph.serialization import (
    GraphFormatError,
    deserialize,
    load_graph,
    save_graph,
    serialize,
)
from markovgen.graph.types import Edge, Graph, Symbol, Vertex
from markovgen.graph.validation import (
    PROBABILITY_TOLERANCE,
    reachable_from,
    validate_graph,
)

__all__ = [
    "Edge",
    "Graph",
    "GraphConstructor",
    "GraphFormatError",
    "PROBABILITY_TOLERANCE",
    "ProtoVertex",
    "Symbol",
    "Vertex",
    "build_graph",
    "compile_corpus",
    "deserialize",
    "load_graph",
    "load_records",
    "reachable_from",
    "save_graph",
    "serialize",
    "validate_graph",
]
