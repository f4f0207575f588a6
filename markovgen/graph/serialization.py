"""Graph persistence as a compressed NPZ archive of CSR-style arrays.

Layout (all arrays 1-D):
- format_version: scalar int
- symbol_bytes: uint8, UTF-8 text of every symbol concatenated
- symbol_offsets: int64 of length n + 1, symbol i is
  symbol_bytes[symbol_offsets[i]:symbol_offsets[i + 1]]
- edge_offsets: int64 of length n + 1, vertex i owns edges
  edge_offsets[i]:edge_offsets[i + 1]
- edge_targets: int64 target vertex indices
- edge_probabilities: float64

Vertex and edge order are stored as-is, so a round trip is exact.
"""

import io
import logging
import zipfile
import zlib
from pathlib import Path

import numpy as np

from markovgen.graph.types import Edge, Graph, Vertex
from markovgen.graph.validation import validate_graph

log = logging.getLogger(__name__)

FORMAT_VERSION = 1

_REQUIRED_KEYS = (
    "format_version",
    "symbol_bytes",
    "symbol_offsets",
    "edge_offsets",
    "edge_targets",
    "edge_probabilities",
)


class GraphFormatError(ValueError):
    """Raised when serialized graph data is truncated, malformed, or invalid."""


def _offsets(lengths: list[int]) -> np.ndarray:
    offsets = np.zeros(len(lengths) + 1, dtype=np.int64)
    np.cumsum(lengths, out=offsets[1:])
    return offsets


def serialize(graph: Graph) -> bytes:
    """Serialize a graph to bytes.

    Args:
        graph: Graph whose symbols are all str.

    Returns:
        Compressed NPZ archive bytes.

    Raises:
        TypeError: If any vertex symbol is not a str.
    """
    encoded: list[bytes] = []
    for vertex in graph.vertices:
        if not isinstance(vertex.symbol, str):
            raise TypeError(
                f"Only str symbols can be serialized, got "
                f"{type(vertex.symbol).__name__}: {vertex.symbol!r}"
            )
        encoded.append(vertex.symbol.encode("utf-8"))

    edges = [e for v in graph.vertices for e in v.edges]

    buffer = io.BytesIO()
    np.savez_compressed(
        buffer,
        format_version=np.array(FORMAT_VERSION, dtype=np.int64),
        symbol_bytes=np.frombuffer(b"".join(encoded), dtype=np.uint8),
        symbol_offsets=_offsets([len(b) for b in encoded]),
        edge_offsets=_offsets([len(v.edges) for v in graph.vertices]),
        edge_targets=np.array([e.target for e in edges], dtype=np.int64),
        edge_probabilities=np.array(
            [e.probability for e in edges], dtype=np.float64
        ),
    )
    return buffer.getvalue()


def _check_offsets(name: str, offsets: np.ndarray, total: int) -> None:
    if offsets.ndim != 1 or offsets.size == 0:
        raise GraphFormatError(f"{name} must be a non-empty 1-D array")
    if not np.issubdtype(offsets.dtype, np.integer):
        raise GraphFormatError(f"{name} must be integer, got {offsets.dtype}")
    if offsets[0] != 0 or offsets[-1] != total:
        raise GraphFormatError(
            f"{name} must span [0, {total}], got [{offsets[0]}, {offsets[-1]}]"
        )
    if np.any(np.diff(offsets) < 0):
        raise GraphFormatError(f"{name} must be non-decreasing")


_UNREADABLE = (
    OSError,
    ValueError,
    KeyError,
    EOFError,
    zipfile.BadZipFile,
    zlib.error,
)


def _read_arrays(data: bytes) -> dict[str, np.ndarray]:
    try:
        loaded = np.load(io.BytesIO(data), allow_pickle=False)
    except _UNREADABLE as exc:
        raise GraphFormatError(f"Unreadable graph archive: {exc}") from exc
    # A bare .npy payload loads as a single ndarray
    if not isinstance(loaded, np.lib.npyio.NpzFile):
        raise GraphFormatError(
            f"Unreadable graph archive: expected an NPZ archive, "
            f"got {type(loaded).__name__}"
        )
    try:
        with loaded as archive:
            return {key: archive[key] for key in _REQUIRED_KEYS}
    except _UNREADABLE as exc:
        raise GraphFormatError(f"Unreadable graph archive: {exc}") from exc


def _check_vector(name: str, array: np.ndarray, kind: type) -> None:
    if array.ndim != 1:
        raise GraphFormatError(f"{name} must be 1-D, got shape {array.shape}")
    if not np.issubdtype(array.dtype, kind):
        raise GraphFormatError(f"{name} must be {kind.__name__}, got {array.dtype}")


def deserialize(data: bytes) -> Graph:
    """Rebuild a graph from serialize() output.

    Args:
        data: Bytes produced by serialize().

    Returns:
        The reconstructed Graph.

    Raises:
        GraphFormatError: If the data is unreadable, structurally malformed,
            or describes a graph that fails validate_graph().
    """
    arrays = _read_arrays(data)

    format_version = arrays["format_version"]
    if format_version.shape != () or not np.issubdtype(
        format_version.dtype, np.integer
    ):
        raise GraphFormatError("format_version must be a scalar integer")
    version = int(format_version)
    if version != FORMAT_VERSION:
        raise GraphFormatError(
            f"Unsupported graph format version {version}, expected {FORMAT_VERSION}"
        )

    symbol_bytes = arrays["symbol_bytes"]
    symbol_offsets = arrays["symbol_offsets"]
    edge_offsets = arrays["edge_offsets"]
    edge_targets = arrays["edge_targets"]
    edge_probabilities = arrays["edge_probabilities"]

    if symbol_bytes.ndim != 1 or symbol_bytes.dtype != np.uint8:
        raise GraphFormatError(
            f"symbol_bytes must be 1-D uint8, got {symbol_bytes.dtype} "
            f"with shape {symbol_bytes.shape}"
        )
    _check_vector("edge_targets", edge_targets, np.integer)
    _check_vector("edge_probabilities", edge_probabilities, np.floating)
    _check_offsets("symbol_offsets", symbol_offsets, symbol_bytes.size)
    _check_offsets("edge_offsets", edge_offsets, edge_targets.size)
    if symbol_offsets.size != edge_offsets.size:
        raise GraphFormatError(
            f"symbol_offsets ({symbol_offsets.size}) and edge_offsets "
            f"({edge_offsets.size}) disagree on vertex count"
        )
    if edge_probabilities.size != edge_targets.size:
        raise GraphFormatError(
            f"edge_targets ({edge_targets.size}) and edge_probabilities "
            f"({edge_probabilities.size}) differ in length"
        )

    raw = symbol_bytes.tobytes()
    vertices: list[Vertex] = []
    for i in range(symbol_offsets.size - 1):
        try:
            symbol = raw[symbol_offsets[i]:symbol_offsets[i + 1]].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise GraphFormatError(f"Vertex {i}: symbol is not UTF-8") from exc
        start, end = int(edge_offsets[i]), int(edge_offsets[i + 1])
        edges = tuple(
            Edge(target=int(edge_targets[j]), probability=float(edge_probabilities[j]))
            for j in range(start, end)
        )
        vertices.append(Vertex(symbol=symbol, edges=edges))

    graph = Graph(vertices=tuple(vertices))
    errors = validate_graph(graph)
    if errors:
        raise GraphFormatError(
            "Graph validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )
    return graph


def save_graph(graph: Graph, path: Path | str) -> Path:
    """Write a serialized graph to `path`, creating parent directories.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(serialize(graph))
    log.info(
        "Graph saved to %s (%d vertices, %d edges)",
        path,
        len(graph),
        graph.edge_count,
    )
    return path


def load_graph(path: Path | str) -> Graph:
    """Read a graph written by save_graph().

    Raises:
        FileNotFoundError: If path does not exist.
        GraphFormatError: If the file is not a valid serialized graph.
    """
    path = Path(path)
    graph = deserialize(path.read_bytes())
    log.info(
        "Graph loaded from %s (%d vertices, %d edges)",
        path,
        len(graph),
        graph.edge_count,
    )
    return graph
