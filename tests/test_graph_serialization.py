"""Tests for graph byte serialization and file persistence.

Covers exact round trips, symbol encoding edge cases, rejection of
unreadable or malformed archives, and save/load through the filesystem.
"""

import io
from pathlib import Path

import numpy as np
import pytest

from markovgen.config import StepperConfig, SEQUENCE_START
from markovgen.graph.constructor import GraphConstructor, build_graph
from markovgen.graph.serialization import (
    GraphFormatError,
    deserialize,
    load_graph,
    save_graph,
    serialize,
)
from markovgen.graph.types import Edge, Graph, Vertex
from markovgen.stepper.stepper import GraphStepper

NAMES = ["Tim", "Tom", "Thomas", "Nathan", "Nina", "Tiara", "Tyra", "Tyrone"]


def _archive(**overrides: np.ndarray) -> bytes:
    """Archive for the graph a -> b, with selected arrays replaced."""
    arrays = {
        "format_version": np.array(1, dtype=np.int64),
        "symbol_bytes": np.frombuffer(b"ab", dtype=np.uint8),
        "symbol_offsets": np.array([0, 1, 2], dtype=np.int64),
        "edge_offsets": np.array([0, 1, 1], dtype=np.int64),
        "edge_targets": np.array([1], dtype=np.int64),
        "edge_probabilities": np.array([1.0], dtype=np.float64),
    }
    arrays.update(overrides)
    buffer = io.BytesIO()
    np.savez_compressed(buffer, **arrays)
    return buffer.getvalue()


class TestRoundTrip:
    """serialize -> deserialize reproduces the graph exactly."""

    def test_names_graph(self) -> None:
        graph = build_graph(NAMES)
        restored = deserialize(serialize(graph))
        assert restored == graph
        assert restored.symbols == graph.symbols
        for original, loaded in zip(graph, restored):
            assert [e.target for e in original.edges] == [e.target for e in loaded.edges]
            assert [e.probability for e in original.edges] == [
                e.probability for e in loaded.edges
            ]

    def test_empty_graph(self) -> None:
        restored = deserialize(serialize(Graph()))
        assert len(restored) == 0

    def test_multibyte_and_control_symbols(self) -> None:
        constructor = GraphConstructor()
        constructor.register_record("é中\U0001f600")
        constructor.register_sequence("\x00", "x")
        graph = constructor.construct()
        restored = deserialize(serialize(graph))
        assert restored.symbols == graph.symbols
        assert restored.find("\x00") == graph.find("\x00")

    def test_multi_character_symbols(self) -> None:
        graph = build_graph([["the", "cat"], ["the", "dog"]])
        assert deserialize(serialize(graph)) == graph

    def test_restored_graph_samples_identically(self) -> None:
        graph = build_graph(NAMES)
        restored = deserialize(serialize(graph))
        config = StepperConfig(start_symbol=SEQUENCE_START, min_length=3)
        a = GraphStepper(graph, config, np.random.default_rng(11))
        b = GraphStepper(restored, config, np.random.default_rng(11))
        for _ in range(20):
            assert a.step_until_end_state(32) == b.step_until_end_state(32)

    def test_output_is_npz_archive(self) -> None:
        data = serialize(build_graph(NAMES))
        assert data[:2] == b"PK"


class TestSerializeErrors:
    """Only str symbols can be written."""

    def test_non_string_symbol(self) -> None:
        constructor = GraphConstructor()
        constructor.register_sequence(1, 2)
        with pytest.raises(TypeError):
            serialize(constructor.construct())


class TestDeserializeErrors:
    """Malformed input is rejected with GraphFormatError."""

    def test_empty_bytes(self) -> None:
        with pytest.raises(GraphFormatError):
            deserialize(b"")

    def test_garbage_bytes(self) -> None:
        with pytest.raises(GraphFormatError):
            deserialize(b"definitely not a graph archive")

    def test_baseline_archive_loads(self) -> None:
        graph = deserialize(_archive())
        assert graph.symbols == ("a", "b")
        assert graph.vertex(0).edges == (Edge(1, 1.0),)

    def test_bare_npy_payload(self) -> None:
        buffer = io.BytesIO()
        np.save(buffer, np.arange(3))
        with pytest.raises(GraphFormatError, match="NPZ"):
            deserialize(buffer.getvalue())

    def test_two_dimensional_edge_arrays(self) -> None:
        data = _archive(
            edge_targets=np.array([[1]], dtype=np.int64),
            edge_probabilities=np.array([[1.0]], dtype=np.float64),
        )
        with pytest.raises(GraphFormatError, match="1-D"):
            deserialize(data)

    def test_two_dimensional_probabilities(self) -> None:
        data = _archive(edge_probabilities=np.array([[1.0]], dtype=np.float64))
        with pytest.raises(GraphFormatError, match="edge_probabilities"):
            deserialize(data)

    def test_non_uint8_symbol_bytes(self) -> None:
        data = _archive(symbol_bytes=np.array([97, 98], dtype=np.int64))
        with pytest.raises(GraphFormatError, match="uint8"):
            deserialize(data)

    def test_float_format_version(self) -> None:
        with pytest.raises(GraphFormatError, match="scalar integer"):
            deserialize(_archive(format_version=np.array(1.0)))

    def test_string_probabilities(self) -> None:
        with pytest.raises(GraphFormatError, match="floating"):
            deserialize(_archive(edge_probabilities=np.array(["1.0"])))

    def test_truncated_archive(self) -> None:
        data = serialize(build_graph(NAMES))
        with pytest.raises(GraphFormatError):
            deserialize(data[: len(data) // 2])

    def test_missing_arrays(self) -> None:
        buffer = io.BytesIO()
        np.savez_compressed(buffer, format_version=np.array(1))
        with pytest.raises(GraphFormatError):
            deserialize(buffer.getvalue())

    def test_wrong_version(self) -> None:
        buffer = io.BytesIO()
        np.savez_compressed(
            buffer,
            format_version=np.array(99),
            symbol_bytes=np.zeros(0, dtype=np.uint8),
            symbol_offsets=np.zeros(1, dtype=np.int64),
            edge_offsets=np.zeros(1, dtype=np.int64),
            edge_targets=np.zeros(0, dtype=np.int64),
            edge_probabilities=np.zeros(0, dtype=np.float64),
        )
        with pytest.raises(GraphFormatError, match="version"):
            deserialize(buffer.getvalue())

    def test_inconsistent_offsets(self) -> None:
        buffer = io.BytesIO()
        np.savez_compressed(
            buffer,
            format_version=np.array(1),
            symbol_bytes=np.frombuffer(b"ab", dtype=np.uint8),
            symbol_offsets=np.array([0, 1, 2], dtype=np.int64),
            edge_offsets=np.array([0, 1], dtype=np.int64),
            edge_targets=np.array([1], dtype=np.int64),
            edge_probabilities=np.array([1.0]),
        )
        with pytest.raises(GraphFormatError):
            deserialize(buffer.getvalue())

    def test_invalid_graph_rejected(self) -> None:
        # Serializable, but the edge probabilities do not sum to 1
        graph = Graph(vertices=(Vertex("a", (Edge(1, 0.2),)), Vertex("b")))
        with pytest.raises(GraphFormatError, match="validation"):
            deserialize(serialize(graph))

    def test_target_out_of_range_rejected(self) -> None:
        graph = Graph(vertices=(Vertex("a", (Edge(7, 1.0),)),))
        with pytest.raises(GraphFormatError):
            deserialize(serialize(graph))


class TestFilePersistence:
    """save_graph / load_graph through the filesystem."""

    def test_save_load(self, tmp_path: Path) -> None:
        graph = build_graph(NAMES)
        path = save_graph(graph, tmp_path / "nested" / "names.graph.npz")
        assert path.exists()
        assert load_graph(path) == graph

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_graph(tmp_path / "missing.graph.npz")

    def test_load_corrupted_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.graph.npz"
        path.write_bytes(b"\x00\x01\x02\x03 not an archive")
        with pytest.raises(GraphFormatError):
            load_graph(path)
