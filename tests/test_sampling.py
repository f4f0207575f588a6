"""Tests for batch sampling of terminated sequences."""

import logging

import numpy as np
import pytest

from markovgen.config import CorpusConfig, GeneratorConfig, SamplingConfig
from markovgen.graph.constructor import GraphConstructor, build_graph
from markovgen.stepper.sampling import sample_sequences
from markovgen.stepper.types import InvalidParameterError

NAMES = ["Tim", "Tom", "Thomas"]
POSSIBLE = {"Tim", "Timas", "Tom", "Tomas", "Thom", "Thomas"}


def _config(count: int = 20, seed: int | None = 7, **sampling) -> GeneratorConfig:
    return GeneratorConfig(
        sampling=SamplingConfig(count=count, **sampling),
        seed=seed,
    )


class TestSampleSequences:
    """Samples are stripped of sentinels and drawn from the training paths."""

    def test_requested_count(self) -> None:
        samples = sample_sequences(build_graph(NAMES), _config(count=20))
        assert len(samples) == 20

    def test_samples_follow_training_paths(self) -> None:
        samples = sample_sequences(build_graph(NAMES), _config(count=50))
        assert set(samples) <= POSSIBLE
        for sample in samples:
            assert "\x01" not in sample
            assert "\x02" not in sample

    def test_min_length_respected(self) -> None:
        graph = build_graph(["ab", "abcdef", "a"])
        samples = sample_sequences(graph, _config(count=30, min_length=4, max_length=16))
        # Only the longest record has enough non-terminal transitions
        assert set(samples) == {"abcdef"}

    def test_seed_reproducible(self) -> None:
        graph = build_graph(NAMES)
        assert sample_sequences(graph, _config(seed=3)) == sample_sequences(
            graph, _config(seed=3)
        )

    def test_explicit_rng_overrides_seed(self) -> None:
        graph = build_graph(NAMES)
        a = sample_sequences(graph, _config(seed=None), rng=np.random.default_rng(9))
        b = sample_sequences(graph, _config(seed=None), rng=np.random.default_rng(9))
        assert a == b

    def test_custom_sentinels(self) -> None:
        corpus = CorpusConfig(start_symbol="^", end_symbol="$")
        graph = build_graph(NAMES, corpus.start_symbol, corpus.end_symbol)
        config = GeneratorConfig(corpus=corpus, sampling=SamplingConfig(count=10), seed=1)
        samples = sample_sequences(graph, config)
        assert len(samples) == 10
        assert set(samples) <= POSSIBLE

    def test_missing_start_sentinel(self) -> None:
        graph = build_graph(NAMES, "^", "$")
        with pytest.raises(InvalidParameterError):
            sample_sequences(graph, _config())


class TestSamplingShortfall:
    """Sampling gives up after max_attempts drives."""

    def test_unterminated_graph(self, caplog: pytest.LogCaptureFixture) -> None:
        constructor = GraphConstructor()
        constructor.register_sequence("\x01", "a")
        constructor.register_sequence("a", "a")
        graph = constructor.construct()
        config = _config(count=3, min_length=0, max_length=4, max_attempts=5)
        with caplog.at_level(logging.WARNING):
            samples = sample_sequences(graph, config)
        assert samples == []
        assert "not reachable" in caplog.text
        assert "Gave up after 5 drives" in caplog.text

    def test_timeouts_discarded(self) -> None:
        graph = build_graph(["abcdefghij"])
        config = _config(count=2, min_length=0, max_length=5, max_attempts=4)
        assert sample_sequences(graph, config) == []
