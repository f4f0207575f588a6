"""Reproducibility infrastructure: seeded random sources."""

from markovgen.reproducibility.seed import make_rng, spawn_rngs

__all__ = [
    "make_rng",
    "spawn_rngs",
]
