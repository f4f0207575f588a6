"""Centralized seed management for reproducible sampling.

Steppers never read a global RNG; they take an explicit numpy Generator.
These helpers build those Generators from a master seed.
"""

import numpy as np


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create the Generator a stepper draws from.

    Args:
        seed: Seed for a reproducible stream, or None for OS entropy.
    """
    return np.random.default_rng(seed)


def spawn_rngs(seed: int | None, n: int) -> list[np.random.Generator]:
    """Create n statistically independent Generators from one master seed.

    Useful for giving each of several steppers sharing a graph its own
    reproducible stream.
    """
    return [np.random.default_rng(s) for s in np.random.SeedSequence(seed).spawn(n)]
