"""Generator configuration dataclasses, all frozen and slotted for immutability."""

from collections.abc import Hashable
from dataclasses import dataclass, field

# Sentinels framing each training record. Control characters so they never
# collide with printable training data.
SEQUENCE_START = "\x01"
SEQUENCE_END = "\x02"


@dataclass(frozen=True, slots=True)
class StepperConfig:
    """Per-stepper parameters.

    start_symbol pins every generation to the vertex with that symbol, which
    may be any hashable graph symbol; None restarts at a uniformly random
    vertex. min_length suppresses transitions into terminal vertices until
    that many symbols have been produced.
    """

    start_symbol: Hashable | None = None
    min_length: int | None = None

    def __post_init__(self) -> None:
        if self.min_length is not None and self.min_length < 0:
            raise ValueError(
                f"min_length must be >= 0 or None, got {self.min_length}"
            )


@dataclass(frozen=True, slots=True)
class CorpusConfig:
    """How training records are framed before registration."""

    start_symbol: str = SEQUENCE_START
    end_symbol: str = SEQUENCE_END
    skip_blank_records: bool = False

    def __post_init__(self) -> None:
        if self.start_symbol == self.end_symbol:
            raise ValueError(
                f"start_symbol and end_symbol must differ, both are "
                f"{self.start_symbol!r}"
            )


@dataclass(frozen=True, slots=True)
class SamplingConfig:
    """Batch sampling parameters."""

    count: int = 1  # number of accepted samples to collect
    min_length: int = 3  # 0 disables minimum-length enforcement
    max_length: int = 64  # symbols per drive before it times out
    max_attempts: int = 10_000  # drives before giving up on count

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"count must be >= 1, got {self.count}")
        if self.min_length < 0:
            raise ValueError(f"min_length must be >= 0, got {self.min_length}")
        if self.max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {self.max_length}")
        if self.max_attempts < self.count:
            raise ValueError(
                f"max_attempts ({self.max_attempts}) must be "
                f">= count ({self.count})"
            )


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Top-level configuration composing corpus framing and sampling.

    Cross-parameter validation runs in __post_init__ to reject invalid
    configurations early.
    """

    corpus: CorpusConfig = field(default_factory=CorpusConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    seed: int | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.sampling.min_length > self.sampling.max_length:
            raise ValueError(
                f"min_length ({self.sampling.min_length}) must be "
                f"<= max_length ({self.sampling.max_length})"
            )
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")

    def stepper_config(self) -> StepperConfig:
        """Stepper configuration used for sampling: pinned at the start sentinel."""
        return StepperConfig(
            start_symbol=self.corpus.start_symbol,
            min_length=self.sampling.min_length or None,
        )
