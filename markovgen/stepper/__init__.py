"""Graph stepping: weighted random walks, drive outcomes, and batch sampling."""

from markovgen.stepper.sampling import sample_sequences
from markovgen.stepper.stepper import GraphStepper
from markovgen.stepper.types import (
    ConfigParameter,
    EdgeExhaustionError,
    EmptyGraphError,
    GraphStepperError,
    InvalidParameterError,
    Outcome,
    StepperOutput,
)

__all__ = [
    "ConfigParameter",
    "EdgeExhaustionError",
    "EmptyGraphError",
    "GraphStepper",
    "GraphStepperError",
    "InvalidParameterError",
    "Outcome",
    "StepperOutput",
    "sample_sequences",
]
