"""Stepper result types and error taxonomy."""

from dataclasses import dataclass
from enum import Enum

from markovgen.graph.types import Symbol


class Outcome(Enum):
    """How a multi-step drive ended."""

    REACHED = "reached"
    TIMEOUT = "timeout"
    # Not conforming to configuration, but out of edges pointing to anything
    # other than terminal vertices.
    EXHAUSTED = "exhausted"


@dataclass(frozen=True, slots=True)
class StepperOutput:
    """Symbols produced by one drive and the reason it stopped."""

    outcome: Outcome
    symbols: tuple[Symbol, ...]

    @property
    def text(self) -> str:
        return "".join(str(s) for s in self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def __str__(self) -> str:
        return self.text


class ConfigParameter(Enum):
    START_SYMBOL = "Start Symbol"
    END_SYMBOL = "End Symbol"


class GraphStepperError(Exception):
    """Base class for stepper failures."""


class InvalidParameterError(GraphStepperError):
    """A configured sentinel symbol is absent from the graph."""

    def __init__(self, parameter: ConfigParameter) -> None:
        self.parameter = parameter
        super().__init__(f"Invalid parameter provided: {parameter.value}")


class EdgeExhaustionError(GraphStepperError):
    """The current vertex has no usable outgoing edges."""

    def __init__(self) -> None:
        super().__init__("No edges left to create configuration-compliant sample")


class EmptyGraphError(GraphStepperError):
    """A random start position was requested on a graph with no vertices."""

    def __init__(self) -> None:
        super().__init__("Cannot pick a random start position in an empty graph")
