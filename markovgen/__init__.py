"""Character-level Markov chain graphs and weighted random sequence generation."""

from markovgen.config import GeneratorConfig, StepperConfig
from markovgen.graph import Graph, GraphConstructor, build_graph, deserialize, serialize
from markovgen.stepper import GraphStepper, Outcome, StepperOutput, sample_sequences

__version__ = "0.1.0"

__all__ = [
    "GeneratorConfig",
    "Graph",
    "GraphConstructor",
    "GraphStepper",
    "Outcome",
    "StepperConfig",
    "StepperOutput",
    "build_graph",
    "deserialize",
    "sample_sequences",
    "serialize",
]
