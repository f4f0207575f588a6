"""Generator configuration system with frozen, hashable, serializable dataclasses."""

from markovgen.config.defaults import DEFAULT_CONFIG
from markovgen.config.hashing import config_hash
from markovgen.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
    load_config,
)
from markovgen.config.settings import (
    SEQUENCE_END,
    SEQUENCE_START,
    CorpusConfig,
    GeneratorConfig,
    SamplingConfig,
    StepperConfig,
)

__all__ = [
    "CorpusConfig",
    "DEFAULT_CONFIG",
    "GeneratorConfig",
    "SEQUENCE_END",
    "SEQUENCE_START",
    "SamplingConfig",
    "StepperConfig",
    "config_from_dict",
    "config_from_json",
    "config_hash",
    "config_to_dict",
    "config_to_json",
    "load_config",
]
