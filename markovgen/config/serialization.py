"""JSON serialization and deserialization for generator configs."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dacite import Config as DaciteConfig
from dacite import from_dict

from markovgen.config.defaults import DEFAULT_CONFIG
from markovgen.config.settings import GeneratorConfig

_DACITE_CONFIG = DaciteConfig(check_types=True, strict=True)


def config_to_json(config: GeneratorConfig) -> str:
    """Serialize a GeneratorConfig to a JSON string.

    Uses sorted keys and 2-space indent for human readability and diffability.
    """
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> GeneratorConfig:
    """Deserialize a JSON string to a GeneratorConfig.

    Uses dacite with strict=True to reject unknown keys (catches schema drift).
    Missing keys fall back to dataclass defaults.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: GeneratorConfig) -> dict[str, Any]:
    """Convert a GeneratorConfig to a plain dictionary."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> GeneratorConfig:
    """Reconstruct a GeneratorConfig from a plain dictionary."""
    return from_dict(data_class=GeneratorConfig, data=d, config=_DACITE_CONFIG)


def load_config(path: Path | str | None) -> GeneratorConfig:
    """Load a config file, or the defaults when no path is given."""
    if path is None:
        return DEFAULT_CONFIG
    return config_from_json(Path(path).read_text(encoding="utf-8"))
