"""Default configuration, the single source of truth for CLI defaults."""

from markovgen.config.settings import GeneratorConfig

# Sentinels \x01/\x02, one sample, min length 3, max length 64, unseeded.
DEFAULT_CONFIG = GeneratorConfig()
