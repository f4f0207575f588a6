"""Deterministic config hashing using SHA-256 over sorted JSON."""

import hashlib
import json
from dataclasses import asdict
from typing import Any


def config_hash(config: Any) -> str:
    """Deterministic SHA-256 hash of a config object.

    Sentinels are control characters, so ensure_ascii escapes them and the
    serialized form stays stable across platforms.

    Args:
        config: Any dataclass instance (or sub-config).

    Returns:
        First 16 hex characters of the SHA-256 hash.
    """
    serialized = json.dumps(
        asdict(config),
        sort_keys=True,
        ensure_ascii=True,
        separators=(",", ":"),
        indent=None,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:16]
