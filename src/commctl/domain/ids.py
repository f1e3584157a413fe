"""Opaque entity identifiers.

IDs are a type prefix followed by random hex from :mod:`secrets`
(16 bytes by default). Uniqueness is assumed rather than checked:
128 random bits make collisions negligible for a single ledger.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import secrets

TYPE_PREFIXES: dict[str, str] = {
    "artist": "art_",
    "customer": "cus_",
    "commission": "com_",
}

DEFAULT_ID_BYTES = 16

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    entity_type: re.compile(rf"^{prefix}[0-9a-f]{{8,}}$")
    for entity_type, prefix in TYPE_PREFIXES.items()
}


def generate_id(entity_type: str, *, nbytes: int = DEFAULT_ID_BYTES) -> str:
    """Generate a fresh ID for *entity_type* (``artist``, ``customer``, ``commission``).

    Raises:
        ValueError: If *entity_type* has no registered prefix.
    """
    prefix = TYPE_PREFIXES.get(entity_type)
    if prefix is None:
        msg = (
            f"Unknown entity type: {entity_type!r}. "
            f"Expected one of {sorted(TYPE_PREFIXES)}"
        )
        raise ValueError(msg)
    return f"{prefix}{secrets.token_hex(nbytes)}"


def validate_id(entity_id: str, entity_type: str) -> bool:
    """Check whether *entity_id* matches the expected shape for *entity_type*."""
    pattern = ID_PATTERNS.get(entity_type)
    if pattern is None:
        return False
    return pattern.match(entity_id) is not None
