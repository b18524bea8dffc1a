"""Hex canonicalization for embedding fixture hashes as bare hex literals."""

from typing import Any

from .fixtures import to_document

HEX_PREFIX = "0x"


def strip_hex_prefix(value: str) -> str:
    if value.startswith(HEX_PREFIX):
        return value[len(HEX_PREFIX):]
    return value


def canonicalize(artifact: Any) -> Any:
    """Return a copy of ``artifact``'s JSON form with every 0x prefix removed.

    The input is never mutated, so fixtures already written keep their
    prefixed form. Applying it again to its own output is a no-op.
    """
    value = to_document(artifact)
    if isinstance(value, dict):
        return {key: canonicalize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [canonicalize(item) for item in value]
    if isinstance(value, str):
        return strip_hex_prefix(value)
    return value
