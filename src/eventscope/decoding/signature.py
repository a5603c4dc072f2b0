"""Canonical event signatures and their Keccak-256 topic0 digests."""

from __future__ import annotations

from collections.abc import Iterable

from eth_utils import keccak

from eventscope.decoding.types import FieldType


def canonical_signature(name: str, types: Iterable[FieldType]) -> str:
    """Return ``Name(type1,type2,...)`` using canonical type names."""
    return f"{name}({','.join(t.canonical for t in types)})"


def signature_hash(signature: str) -> bytes:
    """Keccak-256 of the UTF-8 signature string (32 bytes)."""
    return keccak(text=signature)


def event_topic0(signature: str) -> str:
    """Lowercased 0x-hex topic0 for a canonical signature, as used by eth_getLogs."""
    return "0x" + signature_hash(signature).hex()
