"""Decoding utilities: bounds-checked ABI word access and single-word parsers."""

from __future__ import annotations

from typing import Any

from eth_utils import to_checksum_address

from eventscope.constants import ADDRESS_SIZE, WORD_SIZE
from eventscope.core.config import DecoderConfig
from eventscope.decoding.types import Address, Array, Bool, DynamicBytes, FieldType, FixedBytes, Int, String, Uint
from eventscope.errors import DecodeError


class TopicHash(bytes):
    """Keccak digest standing in for an indexed dynamic value.

    Topics only carry the hash of indexed strings, bytes and arrays, so the
    original value cannot be recovered from the log.
    """

    def __repr__(self) -> str:
        return f"TopicHash(0x{self.hex()})"


def word_at(data: bytes, offset: int) -> bytes:
    """Return the 32-byte word starting at byte `offset`.

    Raises `DecodeError` when the word does not fit in `data`.
    """
    end = offset + WORD_SIZE
    if offset < 0 or end > len(data):
        raise DecodeError(
            f"need {WORD_SIZE} bytes at offset {offset}, payload has {len(data)}",
            offset=offset,
        )
    return data[offset:end]


def uint_at(data: bytes, offset: int) -> int:
    """Unsigned big-endian integer held in the word at `offset`."""
    return int.from_bytes(word_at(data, offset), "big")


def decode_word(word: bytes, typ: FieldType, config: DecoderConfig) -> Any:
    """Decode one head word holding a single-word static value."""
    match typ:
        case Uint(bits=bits):
            value = int.from_bytes(word, "big")
            if bits < 256 and value >> bits:
                if config.strict:
                    raise DecodeError(f"value does not fit in {typ.canonical}")
                value &= (1 << bits) - 1
            return value
        case Int(bits=bits):
            value = int.from_bytes(word, "big", signed=True)
            bound = 1 << (bits - 1)
            if not -bound <= value < bound:
                if config.strict:
                    raise DecodeError(f"value does not fit in {typ.canonical}")
                value = int.from_bytes(word[-(bits // 8):], "big", signed=True)
            return value
        case Address():
            if config.strict and any(word[:-ADDRESS_SIZE]):
                raise DecodeError("address word has nonzero high bytes")
            raw = word[-ADDRESS_SIZE:]
            if config.checksum_addresses:
                return to_checksum_address(raw)
            return "0x" + raw.hex()
        case Bool():
            value = int.from_bytes(word, "big")
            if value > 1 and config.strict:
                raise DecodeError(f"invalid bool word 0x{word.hex()}")
            return value != 0
        case FixedBytes(size=size):
            if config.strict and any(word[size:]):
                raise DecodeError(f"{typ.canonical} has nonzero padding")
            return word[:size]
    raise DecodeError(f"{typ.canonical} is not a single-word type")


def decode_topic(topic: bytes, typ: FieldType, config: DecoderConfig) -> Any:
    """Decode one indexed topic according to the declared type.

    Strings, bytes and arrays are hashed when indexed and come back as
    `TopicHash`.
    """
    if len(topic) != WORD_SIZE:
        raise DecodeError(f"topic is {len(topic)} bytes, expected {WORD_SIZE}")
    if isinstance(typ, (String, DynamicBytes, Array)):
        return TopicHash(topic)
    return decode_word(topic, typ, config)
