"""Head/tail ABI decoding of a log's data payload.

The payload is a tuple of the event's non-indexed fields. Its head holds one
slot per field: static values inline, dynamic values as a byte offset relative
to the start of the head. Dynamic values live in the tail:

- ``bytes`` / ``string``: length word ``L`` + ``L`` bytes padded to a word
- ``T[]``: count word ``L`` + a nested head/tail region of ``L`` elements
- ``T[k]`` with dynamic ``T``: a nested head/tail region of ``k`` elements

Offsets may point anywhere in the payload, in any order. Every read is bounds
checked against the whole payload, never against the previous read, and the
total number of decoded words is capped by the payload size.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from eventscope.constants import WORD_SIZE
from eventscope.core.config import DEFAULT_DECODER_CONFIG, DecoderConfig
from eventscope.decoding.specs import EventField
from eventscope.decoding.types import Array, DynamicBytes, FieldType, String
from eventscope.decoding.utils import decode_word, uint_at, word_at
from eventscope.errors import DecodeError


_MAX_EXPANSION = 2


def _padded(length: int) -> int:
    return -(-length // WORD_SIZE) * WORD_SIZE


class _WordBudget:
    """Caps the words one payload may decode to.

    A well-formed payload never decodes more words than it holds. Offsets may
    share a tail, but nested sharing would let a small payload expand without
    limit, so shared reads are allowed up to `_MAX_EXPANSION` times the size.
    """

    __slots__ = ("remaining",)

    def __init__(self, data: bytes) -> None:
        self.remaining = _MAX_EXPANSION * _padded(len(data)) // WORD_SIZE

    def spend(self, words: int, position: int) -> None:
        self.remaining -= words
        if self.remaining < 0:
            raise DecodeError(
                f"payload decodes to more words than it holds (shared tail at byte {position}?)",
                offset=position,
            )


def _read_pointer(data: bytes, slot: int, base: int) -> int:
    """Resolve the offset stored at `slot` into an absolute position."""
    offset = uint_at(data, slot)
    start = base + offset
    if start + WORD_SIZE > len(data):
        raise DecodeError(
            f"offset {offset} at byte {slot} points outside payload of {len(data)} bytes",
            offset=slot,
        )
    return start


def _decode_static(data: bytes, position: int, typ: FieldType, config: DecoderConfig) -> Any:
    match typ:
        case Array(element=element, length=int(length)):
            width = element.encoded_width
            return [_decode_static(data, position + i * width, element, config) for i in range(length)]
        case _:
            return decode_word(word_at(data, position), typ, config)


def _decode_byte_string(data: bytes, start: int, config: DecoderConfig, budget: _WordBudget) -> bytes:
    length = uint_at(data, start)
    body = start + WORD_SIZE
    remaining = len(data) - body
    if length > remaining:
        raise DecodeError(
            f"declared length {length} at byte {start} exceeds remaining {remaining} bytes",
            offset=start,
        )
    budget.spend(1 + _padded(length) // WORD_SIZE, start)
    end = body + length
    if config.strict:
        padded_end = body + _padded(length)
        if padded_end > len(data):
            raise DecodeError(f"missing padding after {length}-byte value at byte {start}", offset=start)
        if any(data[end:padded_end]):
            raise DecodeError(f"nonzero padding after {length}-byte value at byte {start}", offset=start)
    return data[body:end]


def _decode_dynamic(data: bytes, start: int, typ: FieldType, config: DecoderConfig, budget: _WordBudget) -> Any:
    match typ:
        case DynamicBytes():
            return _decode_byte_string(data, start, config, budget)
        case String():
            raw = _decode_byte_string(data, start, config, budget)
            try:
                return raw.decode("utf-8", errors="strict" if config.strict else "replace")
            except UnicodeDecodeError as exc:
                raise DecodeError(f"invalid UTF-8 in string at byte {start}", offset=start) from exc
        case Array(element=element, length=None):
            count = uint_at(data, start)
            body = start + WORD_SIZE
            # each element needs at least its head slot
            if count * element.encoded_width > len(data) - body:
                raise DecodeError(
                    f"array count {count} at byte {start} cannot fit in remaining {len(data) - body} bytes",
                    offset=start,
                )
            budget.spend(1, start)
            return _decode_sequence(data, body, [element] * count, config, budget)
        case Array(element=element, length=int(length)):
            return _decode_sequence(data, start, [element] * length, config, budget)
    raise DecodeError(f"{typ.canonical} is not a dynamic type")


def _decode_sequence(
    data: bytes,
    base: int,
    types: Sequence[FieldType],
    config: DecoderConfig,
    budget: _WordBudget,
) -> list[Any]:
    """Decode a head/tail region starting at `base`."""
    values: list[Any] = []
    slot = base
    for typ in types:
        budget.spend(typ.encoded_width // WORD_SIZE, slot)
        if typ.is_dynamic:
            values.append(_decode_dynamic(data, _read_pointer(data, slot, base), typ, config, budget))
        else:
            values.append(_decode_static(data, slot, typ, config))
        slot += typ.encoded_width
    return values


def head_size(fields: Sequence[EventField]) -> int:
    """Minimum payload length: the size of the head region."""
    return sum(f.type.encoded_width for f in fields)


def decode_payload(
    data: bytes,
    fields: Sequence[EventField],
    config: DecoderConfig = DEFAULT_DECODER_CONFIG,
) -> list[Any]:
    """Decode `data` into one value per non-indexed field, in declared order.

    Raises `DecodeError` on truncated payloads, out-of-range offsets and
    lengths, offsets that make the payload decode to more words than it
    holds, and strict-mode violations.
    """
    need = head_size(fields)
    if len(data) < need:
        raise DecodeError(f"payload has {len(data)} bytes, head alone needs {need}")
    return _decode_sequence(data, 0, [f.type for f in fields], config, _WordBudget(data))
