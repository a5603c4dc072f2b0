"""ABI field types as a tagged variant.

Each variant knows its canonical name (used in the event signature), whether
it is dynamic (encoded out-of-line behind an offset) and its head width in
bytes. `parse_type` turns an ABI type string such as ``"uint256[][2]"`` into
the matching variant.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from eventscope.constants import WORD_SIZE
from eventscope.errors import SchemaError


@dataclass(frozen=True)
class Uint:
    bits: int = 256

    @property
    def canonical(self) -> str:
        return f"uint{self.bits}"

    @property
    def is_dynamic(self) -> bool:
        return False

    @property
    def encoded_width(self) -> int:
        return WORD_SIZE


@dataclass(frozen=True)
class Int:
    bits: int = 256

    @property
    def canonical(self) -> str:
        return f"int{self.bits}"

    @property
    def is_dynamic(self) -> bool:
        return False

    @property
    def encoded_width(self) -> int:
        return WORD_SIZE


@dataclass(frozen=True)
class Address:
    @property
    def canonical(self) -> str:
        return "address"

    @property
    def is_dynamic(self) -> bool:
        return False

    @property
    def encoded_width(self) -> int:
        return WORD_SIZE


@dataclass(frozen=True)
class Bool:
    @property
    def canonical(self) -> str:
        return "bool"

    @property
    def is_dynamic(self) -> bool:
        return False

    @property
    def encoded_width(self) -> int:
        return WORD_SIZE


@dataclass(frozen=True)
class FixedBytes:
    size: int

    @property
    def canonical(self) -> str:
        return f"bytes{self.size}"

    @property
    def is_dynamic(self) -> bool:
        return False

    @property
    def encoded_width(self) -> int:
        return WORD_SIZE


@dataclass(frozen=True)
class DynamicBytes:
    @property
    def canonical(self) -> str:
        return "bytes"

    @property
    def is_dynamic(self) -> bool:
        return True

    @property
    def encoded_width(self) -> int:
        return WORD_SIZE  # offset slot


@dataclass(frozen=True)
class String:
    @property
    def canonical(self) -> str:
        return "string"

    @property
    def is_dynamic(self) -> bool:
        return True

    @property
    def encoded_width(self) -> int:
        return WORD_SIZE  # offset slot


@dataclass(frozen=True)
class Array:
    """`T[]` when `length` is None, `T[k]` otherwise."""

    element: FieldType
    length: int | None = None

    @property
    def canonical(self) -> str:
        suffix = "" if self.length is None else str(self.length)
        return f"{self.element.canonical}[{suffix}]"

    @property
    def is_dynamic(self) -> bool:
        return self.length is None or self.element.is_dynamic

    @property
    def encoded_width(self) -> int:
        # static arrays are inlined in the head, everything else is an offset
        if self.length is None or self.element.is_dynamic:
            return WORD_SIZE
        return self.length * self.element.encoded_width


FieldType = Uint | Int | Address | Bool | FixedBytes | DynamicBytes | String | Array


# ---------- parsing ----------

_ARRAY_RE = re.compile(r"^(?P<inner>.+)\[(?P<length>\d*)\]$")
_INT_RE = re.compile(r"^(?P<kind>u?int)(?P<bits>\d*)$")
_BYTES_RE = re.compile(r"^bytes(?P<size>\d+)$")

_UNSUPPORTED_PREFIXES = ("tuple", "(", "function", "fixed", "ufixed")


def parse_type(type_str: str) -> FieldType:
    """Parse an ABI type string into a `FieldType`.

    Raises `SchemaError` for unknown or unsupported types (tuples, function,
    fixed-point).
    """
    t = "".join(type_str.split())
    if not t:
        raise SchemaError("empty type string")

    m = _ARRAY_RE.match(t)
    if m:
        length_str = m.group("length")
        length = int(length_str) if length_str else None
        if length == 0:
            raise SchemaError(f"zero-length array type: {type_str!r}")
        return Array(parse_type(m.group("inner")), length)

    if t == "address":
        return Address()
    if t == "bool":
        return Bool()
    if t == "string":
        return String()
    if t == "bytes":
        return DynamicBytes()

    m = _BYTES_RE.match(t)
    if m:
        size = int(m.group("size"))
        if not 1 <= size <= WORD_SIZE:
            raise SchemaError(f"invalid fixed bytes size: {type_str!r}")
        return FixedBytes(size)

    m = _INT_RE.match(t)
    if m:
        bits = int(m.group("bits")) if m.group("bits") else 256
        if bits % 8 or not 8 <= bits <= 256:
            raise SchemaError(f"invalid integer width: {type_str!r}")
        return Uint(bits) if m.group("kind") == "uint" else Int(bits)

    if t.startswith(_UNSUPPORTED_PREFIXES):
        raise SchemaError(f"unsupported ABI type: {type_str!r}")
    raise SchemaError(f"unrecognized ABI type: {type_str!r}")
