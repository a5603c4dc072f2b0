"""Core data models and the columnar output buffer.

This module defines:
- `RawLog`: one log record as received from a node (topics + data), plus
   optional position metadata carried for sorting.
- `EventTable`: append-only columnar buffer where every decoded value name
   becomes its own column.

Design notes
------------
- Dynamic columns are stored as strings for Arrow safety (uint256, bytes).
- Base columns are strongly typed and always present.
- Sorting is applied on (block_number, tx_hash, log_index) before write.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pyarrow as pa
from eth_utils import decode_hex

# === Base schema (Arrow) ===

_BASE_FIELDS: list[tuple[str, pa.DataType]] = [
    ("block_number", pa.uint64()),
    ("block_timestamp", pa.uint64()),
    ("tx_hash", pa.string()),
    ("log_index", pa.uint64()),
    ("contract", pa.string()),
    ("event", pa.string()),
]

_BASE_NAMES = {name for name, _ in _BASE_FIELDS}


def _quantity(v: Any) -> int | None:
    if v is None:
        return None
    if isinstance(v, str):
        return int(v, 16) if v.startswith(("0x", "0X")) else int(v)
    return int(v)


# === RPC record ===


@dataclass(slots=True, frozen=True)
class RawLog:
    """Raw log as fetched from a node.

    Only `topics` and `data` take part in decoding; the position fields are
    metadata the caller carries along to re-sort decoded results.
    """

    address: str  # lowercased 0x...
    topics: tuple[bytes, ...]  # 32-byte words, topics[0] = signature hash
    data: bytes
    block_number: int | None = None
    tx_hash: str | None = None
    log_index: int | None = None
    block_timestamp: int | None = None

    @classmethod
    def from_rpc(cls, rl: Mapping[str, Any]) -> RawLog:
        """Normalize one eth_getLogs result entry."""
        tx_hash = rl.get("transactionHash") or rl.get("transaction_hash")
        return cls(
            address=str(rl["address"]).lower(),
            topics=tuple(decode_hex(t) if isinstance(t, str) else bytes(t) for t in rl.get("topics", [])),
            data=decode_hex(rl.get("data") or "0x"),
            block_number=_quantity(rl.get("blockNumber")),
            tx_hash=tx_hash.lower() if isinstance(tx_hash, str) else None,
            log_index=_quantity(rl.get("logIndex")),
            block_timestamp=_quantity(rl.get("blockTimestamp")),
        )

    @property
    def position(self) -> tuple[int, int]:
        """(block_number, log_index) sort key; unknown positions sort first."""
        return (
            -1 if self.block_number is None else self.block_number,
            -1 if self.log_index is None else self.log_index,
        )


# === Dynamic column buffer ===


def stringify(v: Any) -> str | None:
    """Render a decoded value as a column string."""
    if v is None:
        return None
    if isinstance(v, bytes):
        return "0x" + v.hex()
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (list, tuple)):
        return json.dumps([_jsonable(x) for x in v], separators=(",", ":"))
    return str(v)


def _jsonable(v: Any) -> Any:
    if isinstance(v, bytes):
        return "0x" + v.hex()
    if isinstance(v, (list, tuple)):
        return [_jsonable(x) for x in v]
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)  # uint256 does not survive JSON number parsing
    return v


@dataclass(slots=True)
class EventTable:
    """Dynamic columnar buffer for decoded events.

    - Base columns are always present and strongly typed.
    - Value columns are created lazily upon first key appearance and padded
      with None for rows of events that lack them.
    """

    block_number: list[int] = field(default_factory=list)
    block_timestamp: list[int] = field(default_factory=list)
    tx_hash: list[str] = field(default_factory=list)
    log_index: list[int] = field(default_factory=list)
    contract: list[str] = field(default_factory=list)
    event: list[str] = field(default_factory=list)

    dyn: dict[str, list[str | None]] = field(default_factory=dict)
    _rows: int = 0

    def size(self) -> int:
        """Number of rows currently stored."""
        return self._rows

    def _append_base(self, log: RawLog, event: str) -> None:
        self.block_number.append(int(log.block_number or 0))
        self.block_timestamp.append(int(log.block_timestamp or 0))
        self.tx_hash.append(log.tx_hash or "")
        self.log_index.append(int(log.log_index or 0))
        self.contract.append(log.address)
        self.event.append(event)
        self._rows += 1
        for col in self.dyn.values():
            col.append(None)

    def _ensure_dyn_col(self, name: str) -> list[str | None]:
        col = self.dyn.get(name)
        if col is None:
            col = [None] * self._rows
            self.dyn[name] = col
        return col

    def append_decoded(self, *, event_name: str, log: RawLog, values: Mapping[str, Any]) -> None:
        """Append one decoded event (every value name becomes a column)."""
        self._append_base(log, event_name)
        for k, v in values.items():
            col = f"value_{k}" if k in _BASE_NAMES else k
            self._ensure_dyn_col(col)[-1] = stringify(v)

    def to_arrow_table(self) -> pa.Table:
        """Convert the buffer to a sorted Arrow table with deterministic schema."""
        fields = [pa.field(n, t) for n, t in _BASE_FIELDS]
        arrays: dict[str, pa.Array] = {
            "block_number": pa.array(self.block_number, type=pa.uint64()),
            "block_timestamp": pa.array(self.block_timestamp, type=pa.uint64()),
            "tx_hash": pa.array(self.tx_hash, type=pa.string()),
            "log_index": pa.array(self.log_index, type=pa.uint64()),
            "contract": pa.array(self.contract, type=pa.string()),
            "event": pa.array(self.event, type=pa.string()),
        }
        for name in sorted(self.dyn.keys()):
            fields.append(pa.field(name, pa.string()))
            arrays[name] = pa.array(self.dyn[name], type=pa.string())
        schema = pa.schema(fields)
        return pa.Table.from_pydict(arrays, schema=schema).sort_by(
            [("block_number", "ascending"), ("tx_hash", "ascending"), ("log_index", "ascending")]
        )
