from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DecoderConfig:
    """Decoding policy.

    `strict=False` (relaxed) truncates integers wider than their declared
    width, treats any nonzero bool word as True and ignores dirty padding.
    `strict=True` turns each of those into a `DecodeError`.
    """

    strict: bool = False
    checksum_addresses: bool = True


DEFAULT_DECODER_CONFIG = DecoderConfig()


@dataclass(frozen=True)
class ObserverConfig:
    """Configuration for observing one contract over a block range."""

    rpc_url: str
    address: str
    abi_source: str  # file path or http(s) URL
    events: tuple[str, ...] = ()  # event names to decode; empty = every event in the ABI
    start_block: int = 0
    end_block: int | str = "latest"
    step: int = 5_000
    concurrency: int = 8
    timeout_s: int = 20
    max_attempts: int = 3
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
