from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field

from eventscope.core.config import DEFAULT_DECODER_CONFIG, DecoderConfig
from eventscope.core.interfaces import ILogSource
from eventscope.core.models import RawLog
from eventscope.decoding.decoder import DecodedEvent, decode_log
from eventscope.decoding.specs import EventRegistry
from eventscope.errors import DecodeError, TopicCountError
from eventscope.orchestration.utils import iter_chunks

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Stats / output
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class ObserveStats:
    """
    Aggregated counters for the observe pipeline.

    Mutated by workers to track:
    - how many block ranges were fetched, split or given up on
    - how many logs were fetched, decoded, unmatched or rejected
    """

    chunks_ok: int = 0
    chunks_failed: int = 0
    splits: int = 0
    total_logs: int = 0
    decoded: int = 0
    unmatched: int = 0
    decode_errors: int = 0
    topic_count_errors: int = 0
    events_by_name: Counter[str] = field(default_factory=Counter)


@dataclass(kw_only=True)
class ObserveOutput:
    """Decoded events sorted by (block_number, log_index), plus stats."""

    events: list[DecodedEvent]
    stats: ObserveStats
    failed_ranges: list[tuple[int, int]]


@dataclass(frozen=True)
class WorkSeed:
    """Inclusive block interval to process."""

    start: int
    end: int

    def split(self) -> tuple[WorkSeed, WorkSeed]:
        mid = (self.start + self.end) // 2
        return (
            WorkSeed(self.start, mid),
            WorkSeed(mid + 1, self.end),
        )


# ---------------------------------------------------------------------------
# Processing context
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ObserveContext:
    """Shared state for interval processing (keeps worker signatures small)."""

    source: ILogSource
    address: str
    topic0s: list[str]
    registry: EventRegistry
    decoder_config: DecoderConfig
    sem: asyncio.Semaphore
    max_attempts: int
    retry_backoff_s: float
    stats: ObserveStats
    events: list[DecodedEvent]
    failed_ranges: list[tuple[int, int]]


def _decode_chunk(ctx: ObserveContext, logs: list[RawLog]) -> None:
    """Decode one chunk's logs; per-log failures are counted and skipped."""
    for log in logs:
        try:
            event = decode_log(log, ctx.registry, ctx.decoder_config)
        except TopicCountError as exc:
            ctx.stats.topic_count_errors += 1
            logger.warning("skipping log tx=%s index=%s: %s", log.tx_hash, log.log_index, exc)
            continue
        except DecodeError as exc:
            ctx.stats.decode_errors += 1
            logger.warning("skipping log tx=%s index=%s: %s", log.tx_hash, log.log_index, exc)
            continue

        if event is None:
            ctx.stats.unmatched += 1
            continue
        ctx.events.append(event)
        ctx.stats.decoded += 1
        ctx.stats.events_by_name[event.name] += 1


async def _fetch_with_retries(ctx: ObserveContext, seed: WorkSeed) -> list[RawLog]:
    attempt = 0
    while True:
        attempt += 1
        try:
            async with ctx.sem:
                return await ctx.source.get_logs(
                    address=ctx.address,
                    topic0s=ctx.topic0s,
                    from_block=seed.start,
                    to_block=seed.end,
                )
        except Exception as e:
            if attempt >= ctx.max_attempts:
                raise
            logger.warning(
                "fetch %d-%d failed (attempt %d/%d): %s",
                seed.start,
                seed.end,
                attempt,
                ctx.max_attempts,
                e,
            )
            await asyncio.sleep(ctx.retry_backoff_s * attempt)


async def process_interval(ctx: ObserveContext, seed: WorkSeed) -> None:
    """
    Fetch and decode one inclusive range.

    A range that keeps failing is split in half (nodes often reject wide
    ranges with too many results); a single block that still fails is
    recorded in `failed_ranges`.
    """
    stack: list[WorkSeed] = [seed]

    while stack:
        current = stack.pop()
        try:
            logs = await _fetch_with_retries(ctx, current)
        except Exception as e:
            if current.start < current.end:
                left, right = current.split()
                stack.extend([right, left])
                ctx.stats.splits += 1
                logger.warning("splitting %d-%d after error: %s", current.start, current.end, e)
            else:
                ctx.stats.chunks_failed += 1
                ctx.failed_ranges.append((current.start, current.end))
                logger.error("giving up on block %d: %s", current.start, e)
            continue

        ctx.stats.chunks_ok += 1
        ctx.stats.total_logs += len(logs)
        _decode_chunk(ctx, logs)


# ---------------------------------------------------------------------------
# Domain service – ObserveService
# ---------------------------------------------------------------------------


class ObserveService:
    """
    Fetch logs for one contract over a block range and decode them.

    Depends only on the `ILogSource` interface and a frozen registry; decoding
    itself is stateless, so chunks are processed concurrently and the result
    is re-sorted by log position at the end.
    """

    def __init__(
        self,
        logs_source: ILogSource,
        registry: EventRegistry,
        decoder_config: DecoderConfig = DEFAULT_DECODER_CONFIG,
    ) -> None:
        self._logs_source = logs_source
        self._registry = registry
        self._decoder_config = decoder_config

    async def run(
        self,
        *,
        address: str,
        from_block: int,
        to_block: int,
        step: int = 5_000,
        concurrency: int = 8,
        max_attempts: int = 3,
        retry_backoff_s: float = 0.8,
    ) -> ObserveOutput:
        """
        Observe `address` over the inclusive [from_block, to_block] range.

        Only logs whose topic0 is in the registry are requested from the node.
        """
        ctx = ObserveContext(
            source=self._logs_source,
            address=address,
            topic0s=self._registry.topic0s(),
            registry=self._registry,
            decoder_config=self._decoder_config,
            sem=asyncio.Semaphore(concurrency),
            max_attempts=max(1, max_attempts),
            retry_backoff_s=retry_backoff_s,
            stats=ObserveStats(),
            events=[],
            failed_ranges=[],
        )

        seeds = [WorkSeed(a, b) for a, b in iter_chunks(from_block, to_block, step)]
        await asyncio.gather(*(process_interval(ctx, seed) for seed in seeds))

        ctx.events.sort(key=lambda e: e.position)
        ctx.failed_ranges.sort()
        return ObserveOutput(events=ctx.events, stats=ctx.stats, failed_ranges=ctx.failed_ranges)
