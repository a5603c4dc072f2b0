"""Block-range utilities for chunked log retrieval.

All intervals are inclusive on both ends: [start, end].
"""

from __future__ import annotations

from collections.abc import Generator

from eventscope.core.interfaces import ILogSource


def iter_chunks(a: int, b: int, step: int) -> Generator[tuple[int, int], None, None]:
    """Yield inclusive [start, end] block ranges of size at most `step`."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    x = a
    while x <= b:
        y = min(b, x + step - 1)
        yield (x, y)
        x = y + 1


async def resolve_block_range(
    *,
    logs_source: ILogSource,
    start_block: int,
    end_block: int | str,
) -> tuple[int, int]:
    """Resolve "latest" against the chain head and return (start, end)."""
    if end_block == "latest":
        end = await logs_source.latest_block()
    else:
        end = int(end_block)
    return start_block, end
