"""Orchestration for observing a contract over a block range.

This package provides:
- Block-range chunking utilities (`iter_chunks`, `resolve_block_range`)
- `eventscope.orchestration.orchestrator`: wiring of the RPC client, ABI
  loading and the observe use case
"""

from eventscope.orchestration.utils import iter_chunks, resolve_block_range

__all__ = [
    "iter_chunks",
    "resolve_block_range",
]
