from __future__ import annotations

# ABI layout
WORD_SIZE = 32
ADDRESS_SIZE = 20

# topic0 is reserved for the signature hash; the rest hold indexed args
MAX_INDEXED_FIELDS = 3

# topic0 constants (lowercase, 0x-prefixed)
TRANSFER_T0 = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
APPROVAL_T0 = "0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"
