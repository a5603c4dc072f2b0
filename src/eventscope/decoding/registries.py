"""Prebuilt registries for commonly observed contracts.

All registries are composable with ``a | b`` as long as their topic0s do not
collide (ERC-20 and ERC-721 `Transfer` share a topic0 and cannot be merged).

Available registries:
- ERC-20: make_erc20_registry()
- ERC-721: make_erc721_registry()
- mev-commit PreConfCommitmentStore: make_commitment_store_registry()

Example
-------
>>> from eventscope.decoding.registries import make_erc20_registry
>>> reg = make_erc20_registry()
>>> reg.topic0s()[0]
'0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef'
"""

from __future__ import annotations

from .registry import make_registry
from .specs import EventRegistry

COMMITMENT_STORED = (
    "CommitmentStored("
    "bytes32 indexed commitmentIndex, address bidder, address commiter, uint256 bid, "
    "uint64 blockNumber, bytes32 bidHash, uint64 decayStartTimeStamp, uint64 decayEndTimeStamp, "
    "string txnHash, string revertingTxHashes, bytes32 commitmentHash, bytes bidSignature, "
    "bytes commitmentSignature, uint64 dispatchTimestamp, bytes sharedSecretKey)"
)


# -------------------------
# Token standards
# -------------------------

def make_erc20_registry() -> EventRegistry:
    """Return registry for ERC-20 Transfer/Approval."""
    return make_registry([
        "Transfer(address indexed from, address indexed to, uint256 value)",
        "Approval(address indexed owner, address indexed spender, uint256 value)",
    ])


def make_erc721_registry() -> EventRegistry:
    """Return registry for ERC-721 Transfer/Approval/ApprovalForAll."""
    return make_registry([
        "Transfer(address indexed from, address indexed to, uint256 indexed tokenId)",
        "Approval(address indexed owner, address indexed approved, uint256 indexed tokenId)",
        "ApprovalForAll(address indexed owner, address indexed operator, bool approved)",
    ])


# -------------------------
# mev-commit
# -------------------------

def make_commitment_store_registry() -> EventRegistry:
    """Return registry for the PreConfCommitmentStore CommitmentStored event."""
    return make_registry(COMMITMENT_STORED)
