from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from eventscope.core.models import RawLog
from eventscope.decoding.registries import make_erc20_registry
from eventscope.decoding.specs import EventRegistry

from .helpers import ALICE, BOB, address_topic, word

ABI_DIR = Path(__file__).parent / "abi"


@pytest.fixture
def mock_rpc():
    rpc = AsyncMock()
    rpc.get_logs = AsyncMock(return_value=[])
    rpc.latest_block = AsyncMock(return_value=100)
    rpc.aclose = AsyncMock()
    return rpc


@pytest.fixture
def commitment_abi_path() -> Path:
    return ABI_DIR / "commitment_store_abi.json"


@pytest.fixture
def erc20_registry() -> EventRegistry:
    return make_erc20_registry()


@pytest.fixture
def make_transfer_log(erc20_registry: EventRegistry):
    """Factory for ERC-20 Transfer logs at a given position."""
    (transfer,) = erc20_registry.by_name("Transfer")

    def _make(value: int = 1000, *, block_number: int = 1, log_index: int = 0) -> RawLog:
        return RawLog(
            address="0x" + "ab" * 20,
            topics=(transfer.signature_hash, address_topic(ALICE), address_topic(BOB)),
            data=word(value),
            block_number=block_number,
            tx_hash=f"0x{block_number:064x}",
            log_index=log_index,
        )

    return _make
