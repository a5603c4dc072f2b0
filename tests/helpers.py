"""Small builders for hand-assembled ABI payloads and logs."""

ALICE = "0x" + "11" * 20
BOB = "0x" + "22" * 20


def word(n: int) -> bytes:
    return n.to_bytes(32, "big")


def pad(b: bytes) -> bytes:
    return b + b"\x00" * (-len(b) % 32)


def address_topic(address: str) -> bytes:
    return b"\x00" * 12 + bytes.fromhex(address[2:])


RPC_LOG = {
    "address": "0xAbCdEf0000000000000000000000000000000001",
    "topics": [
        "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef",
        "0x0000000000000000000000001111111111111111111111111111111111111111",
    ],
    "data": "0x00000000000000000000000000000000000000000000000000000000000003e8",
    "blockNumber": "0x10",
    "transactionHash": "0xABCD",
    "logIndex": "0x2",
    "removed": False,
}
