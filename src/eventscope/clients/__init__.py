"""Network collaborators: JSON-RPC log source and ABI retrieval."""

from eventscope.clients.abi import fetch_abi, load_abi, read_abi
from eventscope.clients.rpc import RPC

__all__ = ["RPC", "fetch_abi", "load_abi", "read_abi"]
