"""Network clients.

- ChainClient protocol
- Web3ChainClient for JSON-RPC endpoints
- MockChainClient for tests
"""

from .client import ChainClient, Web3ChainClient
from .mock import CallRule, MockChainClient

__all__ = ["ChainClient", "Web3ChainClient", "MockChainClient", "CallRule"]
