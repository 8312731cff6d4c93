"""Test helpers module for shared test utilities.

- constants: Addresses and keys
- factories: Preconfigured mock chain clients
"""

from tests.helpers.constants import (
    FACTORY_ADDRESS,
    LINK_ADDRESS,
    LIQUIDITY_POOL_ADDRESS,
    OTHER_TOKEN,
    POOL_ADDRESS,
    POOL_FEE,
    ROUTER_ADDRESS,
    SIGNER_KEY,
    USDC_ADDRESS,
)
from tests.helpers.factories import make_chain_client

__all__ = [
    # Constants
    "SIGNER_KEY",
    "FACTORY_ADDRESS",
    "ROUTER_ADDRESS",
    "LIQUIDITY_POOL_ADDRESS",
    "POOL_ADDRESS",
    "POOL_FEE",
    "OTHER_TOKEN",
    "USDC_ADDRESS",
    "LINK_ADDRESS",
    # Factories
    "make_chain_client",
]
