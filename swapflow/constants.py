"""Network constants for the Sepolia deployment.

Centralizes well-known addresses and protocol parameters.
"""

SEPOLIA_CHAIN_ID = 11155111

# Uniswap V3 fee tiers in hundredths of a basis point (3000 = 0.3%)
V3_FEE_LOWEST = 100
V3_FEE_LOW = 500
V3_FEE_MEDIUM = 3000
V3_FEE_HIGH = 10000

V3_FEE_TIERS = [V3_FEE_LOWEST, V3_FEE_LOW, V3_FEE_MEDIUM, V3_FEE_HIGH]

# Contract addresses (Sepolia)
UNISWAP_V3_FACTORY_ADDRESS = "0x0227628f3F023bb0B980b67D528571c95c6DaC1c"
SWAP_ROUTER_02_ADDRESS = "0x3bFA4769FB09eefC5a80d6E87c3B9C650f7Ae48E"
BALANCER_POOL_ADDRESS = "0x9fC9e94C0DdC148f8D4c47c9b1dD78Fbb5e40F4D"

# Token addresses (Sepolia)
USDC_ADDRESS = "0x1c7D4B196Cb0C7B01d743Fbc6116a902379C7238"
LINK_ADDRESS = "0x779877A7B0D9E8603169DdbD7836e478b4624789"

SEPOLIA_EXPLORER_URL = "https://sepolia.etherscan.io"

# Seconds to wait for a receipt before the step is reported as failed
DEFAULT_CONFIRMATION_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 1.0

__all__ = [
    "SEPOLIA_CHAIN_ID",
    "V3_FEE_LOWEST",
    "V3_FEE_LOW",
    "V3_FEE_MEDIUM",
    "V3_FEE_HIGH",
    "V3_FEE_TIERS",
    "UNISWAP_V3_FACTORY_ADDRESS",
    "SWAP_ROUTER_02_ADDRESS",
    "BALANCER_POOL_ADDRESS",
    "USDC_ADDRESS",
    "LINK_ADDRESS",
    "SEPOLIA_EXPLORER_URL",
    "DEFAULT_CONFIRMATION_TIMEOUT",
    "DEFAULT_POLL_INTERVAL",
]
