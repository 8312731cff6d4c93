"""Data models for the swap-and-provide pipeline."""

from swapflow.models.assets import (
    LINK,
    USDC,
    AssetDescriptor,
    AssetRegistry,
    from_base_units,
    to_base_units,
)
from swapflow.models.pipeline import PipelineResult, PipelineStage
from swapflow.models.transactions import (
    LiquidityReceipt,
    PoolReference,
    SwapParameters,
    TransactionIntent,
    TransactionOutcome,
)
from swapflow.models.types import (
    ZERO_ADDRESS,
    checksum_address,
    is_valid_address,
    is_zero_address,
    normalize_address,
    same_address,
)

__all__ = [
    # Assets
    "AssetDescriptor",
    "AssetRegistry",
    "USDC",
    "LINK",
    "to_base_units",
    "from_base_units",
    # Transactions
    "TransactionIntent",
    "TransactionOutcome",
    "PoolReference",
    "SwapParameters",
    "LiquidityReceipt",
    # Pipeline
    "PipelineStage",
    "PipelineResult",
    # Types
    "ZERO_ADDRESS",
    "checksum_address",
    "is_valid_address",
    "is_zero_address",
    "normalize_address",
    "same_address",
]
