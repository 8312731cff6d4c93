"""Configuration for the swap-and-provide pipeline.

``Settings`` reads the process environment (and an optional ``.env`` file);
``PipelineConfig`` is the immutable struct the orchestrator is built from.
Tests construct ``PipelineConfig`` directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from eth_account import Account
from eth_account.signers.local import LocalAccount
from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from swapflow.constants import (
    BALANCER_POOL_ADDRESS,
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    SEPOLIA_EXPLORER_URL,
    SWAP_ROUTER_02_ADDRESS,
    UNISWAP_V3_FACTORY_ADDRESS,
    V3_FEE_MEDIUM,
    V3_FEE_TIERS,
)
from swapflow.models.assets import LINK, USDC, AssetDescriptor
from swapflow.models.types import checksum_address


@dataclass(frozen=True)
class PipelineConfig:
    """Addresses and policy for one pipeline instance.

    Attributes:
        factory: Uniswap V3 factory used for pool lookup
        router: SwapRouter02 used for the swap; also the spender of the first approval
        liquidity_pool: Balancer pool receiving the deposit
        token_in: Asset sold in the swap
        token_out: Asset bought in the swap
        lp_token: Asset deposited into the liquidity pool
        fee_tier: Uniswap fee tier of the swap pool
        amount_out_minimum: Minimum swap output in base units of token_out.
            0 disables slippage protection.
        sqrt_price_limit_x96: Swap price limit (0 = no limit)
        explorer_url: Block explorer base URL for log links (None disables)
    """

    factory: str = UNISWAP_V3_FACTORY_ADDRESS
    router: str = SWAP_ROUTER_02_ADDRESS
    liquidity_pool: str = BALANCER_POOL_ADDRESS
    token_in: AssetDescriptor = USDC
    token_out: AssetDescriptor = LINK
    lp_token: AssetDescriptor = LINK
    fee_tier: int = V3_FEE_MEDIUM
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0
    explorer_url: str | None = SEPOLIA_EXPLORER_URL

    def __post_init__(self) -> None:
        for name in ("factory", "router", "liquidity_pool"):
            object.__setattr__(self, name, checksum_address(getattr(self, name)))
        if self.amount_out_minimum < 0:
            raise ValueError(f"amount_out_minimum cannot be negative: {self.amount_out_minimum}")


# Default configuration instance
DEFAULT_PIPELINE_CONFIG = PipelineConfig()


class Settings(BaseSettings):
    """Environment-driven settings.

    Variables use the ``SWAPFLOW_`` prefix; ``RPC_URL`` and ``PRIVATE_KEY``
    are also accepted unprefixed.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWAPFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    rpc_url: str = Field(
        validation_alias=AliasChoices("SWAPFLOW_RPC_URL", "RPC_URL", "rpc_url"),
        description="JSON-RPC endpoint URL",
    )
    private_key: SecretStr = Field(
        validation_alias=AliasChoices("SWAPFLOW_PRIVATE_KEY", "PRIVATE_KEY", "private_key"),
        description="Hex private key of the signing account",
    )
    factory_address: str = Field(default=UNISWAP_V3_FACTORY_ADDRESS)
    router_address: str = Field(default=SWAP_ROUTER_02_ADDRESS)
    liquidity_pool_address: str = Field(default=BALANCER_POOL_ADDRESS)
    fee_tier: int = Field(default=V3_FEE_MEDIUM, description="Uniswap V3 fee tier")
    amount_out_minimum: int = Field(
        default=0,
        ge=0,
        description="Minimum swap output in base units; 0 means no slippage protection",
    )
    confirmation_timeout: float = Field(
        default=DEFAULT_CONFIRMATION_TIMEOUT,
        gt=0,
        description="Seconds to wait for each transaction receipt",
    )
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    request_timeout: float = Field(default=30.0, gt=0)
    explorer_url: str | None = Field(default=SEPOLIA_EXPLORER_URL)

    @field_validator("factory_address", "router_address", "liquidity_pool_address")
    @classmethod
    def _checksum(cls, value: str) -> str:
        return checksum_address(value)

    @field_validator("fee_tier")
    @classmethod
    def _known_fee_tier(cls, value: int) -> int:
        if value not in V3_FEE_TIERS:
            raise ValueError(f"fee_tier must be one of {V3_FEE_TIERS}, got {value}")
        return value

    @field_validator("explorer_url")
    @classmethod
    def _blank_explorer_disables(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    def signer(self) -> LocalAccount:
        """Account for the configured private key.

        Raises:
            ValueError: If the key is malformed
        """
        return Account.from_key(self.private_key.get_secret_value())

    def pipeline_config(self) -> PipelineConfig:
        """Build the orchestrator's config struct."""
        return PipelineConfig(
            factory=self.factory_address,
            router=self.router_address,
            liquidity_pool=self.liquidity_pool_address,
            fee_tier=self.fee_tier,
            amount_out_minimum=self.amount_out_minimum,
            explorer_url=self.explorer_url,
        )


__all__ = ["PipelineConfig", "DEFAULT_PIPELINE_CONFIG", "Settings"]
