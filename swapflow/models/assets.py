"""Token asset descriptors and decimal scaling.

Amounts enter the pipeline in human units ("1.5" USDC) and leave it in base
units (1_500_000). Scaling goes through Decimal with a context wide enough
for any uint256, so no float rounding leaks into encoded amounts.
"""

from __future__ import annotations

import decimal
from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal

from swapflow.constants import LINK_ADDRESS, SEPOLIA_CHAIN_ID, USDC_ADDRESS

from .types import UINT256_MAX, checksum_address, normalize_address

# 78 digits of precision covers any uint256 value (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)

HumanAmount = str | int | float | Decimal


@dataclass(frozen=True)
class AssetDescriptor:
    """An ERC20 token on a specific chain.

    Attributes:
        chain_id: EIP-155 chain identifier
        address: Checksummed token contract address
        decimals: Token precision used to scale human amounts to base units
        symbol: Ticker symbol (e.g., "USDC")
        name: Display name
    """

    chain_id: int
    address: str
    decimals: int
    symbol: str
    name: str = ""

    def __post_init__(self) -> None:
        if self.decimals < 0:
            raise ValueError(f"{self.symbol}: decimals must be non-negative, got {self.decimals}")
        object.__setattr__(self, "address", checksum_address(self.address))

    def to_base_units(self, amount: HumanAmount) -> int:
        """Scale a human amount to this asset's base units."""
        return to_base_units(amount, self.decimals)

    def from_base_units(self, amount: int) -> Decimal:
        """Scale base units back to a human amount."""
        return from_base_units(amount, self.decimals)


def _as_decimal(amount: HumanAmount) -> Decimal:
    if isinstance(amount, bool):
        raise ValueError(f"Amount must be numeric, got {amount!r}")
    if isinstance(amount, float):
        # str() gives the shortest repr, so 0.1 becomes Decimal("0.1")
        amount = str(amount)
    try:
        value = Decimal(amount)
    except (decimal.InvalidOperation, TypeError) as err:
        raise ValueError(f"Amount must be a decimal number: {amount!r}") from err
    if not value.is_finite():
        raise ValueError(f"Amount must be finite: {amount!r}")
    return value


def to_base_units(amount: HumanAmount, decimals: int) -> int:
    """Convert a human-readable amount to integer base units.

    Args:
        amount: Decimal string, int, float or Decimal (e.g., "0.5")
        decimals: Token precision

    Returns:
        amount × 10^decimals as an exact integer

    Raises:
        ValueError: If the amount is negative, not a finite number, has more
            fractional digits than the token supports, or overflows uint256
    """
    value = _as_decimal(amount)
    if value < 0:
        raise ValueError(f"Amount cannot be negative: {amount!r}")

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(f"Amount {amount!r} has more than {decimals} decimal places")
        result = int(scaled)

    if result > UINT256_MAX:
        raise ValueError(f"Amount {amount!r} overflows uint256")
    return result


def from_base_units(amount: int, decimals: int) -> Decimal:
    """Convert integer base units to a human-readable Decimal."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(amount).scaleb(-decimals)


USDC = AssetDescriptor(
    chain_id=SEPOLIA_CHAIN_ID,
    address=USDC_ADDRESS,
    decimals=6,
    symbol="USDC",
    name="USD//C",
)

LINK = AssetDescriptor(
    chain_id=SEPOLIA_CHAIN_ID,
    address=LINK_ADDRESS,
    decimals=18,
    symbol="LINK",
    name="Chainlink",
)


class AssetRegistry:
    """Static lookup of the assets the pipeline trades.

    Assets are keyed by symbol and by lowercase address.
    """

    def __init__(self, assets: list[AssetDescriptor] | None = None) -> None:
        self._by_symbol: dict[str, AssetDescriptor] = {}
        self._by_address: dict[str, AssetDescriptor] = {}
        for asset in assets if assets is not None else [USDC, LINK]:
            self.add(asset)

    def add(self, asset: AssetDescriptor) -> None:
        """Register an asset, replacing any asset with the same symbol."""
        self._by_symbol[asset.symbol.upper()] = asset
        self._by_address[normalize_address(asset.address)] = asset

    def get(self, symbol: str) -> AssetDescriptor:
        """Get an asset by symbol.

        Raises:
            KeyError: If no asset with that symbol is registered
        """
        try:
            return self._by_symbol[symbol.upper()]
        except KeyError:
            raise KeyError(f"Unknown asset symbol: {symbol}") from None

    def by_address(self, address: str) -> AssetDescriptor | None:
        """Get an asset by contract address, or None if unknown."""
        return self._by_address.get(normalize_address(address))

    def __contains__(self, symbol: str) -> bool:
        return symbol.upper() in self._by_symbol

    def __iter__(self) -> Iterator[AssetDescriptor]:
        return iter(self._by_symbol.values())

    def __len__(self) -> int:
        return len(self._by_symbol)

