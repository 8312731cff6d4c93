"""Transaction-level data structures.

TransactionIntent is what components hand to the ChainClient;
TransactionOutcome is what comes back once a receipt is available.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector

from .types import checksum_address


@dataclass(frozen=True)
class TransactionIntent:
    """Unsigned description of a contract call.

    Attributes:
        to: Target contract address
        function: Function name (e.g., "approve")
        arg_types: Canonical ABI types of the arguments
        args: Argument values in ABI order
        output_types: Canonical ABI types of the return values (for reads)
        value: Wei attached to the call
    """

    to: str
    function: str
    arg_types: tuple[str, ...]
    args: tuple[Any, ...]
    output_types: tuple[str, ...] = ()
    value: int = 0

    @property
    def signature(self) -> str:
        """Function signature, e.g. ``approve(address,uint256)``."""
        return f"{self.function}({','.join(self.arg_types)})"

    @property
    def selector(self) -> bytes:
        """4-byte function selector."""
        return function_signature_to_4byte_selector(self.signature)

    @property
    def calldata(self) -> str:
        """ABI-encoded call data as a 0x-prefixed hex string."""
        encoded = encode(list(self.arg_types), list(self.args))
        return "0x" + (self.selector + encoded).hex()


@dataclass(frozen=True)
class TransactionOutcome:
    """Confirmed result of a submitted transaction.

    Only an outcome with ``success=True`` may gate the next pipeline step;
    a mined-but-reverted transaction has ``success=False``.
    """

    tx_hash: str
    block_number: int | None
    success: bool
    gas_used: int | None = None

    @property
    def reverted(self) -> bool:
        """True if the transaction was mined but reverted."""
        return not self.success

    def explorer_url(self, base_url: str | None) -> str | None:
        """Block explorer link for this transaction, if an explorer is configured."""
        if not base_url:
            return None
        return f"{base_url.rstrip('/')}/tx/{self.tx_hash}"


@dataclass(frozen=True)
class PoolReference:
    """A resolved AMM pool.

    ``fee`` is the pool's own reported fee, not the value requested from
    the factory.
    """

    address: str
    token0: str
    token1: str
    fee: int


@dataclass(frozen=True)
class SwapParameters:
    """Parameters for a single-hop exact-input swap.

    Attributes:
        token_in: Input token address
        token_out: Output token address
        fee: Pool fee tier
        recipient: Address receiving the output tokens
        amount_in: Input amount in base units (must be > 0)
        amount_out_minimum: Minimum acceptable output in base units.
            Defaults to 0, which gives no slippage protection.
        sqrt_price_limit_x96: Price limit (0 = no limit)
    """

    token_in: str
    token_out: str
    fee: int
    recipient: str
    amount_in: int
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0

    def __post_init__(self) -> None:
        if self.amount_in <= 0:
            raise ValueError(f"amount_in must be positive, got {self.amount_in}")
        if self.amount_out_minimum < 0:
            raise ValueError(f"amount_out_minimum cannot be negative: {self.amount_out_minimum}")
        if self.sqrt_price_limit_x96 < 0:
            raise ValueError(
                f"sqrt_price_limit_x96 cannot be negative: {self.sqrt_price_limit_x96}"
            )
        for name in ("token_in", "token_out", "recipient"):
            object.__setattr__(self, name, checksum_address(getattr(self, name)))

    @property
    def has_slippage_protection(self) -> bool:
        """True if a non-zero minimum output is enforced."""
        return self.amount_out_minimum > 0

    def as_tuple(
        self,
    ) -> tuple[str, str, int, str, int, int, int]:
        """Router struct in ABI field order.

        (tokenIn, tokenOut, fee, recipient, amountIn, amountOutMinimum, sqrtPriceLimitX96)
        """
        return (
            self.token_in,
            self.token_out,
            self.fee,
            self.recipient,
            self.amount_in,
            self.amount_out_minimum,
            self.sqrt_price_limit_x96,
        )


@dataclass(frozen=True)
class LiquidityReceipt:
    """Outcomes of both liquidity phases."""

    approval: TransactionOutcome
    deposit: TransactionOutcome
