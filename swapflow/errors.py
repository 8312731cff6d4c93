"""Error hierarchy for the swap-and-provide pipeline.

Chain-level errors are raised by ChainClient implementations. Step-level
errors are raised by the pipeline components and carry the chain-level
error as ``__cause__``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from swapflow.models.transactions import TransactionOutcome


class PipelineError(Exception):
    """Base error for every failure the pipeline reports."""

    exit_code = 1


class ChainError(PipelineError):
    """Base error for ChainClient operations."""

    pass


class ChainUnavailable(ChainError):
    """The network endpoint could not be reached or answered with a transport error."""

    exit_code = 12


class CallReverted(ChainError):
    """A read call or gas estimation reverted, or the node refused to run it."""

    pass


class TransactionRejected(ChainError):
    """The node refused a signed transaction (nonce conflict, insufficient funds, ...)."""

    pass


class ConfirmationTimeout(ChainError):
    """No receipt arrived within the confirmation window.

    The transaction may still be mined later; its fate is unknown to the pipeline.
    """

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(f"Transaction {tx_hash} not confirmed within {timeout}s")
        self.tx_hash = tx_hash
        self.timeout = timeout


class AllowanceFailure(PipelineError):
    """An ERC20 approval did not end in a successful receipt."""

    exit_code = 10

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash


class PoolNotFound(PipelineError):
    """The factory has no pool for the token pair at the requested fee tier."""

    exit_code = 11


class PoolMismatch(PoolNotFound):
    """The pool returned by the factory does not match the requested pair or fee."""

    pass


class SwapFailureKind(Enum):
    """Where a swap failed."""

    ESTIMATION = "estimation"
    SUBMISSION = "submission"
    EXECUTION = "execution"


class SwapFailure(PipelineError):
    """Swap failed; ``kind`` says where."""

    exit_code = 13

    def __init__(self, kind: SwapFailureKind, message: str, tx_hash: str | None = None) -> None:
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind
        self.tx_hash = tx_hash


class LiquidityFailurePhase(Enum):
    """Which phase of the liquidity deposit failed."""

    ALLOWANCE = "allowance"
    DEPOSIT = "deposit"


class LiquidityFailure(PipelineError):
    """Liquidity provisioning failed in the approval or the deposit phase.

    A deposit-phase failure carries the confirmed approval outcome, since
    that approval remains in effect.
    """

    exit_code = 14

    def __init__(
        self,
        phase: LiquidityFailurePhase,
        message: str,
        tx_hash: str | None = None,
        approval: TransactionOutcome | None = None,
    ) -> None:
        super().__init__(f"{phase.value}: {message}")
        self.phase = phase
        self.tx_hash = tx_hash
        self.approval = approval


__all__ = [
    "PipelineError",
    "ChainError",
    "ChainUnavailable",
    "CallReverted",
    "TransactionRejected",
    "ConfirmationTimeout",
    "AllowanceFailure",
    "PoolNotFound",
    "PoolMismatch",
    "SwapFailureKind",
    "SwapFailure",
    "LiquidityFailurePhase",
    "LiquidityFailure",
]
