"""Pipeline state and result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from swapflow.errors import PipelineError

from .transactions import PoolReference, TransactionOutcome


class PipelineStage(Enum):
    """States of the swap-and-provide workflow, in execution order."""

    START = "start"
    APPROVE_SWAP_INPUT = "approve_swap_input"
    RESOLVE_POOL = "resolve_pool"
    EXECUTE_SWAP = "execute_swap"
    APPROVE_LP_TOKEN = "approve_lp_token"
    DEPOSIT_LIQUIDITY = "deposit_liquidity"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineResult:
    """Result of one pipeline run.

    This dataclass provides explicit success/failure handling, so callers
    branch on ``error`` and ``failed_stage`` instead of parsing messages.

    Attributes:
        stage: DONE on success, FAILED otherwise
        outcomes: Confirmed outcomes of the transaction stages that completed
        pool: Pool resolved for the swap, if resolution was reached
        error: The failure that aborted the run
        failed_stage: The stage that was executing when the run failed

    Examples:
        result = await orchestrator.run(1, "0.5")
        if not result.success:
            print(result.failed_stage, result.error)
    """

    stage: PipelineStage
    outcomes: dict[PipelineStage, TransactionOutcome] = field(default_factory=dict)
    pool: PoolReference | None = None
    error: PipelineError | None = None
    failed_stage: PipelineStage | None = None

    @property
    def success(self) -> bool:
        """True if every stage completed."""
        return self.stage is PipelineStage.DONE

    @property
    def exit_code(self) -> int:
        """Process exit code: 0 on success, the error's code otherwise."""
        if self.error is None:
            return 0
        return self.error.exit_code

    @property
    def tx_hashes(self) -> list[str]:
        """Hashes of all confirmed transactions, in submission order."""
        return [outcome.tx_hash for outcome in self.outcomes.values()]

    @classmethod
    def completed(
        cls, outcomes: dict[PipelineStage, TransactionOutcome], pool: PoolReference
    ) -> PipelineResult:
        """Create a successful result."""
        return cls(stage=PipelineStage.DONE, outcomes=dict(outcomes), pool=pool)

    @classmethod
    def failed(
        cls,
        failed_stage: PipelineStage,
        error: PipelineError,
        outcomes: dict[PipelineStage, TransactionOutcome],
        pool: PoolReference | None = None,
    ) -> PipelineResult:
        """Create a failed result."""
        return cls(
            stage=PipelineStage.FAILED,
            outcomes=dict(outcomes),
            pool=pool,
            error=error,
            failed_stage=failed_stage,
        )
