"""End-to-end swap-and-provide workflow.

The Orchestrator is the only component that knows the step order:

    START → APPROVE_SWAP_INPUT → RESOLVE_POOL → EXECUTE_SWAP
          → APPROVE_LP_TOKEN → DEPOSIT_LIQUIDITY → DONE

Any step may fail, which ends the run in FAILED. Nothing is undone: approvals
and swaps confirmed before the failure stay in effect on-chain.

Runs are not safe to overlap for the same signer (they race on the nonce);
callers must keep at most one run in flight per key.
"""

from __future__ import annotations

import structlog
from eth_account.signers.local import LocalAccount

from swapflow.allowance import AllowanceManager
from swapflow.chain.client import ChainClient
from swapflow.config import PipelineConfig
from swapflow.errors import LiquidityFailure, LiquidityFailurePhase, PipelineError
from swapflow.liquidity import LiquidityProvisioner
from swapflow.models.assets import HumanAmount
from swapflow.models.pipeline import PipelineResult, PipelineStage
from swapflow.models.transactions import PoolReference, SwapParameters, TransactionOutcome
from swapflow.pools import PoolResolver
from swapflow.swap import SwapExecutor

logger = structlog.get_logger()


class Orchestrator:
    """Sequences approval, pool lookup, swap, LP approval and deposit.

    Components default to instances built on ``client``; pass them
    explicitly to substitute test doubles.
    """

    def __init__(
        self,
        config: PipelineConfig,
        client: ChainClient,
        signer: LocalAccount,
        allowances: AllowanceManager | None = None,
        resolver: PoolResolver | None = None,
        swapper: SwapExecutor | None = None,
        provisioner: LiquidityProvisioner | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.signer = signer
        self.allowances = allowances or AllowanceManager(client, config.explorer_url)
        self.resolver = resolver or PoolResolver(client)
        self.swapper = swapper or SwapExecutor(client, config.explorer_url)
        self.provisioner = provisioner or LiquidityProvisioner(
            client, self.allowances, config.explorer_url
        )

    async def run(self, swap_amount: HumanAmount, liquidity_amount: HumanAmount) -> PipelineResult:
        """Run the workflow once.

        Args:
            swap_amount: Amount of ``token_in`` to swap, in human units
            liquidity_amount: Amount of ``lp_token`` to deposit, in human units

        Returns:
            PipelineResult; DONE with every outcome, or FAILED with the first
            error and the stage it happened in.

        Raises:
            ValueError: If an amount is invalid (checked before anything is sent)
        """
        cfg = self.config
        amount_in = cfg.token_in.to_base_units(swap_amount)
        if amount_in <= 0:
            raise ValueError(f"swap_amount must be positive, got {swap_amount!r}")
        cfg.lp_token.to_base_units(liquidity_amount)

        outcomes: dict[PipelineStage, TransactionOutcome] = {}
        pool: PoolReference | None = None
        stage = PipelineStage.START
        log = logger.bind(signer=self.signer.address)
        log.info(
            "pipeline_started",
            swap_amount=str(swap_amount),
            liquidity_amount=str(liquidity_amount),
            token_in=cfg.token_in.symbol,
            token_out=cfg.token_out.symbol,
        )

        try:
            stage = PipelineStage.APPROVE_SWAP_INPUT
            outcomes[stage] = await self.allowances.approve(
                cfg.token_in, cfg.router, swap_amount, self.signer
            )

            stage = PipelineStage.RESOLVE_POOL
            pool = await self.resolver.resolve(
                cfg.factory, cfg.token_in.address, cfg.token_out.address, cfg.fee_tier
            )

            stage = PipelineStage.EXECUTE_SWAP
            params = SwapParameters(
                token_in=cfg.token_in.address,
                token_out=cfg.token_out.address,
                fee=pool.fee,
                recipient=self.signer.address,
                amount_in=amount_in,
                amount_out_minimum=cfg.amount_out_minimum,
                sqrt_price_limit_x96=cfg.sqrt_price_limit_x96,
            )
            outcomes[stage] = await self.swapper.swap(cfg.router, params, self.signer)

            stage = PipelineStage.APPROVE_LP_TOKEN
            receipt = await self.provisioner.approve_and_deposit(
                cfg.lp_token, cfg.liquidity_pool, liquidity_amount, None, self.signer
            )
            outcomes[PipelineStage.APPROVE_LP_TOKEN] = receipt.approval
            outcomes[PipelineStage.DEPOSIT_LIQUIDITY] = receipt.deposit
        except PipelineError as e:
            if isinstance(e, LiquidityFailure) and e.phase is LiquidityFailurePhase.DEPOSIT:
                if e.approval is not None:
                    outcomes[PipelineStage.APPROVE_LP_TOKEN] = e.approval
                stage = PipelineStage.DEPOSIT_LIQUIDITY
            log.error(
                "pipeline_failed",
                stage=stage.value,
                error_type=type(e).__name__,
                error=str(e),
                completed=[s.value for s in outcomes],
            )
            return PipelineResult.failed(stage, e, outcomes, pool)

        log.info("pipeline_completed", tx_hashes=[o.tx_hash for o in outcomes.values()])
        return PipelineResult.completed(outcomes, pool)


__all__ = ["Orchestrator"]
