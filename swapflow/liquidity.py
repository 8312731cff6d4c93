"""Liquidity deposits into a Balancer pool."""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from eth_account.signers.local import LocalAccount

from swapflow.abi import BALANCER_POOL_ABI, build_intent
from swapflow.allowance import AllowanceManager
from swapflow.chain.client import ChainClient
from swapflow.errors import (
    AllowanceFailure,
    ChainError,
    LiquidityFailure,
    LiquidityFailurePhase,
)
from swapflow.models.assets import AssetDescriptor, HumanAmount
from swapflow.models.transactions import LiquidityReceipt
from swapflow.models.types import checksum_address

logger = structlog.get_logger()


class LiquidityProvisioner:
    """Approves the pool to pull the LP token, then joins the pool.

    The join is only attempted after the approval is confirmed.
    """

    def __init__(
        self,
        client: ChainClient,
        allowances: AllowanceManager | None = None,
        explorer_url: str | None = None,
    ) -> None:
        self.client = client
        self.allowances = allowances or AllowanceManager(client, explorer_url)
        self.explorer_url = explorer_url

    async def approve_and_deposit(
        self,
        lp_token: AssetDescriptor,
        pool: str,
        deposit_amount: HumanAmount,
        max_amounts_in: Sequence[HumanAmount] | None,
        signer: LocalAccount,
    ) -> LiquidityReceipt:
        """Approve ``pool`` for ``deposit_amount`` and join it.

        Args:
            lp_token: Token contributed to the pool
            pool: Pooled-liquidity contract address
            deposit_amount: Pool shares to mint, in human units of ``lp_token``
            max_amounts_in: Per-asset contribution bounds in human units.
                Defaults to ``[deposit_amount]``.
            signer: Depositor; signs both transactions

        Returns:
            LiquidityReceipt with the approval and deposit outcomes

        Raises:
            LiquidityFailure: With phase ALLOWANCE or DEPOSIT
            ValueError: If an amount cannot be scaled to base units
        """
        pool = checksum_address(pool)
        pool_amount_out = lp_token.to_base_units(deposit_amount)
        bounds = [
            lp_token.to_base_units(amount)
            for amount in (max_amounts_in if max_amounts_in is not None else [deposit_amount])
        ]

        try:
            approval = await self.allowances.approve(lp_token, pool, deposit_amount, signer)
        except AllowanceFailure as e:
            raise LiquidityFailure(
                LiquidityFailurePhase.ALLOWANCE, str(e), tx_hash=e.tx_hash
            ) from e

        intent = build_intent(BALANCER_POOL_ABI, pool, "joinPool", pool_amount_out, bounds)
        log = logger.bind(pool=pool, pool_amount_out=pool_amount_out, max_amounts_in=bounds)

        try:
            tx_hash = await self.client.send(intent, signer)
        except ChainError as e:
            log.error("deposit_submission_failed", error=str(e))
            raise LiquidityFailure(
                LiquidityFailurePhase.DEPOSIT, str(e), approval=approval
            ) from e
        log.info("deposit_submitted", tx_hash=tx_hash)

        try:
            deposit = await self.client.wait_for_outcome(tx_hash)
        except ChainError as e:
            log.error("deposit_unconfirmed", tx_hash=tx_hash, error=str(e))
            raise LiquidityFailure(
                LiquidityFailurePhase.DEPOSIT, str(e), tx_hash=tx_hash, approval=approval
            ) from e

        if deposit.reverted:
            log.error("deposit_reverted", tx_hash=tx_hash, block=deposit.block_number)
            raise LiquidityFailure(
                LiquidityFailurePhase.DEPOSIT,
                "joinPool reverted",
                tx_hash=tx_hash,
                approval=approval,
            )

        log.info(
            "deposit_confirmed",
            tx_hash=tx_hash,
            block=deposit.block_number,
            url=deposit.explorer_url(self.explorer_url),
        )
        return LiquidityReceipt(approval=approval, deposit=deposit)


__all__ = ["LiquidityProvisioner"]
