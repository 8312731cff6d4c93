"""ERC20 allowance management."""

from __future__ import annotations

import structlog
from eth_account.signers.local import LocalAccount

from swapflow.abi import ERC20_ABI, build_intent
from swapflow.chain.client import ChainClient
from swapflow.errors import AllowanceFailure, ChainError
from swapflow.models.assets import AssetDescriptor, HumanAmount
from swapflow.models.transactions import TransactionOutcome
from swapflow.models.types import checksum_address

logger = structlog.get_logger()


class AllowanceManager:
    """Issues ERC20 ``approve`` transactions and waits for them to be mined.

    No retry is attempted. Re-approving the same amount is economically a
    no-op but still costs a transaction.
    """

    def __init__(self, client: ChainClient, explorer_url: str | None = None) -> None:
        self.client = client
        self.explorer_url = explorer_url

    async def approve(
        self,
        asset: AssetDescriptor,
        spender: str,
        amount: HumanAmount,
        signer: LocalAccount,
    ) -> TransactionOutcome:
        """Approve ``spender`` to move ``amount`` of ``asset`` for ``signer``.

        Args:
            asset: Token to approve
            spender: Contract allowed to spend
            amount: Human-readable amount, scaled with the asset's decimals
            signer: Token owner; signs the transaction

        Returns:
            Successful outcome of the approval

        Raises:
            AllowanceFailure: If the transaction is rejected, times out, or reverts
            ValueError: If the amount cannot be scaled to base units
        """
        scaled = asset.to_base_units(amount)
        spender = checksum_address(spender)
        intent = build_intent(ERC20_ABI, asset.address, "approve", spender, scaled)

        log = logger.bind(token=asset.symbol, spender=spender, amount=scaled)
        try:
            tx_hash = await self.client.send(intent, signer)
        except ChainError as e:
            log.error("approval_submission_failed", error=str(e))
            raise AllowanceFailure(f"{asset.symbol} approval not submitted: {e}") from e

        log.info("approval_submitted", tx_hash=tx_hash)
        try:
            outcome = await self.client.wait_for_outcome(tx_hash)
        except ChainError as e:
            log.error("approval_unconfirmed", tx_hash=tx_hash, error=str(e))
            raise AllowanceFailure(
                f"{asset.symbol} approval not confirmed: {e}", tx_hash=tx_hash
            ) from e

        if outcome.reverted:
            log.error("approval_reverted", tx_hash=tx_hash, block=outcome.block_number)
            raise AllowanceFailure(f"{asset.symbol} approval reverted", tx_hash=tx_hash)

        log.info(
            "approval_confirmed",
            tx_hash=tx_hash,
            block=outcome.block_number,
            url=outcome.explorer_url(self.explorer_url),
        )
        return outcome

    async def allowance(self, asset: AssetDescriptor, owner: str, spender: str) -> int:
        """Read the current allowance in base units.

        Raises:
            ChainError: If the read fails
        """
        intent = build_intent(
            ERC20_ABI,
            asset.address,
            "allowance",
            checksum_address(owner),
            checksum_address(spender),
        )
        (value,) = await self.client.call(intent)
        return int(value)


__all__ = ["AllowanceManager"]
