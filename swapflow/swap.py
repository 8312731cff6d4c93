"""Single-hop exact-input swaps through SwapRouter02."""

from __future__ import annotations

import structlog
from eth_account.signers.local import LocalAccount

from swapflow.abi import SWAP_ROUTER_ABI, build_intent
from swapflow.chain.client import ChainClient
from swapflow.errors import ChainError, SwapFailure, SwapFailureKind
from swapflow.models.transactions import SwapParameters, TransactionOutcome
from swapflow.models.types import checksum_address

logger = structlog.get_logger()


class SwapExecutor:
    """Estimates, submits and confirms ``exactInputSingle`` swaps.

    Gas estimation runs first. If it fails the swap is never signed or
    broadcast, so a swap that would revert costs nothing.
    """

    def __init__(self, client: ChainClient, explorer_url: str | None = None) -> None:
        self.client = client
        self.explorer_url = explorer_url

    async def swap(
        self, router: str, params: SwapParameters, signer: LocalAccount
    ) -> TransactionOutcome:
        """Execute a swap and wait for confirmation.

        On success the router has enforced ``params.amount_out_minimum``
        on-chain; the output amount is not re-read here.

        Args:
            router: SwapRouter02 address
            params: Swap parameters (amounts in base units)
            signer: Account paying ``amount_in``; signs the transaction

        Returns:
            Successful outcome of the swap

        Raises:
            SwapFailure: With kind ESTIMATION, SUBMISSION or EXECUTION
        """
        router = checksum_address(router)
        intent = build_intent(SWAP_ROUTER_ABI, router, "exactInputSingle", params.as_tuple())

        log = logger.bind(
            token_in=params.token_in,
            token_out=params.token_out,
            fee=params.fee,
            amount_in=params.amount_in,
            amount_out_minimum=params.amount_out_minimum,
        )
        if not params.has_slippage_protection:
            log.warning("swap_without_slippage_protection")

        try:
            gas = await self.client.estimate_gas(intent, signer.address)
        except ChainError as e:
            log.error("swap_estimation_failed", error=str(e))
            raise SwapFailure(SwapFailureKind.ESTIMATION, str(e)) from e
        log.info("swap_gas_estimated", gas=gas)

        try:
            tx_hash = await self.client.send(intent, signer, gas=gas)
        except ChainError as e:
            log.error("swap_submission_failed", error=str(e))
            raise SwapFailure(SwapFailureKind.SUBMISSION, str(e)) from e
        log.info("swap_submitted", tx_hash=tx_hash)

        try:
            outcome = await self.client.wait_for_outcome(tx_hash)
        except ChainError as e:
            log.error("swap_unconfirmed", tx_hash=tx_hash, error=str(e))
            raise SwapFailure(SwapFailureKind.EXECUTION, str(e), tx_hash=tx_hash) from e

        if outcome.reverted:
            log.error("swap_reverted", tx_hash=tx_hash, block=outcome.block_number)
            raise SwapFailure(
                SwapFailureKind.EXECUTION,
                f"swap reverted in block {outcome.block_number}",
                tx_hash=tx_hash,
            )

        log.info(
            "swap_confirmed",
            tx_hash=tx_hash,
            block=outcome.block_number,
            gas_used=outcome.gas_used,
            url=outcome.explorer_url(self.explorer_url),
        )
        return outcome


__all__ = ["SwapExecutor"]
