"""ChainClient protocol and the web3.py implementation."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import aiohttp
import structlog
from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import (
    ContractLogicError,
    ProviderConnectionError,
    TimeExhausted,
    Web3Exception,
)

from swapflow.constants import DEFAULT_CONFIRMATION_TIMEOUT, DEFAULT_POLL_INTERVAL
from swapflow.errors import (
    CallReverted,
    ChainUnavailable,
    ConfirmationTimeout,
    TransactionRejected,
)
from swapflow.models.transactions import TransactionIntent, TransactionOutcome

logger = structlog.get_logger()

# Transport-level failures: the endpoint is down or unreachable
TRANSPORT_ERRORS = (
    ProviderConnectionError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ConnectionError,
)


class ChainClient(Protocol):
    """Protocol for network clients.

    This allows swapping between the RPC-backed client and a mock client for
    testing. Every method is a suspension point.
    """

    async def call(self, intent: TransactionIntent) -> tuple[Any, ...]:
        """Execute a read-only call and decode its return values.

        Raises:
            CallReverted: If the call reverts or returns undecodable data
            ChainUnavailable: On transport failure
        """
        ...

    async def estimate_gas(self, intent: TransactionIntent, sender: str) -> int:
        """Estimate gas for sending ``intent`` from ``sender``.

        Raises:
            CallReverted: If the call would revert
            ChainUnavailable: On transport failure
        """
        ...

    async def send(
        self, intent: TransactionIntent, signer: LocalAccount, gas: int | None = None
    ) -> str:
        """Sign and broadcast ``intent``; return the transaction hash.

        If ``gas`` is None the client estimates it.

        Raises:
            TransactionRejected: If the node refuses the transaction or
                cannot supply its nonce and fee fields
            CallReverted: If gas estimation reverts
            ChainUnavailable: On transport failure
        """
        ...

    async def wait_for_outcome(self, tx_hash: str) -> TransactionOutcome:
        """Block until ``tx_hash`` is mined.

        Raises:
            ConfirmationTimeout: If no receipt arrives in time
            ChainUnavailable: On transport or RPC failure
        """
        ...


class Web3ChainClient:
    """ChainClient backed by a JSON-RPC endpoint via web3.py.

    Transactions are EIP-1559 (type 2), signed locally with the signer's key.
    """

    def __init__(
        self,
        rpc_url: str,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        request_timeout: float = 30.0,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            rpc_url: HTTP RPC URL
            confirmation_timeout: Seconds to wait for a receipt
            poll_interval: Seconds between receipt polls
            request_timeout: Per-request HTTP timeout in seconds
            w3: Pre-built AsyncWeb3 instance (overrides rpc_url)
        """
        self.rpc_url = rpc_url
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self.w3 = w3 or AsyncWeb3(
            AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout})
        )

    @staticmethod
    def _tx_params(intent: TransactionIntent) -> dict[str, Any]:
        return {
            "to": Web3.to_checksum_address(intent.to),
            "data": intent.calldata,
            "value": intent.value,
        }

    async def call(self, intent: TransactionIntent) -> tuple[Any, ...]:
        try:
            raw = await self.w3.eth.call(self._tx_params(intent))
        except TRANSPORT_ERRORS as e:
            raise ChainUnavailable(f"{intent.function} call failed: {e}") from e
        except Web3Exception as e:
            raise CallReverted(f"{intent.function} call reverted: {e}") from e
        try:
            return tuple(decode(list(intent.output_types), bytes(raw)))
        except DecodingError as e:
            # Empty or short return data: the target is not the expected contract
            raise CallReverted(f"{intent.function} returned undecodable data: {e}") from e

    async def estimate_gas(self, intent: TransactionIntent, sender: str) -> int:
        params = self._tx_params(intent)
        params["from"] = Web3.to_checksum_address(sender)
        try:
            return int(await self.w3.eth.estimate_gas(params))
        except TRANSPORT_ERRORS as e:
            raise ChainUnavailable(f"{intent.function} gas estimation failed: {e}") from e
        except ContractLogicError as e:
            raise CallReverted(f"{intent.function} would revert: {e}") from e
        except Web3Exception as e:
            raise CallReverted(f"{intent.function} gas estimation rejected: {e}") from e

    async def _fee_fields(self, sender: str) -> dict[str, int]:
        # Independent reads, issued together
        try:
            chain_id, nonce, priority_fee, block = await asyncio.gather(
                self.w3.eth.chain_id,
                self.w3.eth.get_transaction_count(sender, "pending"),
                self.w3.eth.max_priority_fee,
                self.w3.eth.get_block("latest"),
            )
        except TRANSPORT_ERRORS as e:
            raise ChainUnavailable(f"Could not read transaction fields: {e}") from e
        except Web3Exception as e:
            raise TransactionRejected(f"Could not read transaction fields: {e}") from e

        try:
            base_fee = int(block["baseFeePerGas"])
        except KeyError:
            raise TransactionRejected(
                "Latest block has no baseFeePerGas; EIP-1559 unsupported"
            ) from None
        return {
            "chainId": int(chain_id),
            "nonce": int(nonce),
            "maxPriorityFeePerGas": int(priority_fee),
            "maxFeePerGas": 2 * base_fee + int(priority_fee),
        }

    async def send(
        self, intent: TransactionIntent, signer: LocalAccount, gas: int | None = None
    ) -> str:
        sender = Web3.to_checksum_address(signer.address)
        if gas is None:
            gas = await self.estimate_gas(intent, sender)

        tx = self._tx_params(intent)
        tx.update(await self._fee_fields(sender))
        tx.update({"gas": gas, "type": 2})

        signed = signer.sign_transaction(tx)
        try:
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except TRANSPORT_ERRORS as e:
            raise ChainUnavailable(f"{intent.function} broadcast failed: {e}") from e
        except (Web3Exception, ValueError) as e:
            raise TransactionRejected(f"{intent.function} rejected: {e}") from e

        return Web3.to_hex(tx_hash)

    async def wait_for_outcome(self, tx_hash: str) -> TransactionOutcome:
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.confirmation_timeout,
                poll_latency=self.poll_interval,
            )
        except TimeExhausted as e:
            raise ConfirmationTimeout(tx_hash, self.confirmation_timeout) from e
        except (*TRANSPORT_ERRORS, Web3Exception) as e:
            raise ChainUnavailable(f"Receipt lookup for {tx_hash} failed: {e}") from e

        return TransactionOutcome(
            tx_hash=tx_hash,
            block_number=receipt.get("blockNumber"),
            success=receipt.get("status") == 1,
            gas_used=receipt.get("gasUsed"),
        )

    async def close(self) -> None:
        """Close the provider's HTTP sessions."""
        await self.w3.provider.disconnect()


__all__ = ["ChainClient", "Web3ChainClient", "TRANSPORT_ERRORS"]
