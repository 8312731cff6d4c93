"""In-memory ChainClient for testing without RPC calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from eth_account.signers.local import LocalAccount

from swapflow.errors import (
    CallReverted,
    ChainUnavailable,
    ConfirmationTimeout,
    TransactionRejected,
)
from swapflow.models.transactions import TransactionIntent, TransactionOutcome
from swapflow.models.types import normalize_address


@dataclass(frozen=True)
class CallRule:
    """Matches intents by function name and, optionally, target address."""

    function: str
    to: str | None = None

    def matches(self, intent: TransactionIntent) -> bool:
        if intent.function != self.function:
            return False
        return self.to is None or normalize_address(self.to) == normalize_address(intent.to)


class MockChainClient:
    """Mock chain client.

    Configure view results and failure rules, then inspect ``calls`` and
    ``sent`` for assertions. Every submitted transaction is mined in the
    next block unless a rule says otherwise.
    """

    DEFAULT_GAS = 150_000

    def __init__(self, views: dict[tuple[str, str], tuple[Any, ...]] | None = None) -> None:
        """Initialize mock client.

        Args:
            views: Mapping of (contract address, function name) -> decoded result
        """
        self.views: dict[tuple[str, str], tuple[Any, ...]] = {}
        for (address, function), result in (views or {}).items():
            self.set_view(address, function, *result)

        self.unavailable = False
        self.closed = False
        self._estimate_failures: list[CallRule] = []
        self._rejections: list[CallRule] = []
        self._reverts: list[CallRule] = []
        self._timeouts: list[CallRule] = []

        self.calls: list[tuple[str, TransactionIntent]] = []  # (method, intent)
        self.sent: list[TransactionIntent] = []
        self.senders: list[str] = []
        self._pending: dict[str, TransactionIntent] = {}
        self._block = 1_000

    # Configuration

    def set_view(self, address: str, function: str, *result: Any) -> None:
        self.views[(normalize_address(address), function)] = tuple(result)

    def fail_estimate(self, function: str, to: str | None = None) -> None:
        self._estimate_failures.append(CallRule(function, to))

    def reject(self, function: str, to: str | None = None) -> None:
        self._rejections.append(CallRule(function, to))

    def revert(self, function: str, to: str | None = None) -> None:
        self._reverts.append(CallRule(function, to))

    def time_out(self, function: str, to: str | None = None) -> None:
        self._timeouts.append(CallRule(function, to))

    # Inspection

    def sent_functions(self) -> list[str]:
        """Names of broadcast functions, in order."""
        return [intent.function for intent in self.sent]

    def methods(self) -> list[str]:
        """Client methods invoked, in order."""
        return [method for method, _ in self.calls]

    # ChainClient

    def _check_available(self, intent: TransactionIntent) -> None:
        if self.unavailable:
            raise ChainUnavailable(f"{intent.function}: endpoint unreachable")

    @staticmethod
    def _matches(rules: list[CallRule], intent: TransactionIntent) -> bool:
        return any(rule.matches(intent) for rule in rules)

    async def call(self, intent: TransactionIntent) -> tuple[Any, ...]:
        self.calls.append(("call", intent))
        self._check_available(intent)
        key = (normalize_address(intent.to), intent.function)
        if key not in self.views:
            raise CallReverted(f"{intent.function} reverted on {intent.to}")
        return self.views[key]

    async def estimate_gas(self, intent: TransactionIntent, sender: str) -> int:
        self.calls.append(("estimate_gas", intent))
        self._check_available(intent)
        if self._matches(self._estimate_failures, intent):
            raise CallReverted(f"{intent.function} would revert")
        return self.DEFAULT_GAS

    async def send(
        self, intent: TransactionIntent, signer: LocalAccount, gas: int | None = None
    ) -> str:
        if gas is None:
            gas = await self.estimate_gas(intent, signer.address)
        self.calls.append(("send", intent))
        self._check_available(intent)
        if self._matches(self._rejections, intent):
            raise TransactionRejected(f"{intent.function} rejected: nonce too low")

        tx_hash = "0x" + f"{len(self.sent) + 1:064x}"
        self.sent.append(intent)
        self.senders.append(signer.address)
        self._pending[tx_hash] = intent
        return tx_hash

    async def wait_for_outcome(self, tx_hash: str) -> TransactionOutcome:
        intent = self._pending.pop(tx_hash)
        self.calls.append(("wait_for_outcome", intent))
        self._check_available(intent)
        if self._matches(self._timeouts, intent):
            raise ConfirmationTimeout(tx_hash, 0.0)

        self._block += 1
        return TransactionOutcome(
            tx_hash=tx_hash,
            block_number=self._block,
            success=not self._matches(self._reverts, intent),
            gas_used=self.DEFAULT_GAS,
        )

    async def close(self) -> None:
        self.closed = True


__all__ = ["CallRule", "MockChainClient"]
