"""End-to-end pipeline tests against the mock chain client."""

import asyncio

import pytest

from swapflow.chain.mock import MockChainClient
from swapflow.config import PipelineConfig
from swapflow.errors import (
    AllowanceFailure,
    ChainUnavailable,
    LiquidityFailure,
    LiquidityFailurePhase,
    PoolNotFound,
    SwapFailure,
    SwapFailureKind,
)
from swapflow.models.assets import LINK, USDC
from swapflow.models.pipeline import PipelineStage
from swapflow.orchestrator import Orchestrator
from tests.helpers import LIQUIDITY_POOL_ADDRESS, ROUTER_ADDRESS, make_chain_client

ALL_TX_STAGES = [
    PipelineStage.APPROVE_SWAP_INPUT,
    PipelineStage.EXECUTE_SWAP,
    PipelineStage.APPROVE_LP_TOKEN,
    PipelineStage.DEPOSIT_LIQUIDITY,
]


def run(orchestrator, swap_amount=1, liquidity_amount=0.5):
    return asyncio.run(orchestrator.run(swap_amount, liquidity_amount))


class TestHappyPath:
    """Scenario A: run(1, 0.5) with USDC (6 decimals) and LINK (18 decimals)."""

    def test_completes(self, orchestrator):
        result = run(orchestrator)

        assert result.success
        assert result.stage is PipelineStage.DONE
        assert result.exit_code == 0
        assert list(result.outcomes) == ALL_TX_STAGES
        assert result.pool is not None and result.pool.fee == 3000

    def test_transaction_order_and_amounts(self, orchestrator, client, signer):
        run(orchestrator)

        approve_in, swap, approve_lp, join = client.sent
        assert (approve_in.function, approve_in.to) == ("approve", USDC.address)
        assert approve_in.args == (ROUTER_ADDRESS, 1_000_000)

        assert swap.function == "exactInputSingle"
        token_in, token_out, fee, recipient, amount_in, min_out, limit = swap.args[0]
        assert (token_in, token_out) == (USDC.address, LINK.address)
        assert fee == 3000
        assert recipient == signer.address
        assert amount_in == 1_000_000
        assert min_out == 0
        assert limit == 0

        assert (approve_lp.function, approve_lp.to) == ("approve", LINK.address)
        assert approve_lp.args == (LIQUIDITY_POOL_ADDRESS, 500_000_000_000_000_000)

        assert join.function == "joinPool"
        assert join.args == (500_000_000_000_000_000, [500_000_000_000_000_000])

    def test_every_step_confirmed_before_next(self, orchestrator, client):
        run(orchestrator)

        sequence = [
            (method, intent.function)
            for method, intent in client.calls
            if method in ("send", "wait_for_outcome")
        ]
        assert sequence == [
            ("send", "approve"),
            ("wait_for_outcome", "approve"),
            ("send", "exactInputSingle"),
            ("wait_for_outcome", "exactInputSingle"),
            ("send", "approve"),
            ("wait_for_outcome", "approve"),
            ("send", "joinPool"),
            ("wait_for_outcome", "joinPool"),
        ]

    def test_pool_resolved_after_first_approval(self, orchestrator, client):
        run(orchestrator)

        functions = [intent.function for _, intent in client.calls]
        assert functions.index("getPool") > functions.index("approve")
        assert functions.index("getPool") < functions.index("exactInputSingle")

    def test_amount_out_minimum_from_config(self, client, signer):
        config = PipelineConfig(explorer_url=None, amount_out_minimum=123)
        result = run(Orchestrator(config, client, signer))

        assert result.success
        assert client.sent[1].args[0][5] == 123

    def test_string_amounts(self, orchestrator, client):
        result = run(orchestrator, "2.5", "1")

        assert result.success
        assert client.sent[0].args[1] == 2_500_000
        assert client.sent[3].args[0] == 10**18


class TestNoPool:
    """Scenario B: no pool at the fee tier."""

    def test_fails_before_swap(self, signer, config):
        client = make_chain_client(pool=None)
        result = run(Orchestrator(config, client, signer))

        assert not result.success
        assert result.stage is PipelineStage.FAILED
        assert result.failed_stage is PipelineStage.RESOLVE_POOL
        assert isinstance(result.error, PoolNotFound)
        assert result.exit_code == 11
        assert client.sent_functions() == ["approve"]
        assert all(intent.function != "exactInputSingle" for _, intent in client.calls)

    def test_first_approval_stays_recorded(self, signer, config):
        client = make_chain_client(pool=None)
        result = run(Orchestrator(config, client, signer))

        assert list(result.outcomes) == [PipelineStage.APPROVE_SWAP_INPUT]
        assert result.pool is None


class TestLpApprovalFailure:
    """Scenario C: swap succeeds, LP-token approval fails."""

    def test_reports_allowance_phase_and_skips_deposit(self, orchestrator, client):
        client.reject("approve", to=LINK.address)

        result = run(orchestrator)

        assert result.failed_stage is PipelineStage.APPROVE_LP_TOKEN
        assert isinstance(result.error, LiquidityFailure)
        assert result.error.phase is LiquidityFailurePhase.ALLOWANCE
        assert result.exit_code == 14
        assert all(intent.function != "joinPool" for _, intent in client.calls)

    def test_swap_outcome_kept(self, orchestrator, client):
        client.reject("approve", to=LINK.address)

        result = run(orchestrator)

        assert list(result.outcomes) == [
            PipelineStage.APPROVE_SWAP_INPUT,
            PipelineStage.EXECUTE_SWAP,
        ]
        assert result.outcomes[PipelineStage.EXECUTE_SWAP].success
        assert result.pool is not None


class TestOtherFailures:
    def test_first_approval_failure(self, orchestrator, client):
        client.revert("approve", to=USDC.address)

        result = run(orchestrator)

        assert result.failed_stage is PipelineStage.APPROVE_SWAP_INPUT
        assert isinstance(result.error, AllowanceFailure)
        assert result.outcomes == {}
        assert client.sent_functions() == ["approve"]

    def test_swap_estimation_failure(self, orchestrator, client):
        client.fail_estimate("exactInputSingle")

        result = run(orchestrator)

        assert result.failed_stage is PipelineStage.EXECUTE_SWAP
        assert isinstance(result.error, SwapFailure)
        assert result.error.kind is SwapFailureKind.ESTIMATION
        assert result.exit_code == 13
        assert client.sent_functions() == ["approve"]

    def test_network_loss_during_swap_reports_swap_stage(self, config, signer):
        class DropsOnSwap(MockChainClient):
            async def estimate_gas(self, intent, sender):
                if intent.function == "exactInputSingle":
                    raise ChainUnavailable("connection reset")
                return await super().estimate_gas(intent, sender)

        client = DropsOnSwap()
        client.views = make_chain_client().views

        result = run(Orchestrator(config, client, signer))

        assert result.failed_stage is PipelineStage.EXECUTE_SWAP
        assert isinstance(result.error, SwapFailure)
        assert isinstance(result.error.__cause__, ChainUnavailable)
        assert result.exit_code == 13

    def test_deposit_failure_records_lp_approval(self, orchestrator, client):
        client.revert("joinPool")

        result = run(orchestrator)

        assert result.failed_stage is PipelineStage.DEPOSIT_LIQUIDITY
        assert result.error.phase is LiquidityFailurePhase.DEPOSIT
        assert list(result.outcomes) == ALL_TX_STAGES[:3]

    def test_chain_unavailable_during_pool_lookup(self, config, signer):
        class FlakyReads(MockChainClient):
            async def call(self, intent):
                raise ChainUnavailable("connection refused")

        result = run(Orchestrator(config, FlakyReads(), signer))

        assert result.failed_stage is PipelineStage.RESOLVE_POOL
        assert isinstance(result.error, ChainUnavailable)
        assert result.exit_code == 12

    @pytest.mark.parametrize("swap_amount", [0, "0", "-1", "0.0000001"])
    def test_invalid_swap_amount_sends_nothing(self, orchestrator, client, swap_amount):
        with pytest.raises(ValueError):
            run(orchestrator, swap_amount=swap_amount)

        assert client.calls == []

    def test_invalid_liquidity_amount_sends_nothing(self, orchestrator, client):
        with pytest.raises(ValueError):
            run(orchestrator, liquidity_amount="0." + "0" * 18 + "1")

        assert client.calls == []

    def test_unexpected_errors_propagate(self, config, signer):
        class Broken(MockChainClient):
            async def send(self, intent, signer, gas=None):
                raise RuntimeError("bug")

        with pytest.raises(RuntimeError, match="bug"):
            run(Orchestrator(config, Broken(), signer))
