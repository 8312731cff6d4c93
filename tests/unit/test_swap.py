"""Tests for SwapExecutor."""

import asyncio

import pytest

from swapflow.chain.mock import MockChainClient
from swapflow.errors import SwapFailure, SwapFailureKind
from swapflow.models.transactions import SwapParameters
from swapflow.swap import SwapExecutor
from tests.helpers import LINK_ADDRESS, ROUTER_ADDRESS, USDC_ADDRESS


@pytest.fixture
def params(signer) -> SwapParameters:
    return SwapParameters(
        token_in=USDC_ADDRESS,
        token_out=LINK_ADDRESS,
        fee=3000,
        recipient=signer.address,
        amount_in=1_000_000,
    )


def swap(client, params, signer):
    return asyncio.run(SwapExecutor(client).swap(ROUTER_ADDRESS, params, signer))


class TestSwap:
    def test_estimates_then_submits_then_waits(self, client, params, signer):
        outcome = swap(client, params, signer)

        assert outcome.success
        assert client.methods() == ["estimate_gas", "send", "wait_for_outcome"]

    def test_intent_carries_params(self, client, params, signer):
        swap(client, params, signer)

        (intent,) = client.sent
        assert intent.to == ROUTER_ADDRESS
        assert intent.function == "exactInputSingle"
        assert intent.args == (params.as_tuple(),)
        assert intent.args[0][4] == 1_000_000

    def test_estimation_failure_never_broadcasts(self, client, params, signer):
        client.fail_estimate("exactInputSingle")

        with pytest.raises(SwapFailure) as exc_info:
            swap(client, params, signer)

        assert exc_info.value.kind is SwapFailureKind.ESTIMATION
        assert client.sent == []
        assert "send" not in client.methods()

    def test_estimation_unavailable_is_estimation_failure(self, params, signer):
        client = MockChainClient()
        client.unavailable = True

        with pytest.raises(SwapFailure) as exc_info:
            swap(client, params, signer)

        assert exc_info.value.kind is SwapFailureKind.ESTIMATION
        assert client.sent == []

    def test_submission_failure(self, client, params, signer):
        client.reject("exactInputSingle")

        with pytest.raises(SwapFailure) as exc_info:
            swap(client, params, signer)

        assert exc_info.value.kind is SwapFailureKind.SUBMISSION
        assert exc_info.value.tx_hash is None

    def test_confirmed_revert_is_execution_failure(self, client, params, signer):
        client.revert("exactInputSingle")

        with pytest.raises(SwapFailure, match="reverted") as exc_info:
            swap(client, params, signer)

        assert exc_info.value.kind is SwapFailureKind.EXECUTION
        assert exc_info.value.tx_hash is not None

    def test_timeout_is_execution_failure(self, client, params, signer):
        client.time_out("exactInputSingle")

        with pytest.raises(SwapFailure) as exc_info:
            swap(client, params, signer)

        assert exc_info.value.kind is SwapFailureKind.EXECUTION

    def test_slippage_bound_forwarded(self, client, signer):
        params = SwapParameters(
            token_in=USDC_ADDRESS,
            token_out=LINK_ADDRESS,
            fee=3000,
            recipient=signer.address,
            amount_in=1_000_000,
            amount_out_minimum=42,
        )

        swap(client, params, signer)

        assert client.sent[0].args[0][5] == 42
