"""Tests for ABI helpers and intent encoding."""

import pytest
from eth_abi import decode

from swapflow.abi import (
    BALANCER_POOL_ABI,
    ERC20_ABI,
    FACTORY_ABI,
    SWAP_ROUTER_ABI,
    build_intent,
    canonical_type,
    find_function,
)
from tests.helpers import FACTORY_ADDRESS, LINK_ADDRESS, ROUTER_ADDRESS, USDC_ADDRESS


class TestCanonicalType:
    def test_plain(self):
        assert canonical_type({"type": "uint256"}) == "uint256"

    def test_tuple_expanded(self):
        entry = find_function(SWAP_ROUTER_ABI, "exactInputSingle")
        assert canonical_type(entry["inputs"][0]) == (
            "(address,address,uint24,address,uint256,uint256,uint160)"
        )

    def test_tuple_array(self):
        param = {"type": "tuple[]", "components": [{"type": "address"}, {"type": "uint8"}]}
        assert canonical_type(param) == "(address,uint8)[]"


class TestBuildIntent:
    def test_approve_selector_and_calldata(self):
        intent = build_intent(ERC20_ABI, USDC_ADDRESS, "approve", ROUTER_ADDRESS, 1_000_000)

        assert intent.signature == "approve(address,uint256)"
        assert intent.selector.hex() == "095ea7b3"
        assert intent.calldata.startswith("0x095ea7b3")
        # selector + two 32-byte words
        assert len(intent.calldata) == 2 + 8 + 2 * 64

        spender, amount = decode(["address", "uint256"], bytes.fromhex(intent.calldata[10:]))
        assert spender.lower() == ROUTER_ADDRESS.lower()
        assert amount == 1_000_000

    def test_exact_input_single_selector(self):
        params = (USDC_ADDRESS, LINK_ADDRESS, 3000, ROUTER_ADDRESS, 1, 0, 0)
        intent = build_intent(SWAP_ROUTER_ABI, ROUTER_ADDRESS, "exactInputSingle", params)
        assert intent.selector.hex() == "04e45aaf"

    def test_get_pool_output_types(self):
        intent = build_intent(
            FACTORY_ABI, FACTORY_ADDRESS, "getPool", USDC_ADDRESS, LINK_ADDRESS, 3000
        )
        assert intent.arg_types == ("address", "address", "uint24")
        assert intent.output_types == ("address",)

    def test_join_pool_dynamic_array(self):
        intent = build_intent(BALANCER_POOL_ABI, ROUTER_ADDRESS, "joinPool", 5, [5, 6])
        assert intent.signature == "joinPool(uint256,uint256[])"
        amount, bounds = decode(["uint256", "uint256[]"], bytes.fromhex(intent.calldata[10:]))
        assert amount == 5
        assert list(bounds) == [5, 6]

    def test_value_defaults_to_zero(self):
        intent = build_intent(ERC20_ABI, USDC_ADDRESS, "decimals")
        assert intent.value == 0
        assert intent.args == ()

    def test_wrong_argument_count(self):
        with pytest.raises(ValueError, match="expects 2 arguments"):
            build_intent(ERC20_ABI, USDC_ADDRESS, "approve", ROUTER_ADDRESS)

    def test_unknown_function(self):
        with pytest.raises(KeyError, match="transfer"):
            build_intent(ERC20_ABI, USDC_ADDRESS, "transfer", ROUTER_ADDRESS, 1)
