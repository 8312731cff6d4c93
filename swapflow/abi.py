"""Minimal contract ABIs and call encoding.

Each ABI lists only the functions the pipeline calls. ``build_intent`` turns
an ABI entry plus arguments into a TransactionIntent that any ChainClient can
submit or call.
"""

from __future__ import annotations

from typing import Any

from swapflow.models.transactions import TransactionIntent

ERC20_ABI = [
    {
        "name": "approve",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "name": "allowance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "decimals",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
]

# UniswapV3Factory - pool lookup by unordered token pair and fee
FACTORY_ABI = [
    {
        "name": "getPool",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
            {"name": "fee", "type": "uint24"},
        ],
        "outputs": [{"name": "pool", "type": "address"}],
    },
]

# UniswapV3Pool - immutable parameters
POOL_ABI = [
    {
        "name": "token0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "token1",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "fee",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint24"}],
    },
]

# SwapRouter02 - single-hop exact input (no deadline field)
SWAP_ROUTER_ABI = [
    {
        "name": "exactInputSingle",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "params",
                "type": "tuple",
                "components": [
                    {"name": "tokenIn", "type": "address"},
                    {"name": "tokenOut", "type": "address"},
                    {"name": "fee", "type": "uint24"},
                    {"name": "recipient", "type": "address"},
                    {"name": "amountIn", "type": "uint256"},
                    {"name": "amountOutMinimum", "type": "uint256"},
                    {"name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
            }
        ],
        "outputs": [{"name": "amountOut", "type": "uint256"}],
    },
]

# Balancer pool - mint pool shares for at most maxAmountsIn of each asset
BALANCER_POOL_ABI = [
    {
        "name": "joinPool",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "poolAmountOut", "type": "uint256"},
            {"name": "maxAmountsIn", "type": "uint256[]"},
        ],
        "outputs": [],
    },
]


def canonical_type(param: dict[str, Any]) -> str:
    """Canonical ABI type string for a parameter, expanding tuples.

    >>> canonical_type({"type": "tuple[]", "components": [{"type": "address"}]})
    '(address)[]'
    """
    abi_type = param["type"]
    if not abi_type.startswith("tuple"):
        return abi_type
    inner = ",".join(canonical_type(c) for c in param.get("components", []))
    return f"({inner}){abi_type[len('tuple'):]}"


def find_function(abi: list[dict[str, Any]], name: str) -> dict[str, Any]:
    """Look up a function entry by name.

    Raises:
        KeyError: If the ABI has no function with that name
    """
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == name:
            return entry
    raise KeyError(f"Function {name} not in ABI")


def build_intent(
    abi: list[dict[str, Any]],
    address: str,
    function: str,
    *args: Any,
    value: int = 0,
) -> TransactionIntent:
    """Describe a call to ``function`` on the contract at ``address``.

    Args:
        abi: Contract ABI containing the function
        address: Target contract address
        function: Function name
        *args: Positional arguments in ABI order
        value: Wei to attach

    Returns:
        An unsigned TransactionIntent

    Raises:
        KeyError: If the function is not in the ABI
        ValueError: If the argument count does not match the ABI
    """
    entry = find_function(abi, function)
    inputs = entry.get("inputs", [])
    if len(args) != len(inputs):
        raise ValueError(f"{function} expects {len(inputs)} arguments, got {len(args)}")

    return TransactionIntent(
        to=address,
        function=function,
        arg_types=tuple(canonical_type(p) for p in inputs),
        args=tuple(args),
        output_types=tuple(canonical_type(p) for p in entry.get("outputs", [])),
        value=value,
    )


__all__ = [
    "ERC20_ABI",
    "FACTORY_ABI",
    "POOL_ABI",
    "SWAP_ROUTER_ABI",
    "BALANCER_POOL_ABI",
    "canonical_type",
    "find_function",
    "build_intent",
]
