"""Uniswap V3 pool resolution."""

from __future__ import annotations

import asyncio

import structlog

from swapflow.abi import FACTORY_ABI, POOL_ABI, build_intent
from swapflow.chain.client import ChainClient
from swapflow.errors import CallReverted, PoolMismatch, PoolNotFound
from swapflow.models.transactions import PoolReference
from swapflow.models.types import checksum_address, is_zero_address, same_address

logger = structlog.get_logger()


class PoolResolver:
    """Locates the pool for a token pair and fee tier. Read-only."""

    def __init__(self, client: ChainClient) -> None:
        self.client = client

    async def resolve(self, factory: str, token_a: str, token_b: str, fee: int) -> PoolReference:
        """Look up the pool and read back its immutable parameters.

        The factory keys pools by the unordered pair, so argument order of
        ``token_a``/``token_b`` does not matter.

        Args:
            factory: Factory contract address
            token_a: One token of the pair
            token_b: The other token
            fee: Fee tier (e.g., 3000)

        Returns:
            PoolReference with the pool's own token ordering and fee

        Raises:
            PoolNotFound: If the factory returns the zero address
            PoolMismatch: If the pool reports a different pair or fee
            ChainUnavailable: On network failure
        """
        token_a = checksum_address(token_a)
        token_b = checksum_address(token_b)
        factory = checksum_address(factory)
        lookup = build_intent(FACTORY_ABI, factory, "getPool", token_a, token_b, fee)

        try:
            (pool_address,) = await self.client.call(lookup)
        except CallReverted as e:
            raise PoolNotFound(f"Factory lookup failed for {token_a}/{token_b}: {e}") from e

        if is_zero_address(pool_address):
            logger.warning("pool_not_found", token_a=token_a, token_b=token_b, fee=fee)
            raise PoolNotFound(f"No pool for {token_a}/{token_b} at fee tier {fee}")

        pool_address = checksum_address(pool_address)
        reads = [
            asyncio.ensure_future(self.client.call(build_intent(POOL_ABI, pool_address, fn)))
            for fn in ("token0", "token1", "fee")
        ]
        try:
            (token0,), (token1,), (pool_fee,) = await asyncio.gather(*reads)
        except CallReverted as e:
            raise PoolMismatch(f"{pool_address} does not behave like a pool: {e}") from e
        finally:
            # No-op for finished reads; stops the rest once one has failed
            for read in reads:
                read.cancel()

        pool = PoolReference(
            address=pool_address,
            token0=checksum_address(token0),
            token1=checksum_address(token1),
            fee=int(pool_fee),
        )
        self._verify(pool, token_a, token_b, fee)

        logger.info(
            "pool_resolved",
            pool=pool.address,
            token0=pool.token0,
            token1=pool.token1,
            fee=pool.fee,
        )
        return pool

    @staticmethod
    def _verify(pool: PoolReference, token_a: str, token_b: str, fee: int) -> None:
        same_pair = (same_address(pool.token0, token_a) and same_address(pool.token1, token_b)) or (
            same_address(pool.token0, token_b) and same_address(pool.token1, token_a)
        )
        if not same_pair:
            raise PoolMismatch(
                f"Pool {pool.address} holds {pool.token0}/{pool.token1}, "
                f"expected {token_a}/{token_b}"
            )
        if pool.fee != fee:
            raise PoolMismatch(f"Pool {pool.address} reports fee {pool.fee}, expected {fee}")


__all__ = ["PoolResolver"]
