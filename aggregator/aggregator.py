"""Pool aggregator that serves normalized pools through a cache-aside layer.

The PoolAggregator is the entry point for pool queries. It owns two caches:

- the aggregated list, keyed by minimum liquidity (2 entries)
- the CosmWasm pool list (10 entries)

On a miss or expiry the aggregated list is rebuilt from the indexer, falling
back to the node, and the CosmWasm pools are reused from their own cache.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from aggregator.cache import AsyncTTLCache
from aggregator.config import DEFAULT_AGGREGATOR_CONFIG, AggregatorConfig
from aggregator.constants import COSMWASM_POOLS_CACHE_KEY, all_pools_cache_key
from aggregator.models.pools import CosmwasmPool
from aggregator.models.query import AggregatedPools, PoolsQueryResult
from aggregator.pagination import query_aggregated_pools
from aggregator.sources.client import HttpUpstreamClient, UpstreamClient
from aggregator.sources.contract import fetch_contract_pools
from aggregator.sources.indexer import fetch_all_pools

logger = structlog.get_logger()


class PoolAggregator:
    """Cached facade over the indexer, node and contract pool sources.

    Args:
        client: Upstream client used by every fetch path
        config: TTLs, cache sizes and concurrency bound (default: DEFAULT_AGGREGATOR_CONFIG)
        clock: Monotonic clock shared by both caches, injectable for tests
    """

    def __init__(
        self,
        client: UpstreamClient,
        config: AggregatorConfig | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.client = client
        self.config = config or DEFAULT_AGGREGATOR_CONFIG

        cache_kwargs = {"clock": clock} if clock is not None else {}
        self._all_pools_cache: AsyncTTLCache[AggregatedPools] = AsyncTTLCache(
            maxsize=self.config.all_pools_cache_size,
            ttl=self.config.all_pools_ttl_seconds,
            name="all_pools",
            **cache_kwargs,
        )
        self._contract_pools_cache: AsyncTTLCache[tuple[CosmwasmPool, ...]] = AsyncTTLCache(
            maxsize=self.config.contract_pools_cache_size,
            ttl=self.config.contract_pools_ttl_seconds,
            name="cosmwasm_pools",
            **cache_kwargs,
        )

    @property
    def all_pools_cache(self) -> AsyncTTLCache[AggregatedPools]:
        return self._all_pools_cache

    @property
    def contract_pools_cache(self) -> AsyncTTLCache[tuple[CosmwasmPool, ...]]:
        return self._contract_pools_cache

    async def get_contract_pools(self) -> tuple[CosmwasmPool, ...]:
        """Get CosmWasm pools with their balances, cached independently."""

        async def produce() -> tuple[CosmwasmPool, ...]:
            return await fetch_contract_pools(
                self.client, self.config.max_concurrent_balance_queries
            )

        return await self._contract_pools_cache.get_or_fetch(COSMWASM_POOLS_CACHE_KEY, produce)

    async def get_all_pools(self, minimum_liquidity: float = 0) -> AggregatedPools:
        """Get the aggregated pool list for a liquidity filter.

        Reads may be up to one TTL old. Concurrent callers with the same filter
        share one upstream fetch.
        """

        async def produce() -> AggregatedPools:
            return await fetch_all_pools(
                self.client,
                self.get_contract_pools,
                minimum_liquidity=minimum_liquidity,
                max_concurrency=self.config.max_concurrent_balance_queries,
            )

        return await self._all_pools_cache.get_or_fetch(
            all_pools_cache_key(minimum_liquidity), produce
        )

    async def query_pools(
        self,
        page: int | None = None,
        limit: int | None = None,
        minimum_liquidity: float | None = None,
        pool_id: str | None = None,
    ) -> PoolsQueryResult:
        """Serve a single pool, one page, or all pools.

        Args:
            page: 1-indexed page number (requires limit)
            limit: Page size (requires page)
            minimum_liquidity: Liquidity filter in USD, defaults to 0
            pool_id: Pool identifier to look up; takes precedence over paging

        Returns:
            PoolsQueryResult; status 404 with no pools if pool_id is unknown
        """
        aggregated = await self.get_all_pools(minimum_liquidity or 0)
        result = query_aggregated_pools(aggregated, page=page, limit=limit, pool_id=pool_id)

        if not result.found:
            logger.info("pool_not_found", pool_id=pool_id)
        return result


_default_aggregator: PoolAggregator | None = None


def get_default_aggregator() -> PoolAggregator:
    """Return the process-wide aggregator configured from the environment."""
    global _default_aggregator
    if _default_aggregator is None:
        config = AggregatorConfig.from_env()
        _default_aggregator = PoolAggregator(HttpUpstreamClient.from_config(config), config)
    return _default_aggregator


__all__ = ["PoolAggregator", "get_default_aggregator"]
