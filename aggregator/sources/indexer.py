"""Primary pool retrieval through the indexer, with node fallback.

The indexer serves weighted, stable and concentrated liquidity pools with
market metrics; CosmWasm pools come from the contract path and are prepended.
If the indexer or the contract path fails, or an indexer record does not map
to a pool, the whole list is rebuilt from the node instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import structlog

from aggregator.constants import (
    DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES,
    INDEXER_ORDER_BY,
    INDEXER_ORDER_KEY,
)
from aggregator.models.pools import CosmwasmPool, Pool
from aggregator.models.query import AggregatedPools
from aggregator.models.upstream import FilteredPool, PageRequest, PoolFilter
from aggregator.pools.classifier import IndexerPool, pool_from_filtered_pool
from aggregator.sources.client import UpstreamClient
from aggregator.sources.node import fetch_pools_from_node

logger = structlog.get_logger()

ContractPoolsProvider = Callable[[], Awaitable[Sequence[CosmwasmPool]]]


def classify_filtered_pools(records: list[dict[str, Any]]) -> list[IndexerPool]:
    """Validate and map indexer records in order.

    Records holding legacy share tokens are skipped. Any other record that
    does not map aborts the batch so the caller can fall back to the node.

    Raises:
        pydantic.ValidationError: If a record is malformed
        UnrecognizedPoolShapeError: If a record is not a known pool shape
        InvalidAmountError: If a token amount is not a decimal numeral
    """
    pools: list[IndexerPool] = []
    for record in records:
        pool = pool_from_filtered_pool(FilteredPool.model_validate(record))
        if pool is not None:
            pools.append(pool)
    return pools


async def fetch_all_pools(
    client: UpstreamClient,
    contract_pools: ContractPoolsProvider,
    minimum_liquidity: float = 0,
    max_concurrency: int = DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES,
) -> AggregatedPools:
    """Fetch the full pool list, preferring the indexer.

    Args:
        client: Upstream client
        contract_pools: Provider of CosmWasm pools (usually cached)
        minimum_liquidity: Indexer liquidity filter in USD
        max_concurrency: Bound on concurrent balance queries for the fallback

    Returns:
        CosmWasm pools followed by indexer pools, or node pools on fallback,
        with the node's authoritative total pool count

    Raises:
        UpstreamError: If the pool count query fails, or the indexer and
            the node fallback both fail
    """
    num_pools = await client.query_num_pools()

    pool_filter: PoolFilter = {
        "min_liquidity": minimum_liquidity,
        "order_by": INDEXER_ORDER_BY,
        "order_key": INDEXER_ORDER_KEY,
    }
    page: PageRequest = {"offset": 0, "limit": int(num_pools.num_pools)}

    try:
        filtered_response, cosmwasm_pools = await asyncio.gather(
            client.query_filtered_pools(pool_filter, page),
            contract_pools(),
        )
        indexer_pools = classify_filtered_pools(filtered_response.pools)
    except Exception:
        logger.exception(
            "indexer_fetch_failed",
            minimum_liquidity=minimum_liquidity,
            message="Falling back to node pool query",
        )
    else:
        # CosmWasm pools always come first
        pools: list[Pool] = [*cosmwasm_pools, *indexer_pools]
        logger.info(
            "indexer_pools_fetched",
            minimum_liquidity=minimum_liquidity,
            cosmwasm_count=len(cosmwasm_pools),
            indexer_count=len(indexer_pools),
            total_number_of_pools=num_pools.num_pools,
        )
        return AggregatedPools(pools=tuple(pools), total_number_of_pools=num_pools.num_pools)

    node_pools = await fetch_pools_from_node(client, max_concurrency)
    return AggregatedPools(pools=tuple(node_pools), total_number_of_pools=num_pools.num_pools)


__all__ = ["ContractPoolsProvider", "classify_filtered_pools", "fetch_all_pools"]
