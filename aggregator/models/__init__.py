"""Pydantic models for upstream payloads and canonical pools."""

from aggregator.models.pools import (
    Coin,
    ConcentratedLiquidityPool,
    CosmwasmPool,
    Pool,
    PoolMetrics,
    PoolParams,
    StablePool,
    WeightedPool,
    WeightedPoolAsset,
    dump_pools,
    parse_pool,
    pool_identifier,
)
from aggregator.models.query import AggregatedPools, PageInfo, PoolsQueryResult
from aggregator.models.types import DecimalAmount, IntegerString, PoolId
from aggregator.models.upstream import (
    Balance,
    BalancesResponse,
    FilteredPool,
    FilteredPoolsResponse,
    NumPoolsResponse,
    PageRequest,
    PoolAssetPair,
    PoolFilter,
    PoolsResponse,
    PoolToken,
)

__all__ = [
    # Types
    "IntegerString",
    "PoolId",
    "DecimalAmount",
    # Upstream models
    "Balance",
    "BalancesResponse",
    "FilteredPool",
    "FilteredPoolsResponse",
    "NumPoolsResponse",
    "PageRequest",
    "PoolAssetPair",
    "PoolFilter",
    "PoolsResponse",
    "PoolToken",
    # Canonical pools
    "Coin",
    "PoolParams",
    "PoolMetrics",
    "WeightedPoolAsset",
    "WeightedPool",
    "StablePool",
    "ConcentratedLiquidityPool",
    "CosmwasmPool",
    "Pool",
    "parse_pool",
    "pool_identifier",
    "dump_pools",
    # Query results
    "AggregatedPools",
    "PageInfo",
    "PoolsQueryResult",
]
