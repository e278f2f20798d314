"""Node fallback pool retrieval.

Reads every pool straight from the node, without the indexer. Share pools are
already in canonical shape; concentrated liquidity and CosmWasm pools need a
balance query to fill in their token amounts. Node pools carry no metrics.
"""

from __future__ import annotations

from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from aggregator.constants import (
    CONCENTRATED_POOL_TYPE,
    COSMWASM_POOL_TYPE,
    DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES,
    STABLE_POOL_TYPE,
    WEIGHTED_POOL_TYPE,
)
from aggregator.models.pools import (
    ConcentratedLiquidityPool,
    CosmwasmPool,
    Pool,
    StablePool,
    WeightedPool,
)
from aggregator.models.upstream import Balance
from aggregator.sources.client import UpstreamClient
from aggregator.sources.concurrency import gather_bounded
from aggregator.sources.contract import coins_from_balances, parse_cosmwasm_record

logger = structlog.get_logger()

P = TypeVar("P", bound=BaseModel)


def _validate_record(model: type[P], record: dict[str, Any]) -> P | None:
    try:
        return model.model_validate(record)
    except ValidationError as err:
        logger.warning(
            "node_pool_invalid_record",
            pool_type=record.get("@type"),
            pool_id=record.get("id", record.get("pool_id")),
            errors=err.error_count(),
        )
        return None


def _find_balance(balances: list[Balance], denom: str) -> Balance | None:
    return next((balance for balance in balances if balance.denom == denom), None)


async def _concentrated_pool_with_balances(
    client: UpstreamClient, record: dict[str, Any]
) -> ConcentratedLiquidityPool | None:
    pool = _validate_record(ConcentratedLiquidityPool, record)
    if pool is None:
        return None
    if not pool.address:
        logger.debug("cl_pool_missing_address", pool_id=pool.id)
        return None

    response = await client.query_balances(pool.address)
    token0_balance = _find_balance(response.balances, pool.token0)
    token1_balance = _find_balance(response.balances, pool.token1)

    if token0_balance is None or token1_balance is None:
        logger.debug(
            "cl_pool_missing_balance",
            pool_id=pool.id,
            has_token0=token0_balance is not None,
            has_token1=token1_balance is not None,
        )
        return None

    return pool.model_copy(
        update={
            "token0_amount": token0_balance.amount,
            "token1_amount": token1_balance.amount,
        }
    )


async def _cosmwasm_pool_with_balances(
    client: UpstreamClient, record: dict[str, Any]
) -> CosmwasmPool | None:
    pool = parse_cosmwasm_record(record)
    if pool is None:
        return None

    # No minimum balance count on this path
    response = await client.query_balances(pool.contract_address)
    return pool.model_copy(update={"tokens": coins_from_balances(response.balances)})


async def fetch_pools_from_node(
    client: UpstreamClient,
    max_concurrency: int = DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES,
) -> list[Pool]:
    """Get pools from the node, querying balances where needed.

    Args:
        client: Upstream client
        max_concurrency: Bound on concurrent balance queries

    Returns:
        Canonical pools in node order. Unknown pool types, malformed records
        and concentrated liquidity pools missing a side's balance are dropped.

    Raises:
        UpstreamError: If the pool query or any balance query fails
    """
    response = await client.query_pools()

    async def convert(record: dict[str, Any]) -> Pool | None:
        pool_type = record.get("@type")
        if pool_type == WEIGHTED_POOL_TYPE:
            return _validate_record(WeightedPool, record)
        if pool_type == STABLE_POOL_TYPE:
            return _validate_record(StablePool, record)
        if pool_type == CONCENTRATED_POOL_TYPE:
            return await _concentrated_pool_with_balances(client, record)
        if pool_type == COSMWASM_POOL_TYPE:
            return await _cosmwasm_pool_with_balances(client, record)

        logger.debug("node_pool_unknown_type", pool_type=pool_type)
        return None

    converted = await gather_bounded(convert, response.pools, max_concurrency)
    pools = [pool for pool in converted if pool is not None]

    logger.info("node_pools_fetched", pool_count=len(pools), record_count=len(response.pools))
    return pools


__all__ = ["fetch_pools_from_node"]
