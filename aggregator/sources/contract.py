"""Contract-based (CosmWasm) pool retrieval.

CosmWasm pools are not served by the indexer. They are read from the node
and their liquidity is taken from the contract's live bank balances.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from aggregator.constants import (
    COSMWASM_POOL_TYPE,
    DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES,
    MIN_CONTRACT_POOL_BALANCES,
)
from aggregator.models.pools import Coin, CosmwasmPool
from aggregator.models.upstream import Balance, BalancesResponse
from aggregator.sources.client import UpstreamClient
from aggregator.sources.concurrency import gather_bounded

logger = structlog.get_logger()


def coins_from_balances(balances: list[Balance]) -> list[Coin]:
    """Copy bank balances verbatim into pool coins (no rescaling)."""
    return [Coin(denom=balance.denom, amount=balance.amount) for balance in balances]


def parse_cosmwasm_record(record: dict[str, Any]) -> CosmwasmPool | None:
    """Validate a node record tagged as a CosmWasm pool.

    Returns None (and logs) if the record is structurally invalid.
    """
    try:
        return CosmwasmPool.model_validate(record)
    except ValidationError as err:
        logger.warning(
            "cosmwasm_pool_invalid_record",
            pool_id=record.get("pool_id"),
            errors=err.error_count(),
        )
        return None


async def fetch_contract_pools(
    client: UpstreamClient,
    max_concurrency: int = DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES,
) -> tuple[CosmwasmPool, ...]:
    """Fetch CosmWasm pools from the node and attach their contract balances.

    Pools whose contract holds fewer than two balances are not initialized
    yet and are excluded.

    Args:
        client: Upstream client
        max_concurrency: Bound on concurrent balance queries

    Returns:
        Immutable tuple of CosmWasm pools in node order, with tokens set from
        live balances

    Raises:
        UpstreamError: If the pool query or any balance query fails
    """
    response = await client.query_pools()

    pools: list[CosmwasmPool] = []
    for record in response.pools:
        if record.get("@type") != COSMWASM_POOL_TYPE:
            continue
        pool = parse_cosmwasm_record(record)
        if pool is not None:
            pools.append(pool)

    async def query_pool_balances(pool: CosmwasmPool) -> BalancesResponse:
        return await client.query_balances(pool.contract_address)

    pool_balances = await gather_bounded(query_pool_balances, pools, max_concurrency)

    result: list[CosmwasmPool] = []
    for pool, balances in zip(pools, pool_balances, strict=True):
        if len(balances.balances) < MIN_CONTRACT_POOL_BALANCES:
            logger.debug(
                "contract_pool_insufficient_balances",
                pool_id=pool.pool_id,
                balance_count=len(balances.balances),
            )
            continue
        result.append(pool.model_copy(update={"tokens": coins_from_balances(balances.balances)}))

    logger.debug("contract_pools_fetched", pool_count=len(result), skipped=len(pools) - len(result))
    return tuple(result)


__all__ = ["coins_from_balances", "parse_cosmwasm_record", "fetch_contract_pools"]
