"""Lookup and page slicing over the aggregated pool list."""

from __future__ import annotations

from collections.abc import Sequence

from aggregator.models.pools import Pool, pool_identifier
from aggregator.models.query import AggregatedPools, PageInfo, PoolsQueryResult

NOT_FOUND_STATUS = 404
OK_STATUS = 200


def find_pool(pools: Sequence[Pool], pool_id: str) -> Pool | None:
    """Linear search by identifier (id, or pool_id for CosmWasm pools)."""
    return next((pool for pool in pools if pool_identifier(pool) == pool_id), None)


def paginate(pools: Sequence[Pool], page: int, limit: int) -> tuple[list[Pool], PageInfo]:
    """Slice a 1-indexed page of `limit` pools.

    Example:
        25 pools, page=2, limit=10 -> pools[10:20], hasNextPage=True
        25 pools, page=3, limit=10 -> pools[20:25], hasNextPage=False
    """
    start_index = (page - 1) * limit
    window = list(pools[start_index : start_index + limit])
    return window, PageInfo(has_next_page=start_index + limit < len(pools))


def query_aggregated_pools(
    aggregated: AggregatedPools,
    page: int | None = None,
    limit: int | None = None,
    pool_id: str | None = None,
) -> PoolsQueryResult:
    """Serve a single pool, one page, or the full list from an aggregate.

    Args:
        aggregated: Cached aggregate; never mutated
        page: 1-indexed page number, used only together with limit
        limit: Page size, used only together with page
        pool_id: If set, look up this pool and ignore pagination

    Returns:
        PoolsQueryResult with status 404 and no pools if pool_id is unknown
    """
    pools = aggregated.pools
    total = aggregated.total_number_of_pools

    if pool_id:
        pool = find_pool(pools, pool_id)
        if pool is None:
            return PoolsQueryResult(
                status=NOT_FOUND_STATUS, pools=[], total_number_of_pools=total
            )
        return PoolsQueryResult(status=OK_STATUS, pools=[pool], total_number_of_pools=total)

    if page and limit:
        window, page_info = paginate(pools, page, limit)
        return PoolsQueryResult(
            status=OK_STATUS,
            pools=window,
            total_number_of_pools=total,
            page_info=page_info,
        )

    return PoolsQueryResult(status=OK_STATUS, pools=list(pools), total_number_of_pools=total)


__all__ = ["find_pool", "paginate", "query_aggregated_pools"]
