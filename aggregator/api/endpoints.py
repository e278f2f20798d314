"""API endpoints for pool queries."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from aggregator.aggregator import PoolAggregator, get_default_aggregator
from aggregator.errors import UpstreamError

logger = structlog.get_logger()

router = APIRouter()


def get_aggregator() -> PoolAggregator:
    """Dependency provider for the aggregator instance.

    Override this in tests to inject an aggregator with a mock client:
        app.dependency_overrides[get_aggregator] = lambda: aggregator

    Returns:
        The aggregator instance to serve pools from.
    """
    return get_default_aggregator()


@router.get("/pools")
async def get_pools(
    aggregator: Annotated[PoolAggregator, Depends(get_aggregator)],
    page: Annotated[int | None, Query(ge=1)] = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
    minimum_liquidity: Annotated[float | None, Query(alias="minimumLiquidity", ge=0)] = None,
    pool_id: Annotated[str | None, Query(alias="poolId")] = None,
) -> JSONResponse:
    """Serve one pool, one page, or all pools.

    Error Handling:
        - Unknown poolId: 404 with an empty pool list
        - Invalid query parameters: 422 Validation Error
        - Upstream unavailable (count query or both sources failed): 502
    """
    try:
        result = await aggregator.query_pools(
            page=page,
            limit=limit,
            minimum_liquidity=minimum_liquidity,
            pool_id=pool_id,
        )
    except UpstreamError as err:
        logger.error("pools_query_failed", service=err.service, error=str(err))
        return JSONResponse(status_code=502, content={"detail": "Upstream unavailable"})

    return JSONResponse(status_code=result.status, content=result.to_response())
