"""Upstream clients for the node and the indexer."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Protocol, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from aggregator.config import AggregatorConfig
from aggregator.errors import UpstreamError
from aggregator.models.upstream import (
    BalancesResponse,
    FilteredPoolsResponse,
    NumPoolsResponse,
    PageRequest,
    PoolFilter,
    PoolsResponse,
)

logger = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)

NUM_POOLS_PATH = "/osmosis/poolmanager/v1beta1/num_pools"
ALL_POOLS_PATH = "/osmosis/poolmanager/v1beta1/all-pools"
BALANCES_PATH = "/cosmos/bank/v1beta1/balances/{address}"
FILTERED_POOLS_PATH = "/stream/pool/v1/all"


class UpstreamClient(Protocol):
    """Protocol for the upstream services the aggregator reads from.

    This allows swapping between the HTTP client and an in-memory client for testing.
    """

    async def query_num_pools(self) -> NumPoolsResponse:
        """Get the authoritative number of pools from the node."""
        ...

    async def query_filtered_pools(
        self, pool_filter: PoolFilter, page: PageRequest
    ) -> FilteredPoolsResponse:
        """Get indexer pool records matching a filter, within a page window."""
        ...

    async def query_pools(self) -> PoolsResponse:
        """Get every pool from the node as type-tagged records."""
        ...

    async def query_balances(self, address: str) -> BalancesResponse:
        """Get the bank balances held by an address."""
        ...


class HttpUpstreamClient:
    """UpstreamClient backed by the node REST API and the indexer HTTP API.

    Args:
        node_url: Base URL of the node REST endpoint
        indexer_url: Base URL of the indexer
        timeout: Request timeout in seconds
        client: Optional shared httpx client; owned and closed by this
            instance when not provided
    """

    def __init__(
        self,
        node_url: str,
        indexer_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._node_url = node_url.rstrip("/")
        self._indexer_url = indexer_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls, config: AggregatorConfig) -> HttpUpstreamClient:
        return cls(
            node_url=config.node_url,
            indexer_url=config.indexer_url,
            timeout=config.request_timeout_seconds,
        )

    async def query_num_pools(self) -> NumPoolsResponse:
        data = await self._get("node", f"{self._node_url}{NUM_POOLS_PATH}")
        return self._validate("node", NumPoolsResponse, data)

    async def query_filtered_pools(
        self, pool_filter: PoolFilter, page: PageRequest
    ) -> FilteredPoolsResponse:
        params = {
            "min_liquidity": pool_filter["min_liquidity"],
            "order_by": pool_filter["order_by"],
            "order_key": pool_filter["order_key"],
            "offset": page["offset"],
            "limit": page["limit"],
        }
        data = await self._get("indexer", f"{self._indexer_url}{FILTERED_POOLS_PATH}", params)
        return self._validate("indexer", FilteredPoolsResponse, data)

    async def query_pools(self) -> PoolsResponse:
        data = await self._get("node", f"{self._node_url}{ALL_POOLS_PATH}")
        return self._validate("node", PoolsResponse, data)

    async def query_balances(self, address: str) -> BalancesResponse:
        path = BALANCES_PATH.format(address=address)
        data = await self._get("node", f"{self._node_url}{path}")
        return self._validate("node", BalancesResponse, data)

    async def _get(self, service: str, url: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as err:
            logger.warning(
                "upstream_bad_status",
                service=service,
                url=url,
                status_code=err.response.status_code,
            )
            raise UpstreamError(service, f"HTTP {err.response.status_code} from {url}") from err
        except httpx.HTTPError as err:
            logger.warning("upstream_request_failed", service=service, url=url, error=str(err))
            raise UpstreamError(service, f"request to {url} failed: {err}") from err
        except ValueError as err:
            raise UpstreamError(service, f"invalid JSON from {url}") from err

    @staticmethod
    def _validate(service: str, model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as err:
            raise UpstreamError(service, f"unexpected {model.__name__} payload: {err}") from err

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpUpstreamClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


__all__ = ["UpstreamClient", "HttpUpstreamClient"]
