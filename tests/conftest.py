"""Pytest configuration and fixtures."""

import asyncio
from typing import Any

import pytest

from aggregator.errors import UpstreamError
from aggregator.models.upstream import (
    BalancesResponse,
    FilteredPoolsResponse,
    NumPoolsResponse,
    PageRequest,
    PoolFilter,
    PoolsResponse,
)

# =============================================================================
# Mock classes for dependency injection
# =============================================================================


class MockUpstreamClient:
    """In-memory UpstreamClient with configurable responses.

    Usage:
        # Indexer serves two records, node reports 10 pools
        client = MockUpstreamClient(num_pools="10", filtered_pools=[record1, record2])

        # Indexer is down, node fallback serves records
        client = MockUpstreamClient(
            filtered_pools_error=UpstreamError("indexer", "HTTP 503"),
            node_pools=[node_record],
            balances={address: [{"denom": "uosmo", "amount": "100"}]},
        )

        # Hold every filtered pool query until the test releases it
        client = MockUpstreamClient(gate=asyncio.Event())
    """

    def __init__(
        self,
        num_pools: str = "0",
        filtered_pools: list[dict[str, Any]] | None = None,
        node_pools: list[dict[str, Any]] | None = None,
        balances: dict[str, list[dict[str, str]]] | None = None,
        num_pools_error: Exception | None = None,
        filtered_pools_error: Exception | None = None,
        node_pools_error: Exception | None = None,
        balances_error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.num_pools = num_pools
        self.filtered_pools = filtered_pools or []
        self.node_pools = node_pools or []
        self.balances = balances or {}
        self.num_pools_error = num_pools_error
        self.filtered_pools_error = filtered_pools_error
        self.node_pools_error = node_pools_error
        self.balances_error = balances_error
        self.gate = gate

        # Track calls for assertions
        self.num_pools_calls = 0
        self.filtered_pools_calls: list[tuple[PoolFilter, PageRequest]] = []
        self.node_pools_calls = 0
        self.balances_calls: list[str] = []

    async def query_num_pools(self) -> NumPoolsResponse:
        self.num_pools_calls += 1
        if self.num_pools_error is not None:
            raise self.num_pools_error
        return NumPoolsResponse(num_pools=self.num_pools)

    async def query_filtered_pools(
        self, pool_filter: PoolFilter, page: PageRequest
    ) -> FilteredPoolsResponse:
        self.filtered_pools_calls.append((pool_filter, page))
        if self.gate is not None:
            await self.gate.wait()
        if self.filtered_pools_error is not None:
            raise self.filtered_pools_error
        return FilteredPoolsResponse(pools=self.filtered_pools)

    async def query_pools(self) -> PoolsResponse:
        self.node_pools_calls += 1
        if self.node_pools_error is not None:
            raise self.node_pools_error
        return PoolsResponse(pools=self.node_pools)

    async def query_balances(self, address: str) -> BalancesResponse:
        self.balances_calls.append(address)
        if self.balances_error is not None:
            raise self.balances_error
        return BalancesResponse.model_validate({"balances": self.balances.get(address, [])})


class FakeClock:
    """Manually advanced monotonic clock.

    Usage:
        clock = FakeClock()
        cache = AsyncTTLCache(maxsize=2, ttl=30, clock=clock)
        clock.advance(31)  # entries stored before now are expired
    """

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Pytest fixtures for mocks
# =============================================================================


@pytest.fixture
def fake_clock() -> FakeClock:
    """A clock frozen until advanced by the test."""
    return FakeClock()


@pytest.fixture
def mock_client() -> MockUpstreamClient:
    """An upstream client with empty responses."""
    return MockUpstreamClient()


@pytest.fixture
def indexer_down() -> UpstreamError:
    """The error raised by an unavailable indexer."""
    return UpstreamError("indexer", "HTTP 503 from https://indexer.test/stream/pool/v1/all")
