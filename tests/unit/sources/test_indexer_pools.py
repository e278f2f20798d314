"""Tests for the indexer retrieval path and its node fallback."""

import pytest
from pydantic import ValidationError

from aggregator.errors import UnrecognizedPoolShapeError, UpstreamError
from aggregator.models import (
    ConcentratedLiquidityPool,
    CosmwasmPool,
    StablePool,
    WeightedPool,
)
from aggregator.sources.indexer import classify_filtered_pools, fetch_all_pools
from tests.conftest import MockUpstreamClient
from tests.helpers import (
    CONTRACT_ADDRESS,
    LEGACY_SHARE_DENOM,
    OSMO,
    USDC,
    make_balances,
    make_cl_record,
    make_node_cosmwasm_record,
    make_node_weighted_record,
    make_stable_record,
    make_token,
    make_weighted_record,
)
from tests.helpers.constants import INDEXER_WEIGHTED


def contract_pools_returning(*pools: CosmwasmPool):
    async def provider() -> tuple[CosmwasmPool, ...]:
        return pools

    return provider


def contract_pools_failing(error: Exception):
    async def provider() -> tuple[CosmwasmPool, ...]:
        raise error

    return provider


COSMWASM_POOL = CosmwasmPool(pool_id="1001", contract_address=CONTRACT_ADDRESS)


class TestClassifyFilteredPools:
    """Tests for per-record classification."""

    def test_order_preserved(self):
        pools = classify_filtered_pools(
            [
                make_stable_record(pool_id=2),
                make_weighted_record(pool_id=1),
                make_cl_record(pool_id=3),
            ]
        )
        assert [pool.id for pool in pools] == ["2", "1", "3"]

    def test_legacy_share_records_skipped(self):
        pools = classify_filtered_pools(
            [
                make_weighted_record(
                    pool_id=1, tokens=[make_token(LEGACY_SHARE_DENOM), make_token(OSMO)]
                ),
                make_weighted_record(pool_id=2),
            ]
        )
        assert [pool.id for pool in pools] == ["2"]

    def test_unrecognized_shape_aborts_batch(self):
        with pytest.raises(UnrecognizedPoolShapeError):
            classify_filtered_pools(
                [make_weighted_record(pool_id=1), make_cl_record(pool_id=3, type=INDEXER_WEIGHTED)]
            )

    def test_malformed_record_aborts_batch(self):
        missing_tokens = make_weighted_record(pool_id=1)
        del missing_tokens["pool_tokens"]
        with pytest.raises(ValidationError):
            classify_filtered_pools([make_stable_record(pool_id=3), missing_tokens])

    def test_bad_amount_aborts_batch(self):
        bad_amount = make_weighted_record(
            pool_id=2, tokens=[make_token(OSMO, amount="lots"), make_token(USDC)]
        )
        with pytest.raises(ValidationError):
            classify_filtered_pools([bad_amount])


class TestFetchAllPools:
    """Tests for fetch_all_pools."""

    @pytest.mark.asyncio
    async def test_unrecognized_record_falls_back_to_node(self):
        client = MockUpstreamClient(
            num_pools="10",
            filtered_pools=[
                make_cl_record(pool_id=3, type=INDEXER_WEIGHTED),
                make_weighted_record(pool_id=1),
            ],
            node_pools=[make_node_weighted_record(pool_id="77")],
        )

        aggregated = await fetch_all_pools(client, contract_pools_returning(COSMWASM_POOL))

        assert client.node_pools_calls == 1
        assert [pool.identifier for pool in aggregated.pools] == ["77"]
        assert aggregated.total_number_of_pools == "10"

    @pytest.mark.asyncio
    async def test_malformed_record_falls_back_to_node(self):
        bad_amount = make_weighted_record(
            pool_id=2, tokens=[make_token(OSMO, amount="lots"), make_token(USDC)]
        )
        client = MockUpstreamClient(
            num_pools="10",
            filtered_pools=[make_stable_record(pool_id=3), bad_amount],
            node_pools=[make_node_weighted_record(pool_id="77")],
        )

        aggregated = await fetch_all_pools(client, contract_pools_returning())

        assert [pool.identifier for pool in aggregated.pools] == ["77"]

    @pytest.mark.asyncio
    async def test_legacy_share_record_does_not_fall_back(self):
        client = MockUpstreamClient(
            num_pools="10",
            filtered_pools=[
                make_weighted_record(
                    pool_id=1, tokens=[make_token(LEGACY_SHARE_DENOM), make_token(OSMO)]
                ),
                make_weighted_record(pool_id=2),
            ],
        )

        aggregated = await fetch_all_pools(client, contract_pools_returning())

        assert [pool.identifier for pool in aggregated.pools] == ["2"]
        assert client.node_pools_calls == 0

    @pytest.mark.asyncio
    async def test_cosmwasm_pools_first(self):
        client = MockUpstreamClient(
            num_pools="1500",
            filtered_pools=[make_weighted_record(pool_id=1), make_cl_record(pool_id=3)],
        )

        aggregated = await fetch_all_pools(client, contract_pools_returning(COSMWASM_POOL))

        assert [type(pool) for pool in aggregated.pools] == [
            CosmwasmPool,
            WeightedPool,
            ConcentratedLiquidityPool,
        ]
        assert aggregated.total_number_of_pools == "1500"

    @pytest.mark.asyncio
    async def test_indexer_query_parameters(self):
        client = MockUpstreamClient(num_pools="1500")

        await fetch_all_pools(client, contract_pools_returning(), minimum_liquidity=1000)

        [(pool_filter, page)] = client.filtered_pools_calls
        assert pool_filter == {"min_liquidity": 1000, "order_by": "desc", "order_key": "liquidity"}
        assert page == {"offset": 0, "limit": 1500}

    @pytest.mark.asyncio
    async def test_indexer_failure_falls_back_to_node(self, indexer_down: UpstreamError):
        client = MockUpstreamClient(
            num_pools="10",
            filtered_pools_error=indexer_down,
            node_pools=[make_node_weighted_record(pool_id="1"), make_node_cosmwasm_record()],
            balances={CONTRACT_ADDRESS: make_balances((OSMO, "1"))},
        )

        aggregated = await fetch_all_pools(client, contract_pools_returning(COSMWASM_POOL))

        assert [type(pool) for pool in aggregated.pools] == [WeightedPool, CosmwasmPool]
        assert aggregated.total_number_of_pools == "10"
        assert client.node_pools_calls == 1

    @pytest.mark.asyncio
    async def test_contract_failure_falls_back_to_node(self):
        client = MockUpstreamClient(
            num_pools="10",
            filtered_pools=[make_stable_record(pool_id=2)],
            node_pools=[make_node_weighted_record(pool_id="1")],
        )

        aggregated = await fetch_all_pools(
            client, contract_pools_failing(UpstreamError("node", "HTTP 500"))
        )

        assert [type(pool) for pool in aggregated.pools] == [WeightedPool]

    @pytest.mark.asyncio
    async def test_both_paths_failing_raises(self, indexer_down: UpstreamError):
        client = MockUpstreamClient(
            num_pools="10",
            filtered_pools_error=indexer_down,
            node_pools_error=UpstreamError("node", "HTTP 500"),
        )

        with pytest.raises(UpstreamError):
            await fetch_all_pools(client, contract_pools_returning())

    @pytest.mark.asyncio
    async def test_num_pools_failure_propagates(self):
        client = MockUpstreamClient(num_pools_error=UpstreamError("node", "HTTP 500"))

        with pytest.raises(UpstreamError):
            await fetch_all_pools(client, contract_pools_returning())

        assert client.filtered_pools_calls == []
        assert client.node_pools_calls == 0

    @pytest.mark.asyncio
    async def test_stable_pools_kept(self):
        client = MockUpstreamClient(num_pools="2", filtered_pools=[make_stable_record(pool_id=2)])

        aggregated = await fetch_all_pools(client, contract_pools_returning())

        assert [type(pool) for pool in aggregated.pools] == [StablePool]
