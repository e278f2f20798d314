"""Indexer pool classification.

Maps raw filtered-pool records from the indexer into canonical pool variants.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog

from aggregator.constants import (
    INDEXER_CONCENTRATED_POOL_TYPE,
    INDEXER_FEE_EXPONENT,
    INDEXER_STABLE_POOL_TYPE,
    INDEXER_WEIGHTED_POOL_TYPE,
    LEGACY_SHARE_DENOM_MARKER,
)
from aggregator.errors import UnrecognizedPoolShapeError
from aggregator.math import scale_decimal_string, to_integer_string
from aggregator.models.pools import (
    Coin,
    ConcentratedLiquidityPool,
    PoolParams,
    StablePool,
    WeightedPool,
    WeightedPoolAsset,
)
from aggregator.models.upstream import FilteredPool, PoolAssetPair, PoolToken

logger = structlog.get_logger()

IndexerPool = WeightedPool | StablePool | ConcentratedLiquidityPool


def _number_to_string(value: Any) -> str:
    """Render an upstream number verbatim (integral floats without ".0")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _pool_tokens(filtered_pool: FilteredPool) -> list[PoolToken]:
    if isinstance(filtered_pool.pool_tokens, PoolAssetPair):
        pair = filtered_pool.pool_tokens
        return [asset for asset in (pair.asset0, pair.asset1) if asset is not None]
    return filtered_pool.pool_tokens


def has_legacy_share_token(filtered_pool: FilteredPool) -> bool:
    """Return True if any token denom contains the legacy share-token marker."""
    return any(LEGACY_SHARE_DENOM_MARKER in token.denom for token in _pool_tokens(filtered_pool))


def make_coin_from_token(pool_token: PoolToken) -> Coin:
    """Convert an indexer token descriptor into a base-unit coin."""
    return Coin(
        denom=pool_token.denom,
        amount=to_integer_string(pool_token.amount, pool_token.exponent),
    )


def _metrics(filtered_pool: FilteredPool) -> dict[str, Any]:
    """Metrics common to all pools."""
    return {
        "liquidity_usd": filtered_pool.liquidity,
        "liquidity_24h_usd_change": filtered_pool.liquidity_24h_change,
        "volume_24h_usd": filtered_pool.volume_24h,
        "volume_24h_usd_change": filtered_pool.volume_24h_change,
        "volume_7d_usd": filtered_pool.volume_7d,
    }


def _concentrated_pool(
    filtered_pool: FilteredPool, pair: PoolAssetPair, metrics: dict[str, Any]
) -> ConcentratedLiquidityPool | None:
    if pair.asset0 is None or pair.asset1 is None:
        logger.debug("cl_pool_missing_asset", pool_id=filtered_pool.pool_id)
        return None

    token0 = make_coin_from_token(pair.asset0)
    token1 = make_coin_from_token(pair.asset1)

    return ConcentratedLiquidityPool(
        id=filtered_pool.pool_id,
        address=filtered_pool.address,
        current_tick_liquidity=filtered_pool.current_tick_liquidity,
        token0=token0.denom,
        token0_amount=token0.amount,
        token1=token1.denom,
        token1_amount=token1.amount,
        current_sqrt_price=filtered_pool.current_sqrt_price,
        current_tick=filtered_pool.current_tick,
        tick_spacing=filtered_pool.tick_spacing,
        exponent_at_price_one=filtered_pool.exponent_at_price_one,
        spread_factor=filtered_pool.spread_factor,
        **metrics,
    )


def _share_pool_base(filtered_pool: FilteredPool, metrics: dict[str, Any]) -> dict[str, Any]:
    """Fields shared by weighted and stable pools.

    Indexer fees are in hundredths and are rescaled to decimal fractions.
    """
    if filtered_pool.exit_fees is None or filtered_pool.swap_fees is None:
        raise UnrecognizedPoolShapeError(filtered_pool.pool_id, filtered_pool.type)

    return {
        "id": filtered_pool.pool_id,
        "address": filtered_pool.address,
        "pool_params": PoolParams(
            exit_fee=scale_decimal_string(filtered_pool.exit_fees, INDEXER_FEE_EXPONENT),
            swap_fee=scale_decimal_string(filtered_pool.swap_fees, INDEXER_FEE_EXPONENT),
            smooth_weight_change_params=None,
        ),
        "total_shares": filtered_pool.total_shares,
        **metrics,
    }


def _weighted_pool(
    filtered_pool: FilteredPool, tokens: list[PoolToken], base: dict[str, Any]
) -> WeightedPool:
    if filtered_pool.total_weight_or_scaling is None or any(
        token.weight_or_scaling is None for token in tokens
    ):
        raise UnrecognizedPoolShapeError(filtered_pool.pool_id, filtered_pool.type)

    return WeightedPool(
        **base,
        pool_assets=[
            WeightedPoolAsset(
                token=make_coin_from_token(token),
                weight=_number_to_string(token.weight_or_scaling),
            )
            for token in tokens
        ],
        total_weight=_number_to_string(filtered_pool.total_weight_or_scaling),
    )


def _stable_pool(
    filtered_pool: FilteredPool, tokens: list[PoolToken], base: dict[str, Any]
) -> StablePool:
    if any(token.weight_or_scaling is None for token in tokens):
        raise UnrecognizedPoolShapeError(filtered_pool.pool_id, filtered_pool.type)

    return StablePool(
        **base,
        pool_liquidity=[make_coin_from_token(token) for token in tokens],
        scaling_factors=[_number_to_string(token.weight_or_scaling) for token in tokens],
        scaling_factor_controller=filtered_pool.scaling_factor_controller or "",
    )


def pool_from_filtered_pool(filtered_pool: FilteredPool) -> IndexerPool | None:
    """Map an indexer filtered-pool record to its canonical pool.

    Args:
        filtered_pool: Validated indexer record

    Returns:
        Canonical pool, or None if the record holds legacy share tokens or a
        concentrated liquidity pair with a missing side

    Raises:
        UnrecognizedPoolShapeError: If the type tag and token representation
            do not form a known pool shape
        InvalidAmountError: If a token amount is not a decimal numeral
    """
    # Deny pools containing tokens with legacy share denoms
    if has_legacy_share_token(filtered_pool):
        logger.debug("filtered_pool_legacy_share_token", pool_id=filtered_pool.pool_id)
        return None

    metrics = _metrics(filtered_pool)
    tokens = filtered_pool.pool_tokens

    if filtered_pool.type == INDEXER_CONCENTRATED_POOL_TYPE and isinstance(tokens, PoolAssetPair):
        return _concentrated_pool(filtered_pool, tokens, metrics)

    if not isinstance(tokens, list):
        raise UnrecognizedPoolShapeError(filtered_pool.pool_id, filtered_pool.type)

    if filtered_pool.type == INDEXER_WEIGHTED_POOL_TYPE:
        return _weighted_pool(filtered_pool, tokens, _share_pool_base(filtered_pool, metrics))

    if filtered_pool.type == INDEXER_STABLE_POOL_TYPE:
        return _stable_pool(filtered_pool, tokens, _share_pool_base(filtered_pool, metrics))

    raise UnrecognizedPoolShapeError(filtered_pool.pool_id, filtered_pool.type)


__all__ = [
    "IndexerPool",
    "has_legacy_share_token",
    "make_coin_from_token",
    "pool_from_filtered_pool",
]
