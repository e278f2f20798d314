"""Canonical pool models.

Every source (indexer, node, contract balances) is normalized into one of four
pool variants, discriminated by the "@type" field:

- WeightedPool: weighted product share pool
- StablePool: stableswap share pool with per-token scaling factors
- ConcentratedLiquidityPool: two-token concentrated liquidity pool
- CosmwasmPool: pool whose liquidity is held by a smart contract

Models are frozen so cached collections cannot be mutated by readers, and
allow extra fields so opaque node attributes survive pass-through.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter

from aggregator.constants import (
    CONCENTRATED_POOL_TYPE,
    COSMWASM_POOL_TYPE,
    STABLE_POOL_TYPE,
    WEIGHTED_POOL_TYPE,
)
from aggregator.models.types import IntegerString, PoolId

# Verbatim upstream scalar (tick, price and spread fields keep their source form)
Scalar = int | float | str


class Coin(BaseModel):
    """A denom and integer base-unit amount."""

    denom: str
    amount: IntegerString

    model_config = {"frozen": True, "extra": "allow"}


class PoolParams(BaseModel):
    """Fee parameters shared by weighted and stable pools.

    Fees are decimal fractions serialized as strings (e.g. "0.002" for 0.2%).
    """

    swap_fee: str
    exit_fee: str
    smooth_weight_change_params: dict[str, Any] | None = None

    model_config = {"frozen": True, "extra": "allow"}


class WeightedPoolAsset(BaseModel):
    """A token and its weight in a weighted pool."""

    token: Coin
    weight: str

    model_config = {"frozen": True, "extra": "allow"}


class PoolMetrics(BaseModel):
    """Aggregate market metrics common to all pools.

    Only indexer-sourced pools carry metrics; node-sourced pools leave them unset.
    """

    liquidity_usd: float | None = Field(default=None, alias="liquidityUsd")
    liquidity_24h_usd_change: float | None = Field(default=None, alias="liquidity24hUsdChange")
    volume_24h_usd: float | None = Field(default=None, alias="volume24hUsd")
    volume_24h_usd_change: float | None = Field(default=None, alias="volume24hUsdChange")
    volume_7d_usd: float | None = Field(default=None, alias="volume7dUsd")

    model_config = {"frozen": True, "extra": "allow", "populate_by_name": True}


class WeightedPool(PoolMetrics):
    """Weighted product share pool."""

    type: Literal["/osmosis.gamm.v1beta1.Pool"] = Field(default=WEIGHTED_POOL_TYPE, alias="@type")
    id: PoolId
    address: str | None = None
    pool_params: PoolParams
    total_shares: Coin | None = None
    pool_assets: list[WeightedPoolAsset]
    total_weight: str

    @property
    def identifier(self) -> str:
        return self.id


class StablePool(PoolMetrics):
    """Stableswap share pool.

    scaling_factors is aligned by position with pool_liquidity.
    """

    type: Literal["/osmosis.gamm.poolmodels.stableswap.v1beta1.Pool"] = Field(
        default=STABLE_POOL_TYPE, alias="@type"
    )
    id: PoolId
    address: str | None = None
    pool_params: PoolParams
    total_shares: Coin | None = None
    pool_liquidity: list[Coin]
    scaling_factors: list[str]
    scaling_factor_controller: str = ""

    @property
    def identifier(self) -> str:
        return self.id


class ConcentratedLiquidityPool(PoolMetrics):
    """Two-token concentrated liquidity pool.

    token0Amount/token1Amount are base-unit balances held at the pool address.
    """

    type: Literal["/osmosis.concentratedliquidity.v1beta1.Pool"] = Field(
        default=CONCENTRATED_POOL_TYPE, alias="@type"
    )
    id: PoolId
    address: str | None = None
    token0: str
    token0_amount: IntegerString | None = Field(default=None, alias="token0Amount")
    token1: str
    token1_amount: IntegerString | None = Field(default=None, alias="token1Amount")
    current_tick_liquidity: Scalar | None = None
    current_sqrt_price: Scalar | None = None
    current_tick: Scalar | None = None
    tick_spacing: Scalar | None = None
    exponent_at_price_one: Scalar | None = None
    spread_factor: Scalar | None = None

    @property
    def identifier(self) -> str:
        return self.id


class CosmwasmPool(PoolMetrics):
    """Pool backed by a CosmWasm contract.

    tokens holds the contract's live bank balances, verbatim.
    """

    type: Literal["/osmosis.cosmwasmpool.v1beta1.CosmWasmPool"] = Field(
        default=COSMWASM_POOL_TYPE, alias="@type"
    )
    pool_id: PoolId
    contract_address: str
    code_id: PoolId | None = None
    tokens: list[Coin] = Field(default_factory=list)

    @property
    def identifier(self) -> str:
        return self.pool_id


def _get_pool_type(v: dict[str, Any] | BaseModel) -> str | None:
    """Discriminator function for the Pool union type."""
    if isinstance(v, dict):
        pool_type = v.get("@type", v.get("type"))
        return str(pool_type) if pool_type is not None else None
    return getattr(v, "type", None)


# Discriminated union: Pydantic uses the "@type" field to select the variant
Pool = Annotated[
    Annotated[WeightedPool, Tag(WEIGHTED_POOL_TYPE)]
    | Annotated[StablePool, Tag(STABLE_POOL_TYPE)]
    | Annotated[ConcentratedLiquidityPool, Tag(CONCENTRATED_POOL_TYPE)]
    | Annotated[CosmwasmPool, Tag(COSMWASM_POOL_TYPE)],
    Discriminator(_get_pool_type),
]

POOL_ADAPTER: TypeAdapter[Pool] = TypeAdapter(Pool)
POOL_LIST_ADAPTER: TypeAdapter[list[Pool]] = TypeAdapter(list[Pool])


def parse_pool(data: dict[str, Any]) -> Pool:
    """Validate a type-tagged record into its canonical pool variant.

    Raises:
        pydantic.ValidationError: If the tag is unknown or the record is malformed
    """
    return POOL_ADAPTER.validate_python(data)


def pool_identifier(pool: Pool) -> str:
    """Return the identifier used for lookups (id, or pool_id for contract pools)."""
    return pool.identifier


def dump_pools(pools: list[Pool]) -> list[dict[str, Any]]:
    """Serialize pools to their wire form ("@type" and camelCase metrics)."""
    return POOL_LIST_ADAPTER.dump_python(pools, by_alias=True, exclude_none=True, mode="json")


__all__ = [
    "Coin",
    "PoolParams",
    "WeightedPoolAsset",
    "PoolMetrics",
    "WeightedPool",
    "StablePool",
    "ConcentratedLiquidityPool",
    "CosmwasmPool",
    "Pool",
    "POOL_ADAPTER",
    "parse_pool",
    "pool_identifier",
    "dump_pools",
]
