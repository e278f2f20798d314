"""Pydantic models for upstream service responses.

Covers the node REST endpoints (pool count, all pools, bank balances) and the
indexer's filtered pool stream. Node pool records are heterogeneous and are
kept as plain dicts until they are matched to a canonical pool variant.
"""

from typing import Any

from pydantic import BaseModel, Field
from typing_extensions import TypedDict

from aggregator.models.types import DecimalAmount, IntegerString, PoolId


class PoolFilter(TypedDict):
    """Filter sent to the indexer's filtered pool query."""

    min_liquidity: float
    order_by: str
    order_key: str


class PageRequest(TypedDict):
    """Offset/limit window sent to the indexer."""

    offset: int
    limit: int


class NumPoolsResponse(BaseModel):
    """Authoritative pool count reported by the node."""

    num_pools: IntegerString


class Balance(BaseModel):
    """A bank balance (denom and base-unit amount)."""

    denom: str
    amount: IntegerString


class BalancesResponse(BaseModel):
    """Bank balances held by an address."""

    balances: list[Balance] = Field(default_factory=list)

    model_config = {"extra": "allow"}


class PoolsResponse(BaseModel):
    """All pools from the node, as type-tagged raw records."""

    pools: list[dict[str, Any]] = Field(default_factory=list)

    model_config = {"extra": "allow"}


class FilteredPoolsResponse(BaseModel):
    """Indexer response for a filtered pool query.

    Records are validated one at a time by the indexer path so that one
    malformed record does not discard the batch.
    """

    pools: list[dict[str, Any]] = Field(default_factory=list)

    model_config = {"extra": "allow"}


class PoolToken(BaseModel):
    """Token descriptor in an indexer pool record.

    Attributes:
        denom: Chain denomination
        amount: Human-readable amount (mantissa)
        exponent: Decimals of the denom; amount * 10^exponent is the base amount
        weight_or_scaling: Weight (weighted pools) or scaling factor (stable pools)
    """

    denom: str
    amount: DecimalAmount
    exponent: int
    weight_or_scaling: int | float | str | None = None

    model_config = {"extra": "allow"}


class PoolAssetPair(BaseModel):
    """Token pair of a concentrated liquidity record in the indexer."""

    asset0: PoolToken | None = None
    asset1: PoolToken | None = None

    model_config = {"extra": "allow"}


class FilteredPool(BaseModel):
    """Raw filtered-pool record as served by the indexer.

    Share pools (weighted, stable) list their tokens as an array; concentrated
    liquidity pools use a fixed asset0/asset1 pair. Fees are in hundredths.
    """

    pool_id: PoolId
    type: str
    address: str | None = None
    pool_tokens: list[PoolToken] | PoolAssetPair

    # Aggregate metrics
    liquidity: float | None = None
    liquidity_24h_change: float | None = None
    volume_24h: float | None = None
    volume_24h_change: float | None = None
    volume_7d: float | None = None

    # Share pool fields
    exit_fees: DecimalAmount | None = None
    swap_fees: DecimalAmount | None = None
    total_shares: dict[str, Any] | None = None
    total_weight_or_scaling: int | float | str | None = None
    scaling_factor_controller: str | None = None

    # Concentrated liquidity fields
    current_tick_liquidity: int | float | str | None = None
    current_sqrt_price: int | float | str | None = None
    current_tick: int | str | None = None
    tick_spacing: int | str | None = None
    exponent_at_price_one: int | str | None = None
    spread_factor: int | float | str | None = None

    model_config = {"extra": "allow"}
