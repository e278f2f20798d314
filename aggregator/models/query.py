"""Result models for the pool query facade."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from aggregator.models.pools import Pool, dump_pools


@dataclass(frozen=True)
class AggregatedPools:
    """Full normalized pool list with the node's authoritative pool count.

    total_number_of_pools counts every on-chain pool, so it is an upper bound
    on len(pools) once liquidity and share-token filtering are applied.
    """

    pools: tuple[Pool, ...]
    total_number_of_pools: str


class PageInfo(BaseModel):
    """Pagination metadata for a windowed result."""

    has_next_page: bool = Field(alias="hasNextPage")

    model_config = {"populate_by_name": True}


class PoolsQueryResult(BaseModel):
    """Result of a facade query: one pool, one page, or the full list."""

    status: int = 200
    pools: list[Pool] = Field(default_factory=list)
    total_number_of_pools: str = Field(alias="totalNumberOfPools")
    page_info: PageInfo | None = Field(default=None, alias="pageInfo")

    model_config = {"populate_by_name": True}

    @property
    def found(self) -> bool:
        """Return True unless this is a not-found result."""
        return self.status != 404

    def to_response(self) -> dict[str, Any]:
        """Serialize to the wire form, omitting unset fields."""
        response: dict[str, Any] = {
            "status": self.status,
            "pools": dump_pools(self.pools),
            "totalNumberOfPools": self.total_number_of_pools,
        }
        if self.page_info is not None:
            response["pageInfo"] = self.page_info.model_dump(by_alias=True)
        return response
