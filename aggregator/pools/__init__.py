"""Pool classification package.

Maps raw indexer records into canonical pool variants.
"""

from .classifier import (
    IndexerPool,
    has_legacy_share_token,
    make_coin_from_token,
    pool_from_filtered_pool,
)

__all__ = [
    "IndexerPool",
    "has_legacy_share_token",
    "make_coin_from_token",
    "pool_from_filtered_pool",
]
