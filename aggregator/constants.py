"""Pool type tags and aggregation parameters.

Centralizes the wire discriminators shared by the indexer and node sources
and the cache parameters used by the aggregator.
"""

# Canonical "@type" tags (node format, leading slash)
WEIGHTED_POOL_TYPE = "/osmosis.gamm.v1beta1.Pool"
STABLE_POOL_TYPE = "/osmosis.gamm.poolmodels.stableswap.v1beta1.Pool"
CONCENTRATED_POOL_TYPE = "/osmosis.concentratedliquidity.v1beta1.Pool"
COSMWASM_POOL_TYPE = "/osmosis.cosmwasmpool.v1beta1.CosmWasmPool"

# The indexer reports the same tags without the leading slash
INDEXER_WEIGHTED_POOL_TYPE = WEIGHTED_POOL_TYPE.lstrip("/")
INDEXER_STABLE_POOL_TYPE = STABLE_POOL_TYPE.lstrip("/")
INDEXER_CONCENTRATED_POOL_TYPE = CONCENTRATED_POOL_TYPE.lstrip("/")

# Denoms containing this marker are legacy share tokens and never pool assets
LEGACY_SHARE_DENOM_MARKER = "gamm"

# Indexer fees are expressed in hundredths (e.g. 0.2 -> 0.002)
INDEXER_FEE_EXPONENT = -2

# Sort order requested from the indexer
INDEXER_ORDER_BY = "desc"
INDEXER_ORDER_KEY = "liquidity"

# Cache keys
ALL_POOLS_CACHE_KEY_PREFIX = "all-pools"
COSMWASM_POOLS_CACHE_KEY = "cosmwasm-pools"

# Cache sizing and freshness
ALL_POOLS_CACHE_SIZE = 2
CONTRACT_POOLS_CACHE_SIZE = 10
DEFAULT_CACHE_TTL_SECONDS = 30.0

# A contract pool with fewer balances than this is not initialized yet
MIN_CONTRACT_POOL_BALANCES = 2

# Upper bound on concurrent per-pool balance queries
DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES = 32


def all_pools_cache_key(minimum_liquidity: float) -> str:
    """Build the aggregated-list cache key for a liquidity filter.

    Integral filters render without a fractional part, so 0 and 0.0 share a key.
    """
    if float(minimum_liquidity).is_integer():
        return f"{ALL_POOLS_CACHE_KEY_PREFIX}-{int(minimum_liquidity)}"
    return f"{ALL_POOLS_CACHE_KEY_PREFIX}-{minimum_liquidity}"
