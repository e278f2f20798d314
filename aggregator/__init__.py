"""Liquidity pool aggregator - indexer, node and contract sources behind a TTL cache."""

from aggregator.aggregator import PoolAggregator, get_default_aggregator

__version__ = "0.1.0"
__all__ = ["PoolAggregator", "get_default_aggregator", "__version__"]
