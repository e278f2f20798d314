"""Upstream pool sources.

- indexer: primary path (indexer records + CosmWasm pools), falls back to node
- node: fallback path reading every pool from the node
- contract: CosmWasm pools with live contract balances
"""

from .client import HttpUpstreamClient, UpstreamClient
from .contract import fetch_contract_pools
from .indexer import classify_filtered_pools, fetch_all_pools
from .node import fetch_pools_from_node

__all__ = [
    "UpstreamClient",
    "HttpUpstreamClient",
    "fetch_contract_pools",
    "fetch_pools_from_node",
    "fetch_all_pools",
    "classify_filtered_pools",
]
