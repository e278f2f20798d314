"""Aggregator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from aggregator.constants import (
    ALL_POOLS_CACHE_SIZE,
    CONTRACT_POOLS_CACHE_SIZE,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES,
)
from aggregator.errors import ConfigError

DEFAULT_NODE_URL = "https://lcd.osmosis.zone"
DEFAULT_INDEXER_URL = "https://api-osmosis.imperator.co"


@dataclass(frozen=True)
class AggregatorConfig:
    """Centralized configuration for the pool aggregator.

    Attributes:
        node_url: Base URL of the chain node REST endpoint
        indexer_url: Base URL of the indexed search service
        request_timeout_seconds: Timeout applied to every upstream request
        all_pools_ttl_seconds: Freshness window of the aggregated pool list
        contract_pools_ttl_seconds: Freshness window of the contract pool list
        all_pools_cache_size: Number of liquidity filters kept in memory
        contract_pools_cache_size: Capacity of the contract pool cache
        max_concurrent_balance_queries: Bound on in-flight balance queries
    """

    node_url: str = DEFAULT_NODE_URL
    indexer_url: str = DEFAULT_INDEXER_URL
    request_timeout_seconds: float = 10.0

    all_pools_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    contract_pools_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    all_pools_cache_size: int = ALL_POOLS_CACHE_SIZE
    contract_pools_cache_size: int = CONTRACT_POOLS_CACHE_SIZE

    max_concurrent_balance_queries: int = DEFAULT_MAX_CONCURRENT_BALANCE_QUERIES

    @classmethod
    def from_env(cls) -> AggregatorConfig:
        """Build a configuration from AGGREGATOR_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ConfigError: If a numeric variable cannot be parsed
        """
        defaults = cls()
        return cls(
            node_url=os.environ.get("AGGREGATOR_NODE_URL", defaults.node_url),
            indexer_url=os.environ.get("AGGREGATOR_INDEXER_URL", defaults.indexer_url),
            request_timeout_seconds=_env_float(
                "AGGREGATOR_REQUEST_TIMEOUT", defaults.request_timeout_seconds
            ),
            all_pools_ttl_seconds=_env_float(
                "AGGREGATOR_ALL_POOLS_TTL", defaults.all_pools_ttl_seconds
            ),
            contract_pools_ttl_seconds=_env_float(
                "AGGREGATOR_CONTRACT_POOLS_TTL", defaults.contract_pools_ttl_seconds
            ),
            max_concurrent_balance_queries=_env_int(
                "AGGREGATOR_MAX_BALANCE_QUERIES", defaults.max_concurrent_balance_queries
            ),
        )


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as err:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from err
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as err:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from err
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


DEFAULT_AGGREGATOR_CONFIG = AggregatorConfig()
