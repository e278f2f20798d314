"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Denoms, addresses and indexer type tags
- factories: Indexer, node and balance record factories
"""

from tests.helpers.constants import (
    ATOM,
    CL_POOL_ADDRESS,
    CONTRACT_ADDRESS,
    LEGACY_SHARE_DENOM,
    OSMO,
    OTHER_CONTRACT_ADDRESS,
    USDC,
    USDT,
)
from tests.helpers.factories import (
    make_balances,
    make_cl_record,
    make_node_cl_record,
    make_node_cosmwasm_record,
    make_node_stable_record,
    make_node_weighted_record,
    make_stable_record,
    make_token,
    make_weighted_record,
)

__all__ = [
    # Constants
    "OSMO",
    "ATOM",
    "USDC",
    "USDT",
    "LEGACY_SHARE_DENOM",
    "CL_POOL_ADDRESS",
    "CONTRACT_ADDRESS",
    "OTHER_CONTRACT_ADDRESS",
    # Factories
    "make_token",
    "make_weighted_record",
    "make_stable_record",
    "make_cl_record",
    "make_node_weighted_record",
    "make_node_stable_record",
    "make_node_cl_record",
    "make_node_cosmwasm_record",
    "make_balances",
]
