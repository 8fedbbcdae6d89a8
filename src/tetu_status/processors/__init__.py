from __future__ import annotations

from .tvl_aggregator import aggregate_tvl, filter_vaults

__all__ = [
    "aggregate_tvl",
    "filter_vaults",
]
