from __future__ import annotations

from .compute import (
    Metric,
    discount_metric,
    price_metric,
    quoted_rate,
    supply_metric,
    tvl_metric,
    vault_tvl_metric,
)

__all__ = [
    "Metric",
    "discount_metric",
    "price_metric",
    "quoted_rate",
    "supply_metric",
    "tvl_metric",
    "vault_tvl_metric",
]
