from __future__ import annotations

from .base import BaseFeedAdapter
from .price import PriceFeedAdapter, SpotPrice
from .supply import SupplyFeedAdapter
from .tvl import TvlFeedAdapter

__all__ = [
    "BaseFeedAdapter",
    "PriceFeedAdapter",
    "SpotPrice",
    "SupplyFeedAdapter",
    "TvlFeedAdapter",
]
