from __future__ import annotations

from decimal import Decimal
from typing import Any

from ...errors import FeedError
from .base import BaseFeedAdapter, parse_amount


def parse_supply_payload(payload: Any) -> Decimal:
    """The supply endpoint answers with a bare JSON number or numeric string."""
    supply = parse_amount(payload, "circulating supply")
    if supply < 0:
        raise FeedError(f"Negative circulating supply: {supply}")
    return supply


class SupplyFeedAdapter(BaseFeedAdapter[Decimal]):
    @property
    def adapter_name(self) -> str:
        return "circulating_supply"

    @property
    def url(self) -> str:
        return self.config.supply_feed_url

    def parse(self, payload: Any) -> Decimal:
        return parse_supply_payload(payload)
