from __future__ import annotations

from decimal import Decimal
from typing import Any

from ...errors import FeedError
from ...units import DECIMAL_CONTEXT
from .base import BaseFeedAdapter, parse_amount


def parse_tvl_payload(payload: Any) -> Decimal:
    """Sum the per-chain TVL mapping of a DefiLlama protocol response.

    A payload without ``currentChainTvls`` is treated as the mapping itself.
    """
    if not isinstance(payload, dict):
        raise FeedError(f"Invalid TVL response structure: {type(payload).__name__}")

    chain_tvls = payload.get("currentChainTvls", payload)
    if not isinstance(chain_tvls, dict) or not chain_tvls:
        raise FeedError("TVL response has no per-chain values")

    total = Decimal(0)
    for chain, value in chain_tvls.items():
        total = DECIMAL_CONTEXT.add(total, parse_amount(value, f"{chain} TVL"))
    return total


class TvlFeedAdapter(BaseFeedAdapter[Decimal]):
    """DefiLlama protocol TVL feed."""

    @property
    def adapter_name(self) -> str:
        return "tvl"

    @property
    def url(self) -> str:
        return self.config.tvl_feed_url

    def parse(self, payload: Any) -> Decimal:
        return parse_tvl_payload(payload)
