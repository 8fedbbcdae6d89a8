from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from ...errors import FeedError
from ...settings import TetuStatusSettings
from .base import BaseFeedAdapter, parse_amount


@dataclass(frozen=True)
class SpotPrice:
    """USD price of a token and its 24 hour change in percent."""

    price: Decimal
    change_24h: Decimal | None = None


def parse_price_payload(payload: Any, coin_id: str) -> SpotPrice:
    """Read ``{coin_id: {"usd": ..., "usd_24h_change": ...}}``."""
    if not isinstance(payload, dict) or not isinstance(payload.get(coin_id), dict):
        raise FeedError(f"Invalid price response structure: {payload}")

    entry = payload[coin_id]
    if "usd" not in entry:
        raise FeedError(f"Price missing for {coin_id}: {entry}")

    price = parse_amount(entry["usd"], "price")
    change = entry.get("usd_24h_change")
    change_24h = parse_amount(change, "24h change") if change is not None else None
    return SpotPrice(price=price, change_24h=change_24h)


class PriceFeedAdapter(BaseFeedAdapter[SpotPrice]):
    """CoinGecko ``simple/price`` feed."""

    def __init__(self, config: TetuStatusSettings):
        super().__init__(config)
        self.coin_id = config.price_feed_coin_id

    @property
    def adapter_name(self) -> str:
        return "price"

    @property
    def url(self) -> str:
        return self.config.price_feed_url

    def parse(self, payload: Any) -> SpotPrice:
        return parse_price_payload(payload, self.coin_id)
