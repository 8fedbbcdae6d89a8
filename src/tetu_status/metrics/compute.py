"""Pure functions turning feed, quote and aggregator output into metrics."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..adapters.feed_adapters.price import SpotPrice
from ..constants import TOKEN_DECIMALS
from ..units import (
    DECIMAL_CONTEXT,
    discount_ratio,
    format_change,
    format_currency,
    format_percent,
    from_base_units,
    to_decimal,
    truncate_status,
)


@dataclass
class Metric:
    """A display label (nickname) and status text, truncated on construction."""

    label: str | None
    value: str

    def __post_init__(self) -> None:
        self.value = truncate_status(self.value)
        if self.label is not None:
            self.label = truncate_status(self.label)


def price_metric(spot: SpotPrice, symbol: str = "TETU") -> Metric:
    price = format_currency(spot.price, 4)
    if spot.change_24h is None:
        change = "n/a"
    else:
        change = format_change(spot.change_24h)
    return Metric(label=f"{symbol} ${price}", value=f"24h: {change}")


def supply_metric(supply: Decimal) -> Metric:
    return Metric(label="Circulating Supply", value=format_currency(supply, 2))


def tvl_metric(total_usd: Decimal, label: str = "TVL", places: int = 0) -> Metric:
    return Metric(label=label, value=f"${format_currency(total_usd, places)}")


def vault_tvl_metric(total_base_units: Decimal | int) -> Metric:
    """On-chain TVL sums come back in 18-decimal USD base units."""
    return tvl_metric(
        from_base_units(total_base_units, TOKEN_DECIMALS), label="Vaults TVL", places=2
    )


def quoted_rate(
    quoted_out: str | int, input_amount: int, decimals: int = TOKEN_DECIMALS
) -> Decimal:
    """Output per one input unit, both sides in human units."""
    if input_amount <= 0:
        raise ValueError("input_amount must be positive to derive a rate")
    out_human = from_base_units(to_decimal(quoted_out), decimals)
    in_human = from_base_units(input_amount, decimals)
    return DECIMAL_CONTEXT.divide(out_human, in_human)


def discount_metric(
    label: str, quoted_out: str | int, input_amount: int = 10**TOKEN_DECIMALS
) -> Metric:
    """Discount of a derivative token against its underlying.

    A quote of 0.95 underlying per unit displays as ``5.0%``.
    """
    rate = quoted_rate(quoted_out, input_amount)
    return Metric(label=label, value=format_percent(discount_ratio(rate), 1))
