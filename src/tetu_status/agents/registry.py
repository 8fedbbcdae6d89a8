"""Catalogue of the concrete agents and their startup wiring."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from rich.console import Console

from ..adapters.feed_adapters import PriceFeedAdapter, SupplyFeedAdapter, TvlFeedAdapter
from ..adapters.quote_adapters import BatchSwapRequest, RouterSwapRequest, quote
from ..constants import TOKEN_DECIMALS
from ..endpoints import resolve_endpoint
from ..errors import ConfigurationError, truncate_message
from ..metrics import (
    Metric,
    discount_metric,
    price_metric,
    supply_metric,
    tvl_metric,
    vault_tvl_metric,
)
from ..processors import aggregate_tvl
from ..publishers import StatusPublisher, create_publisher
from ..settings import TetuStatusSettings
from .scheduler import Agent, MetricComputation

logger = logging.getLogger(__name__)

ONE_TOKEN = 10**TOKEN_DECIMALS

PublisherFactory = Callable[[TetuStatusSettings, str, Optional[Console]], StatusPublisher]


def tetu_price(settings: TetuStatusSettings) -> MetricComputation:
    feed = PriceFeedAdapter(settings)

    async def compute() -> Metric:
        return price_metric(await feed.fetch())

    return compute


def circulating_supply(settings: TetuStatusSettings) -> MetricComputation:
    feed = SupplyFeedAdapter(settings)

    async def compute() -> Metric:
        return supply_metric(await feed.fetch())

    return compute


def feed_tvl(settings: TetuStatusSettings) -> MetricComputation:
    feed = TvlFeedAdapter(settings)

    async def compute() -> Metric:
        return tvl_metric(await feed.fetch())

    return compute


def vault_tvl(settings: TetuStatusSettings) -> MetricComputation:
    async def compute() -> Metric:
        return vault_tvl_metric(await aggregate_tvl(settings))

    return compute


def tetubal_discount(settings: TetuStatusSettings) -> MetricComputation:
    """tetuBAL priced in its 80BAL-20WETH BPT through the Balancer pool."""
    q = settings.quotes
    request = BatchSwapRequest(
        pool_id=q.tetubal_pool_id,
        input_token=q.tetubal_token,
        output_token=q.tetubal_underlying,
        input_amount=ONE_TOKEN,
    )

    async def compute() -> Metric:
        endpoint = resolve_endpoint(settings, q.network)
        amount_out = await quote(endpoint, request)
        return discount_metric("tetuBAL discount", amount_out, request.input_amount)

    return compute


def tetuqi_discount(settings: TetuStatusSettings) -> MetricComputation:
    """tetuQI priced in QI through the TetuSwap pair."""
    q = settings.quotes
    if not q.tetuqi_pair:
        raise ConfigurationError("quotes.tetuqi_pair must be configured")
    request = RouterSwapRequest(
        router=q.tetuqi_router,
        pair=q.tetuqi_pair,
        fee=q.tetuqi_fee,
        input_token=q.tetuqi_token,
        output_token=q.qi_token,
        input_amount=ONE_TOKEN,
    )

    async def compute() -> Metric:
        endpoint = resolve_endpoint(settings, q.network)
        amount_out = await quote(endpoint, request)
        return discount_metric("tetuQI discount", amount_out, request.input_amount)

    return compute


AGENT_REGISTRY: dict[str, Callable[[TetuStatusSettings], MetricComputation]] = {
    "tetu-price": tetu_price,
    "circulating-supply": circulating_supply,
    "tvl": feed_tvl,
    "vault-tvl": vault_tvl,
    "tetubal-discount": tetubal_discount,
    "tetuqi-discount": tetuqi_discount,
}


def build_agents(
    settings: TetuStatusSettings,
    console: Console | None = None,
    publisher_factory: PublisherFactory = create_publisher,
) -> list[Agent]:
    """Construct every enabled agent.

    An agent whose configuration is incomplete is logged and skipped; the
    remaining agents are still built.
    """
    if settings.enabled_agents is not None:
        unknown = sorted(set(settings.enabled_agents) - AGENT_REGISTRY.keys())
        if unknown:
            logger.warning(
                "Unknown agents ignored: %s. Available: %s",
                ", ".join(unknown),
                ", ".join(AGENT_REGISTRY),
            )

    agents: list[Agent] = []
    for name, factory in AGENT_REGISTRY.items():
        if not settings.is_agent_enabled(name):
            logger.debug("Agent '%s' disabled", name)
            continue
        try:
            compute = factory(settings)
            publisher = publisher_factory(settings, name, console)
        except (ConfigurationError, ValueError) as e:
            logger.error("Agent '%s' not started: %s", name, truncate_message(e))
            continue

        agents.append(
            Agent(
                name=name,
                interval_seconds=settings.interval_for(name),
                compute=compute,
                publisher=publisher,
                kind=settings.activity_kind,
                group_ids=tuple(settings.guild_ids),
            )
        )
    return agents
