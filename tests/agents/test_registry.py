import logging
from decimal import Decimal

import pytest
from rich.console import Console

from tetu_status.adapters.quote_adapters import BatchSwapRequest, RouterSwapRequest
from tetu_status.agents import AGENT_REGISTRY, build_agents
from tetu_status.agents import registry
from tetu_status.constants import DEFAULT_AGENT_INTERVALS
from tetu_status.metrics import Metric
from tetu_status.settings import ActivityKind, Network, TetuStatusSettings

PAIR = "0x0000000000000000000000000000000000000abc"


@pytest.fixture
def console():
    return Console(record=True)


def _names(agents):
    return [agent.name for agent in agents]


def test_registry_covers_every_default_interval():
    assert set(AGENT_REGISTRY) == set(DEFAULT_AGENT_INTERVALS)


def test_unconfigured_tetuqi_pair_skips_only_that_agent(console, caplog):
    caplog.set_level(logging.ERROR, logger="tetu_status")

    agents = build_agents(TetuStatusSettings(), console)

    assert _names(agents) == [
        "tetu-price",
        "circulating-supply",
        "tvl",
        "vault-tvl",
        "tetubal-discount",
    ]
    assert "Agent 'tetuqi-discount' not started: quotes.tetuqi_pair must be configured" in (
        caplog.text
    )


def test_missing_agent_key_skips_only_that_agent(console, caplog):
    caplog.set_level(logging.ERROR, logger="tetu_status")
    settings = TetuStatusSettings(
        require_agent_keys=True,
        agent_keys={"tvl": "k1", "tetu-price": "k2"},
        quotes={"tetuqi_pair": PAIR},
    )

    agents = build_agents(settings, console)

    assert _names(agents) == ["tetu-price", "tvl"]
    assert "agent key for 'vault-tvl' must be configured" in caplog.text
    assert agents[0].publisher.key.get_secret_value() == "k2"


def test_enabled_agents_filter_and_unknown_names(console, caplog):
    caplog.set_level(logging.WARNING, logger="tetu_status")
    settings = TetuStatusSettings(enabled_agents=["tvl", "bogus"])

    agents = build_agents(settings, console)

    assert _names(agents) == ["tvl"]
    assert "Unknown agents ignored: bogus" in caplog.text


def test_agent_wiring_uses_settings(console):
    settings = TetuStatusSettings(
        agent_intervals={"tvl": 30},
        guild_ids=["111", "222"],
        activity_kind=ActivityKind.LISTENING,
        enabled_agents=["tvl", "tetu-price"],
    )

    by_name = {agent.name: agent for agent in build_agents(settings, console)}

    assert by_name["tvl"].interval_seconds == 30
    assert by_name["tetu-price"].interval_seconds == DEFAULT_AGENT_INTERVALS["tetu-price"]
    assert by_name["tvl"].group_ids == ("111", "222")
    assert by_name["tvl"].kind is ActivityKind.LISTENING


def test_custom_publisher_factory(console):
    created = []

    def factory(settings, name, console):
        publisher = registry.create_publisher(settings, name, console)
        created.append(name)
        return publisher

    build_agents(TetuStatusSettings(enabled_agents=["tvl"]), console, factory)

    assert created == ["tvl"]


@pytest.mark.asyncio
async def test_tetubal_discount_quotes_one_token(monkeypatch):
    seen = []

    async def fake_quote(endpoint, request):
        seen.append((endpoint, request))
        return str(95 * 10**16)

    monkeypatch.setattr(registry, "quote", fake_quote)
    settings = TetuStatusSettings(polygon_rpc="https://polygon.example.org")

    metric = await registry.tetubal_discount(settings)()

    assert metric == Metric(label="tetuBAL discount", value="5.0%")
    endpoint, request = seen[0]
    assert endpoint.network is Network.POLYGON
    assert isinstance(request, BatchSwapRequest)
    assert request.input_amount == 10**18


@pytest.mark.asyncio
async def test_tetuqi_discount_uses_router_request(monkeypatch):
    seen = []

    async def fake_quote(endpoint, request):
        seen.append(request)
        return str(9 * 10**17)

    monkeypatch.setattr(registry, "quote", fake_quote)
    settings = TetuStatusSettings(
        polygon_rpc="https://polygon.example.org", quotes={"tetuqi_pair": PAIR}
    )

    metric = await registry.tetuqi_discount(settings)()

    assert metric.value == "10.0%"
    assert isinstance(seen[0], RouterSwapRequest)
    assert seen[0].pair == PAIR


@pytest.mark.asyncio
async def test_discount_without_rpc_fails_at_cycle_time():
    compute = registry.tetubal_discount(TetuStatusSettings())

    with pytest.raises(registry.ConfigurationError, match="polygon_rpc"):
        await compute()


@pytest.mark.asyncio
async def test_vault_tvl_formats_aggregate(monkeypatch):
    async def fake_aggregate(settings):
        return Decimal(1_500_000 * 10**18)

    monkeypatch.setattr(registry, "aggregate_tvl", fake_aggregate)

    metric = await registry.vault_tvl(TetuStatusSettings())()

    assert metric == Metric(label="Vaults TVL", value="$1,500,000.00")
