from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from web3 import Web3

from ..abi import load_contract_reader_abi
from ..adapters.quote_adapters.base import Web3Factory
from ..endpoints import make_web3, resolve_endpoint
from ..errors import ConfigurationError, QuoteError
from ..settings import Network, TetuStatusSettings
from ..units import DECIMAL_CONTEXT

logger = logging.getLogger(__name__)


def filter_vaults(vaults: Sequence[str], ignored_vaults: Iterable[str]) -> list[str]:
    """Drop every vault present in ``ignored_vaults`` (case-insensitive), keeping order."""
    ignored = {address.lower() for address in ignored_vaults}
    return [vault for vault in vaults if vault.lower() not in ignored]


async def _network_tvl(
    settings: TetuStatusSettings,
    network: Network,
    reader_address: str,
    ignored_vaults: Iterable[str],
    web3_factory: Web3Factory = make_web3,
) -> int:
    endpoint = resolve_endpoint(settings, network)
    w3 = web3_factory(endpoint)
    reader = w3.eth.contract(
        address=Web3.to_checksum_address(reader_address),
        abi=load_contract_reader_abi(),
    )

    try:
        vaults = await asyncio.to_thread(reader.functions.vaults().call)
    except Exception as e:
        raise QuoteError(f"{network.value} vaults() failed", e) from e

    tracked = filter_vaults(list(vaults), ignored_vaults)
    logger.debug(
        "%s: %d vaults, %d after exclusions", network.value, len(vaults), len(tracked)
    )

    try:
        tvl = await asyncio.to_thread(reader.functions.totalTvlUsd(tracked).call)
    except Exception as e:
        raise QuoteError(f"{network.value} totalTvlUsd() failed", e) from e

    try:
        return int(tvl)
    except (TypeError, ValueError) as e:
        raise QuoteError(f"{network.value} returned malformed TVL", e) from e


async def aggregate_tvl(
    settings: TetuStatusSettings,
    networks: Sequence[Network | str] | None = None,
    reader_addresses: Mapping[Network | str, str] | None = None,
    ignored_vaults: Iterable[str] | None = None,
    web3_factory: Web3Factory = make_web3,
) -> Decimal:
    """Sum the USD TVL of all tracked vaults across ``networks``.

    Args:
        settings: Application settings, used for endpoints and defaults.
        networks: Networks to visit, in order (default: ``settings.tvl_networks``).
            Plain network ids such as ``"polygon"`` are accepted.
        reader_addresses: ContractReader address per network, keyed by
            ``Network`` or its id.
        ignored_vaults: Vault addresses excluded from the total.
        web3_factory: Builds a web3 client for a resolved endpoint.

    Returns:
        Total TVL in 18-decimal base units.

    Raises:
        ConfigurationError: If a network is unknown or has no endpoint or
            reader address.
        QuoteError: If any network's reader call fails. A single failing
            network fails the whole aggregation.
    """
    networks = list(settings.tvl_networks if networks is None else networks)
    readers = settings.reader_addresses if reader_addresses is None else reader_addresses
    ignored = list(settings.ignored_vaults if ignored_vaults is None else ignored_vaults)

    total = Decimal(0)
    for item in networks:
        try:
            network = Network(item)
        except ValueError as e:
            raise ConfigurationError(f"Unknown network: {item}") from e

        reader_address = readers.get(network) or readers.get(network.value)
        if not reader_address:
            raise ConfigurationError(f"No contract reader configured for {network.value}")

        network_tvl = await _network_tvl(
            settings, network, reader_address, ignored, web3_factory
        )
        logger.debug("%s TVL: %d", network.value, network_tvl)
        total = DECIMAL_CONTEXT.add(total, Decimal(network_tvl))

    return total
